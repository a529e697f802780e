"""Logging setup shared by both transports."""

from .logging import JSONFormatter, configure_logging

__all__ = ["JSONFormatter", "configure_logging"]
