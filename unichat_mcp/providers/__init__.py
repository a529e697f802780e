"""Chat model catalog and backend adapter."""
