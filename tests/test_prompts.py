"""Tests for the prompt template registry."""

import pytest

from unichat_mcp import prompts
from unichat_mcp.errors import MissingArgumentError, UnknownPromptError
from unichat_mcp.prompts import PromptKind

PROMPT_NAMES = ["code_review", "document_code", "explain_code", "code_rework"]


class TestDefinitions:
    """Test advertised prompt definitions."""

    def test_order(self) -> None:
        """Test definitions keep registration order."""
        assert [d.name for d in prompts.list_definitions()] == PROMPT_NAMES

    def test_code_required_everywhere(self) -> None:
        """Test every prompt declares a required code argument."""
        for definition in prompts.list_definitions():
            code_args = [a for a in definition.arguments if a.name == "code"]
            assert len(code_args) == 1
            assert code_args[0].required is True

    def test_rework_declares_optional_changes(self) -> None:
        """Test only code_rework advertises the changes argument."""
        for definition in prompts.list_definitions():
            names = {a.name: a.required for a in definition.arguments}
            if definition.name == "code_rework":
                assert names == {"changes": False, "code": True}
            else:
                assert "changes" not in names

    def test_lookup(self) -> None:
        """Test names resolve to their enum member."""
        assert PromptKind.lookup("explain_code") is PromptKind.EXPLAIN_CODE

    def test_templates_mention_code_once(self) -> None:
        """Test each template has a single code placeholder."""
        for kind in PromptKind:
            assert kind.template.count("{code}") == 1
            assert kind.template.count("{changes}") <= 1


class TestRender:
    """Test placeholder substitution."""

    def test_substitutes_code(self) -> None:
        """Test the code argument lands in the rendered text."""
        text = prompts.render("code_review", {"code": "def f(): pass"})

        assert "def f(): pass" in text
        assert "{code}" not in text
        assert text.startswith("You are a senior software engineer")

    def test_rework_without_changes(self) -> None:
        """Test a missing changes argument renders as empty text."""
        text = prompts.render("code_rework", {"code": "x=1"})

        assert "{changes}" not in text
        assert "Do: \n" in text
        assert "x=1" in text

    def test_rework_with_changes(self) -> None:
        """Test the changes argument is substituted."""
        text = prompts.render("code_rework", {"code": "x=1", "changes": "use a constant"})

        assert "Do: use a constant" in text

    def test_first_occurrence_only(self) -> None:
        """Test a placeholder inside the code argument is left alone."""
        text = prompts.render("explain_code", {"code": "print('{code}')"})

        assert "print('{code}')" in text

    @pytest.mark.parametrize("name", PROMPT_NAMES)
    def test_deterministic(self, name: str) -> None:
        """Test repeated renders produce identical text."""
        args = {"code": "x = 1", "changes": "rename x"}

        assert prompts.render(name, args) == prompts.render(name, args)

    @pytest.mark.parametrize("name", PROMPT_NAMES)
    @pytest.mark.parametrize("args", [None, {}, {"changes": "something"}, {"code": ""}])
    def test_missing_code(self, name: str, args: dict | None) -> None:
        """Test every prompt fails without code, whatever else is supplied."""
        with pytest.raises(MissingArgumentError) as exc_info:
            prompts.render(name, args)

        assert exc_info.value.argument == "code"
        assert str(exc_info.value) == "Missing required argument: code"

    @pytest.mark.parametrize("args", [None, {}, {"code": "x"}])
    def test_unknown_prompt(self, args: dict | None) -> None:
        """Test unregistered names fail regardless of arguments."""
        with pytest.raises(UnknownPromptError, match="Unknown prompt"):
            prompts.render("refactor_everything", args)
