"""Tests for the style table."""

import pytest

from citeshift.config import DEFAULT_STYLES, EditorConfig
from citeshift.exceptions import InvalidStyleError
from citeshift.services.style_table import StyleTable, normalize_style_token, style_marker


class TestResolveCommand:
    """Tests for resolve_command."""

    def test_registered_token(self):
        table = StyleTable()

        assert table.resolve_command("t") == "\\citet"
        assert table.resolve_command("a/f") == "\\citeauthor*"

    def test_absent_token_uses_default(self):
        """Test that no style resolves to the default command."""
        table = StyleTable()

        assert table.resolve_command(None) == "\\citep"
        assert table.resolve_command("") == "\\citep"

    def test_unregistered_token_uses_default(self):
        table = StyleTable(default_command="\\cite")

        assert table.resolve_command("nonsense") == "\\cite"

    @pytest.mark.parametrize("token", [None, "", "t", "p", "zzz", "t/bcf", "?"])
    def test_total(self, token):
        """Test that every token resolves to a non-empty command."""
        assert StyleTable().resolve_command(token)

    def test_from_config(self):
        """Test building the table from an editor config."""
        config = EditorConfig(styles={"x": "\\citex"}, default_command="\\cite")

        table = StyleTable.from_config(config)

        assert table.resolve_command("x") == "\\citex"
        assert table.resolve_command("t") == "\\cite"
        assert "x" in table
        assert "t" not in table


class TestChoices:
    """Tests for listing style choices."""

    def test_default_first(self):
        choices = StyleTable().choices()

        assert choices[0].token is None
        assert choices[0].command == "\\citep"
        assert choices[0].current
        assert len(choices) == len(DEFAULT_STYLES) + 1

    def test_current_flagged(self):
        choices = StyleTable().choices("t")

        current = [c for c in choices if c.current]
        assert len(current) == 1
        assert current[0].token == "t"


class TestStyleMarker:
    """Tests for the serialized style marker."""

    def test_absent(self):
        assert style_marker(None) == ""
        assert style_marker("") == ""

    def test_present(self):
        assert style_marker("t") == "/t"
        assert style_marker("t/f") == "/t/f"


class TestNormalizeStyleToken:
    """Tests for validating style tokens before writing them."""

    def test_blank_is_absent(self):
        assert normalize_style_token(None) is None
        assert normalize_style_token("  ") is None

    def test_strips_whitespace_and_slash(self):
        assert normalize_style_token(" t ") == "t"
        assert normalize_style_token("/t/f") == "t/f"

    @pytest.mark.parametrize("token", ["a b", "t:x", "t;", "@t", "t]"])
    def test_rejects_syntax_characters(self, token):
        with pytest.raises(InvalidStyleError):
            normalize_style_token(token)
