"""Unit tests for theme module.

Tests for theme loading, validation, and Rich theme generation.
"""

# pyright: reportPrivateUsage=false

from pathlib import Path

import pytest
from chainctl.core.theme import (
    ThemeColors,
    _load_toml_colors,
    get_rich_theme,
    get_user_theme_path,
    load_theme,
)
from rich.theme import Theme


class TestThemeColors:
    """Tests for ThemeColors Pydantic model."""

    def test_default_values(self) -> None:
        """ThemeColors has sensible defaults."""
        colors = ThemeColors()
        assert colors.text == "#ffffff"
        assert colors.header == "#69B9A1"
        assert colors.fork == "#d44ebc"

    def test_valid_hex_colors(self) -> None:
        """ThemeColors accepts #RGB and #RRGGBB."""
        colors = ThemeColors(text="#AABBCC", muted="#abc")
        assert colors.text == "#AABBCC"
        assert colors.muted == "#abc"

    def test_invalid_hex_no_hash(self) -> None:
        """ThemeColors rejects colors without # prefix."""
        with pytest.raises(ValueError, match="must start with '#'"):
            ThemeColors(text="ffffff")

    def test_invalid_hex_wrong_length(self) -> None:
        """ThemeColors rejects colors with wrong length."""
        with pytest.raises(ValueError, match="must be #RGB or #RRGGBB"):
            ThemeColors(branch="#ff")

    def test_invalid_hex_chars(self) -> None:
        """ThemeColors rejects invalid hex characters."""
        with pytest.raises(ValueError, match="invalid hex color"):
            ThemeColors(tag="#gggggg")

    def test_extra_fields_forbidden(self) -> None:
        """ThemeColors rejects unknown fields."""
        with pytest.raises(ValueError):
            ThemeColors(unknown_field="#ffffff")  # type: ignore[call-arg]


class TestLoadTomlColors:
    """Tests for _load_toml_colors internal function."""

    def test_loads_valid_toml(self, tmp_path: Path) -> None:
        """Loads colors from valid TOML file."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\ntext = "#000000"\nfork = "#aabbcc"\n')

        assert _load_toml_colors(theme_file) == {"text": "#000000", "fork": "#aabbcc"}

    def test_returns_none_for_missing_file(self, tmp_path: Path) -> None:
        """Returns None when file doesn't exist."""
        assert _load_toml_colors(tmp_path / "nonexistent.toml") is None

    def test_returns_none_for_invalid_toml(self, tmp_path: Path) -> None:
        """Returns None for malformed TOML."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text("not valid [ toml syntax")

        assert _load_toml_colors(theme_file) is None

    def test_returns_empty_dict_for_missing_colors_section(self, tmp_path: Path) -> None:
        """Returns empty dict when colors section is missing."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[other]\nkey = "value"\n')

        assert _load_toml_colors(theme_file) == {}


class TestLoadTheme:
    """Tests for load_theme function."""

    def test_defaults_without_user_file(self, tmp_path: Path) -> None:
        """Without an override file the defaults are used."""
        assert load_theme(tmp_path / "missing.toml") == ThemeColors()

    def test_user_overrides(self, tmp_path: Path) -> None:
        """User values override defaults, the rest stay."""
        user_theme = tmp_path / "theme.toml"
        user_theme.write_text('[colors]\nbranch = "#ff0000"\n')

        colors = load_theme(user_theme)

        assert colors.branch == "#ff0000"
        assert colors.text == "#ffffff"

    def test_invalid_values_fall_back(self, tmp_path: Path) -> None:
        """Invalid colors fall back to the defaults."""
        user_theme = tmp_path / "theme.toml"
        user_theme.write_text('[colors]\nbranch = "red"\n')

        assert load_theme(user_theme) == ThemeColors()

    def test_user_theme_path(self) -> None:
        assert get_user_theme_path().name == "theme.toml"


class TestGetRichTheme:
    """Tests for get_rich_theme function."""

    def test_returns_rich_theme(self) -> None:
        """Returns a Rich Theme instance."""
        assert isinstance(get_rich_theme(ThemeColors()), Theme)

    def test_includes_chain_styles(self) -> None:
        """Theme includes the styles used by the chain table."""
        theme = get_rich_theme(ThemeColors())

        for style in ("project_selected", "project_inactive", "fork", "branch", "tag"):
            assert style in theme.styles
        assert "bold_header" in theme.styles
        assert "dim" in theme.styles
