# tests/test_utils.py
"""Unit tests for utility functions in the `edim.utils` module."""

from pathlib import Path

from edim.utils import utils


def test_deep_merge() -> None:
    """Verify that `deep_merge` correctly merges nested dictionaries.

    This test ensures:
    - Existing values are preserved if not overridden.
    - Nested dictionaries are merged recursively.
    - Conflicting keys are overridden by values from the second dictionary.
    """
    base = {"a": 1, "b": {"x": 10, "y": 20}}
    override = {"b": {"y": 99, "z": 100}, "c": 3}
    result = utils.deep_merge(base, override)
    expected = {"a": 1, "b": {"x": 10, "y": 99, "z": 100}, "c": 3}
    assert result == expected
    assert base == {"a": 1, "b": {"x": 10, "y": 20}}


def test_hex_to_xterm_valid_color() -> None:
    """White maps to 231, black to 16, pure cyan to cube index 51."""
    assert utils.hex_to_xterm("#ffffff") == 231
    assert utils.hex_to_xterm("000000") == 16
    assert utils.hex_to_xterm("#00FFFF") == 51


def test_hex_to_xterm_invalid_color() -> None:
    """Verify that `hex_to_xterm` falls back to 255 for invalid hex strings."""
    assert utils.hex_to_xterm("#zzz") == 255
    assert utils.hex_to_xterm("12") == 255
    assert utils.hex_to_xterm("#gg0000") == 255


def test_ensure_user_config_creates_templates(tmp_path: Path) -> None:
    config_dir = tmp_path / "edim"
    utils.ensure_user_config_exists(config_dir)
    assert (config_dir / "config.toml").is_file()
    assert "EDIM_KEYTRACE=0" in (config_dir / ".env").read_text(encoding="utf-8")


def test_ensure_user_config_keeps_existing_file(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text("[editor]\ntab_size = 2\n", encoding="utf-8")
    utils.ensure_user_config_exists(tmp_path)
    assert (tmp_path / "config.toml").read_text(encoding="utf-8") == "[editor]\ntab_size = 2\n"


def test_load_config_defaults(tmp_path: Path) -> None:
    config = utils.load_config(tmp_path)
    assert config["editor"] == {"tab_size": 4, "status_timeout": 50}
    assert config["logging"]["log_to_console"] is False
    assert config["keybindings"]["save_file"] == "ctrl+s"


def test_load_config_merges_user_values(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text(
        '[editor]\ntab_size = 8\n\n[colors]\nkeyword = "#FF0000"\n', encoding="utf-8"
    )
    config = utils.load_config(tmp_path)
    assert config["editor"]["tab_size"] == 8
    assert config["editor"]["status_timeout"] == 50
    assert config["colors"]["keyword"] == "#FF0000"
    assert config["colors"]["comment"] == "#FFFF00"


def test_load_config_corrupt_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text("[editor\ntab_size = = 3\n", encoding="utf-8")
    config = utils.load_config(tmp_path)
    assert config["editor"]["tab_size"] == 4


def test_default_config_is_not_mutated(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text("[editor]\ntab_size = 2\n", encoding="utf-8")
    utils.load_config(tmp_path)
    assert utils.DEFAULT_CONFIG["editor"]["tab_size"] == 4
