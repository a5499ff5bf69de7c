"""Unit tests for config.py"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from wpjekyll.config import Settings, load_config


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    """Run from an empty directory with no WPJEKYLL_* variables set."""
    monkeypatch.chdir(tmp_path)
    for name in Settings.model_fields:
        monkeypatch.delenv(f"WPJEKYLL_{name.upper()}", raising=False)


def test_load_config_defaults():
    """Defaults apply when no config.yaml, env var, or CLI override exists."""
    settings = load_config()
    assert settings.source == "wordpress.xml"
    assert settings.no_fetch_images is False
    assert settings.fetch_images is True
    assert settings.assets_folder == "assets"
    assert settings.include_meta is False
    assert settings.strip_hero_image is True
    assert settings.revert_failed_assets is False
    assert settings.fetch_timeout == 30.0


def test_load_config_uses_env_source(monkeypatch):
    """WPJEKYLL_SOURCE env var is picked up by load_config."""
    monkeypatch.setenv("WPJEKYLL_SOURCE", "env.xml")
    assert load_config().source == "env.xml"


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """WPJEKYLL_SOURCE takes precedence over config.yaml source."""
    (tmp_path / "config.yaml").write_text("source: project.xml\n")
    monkeypatch.setenv("WPJEKYLL_SOURCE", "override.xml")
    assert load_config().source == "override.xml"


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var; None overrides are ignored."""
    monkeypatch.setenv("WPJEKYLL_SOURCE", "env.xml")
    settings = load_config(overrides={"source": "cli.xml", "assets_folder": None})
    assert settings.source == "cli.xml"
    assert settings.assets_folder == "assets"


def test_load_config_yaml_values(tmp_path):
    """config.yaml values are applied."""
    (tmp_path / "config.yaml").write_text("include_meta: true\nassets_folder: img\n")
    settings = load_config()
    assert settings.include_meta is True
    assert settings.assets_dir == Path(".") / "img"


def test_load_config_env_bool_coerced(monkeypatch):
    """WPJEKYLL_NO_FETCH_IMAGES is coerced to bool."""
    monkeypatch.setenv("WPJEKYLL_NO_FETCH_IMAGES", "true")
    settings = load_config()
    assert settings.no_fetch_images is True
    assert settings.fetch_images is False


def test_load_config_env_float_coerced(monkeypatch):
    """WPJEKYLL_FETCH_TIMEOUT is coerced to float."""
    monkeypatch.setenv("WPJEKYLL_FETCH_TIMEOUT", "2.5")
    assert load_config().fetch_timeout == 2.5


def test_load_config_invalid_yaml(tmp_path):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_non_mapping_yaml(tmp_path):
    """A config.yaml that is not a mapping is rejected."""
    (tmp_path / "config.yaml").write_text("- a\n- b\n")
    with pytest.raises(ValueError, match="expected a mapping"):
        load_config()


def test_load_config_rejects_bad_timeout():
    """fetch_timeout must be positive."""
    with pytest.raises(ValidationError):
        load_config(overrides={"fetch_timeout": 0})
