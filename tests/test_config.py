"""Tests for config module."""

from pathlib import Path

import pytest

from archiver.config import Settings, get_settings
from archiver.indexer.classifier import ClassificationRules


class TestSettings:
    """Tests for Settings class."""

    def test_defaults(self, monkeypatch):
        """Test default settings."""
        monkeypatch.delenv("ARCHIVER_PROMOTED_FOLDERS", raising=False)
        monkeypatch.delenv("ARCHIVER_FLUSH_EVERY", raising=False)

        settings = Settings(_env_file=None)
        assert settings.promoted == frozenset({"0_dev"})
        assert settings.flush_every == 100
        assert settings.rules_file is None
        assert settings.rules() == ClassificationRules()

    def test_promoted_multiple(self, monkeypatch):
        """Test parsing multiple promoted folders."""
        monkeypatch.setenv("ARCHIVER_PROMOTED_FOLDERS", "0_dev, vendor ,, third_party")

        settings = Settings(_env_file=None)
        assert settings.promoted == frozenset({"0_dev", "vendor", "third_party"})

    def test_flush_every_from_env(self, monkeypatch):
        """Test flush interval from the environment."""
        monkeypatch.setenv("ARCHIVER_FLUSH_EVERY", "25")

        assert Settings(_env_file=None).flush_every == 25

    def test_flush_every_must_be_positive(self, monkeypatch):
        """Test flush interval validation."""
        monkeypatch.setenv("ARCHIVER_FLUSH_EVERY", "0")

        with pytest.raises(ValueError, match="must be positive"):
            Settings(_env_file=None)

    def test_rules_file(self, tmp_path: Path):
        """Test loading rules from a file."""
        rules_file = tmp_path / "rules.yaml"
        rules_file.write_text("text_extensions: [.log]\n")

        settings = Settings(_env_file=None, rules_file=rules_file)
        assert settings.rules().text_extensions == frozenset({".log"})

    def test_rules_file_not_exists(self, tmp_path: Path):
        """Test rules file validation when path doesn't exist."""
        with pytest.raises(ValueError, match="does not exist"):
            Settings(_env_file=None, rules_file=tmp_path / "missing.yaml")

    def test_get_settings_ignores_unset_overrides(self, monkeypatch):
        """Test unset overrides keep defaults."""
        monkeypatch.setenv("ARCHIVER_FLUSH_EVERY", "7")

        settings = get_settings(flush_every=None)
        assert settings.flush_every == 7
