"""Configuration management using pydantic-settings."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from archiver.indexer.classifier import ClassificationRules


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ARCHIVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Folders split out as their own partition wherever they are nested.
    # Stored as comma-separated string in .env
    promoted_folders: str = "0_dev"

    # Non-durable index flush every N submitted records
    flush_every: int = 100

    # Optional YAML file overriding the classification rules
    rules_file: Path | None = None

    @property
    def promoted(self) -> frozenset[str]:
        """Parse promoted folder names as a set."""
        return frozenset(
            name.strip() for name in self.promoted_folders.split(",") if name.strip()
        )

    def rules(self) -> ClassificationRules:
        """Classification rules, from the rules file when one is configured."""
        if self.rules_file is None:
            return ClassificationRules()
        return ClassificationRules.from_yaml(self.rules_file)

    @field_validator("flush_every")
    @classmethod
    def validate_flush_every(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"flush_every must be positive: {v}")
        return v

    @field_validator("rules_file")
    @classmethod
    def validate_rules_file(cls, v: Path | None) -> Path | None:
        """Ensure the rules file exists."""
        if v is None:
            return v
        if not v.is_file():
            raise ValueError(f"Rules file does not exist: {v}")
        return v.resolve()


def get_settings(**overrides) -> Settings:
    """Load settings from environment, with explicit overrides."""
    return Settings(**{k: v for k, v in overrides.items() if v is not None})
