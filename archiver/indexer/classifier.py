"""File classification - decides whether a file is indexed, archived or dropped."""

from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import NamedTuple

import yaml


class Outcome(Enum):
    """What happens to a visited file."""

    INDEX_AND_ARCHIVE = "index_and_archive"
    ARCHIVE_ONLY = "archive_only"
    DROP = "drop"


class Classification(NamedTuple):
    outcome: Outcome
    include_content: bool = False


@dataclass(frozen=True)
class ClassificationRules:
    """Name and extension sets driving classification.

    Extensions carry their leading dot. Forbidden and archive-only extensions
    are matched case-sensitively, text extensions case-insensitively.
    """

    forbidden_directories: frozenset[str] = frozenset(
        {".env", ".git", ".idea", ".settings", ".vscode", "target"}
    )
    forbidden_files: frozenset[str] = frozenset(
        {"package-lock.json", ".project", ".classpath", ".yemrc", ".sdkman", ".gitignore"}
    )
    forbidden_extensions: frozenset[str] = frozenset(
        {
            ".p12",
            ".pem",
            ".jks",
            ".map",
            ".jpg",
            ".jpeg",
            ".png",
            ".bmp",
            ".tiff",
            ".giff",
            ".exe",
            ".cache",
            ".svg",
            ".iml",
            ".ipr",
            ".iws",
        }
    )
    # Images and certificates: kept in archives, never indexed
    archive_only_extensions: frozenset[str] = frozenset(
        {".pem", ".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".giff", ".svg"}
    )
    text_extensions: frozenset[str] = frozenset(
        {
            ".txt",
            ".adoc",
            ".asciidoc",
            ".md",
            ".markdown",
            ".rst",
            ".java",
            ".cs",
            ".h",
            ".c",
            ".hpp",
            ".cpp",
            ".hxx",
            ".cxx",
            ".rb",
            ".csx",
            ".js",
            ".jsx",
            ".ts",
            ".html",
            ".scala",
            ".rs",
            ".py",
            ".properties",
            ".csproj",
            ".xml",
            ".xsd",
            ".xslt",
            ".json",
            ".yaml",
            ".yml",
            ".rc",
            ".sh",
            ".csv",
        }
    )
    text_prefixes: frozenset[str] = frozenset({"Dockerfile", "Makefile"})
    text_suffixes: frozenset[str] = frozenset({"rc"})

    def __post_init__(self) -> None:
        extra = self.archive_only_extensions - self.forbidden_extensions
        if extra:
            raise ValueError(
                f"Archive-only extensions must also be forbidden: {', '.join(sorted(extra))}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> "ClassificationRules":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown classification rules: {', '.join(sorted(unknown))}")
        for key, values in data.items():
            if values is not None and not isinstance(values, list):
                raise ValueError(f"Classification rule '{key}' must be a list")
        return cls(**{key: frozenset(values or []) for key, values in data.items()})

    @classmethod
    def from_yaml(cls, path: Path) -> "ClassificationRules":
        """Load rules from a YAML mapping; missing keys keep their defaults."""
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Rules file must contain a mapping: {path}")
        return cls.from_dict(data)


def extension_of(name: str) -> str:
    """Return the extension of a file name, dot included.

    A leading dot counts, so ``.gitignore`` is its own extension; a name
    without a dot or ending with one has none.
    """
    index = name.rfind(".")
    if index < 0 or index == len(name) - 1:
        return ""
    return name[index:]


class RecordClassifier:
    """Maps file names to a classification outcome."""

    def __init__(self, rules: ClassificationRules | None = None) -> None:
        self.rules = rules or ClassificationRules()

    def is_forbidden_directory(self, name: str) -> bool:
        return name in self.rules.forbidden_directories

    def classify(self, name: str, extension: str) -> Classification:
        rules = self.rules
        if name in rules.forbidden_files:
            return Classification(Outcome.DROP)
        if extension in rules.archive_only_extensions:
            return Classification(Outcome.ARCHIVE_ONLY)
        if extension in rules.forbidden_extensions:
            return Classification(Outcome.DROP)
        return Classification(Outcome.INDEX_AND_ARCHIVE, self._is_text(name, extension))

    def classify_path(self, path: Path) -> Classification:
        return self.classify(path.name, extension_of(path.name))

    def _is_text(self, name: str, extension: str) -> bool:
        rules = self.rules
        return (
            extension.lower() in rules.text_extensions
            or any(name.startswith(prefix) for prefix in rules.text_prefixes)
            or any(name.endswith(suffix) for suffix in rules.text_suffixes)
        )
