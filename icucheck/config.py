"""Configuration helpers for the ICU message checker."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Tuple

import yaml

try:
    from dotenv import load_dotenv
except ImportError as exc:  # pragma: no cover - import guard
    raise RuntimeError(
        "python-dotenv is required. Install dependencies via 'pip install -e .'."
    ) from exc

from icucheck.locales import CARDINAL_CATEGORIES
from icucheck.results import ALL_RULES

DEFAULT_SOURCE_LOCALE = "en-US"


load_dotenv()


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Environment variable {name} must be a boolean, got: {raw}")


def _get_list(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if not raw:
        return ()
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _get_path(name: str) -> Optional[Path]:
    raw = os.getenv(name)
    if not raw:
        return None
    return Path(raw)


@dataclass(frozen=True)
class LintSettings:
    """Runtime knobs for the checker and its command-line entry point."""

    source_locale: str = DEFAULT_SOURCE_LOCALE
    target_locale: Optional[str] = None
    categories_path: Optional[Path] = None
    disabled_rules: FrozenSet[str] = field(default_factory=frozenset)
    require_other: bool = True

    def __post_init__(self) -> None:
        unknown = set(self.disabled_rules) - set(ALL_RULES)
        if unknown:
            raise ValueError(f"Unknown rule name(s): {', '.join(sorted(unknown))}")

    @property
    def enabled_rules(self) -> FrozenSet[str]:
        return frozenset(rule for rule in ALL_RULES if rule not in self.disabled_rules)

    @classmethod
    def from_env(cls) -> "LintSettings":
        return cls(
            source_locale=os.getenv("ICU_LINT_SOURCE_LOCALE", DEFAULT_SOURCE_LOCALE),
            target_locale=os.getenv("ICU_LINT_TARGET_LOCALE") or None,
            categories_path=_get_path("ICU_LINT_CATEGORIES_PATH"),
            disabled_rules=frozenset(_get_list("ICU_LINT_DISABLED_RULES")),
            require_other=_get_bool("ICU_LINT_REQUIRE_OTHER", True),
        )


def load_category_table(path: Optional[Path] = None) -> Dict[str, Tuple[str, ...]]:
    """Load per-language cardinal categories, merged over the built-in table.

    The YAML document must look like `categories: {lang: [one, few, other]}`.
    Without a path, or when the file is missing, the built-in table is
    returned unchanged.
    """
    table = dict(CARDINAL_CATEGORIES)
    if path is None or not path.exists():
        return table

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise RuntimeError(f"Failed to load plural category configuration: {e}") from e
    if not isinstance(data, dict) or not isinstance(data.get("categories"), dict):
        raise ValueError(f"{path} must contain a 'categories' mapping")
    for language, categories in data["categories"].items():
        if not isinstance(categories, list) or not all(isinstance(c, str) for c in categories):
            raise ValueError(f"Categories for '{language}' must be a list of strings")
        table[str(language).lower()] = tuple(categories)
    return table


__all__ = ["LintSettings", "load_category_table"]
