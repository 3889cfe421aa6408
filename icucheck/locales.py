"""Locale parsing and the plural categories each language requires."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple

from icucheck.messages import PLURAL, PLURAL_CATEGORIES

DEFAULT_CATEGORIES: Tuple[str, ...] = ("one", "other")
OTHER_ONLY: Tuple[str, ...] = ("other",)

# Languages whose cardinal plurals need something other than "one" and "other".
# Anything not listed falls back to DEFAULT_CATEGORIES.
CARDINAL_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "ja": OTHER_ONLY,
    "zh": OTHER_ONLY,
    "ko": OTHER_ONLY,
    "th": OTHER_ONLY,
    "lv": ("zero", "one", "other"),
    "ga": ("one", "two", "other"),
    "ro": ("one", "few", "other"),
    "lt": ("one", "few", "other"),
    "ru": ("one", "few", "other"),
    "uk": ("one", "few", "other"),
    "be": ("one", "few", "other"),
    "sr": ("one", "few", "other"),
    "hr": ("one", "few", "other"),
    "cs": ("one", "few", "other"),
    "sk": ("one", "few", "other"),
    "pl": ("one", "few", "other"),
    "sl": ("one", "two", "few", "other"),
    "he": ("one", "two", "other"),
    "mt": ("one", "few", "many", "other"),
    "cy": ("zero", "one", "two", "few", "many", "other"),
    "ar": ("zero", "one", "two", "few", "many", "other"),
}

TRADITIONAL_CHINESE_REGIONS = {"TW", "HK", "MO"}

_SUBTAG_SPLIT = re.compile(r"[-_]")


@dataclass(frozen=True)
class LocaleSpec:
    """The parts of a BCP-47 tag needed for plural and script decisions."""

    language: str
    script: Optional[str] = None
    region: Optional[str] = None

    @classmethod
    def parse(cls, spec: Optional[str]) -> "LocaleSpec":
        if not spec:
            return cls(language="")
        parts = [part for part in _SUBTAG_SPLIT.split(spec.strip()) if part]
        if not parts:
            return cls(language="")
        language = parts[0].lower()
        script = None
        region = None
        for part in parts[1:]:
            if script is None and region is None and len(part) == 4 and part.isalpha():
                script = part.title()
            elif region is None and (
                (len(part) == 2 and part.isalpha()) or (len(part) == 3 and part.isdigit())
            ):
                region = part.upper()
        return cls(language=language, script=script, region=region)

    @property
    def effective_script(self) -> Optional[str]:
        if self.script:
            return self.script
        if self.language == "zh":
            return "Hant" if self.region in TRADITIONAL_CHINESE_REGIONS else "Hans"
        return None

    @property
    def lang_spec(self) -> str:
        """Language plus script, e.g. `zh-Hant` or `de`."""
        script = self.effective_script
        return f"{self.language}-{script}" if script else self.language


def same_language_and_script(first: Optional[str], second: Optional[str]) -> bool:
    return LocaleSpec.parse(first).lang_spec == LocaleSpec.parse(second).lang_spec


class CategoryResolver:
    """Maps (locale, construct kind) to the categories a message must carry.

    Cardinal plurals use the per-language table; select and selectordinal
    constructs only ever require "other". Lookups are memoized per instance.
    """

    def __init__(self, table: Optional[Mapping[str, Iterable[str]]] = None) -> None:
        source = CARDINAL_CATEGORIES if table is None else table
        self._table: Dict[str, Tuple[str, ...]] = {
            lang.lower(): _ordered(categories) for lang, categories in source.items()
        }
        self._memo: Dict[Tuple[str, str], Tuple[str, ...]] = {}

    def required(self, locale: Optional[str], kind: str = PLURAL) -> Tuple[str, ...]:
        language = LocaleSpec.parse(locale).language
        memo_key = (language, kind)
        cached = self._memo.get(memo_key)
        if cached is not None:
            return cached
        if kind == PLURAL:
            categories = self._table.get(language, DEFAULT_CATEGORIES)
        else:
            categories = OTHER_ONLY
        self._memo[memo_key] = categories
        return categories


def _ordered(categories: Iterable[str]) -> Tuple[str, ...]:
    wanted = set(categories)
    unknown = wanted - set(PLURAL_CATEGORIES)
    if unknown:
        raise ValueError(f"Unknown plural categories: {', '.join(sorted(unknown))}")
    wanted.add("other")
    return tuple(category for category in PLURAL_CATEGORIES if category in wanted)


__all__ = [
    "CARDINAL_CATEGORIES",
    "CategoryResolver",
    "DEFAULT_CATEGORIES",
    "LocaleSpec",
    "same_language_and_script",
]
