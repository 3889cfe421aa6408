"""Concrete resources and the string pairs the checks operate on."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from icucheck.interfaces import Resource

STRING = "string"
ARRAY = "array"
PLURAL = "plural"


@dataclass(frozen=True)
class StringPair:
    """A single source string and its translation, with resource metadata."""

    key: str
    source: str
    target: Optional[str]
    source_locale: str
    target_locale: Optional[str]
    comment: Optional[str] = None
    path: str = ""
    line_number: Optional[int] = None


@dataclass
class _BaseResource:
    key: str
    source_locale: str = "en-US"
    target_locale: Optional[str] = None
    comment: Optional[str] = None
    path: str = ""
    line_number: Optional[int] = None

    def get_key(self) -> str:
        return self.key

    def get_comment(self) -> Optional[str]:
        return self.comment

    def get_path(self) -> str:
        return self.path

    def get_source_locale(self) -> Optional[str]:
        return self.source_locale

    def get_target_locale(self) -> Optional[str]:
        return self.target_locale


@dataclass
class ResourceString(_BaseResource):
    source: Optional[str] = None
    target: Optional[str] = None

    @property
    def type(self) -> str:
        return STRING

    def get_source(self) -> Optional[str]:
        return self.source

    def get_target(self) -> Optional[str]:
        return self.target


@dataclass
class ResourceArray(_BaseResource):
    source: List[str] = field(default_factory=list)
    target: Optional[List[str]] = None

    @property
    def type(self) -> str:
        return ARRAY

    def get_source(self) -> List[str]:
        return self.source

    def get_target(self) -> Optional[List[str]]:
        return self.target


@dataclass
class ResourcePlural(_BaseResource):
    source: Dict[str, str] = field(default_factory=dict)
    target: Optional[Dict[str, str]] = None

    @property
    def type(self) -> str:
        return PLURAL

    def get_source(self) -> Dict[str, str]:
        return self.source

    def get_target(self) -> Optional[Dict[str, str]]:
        return self.target


def iter_string_pairs(
    resource: Resource, default_source_locale: str = "en-US"
) -> Iterator[StringPair]:
    """Yield one `StringPair` per leaf string of a resource.

    Arrays pair up by index. Plurals pair up over every category found in
    either side, using the source "other" string where the source lacks the
    category. Leaves without a source string are skipped.
    """
    source = resource.get_source()
    target = resource.get_target()
    kind = resource.type
    if kind == STRING:
        leaves = [(source, target)]
    elif kind == ARRAY:
        target_items = target or []
        leaves = [
            (item, target_items[index] if index < len(target_items) else None)
            for index, item in enumerate(source or [])
        ]
    elif kind == PLURAL:
        source_map = source or {}
        target_map = target or {}
        categories = list(dict.fromkeys([*source_map, *target_map]))
        leaves = [
            (source_map.get(category, source_map.get("other")), target_map.get(category))
            for category in categories
        ]
    else:
        raise ValueError(f"Unsupported resource type: {kind}")

    line_number = getattr(resource, "line_number", None)
    for source_text, target_text in leaves:
        if not isinstance(source_text, str):
            continue
        yield StringPair(
            key=resource.get_key(),
            source=source_text,
            target=target_text if isinstance(target_text, str) else None,
            source_locale=resource.get_source_locale() or default_source_locale,
            target_locale=resource.get_target_locale(),
            comment=resource.get_comment(),
            path=resource.get_path(),
            line_number=line_number,
        )


__all__ = [
    "ResourceArray",
    "ResourcePlural",
    "ResourceString",
    "StringPair",
    "iter_string_pairs",
]
