"""Node types for parsed ICU MessageFormat strings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

PLURAL = "plural"
SELECTORDINAL = "selectordinal"
SELECT = "select"

# CLDR plural categories in canonical order
PLURAL_CATEGORIES = ("zero", "one", "two", "few", "many", "other")


@dataclass(frozen=True)
class Location:
    """Half-open span of character offsets into the parsed string."""

    start: int
    end: int


@dataclass(frozen=True)
class Literal:
    text: str
    location: Optional[Location] = None


@dataclass(frozen=True)
class Argument:
    name: str
    location: Optional[Location] = None


@dataclass(frozen=True)
class NumberFormat:
    name: str
    style: Optional[str] = None
    location: Optional[Location] = None


@dataclass(frozen=True)
class DateFormat:
    name: str
    style: Optional[str] = None
    location: Optional[Location] = None


@dataclass(frozen=True)
class TimeFormat:
    name: str
    style: Optional[str] = None
    location: Optional[Location] = None


@dataclass(frozen=True)
class Pound:
    location: Optional[Location] = None


@dataclass(frozen=True)
class Tag:
    name: str
    children: List["Node"] = field(default_factory=list)
    location: Optional[Location] = None


@dataclass(frozen=True)
class Option:
    """Content of one category of a select; `location` covers the braces."""

    content: List["Node"] = field(default_factory=list)
    location: Optional[Location] = None
    label_location: Optional[Location] = None


@dataclass(frozen=True)
class Select:
    """A plural, selectordinal or select construct keyed on `pivot`."""

    pivot: str
    options: Dict[str, Option]
    kind: str = PLURAL
    offset: int = 0
    location: Optional[Location] = None

    @property
    def is_cardinal(self) -> bool:
        return self.kind == PLURAL

    @property
    def categories(self) -> List[str]:
        return list(self.options)


Node = Union[Literal, Argument, NumberFormat, DateFormat, TimeFormat, Pound, Tag, Select]


def category_sort_key(category: str):
    """Order CLDR categories first, then `=N` literals numerically, then free labels."""
    if category in PLURAL_CATEGORIES:
        return (0, PLURAL_CATEGORIES.index(category), "")
    if category.startswith("="):
        try:
            return (1, int(category[1:]), "")
        except ValueError:
            pass
    return (2, 0, category)


__all__ = [
    "Argument",
    "DateFormat",
    "Literal",
    "Location",
    "Node",
    "NumberFormat",
    "Option",
    "PLURAL",
    "PLURAL_CATEGORIES",
    "Pound",
    "SELECT",
    "SELECTORDINAL",
    "Select",
    "Tag",
    "TimeFormat",
    "category_sort_key",
]
