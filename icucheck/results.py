"""Result records produced by the checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

ERROR = "error"
WARNING = "warning"

# rule names
SOURCE_SYNTAX_RULE = "resource-source-icu-plural-syntax"
SOURCE_CATEGORIES_RULE = "resource-source-icu-plural-categories"
SOURCE_PARAMS_RULE = "resource-source-icu-plural-params"
UNEXPLAINED_PARAMS_RULE = "source-icu-unexplained-params"
PLURALS_RULE = "resource-icu-plurals"
PLURALS_TRANSLATED_RULE = "resource-icu-plurals-translated"

ALL_RULES = (
    SOURCE_SYNTAX_RULE,
    SOURCE_CATEGORIES_RULE,
    SOURCE_PARAMS_RULE,
    UNEXPLAINED_PARAMS_RULE,
    PLURALS_RULE,
    PLURALS_TRANSLATED_RULE,
)

# issue kinds
PARSE_ERROR = "parse-error"
MISSING_CATEGORY = "missing-category"
EXTRA_CATEGORY = "extra-category"
PARAM_PARITY = "param-parity"
UNEXPLAINED_PARAM = "unexplained-param"
MISTRANSLATED_PIVOT = "mistranslated-pivot"
SAME_AS_SOURCE = "same-as-source"


@dataclass(frozen=True)
class Result:
    """One finding about one string of one resource."""

    severity: str
    description: str
    rule: str
    kind: str
    id: str
    path_name: str
    highlight: str
    source: Optional[str] = None
    locale: Optional[str] = None
    line_number: Optional[int] = None

    def __post_init__(self) -> None:
        if self.severity not in (ERROR, WARNING):
            raise ValueError(f"Unknown severity: {self.severity}")

    @property
    def is_error(self) -> bool:
        return self.severity == ERROR


__all__ = [
    "ALL_RULES",
    "ERROR",
    "EXTRA_CATEGORY",
    "MISSING_CATEGORY",
    "MISTRANSLATED_PIVOT",
    "PARAM_PARITY",
    "PARSE_ERROR",
    "PLURALS_RULE",
    "PLURALS_TRANSLATED_RULE",
    "Result",
    "SAME_AS_SOURCE",
    "SOURCE_CATEGORIES_RULE",
    "SOURCE_PARAMS_RULE",
    "SOURCE_SYNTAX_RULE",
    "UNEXPLAINED_PARAMS_RULE",
    "UNEXPLAINED_PARAM",
    "WARNING",
]
