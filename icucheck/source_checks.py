"""Checks that only look at the source string of a resource."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Collection, Iterator, List, Optional

from icucheck.highlight import as_span, highlight
from icucheck.indexer import index_message
from icucheck.messages import SELECT, Argument, Node, Pound, Select, Tag
from icucheck.parser import ParseOutcome
from icucheck.resources import StringPair
from icucheck.results import (
    ALL_RULES,
    ERROR,
    MISSING_CATEGORY,
    PARAM_PARITY,
    PARSE_ERROR,
    SOURCE_CATEGORIES_RULE,
    SOURCE_PARAMS_RULE,
    SOURCE_SYNTAX_RULE,
    UNEXPLAINED_PARAM,
    UNEXPLAINED_PARAMS_RULE,
    WARNING,
    Result,
)

logger = logging.getLogger(__name__)

# categories a source string must have, whatever its locale
SOURCE_PLURAL_CATEGORIES = ("one", "other")
SOURCE_SELECT_CATEGORIES = ("other",)


def _source_result(
    pair: StringPair,
    rule: str,
    kind: str,
    severity: str,
    description: str,
    marked: str,
    line_number: Optional[int] = None,
) -> Result:
    return Result(
        severity=severity,
        description=description,
        rule=rule,
        kind=kind,
        id=pair.key,
        path_name=pair.path,
        highlight=marked,
        source=pair.source,
        line_number=line_number,
    )


def check_syntax(pair: StringPair, outcome: ParseOutcome) -> List[Result]:
    """Report a parse failure of the source string, if any."""
    if outcome.ok:
        return []
    line_number = None
    if pair.line_number is not None and outcome.error_line is not None:
        line_number = pair.line_number + outcome.error_line - 1
    return [
        _source_result(
            pair,
            SOURCE_SYNTAX_RULE,
            PARSE_ERROR,
            ERROR,
            f"Incorrect ICU plural syntax in source string: {outcome.error}",
            highlight(pair.source, as_span(outcome.error_location)),
            line_number,
        )
    ]


def check_categories(pair: StringPair, nodes: List[Node]) -> List[Result]:
    """Every plural and selectordinal must carry "one" and "other", every select "other"."""
    results: List[Result] = []
    for entry in index_message(nodes, deep=True).selects.values():
        node = entry.node
        required = SOURCE_SELECT_CATEGORIES if node.kind == SELECT else SOURCE_PLURAL_CATEGORIES
        for category in required:
            if category in node.options:
                continue
            if category == "one" and "=1" in node.options:
                description = 'Category "=1" in plural should be "one" instead'
                span = as_span(node.options["=1"].location)
            else:
                description = f'Missing required plural category "{category}"'
                span = as_span(node.location)
            results.append(
                _source_result(
                    pair,
                    SOURCE_CATEGORIES_RULE,
                    MISSING_CATEGORY,
                    ERROR,
                    description,
                    highlight(pair.source, span),
                )
            )
    return results


def _direct_params(content: List[Node]) -> Iterator[str]:
    """Parameters referenced in `content` without descending into nested selects."""
    for node in content:
        if isinstance(node, Argument):
            yield node.name
        elif isinstance(node, Pound):
            yield "#"
        elif isinstance(node, Tag):
            yield from _direct_params(node.children)


def check_param_parity(pair: StringPair, nodes: List[Node]) -> List[Result]:
    """The first parameter of "one" must be the first parameter of "other"."""
    results: List[Result] = []
    for entry in index_message(nodes, deep=True).selects.values():
        node = entry.node
        other = node.options.get("other")
        one = node.options.get("one")
        if other is None or one is None:
            continue
        other_param = next(_direct_params(other.content), None)
        if other_param is None:
            continue
        if next(_direct_params(one.content), None) == other_param:
            continue
        results.append(
            _source_result(
                pair,
                SOURCE_PARAMS_RULE,
                PARAM_PARITY,
                ERROR,
                f'Missing replacement param "{other_param}" in the "one" category',
                highlight(pair.source, as_span(node.location)),
            )
        )
    return results


@dataclass(frozen=True)
class _Visit:
    """A node together with the chain of nodes that enclose it."""

    node: Node
    parent: Optional["_Visit"] = None

    def enclosing_select(self) -> Optional[Select]:
        current = self.parent
        while current is not None:
            if isinstance(current.node, Select):
                return current.node
            current = current.parent
        return None


def _walk(nodes: List[Node], parent: Optional[_Visit] = None) -> Iterator[_Visit]:
    for node in nodes:
        visit = _Visit(node, parent)
        yield visit
        if isinstance(node, Select):
            for option in node.options.values():
                yield from _walk(option.content, visit)
        elif isinstance(node, Tag):
            yield from _walk(node.children, visit)


def _mentions(comment: str, name: str) -> bool:
    pattern = rf"(?<!\w){re.escape(name)}(?!\w)"
    return re.search(pattern, comment, re.IGNORECASE) is not None


def check_unexplained_params(pair: StringPair, nodes: List[Node]) -> List[Result]:
    """Warn about each parameter occurrence the translator comment never names."""
    if not pair.comment:
        return []
    results: List[Result] = []
    for visit in _walk(nodes):
        node = visit.node
        if isinstance(node, Argument):
            name = node.name
        elif isinstance(node, Pound):
            select = visit.enclosing_select()
            if select is None:
                continue
            name = select.pivot
        else:
            continue
        if _mentions(pair.comment, name):
            continue
        results.append(
            _source_result(
                pair,
                UNEXPLAINED_PARAMS_RULE,
                UNEXPLAINED_PARAM,
                WARNING,
                f'Replacement parameter "{name}" is not mentioned in the string\'s '
                "comment for translators.",
                highlight(pair.source, as_span(node.location)),
            )
        )
    return results


def validate_source(
    pair: StringPair,
    outcome: ParseOutcome,
    enabled_rules: Collection[str] = ALL_RULES,
) -> List[Result]:
    """Run every enabled source check on an already parsed source string."""
    if not outcome.ok:
        if SOURCE_SYNTAX_RULE in enabled_rules:
            return check_syntax(pair, outcome)
        return []
    results: List[Result] = []
    if SOURCE_CATEGORIES_RULE in enabled_rules:
        results.extend(check_categories(pair, outcome.nodes))
    if SOURCE_PARAMS_RULE in enabled_rules:
        results.extend(check_param_parity(pair, outcome.nodes))
    if UNEXPLAINED_PARAMS_RULE in enabled_rules:
        results.extend(check_unexplained_params(pair, outcome.nodes))
    logger.debug(f"{pair.key}: {len(results)} source issue(s)")
    return results


__all__ = [
    "SOURCE_PLURAL_CATEGORIES",
    "SOURCE_SELECT_CATEGORIES",
    "check_categories",
    "check_param_parity",
    "check_syntax",
    "check_unexplained_params",
    "validate_source",
]
