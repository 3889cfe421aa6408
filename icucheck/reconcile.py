"""Compare the plural and select categories of a source and a target string."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Set

from icucheck.highlight import Span, as_span, highlight, highlight_end, highlight_spans
from icucheck.indexer import index_message
from icucheck.locales import CategoryResolver
from icucheck.messages import PLURAL_CATEGORIES, SELECT, Node, Select, category_sort_key
from icucheck.parser import ParseOutcome
from icucheck.resources import StringPair
from icucheck.results import (
    ERROR,
    EXTRA_CATEGORY,
    MISSING_CATEGORY,
    MISTRANSLATED_PIVOT,
    PARSE_ERROR,
    PLURALS_RULE,
    WARNING,
    Result,
)

logger = logging.getLogger(__name__)

# categories a target may add on top of the source; their content is compared
# against the source "other" category
EXTRA_PLURAL_FORMS = ("few", "many", "two")

TARGET_PREFIX = "Target: "


def _target_result(
    pair: StringPair,
    kind: str,
    severity: str,
    description: str,
    marked: str,
    line_number: Optional[int] = None,
) -> Result:
    return Result(
        severity=severity,
        description=description,
        rule=PLURALS_RULE,
        kind=kind,
        id=pair.key,
        path_name=pair.path,
        highlight=TARGET_PREFIX + marked,
        source=pair.source,
        locale=pair.target_locale,
        line_number=line_number,
    )


def check_target_syntax(pair: StringPair, outcome: ParseOutcome) -> List[Result]:
    """Report a parse failure of the target string, if any."""
    if outcome.ok or pair.target is None:
        return []
    line_number = None
    if pair.line_number is not None and outcome.error_line is not None:
        line_number = pair.line_number + outcome.error_line - 1
    # everything from the point the parser gave up is marked
    span = None
    if outcome.error_location is not None:
        span = (outcome.error_location.end, len(pair.target))
    return [
        _target_result(
            pair,
            PARSE_ERROR,
            ERROR,
            f"Incorrect plural or select syntax in target string: {outcome.error}",
            highlight(pair.target, span),
            line_number,
        )
    ]


class CategoryReconciler:
    """Reconciles the selects of a target string against those of its source.

    Selects are matched by pivot name one nesting level at a time, whatever
    tags wrap them; matched categories are then reconciled recursively.
    """

    def __init__(self, resolver: CategoryResolver) -> None:
        self._resolver = resolver

    def reconcile(
        self, pair: StringPair, source_nodes: List[Node], target_nodes: List[Node]
    ) -> List[Result]:
        source_pivots = set(index_message(source_nodes, deep=True).pivots())
        results = self._reconcile_level(pair, source_nodes, target_nodes, source_pivots)
        logger.debug(f"{pair.key}: {len(results)} category issue(s) in {pair.target_locale}")
        return results

    def _reconcile_level(
        self,
        pair: StringPair,
        source_nodes: List[Node],
        target_nodes: List[Node],
        source_pivots: Set[str],
    ) -> List[Result]:
        source_index = index_message(source_nodes)
        target_index = index_message(target_nodes)
        results: List[Result] = []
        for key, entry in target_index.selects.items():
            match = source_index.selects.get(key)
            if match is not None:
                results.extend(
                    self._reconcile_select(pair, match.node, entry.node, source_pivots)
                )
            elif entry.name not in source_pivots:
                results.append(self._unknown_pivot(pair, entry.node))
        return results

    def _unknown_pivot(self, pair: StringPair, node: Select) -> Result:
        target = pair.target or ""
        span: Optional[Span] = None
        if node.location is not None:
            found = target.find(node.pivot, node.location.start)
            if found >= 0:
                span = (node.location.start, found + len(node.pivot))
        return _target_result(
            pair,
            MISTRANSLATED_PIVOT,
            ERROR,
            f"Select or plural with pivot variable {node.pivot} does not exist in the "
            "source string. Possible translated variable name.",
            highlight(target, span),
        )

    def _reconcile_select(
        self, pair: StringPair, source: Select, target: Select, source_pivots: Set[str]
    ) -> List[Result]:
        target_text = pair.target or ""
        source_required = self._resolver.required(pair.source_locale, source.kind)
        target_required = self._resolver.required(pair.target_locale, source.kind)

        # explicit categories: every select label, or the =N forms of a plural
        explicit = sorted(
            (
                category
                for category in source.options
                if (source.kind == SELECT or category not in PLURAL_CATEGORIES)
                and category not in target_required
            ),
            key=category_sort_key,
        )
        expected = ", ".join([*target_required, *explicit])

        # a required category the source also lacks is reported against the source
        missing_required = [
            category
            for category in target_required
            if category not in target.options
            and not (category in source_required and category not in source.options)
        ]
        missing_explicit = [category for category in explicit if category not in target.options]
        extra = sorted(
            (
                category
                for category in target.options
                if category not in source.options and category not in target_required
            ),
            key=category_sort_key,
        )

        results: List[Result] = []
        for missing, severity in ((missing_required, ERROR), (missing_explicit, WARNING)):
            if missing:
                results.append(
                    _target_result(
                        pair,
                        MISSING_CATEGORY,
                        severity,
                        f"Missing categories in target string: {', '.join(missing)}. "
                        f"Expecting these: {expected}",
                        highlight_end(target_text),
                    )
                )
        if extra:
            spans = [self._label_span(target_text, target, category) for category in extra]
            results.append(
                _target_result(
                    pair,
                    EXTRA_CATEGORY,
                    WARNING,
                    f"Extra categories in target string: {', '.join(extra)}. "
                    f"Expecting only these: {expected}",
                    highlight_spans(target_text, spans),
                )
            )

        for category, option in target.options.items():
            if category in source.options:
                source_content = source.options[category].content
            elif (
                category in target_required
                and category in EXTRA_PLURAL_FORMS
                and "other" in source.options
            ):
                source_content = source.options["other"].content
            else:
                continue
            results.extend(
                self._reconcile_level(pair, source_content, option.content, source_pivots)
            )
        return results

    @staticmethod
    def _label_span(text: str, node: Select, category: str) -> Optional[Span]:
        option = node.options[category]
        if option.label_location is not None:
            return as_span(option.label_location)
        start, end = (node.location.start, node.location.end) if node.location else (0, len(text))
        pattern = re.compile(rf"(?<![\w=]){re.escape(category)}(?=\s*\{{)")
        match = pattern.search(text, start, end)
        return match.span() if match else None


__all__ = ["CategoryReconciler", "EXTRA_PLURAL_FORMS", "TARGET_PREFIX", "check_target_syntax"]
