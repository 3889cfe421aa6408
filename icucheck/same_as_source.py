"""Find plural and select categories whose translation is just the source text."""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from icucheck.highlight import highlight
from icucheck.indexer import index_message
from icucheck.locales import same_language_and_script
from icucheck.messages import (
    SELECT,
    SELECTORDINAL,
    Argument,
    DateFormat,
    Literal,
    Node,
    NumberFormat,
    Option,
    Pound,
    Select,
    Tag,
    TimeFormat,
)
from icucheck.reconcile import TARGET_PREFIX
from icucheck.resources import StringPair
from icucheck.results import PLURALS_TRANSLATED_RULE, SAME_AS_SOURCE, WARNING, Result

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def reconstruct(nodes: List[Node]) -> str:
    """Rebuild the surface text of `nodes`, hiding the insides of nested selects.

    Spaces are added around each non-literal part so that differences in
    spacing alone disappear once whitespace is collapsed.
    """
    parts: List[str] = []
    for node in nodes:
        if isinstance(node, Literal):
            parts.append(node.text)
        elif isinstance(node, Argument):
            parts.append(f" {{{node.name}}} ")
        elif isinstance(node, NumberFormat):
            parts.append(_formatted(node.name, "number", node.style))
        elif isinstance(node, DateFormat):
            parts.append(_formatted(node.name, "date", node.style))
        elif isinstance(node, TimeFormat):
            parts.append(_formatted(node.name, "time", node.style))
        elif isinstance(node, Pound):
            parts.append(" # ")
        elif isinstance(node, Select):
            if node.kind == SELECTORDINAL:
                parts.append(" {selectordinal} ")
            elif node.kind == SELECT:
                parts.append(" {select} ")
            else:
                parts.append(" {plural} ")
        elif isinstance(node, Tag):
            parts.append(f"<{node.name}>{reconstruct(node.children)}</{node.name}>")
    return "".join(parts)


def _formatted(name: str, kind: str, style: Optional[str]) -> str:
    if style:
        return f" {{{name}, {kind}, {style}}} "
    return f" {{{name}, {kind}}} "


def normalize(nodes: List[Node]) -> str:
    return _WHITESPACE_RE.sub(" ", reconstruct(nodes)).strip()


class SameAsSourceDetector:
    """Warns about categories of a translated select that equal the source."""

    def detect(
        self, pair: StringPair, source_nodes: List[Node], target_nodes: List[Node]
    ) -> List[Result]:
        if same_language_and_script(pair.source_locale, pair.target_locale):
            logger.debug(
                f"{pair.key}: {pair.source_locale} and {pair.target_locale} share "
                "language and script, skipping"
            )
            return []
        return self._detect_level(pair, source_nodes, target_nodes)

    def _detect_level(
        self, pair: StringPair, source_nodes: List[Node], target_nodes: List[Node]
    ) -> List[Result]:
        source_index = index_message(source_nodes)
        target_index = index_message(target_nodes)
        results: List[Result] = []
        for key, entry in source_index.selects.items():
            match = target_index.selects.get(key)
            if match is None:
                continue
            source_select = entry.node
            for category, target_option in match.node.options.items():
                source_category = category if category in source_select.options else "other"
                source_option = source_select.options.get(source_category)
                if source_option is None:
                    continue
                source_text = normalize(source_option.content)
                target_text = normalize(target_option.content)
                if source_text and source_text.lower() == target_text.lower():
                    results.append(
                        self._warning(
                            pair, category, target_option, source_category, source_text, target_text
                        )
                    )
                results.extend(
                    self._detect_level(pair, source_option.content, target_option.content)
                )
        return results

    @staticmethod
    def _warning(
        pair: StringPair,
        category: str,
        target_option: Option,
        source_category: str,
        source_text: str,
        target_text: str,
    ) -> Result:
        target = pair.target or ""
        label, content = target_option.label_location, target_option.location
        if label is not None and content is not None:
            marked = highlight(target, (label.start, content.end))
        else:
            marked = f"<e0>{category} {{{target_text}}}</e0>"
        return Result(
            severity=WARNING,
            description=f"Translation of the category '{category}' is the same as the source.",
            rule=PLURALS_TRANSLATED_RULE,
            kind=SAME_AS_SOURCE,
            id=pair.key,
            path_name=pair.path,
            highlight=TARGET_PREFIX + marked,
            source=f"{source_category} {{{source_text}}}",
            locale=pair.target_locale,
            line_number=pair.line_number,
        )


__all__ = ["SameAsSourceDetector", "normalize", "reconstruct"]
