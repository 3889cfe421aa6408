"""Run every ICU plural and select check over resources."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from tqdm import tqdm

from icucheck.config import LintSettings, load_category_table
from icucheck.interfaces import Resource
from icucheck.locales import CategoryResolver
from icucheck.parser import parse_message
from icucheck.reconcile import CategoryReconciler, check_target_syntax
from icucheck.resources import StringPair, iter_string_pairs
from icucheck.results import PLURALS_RULE, PLURALS_TRANSLATED_RULE, Result
from icucheck.same_as_source import SameAsSourceDetector
from icucheck.source_checks import validate_source

logger = logging.getLogger(__name__)


class PluralChecker:
    """Checks source strings on their own, then their translations against them.

    A source string that does not parse stops all checks of its translation,
    as does a translation that does not parse.
    """

    def __init__(
        self, settings: Optional[LintSettings] = None, resolver: Optional[CategoryResolver] = None
    ) -> None:
        self._settings = settings or LintSettings()
        if resolver is None:
            resolver = CategoryResolver(load_category_table(self._settings.categories_path))
        self._enabled = self._settings.enabled_rules
        self._reconciler = CategoryReconciler(resolver)
        self._detector = SameAsSourceDetector()

    def check_pair(self, pair: StringPair) -> List[Result]:
        require_other = self._settings.require_other
        source = parse_message(pair.source, requires_other_clause=require_other)
        results = validate_source(pair, source, self._enabled)
        if not source.ok:
            logger.debug(f"{pair.key}: source does not parse, skipping target checks")
            return results
        if pair.target is None:
            return results

        target = parse_message(pair.target, requires_other_clause=require_other)
        if not target.ok:
            if PLURALS_RULE in self._enabled:
                results.extend(check_target_syntax(pair, target))
            return results
        if PLURALS_RULE in self._enabled:
            results.extend(self._reconciler.reconcile(pair, source.nodes, target.nodes))
        if PLURALS_TRANSLATED_RULE in self._enabled:
            results.extend(self._detector.detect(pair, source.nodes, target.nodes))
        return results

    def check_resource(self, resource: Resource) -> List[Result]:
        results: List[Result] = []
        for pair in iter_string_pairs(resource, self._settings.source_locale):
            results.extend(self.check_pair(pair))
        return results

    def check_resources(
        self, resources: Iterable[Resource], show_progress: bool = False
    ) -> List[Result]:
        items = list(resources)
        logger.info(f"Checking {len(items)} resource(s)")
        results: List[Result] = []
        iterator = tqdm(items, desc="Checking", unit="res") if show_progress else items
        for resource in iterator:
            results.extend(self.check_resource(resource))
        errors = sum(1 for result in results if result.is_error)
        logger.info(f"Found {errors} error(s) and {len(results) - errors} warning(s)")
        return results


__all__ = ["PluralChecker"]
