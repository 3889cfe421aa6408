"""Unit tests for reconciling target categories against the source."""

import random

from icucheck.locales import CategoryResolver
from icucheck.parser import parse_message
from icucheck.reconcile import CategoryReconciler, check_target_syntax
from icucheck.resources import StringPair
from icucheck.results import (
    ERROR,
    EXTRA_CATEGORY,
    MISSING_CATEGORY,
    MISTRANSLATED_PIVOT,
    PARSE_ERROR,
    PLURALS_RULE,
    WARNING,
)

SIMPLE_SOURCE = "{count, plural, one {This is singular} other {This is plural}}"

NESTED_SOURCE = """{count, plural,
    one {
        {total, plural,
            one {There is {count} of {total} item available}
            other {There is {count} of {total} items available}
        }
    }
    other {
        {total, plural,
            one {There are {count} of {total} item available}
            other {There are {count} of {total} items available}
        }
    }
}"""

NESTED_RU_TARGET = """{count, plural,
    one {
        {total, plural,
            one {Есть {count} из {total} статьи}
            few {Есть {count} из {total} статей}
            other {Есть {count} из {total} статей}
        }
    }
    few {
        {total, plural,
            one {Есть {count} из {total} статьи}
            other {Есть {count} из {total} статей}
        }
    }
    other {
        {total, plural,
            one {Есть {count} из {total} статьи}
            few {Есть {count} из {total} статей}
            other {Есть {count} из {total} статей}
        }
    }
}"""


def make_pair(source, target, target_locale="de-DE"):
    return StringPair(
        key="plural.test",
        source=source,
        target=target,
        source_locale="en-US",
        target_locale=target_locale,
        path="a/b/c.json",
    )


def reconcile(source, target, target_locale="de-DE"):
    source_outcome = parse_message(source)
    target_outcome = parse_message(target)
    assert source_outcome.ok
    assert target_outcome.ok
    reconciler = CategoryReconciler(CategoryResolver())
    return reconciler.reconcile(
        make_pair(source, target, target_locale), source_outcome.nodes, target_outcome.nodes
    )


class TestMatchingCategories:
    """Test cases where the target has what it needs."""

    def test_same_categories(self):
        """Test that matching categories produce no results."""
        target = "{count, plural, one {Dies ist einzigartig} other {Dies ist mehrerartig}}"
        assert reconcile(SIMPLE_SOURCE, target) == []

    def test_target_adds_required_few(self):
        """Test that a category required by the target language is not extra."""
        target = (
            "{count, plural, one {Это единственное число} few {это множественное число} "
            "other {это множественное число}}"
        )
        assert reconcile(SIMPLE_SOURCE, target, "ru-RU") == []

    def test_target_language_without_one(self):
        """Test that a language needing only other may drop one."""
        target = "{count, plural, other {これは単数形です}}"
        assert reconcile(SIMPLE_SOURCE, target, "ja-JP") == []

    def test_nested_plurals(self):
        """Test that matching nested plurals produce no results."""
        source = (
            "{count, plural, one {{total, plural, one {There is {count} of {total} item} "
            "other {There is {count} of {total} items}}} other {{total, plural, "
            "one {There are {count} of {total} item} other {There are {count} of {total} items}}}}"
        )
        target = (
            "{count, plural, one {{total, plural, one {Es gibt {count} von {total}} "
            "other {Es gibt {count} von {total}}}} other {{total, plural, "
            "one {Es gibt {count} von {total}} other {Es gibt {count} von {total}}}}}"
        )
        assert reconcile(source, target) == []

    def test_select_in_text(self):
        """Test a plural embedded in surrounding text."""
        source = "This is {count, plural, one {singular} other {plural}}"
        target = "Dies ist {count, plural, one {einzigartig} other {mehrerartig}}"
        assert reconcile(source, target) == []


class TestMissingCategories:
    """Test cases for categories absent from the target."""

    def test_missing_required_category(self):
        """Test that a category required by the target language is an error."""
        target = "{count, plural, one {Это единственное число} other {это множественное число}}"
        results = reconcile(SIMPLE_SOURCE, target, "ru-RU")
        assert len(results) == 1
        result = results[0]
        assert result.severity == ERROR
        assert result.kind == MISSING_CATEGORY
        assert result.rule == PLURALS_RULE
        assert result.description == (
            "Missing categories in target string: few. Expecting these: one, few, other"
        )
        assert result.highlight == f"Target: {target}<e0></e0>"
        assert result.locale == "ru-RU"
        assert result.source == SIMPLE_SOURCE

    def test_missing_required_category_inside_tag(self):
        """Test that a select wrapped in a tag only the target has is still checked."""
        source = "{count, plural, one {# file} other {# files}}"
        target = "<b>{count, plural, one {# файл} other {# файлов}}</b>"
        results = reconcile(source, target, "ru-RU")
        assert len(results) == 1
        assert results[0].severity == ERROR
        assert results[0].description == (
            "Missing categories in target string: few. Expecting these: one, few, other"
        )

    def test_select_moved_out_of_tag(self):
        """Test that a select is matched when only the source wraps it in a tag."""
        source = "There <b>{count, plural, one {is # file} other {are # files}}</b>."
        target = "Es {count, plural, one {gibt # Datei} other {gibt # Dateien}}."
        assert reconcile(source, target) == []

    def test_missing_in_source_too_is_suppressed(self):
        """Test that a required category the source also lacks is left to the source check."""
        source = "{count, plural, =1 {This is singular} other {This is plural}}"
        target_nl = "{count, plural, =1 {Dit is enkelfoudig.} other {Dit is meervoudig.}}"
        target_ru = (
            "{count, plural, =1 {Это единственное число} few {это множественное число} "
            "other {это множественное число}}"
        )
        assert reconcile(source, target_nl, "nl-NL") == []
        assert reconcile(source, target_ru, "ru-RU") == []

    def test_missing_explicit_category(self):
        """Test that a dropped =N category is a warning listing every expected category."""
        source = "{count, plural, =1 {This is one} one {This is singular} other {This is plural}}"
        target = "{count, plural, one {Dies ist einzigartig} other {Dies ist mehrerartig}}"
        results = reconcile(source, target)
        assert len(results) == 1
        assert results[0].severity == WARNING
        assert results[0].description == (
            "Missing categories in target string: =1. Expecting these: one, other, =1"
        )
        assert results[0].highlight == f"Target: {target}<e0></e0>"

    def test_missing_select_label(self):
        """Test that a dropped select label is a warning."""
        source = "{count, select, male {He said} female {She said} other {They said}}"
        target = "{count, select, male {Er sagt} other {Ihnen sagen}}"
        results = reconcile(source, target)
        assert len(results) == 1
        assert results[0].severity == WARNING
        assert results[0].description == (
            "Missing categories in target string: female. Expecting these: other, female, male"
        )

    def test_nested_missing_category(self):
        """Test that a target-only category is compared with the source other content."""
        results = reconcile(NESTED_SOURCE, NESTED_RU_TARGET, "ru-RU")
        assert len(results) == 1
        assert results[0].description == (
            "Missing categories in target string: few. Expecting these: one, few, other"
        )
        assert results[0].highlight == f"Target: {NESTED_RU_TARGET}<e0></e0>"

    def test_multiple_nested_missing_categories(self):
        """Test that each nested plural reports its own missing category."""
        target = NESTED_RU_TARGET.replace(
            "            few {Есть {count} из {total} статей}\n", "", 2
        )
        results = reconcile(NESTED_SOURCE, target, "ru-RU")
        assert len(results) == 3
        assert all(result.severity == ERROR for result in results)


class TestExtraCategories:
    """Test cases for categories only the target has."""

    def test_extra_category(self):
        """Test that an unneeded category is a warning marked at its label."""
        target = (
            "{count, plural, one {Dies ist einzigartig} few {This is few} "
            "other {Dies ist mehrerartig}}"
        )
        results = reconcile(SIMPLE_SOURCE, target)
        assert len(results) == 1
        result = results[0]
        assert result.severity == WARNING
        assert result.kind == EXTRA_CATEGORY
        assert result.description == (
            "Extra categories in target string: few. Expecting only these: one, other"
        )
        assert result.highlight == (
            "Target: {count, plural, one {Dies ist einzigartig} <e0>few</e0> {This is few} "
            "other {Dies ist mehrerartig}}"
        )

    def test_several_extra_categories(self):
        """Test that several extra labels get sequential markers."""
        target = "{count, plural, one {a} two {b} many {c} other {d}}"
        results = reconcile(SIMPLE_SOURCE, target)
        assert len(results) == 1
        assert results[0].description.startswith("Extra categories in target string: two, many.")
        assert results[0].highlight == (
            "Target: {count, plural, one {a} <e0>two</e0> {b} <e1>many</e1> {c} other {d}}"
        )


class TestMistranslatedPivot:
    """Test cases for pivots the source does not have."""

    def test_translated_pivot_name(self):
        """Test that a translated pivot is reported at the start of its select."""
        source = "This is {count, plural, one {singular} other {plural}}"
        target = (
            "Это {считать, plural, one {единственное число} few {множественное число} "
            "other {множественное число}}"
        )
        results = reconcile(source, target, "ru-RU")
        assert len(results) == 1
        result = results[0]
        assert result.severity == ERROR
        assert result.kind == MISTRANSLATED_PIVOT
        assert result.description == (
            "Select or plural with pivot variable считать does not exist in the source string. "
            "Possible translated variable name."
        )
        assert result.highlight.startswith("Target: Это <e0>{считать</e0>, plural,")

    def test_translated_pivot_inside_tag(self):
        """Test that a translated pivot inside a tag the source lacks is reported."""
        source = "{count, plural, one {# file} other {# files}}"
        target = "<b>{считать, plural, one {# файл} few {# файла} other {# файлов}}</b>"
        results = reconcile(source, target, "ru-RU")
        assert [r.kind for r in results] == [MISTRANSLATED_PIVOT]
        assert results[0].highlight == (
            "Target: <b><e0>{считать</e0>, plural, one {# файл} few {# файла} other {# файлов}}</b>"
        )

    def test_pivot_moved_to_other_level(self):
        """Test that a pivot known elsewhere in the source is not reported."""
        source = "{a, plural, one {x} other {{b, select, m {y} other {z}}}}"
        target = "{b, select, m {{a, plural, one {x} other {y}}} other {z}}"
        results = reconcile(source, target)
        assert all(result.kind != MISTRANSLATED_PIVOT for result in results)


class TestReconcileProperties:
    """Test cases for determinism of the reconciliation."""

    def test_idempotent(self):
        """Test that two runs give equal results."""
        assert reconcile(NESTED_SOURCE, NESTED_RU_TARGET, "ru-RU") == reconcile(
            NESTED_SOURCE, NESTED_RU_TARGET, "ru-RU"
        )

    def test_option_order_independent(self):
        """Test that reordering categories does not change the results."""
        source_options = ["=1 {one}", "one {single}", "male {m}", "other {many}"]
        target_options = ["two {zwei}", "many {viele}", "one {eins}", "other {viele}"]
        expected = None
        rng = random.Random(7)
        for _ in range(5):
            rng.shuffle(source_options)
            rng.shuffle(target_options)
            source = "{n, plural, " + " ".join(source_options) + "}"
            target = "{n, plural, " + " ".join(target_options) + "}"
            descriptions = [result.description for result in reconcile(source, target)]
            if expected is None:
                expected = descriptions
            assert descriptions == expected


class TestTargetSyntax:
    """Test cases for target syntax errors."""

    def check(self, target):
        pair = make_pair(SIMPLE_SOURCE, target)
        return check_target_syntax(pair, parse_message(target))

    def test_malformed_argument(self):
        """Test that the rest of the target after the error is marked."""
        results = self.check(
            "{count, plural, one {{Dies ist einzigartig} other {Dies ist mehrerartig}}"
        )
        assert len(results) == 1
        assert results[0].kind == PARSE_ERROR
        assert results[0].description == (
            "Incorrect plural or select syntax in target string: SyntaxError: MALFORMED_ARGUMENT"
        )
        assert results[0].highlight == (
            "Target: {count, plural, one {{Dies <e0>ist einzigartig} "
            "other {Dies ist mehrerartig}}</e0>"
        )

    def test_unclosed_plural(self):
        """Test that an unclosed target is marked at its end."""
        target = "{count, plural, one {Dies ist einzigartig} other {Dies ist mehrerartig}"
        results = self.check(target)
        assert results[0].highlight == f"Target: {target}<e0></e0>"

    def test_translated_category_names(self):
        """Test that translated category names fail for lack of other."""
        results = self.check(
            "{count, plural, eins {Dies ist einzigartig} andere {Dies ist mehrerartig}}"
        )
        assert results[0].description.endswith("SyntaxError: MISSING_OTHER_CLAUSE")
        assert results[0].highlight == (
            "Target: {count, plural, eins {Dies ist einzigartig} "
            "andere {Dies ist mehrerartig}<e0>}</e0>"
        )

    def test_missing_selector_fragment(self):
        """Test that text where a category should be is marked to the end."""
        target = (
            "Die Datei befindet sich in {count, plural, one {# Sammlung} other {# Sammlungen} "
            "die für Benutzer {name} sichtbar ist."
        )
        results = self.check(target)
        assert results[0].description.endswith("EXPECT_PLURAL_ARGUMENT_SELECTOR_FRAGMENT")
        assert results[0].highlight.endswith("die <e0>für Benutzer {name} sichtbar ist.</e0>")

    def test_valid_target(self):
        """Test that a valid target has no syntax result."""
        target = "{count, plural, one {eins} other {viele}}"
        assert self.check(target) == []
