"""ICU MessageFormat parser that records the location of every node.

The grammar and the error kinds follow the formatjs message parser so that
messages which are valid for the runtime formatter are valid here too.
Callers get a `ParseOutcome` back instead of an exception.
"""

from __future__ import annotations

import logging
import string
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from icucheck.messages import (
    PLURAL,
    SELECT,
    SELECTORDINAL,
    Argument,
    DateFormat,
    Literal,
    Location,
    Node,
    NumberFormat,
    Option,
    Pound,
    Select,
    Tag,
    TimeFormat,
)

logger = logging.getLogger(__name__)

EMPTY_ARGUMENT = "EMPTY_ARGUMENT"
MALFORMED_ARGUMENT = "MALFORMED_ARGUMENT"
EXPECT_ARGUMENT_CLOSING_BRACE = "EXPECT_ARGUMENT_CLOSING_BRACE"
EXPECT_ARGUMENT_TYPE = "EXPECT_ARGUMENT_TYPE"
INVALID_ARGUMENT_TYPE = "INVALID_ARGUMENT_TYPE"
EXPECT_ARGUMENT_STYLE = "EXPECT_ARGUMENT_STYLE"
UNCLOSED_QUOTE_IN_ARGUMENT_STYLE = "UNCLOSED_QUOTE_IN_ARGUMENT_STYLE"
EXPECT_PLURAL_ARGUMENT_OPTIONS = "EXPECT_PLURAL_ARGUMENT_OPTIONS"
EXPECT_SELECT_ARGUMENT_OPTIONS = "EXPECT_SELECT_ARGUMENT_OPTIONS"
EXPECT_PLURAL_ARGUMENT_OFFSET_VALUE = "EXPECT_PLURAL_ARGUMENT_OFFSET_VALUE"
INVALID_PLURAL_ARGUMENT_OFFSET_VALUE = "INVALID_PLURAL_ARGUMENT_OFFSET_VALUE"
EXPECT_PLURAL_ARGUMENT_SELECTOR = "EXPECT_PLURAL_ARGUMENT_SELECTOR"
EXPECT_SELECT_ARGUMENT_SELECTOR = "EXPECT_SELECT_ARGUMENT_SELECTOR"
INVALID_PLURAL_ARGUMENT_SELECTOR = "INVALID_PLURAL_ARGUMENT_SELECTOR"
EXPECT_PLURAL_ARGUMENT_SELECTOR_FRAGMENT = "EXPECT_PLURAL_ARGUMENT_SELECTOR_FRAGMENT"
EXPECT_SELECT_ARGUMENT_SELECTOR_FRAGMENT = "EXPECT_SELECT_ARGUMENT_SELECTOR_FRAGMENT"
DUPLICATE_PLURAL_ARGUMENT_SELECTOR = "DUPLICATE_PLURAL_ARGUMENT_SELECTOR"
DUPLICATE_SELECT_ARGUMENT_SELECTOR = "DUPLICATE_SELECT_ARGUMENT_SELECTOR"
MISSING_OTHER_CLAUSE = "MISSING_OTHER_CLAUSE"
INVALID_TAG = "INVALID_TAG"
UNCLOSED_TAG = "UNCLOSED_TAG"
UNMATCHED_CLOSING_TAG = "UNMATCHED_CLOSING_TAG"

# ASCII members of the Unicode Pattern_Syntax property; they end identifiers
PATTERN_SYNTAX = frozenset(set(string.punctuation) - {"_"})
SIMPLE_TYPES = {"number": NumberFormat, "date": DateFormat, "time": TimeFormat}
SELECT_TYPES = (PLURAL, SELECTORDINAL, SELECT)


class MessageSyntaxError(Exception):
    """Raised by the parser; `location` points at the offending text."""

    def __init__(self, kind: str, location: Location) -> None:
        super().__init__(kind)
        self.kind = kind
        self.location = location

    def __str__(self) -> str:
        return f"SyntaxError: {self.kind}"


@dataclass(frozen=True)
class ParseOutcome:
    """Result of parsing one message: either `nodes` or an `error`."""

    text: str
    nodes: List[Node] = field(default_factory=list)
    error: Optional[MessageSyntaxError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_location(self) -> Optional[Location]:
        return self.error.location if self.error else None

    @property
    def error_line(self) -> Optional[int]:
        """1-based line on which the error span ends."""
        if self.error is None:
            return None
        end = min(self.error.location.end, len(self.text))
        return self.text.count("\n", 0, end) + 1


def parse_message(
    text: str, requires_other_clause: bool = True, ignore_tag: bool = False
) -> ParseOutcome:
    """Parse `text` and report the outcome without raising."""
    try:
        nodes = _Parser(text, requires_other_clause, ignore_tag).parse()
    except MessageSyntaxError as exc:
        logger.debug(f"Failed to parse message {text!r}: {exc}")
        return ParseOutcome(text=text, error=exc)
    return ParseOutcome(text=text, nodes=nodes)


class _Parser:
    def __init__(self, text: str, requires_other_clause: bool, ignore_tag: bool) -> None:
        self._text = text
        self._pos = 0
        self._requires_other_clause = requires_other_clause
        self._ignore_tag = ignore_tag

    def parse(self) -> List[Node]:
        return self._parse_message(0, "", False)

    # -- cursor helpers -------------------------------------------------

    def _eof(self) -> bool:
        return self._pos >= len(self._text)

    def _char(self) -> str:
        return self._text[self._pos] if self._pos < len(self._text) else ""

    def _peek(self) -> str:
        nxt = self._pos + 1
        return self._text[nxt] if nxt < len(self._text) else ""

    def _skip_space(self) -> None:
        while not self._eof() and self._char().isspace():
            self._pos += 1

    def _fail(self, kind: str, start: int, end: Optional[int] = None) -> MessageSyntaxError:
        return MessageSyntaxError(kind, Location(start, self._pos if end is None else end))

    def _parse_identifier(self) -> Tuple[str, Location]:
        start = self._pos
        while not self._eof():
            ch = self._char()
            if ch.isspace() or ch in PATTERN_SYNTAX:
                break
            self._pos += 1
        return self._text[start : self._pos], Location(start, self._pos)

    # -- message content ------------------------------------------------

    def _parse_message(
        self, nesting: int, parent_type: str, expecting_close_tag: bool
    ) -> List[Node]:
        nodes: List[Node] = []
        while not self._eof():
            ch = self._char()
            if ch == "{":
                nodes.append(self._parse_argument(nesting, expecting_close_tag))
            elif ch == "}" and nesting > 0:
                break
            elif ch == "#" and parent_type in (PLURAL, SELECTORDINAL):
                start = self._pos
                self._pos += 1
                nodes.append(Pound(Location(start, self._pos)))
            elif ch == "<" and not self._ignore_tag and self._peek() == "/":
                if expecting_close_tag:
                    break
                raise self._fail(UNMATCHED_CLOSING_TAG, self._pos)
            elif ch == "<" and not self._ignore_tag and _is_ascii_alpha(self._peek()):
                nodes.append(self._parse_tag(nesting, parent_type))
            else:
                nodes.append(self._parse_literal(nesting, parent_type))
        return nodes

    def _parse_literal(self, nesting: int, parent_type: str) -> Literal:
        start = self._pos
        parts: List[str] = []
        while True:
            quoted = self._try_parse_quote(parent_type)
            if quoted is not None:
                parts.append(quoted)
                continue
            unquoted = self._try_parse_unquoted(nesting, parent_type)
            if unquoted is not None:
                parts.append(unquoted)
                continue
            bracket = self._try_parse_left_angle_bracket()
            if bracket is not None:
                parts.append(bracket)
                continue
            break
        return Literal("".join(parts), Location(start, self._pos))

    def _try_parse_quote(self, parent_type: str) -> Optional[str]:
        if self._eof() or self._char() != "'":
            return None
        nxt = self._peek()
        if nxt == "'":
            self._pos += 2
            return "'"
        opens_quote = nxt in ("{", "<", ">", "}") or (
            nxt == "#" and parent_type in (PLURAL, SELECTORDINAL)
        )
        if not opens_quote:
            return None
        # opening apostrophe, then everything up to the next lone apostrophe
        self._pos += 1
        chars = [self._char()]
        self._pos += 1
        while not self._eof():
            ch = self._char()
            if ch == "'":
                if self._peek() == "'":
                    chars.append("'")
                    self._pos += 2
                    continue
                self._pos += 1
                break
            chars.append(ch)
            self._pos += 1
        return "".join(chars)

    def _try_parse_unquoted(self, nesting: int, parent_type: str) -> Optional[str]:
        if self._eof():
            return None
        ch = self._char()
        if (
            ch in ("<", "{")
            or (ch == "#" and parent_type in (PLURAL, SELECTORDINAL))
            or (ch == "}" and nesting > 0)
        ):
            return None
        self._pos += 1
        return ch

    def _try_parse_left_angle_bracket(self) -> Optional[str]:
        if self._eof() or self._char() != "<":
            return None
        nxt = self._peek()
        if self._ignore_tag or not (_is_ascii_alpha(nxt) or nxt == "/"):
            self._pos += 1
            return "<"
        return None

    # -- tags -----------------------------------------------------------

    def _parse_tag_name(self) -> str:
        start = self._pos
        while not self._eof():
            ch = self._char()
            if not (ch.isalnum() or ch in "-._·"):
                break
            self._pos += 1
        return self._text[start : self._pos]

    def _parse_tag(self, nesting: int, parent_type: str) -> Node:
        start = self._pos
        self._pos += 1
        name = self._parse_tag_name()
        self._skip_space()
        if self._text.startswith("/>", self._pos):
            self._pos += 2
            return Literal(f"<{name}/>", Location(start, self._pos))
        if self._char() != ">":
            raise self._fail(INVALID_TAG, start)
        self._pos += 1
        children = self._parse_message(nesting + 1, parent_type, True)
        end_tag_start = self._pos
        if not self._text.startswith("</", self._pos):
            raise self._fail(UNCLOSED_TAG, start)
        self._pos += 2
        if self._eof() or not _is_ascii_alpha(self._char()):
            raise self._fail(INVALID_TAG, end_tag_start)
        closing = self._parse_tag_name()
        if closing != name:
            raise self._fail(UNMATCHED_CLOSING_TAG, end_tag_start)
        self._skip_space()
        if self._char() != ">":
            raise self._fail(INVALID_TAG, end_tag_start)
        self._pos += 1
        return Tag(name, children, Location(start, self._pos))

    # -- arguments ------------------------------------------------------

    def _parse_argument(self, nesting: int, expecting_close_tag: bool) -> Node:
        open_brace = self._pos
        self._pos += 1
        self._skip_space()
        if self._eof():
            raise self._fail(EXPECT_ARGUMENT_CLOSING_BRACE, open_brace)
        if self._char() == "}":
            self._pos += 1
            raise self._fail(EMPTY_ARGUMENT, open_brace)
        name, _ = self._parse_identifier()
        if not name:
            raise self._fail(MALFORMED_ARGUMENT, open_brace)
        self._skip_space()
        if self._eof():
            raise self._fail(EXPECT_ARGUMENT_CLOSING_BRACE, open_brace)
        ch = self._char()
        if ch == "}":
            self._pos += 1
            return Argument(name, Location(open_brace, self._pos))
        if ch != ",":
            raise self._fail(MALFORMED_ARGUMENT, open_brace)
        self._pos += 1
        self._skip_space()
        if self._eof():
            raise self._fail(EXPECT_ARGUMENT_CLOSING_BRACE, open_brace)
        return self._parse_argument_options(nesting, expecting_close_tag, name, open_brace)

    def _parse_argument_options(
        self, nesting: int, expecting_close_tag: bool, name: str, open_brace: int
    ) -> Node:
        type_start = self._pos
        arg_type, _ = self._parse_identifier()
        if not arg_type:
            raise self._fail(EXPECT_ARGUMENT_TYPE, type_start)

        if arg_type in SIMPLE_TYPES:
            self._skip_space()
            style = None
            if self._char() == ",":
                self._pos += 1
                self._skip_space()
                style = self._parse_simple_style().rstrip()
                if not style:
                    raise self._fail(EXPECT_ARGUMENT_STYLE, self._pos)
            self._close_argument(open_brace)
            node_type = SIMPLE_TYPES[arg_type]
            return node_type(name, style, Location(open_brace, self._pos))

        if arg_type in SELECT_TYPES:
            type_end = self._pos
            self._skip_space()
            if self._char() != ",":
                kind = (
                    EXPECT_SELECT_ARGUMENT_OPTIONS
                    if arg_type == SELECT
                    else EXPECT_PLURAL_ARGUMENT_OPTIONS
                )
                raise self._fail(kind, type_end)
            self._pos += 1
            self._skip_space()
            first = self._parse_identifier()
            offset = 0
            if arg_type != SELECT and first[0] == "offset":
                if self._char() != ":":
                    raise self._fail(EXPECT_PLURAL_ARGUMENT_OFFSET_VALUE, self._pos, self._pos)
                self._pos += 1
                self._skip_space()
                offset = self._parse_integer(
                    EXPECT_PLURAL_ARGUMENT_OFFSET_VALUE, INVALID_PLURAL_ARGUMENT_OFFSET_VALUE
                )
                self._skip_space()
                first = self._parse_identifier()
            options = self._parse_options(nesting, arg_type, expecting_close_tag, first)
            self._close_argument(open_brace)
            return Select(name, options, arg_type, offset, Location(open_brace, self._pos))

        raise self._fail(INVALID_ARGUMENT_TYPE, type_start)

    def _close_argument(self, open_brace: int) -> None:
        if self._eof() or self._char() != "}":
            raise self._fail(EXPECT_ARGUMENT_CLOSING_BRACE, open_brace)
        self._pos += 1

    def _parse_simple_style(self) -> str:
        start = self._pos
        depth = 0
        while not self._eof():
            ch = self._char()
            if ch == "'":
                quote = self._pos
                self._pos += 1
                closing = self._text.find("'", self._pos)
                if closing < 0:
                    self._pos = len(self._text)
                    raise self._fail(UNCLOSED_QUOTE_IN_ARGUMENT_STYLE, quote)
                self._pos = closing + 1
            elif ch == "{":
                depth += 1
                self._pos += 1
            elif ch == "}":
                if depth == 0:
                    break
                depth -= 1
                self._pos += 1
            else:
                self._pos += 1
        return self._text[start : self._pos]

    def _parse_integer(self, expect_kind: str, invalid_kind: str) -> int:
        start = self._pos
        if self._char() in ("+", "-"):
            self._pos += 1
        digits_start = self._pos
        while not self._eof() and self._char().isdigit():
            self._pos += 1
        if self._pos == digits_start:
            raise self._fail(expect_kind, start)
        try:
            return int(self._text[start : self._pos])
        except ValueError as exc:
            raise self._fail(invalid_kind, start) from exc

    def _parse_options(
        self,
        nesting: int,
        arg_type: str,
        expecting_close_tag: bool,
        first: Tuple[str, Location],
    ) -> Dict[str, Option]:
        is_select = arg_type == SELECT
        options: Dict[str, Option] = {}
        selector, selector_location = first
        while True:
            if not selector:
                start = self._pos
                if is_select or self._char() != "=":
                    break
                self._pos += 1
                self._parse_integer(
                    EXPECT_PLURAL_ARGUMENT_SELECTOR, INVALID_PLURAL_ARGUMENT_SELECTOR
                )
                selector = self._text[start : self._pos]
                selector_location = Location(start, self._pos)
            if selector in options:
                kind = (
                    DUPLICATE_SELECT_ARGUMENT_SELECTOR
                    if is_select
                    else DUPLICATE_PLURAL_ARGUMENT_SELECTOR
                )
                raise MessageSyntaxError(kind, selector_location)
            self._skip_space()
            open_brace = self._pos
            if self._char() != "{":
                kind = (
                    EXPECT_SELECT_ARGUMENT_SELECTOR_FRAGMENT
                    if is_select
                    else EXPECT_PLURAL_ARGUMENT_SELECTOR_FRAGMENT
                )
                raise self._fail(kind, self._pos)
            self._pos += 1
            content = self._parse_message(nesting + 1, arg_type, expecting_close_tag)
            self._close_argument(open_brace)
            options[selector] = Option(
                content, Location(open_brace, self._pos), selector_location
            )
            self._skip_space()
            selector, selector_location = self._parse_identifier()

        if not options:
            kind = EXPECT_SELECT_ARGUMENT_SELECTOR if is_select else EXPECT_PLURAL_ARGUMENT_SELECTOR
            raise self._fail(kind, self._pos)
        if self._requires_other_clause and "other" not in options:
            raise self._fail(MISSING_OTHER_CLAUSE, self._pos)
        return options


def _is_ascii_alpha(ch: str) -> bool:
    return bool(ch) and ch.isascii() and ch.isalpha()


__all__ = ["MessageSyntaxError", "ParseOutcome", "parse_message"]
