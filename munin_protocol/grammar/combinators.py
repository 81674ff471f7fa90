"""
Parser combinators - small composable building blocks for the protocol grammars

A parser is a callable taking (state, pos) and returning (value, new_pos).
On failure it raises GrammarMismatch. Every failure is also recorded on the
ParseState, which remembers the furthest position any parser reached and
what was expected there; that is what gets reported for the whole message,
so a bad line deep inside a block is blamed rather than the first
alternative that happened to be tried.
"""
from __future__ import annotations

import re
from typing import Any, Callable, List, Optional, Tuple

from munin_protocol.exceptions import GrammarMismatch

ParseFn = Callable[["ParseState", int], Tuple[Any, int]]


class ParseState:
    """Input text plus furthest-failure bookkeeping for one parse run."""

    def __init__(self, text: str):
        self.text = text
        self.furthest_pos = -1
        self.expected: List[str] = []

    def fail(self, pos: int, expected: str) -> GrammarMismatch:
        if pos > self.furthest_pos:
            self.furthest_pos = pos
            self.expected = [expected]
        elif pos == self.furthest_pos and expected not in self.expected:
            self.expected.append(expected)
        return GrammarMismatch(f"expected {expected}", position=pos, expected=expected)

    def describe_expected(self) -> str:
        return " or ".join(self.expected) if self.expected else "nothing"


class Parser:
    """Wraps a parse function with a name and a few chaining helpers."""

    def __init__(self, fn: ParseFn, name: str):
        self.fn = fn
        self.name = name

    def __call__(self, state: ParseState, pos: int) -> Tuple[Any, int]:
        return self.fn(state, pos)

    def __repr__(self) -> str:
        return f"Parser({self.name})"

    def map(self, func: Callable[[Any], Any]) -> "Parser":
        """Transform the value produced by this parser."""
        def _mapped(state: ParseState, pos: int) -> Tuple[Any, int]:
            value, new_pos = self.fn(state, pos)
            return func(value), new_pos

        return Parser(_mapped, self.name)

    def parse(self, text: str, grammar: str) -> Any:
        """Run against the whole of text; anything left over is an error."""
        state = ParseState(text)
        try:
            value, pos = self.fn(state, 0)
            end_of_input()(state, pos)
        except GrammarMismatch:
            expected = state.describe_expected()
            raise GrammarMismatch(
                f"{grammar}: expected {expected} at position {state.furthest_pos}",
                grammar=grammar,
                text=text,
                position=state.furthest_pos,
                expected=expected,
            ) from None
        return value


def token(pattern: str, name: Optional[str] = None) -> Parser:
    """Match a regular expression at the current position."""
    regex = re.compile(pattern)
    label = name or pattern

    def _token(state: ParseState, pos: int) -> Tuple[str, int]:
        match = regex.match(state.text, pos)
        if match is None:
            raise state.fail(pos, label)
        return match.group(0), match.end()

    return Parser(_token, label)


def literal(value: str, name: Optional[str] = None) -> Parser:
    """Match an exact string."""
    label = name or repr(value)

    def _literal(state: ParseState, pos: int) -> Tuple[str, int]:
        if state.text.startswith(value, pos):
            return value, pos + len(value)
        raise state.fail(pos, label)

    return Parser(_literal, label)


def keyword(word: str) -> Parser:
    """Match a word that is not merely the prefix of a longer token."""
    return token(re.escape(word) + r"(?!\S)", name=f"'{word}'")


def whitespace(required: bool = True, newlines: bool = True) -> Parser:
    """Match a run of whitespace, optionally excluding line breaks."""
    chars = r"\s" if newlines else r"[ \t]"
    quantifier = "+" if required else "*"
    return token(chars + quantifier, name="whitespace")


def end_of_input() -> Parser:
    def _end(state: ParseState, pos: int) -> Tuple[None, int]:
        if pos != len(state.text):
            raise state.fail(pos, "end of input")
        return None, pos

    return Parser(_end, "end of input")


def sequence(*parsers: Parser) -> Parser:
    """Run parsers one after another, collecting their values in a list."""
    def _sequence(state: ParseState, pos: int) -> Tuple[List[Any], int]:
        values = []
        for parser in parsers:
            value, pos = parser(state, pos)
            values.append(value)
        return values, pos

    return Parser(_sequence, " ".join(p.name for p in parsers))


def choice(*parsers: Parser) -> Parser:
    """Return the result of the first parser that succeeds."""
    def _choice(state: ParseState, pos: int) -> Tuple[Any, int]:
        error = None
        for parser in parsers:
            try:
                return parser(state, pos)
            except GrammarMismatch as e:
                error = e
        raise error

    return Parser(_choice, " | ".join(p.name for p in parsers))


def optional(parser: Parser, default: Any = None) -> Parser:
    def _optional(state: ParseState, pos: int) -> Tuple[Any, int]:
        try:
            return parser(state, pos)
        except GrammarMismatch:
            return default, pos

    return Parser(_optional, f"[{parser.name}]")


def separated(item: Parser, separator: Parser, min_count: int = 1) -> Parser:
    """
    Match item (separator item)* and return the items.

    A separator is only consumed when an item follows it, so whatever comes
    after the last item (a block terminator, trailing whitespace) is left
    for the next parser.
    """
    def _separated(state: ParseState, pos: int) -> Tuple[List[Any], int]:
        items: List[Any] = []
        try:
            value, pos = item(state, pos)
        except GrammarMismatch:
            if min_count > 0:
                raise
            return items, pos
        items.append(value)

        while True:
            try:
                _, after_separator = separator(state, pos)
                value, after_item = item(state, after_separator)
            except GrammarMismatch:
                if len(items) < min_count:
                    raise
                return items, pos
            items.append(value)
            pos = after_item

    return Parser(_separated, f"{item.name}...")
