"""
Request grammar - validates a single master request line

    cap <capability> [<capability> ...]
    list [<hostname>]
    nodes | quit | help
    config <plugin>
    fetch <plugin>
    spoolfetch <timestamp>

Keywords are case-sensitive and must be followed by whitespace or the end
of the line. Whitespace around the statement is ignored; whitespace inside
it may not cross a line break.
"""
from __future__ import annotations

from typing import List, Tuple

import structlog

from munin_protocol.grammar.combinators import (
    Parser,
    choice,
    keyword,
    optional,
    separated,
    sequence,
    token,
    whitespace,
)
from munin_protocol.models import Command, Request

logger = structlog.get_logger()

GRAMMAR_NAME = "request"

_gap = whitespace(newlines=False)
_padding = whitespace(required=False)

capability = token(r"[A-Za-z]+", name="capability")
plugin = token(r"[A-Za-z]+", name="plugin name")
hostname = token(r"\S+", name="hostname")
timestamp = token(r"[0-9]+", name="timestamp")


def _no_arguments(command: Command) -> Parser:
    return keyword(command.value).map(lambda _: (command, []))


def _single_argument(command: Command, argument: Parser) -> Parser:
    return sequence(keyword(command.value), _gap, argument).map(
        lambda values: (command, [values[2]])
    )


cap_statement = sequence(
    keyword(Command.CAP.value), _gap, separated(capability, _gap)
).map(lambda values: (Command.CAP, values[2]))

list_statement = sequence(
    keyword(Command.LIST.value),
    optional(sequence(_gap, hostname).map(lambda values: [values[1]]), default=[]),
).map(lambda values: (Command.LIST, values[1]))

statement = choice(
    cap_statement,
    list_statement,
    _no_arguments(Command.NODES),
    _no_arguments(Command.QUIT),
    _no_arguments(Command.HELP),
    _single_argument(Command.CONFIG, plugin),
    _single_argument(Command.FETCH, plugin),
    _single_argument(Command.SPOOLFETCH, timestamp),
)

request_line = sequence(_padding, statement, _padding).map(lambda values: values[1])


def parse_request_line(text: str) -> Request:
    """
    Parse one request line into a Request.

    Args:
        text: Raw request line, with or without its line terminator

    Returns:
        Request with the command, its arguments and the trimmed statement

    Raises:
        GrammarMismatch: If the line is not one of the known request forms
    """
    parsed: Tuple[Command, List[str]] = request_line.parse(text, GRAMMAR_NAME)
    command, arguments = parsed
    logger.debug("request_grammar_matched", command=command.value, arguments=arguments)
    return Request(command=command, arguments=arguments, statement=text.strip())
