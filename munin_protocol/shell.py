"""
Interactive request shell

Reads request lines, runs them through a ProtocolHandler and prints what
the decoder made of each one. Handy for checking how a master command
would be interpreted without talking to a node.

    $ munin-protocol-shell
    munin> list node1.example.com
    ok list node1.example.com {"command": "list", "arguments": ["node1.example.com"], ...}
    munin> lsit
    error request: expected 'cap' or 'list' or ... at position 0
"""
import argparse
import json
import sys
from typing import List, Optional, TextIO

import structlog

from munin_protocol.config import load_settings
from munin_protocol.engine import ProtocolHandler
from munin_protocol.exceptions import ConfigurationError
from munin_protocol.logging import setup_logging
from munin_protocol.models import Command

logger = structlog.get_logger()


def format_outcome(outcome) -> str:
    """Render a parse outcome as one line of shell output."""
    if not outcome.is_ok():
        return f"error {outcome.as_text()}"
    return f"ok {outcome.as_text()} {json.dumps(outcome.fields())}"


def run_shell(
    handler: ProtocolHandler,
    stdin: TextIO,
    stdout: TextIO,
    prompt: str = "",
) -> int:
    """
    Feed lines from stdin to the handler until EOF or an accepted quit.

    Returns:
        Number of lines that failed to parse
    """
    failures = 0
    while True:
        if prompt:
            stdout.write(prompt)
            stdout.flush()

        line = stdin.readline()
        if not line:
            break
        if not line.strip():
            continue

        outcome = handler.parse_request(line)
        print(format_outcome(outcome), file=stdout)
        if not outcome.is_ok():
            failures += 1
            continue

        if outcome.command == Command.QUIT:
            break

    logger.debug("shell_finished", failures=failures)
    return failures


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Munin protocol request shell")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (DEBUG, INFO, WARNING, ...). Defaults to settings",
    )
    parser.add_argument(
        "--prompt",
        default=None,
        help="Prompt shown before each line. Defaults to settings",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.prompt is not None:
        overrides["shell_prompt"] = args.prompt

    try:
        config = load_settings(**overrides)
    except ConfigurationError as e:
        print(f"error {e.message}: {', '.join(e.details.get('errors', []))}", file=sys.stderr)
        return 2

    setup_logging("shell", config=config)

    prompt = config.shell_prompt if sys.stdin.isatty() else ""
    handler = ProtocolHandler(settings=config)
    failures = run_shell(handler, sys.stdin, sys.stdout, prompt=prompt)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
