"""
Custom Exception Hierarchy for the Munin protocol decoder

Provides structured exceptions so callers can tell bad wire data apart
from misuse of the decoder. All custom exceptions inherit from
MuninProtocolError.
"""
from typing import Optional


class MuninProtocolError(Exception):
    """
    Base exception for all decoder-specific errors.

    All custom exceptions should inherit from this class to allow
    catching all decoder errors with a single except clause.
    """
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# Configuration Errors

class ConfigurationError(MuninProtocolError):
    """
    Invalid configuration or settings.

    Raised when settings fail validation, e.g. a malformed environment
    variable or a non-positive response size limit.
    """
    pass


# Protocol and Parsing Errors

class ProtocolError(MuninProtocolError):
    """
    Protocol-related errors during parsing.

    Base class for all protocol handling errors.
    """
    pass


class ParseError(ProtocolError):
    """Failed to parse a message according to the protocol grammar."""
    pass


class GrammarMismatch(ParseError):
    """
    Input text does not conform to the shape expected by a grammar.

    Always recoverable: the protocol handler turns it into a failure
    value and leaves the session state untouched.
    """
    def __init__(
        self,
        message: str,
        grammar: str = "",
        text: str = "",
        position: Optional[int] = None,
        expected: Optional[str] = None,
    ):
        super().__init__(
            message,
            {
                "grammar": grammar,
                "position": position,
                "expected": expected,
            },
        )
        self.grammar = grammar
        self.text = text
        self.position = position
        self.expected = expected


# Invariant and Usage Errors

class InvariantViolation(MuninProtocolError):
    """
    Internal invariant violated.

    Indicates a bug in the caller or the decoder itself, never bad wire data.
    """
    pass


class UnhandledRequestKind(InvariantViolation):
    """A response was offered while the pending request expects none."""
    def __init__(self, pending_request: str):
        super().__init__(
            f"No response grammar registered for pending request '{pending_request}'",
            {"pending_request": pending_request},
        )
        self.pending_request = pending_request
