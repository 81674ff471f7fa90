"""
Munin protocol decoder

Parses master requests and node responses of the Munin master/node
exchange and tracks per-connection session state.
"""
from munin_protocol.engine import ProtocolHandler
from munin_protocol.exceptions import GrammarMismatch, UnhandledRequestKind
from munin_protocol.models import (
    Command,
    ParseFailure,
    Request,
    ResponseRecord,
    SessionSnapshot,
)

__version__ = "0.1.0"

__all__ = [
    "Command",
    "GrammarMismatch",
    "ParseFailure",
    "ProtocolHandler",
    "Request",
    "ResponseRecord",
    "SessionSnapshot",
    "UnhandledRequestKind",
]
