"""Stateful request/response handling for a master/node session."""
from munin_protocol.engine.protocol_handler import ProtocolHandler
from munin_protocol.engine.session_state import SessionState

__all__ = ["ProtocolHandler", "SessionState"]
