"""
Session State - what a master has learned about the node on one connection

Tracks:
- the pending request, which selects the grammar for the next response
- the node hostname announced in the banner
- the node names returned by `nodes`
- the capabilities both sides agreed on via `cap`
- the raw text of the last response that parsed successfully

Owned by a ProtocolHandler; callers observe it through snapshots.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import structlog

from munin_protocol.models import BANNER, SessionSnapshot

logger = structlog.get_logger()


@dataclass
class SessionState:
    """
    Mutable per-connection state.

    pending_request starts as "banner" because a node always speaks first.
    """

    pending_request: str = BANNER
    node: str = ""
    nodes: List[str] = field(default_factory=list)
    capabilities: List[str] = field(default_factory=list)
    last_response: str = ""

    def record_request(self, command: str) -> None:
        previous = self.pending_request
        self.pending_request = command
        logger.debug("session_request_pending", previous=previous, pending=command)

    def set_node(self, node: str) -> None:
        self.node = node
        logger.debug("session_node_set", node=node)

    def set_nodes(self, nodes: List[str]) -> None:
        self.nodes = list(nodes)
        logger.debug("session_nodes_set", count=len(self.nodes))

    def set_capabilities(self, capabilities: List[str]) -> None:
        self.capabilities = list(capabilities)
        logger.debug("session_capabilities_set", capabilities=self.capabilities)

    def record_response(self, text: str) -> None:
        self.last_response = text

    def has_capability(self, name: str) -> bool:
        """Check if a capability was negotiated."""
        return name in self.capabilities

    def snapshot(self) -> SessionSnapshot:
        """Create an immutable copy for callers."""
        return SessionSnapshot(
            pending_request=self.pending_request,
            node=self.node,
            nodes=list(self.nodes),
            capabilities=list(self.capabilities),
            last_response=self.last_response,
        )
