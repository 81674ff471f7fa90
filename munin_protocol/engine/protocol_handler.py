"""
Protocol Handler - stateful decoder for one Munin master/node connection

The handler remembers the last accepted request and uses it to select the
grammar for the next response:

    handler = ProtocolHandler()
    handler.parse_response("# munin node at node1.example.com\\n")

    handler.parse_request("cap multigraph dirtyconfig")
    handler.parse_response("cap multigraph dirtyconfig\\n")

    handler.parse_request("list")
    plugins = handler.parse_response("cpu load memory\\n")

    handler.parse_request("fetch load")
    values = handler.parse_response("load.value 0.42\\n.\\n")

Malformed input yields a ParseFailure and leaves the session untouched.
Offering a response while the pending request is one the node never
answers (quit, help) raises UnhandledRequestKind instead: that is a bug in
the caller, not bad wire data.

A handler is not thread-safe. Use one per connection.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Union

import structlog

from munin_protocol.config import Settings, get_settings
from munin_protocol.engine.session_state import SessionState
from munin_protocol.exceptions import GrammarMismatch, UnhandledRequestKind
from munin_protocol.grammar import (
    parse_banner,
    parse_capabilities,
    parse_config_block,
    parse_fetch_block,
    parse_node_list,
    parse_plugin_list,
    parse_request_line,
    parse_spool_block,
)
from munin_protocol.models import (
    BANNER,
    BannerResponse,
    CapabilityResponse,
    Command,
    NodeListResponse,
    ParseFailure,
    Request,
    ResponseRecord,
    SessionSnapshot,
)

logger = structlog.get_logger()

ResponseHandler = Callable[[str], ResponseRecord]


class ProtocolHandler:
    """
    Parses requests and responses for one connection and keeps its state.

    Args:
        settings: Optional settings override (response size limit)
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._state = SessionState()
        self._dispatch: Dict[str, ResponseHandler] = {
            BANNER: self._handle_banner,
            Command.CAP.value: self._handle_cap,
            Command.NODES.value: self._handle_nodes,
            Command.LIST.value: parse_plugin_list,
            Command.CONFIG.value: parse_config_block,
            Command.FETCH.value: parse_fetch_block,
            Command.SPOOLFETCH.value: parse_spool_block,
        }

    # Observation

    @property
    def pending_request(self) -> str:
        return self._state.pending_request

    @property
    def node(self) -> str:
        return self._state.node

    @property
    def nodes(self) -> List[str]:
        return list(self._state.nodes)

    @property
    def capabilities(self) -> List[str]:
        return list(self._state.capabilities)

    @property
    def last_response(self) -> str:
        return self._state.last_response

    def has_capability(self, name: str) -> bool:
        return self._state.has_capability(name)

    def expects_response(self) -> bool:
        """Check if a response grammar is registered for the pending request."""
        return self._state.pending_request in self._dispatch

    def snapshot(self) -> SessionSnapshot:
        return self._state.snapshot()

    # Parsing

    def parse_request(self, line: str) -> Union[Request, ParseFailure]:
        """
        Parse a master request line.

        On success the request becomes the pending request, which selects
        the grammar used by the next parse_response call.

        Args:
            line: Request line, e.g. "fetch load"

        Returns:
            Request on success, ParseFailure otherwise
        """
        try:
            request = parse_request_line(line)
        except GrammarMismatch as e:
            logger.info(
                "request_rejected",
                pending=self._state.pending_request,
                reason=e.message,
            )
            return ParseFailure.from_error(e)

        self._state.record_request(request.command.value)
        logger.info(
            "request_parsed",
            command=request.command.value,
            arguments=list(request.arguments),
        )
        return request

    def parse_response(self, text: str) -> Union[ResponseRecord, ParseFailure]:
        """
        Parse a node response with the grammar for the pending request.

        Args:
            text: Complete response payload, including any block terminator

        Returns:
            The response record on success, ParseFailure otherwise

        Raises:
            UnhandledRequestKind: If the pending request has no response
                grammar (quit, help)
        """
        pending = self._state.pending_request
        handler = self._dispatch.get(pending)
        if handler is None:
            logger.error("response_without_handler", pending=pending)
            raise UnhandledRequestKind(pending)

        size = len(text.encode("utf-8"))
        if size > self.settings.max_response_bytes:
            logger.warning(
                "response_too_large",
                pending=pending,
                size=size,
                limit=self.settings.max_response_bytes,
            )
            return ParseFailure(
                grammar="size",
                text=text,
                reason=(
                    f"response exceeds {self.settings.max_response_bytes} bytes"
                ),
            )

        try:
            record = handler(text)
        except GrammarMismatch as e:
            logger.info("response_rejected", pending=pending, reason=e.message)
            return ParseFailure.from_error(e)

        self._state.record_response(text)
        logger.info("response_parsed", pending=pending, kind=record.kind)
        return record

    # State folding, run only after the grammar matched

    def _handle_banner(self, text: str) -> BannerResponse:
        record = parse_banner(text)
        self._state.set_node(record.node)
        return record

    def _handle_nodes(self, text: str) -> NodeListResponse:
        record = parse_node_list(text)
        self._state.set_nodes(record.nodes)
        return record

    def _handle_cap(self, text: str) -> CapabilityResponse:
        record = parse_capabilities(text)
        self._state.set_capabilities(record.capabilities)
        return record
