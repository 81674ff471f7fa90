"""
Core data models

Every parse outcome, successful or not, exposes the same three accessors:
is_ok() for the success check, as_text() for a display string and
fields() for the structured values.
"""
from enum import Enum
from typing import Any, ClassVar, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field

from munin_protocol.exceptions import GrammarMismatch

BANNER = "banner"
UNKNOWN = "unknown"

FieldValue = Union[int, float, Literal["unknown"]]


class Command(str, Enum):
    """Request commands a master may send"""

    CAP = "cap"
    LIST = "list"
    NODES = "nodes"
    QUIT = "quit"
    HELP = "help"
    CONFIG = "config"
    FETCH = "fetch"
    SPOOLFETCH = "spoolfetch"


class ParseOutcome(BaseModel):
    """Common accessors for anything returned by the protocol handler"""

    model_config = {"frozen": True}

    def is_ok(self) -> bool:
        return True

    def as_text(self) -> str:
        return ""

    def fields(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    def raise_for_failure(self) -> None:
        """Raise the underlying error for failures; no-op on success."""
        return None

    def __bool__(self) -> bool:
        return self.is_ok()

    def __str__(self) -> str:
        return self.as_text()


class Request(ParseOutcome):
    """A validated master request line"""

    command: Command
    arguments: Tuple[str, ...] = ()
    statement: str

    def as_text(self) -> str:
        return self.statement

    def fields(self) -> Dict[str, Any]:
        return {
            "command": self.command.value,
            "arguments": list(self.arguments),
            "statement": self.statement,
        }


class ParseFailure(ParseOutcome):
    """Failure variant: the text did not match the expected grammar"""

    grammar: str
    text: str
    reason: str
    position: Optional[int] = None
    expected: Optional[str] = None

    @classmethod
    def from_error(cls, error: GrammarMismatch) -> "ParseFailure":
        return cls(
            grammar=error.grammar,
            text=error.text,
            reason=error.message,
            position=error.position,
            expected=error.expected,
        )

    def is_ok(self) -> bool:
        return False

    def as_text(self) -> str:
        return self.reason

    def to_error(self) -> GrammarMismatch:
        return GrammarMismatch(
            self.reason,
            grammar=self.grammar,
            text=self.text,
            position=self.position,
            expected=self.expected,
        )

    def raise_for_failure(self) -> None:
        raise self.to_error()


class ResponseRecord(ParseOutcome):
    """Base class for parsed node responses"""

    kind: ClassVar[str] = ""


class BannerResponse(ResponseRecord):
    """Greeting sent by a node when a connection opens"""

    kind: ClassVar[str] = "banner"

    node: str

    def as_text(self) -> str:
        return self.node


class NodeListResponse(ResponseRecord):
    """Answer to `nodes`"""

    kind: ClassVar[str] = "nodes"

    nodes: List[str]

    def as_text(self) -> str:
        return " ".join(self.nodes)


class CapabilityResponse(ResponseRecord):
    """Answer to `cap`"""

    kind: ClassVar[str] = "cap"

    capabilities: List[str]

    def as_text(self) -> str:
        return " ".join(self.capabilities)


class PluginListResponse(ResponseRecord):
    """Answer to `list`"""

    kind: ClassVar[str] = "list"

    plugins: List[str] = Field(default_factory=list)

    def as_text(self) -> str:
        return " ".join(self.plugins)


class ConfigResponse(ResponseRecord):
    """
    Answer to `config <plugin>`

    values is only populated when the node inlines data lines, which it
    does after dirtyconfig was negotiated.
    """

    kind: ClassVar[str] = "config"

    update_rate: Optional[int] = None
    graph_attributes: Dict[str, str] = Field(default_factory=dict)
    per_field: Dict[str, Dict[str, str]] = Field(default_factory=dict)
    values: Dict[str, FieldValue] = Field(default_factory=dict)

    def as_text(self) -> str:
        return self.graph_attributes.get("graph_title", "")


class FetchResponse(ResponseRecord):
    """Answer to `fetch <plugin>`"""

    kind: ClassVar[str] = "fetch"

    values: Dict[str, FieldValue]

    def as_text(self) -> str:
        return " ".join(f"{name}={value}" for name, value in self.values.items())


class SessionSnapshot(BaseModel):
    """Read-only copy of a handler's session state"""

    model_config = {"frozen": True}

    pending_request: str = BANNER
    node: str = ""
    nodes: List[str] = Field(default_factory=list)
    capabilities: List[str] = Field(default_factory=list)
    last_response: str = ""
