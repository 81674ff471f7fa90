"""
Response grammars - validate and extract the payloads a node sends back

Each function receives a complete payload, already cut out of the stream
by the transport, and either returns the matching response record or
raises GrammarMismatch. Block responses (node list, config, fetch) must
end with a line holding a single "." right after the last content line.

Value lines share one numeric syntax: a decimal or exponential literal,
or "U" for an explicitly unknown value.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Tuple, Union

import structlog

from munin_protocol.grammar.combinators import (
    Parser,
    choice,
    keyword,
    literal,
    optional,
    separated,
    sequence,
    token,
    whitespace,
)
from munin_protocol.models import (
    UNKNOWN,
    BannerResponse,
    CapabilityResponse,
    ConfigResponse,
    FetchResponse,
    NodeListResponse,
    PluginListResponse,
)

logger = structlog.get_logger()

_INTEGER = re.compile(r"[-+]?[0-9]+")

FREE_TEXT_GRAPH_ATTRIBUTES = ("graph_title", "graph_vlabel", "graph_args", "graph_info")

_gap = whitespace(newlines=False)
_any_gap = whitespace()
_padding = whitespace(required=False)
_newline = literal("\n", name="newline")
_terminator = literal("\n.\n", name="block terminator")

hostname = token(r"\S+", name="hostname")
node_name = token(r"[^.\s]\S*", name="node name")
capability = token(r"[A-Za-z]+", name="capability")
plugin_name = token(r"[A-Za-z][A-Za-z0-9]*", name="plugin name")
field_name = token(r"[A-Za-z0-9_]+", name="field name")
attribute_name = token(r"(?!value\b)[A-Za-z_]+", name="field attribute")
free_text = token(r"[^\n]+", name="text")
value = token(r"U|[-+]?[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?", name="numeric value or U")


def to_field_value(raw: str) -> Union[int, float, str]:
    """Convert a value token to int, float or the unknown marker."""
    if raw == "U":
        return UNKNOWN
    if _INTEGER.fullmatch(raw):
        return int(raw)
    return float(raw)


# banner: "# munin node at <hostname>"

banner = sequence(
    literal("#"),
    _padding,
    keyword("munin"),
    _any_gap,
    keyword("node"),
    _any_gap,
    keyword("at"),
    _any_gap,
    hostname,
    optional(token(r"\r?\n", name="line terminator")),
).map(lambda values: values[8])

# nodes: one node per line, then "."

node_list = sequence(separated(node_name, _newline), _terminator).map(
    lambda values: values[0]
)

# cap: "cap <capability> ..."

capability_list = sequence(
    _padding,
    keyword("cap"),
    _gap,
    separated(capability, _gap),
    _padding,
).map(lambda values: values[3])

# list: plugin names separated by whitespace, possibly none

plugin_list = sequence(
    _padding,
    separated(plugin_name, _any_gap, min_count=0),
    _padding,
).map(lambda values: values[1])

# config and fetch blocks


def _graph_attribute(name: str, argument: Parser) -> Parser:
    return sequence(keyword(name), _gap, argument).map(
        lambda values: ("graph", name, values[2])
    )


update_rate_line = sequence(
    keyword("update_rate"), _gap, token(r"[0-9]+", name="seconds")
).map(lambda values: ("update_rate", int(values[2])))

graph_line = choice(
    *[_graph_attribute(name, free_text) for name in FREE_TEXT_GRAPH_ATTRIBUTES],
    _graph_attribute("graph_category", token(r"\w+", name="category")),
    _graph_attribute("graph_scale", token(r"yes|no", name="'yes' or 'no'")),
    _graph_attribute(
        "graph_period",
        token(r"second|minute|hour", name="'second', 'minute' or 'hour'"),
    ),
)

value_line = sequence(field_name, literal(".value"), _gap, value).map(
    lambda values: ("value", values[0], to_field_value(values[3]))
)

field_attribute_line = sequence(
    field_name, literal("."), attribute_name, _gap, free_text
).map(lambda values: ("field", values[0], values[2], values[4]))

config_line = choice(update_rate_line, graph_line, value_line, field_attribute_line)

config_block = sequence(separated(config_line, _newline), _terminator).map(
    lambda values: values[0]
)

fetch_block = sequence(separated(value_line, _newline), _terminator).map(
    lambda values: values[0]
)

# spoolfetch: config lines plus values stamped with the epoch they were taken

spooled_value_line = sequence(
    field_name,
    literal(".value"),
    _gap,
    optional(token(r"[0-9]+:", name="timestamp")),
    value,
).map(lambda values: ("value", values[0], to_field_value(values[4])))

spool_line = choice(
    update_rate_line, graph_line, spooled_value_line, field_attribute_line
)

spool_block = sequence(separated(spool_line, _newline), _terminator).map(
    lambda values: values[0]
)


def parse_banner(text: str) -> BannerResponse:
    """Parse the greeting a node sends when the connection opens."""
    node = banner.parse(text, "banner")
    return BannerResponse(node=node)


def parse_node_list(text: str) -> NodeListResponse:
    """Parse the answer to `nodes`."""
    nodes = node_list.parse(text, "nodes")
    return NodeListResponse(nodes=nodes)


def parse_capabilities(text: str) -> CapabilityResponse:
    """Parse the answer to `cap`."""
    capabilities = capability_list.parse(text, "cap")
    return CapabilityResponse(capabilities=capabilities)


def parse_plugin_list(text: str) -> PluginListResponse:
    """Parse the answer to `list`; an empty list is valid."""
    plugins = plugin_list.parse(text, "list")
    return PluginListResponse(plugins=plugins)


def parse_config_block(text: str) -> ConfigResponse:
    """
    Parse the answer to `config <plugin>`.

    Lines are classified independently, so their order does not matter.
    A repeated line overrides the earlier one.

    Raises:
        GrammarMismatch: If any line has none of the known shapes or the
            block terminator is missing
    """
    return _config_response(config_block.parse(text, "config"))


def parse_spool_block(text: str) -> ConfigResponse:
    """
    Parse the answer to `spoolfetch <timestamp>`.

    Same lines as a config block, except that values may carry an
    "<epoch>:" prefix. The prefix is dropped and the last value per field
    wins.
    """
    return _config_response(spool_block.parse(text, "spoolfetch"))


def _config_response(lines: List[Tuple[Any, ...]]) -> ConfigResponse:
    update_rate = None
    graph_attributes: Dict[str, str] = {}
    per_field: Dict[str, Dict[str, str]] = {}
    values: Dict[str, Any] = {}

    for line in lines:
        kind = line[0]
        if kind == "update_rate":
            update_rate = line[1]
        elif kind == "graph":
            graph_attributes[line[1]] = line[2]
        elif kind == "value":
            values[line[1]] = line[2]
        else:
            per_field.setdefault(line[1], {})[line[2]] = line[3]

    logger.debug(
        "config_block_parsed",
        lines=len(lines),
        fields=len(per_field),
        inline_values=len(values),
    )
    return ConfigResponse(
        update_rate=update_rate,
        graph_attributes=graph_attributes,
        per_field=per_field,
        values=values,
    )


def parse_fetch_block(text: str) -> FetchResponse:
    """Parse the answer to `fetch <plugin>`."""
    lines = fetch_block.parse(text, "fetch")
    return FetchResponse(values={name: field_value for _, name, field_value in lines})
