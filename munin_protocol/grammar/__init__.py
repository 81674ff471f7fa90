"""Grammar set: one parser per request or response form."""
from munin_protocol.grammar.request import parse_request_line
from munin_protocol.grammar.responses import (
    parse_banner,
    parse_capabilities,
    parse_config_block,
    parse_fetch_block,
    parse_node_list,
    parse_plugin_list,
    parse_spool_block,
)

__all__ = [
    "parse_request_line",
    "parse_banner",
    "parse_capabilities",
    "parse_config_block",
    "parse_fetch_block",
    "parse_node_list",
    "parse_plugin_list",
    "parse_spool_block",
]
