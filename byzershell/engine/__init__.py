"""
Byzer engine integration.

Starts a local engine process, posts scripts to it over HTTP and renders
its responses.
"""

from .client import PARSER_ERROR_PREFIX, EngineClient, is_parser_error
from .errors import EngineError, EngineRequestError, EngineStartError
from .launcher import EngineProcess, build_engine_command, find_available_port
from .render import JsonTable, TableFormat, parse_response, render_response, render_table

__all__ = [
    "EngineClient",
    "PARSER_ERROR_PREFIX",
    "is_parser_error",
    "EngineError",
    "EngineRequestError",
    "EngineStartError",
    "EngineProcess",
    "build_engine_command",
    "find_available_port",
    "JsonTable",
    "TableFormat",
    "parse_response",
    "render_response",
    "render_table",
]
