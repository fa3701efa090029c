"""
printexpr - Debug print directives in Python comments

Core engine: line matcher, code generator, value formatter, source filter
and import hook.
"""

__version__ = "1.0.0"

from .matcher import match_line
from .generator import generate, execute, OutputAction
from .runtime import emit, handle_get, handle_set, handle_reset, GenerationInvariantError
from .formatter import isstring, isnumeric
from .filter import SourceFilter, transform
from .importer import install, uninstall
from .log import LOG, state_connectToLogger

__all__ = [
    "match_line",
    "generate",
    "execute",
    "OutputAction",
    "emit",
    "handle_get",
    "handle_set",
    "handle_reset",
    "GenerationInvariantError",
    "isstring",
    "isnumeric",
    "SourceFilter",
    "transform",
    "install",
    "uninstall",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
