"""
printexpr - Debug print directives in Python comments

Comment lines such as ``#${ value }`` or ``#@{ items }`` become statements
printing the expression and its value when the source filter is applied,
and stay harmless comments when it is not.
"""

__version__ = "1.0.0"

from .lib import (
    match_line,
    generate,
    execute,
    emit,
    handle_get,
    handle_set,
    handle_reset,
    isstring,
    isnumeric,
    SourceFilter,
    transform,
    install,
    uninstall,
)
from .models import dualvar, DualValue

__all__ = [
    "match_line",
    "generate",
    "execute",
    "emit",
    "handle_get",
    "handle_set",
    "handle_reset",
    "isstring",
    "isnumeric",
    "SourceFilter",
    "transform",
    "install",
    "uninstall",
    "dualvar",
    "DualValue",
    "__version__",
]
