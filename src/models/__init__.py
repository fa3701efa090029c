"""
Models package for printexpr

Contains data structures and type definitions for matching, formatting
and the runner pipeline.
"""

from .state import ProgramState, pipeline
from .directive import Directive, Sigil, EvaluationContext, SIGIL_CONTEXTS
from .values import DualValue, FormattedValue, ValueKind, dualvar

__all__ = [
    "ProgramState",
    "pipeline",
    "Directive",
    "Sigil",
    "EvaluationContext",
    "SIGIL_CONTEXTS",
    "DualValue",
    "FormattedValue",
    "ValueKind",
    "dualvar",
]
