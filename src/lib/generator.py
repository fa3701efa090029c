"""
Code generator for directives

Turns a matched Directive into an OutputAction: the single line of Python
that replaces the directive comment, which can also be run directly with
an evaluation backend.

Example:
    >>> action = generate(match_line("#${ s }", 13))
    >>> action.code
    "__import__('printexpr').emit('$', 'line 13:', 's', (s))"
    >>> action(lambda source: eval(source, {"s": "a scalar"}))
    # writes "line 13: s = 'a scalar';" to the sink
"""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Optional, TextIO

from ..models.directive import Directive, EvaluationContext
from .matcher import match_line
from .runtime import GenerationInvariantError, emit

RUNTIME_MODULE = "printexpr"


@dataclass(frozen=True)
class OutputAction:
    """
    Replacement code for one directive, runnable in place

    Attributes:
        directive: The directive this action was generated from
        code: Python statement (no indentation, no newline)
        source: Expression source the statement evaluates, already wrapped
                for its context ("(expr)" or "[expr]"), or None

    Calling the action evaluates source with the given backend and writes
    the output line, exactly as the generated statement would.
    """
    directive: Directive
    code: str
    source: Optional[str]

    @property
    def line(self) -> str:
        """The replacement line: original indentation followed by code"""
        return self.directive.indent + self.code

    def __call__(
        self,
        evaluate: Optional[Callable[[str], Any]] = None,
        handle: Optional[TextIO] = None,
    ) -> None:
        """
        Run the directive without rewriting source

        Args:
            evaluate: Evaluation backend taking the expression source and
                      returning its value. Required when the directive has
                      an expression. Its exceptions propagate.
            handle: Optional stream overriding the process-wide sink
        """
        directive = self.directive
        if self.source is None:
            emit(directive.sigil.value, directive.caption, handle=handle)
            return
        if evaluate is None:
            raise ValueError(f"{directive.caption} needs an evaluation backend for {directive.expression!r}")
        emit(
            directive.sigil.value,
            directive.caption,
            directive.expression,
            evaluate(self.source),
            handle=handle,
        )


def source_wrap(directive: Directive) -> Optional[str]:
    """
    Wrap the expression for evaluation under the directive's context

    The reference-list context collects a comma list into one list so each
    item is dumped separately; every other context parenthesizes.
    """
    if directive.expression is None:
        return None
    if directive.context is EvaluationContext.REFERENCE_LIST:
        return f"[{directive.expression}]"
    return f"({directive.expression})"


def generate(directive: Directive) -> OutputAction:
    """
    Generate the replacement statement for a directive

    Args:
        directive: Directive produced by match_line()

    Returns:
        OutputAction whose code is a single line

    Raises:
        GenerationInvariantError: directive sigil has no evaluation context
    """
    if directive.context is None:
        raise GenerationInvariantError(f"no evaluation context for sigil {directive.sigil!r}")

    source = source_wrap(directive)
    arguments = [repr(directive.sigil.value), repr(directive.caption)]
    if source is not None:
        arguments += [repr(directive.expression), source]
    code = f"__import__({RUNTIME_MODULE!r}).emit({', '.join(arguments)})"
    return OutputAction(directive=directive, code=code, source=source)


def execute(text: str, handle: Optional[TextIO] = None) -> None:
    """
    Evaluate one directive in the caller's frame

    Direct-execution counterpart of the source filter, for interactive use:

        >>> s = 'a scalar'
        >>> execute("#${ s }")
        line 1: s = 'a scalar';

    The default label uses the caller's current line number.

    Args:
        text: A directive line, e.g. "#@{ items }"
        handle: Optional stream overriding the process-wide sink

    Raises:
        ValueError: text is not a directive line
    """
    frame = inspect.currentframe().f_back
    try:
        directive = match_line(text, frame.f_lineno)
        if directive is None:
            raise ValueError(f"not a directive: {text!r}")
        generate(directive)(
            lambda source: eval(source, frame.f_globals, frame.f_locals),
            handle=handle,
        )
    finally:
        del frame
