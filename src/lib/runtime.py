"""
Runtime support called by rewritten directive lines

A rewritten line such as

    __import__('printexpr').emit('$', 'line 13:', 's', (s))

evaluates its expression in place and hands the value to emit(), which
applies the sigil's evaluation context and writes one output line to the
sink.

Output sink lifecycle:
    handle_set(stream)   route all later output to stream
    handle_get()         the stream the next write goes to
    handle_reset()       back to the configured stream (stderr by default)

The sink is process-wide. Writes are plain sequential write() calls; a
sink shared between threads is responsible for its own locking.
"""

from typing import Any, Optional, TextIO

from ..config import appsettings
from ..models.directive import EvaluationContext, Sigil, SIGIL_CONTEXTS
from .formatter import CONTEXT_RENDERERS, references_render


class GenerationInvariantError(RuntimeError):
    """A directive carries a sigil outside the six recognized ones"""
    pass


_ABSENT = object()
_handle: Optional[TextIO] = None


def handle_set(stream: TextIO) -> None:
    """Send directive output to stream until reset"""
    global _handle
    _handle = stream


def handle_reset() -> None:
    """Forget the explicit handle; output follows the 'output' setting again"""
    global _handle
    _handle = None


def handle_get() -> TextIO:
    """
    Stream that receives the next directive output

    Returns:
        The handle set by handle_set(), or the configured standard stream
        looked up at call time
    """
    if _handle is not None:
        return _handle
    return appsettings.stream_resolve()


def context_lookup(sigil: Any) -> EvaluationContext:
    """
    Map a sigil (enum member or its character) to its evaluation context

    Raises:
        GenerationInvariantError: sigil is not one of the six
    """
    try:
        return SIGIL_CONTEXTS[Sigil(sigil)]
    except (ValueError, KeyError) as e:
        raise GenerationInvariantError(f"no evaluation context for sigil {sigil!r}") from e


def output_format(sigil: Any, label: str, text: Optional[str] = None, value: Any = _ABSENT) -> str:
    """
    Build the output text for one directive evaluation

    Args:
        sigil: Directive sigil
        label: User label or 'line N:'
        text: Expression text as written in the directive, or None
        value: Evaluated value (absent when text is None)

    Returns:
        The output without a trailing newline. For the \\ sigil this is a
        label line followed by one dump per item.
    """
    context = context_lookup(sigil)
    if text is None or value is _ABSENT:
        return label
    if context is EvaluationContext.REFERENCE_LIST:
        dumps = references_render(value, width=appsettings.dump_width)
        return "\n".join([f"{label} {text} ="] + dumps)
    return f"{label} {text} = {CONTEXT_RENDERERS[context](value)};"


def emit(
    sigil: Any,
    label: str,
    text: Optional[str] = None,
    value: Any = _ABSENT,
    *,
    handle: Optional[TextIO] = None,
) -> None:
    """
    Format one evaluated directive and write it to the sink

    Errors raised while formatting (e.g. a non-numeric value under '#', or a
    '%' value that does not yield pairs) propagate to the caller unchanged.

    Args:
        sigil: Directive sigil character
        label: User label or 'line N:'
        text: Expression text, or None for a label-only directive
        value: Value of the expression
        handle: Stream overriding the process-wide sink for this call
    """
    stream = handle if handle is not None else handle_get()
    stream.write(output_format(sigil, label, text, value) + "\n")
