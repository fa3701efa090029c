"""
Line matcher for directive comments

Recognizes lines of the shape

    <hspace>#<sigil>{<hspace><label:><hspace><expression>}<hspace>

and extracts sigil, optional label and optional expression. Any other line
is not a directive and is left alone by the filter.

Example:
    >>> d = match_line("#${ calc: len(a) * 2 }", 7)
    >>> d.label, d.expression, d.caption
    ('calc:', 'len(a) * 2', 'calc:')
    >>> match_line("# just a comment", 8) is None
    True
"""

import re
from typing import Optional

from ..models.directive import Directive, Sigil

# Horizontal whitespace: \s without the line and page separators
HSPACE = r"[^\S\n\r\f\v\x1c-\x1f\x85\u2028\u2029]"

DIRECTIVE_PATTERN = re.compile(
    rf"(?P<indent>{HSPACE}*)"
    r"#(?P<sigil>[%@$\\\"#])\{"
    rf"{HSPACE}*(?P<label>[A-Za-z_]\w*:)?"
    rf"{HSPACE}*(?P<expression>\S.*\S|\S)?"
    rf"{HSPACE}*\}}{HSPACE}*"
)


def match_line(text: str, line_number: int) -> Optional[Directive]:
    """
    Extract a directive from one line of text

    Args:
        text: The line, without its line terminator (a trailing '\\r' is ignored)
        line_number: 1-based position of the line in the source

    Returns:
        Directive if the whole line is a directive comment, otherwise None.
        Label and expression are None when absent; a whitespace-only
        interior leaves both absent.
    """
    if text.endswith("\r"):
        text = text[:-1]
    match = DIRECTIVE_PATTERN.fullmatch(text)
    if match is None:
        return None
    return Directive(
        sigil=Sigil(match.group("sigil")),
        label=match.group("label"),
        expression=match.group("expression"),
        line_number=line_number,
        indent=match.group("indent"),
    )
