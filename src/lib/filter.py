"""
Source filter for Python text

Walks source line by line and replaces every directive comment with the
statement generated for it. The output has exactly as many lines as the
input, so tracebacks and line-based labels keep pointing at the original
positions.

Only whole-line comments outside brackets are candidates: the tokenizer
tells them apart from text inside strings or from comments in the middle
of a bracketed expression, where a statement could not be placed.

A comment may sit at any column, a statement may not. Each replacement
is indented to the block the tokenizer places it in, and comments between
a decorator and its definition stay comments.

Example:
    >>> print(transform("s = 'a scalar'\\n#${ s }\\n"))
    s = 'a scalar'
    __import__('printexpr').emit('$', 'line 2:', 's', (s))
"""

import io
import sys
import tokenize
from dataclasses import replace
from typing import Dict, List, Optional, TextIO, Tuple

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import PythonLexer

from ..config import appsettings
from ..models.directive import Directive
from .generator import generate
from .log import LOG
from .matcher import match_line

OPENING_BRACKETS = ("(", "[", "{")
CLOSING_BRACKETS = (")", "]", "}")

# Clauses that continue the statement above them; nothing may sit between
CONTINUATION_KEYWORDS = ("else", "elif", "except", "finally")

# Tokens that never start a logical line
LAYOUT_TOKENS = (
    tokenize.COMMENT,
    tokenize.NL,
    tokenize.NEWLINE,
    tokenize.INDENT,
    tokenize.DEDENT,
    tokenize.ENCODING,
    tokenize.ENDMARKER,
)


def indent_choose(column: int, levels: List[str]) -> str:
    """
    Pick the indentation for a comment at column among the valid levels

    The deepest level not right of the comment wins; a comment left of
    every level takes the shallowest one.
    """
    fitting = [level for level in levels if len(level) <= column]
    if fitting:
        return max(fitting, key=len)
    return min(levels, key=len)


def comments_locate(source: str) -> Optional[Dict[int, str]]:
    """
    Find lines holding nothing but a comment, outside any bracket

    Each comment is given the indentation a statement needs at its
    position: the body of a block header above it, or the open block
    closest to the comment's own column. Comments between a decorator and
    the definition it decorates are left out, as no statement may go there.

    Args:
        source: Python source text

    Returns:
        Mapping of 1-based line number to replacement indentation, or None
        when the source cannot be tokenized (every line is then a candidate
        and compiling the result reports the real error)
    """
    found: Dict[int, str] = {}
    pending: List[Tuple[int, int]] = []
    blocks = [""]
    depth = 0
    line_start = True
    after_decorator = False
    try:
        for token in tokenize.generate_tokens(io.StringIO(source).readline):
            if token.type == tokenize.COMMENT:
                standalone = depth == 0 and not token.line[:token.start[1]].strip()
                if standalone and not after_decorator:
                    pending.append(token.start)
                continue
            if token.type == tokenize.NEWLINE:
                line_start = True
                continue
            if token.type == tokenize.ENDMARKER:
                for line_number, column in pending:
                    found[line_number] = indent_choose(column, blocks)
                continue
            if token.type in LAYOUT_TOKENS:
                continue

            if line_start:
                indent = token.line[:token.start[1]]
                if len(indent) > len(blocks[-1]):
                    levels = [indent]
                    blocks.append(indent)
                else:
                    levels = [level for level in blocks if len(level) >= len(indent)]
                    while len(blocks) > 1 and len(blocks[-1]) > len(indent):
                        blocks.pop()
                    if token.type == tokenize.NAME and token.string in CONTINUATION_KEYWORDS:
                        levels = [level for level in levels if len(level) > len(indent)] or [indent]
                for line_number, column in pending:
                    found[line_number] = indent_choose(column, levels)
                pending = []
                after_decorator = token.type == tokenize.OP and token.string == "@"
                line_start = False

            if token.type == tokenize.OP and token.string in OPENING_BRACKETS:
                depth += 1
            elif token.type == tokenize.OP and token.string in CLOSING_BRACKETS:
                depth -= 1
    except (tokenize.TokenError, SyntaxError) as e:
        LOG(f"Tokenizer stopped ({e}); scanning every line", level=2)
        return None
    return found


class SourceFilter:
    """
    Rewrites directive comments in source text

    Handles:
    - Disable switch (source returned unchanged)
    - Line-count preservation
    - Tracing of the rewritten source
    """

    def __init__(
        self,
        enabled: Optional[bool] = None,
        trace: Optional[bool] = None,
        trace_stream: Optional[TextIO] = None,
        trace_color: Optional[bool] = None,
    ) -> None:
        """
        Initialize the filter

        Arguments left as None take their value from appsettings.

        Args:
            enabled: Rewrite directives; when False the filter is a no-op
            trace: Echo rewritten source after each transform
            trace_stream: Stream for the trace (stderr at write time if None)
            trace_color: Highlight the trace with pygments
        """
        self.enabled = appsettings.enabled if enabled is None else enabled
        self.trace = appsettings.trace if trace is None else trace
        self.trace_color = appsettings.trace_color if trace_color is None else trace_color
        self.trace_stream = trace_stream
        self.directives: List[Directive] = []

    def line_filter(self, line: str, line_number: int, indent: Optional[str] = None) -> str:
        """
        Rewrite one line if it is a directive

        Args:
            line: One line without its '\\n' terminator
            line_number: 1-based line number
            indent: Indentation for the replacement (the line's own if None)

        Returns:
            The replacement statement, or line unchanged
        """
        directive = match_line(line, line_number)
        if directive is None:
            return line
        if indent is not None:
            directive = replace(directive, indent=indent)
        self.directives.append(directive)
        action = generate(directive)
        LOG(f"line {line_number}: {line.strip()} -> {action.code}", level=3)
        # keep a '\r' that preceded the '\n'
        return action.line + ("\r" if line.endswith("\r") else "")

    def source_transform(self, source: str, filename: str = "<string>") -> str:
        """
        Rewrite all directive lines in source

        Args:
            source: Python source text
            filename: Name used in log and trace output

        Returns:
            Transformed text with the same number of lines
        """
        self.directives = []
        if not self.enabled:
            LOG(f"Filter disabled, {filename} left as is", level=2)
            return source

        candidates = comments_locate(source)
        lines = source.split("\n")
        for index, line in enumerate(lines):
            line_number = index + 1
            if candidates is None:
                lines[index] = self.line_filter(line, line_number)
            elif line_number in candidates:
                lines[index] = self.line_filter(line, line_number, candidates[line_number])
        result = "\n".join(lines)

        LOG(f"Rewrote {len(self.directives)} directive(s) in {filename}", level=1)
        if self.trace:
            self.trace_write(result, filename)
        return result

    def trace_write(self, source: str, filename: str) -> None:
        """Echo rewritten source to the trace stream"""
        stream = self.trace_stream if self.trace_stream is not None else sys.stderr
        text = highlight(source, PythonLexer(), TerminalFormatter()) if self.trace_color else source
        stream.write(f"# printexpr: {filename}\n")
        stream.write(text if text.endswith("\n") else text + "\n")


def transform(source: str, filename: str = "<string>", **options) -> str:
    """
    Rewrite directive comments in source with a one-off SourceFilter

    Args:
        source: Python source text
        filename: Name used in log and trace output
        **options: SourceFilter keyword arguments (enabled, trace, ...)
    """
    return SourceFilter(**options).source_transform(source, filename)
