"""
Directive specification models

Defines the sigils recognized in directive comments, the evaluation
context each sigil selects, and the Directive record produced by the
line matcher.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional


class Sigil(Enum):
    """
    The character following '#' in a directive comment

    Matching is case-sensitive and limited to exactly these six values.
    """
    SCALAR = "$"            # #${expr}
    STRING = '"'            # #"{expr}
    NUMBER = "#"            # ##{expr}
    LIST = "@"              # #@{expr}
    PAIRS = "%"             # #%{expr}
    REFERENCES = "\\"       # #\{expr}


class EvaluationContext(Enum):
    """
    How an expression value is interpreted and formatted

    Derived one-to-one from the Sigil via SIGIL_CONTEXTS.
    """
    SCALAR = "scalar"
    SCALAR_STRING = "scalar_string"
    SCALAR_NUMERIC = "scalar_numeric"
    LIST = "list"
    PAIR_LIST = "pair_list"
    REFERENCE_LIST = "reference_list"


SIGIL_CONTEXTS = {
    Sigil.SCALAR: EvaluationContext.SCALAR,
    Sigil.STRING: EvaluationContext.SCALAR_STRING,
    Sigil.NUMBER: EvaluationContext.SCALAR_NUMERIC,
    Sigil.LIST: EvaluationContext.LIST,
    Sigil.PAIRS: EvaluationContext.PAIR_LIST,
    Sigil.REFERENCES: EvaluationContext.REFERENCE_LIST,
}


@dataclass(frozen=True)
class Directive:
    """
    One directive comment extracted from a line of source

    Attributes:
        sigil: Which of the six sigils introduced the directive
        label: User label including its trailing colon (e.g. "calc:"), or None
        expression: Expression text with surrounding whitespace trimmed, or None
        line_number: 1-based position of the line in the original text
        indent: Indentation of the replacement statement; the matcher
                records the line's own leading whitespace

    Example:
        For "    #${ calc: len(a) * 2 }" on line 7:
        Directive(sigil=Sigil.SCALAR, label="calc:", expression="len(a) * 2",
                  line_number=7, indent="    ")
    """
    sigil: Sigil
    label: Optional[str]
    expression: Optional[str]
    line_number: int
    indent: str = ""

    @property
    def caption(self) -> str:
        """The user label, or 'line N:' when none was given"""
        if self.label is not None:
            return self.label
        return f"line {self.line_number}:"

    @property
    def context(self) -> Optional[EvaluationContext]:
        return SIGIL_CONTEXTS.get(self.sigil)
