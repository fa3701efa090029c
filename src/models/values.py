"""
Value models for directive output

A FormattedValue is the rendered form of one evaluated scalar. It is a
tagged variant: the kind decides how render() lays the text out, never
the expression that produced the value.
"""

from enum import Enum
from dataclasses import dataclass
from numbers import Number
from typing import Optional, Union


class ValueKind(Enum):
    """Variants of a formatted scalar"""
    STRING = "string"
    NUMBER = "number"
    DUAL = "dual"
    UNDEFINED = "undefined"
    REFERENCE = "reference"
    BLESSED = "blessed"


@dataclass(frozen=True)
class DualValue:
    """
    A value that is both a string and a number

    The two forms may differ textually (e.g. ' 42 ' and 42). Python has no
    implicit dual-natured values, so code that wants both forms shown
    builds one explicitly with dualvar().

    Attributes:
        number: Numeric form
        string: String form
    """
    number: Union[int, float]
    string: str

    def __str__(self) -> str:
        return self.string

    def __int__(self) -> int:
        return int(self.number)

    def __float__(self) -> float:
        return float(self.number)

    def __index__(self) -> int:
        return int(self.number)


def dualvar(number: Union[int, float], string: str) -> DualValue:
    """
    Build a value carrying a numeric and a string form

    Args:
        number: Numeric representation
        string: String representation

    Returns:
        DualValue rendered as 'string' : number by the $ sigil

    Example:
        >>> dualvar(42, ' 42 ')
        DualValue(number=42, string=' 42 ')
    """
    if isinstance(number, bool) or not isinstance(number, Number):
        raise TypeError(f"dualvar() number must be numeric, not {type(number).__name__}")
    if not isinstance(string, str):
        raise TypeError(f"dualvar() string must be str, not {type(string).__name__}")
    return DualValue(number=number, string=string)


@dataclass(frozen=True)
class FormattedValue:
    """
    Rendered text for one evaluated scalar

    Attributes:
        kind: Which variant this is
        text: String text, number text, reference tag or class name
        numeric: Numeric text of a DUAL value (None otherwise)
    """
    kind: ValueKind
    text: str = ""
    numeric: Optional[str] = None

    def render(self) -> str:
        """
        Lay out the value for an output line

        Example:
            >>> FormattedValue(ValueKind.DUAL, " 42 ", "42").render()
            "' 42 ' : 42"
        """
        if self.kind is ValueKind.STRING:
            return f"'{self.text}'"
        if self.kind is ValueKind.DUAL:
            return f"'{self.text}' : {self.numeric}"
        if self.kind is ValueKind.UNDEFINED:
            return "undef"
        if self.kind is ValueKind.BLESSED:
            return f"blessed({self.text})"
        # NUMBER and REFERENCE print their text unquoted
        return self.text
