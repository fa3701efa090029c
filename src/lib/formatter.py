"""
Value formatting for directive output

Turns evaluated values into the text that follows '=' in an output line.
Each evaluation context has a renderer:

    SCALAR          'text' | 42 | 'str' : 42 | undef | ARRAY(0x..) | blessed(Cls)
    SCALAR_STRING   'text'            (str() coercion)
    SCALAR_NUMERIC  42                (numeric coercion)
    LIST            ('a', 'b', 3)
    PAIR_LIST       ('k' => 'v', 'n' => 1)
    REFERENCE_LIST  _[0] = <dump>;    (one line or block per item)

Scalars are first classified into a FormattedValue; rendering is a pure
function of that variant.
"""

import types
from collections.abc import Iterable as IterableABC, Mapping
from numbers import Number
from typing import Any, Callable, Dict, Iterable, List, Tuple

from rich.pretty import pretty_repr

from ..models.directive import EvaluationContext
from ..models.values import DualValue, FormattedValue, ValueKind

# Tags for unblessed references, keyed by builtin type
REFERENCE_TAGS: Dict[type, str] = {
    list: "ARRAY",
    tuple: "ARRAY",
    dict: "HASH",
    types.FunctionType: "CODE",
    types.BuiltinFunctionType: "CODE",
    types.MethodType: "CODE",
}


def isstring(value: Any) -> bool:
    """True if value has a string form (str or DualValue)"""
    return isinstance(value, (str, DualValue))


def isnumeric(value: Any) -> bool:
    """True if value has a numeric form (a Number or DualValue)"""
    return isinstance(value, (Number, DualValue))


def number_text(value: Any) -> str:
    """Natural decimal text of a number; floats keep their shortest repr, bools are 1 or 0"""
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, float):
        return repr(value)
    return str(value)


def bytes_decode(value: Any) -> Any:
    """UTF-8 text of bytes and bytearrays, undecodable bytes escaped; other values as is"""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", "backslashreplace")
    return value


def reference_tag(value: Any) -> str:
    tag = REFERENCE_TAGS.get(type(value), type(value).__name__.upper())
    return f"{tag}(0x{id(value):x})"


def value_classify(value: Any) -> FormattedValue:
    """
    Classify one scalar into a FormattedValue

    Instances of builtin types are unblessed references; instances of any
    other class are blessed references shown by class name.

    Args:
        value: Any Python value

    Returns:
        FormattedValue of the matching kind
    """
    if value is None:
        return FormattedValue(ValueKind.UNDEFINED)
    if isinstance(value, DualValue):
        return FormattedValue(ValueKind.DUAL, value.string, number_text(value.number))
    if isinstance(value, str):
        return FormattedValue(ValueKind.STRING, value)
    if isinstance(value, (bytes, bytearray)):
        return FormattedValue(ValueKind.STRING, bytes_decode(value))
    if isinstance(value, Number):
        return FormattedValue(ValueKind.NUMBER, number_text(value))
    if type(value).__module__ == "builtins":
        return FormattedValue(ValueKind.REFERENCE, reference_tag(value))
    return FormattedValue(ValueKind.BLESSED, type(value).__qualname__)


def scalar_render(value: Any) -> str:
    return value_classify(value).render()


def string_render(value: Any) -> str:
    """
    Render value coerced to a string

    DualValue gives its string form; None stays undef; bytes are decoded.
    Everything else goes through str(), so objects with __str__ print what
    they define.
    """
    if value is None:
        return FormattedValue(ValueKind.UNDEFINED).render()
    return FormattedValue(ValueKind.STRING, str(bytes_decode(value))).render()


def number_coerce(value: Any) -> Any:
    """
    Coerce value to a number

    Raises:
        ValueError: for strings that are not numeric literals
        TypeError: for values with no numeric form
    """
    if isinstance(value, DualValue):
        return value.number
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, Number):
        return value
    if isinstance(value, (str, bytes, bytearray)):
        try:
            return int(value)
        except ValueError:
            return float(value)
    return float(value)


def number_render(value: Any) -> str:
    if value is None:
        return FormattedValue(ValueKind.UNDEFINED).render()
    return FormattedValue(ValueKind.NUMBER, number_text(number_coerce(value))).render()


def list_render(value: Any) -> str:
    """
    Render every element of an iterable as a scalar: ('a', 'b', 3)

    Strings, bytes, dual values and non-iterables are a list of one.
    """
    if isinstance(value, (str, bytes, bytearray, DualValue)) or not isinstance(value, IterableABC):
        value = [value]
    return "(" + ", ".join(scalar_render(item) for item in value) + ")"


def pairs_iterate(value: Any) -> List[Tuple[Any, Any]]:
    """
    Turn a value into key/value pairs

    Mappings give their items in insertion order. Lists, tuples and ranges
    are paired positionally (index, element). Any other iterable must
    yield two-item entries; unpacking errors from the interpreter are not
    caught.

    Raises:
        ValueError: an entry does not unpack into exactly two items
        TypeError: value is not iterable
    """
    if isinstance(value, Mapping):
        return list(value.items())
    if isinstance(value, (list, tuple, range)):
        return list(enumerate(value))
    return [(key, item) for key, item in value]


def pairs_render(value: Any) -> str:
    """Render key/value pairs: ('k' => 'v', 'n' => 1)"""
    pairs = pairs_iterate(value)
    return "(" + ", ".join(
        f"{scalar_render(key)} => {scalar_render(item)}" for key, item in pairs
    ) + ")"


def references_render(values: Iterable[Any], width: int = 80) -> List[str]:
    """
    Dump each value as a synthetic positional parameter

    Args:
        values: The evaluated items
        width: Maximum line width passed to the structured dumper

    Returns:
        One string per item, e.g. "_[0] = [1, 2, 3];" (may span lines)
    """
    return [
        f"_[{index}] = {pretty_repr(item, max_width=width)};"
        for index, item in enumerate(values)
    ]


CONTEXT_RENDERERS: Dict[EvaluationContext, Callable[[Any], str]] = {
    EvaluationContext.SCALAR: scalar_render,
    EvaluationContext.SCALAR_STRING: string_render,
    EvaluationContext.SCALAR_NUMERIC: number_render,
    EvaluationContext.LIST: list_render,
    EvaluationContext.PAIR_LIST: pairs_render,
}
