"""Runtime values of the nytric language and the coercions between them.

There are two kinds of value: numbers (Python floats) and text (Python strs). Comparisons produce bools, and None is
the "no value" marker returned by calls that never return, by read at end of input and by wipe/pause.
"""

import math
import re

from nytric.lang.error import OperandTypeError


EPSILON = 1e-12  # numbers closer to zero than this are falsy
DECIMAL = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")  # a number literal, optionally negative


def is_number(value):
    return isinstance(value, float) and not isinstance(value, bool)


def render(value):
    """Returns the textual form of value, as printed and as used for concatenation/textual comparison."""
    if value is None:
        return ""
    elif isinstance(value, bool):
        return str(value)
    elif isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and abs(value) < 1e16:
            return str(int(value))
        return repr(value)
    return str(value)


def to_number(value, context=None):
    """Numeric coercion of value. Text must spell a decimal number."""
    if value is None:
        return 0.0
    elif isinstance(value, (bool, int, float)):
        return float(value)

    text = str(value).strip()
    if not DECIMAL.fullmatch(text):
        raise OperandTypeError("cannot use text '{}' as a number", text, context=context)
    return float(text)


def truthy(value):
    if value is None:
        return False
    elif isinstance(value, bool):
        return value
    elif isinstance(value, float):
        return abs(value) > EPSILON
    elif isinstance(value, str):
        return len(value) > 0
    return True
