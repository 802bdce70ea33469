"""Fixed-point formatting and parsing of double-precision numbers.

:func:`ftoa` renders a value the way ``printf("%.Nf")`` does and
:func:`atof` reads the longest numeric prefix of a text the way ``atof``
does, returning zero when there is none.
"""

import math
import operator
import re

_SPACE = "[ \t\n\v\f\r]*"
_NUMBER = re.compile(
    _SPACE + r"([+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)",
    re.ASCII,
)
_SPECIAL = re.compile(_SPACE + r"([+-]?)(infinity|inf|nan)", re.ASCII | re.IGNORECASE)


def ftoa(value, decimals):
    """Format ``value`` with exactly ``decimals`` digits after the point.

    Rounding is to nearest, ties to even on the exact binary value.
    Infinities and NaNs come out as ``inf``, ``-inf``, ``nan`` and ``-nan``.
    """
    decimals = operator.index(decimals)
    if decimals < 0:
        raise ValueError(f"decimals must not be negative: {decimals}")
    value = float(value)
    if math.isnan(value):
        return "-nan" if math.copysign(1.0, value) < 0 else "nan"
    if math.isinf(value):
        return "-inf" if value < 0 else "inf"
    return f"{value:.{decimals}f}"


def atof(text):
    """Read the leading number of ``text``; 0.0 if it does not start with one.

    Leading white space is skipped; an optional sign, digits with an
    optional decimal point and an optional exponent are read, and the rest
    of the text is ignored. ``inf``, ``infinity`` and ``nan`` are accepted
    in any case.
    """
    match = _NUMBER.match(text)
    if match:
        return float(match.group(1))
    match = _SPECIAL.match(text)
    if match:
        sign, word = match.groups()
        result = math.inf if word.lower().startswith("inf") else math.nan
        return -result if sign == "-" else result
    return 0.0