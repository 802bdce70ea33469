"""String and memory helpers modelled on NUL-terminated kernel strings.

Text handed to these functions ends at its first NUL character, the way a
C string would. Byte buffers are any writable bytes-like objects.
"""

import math
import re
import struct

from sodiumlib.convert import btoa, btoh, itoa, itoh, wtoa, wtoh
from sodiumlib.floatfmt import ftoa

_DEFAULT_DECIMALS = 6

_CONVERSION = re.compile(r"%[0-9]*(?:\.([0-9]*))?(x[wb]?|[\s\S])?")


def _c_string(text):
    """The part of ``text`` before its first NUL character."""
    return text.split("\0", 1)[0]


def _check_size(size, *buffers):
    if size < 0:
        raise ValueError(f"size must not be negative: {size}")
    for buffer in buffers:
        if size > len(buffer):
            raise ValueError(f"size {size} exceeds buffer of {len(buffer)} bytes")


def copy_memory(destination, source, size):
    """Copy ``size`` bytes from ``source`` into ``destination`` in place."""
    target = memoryview(destination).cast("B")
    origin = memoryview(source).cast("B")
    _check_size(size, target, origin)
    target[:size] = origin[:size]
    return destination


def zero_memory(buffer, size):
    """Set the first ``size`` bytes of ``buffer`` to zero in place."""
    target = memoryview(buffer).cast("B")
    _check_size(size, target)
    target[:size] = bytes(size)
    return buffer


def compare_strings(first, second):
    """True when both strings are equal and the first one is not empty."""
    first = _c_string(first)
    if not first:
        return False
    return first == _c_string(second)


def compare_strings_strict(first, second):
    """True when both strings are equal; two empty strings are equal."""
    return _c_string(first) == _c_string(second)


def string_length(text):
    """Storage length of ``text``: its characters plus the terminating NUL."""
    return len(_c_string(text)) + 1


def _as_float32(value):
    value = float(value)
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _as_char(value):
    if isinstance(value, int):
        return chr(value)
    return _c_string(value)[:1]


def format_string(template, *args):
    """Build a string from ``template`` and ``args``, as a small ``sprintf``.

    Conversions are ``%c``, ``%d``, ``%f`` (``%.Nf``; six decimals by
    default, the value passes through single precision), ``%w`` (word),
    ``%b`` (byte), ``%x``, ``%xw``, ``%xb`` (upper-case hexadecimal) and
    ``%s``. Field widths are read and ignored; an unknown conversion is
    dropped together with its ``%``.
    """
    remaining = iter(args)

    def next_argument(conversion):
        try:
            return next(remaining)
        except StopIteration:
            raise ValueError(f"missing argument for %{conversion}") from None

    def replace(match):
        precision, conversion = match.groups()
        if conversion is None:
            return ""
        decimals = _DEFAULT_DECIMALS if precision is None else int(precision or 0)
        if conversion == "c":
            return _as_char(next_argument(conversion))
        if conversion == "d":
            return itoa(next_argument(conversion))
        if conversion == "f":
            return ftoa(_as_float32(next_argument(conversion)), decimals)
        if conversion == "w":
            return wtoa(next_argument(conversion))
        if conversion == "b":
            return btoa(next_argument(conversion))
        if conversion == "xw":
            return wtoh(next_argument(conversion))
        if conversion == "xb":
            return btoh(next_argument(conversion))
        if conversion == "x":
            return itoh(next_argument(conversion))
        if conversion == "s":
            return _c_string(next_argument(conversion))
        return ""

    return _CONVERSION.sub(replace, _c_string(template))


def concat(first, second):
    """A new string holding ``first`` followed by ``second``."""
    return _c_string(first) + _c_string(second)


def find_in_string(text, pattern, start):
    """One-based position of ``pattern`` in ``text`` searching from ``start``.

    ``start`` is a zero-based index. Returns ``None`` when the pattern is
    empty or not found and raises ``ValueError`` for a negative start.
    """
    if start < 0:
        raise ValueError(f"start must not be negative: {start}")
    text = _c_string(text)
    pattern = _c_string(pattern)
    if not pattern:
        return None
    index = text.find(pattern, start)
    return None if index < 0 else index + 1


def _check_count(text, count):
    if count <= 0:
        raise ValueError(f"count must be positive: {count}")
    if count > len(text) + 1:
        raise ValueError(f"count {count} exceeds string of {len(text)} characters")


def left(text, count):
    """The first ``count`` characters of ``text``.

    ``count`` may reach the length plus one (the terminator), which gives
    the whole text; larger or non-positive counts raise ``ValueError``.
    """
    text = _c_string(text)
    _check_count(text, count)
    return text[:count]


def right(text, count):
    """The last ``count`` characters of ``text``.

    ``count`` may reach the length plus one (the terminator), which gives
    the whole text; larger or non-positive counts raise ``ValueError``.
    """
    text = _c_string(text)
    _check_count(text, count)
    if count > len(text):
        return text
    return text[len(text) - count:]


def is_number(text):
    """True when every character of ``text`` is an ASCII digit."""
    return all("0" <= char <= "9" for char in _c_string(text))


def lower(text):
    """``text`` with ASCII upper-case letters turned to lower case."""
    return "".join(
        chr(ord(char) + 32) if "A" <= char <= "Z" else char for char in _c_string(text)
    )


def upper(text):
    """``text`` with ASCII lower-case letters turned to upper case."""
    return "".join(
        chr(ord(char) - 32) if "a" <= char <= "z" else char for char in _c_string(text)
    )