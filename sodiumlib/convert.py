"""Conversions between integers and their decimal or hexadecimal text forms.

Values are kept within the fixed widths of the kernel types they model:
``dword`` (32 bits), ``word`` (16 bits), ``byte`` (8 bits) and ``int``
(32-bit two's complement). Results that overflow wrap around.
"""

_DECIMAL_DIGITS = "0123456789"


def _mask(bits):
    return (1 << bits) - 1


def _to_unsigned(value, bits):
    return value & _mask(bits)


def _to_signed(value, bits):
    value &= _mask(bits)
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def _parse_unsigned(text, bits):
    value = 0
    for char in text:
        if char not in _DECIMAL_DIGITS:
            raise ValueError(f"not an unsigned decimal number: {text!r}")
        value = value * 10 + _DECIMAL_DIGITS.index(char)
    return _to_unsigned(value, bits)


def itoa(number):
    """Decimal text of a 32-bit signed integer."""
    return str(_to_signed(number, 32))


def ctod(text):
    """Parse unsigned decimal text as a 32-bit dword."""
    return _parse_unsigned(text, 32)


def ctow(text):
    """Parse unsigned decimal text as a 16-bit word."""
    return _parse_unsigned(text, 16)


def ctob(text):
    """Parse unsigned decimal text as an 8-bit byte."""
    return _parse_unsigned(text, 8)


def ctoi(text):
    """Parse decimal text as a 32-bit signed integer.

    Digits are read from the right. When a non-digit is met and the text
    starts with ``-``, the digits read so far are returned negated; any
    other non-digit raises ``ValueError``.
    """
    value = 0
    weight = 1
    for char in reversed(text):
        if char not in _DECIMAL_DIGITS:
            if text.startswith("-"):
                return _to_signed(-value, 32)
            raise ValueError(f"not a decimal number: {text!r}")
        value += _DECIMAL_DIGITS.index(char) * weight
        weight *= 10
    return _to_signed(value, 32)


def itoh(number):
    """Upper-case hexadecimal text of a 32-bit integer (two's complement)."""
    return format(_to_unsigned(number, 32), "X")


def wtoh(number):
    """Upper-case hexadecimal text of a 16-bit word."""
    return format(_to_unsigned(number, 16), "X")


def btoh(number):
    """Upper-case hexadecimal text of an 8-bit byte."""
    return format(_to_unsigned(number, 8), "X")


def wtoa(number):
    """Decimal text of a 16-bit word."""
    return str(_to_unsigned(number, 16))


def btoa(number):
    """Decimal text of an 8-bit byte."""
    return str(_to_unsigned(number, 8))


def htoi(text):
    """Parse hexadecimal digits (either case) into a 32-bit signed integer.

    Each character contributes its low nibble after the usual ASCII
    adjustment; no validation is done. Reading stops at a NUL character.
    """
    value = 0
    for char in text:
        if char == "\0":
            break
        nibble = ord(char) - 48
        if nibble > 9:
            nibble -= 7
        value = ((value << 4) | (nibble & 15)) & _mask(32)
    return _to_signed(value, 32)


def xtoi(text):
    """Parse text that is either decimal or hexadecimal.

    Text holding an ``x`` or an ``h`` is hexadecimal: every ``x`` skips two
    characters from the start (the ``0x`` prefix) and every ``h`` ends the
    number at its position. Other text is parsed with :func:`ctoi`.
    """
    start = 0
    cut_points = []
    hexadecimal = False
    for index, char in enumerate(text):
        if char == "x":
            start += 2
            hexadecimal = True
        elif char == "h":
            cut_points.append(index)
            hexadecimal = True

    if not hexadecimal:
        return ctoi(text)

    if start >= len(text):
        return htoi("")
    end = min((cut for cut in cut_points if cut >= start), default=len(text))
    return htoi(text[start:end])