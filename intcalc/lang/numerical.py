"""Integers in the intcalc language. Values are fixed-width signed two's complement integers: every arithmetic result
is wrapped back into range, so `2147483647 + 1` is `-2147483648` at the default 32 bits.

Source: https://docs.oracle.com/javase/specs/jls/se8/html/jls-4.html#jls-4.2.2
"""

INT_BITS = 32
SUPPORTED_BITS = (8, 16, 32, 64)


def bounds(bits=INT_BITS):
    """Returns (min, max) representable with bits."""
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


def wrap(value, bits=INT_BITS):
    """Reduces value into the signed range of bits (two's complement wraparound)."""
    mask = (1 << bits) - 1
    value &= mask
    if value >> (bits - 1):
        value -= 1 << bits
    return value


def parse_literal(text, bits=INT_BITS):
    """Returns int value of decimal literal text, or raises ValueError with the reason. Multi-digit literals cannot
    start with 0, and literals must fit in bits (there are no negative literals: '-5' is unary minus applied to 5).
    """
    if not text.isdigit() or not text.isascii():
        raise ValueError("invalid literal")
    if len(text) > 1 and text.startswith("0"):
        raise ValueError("invalid literal")

    value = int(text)
    if value > bounds(bits)[1]:
        raise ValueError("literal out of range")
    return value
