"""Small string helpers shared by the built-ins and the command runner."""

from __future__ import annotations

from itertools import zip_longest

_WHITESPACE = " \n\t\v\f\r"
_SIZE_MASK = (1 << 64) - 1
_LLONG_MAX = 9223372036854775807


def _to_c_int(value: int) -> int:
    """Reduce an integer to a signed 32-bit value, wrapping as C does."""
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def atoi(text: str) -> int:
    """Parse a leading decimal integer the way the shell's exit built-in does.

    Leading whitespace and one sign are accepted; parsing stops at the first
    non-digit.  Magnitudes beyond the signed 64-bit range give 0 for negative
    input and -1 for positive input, and the result is a C ``int``.
    """
    rest = text.lstrip(_WHITESPACE)
    sign = 1
    if rest[:1] in ("-", "+"):
        if rest[0] == "-":
            sign = -1
        rest = rest[1:]
    result = 0
    for char in rest:
        if not "0" <= char <= "9":
            break
        result = (result * 10 + ord(char) - ord("0")) & _SIZE_MASK
    if sign == -1 and result >= _LLONG_MAX:
        return 0
    if sign == 1 and result > _LLONG_MAX:
        return -1
    return _to_c_int((result * sign) & _SIZE_MASK)


def compare_command_name(name: str | None, builtin: str, fold_case: bool) -> int:
    """Compare a typed command name with a built-in's name.

    Returns 0 on a match, otherwise the difference of the first differing
    characters.  With ``fold_case`` an upper-case letter in ``name`` matches
    the lower-case letter in ``builtin``.  A missing name never matches.
    """
    if name is None:
        return 1
    for left, right in zip_longest(name, builtin, fillvalue=""):
        a = ord(left) if left else 0
        b = ord(right) if right else 0
        if a == b:
            continue
        if fold_case and a == b - 32:
            continue
        return a - b
    return 0


def split_nonempty(text: str, sep: str) -> list[str]:
    """Split ``text`` on ``sep``, dropping empty pieces."""
    return [piece for piece in text.split(sep) if piece]