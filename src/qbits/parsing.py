from __future__ import annotations

import string

from .datatypes import ExactRational, InputBase
from .errors import (
    EmptyInputError,
    InvalidCharacterError,
    InvalidDigitError,
    MultipleRadixPointsError,
)

SEPARATORS = ("_", " ")

_DIGITS: dict[InputBase, str] = {
    InputBase.BINARY: "01",
    InputBase.DECIMAL: string.digits,
    InputBase.HEXADECIMAL: string.digits + "abcdef",
}

_ALNUM = frozenset(string.ascii_letters + string.digits)


def clean_input(text: str) -> str:
    cleaned = text.strip()
    for sep in SEPARATORS:
        cleaned = cleaned.replace(sep, "")
    return cleaned


def split_sign(text: str) -> tuple[int, str]:
    if text[:1] == "-":
        return -1, text[1:]
    if text[:1] == "+":
        return 1, text[1:]
    return 1, text


def _accumulate(digits: str, base: InputBase, offset: int) -> int:
    allowed = _DIGITS[base]
    radix = base.value
    value = 0
    for idx, char in enumerate(digits):
        digit = allowed.find(char.lower())
        if digit < 0:
            position = offset + idx
            if char in _ALNUM:
                raise InvalidDigitError(
                    f"Invalid digit {char!r} for base {radix} at position {position}.",
                    char=char,
                    position=position,
                )
            raise InvalidCharacterError(
                f"Unexpected character {char!r} at position {position}.",
                char=char,
                position=position,
            )
        value = value * radix + digit
    return value


def parse_numeral(text: str, base: InputBase | int | str) -> ExactRational:
    """Parse ``[+-]digits[.digits]`` in base 2, 10 or 16 into an exact rational.

    Separators (``_`` and spaces) are ignored. A fraction of ``k`` digits becomes
    ``digits / base**k``; nothing goes through float.
    """
    base = InputBase.from_value(base)
    cleaned = clean_input(text)
    if not cleaned:
        raise EmptyInputError("Input is empty.")

    sign, body = split_sign(cleaned)
    sign_width = len(cleaned) - len(body)
    if body.count(".") > 1:
        raise MultipleRadixPointsError(
            f"Too many radix points in {text.strip()!r}; at most one is allowed."
        )

    int_digits, _, frac_digits = body.partition(".")
    if not int_digits and not frac_digits:
        raise EmptyInputError(f"No digits in {text.strip()!r}.")

    int_value = _accumulate(int_digits, base, sign_width)
    frac_value = _accumulate(frac_digits, base, sign_width + len(int_digits) + 1)
    denominator = base.value ** len(frac_digits)

    return ExactRational(
        sign=sign,
        numerator=int_value * denominator + frac_value,
        denominator=denominator,
    )
