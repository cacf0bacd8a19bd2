from __future__ import annotations

from dataclasses import dataclass

from .bits import raw_value, to_bits
from .datatypes import InputBase, QFormat
from .parsing import clean_input, split_sign

SOURCE_GROUP_SIZES = {
    InputBase.BINARY: 4,
    InputBase.DECIMAL: 3,
    InputBase.HEXADECIMAL: 4,
}


@dataclass(frozen=True)
class FormattedValue:
    binary: str
    hex: str
    decimal: str
    pattern: str


def group_from_right(digits: str, group_size: int, sep: str = "_") -> str:
    if not digits:
        return "0"
    parts: list[str] = []
    remaining = digits
    while remaining:
        parts.append(remaining[-group_size:])
        remaining = remaining[:-group_size]
    return sep.join(reversed(parts))


def group_from_left(digits: str, group_size: int, sep: str = "_") -> str:
    return sep.join(digits[i : i + group_size] for i in range(0, len(digits), group_size))


def format_binary_point(scaled: int, fmt: QFormat) -> str:
    bits = to_bits(scaled, fmt)
    if fmt.n <= 0:
        return bits
    cut = len(bits) - fmt.n
    int_part = bits[:cut] or "0"
    return f"{int_part}.{bits[cut:]}"


def format_hex(scaled: int, fmt: QFormat) -> str:
    """Hex of the raw bit pattern, zero padded to ``ceil(total_bits / 4)`` digits.

    This is the stored word, not the value: there is no radix point, and a
    negative signed value shows its two's-complement encoding (Q1.3 ``-0.75``
    is ``1A``). The Q format decides where the binary point sits.
    """
    return format(raw_value(scaled, fmt), f"0{fmt.hex_digits}X")


def format_decimal(scaled: int, fmt: QFormat, precision: int) -> str:
    if precision < 0:
        raise ValueError(f"precision must be non-negative; got {precision}.")
    sign = "-" if scaled < 0 else ""
    magnitude = abs(scaled)
    int_part = magnitude >> fmt.n
    if precision == 0 or fmt.n == 0:
        return f"{sign}{int_part}"

    frac_bits = magnitude & (fmt.scale - 1)
    ten_pow = 10**precision
    frac_dec = (frac_bits * ten_pow + (1 << (fmt.n - 1))) >> fmt.n
    if frac_dec == ten_pow:
        # rounding carried into the integer digit
        int_part += 1
        frac_dec = 0
    return f"{sign}{int_part}.{frac_dec:0{precision}d}"


def group_binary(text: str, group_size: int = 4, sep: str = "_") -> str:
    """Insert ``sep`` every ``group_size`` digits on each side of the point.

    The integer part is grouped from the point leftwards, the fraction from
    the point rightwards; a group never spans the point.
    """
    int_part, dot, frac_part = text.partition(".")
    grouped = group_from_right(int_part, group_size, sep) if int_part else ""
    if not dot:
        return grouped
    return f"{grouped}.{group_from_left(frac_part, group_size, sep)}"


def group_hex(text: str, group_size: int = 4, sep: str = " ") -> str:
    return group_from_right(text, group_size, sep)


def format_pattern(scaled: int, fmt: QFormat, group: bool = True) -> str:
    bits = to_bits(scaled, fmt)
    if not group:
        return bits
    return group_from_left(bits, 4, " ")


def format_scaled(
    scaled: int,
    fmt: QFormat,
    precision: int,
    group_digits: bool = False,
) -> FormattedValue:
    binary = format_binary_point(scaled, fmt)
    if group_digits:
        binary = group_binary(binary)
    return FormattedValue(
        binary=binary,
        hex=format_hex(scaled, fmt),
        decimal=format_decimal(scaled, fmt, precision),
        pattern=format_pattern(scaled, fmt, group_digits),
    )


def format_source_text(text: str, base: InputBase | int | str) -> str:
    """Regroup a valid numeral the way the entry shows it, keeping leading zeros."""
    base = InputBase.from_value(base)
    sign, body = split_sign(clean_input(text))
    if base is InputBase.HEXADECIMAL:
        body = body.upper()
    int_part, dot, frac_part = body.partition(".")
    group_size = SOURCE_GROUP_SIZES[base]
    grouped = group_from_right(int_part, group_size)
    if dot:
        grouped = f"{grouped}.{group_from_left(frac_part, group_size)}"
    prefix = "-" if sign < 0 else ""
    return prefix + grouped
