from __future__ import annotations

from enum import Enum
from fractions import Fraction

from .datatypes import QFormat


class BitRole(str, Enum):
    SIGN = "sign"
    INTEGER = "integer"
    FRACTION = "fraction"


def to_bits(scaled: int, fmt: QFormat) -> str:
    """Two's-complement (or unsigned) pattern of ``scaled``, MSB first."""
    if not fmt.contains(scaled):
        raise ValueError(
            f"{scaled} is outside [{fmt.min_scaled}, {fmt.max_scaled}] for {fmt.name}."
        )
    raw = scaled + (1 << fmt.total_bits) if scaled < 0 else scaled
    return format(raw, f"0{fmt.total_bits}b")


def raw_value(scaled: int, fmt: QFormat) -> int:
    return int(to_bits(scaled, fmt), 2)


def sanitize_bit_text(bit_text: str) -> str:
    return bit_text.strip().replace("_", "").replace(" ", "")


def from_bits(bit_text: str, fmt: QFormat) -> int:
    cleaned = sanitize_bit_text(bit_text)
    if len(cleaned) != fmt.total_bits:
        raise ValueError(
            f"Expected {fmt.total_bits} bits for {fmt.name}; got {len(cleaned)}."
        )
    if any(ch not in {"0", "1"} for ch in cleaned):
        raise ValueError(f"Bit text for {fmt.name} must contain only 0/1.")

    unsigned = int(cleaned, 2)
    if fmt.signed and cleaned[0] == "1":
        return unsigned - (1 << fmt.total_bits)
    return unsigned


def toggle_bit(scaled: int, fmt: QFormat, index: int) -> int:
    """Flip bit ``index`` (0 is the MSB) and decode the new pattern.

    The result always fits the format: flipping a bit cannot leave the N-bit
    space, so there is no saturation on this path and the sign bit wraps.
    """
    if not 0 <= index < fmt.total_bits:
        raise IndexError(f"Bit index {index} out of range for {fmt.total_bits}-bit {fmt.name}.")
    bits = to_bits(scaled, fmt)
    flipped = "1" if bits[index] == "0" else "0"
    return from_bits(bits[:index] + flipped + bits[index + 1 :], fmt)


def bit_roles(fmt: QFormat) -> tuple[BitRole, ...]:
    roles: list[BitRole] = []
    if fmt.signed:
        roles.append(BitRole.SIGN)
    roles.extend([BitRole.INTEGER] * fmt.m)
    roles.extend([BitRole.FRACTION] * fmt.n)
    return tuple(roles)


def bit_weight(fmt: QFormat, index: int) -> Fraction:
    if not 0 <= index < fmt.total_bits:
        raise IndexError(f"Bit index {index} out of range for {fmt.total_bits}-bit {fmt.name}.")
    power = fmt.total_bits - 1 - index - fmt.n
    weight = Fraction(2) ** power
    if fmt.signed and index == 0:
        return -weight
    return weight
