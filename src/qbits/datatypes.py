from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction

from .errors import InvalidFormatError

MAX_FORMAT_BITS = 60
MAX_DISPLAY_PRECISION = 18

_QFORMAT_NAME = re.compile(r"^(U)?Q(\d+)\.(\d+)$", re.IGNORECASE)


class InputBase(Enum):
    BINARY = 2
    DECIMAL = 10
    HEXADECIMAL = 16

    @property
    def key(self) -> str:
        return _BASE_KEYS[self]

    @property
    def title(self) -> str:
        return _BASE_TITLES[self]

    @classmethod
    def from_value(cls, value: InputBase | int | str) -> InputBase:
        if isinstance(value, InputBase):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            for base, key in _BASE_KEYS.items():
                if lowered == key:
                    return base
            raise ValueError(f"Unsupported input base: {value!r}")
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Unsupported input base: {value!r}")
        try:
            return cls(value)
        except ValueError as exc:
            raise ValueError(f"Unsupported input base: {value!r}") from exc


_BASE_KEYS = {
    InputBase.BINARY: "bin",
    InputBase.DECIMAL: "dec",
    InputBase.HEXADECIMAL: "hex",
}

_BASE_TITLES = {
    InputBase.BINARY: "Binary (Base 2)",
    InputBase.DECIMAL: "Decimal (Base 10)",
    InputBase.HEXADECIMAL: "Hexadecimal (Base 16)",
}


def _check_width(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFormatError(f"{name} must be an integer; got {value!r}.")
    if value < 0:
        raise InvalidFormatError(f"{name} must be non-negative; got {value}.")


@dataclass(frozen=True)
class QFormat:
    """Fixed-point layout: optional sign bit, ``m`` integer bits, ``n`` fraction bits.

    ``m`` never counts the sign bit, so signed Q1.3 is five bits wide.
    """

    signed: bool
    m: int
    n: int

    def __post_init__(self) -> None:
        _check_width("m", self.m)
        _check_width("n", self.n)
        if self.total_bits < 1:
            raise InvalidFormatError(
                f"{self.name} has no bits; total width must be at least 1."
            )

    @classmethod
    def parse(cls, text: str) -> QFormat:
        match = _QFORMAT_NAME.match(text.strip())
        if match is None:
            raise InvalidFormatError(f"Invalid Q format name: {text!r}")
        unsigned, m, n = match.groups()
        return cls(signed=unsigned is None, m=int(m), n=int(n))

    @property
    def name(self) -> str:
        prefix = "Q" if self.signed else "UQ"
        return f"{prefix}{self.m}.{self.n}"

    @property
    def total_bits(self) -> int:
        return (1 if self.signed else 0) + self.m + self.n

    @property
    def scale(self) -> int:
        return 1 << self.n

    @property
    def min_scaled(self) -> int:
        if self.signed:
            return -(1 << (self.total_bits - 1))
        return 0

    @property
    def max_scaled(self) -> int:
        if self.signed:
            return (1 << (self.total_bits - 1)) - 1
        return (1 << self.total_bits) - 1

    @property
    def min_value(self) -> Fraction:
        return Fraction(self.min_scaled, self.scale)

    @property
    def max_value(self) -> Fraction:
        return Fraction(self.max_scaled, self.scale)

    @property
    def resolution(self) -> Fraction:
        return Fraction(1, self.scale)

    @property
    def hex_digits(self) -> int:
        return (self.total_bits + 3) // 4

    def contains(self, scaled: int) -> bool:
        return self.min_scaled <= scaled <= self.max_scaled

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ExactRational:
    """``sign * numerator / denominator`` kept exactly as parsed (not reduced)."""

    sign: int
    numerator: int
    denominator: int = 1

    def __post_init__(self) -> None:
        if self.sign not in (1, -1):
            raise ValueError(f"sign must be +1 or -1; got {self.sign!r}")
        if self.numerator < 0:
            raise ValueError("numerator must be non-negative; the sign is separate.")
        if self.denominator <= 0:
            raise ValueError("denominator must be positive.")

    @property
    def is_negative(self) -> bool:
        return self.sign < 0

    def to_fraction(self) -> Fraction:
        return Fraction(self.sign * self.numerator, self.denominator)

    @classmethod
    def from_fraction(cls, value: Fraction | int) -> ExactRational:
        value = Fraction(value)
        sign = -1 if value < 0 else 1
        return cls(sign=sign, numerator=abs(value.numerator), denominator=value.denominator)


def _clamp(value: int, lo: int, hi: int) -> int:
    return lo if value < lo else hi if value > hi else value


@dataclass(frozen=True)
class ConverterConfig:
    signed: bool = True
    m: int = 3
    n: int = 5
    input_base: InputBase = InputBase.DECIMAL
    precision: int = 6
    group_digits: bool = True
    value_text: str = "-3.14159"

    @classmethod
    def clamped(
        cls,
        *,
        signed: bool = True,
        m: int = 3,
        n: int = 5,
        input_base: InputBase | int | str = InputBase.DECIMAL,
        precision: int = 6,
        group_digits: bool = True,
        value_text: str = "-3.14159",
    ) -> ConverterConfig:
        return cls(
            signed=bool(signed),
            m=_clamp(int(m), 0, MAX_FORMAT_BITS),
            n=_clamp(int(n), 0, MAX_FORMAT_BITS),
            input_base=InputBase.from_value(input_base),
            precision=_clamp(int(precision), 0, MAX_DISPLAY_PRECISION),
            group_digits=bool(group_digits),
            value_text=value_text,
        )

    @property
    def qformat(self) -> QFormat:
        return QFormat(signed=self.signed, m=self.m, n=self.n)
