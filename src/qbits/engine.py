from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .bits import toggle_bit
from .datatypes import MAX_DISPLAY_PRECISION, InputBase, QFormat
from .errors import ErrorKind, QbitsError
from .formatting import FormattedValue, format_decimal, format_scaled
from .parsing import parse_numeral
from .quantize import quantize

logger = logging.getLogger(__name__)

SYNC_PRECISION = 12


class Status(str, Enum):
    OK = "ok"
    OVERFLOW = "overflow"
    ERROR = "error"


@dataclass(frozen=True)
class ConversionError:
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class ConversionResult:
    status: Status
    scaled: int | None = None
    overflow: bool = False
    binary: str | None = None
    hex: str | None = None
    decimal: str | None = None
    pattern: str | None = None
    error: ConversionError | None = None

    @property
    def ok(self) -> bool:
        return self.status is not Status.ERROR


@dataclass(frozen=True)
class ToggleResult:
    scaled: int
    formatted: FormattedValue
    source_text: str


FormatLike = QFormat | tuple[bool, int, int]


def _as_qformat(fmt: FormatLike) -> QFormat:
    if isinstance(fmt, QFormat):
        return fmt
    signed, m, n = fmt
    return QFormat(signed=bool(signed), m=m, n=n)


def _check_precision(precision: int) -> None:
    if not 0 <= precision <= MAX_DISPLAY_PRECISION:
        raise ValueError(
            f"display precision must be in 0..{MAX_DISPLAY_PRECISION}; got {precision}."
        )


def convert(
    value_text: str,
    input_base: InputBase | int | str,
    fmt: FormatLike,
    display_precision: int,
    group_digits: bool = False,
) -> ConversionResult:
    """Parse, quantize and render one value.

    Bad input and bad widths come back as an ``ERROR`` result carrying the
    error kind; saturation comes back as ``OVERFLOW`` with the clamped value.
    """
    _check_precision(display_precision)
    base = InputBase.from_value(input_base)
    try:
        qformat = _as_qformat(fmt)
        rational = parse_numeral(value_text, base)
    except QbitsError as exc:
        logger.debug("Rejected %r (base %d): %s", value_text, base.value, exc)
        return ConversionResult(
            status=Status.ERROR,
            error=ConversionError(kind=exc.kind, message=exc.message),
        )

    quantized = quantize(rational, qformat)
    if quantized.overflow:
        logger.info(
            "%r saturated to %s bound of %s", value_text, quantized.clamped_to, qformat.name
        )
    formatted = format_scaled(quantized.scaled, qformat, display_precision, group_digits)
    logger.debug("Converted %r to scaled %d in %s", value_text, quantized.scaled, qformat.name)

    return ConversionResult(
        status=Status.OVERFLOW if quantized.overflow else Status.OK,
        scaled=quantized.scaled,
        overflow=quantized.overflow,
        binary=formatted.binary,
        hex=formatted.hex,
        decimal=formatted.decimal,
        pattern=formatted.pattern,
    )


def toggle(
    scaled: int,
    fmt: QFormat,
    index: int,
    display_precision: int,
    group_digits: bool = False,
) -> ToggleResult:
    _check_precision(display_precision)
    new_scaled = toggle_bit(scaled, fmt, index)
    logger.debug("Toggled bit %d of %s: %d -> %d", index, fmt.name, scaled, new_scaled)
    return ToggleResult(
        scaled=new_scaled,
        formatted=format_scaled(new_scaled, fmt, display_precision, group_digits),
        source_text=format_decimal(new_scaled, fmt, max(SYNC_PRECISION, display_precision, fmt.n)),
    )


def describe_format(fmt: QFormat) -> str:
    sign_text = "sign 1 + " if fmt.signed else ""
    return (
        f"Total {fmt.total_bits} bits ({sign_text}integer {fmt.m} + fraction {fmt.n}), "
        f"resolution 2^-{fmt.n}"
    )


def status_message(result: ConversionResult) -> str:
    if result.error is not None:
        return f"Invalid input: {result.error.message}"
    if result.overflow:
        return "Value out of range; saturated to the nearest representable bound."
    return "Input valid and within range."
