from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Any

import numpy as np

from .datatypes import ExactRational, QFormat


@dataclass(frozen=True)
class Quantized:
    scaled: int
    overflow: bool
    clamped_to: str | None = None


@dataclass(frozen=True)
class QuantizationError:
    absolute: Fraction
    lsb: Fraction


def round_half_away(numerator: int, denominator: int) -> int:
    """Round ``numerator / denominator`` (both non-negative) to nearest, ties up."""
    quotient, remainder = divmod(numerator, denominator)
    if 2 * remainder >= denominator:
        quotient += 1
    return quotient


def saturate(scaled: int, fmt: QFormat) -> Quantized:
    if scaled > fmt.max_scaled:
        return Quantized(scaled=fmt.max_scaled, overflow=True, clamped_to="max")
    if scaled < fmt.min_scaled:
        return Quantized(scaled=fmt.min_scaled, overflow=True, clamped_to="min")
    return Quantized(scaled=scaled, overflow=False)


def quantize(rational: ExactRational, fmt: QFormat) -> Quantized:
    """Scale by ``2**n``, round half away from zero, then clamp into range.

    Out-of-range values are never an error: the result holds the nearer bound
    and ``overflow`` is set.
    """
    magnitude = round_half_away(rational.numerator << fmt.n, rational.denominator)
    scaled = -magnitude if rational.is_negative else magnitude
    return saturate(scaled, fmt)


def quantization_error(rational: ExactRational, scaled: int, fmt: QFormat) -> QuantizationError:
    absolute = abs(rational.to_fraction() - Fraction(scaled, fmt.scale))
    return QuantizationError(absolute=absolute, lsb=absolute * fmt.scale)


def quantize_array(values: Any, fmt: QFormat) -> tuple[np.ndarray, np.ndarray]:
    """Quantize an array of ints or binary floats element-wise.

    Every finite float is an exact dyadic rational, so ``Fraction(x)`` loses
    nothing and the result matches what :func:`quantize` gives for the exact
    decimal expansion of ``x``. Scaled values come back in an object array so
    wide formats keep arbitrary precision.
    """
    arr = np.asarray(values)
    if arr.dtype.kind not in {"i", "u", "f"}:
        raise TypeError(f"Expected an integer or float array; got dtype {arr.dtype}.")

    scaled = np.empty(arr.shape, dtype=object)
    overflow = np.zeros(arr.shape, dtype=bool)
    for idx, item in np.ndenumerate(arr):
        value = item.item()
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f"Cannot quantize non-finite value {value!r} at index {idx}.")
        result = quantize(ExactRational.from_fraction(Fraction(value)), fmt)
        scaled[idx] = result.scaled
        overflow[idx] = result.overflow
    return scaled, overflow


def dequantize_array(scaled: Any, fmt: QFormat) -> np.ndarray:
    """Scaled integers back to float64; lossy once ``total_bits`` exceeds 53."""
    arr = np.asarray(scaled, dtype=object)
    out = np.empty(arr.shape, dtype=np.float64)
    for idx, item in np.ndenumerate(arr):
        out[idx] = int(item) / fmt.scale
    return out
