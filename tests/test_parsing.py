from fractions import Fraction

import pytest

from qbits.datatypes import ExactRational, InputBase
from qbits.errors import (
    EmptyInputError,
    ErrorKind,
    InvalidCharacterError,
    InvalidDigitError,
    MultipleRadixPointsError,
)
from qbits.parsing import clean_input, parse_numeral


def test_clean_input_strips_separators_and_whitespace() -> None:
    assert clean_input("  1_010 1  ") == "10101"


@pytest.mark.parametrize(
    ("text", "base", "expected"),
    [
        ("-0.75", 10, ExactRational(-1, 75, 100)),
        ("+12.5", 10, ExactRational(1, 125, 10)),
        ("1_000", "dec", ExactRational(1, 1000, 1)),
        ("101.01", 2, ExactRational(1, 21, 4)),
        ("-0.1", InputBase.BINARY, ExactRational(-1, 1, 2)),
        ("FF.A", 16, ExactRational(1, 4090, 16)),
        ("ff.a", "hex", ExactRational(1, 4090, 16)),
        ("1.", 10, ExactRational(1, 1, 1)),
        (".5", 10, ExactRational(1, 5, 10)),
        ("  7  ", 10, ExactRational(1, 7, 1)),
    ],
)
def test_parse_numeral_exact_values(text: str, base: object, expected: ExactRational) -> None:
    assert parse_numeral(text, base) == expected  # type: ignore[arg-type]


def test_parse_keeps_unreduced_power_of_base_denominator() -> None:
    parsed = parse_numeral("0.50", 10)
    assert parsed.denominator == 100
    assert parsed.to_fraction() == Fraction(1, 2)


def test_long_binary_fraction_is_exact() -> None:
    parsed = parse_numeral("0." + "1" * 60, 2)
    assert parsed.numerator == (1 << 60) - 1
    assert parsed.denominator == 1 << 60


def test_long_decimal_fraction_is_exact() -> None:
    parsed = parse_numeral("0.000000000000000000000000000001", 10)
    assert parsed.to_fraction() == Fraction(1, 10**30)


def test_negative_zero_keeps_sign() -> None:
    parsed = parse_numeral("-0", 10)
    assert parsed.is_negative
    assert parsed.to_fraction() == 0


@pytest.mark.parametrize("text", ["", "   ", "_", "-", "+", ".", "-."])
def test_empty_inputs(text: str) -> None:
    with pytest.raises(EmptyInputError) as excinfo:
        parse_numeral(text, 10)
    assert excinfo.value.kind is ErrorKind.EMPTY_INPUT


@pytest.mark.parametrize(("text", "base"), [("1.2.3", 10), ("1..0", 2), ("A.B.C", 16)])
def test_multiple_radix_points(text: str, base: int) -> None:
    with pytest.raises(MultipleRadixPointsError) as excinfo:
        parse_numeral(text, base)
    assert excinfo.value.kind is ErrorKind.MULTIPLE_RADIX_POINTS


def test_invalid_binary_digit_reports_position() -> None:
    with pytest.raises(InvalidDigitError) as excinfo:
        parse_numeral("102", 2)
    assert excinfo.value.char == "2"
    assert excinfo.value.position == 2
    assert excinfo.value.kind is ErrorKind.INVALID_DIGIT


@pytest.mark.parametrize(
    ("text", "base"),
    [("1g", 16), ("1e5", 10), ("A", 10), ("0.2", 2), ("1.0x", 16)],
)
def test_digits_out_of_range_for_base(text: str, base: int) -> None:
    with pytest.raises(InvalidDigitError):
        parse_numeral(text, base)


@pytest.mark.parametrize("text", ["1,5", "--1", "+-1", "1-", "#FF", "1/2"])
def test_foreign_characters(text: str) -> None:
    with pytest.raises(InvalidCharacterError) as excinfo:
        parse_numeral(text, 10)
    assert isinstance(excinfo.value, InvalidDigitError)
    assert excinfo.value.kind is ErrorKind.INVALID_DIGIT


def test_unknown_base_is_rejected_not_defaulted() -> None:
    with pytest.raises(ValueError):
        parse_numeral("10", 8)
