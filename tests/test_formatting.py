import pytest

from qbits.datatypes import QFormat
from qbits.formatting import (
    FormattedValue,
    format_binary_point,
    format_decimal,
    format_hex,
    format_pattern,
    format_scaled,
    format_source_text,
    group_binary,
    group_hex,
)

Q1_3 = QFormat(signed=True, m=1, n=3)


def test_binary_point_inserted_n_from_right() -> None:
    assert format_binary_point(-6, Q1_3) == "11.010"
    assert format_binary_point(5, QFormat(signed=False, m=4, n=0)) == "0101"


def test_binary_point_with_empty_integer_part() -> None:
    assert format_binary_point(5, QFormat(signed=False, m=0, n=4)) == "0.0101"
    assert format_binary_point(-1, QFormat(signed=True, m=0, n=4)) == "1.1111"


@pytest.mark.parametrize(
    ("scaled", "fmt", "expected"),
    [
        (-6, Q1_3, "1A"),
        (-16, Q1_3, "10"),
        (0, QFormat(signed=True, m=7, n=8), "0000"),
        (-1, QFormat(signed=True, m=7, n=8), "FFFF"),
        (5, QFormat(signed=False, m=4, n=0), "5"),
        (255, QFormat(signed=True, m=0, n=8), "0FF"),
    ],
)
def test_hex_is_raw_pattern_zero_padded(scaled: int, fmt: QFormat, expected: str) -> None:
    assert format_hex(scaled, fmt) == expected


@pytest.mark.parametrize(
    ("scaled", "fmt", "precision", "expected"),
    [
        (-6, Q1_3, 6, "-0.750000"),
        (-6, Q1_3, 1, "-0.8"),
        (5, QFormat(signed=False, m=4, n=0), 0, "5"),
        (5, QFormat(signed=False, m=4, n=0), 6, "5"),
        (12, QFormat(signed=True, m=3, n=3), 0, "1"),
        (1, QFormat(signed=True, m=0, n=8), 2, "0.00"),
        (255, QFormat(signed=True, m=0, n=8), 6, "0.996094"),
        (-101, QFormat(signed=True, m=3, n=5), 6, "-3.156250"),
    ],
)
def test_decimal_rendering(scaled: int, fmt: QFormat, precision: int, expected: str) -> None:
    assert format_decimal(scaled, fmt, precision) == expected


def test_decimal_rounding_carries_into_integer_part() -> None:
    fmt = QFormat(signed=True, m=0, n=8)
    assert format_decimal(255, fmt, 2) == "1.00"
    assert format_decimal(-255, fmt, 2) == "-1.00"


def test_decimal_is_exact_for_wide_fractions() -> None:
    fmt = QFormat(signed=False, m=0, n=60)
    assert format_decimal(1, fmt, 18) == "0.000000000000000001"
    assert format_decimal(1 << 59, fmt, 18) == "0.500000000000000000"


def test_decimal_rejects_negative_precision() -> None:
    with pytest.raises(ValueError):
        format_decimal(1, Q1_3, -1)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("11.010", "11.010"),
        ("1010", "1010"),
        ("10100", "1_0100"),
        ("101101.0110101", "10_1101.0110_101"),
        ("0.01010", "0.0101_0"),
    ],
)
def test_group_binary_never_crosses_point(text: str, expected: str) -> None:
    assert group_binary(text) == expected


def test_group_hex_groups_from_least_significant_digit() -> None:
    assert group_hex("1A") == "1A"
    assert group_hex("01ABC") == "0 1ABC"


def test_pattern_groups_from_msb() -> None:
    assert format_pattern(-6, Q1_3) == "1101 0"
    assert format_pattern(-6, Q1_3, group=False) == "11010"


def test_format_scaled_bundles_all_renderings() -> None:
    result = format_scaled(-6, Q1_3, 6)
    assert result == FormattedValue(
        binary="11.010",
        hex="1A",
        decimal="-0.750000",
        pattern="11010",
    )


def test_format_scaled_grouping_only_touches_binary_views() -> None:
    fmt = QFormat(signed=True, m=7, n=8)
    result = format_scaled(-1, fmt, 3, group_digits=True)
    assert result.binary == "1111_1111.1111_1111"
    assert result.pattern == "1111 1111 1111 1111"
    assert result.hex == "FFFF"
    assert result.decimal == "-0.004"


def test_formatting_is_idempotent() -> None:
    fmt = QFormat(signed=True, m=3, n=5)
    assert format_scaled(-101, fmt, 6, True) == format_scaled(-101, fmt, 6, True)


def test_source_format_preserves_binary_leading_zeros() -> None:
    assert format_source_text("00000001", 2) == "0000_0001"


def test_source_format_preserves_hex_leading_zeros_and_uppercases() -> None:
    assert format_source_text("00000f", 16) == "00_000F"


def test_source_format_preserves_decimal_leading_zeros() -> None:
    assert format_source_text("0001234", 10) == "0_001_234"


def test_source_format_groups_fraction_from_point() -> None:
    assert format_source_text("-101.01101", "bin") == "-101.0110_1"
    assert format_source_text("1234.56789", "dec") == "1_234.567_89"
