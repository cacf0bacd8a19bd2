from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_DIGIT = "invalid_digit"
    MULTIPLE_RADIX_POINTS = "multiple_radix_points"
    EMPTY_INPUT = "empty_input"
    INVALID_FORMAT = "invalid_format"


class QbitsError(ValueError):
    """Base class for every error the conversion engine reports.

    Subclasses ValueError so callers that only care about "bad input" can keep
    catching the builtin.
    """

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ParseError(QbitsError):
    pass


class EmptyInputError(ParseError):
    kind = ErrorKind.EMPTY_INPUT


class MultipleRadixPointsError(ParseError):
    kind = ErrorKind.MULTIPLE_RADIX_POINTS


class InvalidDigitError(ParseError):
    kind = ErrorKind.INVALID_DIGIT

    def __init__(self, message: str, *, char: str = "", position: int = -1) -> None:
        super().__init__(message)
        self.char = char
        self.position = position


class InvalidCharacterError(InvalidDigitError):
    """A character that is not a digit in any base (e.g. ``,`` or a second sign)."""


class InvalidFormatError(QbitsError):
    kind = ErrorKind.INVALID_FORMAT


__all__ = [
    "ErrorKind",
    "QbitsError",
    "ParseError",
    "EmptyInputError",
    "MultipleRadixPointsError",
    "InvalidDigitError",
    "InvalidCharacterError",
    "InvalidFormatError",
]
