from __future__ import annotations

from typing import List, Optional


class ConversionError(ValueError):
    """Base class for failures a caller should surface to the user as-is."""


class EmptyInputError(ConversionError):
    def __init__(self, message: str = "Empty CSV file"):
        super().__init__(message)


class MissingColumnsError(ConversionError):
    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(
            "CSV must contain ID, X, and Y columns (missing: " + ", ".join(self.missing) + ")"
        )


class CoordinateParseError(ConversionError):
    """Raised in strict mode when an x/y value is not a finite number."""

    def __init__(self, line_no: int, axis: str, value: Optional[str]):
        self.line_no = line_no
        self.axis = axis
        self.value = value
        super().__init__(f"Line {line_no}: cannot parse {axis} coordinate {value!r}")


class UnsupportedFormatError(ConversionError):
    def __init__(self, filename: str, accepted: List[str]):
        self.filename = filename
        self.accepted = list(accepted)
        super().__init__(
            f"Invalid file format for {filename!r}; expected one of: {', '.join(self.accepted)}"
        )
