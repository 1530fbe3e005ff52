from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class FieldError:
    """One itemized validation problem: dotted field path plus message."""
    path: str
    message: str


class SeatMapError(Exception):
    """Base class for recoverable seat map errors."""


class SeatMapValidationError(SeatMapError):
    """Import payload is malformed or violates the seat map schema."""

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        summary = "; ".join(
            f"{e.path}: {e.message}" if e.path else e.message for e in self.errors
        )
        super().__init__(f"Invalid seat map: {summary}")


class BackgroundRejectedError(SeatMapError):
    """Background image refused (wrong type or over the size cap)."""

    INVALID_TYPE = "INVALID_TYPE"
    TOO_LARGE = "TOO_LARGE"

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)
