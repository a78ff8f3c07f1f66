# File: monthgrid/models/errors.py
"""
Error types for monthgrid models and layout.
"""

from dataclasses import dataclass
from typing import Optional


class InvalidScheduleDate(ValueError):
    """Raised when a day key cannot be computed for a schedule or view model."""

    def __init__(self, value, context: str = ""):
        self.value = value
        self.context = context
        label = f" ({context})" if context else ""
        super().__init__(f"InvalidScheduleDate{label}: cannot compute a day key from {value!r}")


class ScheduleValidationError(ValueError):
    """Raised when schedule input data cannot be turned into a Schedule."""


@dataclass
class ValidationError:
    """Represents a validation problem found in bulk schedule input."""
    field: str
    message: str
    entry_index: Optional[int] = None

    def __str__(self) -> str:
        """String representation of error."""
        if self.entry_index is not None:
            return f"Entry {self.entry_index} - {self.field}: {self.message}"
        return f"{self.field}: {self.message}"
