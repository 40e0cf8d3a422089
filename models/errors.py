"""Error types raised by the analytics engine."""

from __future__ import annotations

from typing import Optional


class MalformedInput(ValueError):
    """A measurement record could not be parsed into usable values."""

    def __init__(
        self,
        reason: str,
        *,
        row_number: Optional[int] = None,
        field: Optional[str] = None,
    ) -> None:
        self.reason = reason
        self.row_number = row_number
        self.field = field
        super().__init__(self._format())

    def _format(self) -> str:
        parts: list[str] = []
        if self.row_number is not None:
            parts.append(f"row {self.row_number}")
        if self.field is not None:
            parts.append(f"field {self.field!r}")
        if parts:
            return f"{', '.join(parts)}: {self.reason}"
        return self.reason
