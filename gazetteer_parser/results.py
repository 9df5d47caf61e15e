"""Parsing results returned by the parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .data import ResolvedValue


@dataclass
class ParsedValue:
    """A value found in a query; ``range`` is a character range in the input."""

    resolved_value: ResolvedValue
    alternatives: list[ResolvedValue] = field(default_factory=list)
    range: range = range(0)
    matched_value: str = ""

    def __lt__(self, other: ParsedValue) -> bool:
        """Order by position; overlapping values cannot be compared."""
        if not isinstance(other, ParsedValue):
            return NotImplemented
        if self.range.stop <= other.range.start:
            return True
        if self.range.start >= other.range.stop:
            return False
        raise ValueError(f"parsed values are not comparable: {self!r}, {other!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "resolved_value": _resolved_to_dict(self.resolved_value),
            "alternatives": [_resolved_to_dict(alt) for alt in self.alternatives],
            "range": {"start": self.range.start, "end": self.range.stop},
            "matched_value": self.matched_value,
        }


def _resolved_to_dict(value: ResolvedValue) -> dict[str, str]:
    return {"resolved": value.resolved, "raw_value": value.raw_value}