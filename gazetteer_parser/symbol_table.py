"""Symbol tables mapping tokens and resolved values to integer indices."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass
class TokenSymbolTable:
    """Maps each token string to a single index, and each index back to one string."""

    string_to_index: dict[str, int] = field(default_factory=dict)
    available_index: int = 0
    _index_to_string: dict[int, str] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        self._index_to_string = {idx: sym for sym, idx in self.string_to_index.items()}

    def add_symbol(self, symbol: str) -> int:
        """Add a symbol if it is missing and return its index."""
        existing = self.string_to_index.get(symbol)
        if existing is not None:
            return existing
        index = self.available_index
        self.available_index += 1
        self.string_to_index[symbol] = index
        self._index_to_string[index] = symbol
        return index

    def find_symbol(self, symbol: str) -> int | None:
        """Return the index of a symbol, or None."""
        return self.string_to_index.get(symbol)

    def find_index(self, idx: int) -> str | None:
        """Return the symbol stored under an index, or None."""
        return self._index_to_string.get(idx)

    def to_dict(self) -> dict[str, Any]:
        return {
            "string_to_index": dict(sorted(self.string_to_index.items())),
            "available_index": self.available_index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TokenSymbolTable:
        return cls(
            string_to_index={str(k): int(v) for k, v in data["string_to_index"].items()},
            available_index=int(data["available_index"]),
        )


@dataclass
class ResolvedSymbolTable:
    """Stores resolved values by index; the same value may appear several times."""

    index_to_resolved: list[str] = field(default_factory=list)

    def add_symbol(self, symbol: str) -> int:
        """Append a symbol, even if already present, and return its new index."""
        self.index_to_resolved.append(symbol)
        return len(self.index_to_resolved) - 1

    def find_index(self, index: int) -> str | None:
        """Return the symbol stored under an index, or None."""
        if 0 <= index < len(self.index_to_resolved):
            return self.index_to_resolved[index]
        return None

    def __iter__(self) -> Iterator[str]:
        return iter(self.index_to_resolved)

    def __len__(self) -> int:
        return len(self.index_to_resolved)

    def to_dict(self) -> dict[str, Any]:
        return {
            "index_to_resolved": list(self.index_to_resolved),
            "length": len(self.index_to_resolved),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResolvedSymbolTable:
        return cls(index_to_resolved=[str(v) for v in data["index_to_resolved"]])