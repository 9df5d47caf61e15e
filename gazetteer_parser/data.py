"""Entity values, gazetteers and resolved values."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .utils import whitespace_tokenizer


@dataclass(frozen=True)
class EntityValue:
    """An entity value to be added to a parser."""

    resolved_value: str
    raw_value: str

    def into_tokenized(self) -> TokenizedEntityValue:
        """Split the raw value on whitespace."""
        return TokenizedEntityValue(
            self.resolved_value,
            [token for _, token in whitespace_tokenizer(self.raw_value)],
        )


@dataclass(frozen=True)
class TokenizedEntityValue:
    """An entity value whose raw value has been split into tokens."""

    resolved_value: str
    tokens: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "resolved_value", str(self.resolved_value))
        object.__setattr__(self, "tokens", tuple(str(t) for t in self.tokens))

    def into_registered(self, is_injected: bool, rank: int) -> RegisteredEntityValue:
        return RegisteredEntityValue(self.resolved_value, self.tokens, is_injected, rank)


@dataclass(frozen=True)
class RegisteredEntityValue:
    """A tokenized entity value together with its rank and injection flag."""

    resolved_value: str
    tokens: tuple[str, ...]
    is_injected: bool
    rank: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "resolved_value", str(self.resolved_value))
        object.__setattr__(self, "tokens", tuple(str(t) for t in self.tokens))

    def update_rank(self, new_rank: int) -> RegisteredEntityValue:
        return dataclasses.replace(self, rank=new_rank)

    def into_tokenized(self) -> TokenizedEntityValue:
        return TokenizedEntityValue(self.resolved_value, self.tokens)


@dataclass
class Gazetteer:
    """Ordered entity values, most popular first."""

    data: list[EntityValue] = field(default_factory=list)

    def add(self, value: EntityValue) -> None:
        self.data.append(value)

    def extend(self, gazetteer: Gazetteer) -> None:
        self.data.extend(gazetteer.data)

    def to_list(self) -> list[dict[str, str]]:
        return [
            {"resolved_value": value.resolved_value, "raw_value": value.raw_value}
            for value in self.data
        ]

    @classmethod
    def from_list(cls, data: Iterable[dict[str, Any]]) -> Gazetteer:
        return cls(
            [EntityValue(str(item["resolved_value"]), str(item["raw_value"])) for item in data]
        )


@dataclass(frozen=True)
class ResolvedValue:
    """A resolved value together with the raw value it came from."""

    resolved: str
    raw_value: str


def gazetteer(*args: tuple[Any, Any]) -> Gazetteer:
    """Build a gazetteer from (raw value, resolved value) pairs."""
    return Gazetteer([EntityValue(str(resolved), str(raw)) for raw, resolved in args])