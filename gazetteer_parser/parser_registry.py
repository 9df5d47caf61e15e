"""Registry holding the token and resolved-value indices used by the parser."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from .data import ResolvedValue, TokenizedEntityValue
from .symbol_table import ResolvedSymbolTable, TokenSymbolTable


class ParserRegistry:
    """Indexes entity values by token, with ranks, stop words and edge cases."""

    def __init__(self) -> None:
        self.tokens_symbol_table = TokenSymbolTable()
        self.resolved_symbol_table = ResolvedSymbolTable()
        self._token_to_resolved_values: list[set[int]] = []
        self._resolved_value_to_tokens: list[tuple[int, list[int]]] = []
        self.n_stop_words = 0
        self._additional_stop_words: list[int] = []
        self._stop_words: set[int] = set()
        self._edge_cases: set[int] = set()
        self.injected_values: set[int] = set()

    def add_value(self, value: TokenizedEntityValue, rank: int) -> int | None:
        """Add a value with its rank; return its resolved index, or None if empty."""
        if not value.tokens:
            return None
        res_value_idx = self.resolved_symbol_table.add_symbol(value.resolved_value)
        for token in value.tokens:
            token_idx = self.tokens_symbol_table.add_symbol(token)
            if token_idx >= len(self._token_to_resolved_values):
                self._token_to_resolved_values.append({res_value_idx})
            else:
                self._token_to_resolved_values[token_idx].add(res_value_idx)
            if res_value_idx >= len(self._resolved_value_to_tokens):
                self._resolved_value_to_tokens.append((rank, [token_idx]))
            else:
                self._resolved_value_to_tokens[res_value_idx][1].append(token_idx)
        return res_value_idx

    def prepend_values(self, entity_values: Sequence[TokenizedEntityValue]) -> list[int]:
        """Add values ahead of the existing ones, shifting the existing ranks."""
        shift = len(entity_values)
        self._resolved_value_to_tokens = [
            (rank + shift, tokens) for rank, tokens in self._resolved_value_to_tokens
        ]
        indices = [self.add_value(value, rank) for rank, value in enumerate(entity_values)]
        self._set_top_stop_words(self.n_stop_words)
        return [idx for idx in indices if idx is not None]

    def get_token_idx(self, symbol: str) -> int | None:
        return self.tokens_symbol_table.find_symbol(symbol)

    def get_resolved_values(self, token_idx: int) -> set[int]:
        """Return the set of resolved value indices whose tokens contain the token."""
        return self._token_to_resolved_values[token_idx]

    def get_tokens(self, resolved_value_idx: int) -> tuple[int, tuple[int, ...]]:
        """Return the rank and token indices of a resolved value."""
        rank, tokens = self._resolved_value_to_tokens[resolved_value_idx]
        return rank, tuple(tokens)

    def is_stop_word(self, token_idx: int) -> bool:
        return token_idx in self._stop_words

    def is_edge_case(self, resolved_value_idx: int) -> bool:
        return resolved_value_idx in self._edge_cases

    def set_stop_words(
        self, n_stop_words: int, additional_stop_words: Iterable[str] | None
    ) -> None:
        """Use the most frequent tokens plus any additional ones as stop words.

        Values made only of stop words become edge cases.
        """
        extra: list[int] = []
        for stop_word in additional_stop_words or ():
            tok_idx = self.tokens_symbol_table.add_symbol(stop_word)
            if tok_idx >= len(self._token_to_resolved_values):
                self._token_to_resolved_values.append(set())
            extra.append(tok_idx)
        self._additional_stop_words = extra
        self._set_top_stop_words(n_stop_words)

    def _set_top_stop_words(self, n_stop_words: int) -> None:
        counts = sorted(
            enumerate(len(values) for values in self._token_to_resolved_values),
            key=lambda item: -item[1],
        )
        self.n_stop_words = n_stop_words
        self._stop_words = {idx for idx, _ in counts[:n_stop_words]}
        self._stop_words.update(self._additional_stop_words)
        self._edge_cases = {
            res_val
            for res_val, (_, tokens) in enumerate(self._resolved_value_to_tokens)
            if all(token in self._stop_words for token in tokens)
        }

    def edge_case_indices(self) -> set[int]:
        return set(self._edge_cases)

    def resolved_value(self, resolved_value_index: int) -> ResolvedValue:
        """Return the resolved value and its raw value for an index."""
        resolved = self.resolved_symbol_table.find_index(resolved_value_index)
        if resolved is None:
            raise IndexError(f"unknown resolved value index {resolved_value_index}")
        _, tokens = self._resolved_value_to_tokens[resolved_value_index]
        raw_value = " ".join(self._token_string(idx) for idx in tokens)
        return ResolvedValue(resolved=resolved, raw_value=raw_value)

    def _token_string(self, token_idx: int) -> str:
        token = self.tokens_symbol_table.find_index(token_idx)
        if token is None:
            raise IndexError(f"unknown token index {token_idx}")
        return token

    def stop_words(self) -> set[str]:
        return {self._token_string(idx) for idx in self._stop_words}

    def additional_stop_words(self) -> set[str]:
        return {self._token_string(idx) for idx in self._additional_stop_words}

    def edge_cases(self) -> set[str]:
        result = set()
        for idx in self._edge_cases:
            resolved = self.resolved_symbol_table.find_index(idx)
            if resolved is None:
                raise IndexError(f"unknown resolved value index {idx}")
            result.add(resolved)
        return result

    def _state(self) -> tuple:
        return (
            self.tokens_symbol_table,
            self.resolved_symbol_table,
            self._token_to_resolved_values,
            self._resolved_value_to_tokens,
            self.n_stop_words,
            self._additional_stop_words,
            self._stop_words,
            self._edge_cases,
            self.injected_values,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParserRegistry):
            return NotImplemented
        return self._state() == other._state()

    def __repr__(self) -> str:
        return (
            f"ParserRegistry(values={len(self.resolved_symbol_table)}, "
            f"tokens={len(self._token_to_resolved_values)}, "
            f"stop_words={len(self._stop_words)})"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "tokens_symbol_table": self.tokens_symbol_table.to_dict(),
            "resolved_symbol_table": self.resolved_symbol_table.to_dict(),
            "token_to_resolved_values": [sorted(v) for v in self._token_to_resolved_values],
            "resolved_value_to_tokens": [
                [rank, list(tokens)] for rank, tokens in self._resolved_value_to_tokens
            ],
            "n_stop_words": self.n_stop_words,
            "additional_stop_words": list(self._additional_stop_words),
            "stop_words": sorted(self._stop_words),
            "edge_cases": sorted(self._edge_cases),
            "injected_values": sorted(self.injected_values),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ParserRegistry:
        registry = cls()
        registry.tokens_symbol_table = TokenSymbolTable.from_dict(data["tokens_symbol_table"])
        registry.resolved_symbol_table = ResolvedSymbolTable.from_dict(
            data["resolved_symbol_table"]
        )
        registry._token_to_resolved_values = [
            {int(i) for i in values} for values in data["token_to_resolved_values"]
        ]
        registry._resolved_value_to_tokens = [
            (int(rank), [int(t) for t in tokens])
            for rank, tokens in data["resolved_value_to_tokens"]
        ]
        registry.n_stop_words = int(data["n_stop_words"])
        registry._additional_stop_words = [int(i) for i in data["additional_stop_words"]]
        registry._stop_words = {int(i) for i in data["stop_words"]}
        registry._edge_cases = {int(i) for i in data["edge_cases"]}
        registry.injected_values = {int(i) for i in data.get("injected_values", ())}
        return registry