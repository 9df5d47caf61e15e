"""Rebuilding a registry with injected entity values."""

from __future__ import annotations

from collections.abc import Iterable

from .data import RegisteredEntityValue, TokenizedEntityValue
from .parser_registry import ParserRegistry


def entity_values(
    registry: ParserRegistry, include_injected_values: bool
) -> list[RegisteredEntityValue]:
    """Return the registry's entity values with rank and injection flag, sorted by rank."""
    values = []
    for res_value_idx, resolved_value in enumerate(registry.resolved_symbol_table):
        is_injected = res_value_idx in registry.injected_values
        if is_injected and not include_injected_values:
            continue
        rank, token_indices = registry.get_tokens(res_value_idx)
        tokens = []
        for token_idx in token_indices:
            token = registry.tokens_symbol_table.find_index(token_idx)
            if token is None:
                raise IndexError(f"unknown token index {token_idx}")
            tokens.append(token)
        values.append(RegisteredEntityValue(resolved_value, tokens, is_injected, rank))
    values.sort(key=lambda value: value.rank)
    return values


def inject_new_values(
    registry: ParserRegistry,
    new_values: Iterable[TokenizedEntityValue],
    prepend: bool,
    from_vanilla: bool,
) -> ParserRegistry:
    """Return a new registry holding the existing values plus the injected ones.

    With ``prepend`` the new values come before the existing ones, otherwise after.
    With ``from_vanilla`` previously injected values are dropped first.
    """
    base = entity_values(registry, not from_vanilla)
    cleaned = [value for value in new_values if value.tokens]
    injected = [
        value.into_registered(True, i + (0 if prepend else len(base)))
        for i, value in enumerate(cleaned)
    ]
    if prepend:
        shifted = [value.update_rank(value.rank + len(cleaned)) for value in base]
        ordered = injected + shifted
    else:
        ordered = base + injected

    new_registry = ParserRegistry()
    if not from_vanilla:
        new_registry.injected_values = set(registry.injected_values)
    for rank, value in enumerate(ordered):
        idx = new_registry.add_value(value.into_tokenized(), rank)
        if idx is not None and value.is_injected:
            new_registry.injected_values.add(idx)
    new_registry.set_stop_words(
        registry.n_stop_words, sorted(registry.additional_stop_words())
    )
    return new_registry