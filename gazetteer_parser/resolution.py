"""Turning candidate matches into a set of non-overlapping parsed values."""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Iterable, Set

from .matching import PossibleMatch
from .parser_registry import ParserRegistry
from .results import ParsedValue
from .utils import whitespace_tokenizer


def reduce_possible_match(
    text: str, possible_match: PossibleMatch, overlapping_tokens: Set[int]
) -> PossibleMatch | None:
    """Shrink a match to the span between its first and last free tokens.

    Returns None when every token of the match is already taken.
    """
    free_tokens = [
        (token_idx, token_range)
        for token_idx, (token_range, _) in enumerate(whitespace_tokenizer(text))
        if token_idx in possible_match.tokens_range and token_idx not in overlapping_tokens
    ]
    if not free_tokens:
        return None
    first_idx, first_range = free_tokens[0]
    last_idx, last_range = free_tokens[-1]
    return PossibleMatch(
        resolved_value=possible_match.resolved_value,
        range=range(first_range.start, last_range.stop),
        tokens_range=range(first_idx, last_idx + 1),
        raw_value_length=possible_match.raw_value_length,
        n_consumed_tokens=last_idx - first_idx + 1,
        last_token_in_input=0,
        first_token_in_resolution=0,
        last_token_in_resolution=0,
        rank=possible_match.rank,
        alternative_resolved_values=list(possible_match.alternative_resolved_values),
    )


class _MatchQueue:
    """Max-priority queue of matches ordered by their sort key."""

    def __init__(self, matches: Iterable[PossibleMatch]) -> None:
        self._counter = itertools.count()
        self._heap: list[tuple[tuple[int, int, int], int, PossibleMatch]] = []
        for match in matches:
            self.push(match)

    def push(self, match: PossibleMatch) -> None:
        key = tuple(-part for part in match.sort_key())
        heapq.heappush(self._heap, (key, next(self._counter), match))

    def pop(self) -> PossibleMatch:
        return heapq.heappop(self._heap)[2]

    def __bool__(self) -> bool:
        return bool(self._heap)


def parse_input(
    registry: ParserRegistry,
    text: str,
    threshold: float,
    matches: Iterable[PossibleMatch],
) -> list[ParsedValue]:
    """Pick the best matches greedily, without overlaps, ordered by position."""
    queue = _MatchQueue(match.copy() for match in matches)
    taken_tokens: set[int] = set()
    n_total_tokens = sum(1 for _ in whitespace_tokenizer(text))
    parsing: list[ParsedValue] = []

    while queue and len(taken_tokens) < n_total_tokens:
        possible_match = queue.pop()
        overlapping = {idx for idx in taken_tokens if idx in possible_match.tokens_range}

        if overlapping:
            reduced = reduce_possible_match(text, possible_match, overlapping)
            if reduced is not None:
                limit = 1.0 if registry.is_edge_case(reduced.resolved_value) else threshold
                if reduced.check_threshold(limit):
                    queue.push(reduced)
            continue

        char_range = possible_match.range
        parsing.append(
            ParsedValue(
                resolved_value=registry.resolved_value(possible_match.resolved_value),
                alternatives=[
                    registry.resolved_value(idx)
                    for idx, _ in possible_match.alternative_resolved_values
                ],
                range=char_range,
                matched_value=text[char_range.start:char_range.stop],
            )
        )
        taken_tokens.update(possible_match.tokens_range)

    parsing.sort(key=lambda parsed: parsed.range.start)
    return parsing