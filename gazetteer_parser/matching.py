"""Finding the candidate matches of gazetteer values inside a query."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .parser_registry import ParserRegistry
from .utils import check_threshold as _check_ratio
from .utils import whitespace_tokenizer


@dataclass
class PossibleMatch:
    """A partial match of a resolved value that grows as input tokens are read."""

    resolved_value: int
    range: range
    tokens_range: range
    raw_value_length: int
    n_consumed_tokens: int
    last_token_in_input: int
    first_token_in_resolution: int
    last_token_in_resolution: int
    rank: int
    alternative_resolved_values: list[tuple[int, int]] = field(default_factory=list)

    def check_threshold(self, threshold: float) -> bool:
        """Tell whether enough of the value's tokens were matched."""
        return _check_ratio(
            self.n_consumed_tokens,
            self.raw_value_length - self.n_consumed_tokens,
            threshold,
        )

    def sort_key(self) -> tuple[int, int, int]:
        """Key under which better matches compare greater.

        More consumed tokens win, then shorter raw values, then lower ranks.
        """
        return (self.n_consumed_tokens, -self.raw_value_length, -self.rank)

    def copy(self) -> PossibleMatch:
        return replace(self, alternative_resolved_values=list(self.alternative_resolved_values))


def _first_position(tokens: tuple[int, ...], value: int) -> int:
    try:
        return tokens.index(value)
    except ValueError:
        raise ValueError(f"missing token {value} from list {list(tokens)}") from None


def _update_previous_match(
    registry: ParserRegistry,
    possible_match: PossibleMatch,
    token_idx: int,
    value: int,
    token_range: range,
    threshold: float,
    final_matches: list[PossibleMatch],
) -> None:
    rank, otokens = registry.get_tokens(possible_match.resolved_value)

    if token_idx == possible_match.last_token_in_input + 1:
        start = possible_match.last_token_in_resolution + 1
        for otoken_idx, otoken in enumerate(otokens[start:], start):
            if otoken == value:
                possible_match.range = range(possible_match.range.start, token_range.stop)
                possible_match.n_consumed_tokens += 1
                possible_match.last_token_in_input = token_idx
                possible_match.last_token_in_resolution = otoken_idx
                possible_match.tokens_range = range(
                    possible_match.tokens_range.start, possible_match.tokens_range.stop + 1
                )
                return

    # The match cannot grow further: keep it if good enough and start afresh.
    if possible_match.check_threshold(threshold):
        final_matches.append(possible_match.copy())

    position = _first_position(otokens, value)
    possible_match.range = token_range
    possible_match.tokens_range = range(token_idx, token_idx + 1)
    possible_match.raw_value_length = len(otokens)
    possible_match.last_token_in_input = token_idx
    possible_match.first_token_in_resolution = position
    possible_match.last_token_in_resolution = position
    possible_match.n_consumed_tokens = 1
    possible_match.rank = rank
    possible_match.alternative_resolved_values = []


def _insert_new_possible_match(
    registry: ParserRegistry,
    res_val: int,
    value: int,
    token_range: range,
    token_idx: int,
    threshold: float,
    skipped_tokens: dict[int, tuple[range, int]],
) -> PossibleMatch | None:
    rank, otokens = registry.get_tokens(res_val)
    position = _first_position(otokens, value)
    possible_match = PossibleMatch(
        resolved_value=res_val,
        range=token_range,
        tokens_range=range(token_idx, token_idx + 1),
        raw_value_length=len(otokens),
        n_consumed_tokens=1,
        last_token_in_input=token_idx,
        first_token_in_resolution=position,
        last_token_in_resolution=position,
        rank=rank,
    )
    n_skips = position
    # Walk back over stop words that may open the value.
    for btok_idx in reversed(range(token_idx)):
        skipped = skipped_tokens.get(btok_idx)
        if skipped is None:
            break
        skip_range, skip_tok = skipped
        if skip_tok not in otokens:
            break
        if otokens.index(skip_tok) >= possible_match.first_token_in_resolution:
            break
        possible_match.range = range(skip_range.start, possible_match.range.stop)
        possible_match.tokens_range = range(btok_idx, possible_match.tokens_range.stop)
        possible_match.n_consumed_tokens += 1
        possible_match.first_token_in_resolution -= 1
        n_skips -= 1

    # Early stop when more tokens are already skipped than the threshold allows.
    if _check_ratio(possible_match.raw_value_length - n_skips, n_skips, threshold):
        return possible_match
    return None


def _update_or_insert_possible_match(
    registry: ParserRegistry,
    value: int,
    res_val: int,
    token_idx: int,
    token_range: range,
    partial_matches: dict[int, PossibleMatch],
    final_matches: list[PossibleMatch],
    skipped_tokens: dict[int, tuple[range, int]],
    threshold: float,
) -> None:
    existing = partial_matches.get(res_val)
    if existing is not None:
        _update_previous_match(
            registry, existing, token_idx, value, token_range, threshold, final_matches
        )
        return
    new_match = _insert_new_possible_match(
        registry, res_val, value, token_range, token_idx, threshold, skipped_tokens
    )
    if new_match is not None:
        partial_matches[res_val] = new_match


def find_possible_matches(
    registry: ParserRegistry, text: str, threshold: float, max_alternatives: int
) -> list[PossibleMatch]:
    """Return the candidate matches in ``text``, best first."""
    partial_matches: dict[int, PossibleMatch] = {}
    final_matches: list[PossibleMatch] = []
    skipped_tokens: dict[int, tuple[range, int]] = {}

    for token_idx, (token_range, token) in enumerate(whitespace_tokenizer(text)):
        value = registry.get_token_idx(token)
        if value is None:
            continue
        res_vals = registry.get_resolved_values(value)
        if not res_vals:
            continue
        if not registry.is_stop_word(value):
            for res_val in sorted(res_vals):
                _update_or_insert_possible_match(
                    registry, value, res_val, token_idx, token_range,
                    partial_matches, final_matches, skipped_tokens, threshold,
                )
            continue

        skipped_tokens[token_idx] = (token_range, value)
        # Values made only of stop words must match in full.
        for res_val in sorted(registry.edge_case_indices() & res_vals):
            _update_or_insert_possible_match(
                registry, value, res_val, token_idx, token_range,
                partial_matches, final_matches, skipped_tokens, 1.0,
            )
        # A stop word may grow an ongoing match but never starts one.
        for res_val, possible_match in partial_matches.items():
            if res_val not in res_vals or registry.is_edge_case(res_val):
                continue
            _update_previous_match(
                registry, possible_match, token_idx, value, token_range,
                threshold, final_matches,
            )

    for possible_match in partial_matches.values():
        limit = 1.0 if registry.is_edge_case(possible_match.resolved_value) else threshold
        if possible_match.check_threshold(limit):
            final_matches.append(possible_match.copy())

    return group_matches(final_matches, max_alternatives)


def group_matches(
    final_matches: list[PossibleMatch], max_alternatives: int
) -> list[PossibleMatch]:
    """Merge matches sharing a character range, keeping the best with its alternatives.

    The result is ordered best first.
    """
    groups: dict[tuple[int, int], list[PossibleMatch]] = {}
    for match in final_matches:
        groups.setdefault((match.range.start, match.range.stop), []).append(match)

    grouped = []
    for matches in groups.values():
        ordered = sorted(matches, key=PossibleMatch.sort_key, reverse=True)
        best = ordered[0].copy()
        for other in ordered[1:]:
            if len(best.alternative_resolved_values) >= max_alternatives:
                break
            # Only values matched in the same proportion count as alternatives.
            if other.raw_value_length > best.raw_value_length:
                break
            best.alternative_resolved_values.append((other.resolved_value, other.rank))
        grouped.append(best)

    grouped.sort(key=PossibleMatch.sort_key, reverse=True)
    return grouped