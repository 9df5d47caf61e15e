import pytest

from gazetteer_parser.data import TokenizedEntityValue
from gazetteer_parser.matching import PossibleMatch, find_possible_matches, group_matches
from gazetteer_parser.parser_registry import ParserRegistry


def _match(resolved_value=0, rng=range(0, 5), consumed=1, raw_len=2, rank=0):
    return PossibleMatch(
        resolved_value=resolved_value,
        range=rng,
        tokens_range=range(0, consumed),
        raw_value_length=raw_len,
        n_consumed_tokens=consumed,
        last_token_in_input=consumed - 1,
        first_token_in_resolution=0,
        last_token_in_resolution=consumed - 1,
        rank=rank,
    )


def _registry(values, n_stop_words=0, additional=None):
    registry = ParserRegistry()
    for rank, (resolved, raw) in enumerate(values):
        registry.add_value(TokenizedEntityValue(resolved, raw.split()), rank)
    registry.set_stop_words(n_stop_words, additional)
    return registry


def test_check_threshold_half():
    match = _match(consumed=1, raw_len=2)
    assert match.check_threshold(0.5) is True
    assert match.check_threshold(0.6) is False


def test_sort_key_prefers_more_consumed_tokens():
    assert _match(consumed=2, raw_len=3).sort_key() > _match(consumed=1, raw_len=3).sort_key()


def test_sort_key_prefers_shorter_values_then_lower_rank():
    assert _match(raw_len=2).sort_key() > _match(raw_len=3).sort_key()
    assert _match(rank=0).sort_key() > _match(rank=4).sort_key()


def test_group_matches_collects_alternatives():
    first = _match(resolved_value=0, rank=0)
    second = _match(resolved_value=1, rank=1)
    grouped = group_matches([second, first], 5)
    assert len(grouped) == 1
    assert grouped[0].resolved_value == 0
    assert grouped[0].alternative_resolved_values == [(1, 1)]


def test_group_matches_respects_max_alternatives():
    matches = [_match(resolved_value=i, rank=i) for i in range(4)]
    grouped = group_matches(matches, 2)
    assert grouped[0].alternative_resolved_values == [(1, 1), (2, 2)]
    assert group_matches(matches, 0)[0].alternative_resolved_values == []


def test_group_matches_skips_longer_values():
    short = _match(resolved_value=0, raw_len=2, rank=1)
    longer = _match(resolved_value=1, raw_len=3, rank=0)
    grouped = group_matches([longer, short], 5)
    assert grouped[0].resolved_value == 0
    assert grouped[0].alternative_resolved_values == []


def test_group_matches_does_not_mutate_input():
    first = _match(resolved_value=0, rank=0)
    second = _match(resolved_value=1, rank=1)
    group_matches([first, second], 5)
    assert first.alternative_resolved_values == []


def test_group_matches_keeps_distinct_ranges_best_first():
    a = _match(resolved_value=0, rng=range(0, 5), consumed=1)
    b = _match(resolved_value=1, rng=range(6, 12), consumed=2, raw_len=2)
    grouped = group_matches([a, b], 5)
    keys = [m.sort_key() for m in grouped]
    assert keys == sorted(keys, reverse=True)
    assert {m.resolved_value for m in grouped} == {0, 1}


def test_find_contiguous_match():
    registry = _registry([("The Rolling Stones", "the rolling stones")])
    text = "listen to rolling stones"
    matches = find_possible_matches(registry, text, 0.5, 5)
    assert len(matches) == 1
    match = matches[0]
    assert text[match.range.start:match.range.stop] == "rolling stones"
    assert match.n_consumed_tokens == 2
    assert match.tokens_range == range(2, 4)


def test_non_adjacent_tokens_do_not_match():
    registry = _registry([("The Rolling Stones", "the rolling stones")])
    text = "the music I want to listen to is rolling on stones"
    assert find_possible_matches(registry, text, 0.5, 5) == []


def test_unknown_tokens_give_no_match():
    registry = _registry([("The Rolling Stones", "the rolling stones")])
    assert find_possible_matches(registry, "joue moi quelque chose", 0.0, 5) == []


def test_leading_stop_word_is_included_by_backtracking():
    registry = _registry(
        [("The Rolling Stones", "the rolling stones")], additional=["the"]
    )
    text = "the rolling stones"
    matches = find_possible_matches(registry, text, 1.0, 5)
    assert len(matches) == 1
    assert matches[0].range == range(0, len(text))
    assert matches[0].n_consumed_tokens == 3


def test_edge_case_matches_only_in_full():
    registry = _registry(
        [("The Stones", "the stones"), ("The Rolling Stones", "the rolling stones")],
        n_stop_words=2,
    )
    assert registry.edge_cases() == {"The Stones"}
    full = find_possible_matches(registry, "play the stones", 0.5, 5)
    resolved = {m.resolved_value for m in full if m.range == range(5, 15)}
    assert 0 in resolved
    partial = find_possible_matches(registry, "play the", 0.5, 5)
    assert all(m.resolved_value != 0 for m in partial)


def test_ambiguity_prefers_lower_rank_with_alternative():
    registry = _registry(
        [("Jacques Brel", "jacques brel"), ("Daniel Brel", "daniel brel")]
    )
    matches = find_possible_matches(registry, "listen to brel", 0.5, 5)
    assert len(matches) == 1
    assert registry.resolved_value(matches[0].resolved_value).resolved == "Jacques Brel"
    assert matches[0].alternative_resolved_values == [(1, 1)]


def test_results_ordered_best_first():
    registry = _registry(
        [
            ("The Rolling Stones", "the rolling stones"),
            ("Blink-182", "blink one eight two"),
        ]
    )
    matches = find_possible_matches(registry, "rolling stones and blink eight", 0.0, 5)
    keys = [m.sort_key() for m in matches]
    assert keys == sorted(keys, reverse=True)
    assert len(matches) >= 2


@pytest.mark.parametrize("threshold", [0.0, 0.5, 1.0])
def test_all_matches_pass_threshold(threshold):
    registry = _registry(
        [("Space Invader", "space invader"), ("Invader Attack", "invader attack")]
    )
    matches = find_possible_matches(registry, "play space invader attack", threshold, 5)
    assert matches
    assert all(m.check_threshold(threshold) for m in matches)