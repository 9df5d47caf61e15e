import pytest

from gazetteer_parser.data import EntityValue, ResolvedValue
from gazetteer_parser.matching import PossibleMatch, find_possible_matches
from gazetteer_parser.parser_registry import ParserRegistry
from gazetteer_parser.resolution import parse_input, reduce_possible_match
from gazetteer_parser.results import ParsedValue


def _registry(pairs, n_stop_words=0, extra=None):
    registry = ParserRegistry()
    for rank, (raw, resolved) in enumerate(pairs):
        registry.add_value(EntityValue(resolved, raw).into_tokenized(), rank)
    registry.set_stop_words(n_stop_words, extra)
    return registry


def _run(registry, text, threshold, max_alternatives=5):
    matches = find_possible_matches(registry, text, threshold, max_alternatives)
    return parse_input(registry, text, threshold, matches)


def _match(tokens_range, char_range, rank=3, alternatives=None):
    return PossibleMatch(
        resolved_value=7,
        range=char_range,
        tokens_range=tokens_range,
        raw_value_length=4,
        n_consumed_tokens=len(tokens_range),
        last_token_in_input=tokens_range.stop - 1,
        first_token_in_resolution=0,
        last_token_in_resolution=len(tokens_range) - 1,
        rank=rank,
        alternative_resolved_values=list(alternatives or []),
    )


def test_reduce_drops_leading_taken_token():
    text = "alpha beta gamma"
    match = _match(range(0, 3), range(0, len(text)), alternatives=[(1, 2)])
    reduced = reduce_possible_match(text, match, {0})
    assert text[reduced.range.start:reduced.range.stop] == "beta gamma"
    assert reduced.tokens_range == range(1, 3)
    assert reduced.n_consumed_tokens == len(reduced.tokens_range)
    assert reduced.rank == 3
    assert reduced.raw_value_length == 4
    assert reduced.alternative_resolved_values == [(1, 2)]


def test_reduce_keeps_span_between_free_tokens():
    text = "alpha beta gamma"
    match = _match(range(0, 3), range(0, len(text)))
    reduced = reduce_possible_match(text, match, {1})
    assert reduced.range == range(0, len(text))
    assert reduced.tokens_range == range(0, 3)
    assert reduced.n_consumed_tokens == 3


def test_reduce_all_tokens_taken_gives_none():
    text = "alpha beta"
    match = _match(range(0, 2), range(0, len(text)))
    assert reduce_possible_match(text, match, {0, 1}) is None


def test_parse_from_source_example():
    registry = _registry(
        [
            ("the flying stones", "The Flying Stones"),
            ("the rolling stones", "The Rolling Stones"),
            ("blink one eight two", "Blink-182"),
            ("je suis animal", "Je Suis Animal"),
        ]
    )
    parsed = _run(registry, "i want to listen to rolling stones and blink eight", 0.0)
    assert parsed == [
        ParsedValue(
            matched_value="rolling stones",
            resolved_value=ResolvedValue("The Rolling Stones", "the rolling stones"),
            alternatives=[],
            range=range(20, 34),
        ),
        ParsedValue(
            matched_value="blink eight",
            resolved_value=ResolvedValue("Blink-182", "blink one eight two"),
            alternatives=[],
            range=range(39, 50),
        ),
    ]
    assert _run(registry, "joue moi quelque chose", 0.0) == []


def test_non_adjacent_tokens_are_not_parsed():
    registry = _registry([("the rolling stones", "The Rolling Stones")])
    text = "the music I want to listen to is rolling on stones"
    assert _run(registry, text, 0.5) == []


def test_mixed_ordered_entity():
    registry = _registry([("the rolling stones", "The Rolling Stones")])
    parsed = _run(registry, "rolling the stones", 0.5)
    assert parsed == [
        ParsedValue(
            resolved_value=ResolvedValue("The Rolling Stones", "the rolling stones"),
            range=range(8, 18),
            matched_value="the stones",
            alternatives=[],
        )
    ]


def test_longest_substring_and_reduction():
    registry = _registry(
        [
            ("black and white", "Black And White"),
            ("album", "Album"),
            ("the black and white album", "The Black and White Album"),
            ("one two three four", "1 2 3 4"),
            ("three four five", "3 4 5"),
            ("five six", "5 6"),
        ]
    )
    parsed = _run(registry, "je veux écouter le black and white album", 0.7)
    assert parsed == [
        ParsedValue(
            matched_value="black and white album",
            resolved_value=ResolvedValue(
                "The Black and White Album", "the black and white album"
            ),
            alternatives=[],
            range=range(19, 40),
        )
    ]
    parsed = _run(registry, "zero one two three four five", 0.7)
    assert [p.range for p in parsed] == [range(5, 23)]
    parsed = _run(registry, "zero one two three four five six", 0.7)
    assert [(p.matched_value, p.range) for p in parsed] == [
        ("one two three four", range(5, 23)),
        ("five six", range(24, 32)),
    ]


def test_alternatives_are_resolved():
    registry = _registry(
        [
            ("space invader", "Space Invader"),
            ("invader on mars", "Invader on Mars"),
            ("invader attack", "Invader Attack"),
        ]
    )
    parsed = _run(registry, "I want to play to invader", 0.5)
    assert parsed == [
        ParsedValue(
            matched_value="invader",
            resolved_value=ResolvedValue("Space Invader", "space invader"),
            alternatives=[ResolvedValue("Invader Attack", "invader attack")],
            range=range(18, 25),
        )
    ]


def test_edge_case_matches_in_full():
    registry = _registry(
        [
            ("the flying stones", "The Flying Stones"),
            ("the rolling stones", "The Rolling Stones"),
            ("the stones rolling", "The Stones Rolling"),
            ("the stones", "The Stones"),
        ],
        n_stop_words=2,
        extra=["hello"],
    )
    parsed = _run(registry, "je veux écouter les the stones", 1.0)
    assert parsed == [
        ParsedValue(
            matched_value="the stones",
            resolved_value=ResolvedValue("The Stones", "the stones"),
            alternatives=[],
            range=range(20, 30),
        )
    ]
    assert _run(registry, "je veux écouter les the", 0.5) == []


def test_results_are_ordered_and_disjoint():
    registry = _registry(
        [
            ("one two three four", "1 2 3 4"),
            ("three four five", "3 4 5"),
            ("five six", "5 6"),
        ]
    )
    text = "five six one two three four five six"
    parsed = _run(registry, text, 0.5)
    assert parsed
    for earlier, later in zip(parsed, parsed[1:]):
        assert earlier.range.stop <= later.range.start
    for value in parsed:
        assert text[value.range.start:value.range.stop] == value.matched_value


def test_parse_input_does_not_consume_given_matches():
    registry = _registry([("the rolling stones", "The Rolling Stones")])
    text = "rolling the stones"
    matches = find_possible_matches(registry, text, 0.5, 5)
    before = [m.copy() for m in matches]
    first = parse_input(registry, text, 0.5, matches)
    second = parse_input(registry, text, 0.5, matches)
    assert matches == before
    assert first == second


@pytest.mark.parametrize("text", ["", "   ", "nothing relevant here"])
def test_no_tokens_or_no_matches_give_empty(text):
    registry = _registry([("the rolling stones", "The Rolling Stones")])
    assert _run(registry, text, 0.5) == []