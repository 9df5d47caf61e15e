# gazetteer-parser

A library that finds and resolves entity values, drawn from a gazetteer, inside
written queries.

The parser is built from an ordered list of entity values. It looks for maximal
contiguous runs of query tokens that match entity values, and it may skip some
of the tokens that make up a value. When several resolutions are possible:

- the entity value sharing the most tokens with the input is preferred;
- on a tie, the value with the smallest rank in the gazetteer (the one added
  first) is preferred, so the order of the gazetteer matters.

Queries and raw values are split on Unicode whitespace; matching is exact and
case-sensitive on the resulting tokens.

## Installation

```
pip install gazetteer-parser
```

To run the test suite, install the `test` extra and run `pytest`:

```
pip install "gazetteer-parser[test]"
pytest
```

## Usage

### Building a gazetteer

A gazetteer (`gazetteer_parser.data.Gazetteer`) is an ordered list of
`EntityValue`s, most popular first. Each value has a raw value, which is what
is matched in the text, and a resolved value, which is what is returned.

```python
from gazetteer_parser.data import EntityValue, Gazetteer, gazetteer

artists = Gazetteer()
artists.add(EntityValue(resolved_value="The Rolling Stones", raw_value="the rolling stones"))
artists.add(EntityValue(resolved_value="The Strokes", raw_value="the strokes"))

# Or in one go, from (raw value, resolved value) pairs:
artists = gazetteer(
    ("the rolling stones", "The Rolling Stones"),
    ("the strokes", "The Strokes"),
    ("the hives", "The Hives"),
    ("jacques brel", "Jacques Brel"),
    ("daniel brel", "Daniel Brel"),
)
```

`Gazetteer.extend(other)` appends the values of another gazetteer, and
`Gazetteer.to_list()` / `Gazetteer.from_list(data)` convert to and from a list
of `{"resolved_value": ..., "raw_value": ...}` dictionaries.

### Building a parser

`gazetteer_parser.parser_builder.ParserBuilder` configures the parser. Every
setter returns the builder, so calls can be chained:

- `minimum_tokens_ratio(ratio)`: the minimal fraction of a value's tokens that
  must be matched, between 0.0 and 1.0 (default 1.0);
- `gazetteer(g)` replaces the values, `extend_with_gazetteer(g)` appends a
  gazetteer, `add_value(v)` appends one value;
- `n_stop_words(n)`: treat the `n` most frequent gazetteer tokens as stop words;
- `additional_stop_words(words)`: further stop words;
- `license_info(info)`: a `LicenseInfo(filename, content)` written next to the
  parser when it is dumped.

```python
from gazetteer_parser.parser_builder import ParserBuilder

parser = (
    ParserBuilder()
    .minimum_tokens_ratio(0.5)
    .gazetteer(artists)
    .n_stop_words(1)
    .additional_stop_words(["a", "for"])
    .build()
)
```

`build()` raises `gazetteer_parser.parser.GazetteerParserError` if the ratio is
outside `[0.0, 1.0]`.

Stop words never start a match on their own, but they extend matches they
belong to. Values made only of stop words ("edge cases") match only when they
appear in full in the input.

A builder can be stored as indented JSON with `ParserBuilder.to_json()` and read
back with `ParserBuilder.from_json(text)`; `to_dict()` / `from_dict(data)` do
the same with plain dictionaries.

### Parsing

`Parser.run(text, max_alternatives)` returns a list of `ParsedValue`s, ordered
by position in the text. `max_alternatives` bounds how many other resolutions,
matched in the same proportion, are returned alongside the chosen one.

```python
for value in parser.run("I want to listen to the stones", 5):
    print(value.matched_value, "->", value.resolved_value.resolved)
# the stones -> The Rolling Stones

[brel] = parser.run("I want to listen to brel", 5)
print(brel.resolved_value.resolved)                    # Jacques Brel
print([alt.resolved for alt in brel.alternatives])     # ['Daniel Brel']
```

Each `ParsedValue` carries `matched_value` (the matched text), `range` (its
character range in the input), `resolved_value` and `alternatives` (each a
`ResolvedValue` with `resolved` and `raw_value`). `ParsedValue.to_dict()` gives
a plain dictionary.

The ratio can be changed on a built parser through its `threshold` attribute,
and the stop words with `Parser.set_stop_words(n_stop_words, additional_stop_words)`.

### Adding and injecting values

`Parser.add_value(entity_value, rank)` adds one value with a given rank, and
`Parser.prepend_values(values)` adds values ahead of the existing ones, shifting
their ranks.

`Parser.inject_new_values(new_values, prepend, from_vanilla)` rebuilds the
parser with new values placed before (`prepend=True`) or after the current
ones. With `from_vanilla=True` any previously injected values are dropped
first. Values with an empty raw value are ignored. The parser is updated in
place and returned.

```python
from gazetteer_parser.data import EntityValue

parser = parser.inject_new_values(
    [EntityValue(resolved_value="The Flying Stones", raw_value="the flying stones")],
    True,
    False,
)
```

### Saving and loading

```python
from gazetteer_parser.parser import Parser

parser.dump("my_parser")          # the folder must not exist yet
reloaded = Parser.from_folder("my_parser")
```

The folder holds `metadata.json` (version, threshold, stop words and edge
cases, as returned by `Parser.config()`), the parser data in MessagePack form
in a file named `parser`, and the licence file when one was configured. Errors
while writing or reading raise `GazetteerParserError`. `Parser.to_dict()` /
`Parser.from_dict(data)` give the same data as plain dictionaries.

## What it does not do

This is a library only: it has no command-line tool and no server. Queries are
not normalised (no lower-casing, accent folding or punctuation stripping); do
that before calling `run` if needed.