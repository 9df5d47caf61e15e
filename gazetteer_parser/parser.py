"""The gazetteer entity parser and its on-disk persistence."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import msgpack

from .data import EntityValue
from .injection import inject_new_values as _inject_into_registry
from .matching import find_possible_matches
from .parser_registry import ParserRegistry
from .resolution import parse_input
from .results import ParsedValue
from .utils import METADATA_FILENAME, PARSER_FILE

_VERSION = "0.9.0"


class GazetteerParserError(Exception):
    """Raised when a parser cannot be persisted or loaded."""


@dataclass(frozen=True)
class LicenseInfo:
    """License file shipped alongside the parser's data."""

    filename: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"filename": self.filename, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LicenseInfo:
        return cls(filename=str(data["filename"]), content=str(data["content"]))


@dataclass
class Parser:
    """Finds maximal substrings of a query matching gazetteer values.

    On ambiguity the value with the lowest rank, i.e. added first, is preferred.
    ``threshold`` is the minimal fraction of a value's tokens that must be matched.
    """

    registry: ParserRegistry = field(default_factory=ParserRegistry)
    threshold: float = 0.0
    license_info: LicenseInfo | None = None

    def add_value(self, entity_value: EntityValue, rank: int) -> int | None:
        """Add a value with its rank; return its index, or None if the value is empty."""
        return self.registry.add_value(entity_value.into_tokenized(), rank)

    def prepend_values(self, entity_values: Sequence[EntityValue]) -> list[int]:
        """Add values ahead of the existing ones and return their indices."""
        return self.registry.prepend_values(
            [value.into_tokenized() for value in entity_values]
        )

    def set_stop_words(
        self, n_stop_words: int, additional_stop_words: Iterable[str] | None = None
    ) -> None:
        """Use the most frequent gazetteer tokens plus any additional words as stop words."""
        self.registry.set_stop_words(n_stop_words, additional_stop_words)

    def run(self, text: str, max_alternatives: int) -> list[ParsedValue]:
        """Parse ``text``, returning at most ``max_alternatives`` alternatives per value."""
        matches = find_possible_matches(self.registry, text, self.threshold, max_alternatives)
        return parse_input(self.registry, text, self.threshold, matches)

    def inject_new_values(
        self, new_values: Iterable[EntityValue], prepend: bool, from_vanilla: bool
    ) -> Parser:
        """Inject values before or after the existing ones and return this parser.

        With ``from_vanilla`` previously injected values are removed first.
        """
        self.registry = _inject_into_registry(
            self.registry,
            [value.into_tokenized() for value in new_values],
            prepend,
            from_vanilla,
        )
        return self

    def config(self) -> dict[str, Any]:
        """Return the metadata written next to a dumped parser."""
        return {
            "version": _VERSION,
            "parser_filename": PARSER_FILE,
            "threshold": self.threshold,
            "stop_words": sorted(self.registry.stop_words()),
            "edge_cases": sorted(self.registry.edge_cases()),
        }

    def dump(self, folder_name: str | Path) -> None:
        """Write the parser into a new folder."""
        folder = Path(folder_name)
        try:
            folder.mkdir()
        except OSError as exc:
            raise GazetteerParserError("Error when creating persisting directory") from exc

        config = self.config()
        try:
            with open(folder / METADATA_FILENAME, "w", encoding="utf-8") as metadata_file:
                json.dump(config, metadata_file)
        except OSError as exc:
            raise GazetteerParserError("Error when creating metadata file") from exc

        try:
            payload = msgpack.packb(self.to_dict(), use_bin_type=True)
            (folder / config["parser_filename"]).write_bytes(payload)
        except OSError as exc:
            raise GazetteerParserError("Error when creating the parser file") from exc

        if self.license_info is not None:
            try:
                (folder / self.license_info.filename).write_text(
                    self.license_info.content, encoding="utf-8"
                )
            except OSError as exc:
                raise GazetteerParserError("Error when writing the license") from exc

    @classmethod
    def from_folder(cls, folder_name: str | Path) -> Parser:
        """Load a parser written by :meth:`dump`."""
        folder = Path(folder_name)
        try:
            with open(folder / METADATA_FILENAME, encoding="utf-8") as metadata_file:
                config = json.load(metadata_file)
        except OSError as exc:
            raise GazetteerParserError("Error when opening the metadata file") from exc
        except ValueError as exc:
            raise GazetteerParserError("Error when deserializing the metadata") from exc
        if not isinstance(config, dict) or "parser_filename" not in config:
            raise GazetteerParserError("Error when deserializing the metadata")

        try:
            raw = (folder / str(config["parser_filename"])).read_bytes()
        except OSError as exc:
            raise GazetteerParserError("Error when opening the parser file") from exc
        try:
            return cls.from_dict(msgpack.unpackb(raw, raw=False))
        except (ValueError, KeyError, TypeError, msgpack.UnpackException) as exc:
            raise GazetteerParserError("Error when deserializing the parser") from exc

    def to_dict(self) -> dict[str, Any]:
        return {
            "registry": self.registry.to_dict(),
            "threshold": self.threshold,
            "license_info": None if self.license_info is None else self.license_info.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Parser:
        license_data = data.get("license_info")
        return cls(
            registry=ParserRegistry.from_dict(data["registry"]),
            threshold=float(data["threshold"]),
            license_info=None if license_data is None else LicenseInfo.from_dict(license_data),
        )