"""Configuring and building a gazetteer parser."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from .data import EntityValue, Gazetteer
from .parser import GazetteerParserError, LicenseInfo, Parser


class ParserBuilder:
    """Collects a gazetteer and settings, then builds a :class:`Parser`.

    Every setter returns the builder so that calls can be chained.
    """

    def __init__(self) -> None:
        self._gazetteer = Gazetteer()
        self._threshold = 1.0
        self._n_gazetteer_stop_words: int | None = None
        self._additional_stop_words: list[str] | None = None
        self._license_info: LicenseInfo | None = None

    def gazetteer(self, gazetteer: Gazetteer) -> ParserBuilder:
        """Replace any previously given gazetteer."""
        self._gazetteer = Gazetteer(list(gazetteer.data))
        return self

    def extend_with_gazetteer(self, gazetteer: Gazetteer) -> ParserBuilder:
        """Append the values of a gazetteer to the current one."""
        self._gazetteer.extend(Gazetteer(list(gazetteer.data)))
        return self

    def add_value(self, entity_value: EntityValue) -> ParserBuilder:
        """Append a single value to the gazetteer."""
        self._gazetteer.add(entity_value)
        return self

    def minimum_tokens_ratio(self, ratio: float) -> ParserBuilder:
        """Set the minimal fraction of a value's tokens needed for a match."""
        self._threshold = ratio
        return self

    def n_stop_words(self, n: int) -> ParserBuilder:
        """Use the ``n`` most frequent gazetteer tokens as stop words."""
        self._n_gazetteer_stop_words = n
        return self

    def additional_stop_words(self, asw: Iterable[str]) -> ParserBuilder:
        """Set stop words given explicitly."""
        self._additional_stop_words = list(asw)
        return self

    def license_info(self, license_info: LicenseInfo | None) -> ParserBuilder:
        """Set the license shipped with the parser's data."""
        self._license_info = license_info
        return self

    def build(self) -> Parser:
        """Create the parser; the ratio must lie between 0 and 1."""
        if self._threshold < 0.0 or self._threshold > 1.0:
            raise GazetteerParserError(
                f"Invalid value for threshold ({self._threshold}), "
                "it must be between 0.0 and 1.0"
            )
        parser = Parser()
        for rank, entity_value in enumerate(self._gazetteer.data):
            parser.add_value(entity_value, rank)
        parser.threshold = self._threshold
        parser.set_stop_words(self._n_gazetteer_stop_words or 0, self._additional_stop_words)
        parser.license_info = self._license_info
        return parser

    def to_dict(self) -> dict[str, Any]:
        return {
            "gazetteer": self._gazetteer.to_list(),
            "threshold": self._threshold,
            "n_gazetteer_stop_words": self._n_gazetteer_stop_words,
            "additional_stop_words": (
                None
                if self._additional_stop_words is None
                else list(self._additional_stop_words)
            ),
            "license_info": (
                None if self._license_info is None else self._license_info.to_dict()
            ),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ParserBuilder:
        builder = cls()
        builder._gazetteer = Gazetteer.from_list(data["gazetteer"])
        builder._threshold = float(data["threshold"])
        n_stop_words = data.get("n_gazetteer_stop_words")
        builder._n_gazetteer_stop_words = None if n_stop_words is None else int(n_stop_words)
        extra = data.get("additional_stop_words")
        builder._additional_stop_words = None if extra is None else [str(w) for w in extra]
        license_data = data.get("license_info")
        builder._license_info = (
            None if license_data is None else LicenseInfo.from_dict(license_data)
        )
        return builder

    def to_json(self) -> str:
        """Serialize the builder as indented JSON."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> ParserBuilder:
        return cls.from_dict(json.loads(text))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParserBuilder):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (
            f"ParserBuilder(values={len(self._gazetteer.data)}, "
            f"threshold={self._threshold}, "
            f"n_stop_words={self._n_gazetteer_stop_words}, "
            f"additional_stop_words={self._additional_stop_words}, "
            f"license_info={self._license_info})"
        )