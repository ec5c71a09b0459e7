"""Tests for encoding typed values into JSON values and text."""

from dataclasses import dataclass, field
from enum import Enum, StrEnum
from pathlib import Path
from typing import Annotated, Any

import pytest

from jsonize import (
    Jsonize,
    JsonizeIn,
    JsonizeOut,
    JsonizeSchemaError,
    decode,
    encode,
    encode_text,
    jsonizable,
    jsonize,
)


class Level(Enum):
    LOW = "l"
    HIGH = "h"


@dataclass
class Point:
    x: float
    y: float


@jsonizable
@dataclass
class Record:
    title: str
    level: Level
    location: Path
    points: list[Point] = field(default_factory=list)
    labels: Annotated[list[str], jsonize(Jsonize.OPT)] = field(default_factory=list)
    note: Annotated[str | None, jsonize(Jsonize.OPT)] = None
    count: Annotated[int, jsonize(Jsonize.OPT)] = 5
    secret: Annotated[str, jsonize(JsonizeIn.OPT, JsonizeOut.NO)] = ""
    raw: Any = None


class TestEncodeValues:
    """Leaf values and containers."""

    @pytest.mark.parametrize("value", [None, True, 0, -3, 2.5, "text", ""])
    def test_primitives_unchanged(self, value):
        assert encode(value) == value

    def test_enum_by_name(self):
        assert encode(Level.HIGH) == "HIGH"

    def test_path(self):
        assert encode(Path("/tmp/data.json")) == "/tmp/data.json"

    def test_sequences(self):
        assert encode([1, (2, 3)]) == [1, [2, 3]]
        assert encode({"only"}) == ["only"]

    def test_dict(self):
        assert encode({"a": Level.LOW, "b": [Path("x")]}) == {"a": "LOW", "b": ["x"]}

    def test_raw_json_tree(self):
        tree = {"a": [1, None, {"b": False}]}
        assert encode(tree) == tree

    def test_non_string_keys(self):
        with pytest.raises(JsonizeSchemaError):
            encode({1: "a"})

    def test_string_enum_keys_keep_their_value(self):
        class Channel(StrEnum):
            red = "r"
            green = "g"

        encoded = encode({Channel.red: 1, Channel.green: 2})
        assert encoded == {"r": 1, "g": 2}
        assert decode(encoded, dict[str, int]) == {"r": 1, "g": 2}

    def test_unsupported_value(self):
        with pytest.raises(JsonizeSchemaError):
            encode(object())


class TestEncodeAggregates:
    """Aggregates emit their output-allowed members in declaration order."""

    def test_declaration_order(self):
        record = Record("r", Level.LOW, Path("a/b"), points=[Point(1, 2)])
        assert list(encode(record)) == ["title", "level", "location", "points", "raw"]

    def test_values(self):
        record = Record("r", Level.LOW, Path("a/b"), points=[Point(1, 2)], raw={"k": [1]})
        assert encode(record) == {
            "title": "r",
            "level": "LOW",
            "location": "a/b",
            "points": [{"x": 1, "y": 2}],
            "raw": {"k": [1]},
        }

    def test_optional_members_differing_from_default(self):
        record = Record("r", Level.HIGH, Path("."), labels=["x"], note="n", count=0)
        encoded = encode(record)
        assert encoded["labels"] == ["x"]
        assert encoded["note"] == "n"
        assert encoded["count"] == 0

    def test_output_no_is_never_written(self):
        assert "secret" not in encode(Record("r", Level.LOW, Path("."), secret="s"))

    def test_round_trip(self):
        record = Record("r", Level.HIGH, Path("x/y"), [Point(1.5, -2)], ["a"], "n", 1, "", [1])
        decoded = decode(encode(record), Record)
        assert decoded == record

    def test_secret_is_not_round_tripped(self):
        record = Record("r", Level.HIGH, Path("x"), secret="s")
        assert decode(encode(record), Record).secret == ""


class TestEncodeText:
    """JSON text output."""

    def test_pretty(self):
        assert encode_text({"a": [1, 2]}) == '{\n  "a": [\n    1,\n    2\n  ]\n}'

    def test_compact(self):
        assert encode_text({"a": [1, 2], "b": None}, pretty=False) == '{"a":[1,2],"b":null}'

    def test_non_ascii_is_kept(self):
        assert encode_text("café", pretty=False) == '"café"'

    def test_aggregate(self):
        assert encode_text(Point(1, 2), pretty=False) == '{"x":1,"y":2}'
