"""Tests for constructor-based decoding.

Covers:
    - Selection of the first marked constructor whose required keys are present
    - Parameter defaults and renamed parameter keys
    - Signatures reported when no constructor can be satisfied
    - Single-parameter constructors for non-object JSON
    - Forcing and disabling default construction
"""

import math
from dataclasses import dataclass
from typing import Annotated

import pytest

from jsonize import (
    JsonizeConstructorError,
    JsonizeNoPrimitiveConstructorError,
    decode,
    encode,
    jsonizable,
    jsonize,
    schema_of,
)


@jsonizable
class Polar:
    x: float
    y: float

    def __init__(self, x: float, y: float):
        self.x = x
        self.y = y

    @jsonize
    @classmethod
    def from_polar(cls, r: float, theta: float) -> "Polar":
        return cls(r * math.cos(theta), r * math.sin(theta))

    @jsonize
    @classmethod
    def from_cartesian(cls, x: float, y: float) -> "Polar":
        return cls(x, y)


@jsonizable
class Connection:
    host: str
    port: int

    @jsonize
    def __init__(self, host: str, port: Annotated[int, jsonize("p")] = 80):
        self.host = host
        self.port = port


@jsonizable
class Celsius:
    degrees: float

    @jsonize
    def __init__(self, degrees: float):
        self.degrees = degrees


@jsonizable
class Version:
    major: int
    minor: int

    def __init__(self, major: int, minor: int):
        self.major = major
        self.minor = minor

    @jsonize
    @staticmethod
    def parse(text: str) -> "Version":
        major, minor = text.split(".")
        return Version(int(major), int(minor))


@jsonizable
class NeedsArgs:
    a: int

    def __init__(self, a: int):
        self.a = a


@jsonizable(default_construct=True)
class Forced:
    a: int

    def __init__(self, a: int):
        raise AssertionError("__init__ must not be called")


@jsonizable(default_construct=False)
@dataclass
class NoDefault:
    a: int = 0


@jsonizable
@dataclass
class Catalog:
    versions: list[Version]
    temperature: Celsius | None = None


class TestConstructorSelection:
    """The first declared constructor whose required keys are present is called."""

    def test_first_constructor(self):
        polar = decode({"r": 2, "theta": 0}, Polar)
        assert polar.x == pytest.approx(2.0)
        assert polar.y == pytest.approx(0.0)

    def test_second_constructor(self):
        polar = decode({"x": "1", "y": 2}, Polar)
        assert (polar.x, polar.y) == (1.0, 2.0)

    def test_first_declared_wins(self):
        polar = decode({"r": 1, "theta": math.pi / 2, "x": 5, "y": 5}, Polar)
        assert polar.x == pytest.approx(0.0)
        assert polar.y == pytest.approx(1.0)

    def test_no_constructor_satisfied(self):
        with pytest.raises(JsonizeConstructorError) as exc_info:
            decode({"x": 1, "theta": 0}, Polar)
        assert exc_info.value.signatures == [
            "Polar.from_polar(r: float, theta: float)",
            "Polar.from_cartesian(x: float, y: float)",
        ]
        message = str(exc_info.value)
        assert "Polar has no default constructor" in message
        assert "Polar.from_polar(r: float, theta: float)" in message

    def test_defaults_and_renamed_parameter(self):
        assert decode({"host": "h"}, Connection).port == 80
        assert decode({"host": "h", "p": "8080"}, Connection).port == 8080

    def test_renamed_parameter_ignores_attribute_name(self):
        assert decode({"host": "h", "port": 1}, Connection).port == 80

    def test_signature_names_parameters(self):
        with pytest.raises(JsonizeConstructorError) as exc_info:
            decode({"port": 1}, Connection)
        assert exc_info.value.signatures == ["Connection(host: str, port: int)"]

    def test_unmarked_init_and_no_constructors(self):
        with pytest.raises(JsonizeConstructorError) as exc_info:
            decode({"a": 1}, NeedsArgs)
        assert exc_info.value.signatures == []
        assert "<no jsonized constructors>" in str(exc_info.value)

    def test_constructed_object_is_encoded_from_members(self):
        assert encode(decode({"host": "h", "p": 1}, Connection)) == {"host": "h", "port": 1}


class TestPrimitiveConstructor:
    """A non-object JSON value goes to the single-parameter constructor."""

    def test_number(self):
        assert decode(21.5, Celsius).degrees == 21.5

    def test_numeric_string(self):
        assert decode("30", Celsius).degrees == 30.0

    def test_object_still_uses_keys(self):
        assert decode({"degrees": 5}, Celsius).degrees == 5.0

    def test_static_method(self):
        version = decode("1.2", Version)
        assert (version.major, version.minor) == (1, 2)

    def test_inside_containers(self):
        catalog = decode({"versions": ["1.0", "2.5"], "temperature": 7}, Catalog)
        assert [(v.major, v.minor) for v in catalog.versions] == [(1, 0), (2, 5)]
        assert catalog.temperature.degrees == 7.0

    def test_missing_primitive_constructor(self):
        with pytest.raises(JsonizeNoPrimitiveConstructorError) as exc_info:
            decode(5, Polar)
        assert exc_info.value.json == 5


class TestDefaultConstruction:
    """Default construction can be forced or disabled per class."""

    def test_detected_paths(self):
        assert schema_of(Connection).default_construction is None
        assert schema_of(Catalog).default_construction == "blank"
        assert schema_of(NoDefault).default_construction is None

    def test_forced_skips_init(self):
        forced = decode({"a": "3"}, Forced)
        assert isinstance(forced, Forced)
        assert forced.a == 3

    def test_disabled(self):
        with pytest.raises(JsonizeConstructorError):
            decode({"a": 1}, NoDefault)
