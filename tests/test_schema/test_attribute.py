"""Tests for jsonize marks, their resolution and the ``@jsonizable`` decorator."""

import pytest

from jsonize import (
    CONTEXT,
    Jsonize,
    JsonizeIn,
    JsonizeOut,
    JsonizeSchemaError,
    jsonizable,
    jsonize,
)
from jsonize.schema.attribute import JsonizableConfig, marks_of, resolve_marks


class TestJsonizeMark:
    """Parameters of ``jsonize(...)`` may be given in any order."""

    def test_empty(self):
        mark = jsonize()
        assert mark.key is None
        assert mark.perform_in is JsonizeIn.UNSPECIFIED
        assert mark.perform_out is JsonizeOut.UNSPECIFIED

    def test_key_and_shortcut(self):
        mark = jsonize(Jsonize.OPT, "name")
        assert mark.key == "name"
        assert mark.perform_in is JsonizeIn.OPT
        assert mark.perform_out is JsonizeOut.OPT

    def test_later_parameter_wins(self):
        mark = jsonize(Jsonize.OPT, JsonizeOut.NO)
        assert mark.perform_in is JsonizeIn.OPT
        assert mark.perform_out is JsonizeOut.NO

    def test_invalid_parameter(self):
        with pytest.raises(JsonizeSchemaError):
            jsonize(3)

    def test_equality_and_repr(self):
        assert jsonize("a", JsonizeIn.NO) == jsonize(JsonizeIn.NO, "a")
        assert jsonize("a") != jsonize("b")
        assert repr(jsonize("a", JsonizeOut.OPT)) == "jsonize('a', out=opt)"

    def test_context_marker_is_a_singleton(self):
        assert type(CONTEXT)() is CONTEXT
        assert repr(CONTEXT) == "CONTEXT"


class TestDecorator:
    """``jsonize`` as a decorator records marks on the function."""

    def test_bare_decorator_on_function(self):
        @jsonize
        def build(value: int):
            return value

        assert build(1) == 1
        assert marks_of(build) == (jsonize(),)

    def test_marks_on_property(self):
        class Sample:
            @jsonize("shown")
            @property
            def value(self) -> int:
                return 1

        assert marks_of(Sample.__dict__["value"]) == (jsonize("shown"),)

    def test_stacked_decorators_keep_written_order(self):
        @jsonize("outer")
        @jsonize(Jsonize.OPT)
        def build():
            pass

        assert marks_of(build) == (jsonize("outer"), jsonize(Jsonize.OPT))

    def test_cannot_decorate_values(self):
        with pytest.raises(JsonizeSchemaError):
            jsonize("key")(42)

    def test_unmarked(self):
        assert marks_of(lambda: None) == ()
        assert marks_of(42) == ()


class TestResolveMarks:
    """The innermost explicit setting wins; unspecified modes resolve to YES."""

    def test_nothing_specified(self):
        assert resolve_marks([]) == (None, JsonizeIn.YES, JsonizeOut.YES)

    def test_precedence(self):
        marks = [jsonize(Jsonize.OPT), jsonize("a"), jsonize(JsonizeIn.YES), jsonize("b")]
        assert resolve_marks(marks) == ("b", JsonizeIn.YES, JsonizeOut.OPT)

    def test_unspecified_does_not_override(self):
        marks = [jsonize(JsonizeIn.NO, JsonizeOut.OPT), jsonize("renamed")]
        assert resolve_marks(marks) == ("renamed", JsonizeIn.NO, JsonizeOut.OPT)


class TestJsonizable:
    """``@jsonizable`` records class-wide options."""

    def test_bare(self):
        @jsonizable
        class Sample:
            pass

        assert Sample.__jsonize_config__ == JsonizableConfig()

    def test_options(self):
        @jsonizable(ignore_extra_keys=False, explicit=True, defaults=jsonize(Jsonize.OPT))
        class Sample:
            pass

        config = Sample.__jsonize_config__
        assert config.ignore_extra_keys is False
        assert config.explicit is True
        assert config.defaults == (jsonize(Jsonize.OPT),)
        assert config.polymorphic is True

    def test_tags_register_class(self, restore_registry):
        @jsonizable(tags=["SampleTag"])
        class Sample:
            pass

        assert restore_registry["SampleTag"] is Sample
        assert Sample in restore_registry.values()
