"""Exceptions raised by jsonize.

Every decoding failure derives from ``JsonizeError`` and carries the target
type and the JSON fragment that could not be converted, so callers can build
an actionable message without re-deriving the context.

Classes:
    JsonizeError: Base class, also a ``ValueError``.
    JsonizeTypeError: A JSON value's kind cannot satisfy the target type.
    JsonizeArityError: A fixed-length target received the wrong element count.
    JsonizeMismatchError: Missing required keys and/or unexpected extra keys.
    JsonizeConstructorError: No marked constructor could be satisfied.
    JsonizeNoPrimitiveConstructorError: A non-object value has no single-parameter constructor.
    JsonizeUnregisteredClassError: A class tag was present but not registered.
    JsonizeMissingKeyError: Keyed extraction found no such key.
    JsonizeSchemaError: The type itself cannot be described for (de)serialization.
    JsonizeRegistryError: Invalid class registration.
"""

from typing import Any, Sequence

from .models import json_kind

__all__ = [
    "JsonizeError",
    "JsonizeTypeError",
    "JsonizeArityError",
    "JsonizeMismatchError",
    "JsonizeConstructorError",
    "JsonizeNoPrimitiveConstructorError",
    "JsonizeUnregisteredClassError",
    "JsonizeMissingKeyError",
    "JsonizeSchemaError",
    "JsonizeRegistryError",
    "type_name",
]


def type_name(tp: Any) -> str:
    """Return a readable name for a type or type hint."""
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp).replace("typing.", "")


class JsonizeError(ValueError):
    """Base class of every error raised while decoding JSON.

    Attributes:
        target_type: The type jsonize was attempting to produce.
        json: The JSON value that was being decoded.
    """

    def __init__(self, target_type: Any, json: Any, extra_message: str | None = None):
        self.target_type = target_type
        self.json = json
        message = f"Failed to convert JSON {json_kind(json)} to {type_name(target_type)}"
        if extra_message:
            message = f"{message}\n{extra_message}"
        super().__init__(message)


class JsonizeTypeError(JsonizeError):
    """Raised when a JSON value is of a kind the target type cannot accept."""

    def __init__(self, target_type: Any, json: Any, expected_kinds: Sequence[str]):
        self.expected_kinds = list(expected_kinds)
        self.actual_kind = json_kind(json)
        super().__init__(
            target_type,
            json,
            f"Expected JSON {' or '.join(self.expected_kinds)}, got {self.actual_kind}: {json!r}",
        )


class JsonizeArityError(JsonizeError):
    """Raised when a fixed-length target receives an array of another length."""

    def __init__(self, target_type: Any, json: Any, expected: int):
        self.expected = expected
        self.actual = len(json)
        super().__init__(
            target_type, json, f"Expected {self.expected} elements, got {self.actual}."
        )


class JsonizeMismatchError(JsonizeError):
    """Raised when object keys fail to line up with the members of the target type.

    Both lists may be non-empty at once; they are reported together.

    Attributes:
        missing_keys: Required keys that were not found in the JSON object.
        extra_keys: Keys of the JSON object matching no member (strict types only).
    """

    def __init__(
        self,
        target_type: Any,
        json: Any,
        missing_keys: Sequence[str],
        extra_keys: Sequence[str],
    ):
        self.missing_keys = list(missing_keys)
        self.extra_keys = list(extra_keys)
        super().__init__(
            target_type,
            json,
            f"Missing non-optional members: {self.missing_keys}.\n"
            f"Extra keys in json: {self.extra_keys}.",
        )


class JsonizeConstructorError(JsonizeError):
    """Raised when no marked constructor can be satisfied and default construction is unavailable.

    Attributes:
        signatures: Signatures of the constructors that were attempted.
    """

    def __init__(self, target_type: Any, json: Any, signatures: Sequence[str]):
        self.signatures = list(signatures)
        listing = "\n".join(self.signatures) if self.signatures else "<no jsonized constructors>"
        super().__init__(
            target_type,
            json,
            f"{type_name(target_type)} has no default constructor, and none of the "
            f"following constructors could be fulfilled:\n{listing}",
        )


class JsonizeNoPrimitiveConstructorError(JsonizeError):
    """Raised when a non-object value is decoded into a type without a single-parameter constructor."""

    def __init__(self, target_type: Any, json: Any):
        super().__init__(
            target_type,
            json,
            f"No jsonized single-parameter constructor for {type_name(target_type)}.",
        )


class JsonizeUnregisteredClassError(JsonizeError):
    """Raised when a class tag is present but resolves to no registered subtype.

    Attributes:
        tag: The tag after remapping.
    """

    def __init__(self, target_type: Any, json: Any, tag: str):
        self.tag = tag
        super().__init__(
            target_type, json, f"{tag} not registered as a subtype of {type_name(target_type)}."
        )


class JsonizeMissingKeyError(JsonizeError):
    """Raised by keyed extraction when the key is absent."""

    def __init__(self, target_type: Any, json: Any, key: str):
        self.key = key
        super().__init__(
            target_type, json, f"Tried to extract non-existent key {key!r} from JSON object."
        )


class JsonizeSchemaError(TypeError):
    """Raised when a type or annotation cannot be (de)serialized at all.

    This is a programming error in the type declaration, not a data error.
    """


class JsonizeRegistryError(RuntimeError):
    """Raised on invalid class-tag registration."""
