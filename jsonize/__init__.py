"""jsonize: declarative JSON (de)serialization for Python classes.

Describe a type once, with annotations and ``jsonize`` marks, then convert
between its instances and plain JSON trees::

    @jsonizable
    @dataclass
    class Point:
        x: float
        y: float
        label: Annotated[str, jsonize("name", Jsonize.OPT)] = ""

    point = decode({"x": 1, "y": "2.5"}, Point)
    encode(point)  # {"x": 1.0, "y": 2.5}
"""

from .codec import decode, decode_text, encode, encode_text
from .exceptions import (
    JsonizeArityError,
    JsonizeConstructorError,
    JsonizeError,
    JsonizeMismatchError,
    JsonizeMissingKeyError,
    JsonizeNoPrimitiveConstructorError,
    JsonizeRegistryError,
    JsonizeSchemaError,
    JsonizeTypeError,
    JsonizeUnregisteredClassError,
)
from .file_io import read_json, write_json
from .models import DecodeOptions, Jsonize, JsonizeIn, JsonizeOut, JsonValue
from .registry import CLASS_REGISTRY, ClassRegistry, register_class_tag
from .schema import CONTEXT, jsonizable, jsonize, schema_of

__all__ = [
    "decode",
    "decode_text",
    "encode",
    "encode_text",
    "read_json",
    "write_json",
    "jsonize",
    "jsonizable",
    "CONTEXT",
    "schema_of",
    "Jsonize",
    "JsonizeIn",
    "JsonizeOut",
    "JsonValue",
    "DecodeOptions",
    "register_class_tag",
    "CLASS_REGISTRY",
    "ClassRegistry",
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
]
