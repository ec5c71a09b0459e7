"""Helpers reading and writing JSON files through the codec.

Functions:
    read_json: Read a JSON file, optionally decoding it into a type.
    write_json: Encode a value and write it as pretty-printed JSON, overwriting the file.
"""

import json
from pathlib import Path
from typing import Any

from .codec.decode import decode
from .codec.encode import encode_text
from .config import FILE_ENCODING
from .models import DecodeOptions
from .utils.logger import logger

__all__ = ["read_json", "write_json"]

_RAW = object()


def read_json(
    path: Path | str,
    tp: Any = _RAW,
    *,
    options: DecodeOptions | None = None,
    **overrides: Any,
) -> Any:
    """Read a JSON file.

    Args:
        path: The JSON file to read.
        tp: Target type. If omitted, the raw JSON value is returned.
        options: Decode options; keyword overrides are applied on top.

    Returns:
        The decoded value, or the raw JSON value when ``tp`` is omitted.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the path is a directory or not a regular file.
        json.JSONDecodeError: If the file is not valid JSON.
        JsonizeError: If the content cannot be decoded into ``tp``.

    Example:
        >>> entities = read_json("entities.json", dict[str, Entity])
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"JSON file does not exist: {path}")
    if path.is_dir():
        raise ValueError(f"Specified path is a directory, not a file: {path}")
    if not path.is_file():
        raise ValueError(f"Path exists but is not a regular file: {path}")

    text = path.read_text(encoding=FILE_ENCODING)
    try:
        json_value = json.loads(text)
    except json.JSONDecodeError as e:
        raise json.JSONDecodeError(f"File {path} is not valid JSON: {e.msg}", e.doc, e.pos)

    logger.debug(f"Read {len(text)} characters from {path}")
    if tp is _RAW:
        return json_value
    return decode(json_value, tp, options=options, **overrides)


def write_json(path: Path | str, value: Any) -> None:
    """Encode ``value`` and write it to ``path`` as pretty-printed JSON.

    An existing file is overwritten.

    Raises:
        ValueError: If path is a directory or its parent is not a directory.
        FileNotFoundError: If the parent directory doesn't exist.
        JsonizeSchemaError: If ``value`` cannot be encoded.
    """
    path = Path(path)
    if path.exists() and path.is_dir():
        raise ValueError(f"Specified path is a directory, not a file: {path}")

    parent_dir = path.parent
    if not parent_dir.exists():
        raise FileNotFoundError(
            f"Parent directory does not exist: {parent_dir}. Please create the directory first."
        )
    if not parent_dir.is_dir():
        raise ValueError(f"Parent path is not a directory: {parent_dir}")

    text = encode_text(value, pretty=True)
    path.write_text(text, encoding=FILE_ENCODING)
    logger.debug(f"Wrote {len(text)} characters to {path}")
