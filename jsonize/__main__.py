import argparse
import importlib
import sys
from pathlib import Path

from .codec.encode import dump_text, encode
from .config import DEFAULT_CLASS_KEY
from .exceptions import JsonizeSchemaError
from .file_io import read_json
from .utils.logger import logger


def load_type(spec: str) -> type:
    """Resolve a ``module:QualName`` reference to a class.

    Raises:
        ValueError: If the reference is malformed or cannot be resolved.
    """
    module_name, sep, qualname = spec.partition(":")
    if not sep or not module_name or not qualname:
        raise ValueError(f"Type reference must look like 'module:Class', got '{spec}'")
    try:
        target = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import module '{module_name}': {e}") from e
    for part in qualname.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise ValueError(f"Module '{module_name}' has no attribute '{qualname}'") from e
    if not isinstance(target, type):
        raise ValueError(f"'{spec}' does not name a class")
    return target


def main():
    """Command-line interface for jsonize.

    Reads a JSON file and prints it back. With ``--type`` the content is first
    decoded into the given class (through the same rules as ``jsonize.decode``)
    and then re-encoded, so the output shows exactly what the type keeps.

    For detailed usage information, run:
        python -m jsonize --help
    """
    parser = argparse.ArgumentParser(
        description="jsonize: decode a JSON file into a Python type and print it back."
    )

    parser.add_argument("file", type=Path, help="Path of the JSON file to read.")

    parser.add_argument(
        "-t",
        "--type",
        type=str,
        default=None,
        help="Type to decode into, as 'module:Class'. If omitted the file is only reformatted.",
    )

    parser.add_argument(
        "--list",
        action="store_true",
        help="Decode the file as a JSON array of the given type.",
    )

    parser.add_argument(
        "--class-key",
        type=str,
        default=DEFAULT_CLASS_KEY,
        help=f"Key carrying the polymorphic class tag. Default is '{DEFAULT_CLASS_KEY}'.",
    )

    parser.add_argument(
        "--no-class-key",
        action="store_true",
        help="Disable class-tag dispatch.",
    )

    parser.add_argument(
        "--compact",
        action="store_true",
        help="Print compact JSON instead of the indented form.",
    )

    args = parser.parse_args()

    if args.list and args.type is None:
        logger.error("--list requires --type.")
        sys.exit(1)

    target_type = None
    if args.type is not None:
        try:
            target_type = load_type(args.type)
        except ValueError as e:
            logger.error(f"Invalid --type. {e}")
            sys.exit(1)
        if args.list:
            target_type = list[target_type]

    class_key = None if args.no_class_key else args.class_key

    try:
        if target_type is None:
            json_value = read_json(args.file)
        else:
            value = read_json(args.file, target_type, class_key=class_key)
            json_value = encode(value)
    except (OSError, ValueError, JsonizeSchemaError) as e:
        # JsonizeError and json.JSONDecodeError are ValueErrors
        logger.error(f"Failed to load '{args.file}'. {e}")
        sys.exit(1)

    print(dump_text(json_value, pretty=not args.compact))
    logger.debug(f"Printed {args.file} as {args.type or 'raw JSON'}")


if __name__ == "__main__":
    main()
