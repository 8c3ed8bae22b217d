"""props-util CLI: check, export and convert properties files.

Usage:
    props-util check   --schema server.yaml server.properties
    props-util check   --schema server.yaml server.properties --explain
    props-util export  --schema server.yaml server.properties
    props-util convert --schema server.yaml --target client.yaml server.properties

Schemas are YAML declarations (see ``propsutil.schema_file``). Binder
options come from ``--options FILE`` when given, otherwise from
``PROPS_UTIL_*`` environment variables.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import yaml

from .config import BindOptions
from .errors import BindError
from .schema_file import load_schema_file
from .services.binder import PropertiesBinder
from .services.converters import format_value
from .services.import_export import convert, export_to_mapping
from .services.properties import format_properties, read_properties_file
from .services.resolver import snapshot_environment

logger = logging.getLogger("propsutil.cli")

# Errors reported as a message and exit code 1 instead of a traceback
_CLI_ERRORS = (BindError, ValueError, FileNotFoundError, yaml.YAMLError)


def load_env_file(path: Path) -> int:
    """Load a ``KEY=value`` file into ``os.environ``.

    Variables already set in the environment are not overwritten.

    Returns:
        Number of variables added.
    """
    added = 0
    for key, value in read_properties_file(path).items():
        if key not in os.environ:
            os.environ[key] = value
            added += 1
    logger.info("Loaded %d variable(s) from %s", added, path)
    return added


def _load_options(args: argparse.Namespace) -> BindOptions:
    if args.options:
        options = BindOptions.from_file(args.options)
    else:
        options = BindOptions.from_env()
    if args.no_env:
        options.use_environment = False
    return options


def _prepare(args: argparse.Namespace) -> tuple[PropertiesBinder, dict[str, str]]:
    if args.env_file:
        load_env_file(Path(args.env_file))
    schema = load_schema_file(args.schema)
    binder = PropertiesBinder(schema, _load_options(args))
    mapping = read_properties_file(args.file)
    return binder, mapping


def _fail(error: Exception) -> int:
    print(f"error: {error}", file=sys.stderr)
    return 1


def cmd_check(args: argparse.Namespace) -> int:
    """Bind the file and print the resolved values as YAML."""
    try:
        binder, mapping = _prepare(args)
        # validate, bind and --explain share one environment snapshot
        environ = snapshot_environment()
        if args.all_errors:
            errors = binder.validate(mapping, environ)
            if errors:
                for e in errors:
                    print(f"error: {e}", file=sys.stderr)
                return 1
        record = binder.bind_mapping(mapping, environ)
    except _CLI_ERRORS as e:
        return _fail(e)

    resolutions = binder.resolve_all(mapping, environ) if args.explain else {}
    separator = binder.options.list_separator
    output: dict[str, object] = {}
    for descriptor in binder.schema:
        text = format_value(descriptor.kind, record[descriptor.name], separator)
        if args.explain:
            output[descriptor.name] = {
                "key": descriptor.key,
                "type": descriptor.kind.describe(),
                "source": resolutions[descriptor.name].source.value,
                "value": text,
            }
        else:
            output[descriptor.name] = text

    print(yaml.safe_dump(output, sort_keys=False), end="")
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Bind the file and print the canonical properties text."""
    try:
        binder, mapping = _prepare(args)
        record = binder.bind_mapping(mapping)
    except _CLI_ERRORS as e:
        return _fail(e)

    exported = export_to_mapping(binder.schema, record, options=binder.options)
    print(format_properties(exported), end="")
    return 0


def cmd_convert(args: argparse.Namespace) -> int:
    """Bind the file with one schema and print it converted to another."""
    try:
        binder, mapping = _prepare(args)
        target = load_schema_file(args.target)
        record = binder.bind_mapping(mapping)
        converted = convert(binder.schema, record, target, options=binder.options)
    except _CLI_ERRORS as e:
        return _fail(e)

    exported = export_to_mapping(target, converted, options=binder.options)
    print(format_properties(exported), end="")
    return 0


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Properties file to bind")
    parser.add_argument("--schema", "-s", required=True,
                        help="YAML schema declaration")
    parser.add_argument("--options", type=str, default=None,
                        help="YAML file with binder options")
    parser.add_argument("--env-file", type=str, default=None,
                        help="KEY=value file loaded into the environment first")
    parser.add_argument("--no-env", action="store_true",
                        help="Ignore environment variable overrides")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="props-util",
        description="props-util: bind properties files to typed records",
    )
    parser.add_argument("--log-level", type=str, default="warning",
                        choices=["debug", "info", "warning", "error"])
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # check
    check_parser = subparsers.add_parser("check", help="Bind and print resolved values")
    _add_common(check_parser)
    check_parser.add_argument("--explain", action="store_true",
                              help="Show key, type and source for each field")
    check_parser.add_argument("--all-errors", action="store_true",
                              help="Report every failing field, not just the first")

    # export
    export_parser = subparsers.add_parser("export", help="Print canonical properties text")
    _add_common(export_parser)

    # convert
    convert_parser = subparsers.add_parser("convert", help="Convert to another schema")
    _add_common(convert_parser)
    convert_parser.add_argument("--target", "-t", required=True,
                                help="YAML schema declaration of the target record")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "check":
        return cmd_check(args)
    elif args.command == "export":
        return cmd_export(args)
    elif args.command == "convert":
        return cmd_convert(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
