"""Load record schemas from YAML declarations.

Example::

    name: ServerConfig
    fields:
      - name: host
        key: server.host
        type: str
        default: localhost
        env: SERVER_HOST
      - key: server.port
        type: int
        default: 8080
      - key: server.aliases
        type: list[str]
      - key: server.debug_port
        type: optional[int]

``key`` is required; ``name`` defaults to the key, ``type`` to ``str``.
Non-string defaults are rendered with the field type's canonical text.
"""

from pathlib import Path
from typing import Any

import yaml

from .interfaces import FieldDescriptor, RecordSchema
from .services.converters import format_value, kind_from_name

_FIELD_KEYS = {"name", "key", "type", "default", "env"}


def _field_from_dict(index: int, data: Any) -> FieldDescriptor:
    if not isinstance(data, dict):
        raise ValueError(f"fields[{index}] must be a mapping, got {type(data).__name__}")

    unknown = sorted(set(data) - _FIELD_KEYS)
    if unknown:
        raise ValueError(f"fields[{index}] has unknown entries: {', '.join(unknown)}")

    key = data.get("key")
    if not isinstance(key, str) or not key:
        raise ValueError(f"fields[{index}] needs a non-empty 'key'")

    try:
        kind = kind_from_name(str(data.get("type", "str")))
    except ValueError as e:
        raise ValueError(f"fields[{index}] ({key}): {e}") from e

    default = data.get("default")
    if default is not None and not isinstance(default, str):
        try:
            default = format_value(kind, default)
        except (TypeError, ValueError) as e:
            raise ValueError(f"fields[{index}] ({key}): invalid default: {e}") from e

    env = data.get("env")
    if env is not None and not isinstance(env, str):
        raise ValueError(f"fields[{index}] ({key}): 'env' must be a string")

    try:
        return FieldDescriptor(
            key=key,
            kind=kind,
            default=default,
            env_var=env,
            name=data.get("name"),
        )
    except ValueError as e:
        raise ValueError(f"fields[{index}] ({key}): {e}") from e


def schema_from_dict(data: dict) -> RecordSchema:
    """Build a ``RecordSchema`` from a parsed YAML document."""
    if not isinstance(data, dict):
        raise ValueError(f"Schema document must be a mapping, got {type(data).__name__}")

    fields = data.get("fields")
    if not isinstance(fields, list) or not fields:
        raise ValueError("Schema document needs a non-empty 'fields' list")

    name = str(data.get("name") or "Record")
    return RecordSchema(name, tuple(_field_from_dict(i, f) for i, f in enumerate(fields)))


def load_schema_file(path: str | Path) -> RecordSchema:
    """Load a YAML schema declaration.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the document is not a valid schema declaration.
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    try:
        return schema_from_dict(data)
    except ValueError as e:
        raise ValueError(f"{path}: {e}") from e
