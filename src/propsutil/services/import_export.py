"""Export records to string mappings and import them into other schemas.

Cross-type conversion goes through a plain ``key -> string`` mapping rather
than matching attributes between record types:

    source record --export--> mapping --bind--> target record

A value transfers only where both schemas declare the same ``key``. Target
fields whose key the source does not declare resolve on their own through
environment, default or absence, exactly like any other bind.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping as MappingABC
from typing import Any, Mapping, Optional

from ..config import BindOptions
from ..interfaces import FieldDescriptor, RawMapping, RecordSchema, ResolvedRecord
from .binder import PropertiesBinder, bind_from_mapping
from .converters import format_value

logger = logging.getLogger(__name__)


def _field_value(record: Any, descriptor: FieldDescriptor) -> Any:
    """Read one field from a record object or record mapping."""
    if isinstance(record, (MappingABC, ResolvedRecord)):
        return record[descriptor.name]
    try:
        return getattr(record, descriptor.name)
    except AttributeError:
        raise AttributeError(
            f"Record {type(record).__name__} has no field '{descriptor.name}'"
        ) from None


def export_to_mapping(
    schema: RecordSchema,
    record: Any,
    include_field_names: bool = False,
    options: Optional[BindOptions] = None,
) -> RawMapping:
    """Render a bound record back into a properties mapping.

    Args:
        schema: Schema the record was bound with.
        record: The record (``ResolvedRecord``, dataclass or any object
            exposing the schema's field names).
        include_field_names: Also emit each value under its attribute
            name where that differs from the key. Entries under real keys
            win when a field name collides with another field's key.
        options: Used for the list separator.

    Returns:
        ``key -> canonical text`` in schema order. Optional fields holding
        ``None`` are omitted.

    Raises:
        TypeError: If a value does not fit its field's kind, e.g. the
            string ``"false"`` in a boolean field.
    """
    separator = (options or BindOptions()).list_separator
    by_key: RawMapping = {}
    by_name: RawMapping = {}

    for descriptor in schema:
        value = _field_value(record, descriptor)
        try:
            text = format_value(descriptor.kind, value, separator)
        except TypeError as e:
            raise TypeError(f"{schema.name}.{descriptor.name}: {e}") from e
        if text is None:
            continue
        by_key[descriptor.key] = text
        if include_field_names and descriptor.name != descriptor.key:
            by_name[descriptor.name] = text

    if not by_name:
        return by_key

    mapping = {k: v for k, v in by_name.items() if k not in by_key}
    mapping.update(by_key)
    return mapping


def import_mapping(
    schema: RecordSchema,
    mapping: Mapping[Any, Any],
    environ: Optional[Mapping[str, str]] = None,
    options: Optional[BindOptions] = None,
) -> Any:
    """Bind ``schema`` from a mapping, however it was produced."""
    return bind_from_mapping(schema, mapping, environ, options)


def convert(
    source_schema: RecordSchema,
    source_record: Any,
    target_schema: RecordSchema,
    environ: Optional[Mapping[str, str]] = None,
    options: Optional[BindOptions] = None,
) -> Any:
    """Convert a record of one schema into a record of another.

    Raises:
        MissingRequiredFieldError: A required target field has no shared
            key, environment value or default.
        TypeConversionError: A shared value does not parse as the target
            field's type.
    """
    mapping = export_to_mapping(source_schema, source_record, options=options)

    target_keys = set(target_schema.keys())
    shared = [k for k in mapping if k in target_keys]
    logger.debug(
        "Converting %s -> %s via %d shared key(s): %s",
        source_schema.name, target_schema.name, len(shared), ", ".join(shared),
    )

    return PropertiesBinder(target_schema, options).bind_mapping(mapping, environ)
