"""props-util binding services."""

from .properties import (
    DictSource,
    FileSource,
    TextSource,
    format_properties,
    parse_properties,
    read_properties_file,
)
from .resolver import resolve, snapshot_environment
from .converters import convert as convert_value, format_value, kind_for_type, kind_from_name
from .binder import (
    PropertiesBinder,
    bind_defaults,
    bind_from_file,
    bind_from_mapping,
    bind_from_text,
)
from .import_export import convert, export_to_mapping, import_mapping

__all__ = [
    "DictSource",
    "FileSource",
    "TextSource",
    "format_properties",
    "parse_properties",
    "read_properties_file",
    "resolve",
    "snapshot_environment",
    "convert_value",
    "format_value",
    "kind_for_type",
    "kind_from_name",
    "PropertiesBinder",
    "bind_defaults",
    "bind_from_file",
    "bind_from_mapping",
    "bind_from_text",
    "convert",
    "export_to_mapping",
    "import_mapping",
]
