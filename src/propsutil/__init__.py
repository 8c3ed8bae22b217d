"""props-util: bind properties files to typed records.

Resolution precedence per field: environment variable, properties key,
declared default. Records export back to ``key -> string`` mappings, which
is how one record type converts into another.
"""

from .config import BindOptions
from .declarative import Properties, prop, schema_for
from .errors import (
    BindError,
    MalformedLineError,
    MissingRequiredFieldError,
    SourceReadError,
    TypeConversionError,
)
from .interfaces import (
    FieldDescriptor,
    IMappingSource,
    KindTag,
    RawMapping,
    RecordSchema,
    Resolution,
    ResolutionSource,
    ResolvedRecord,
    ValueKind,
)
from .schema_file import load_schema_file, schema_from_dict
from .services.binder import (
    PropertiesBinder,
    bind_defaults,
    bind_from_file,
    bind_from_mapping,
    bind_from_text,
)
from .services.converters import (
    BOOL,
    DECIMAL,
    FLOAT,
    INT,
    PATH,
    STR,
    enum_kind,
    kind_for_type,
    kind_from_name,
)
from .services.import_export import convert, export_to_mapping, import_mapping
from .services.properties import (
    DictSource,
    FileSource,
    TextSource,
    format_properties,
    parse_properties,
    read_properties_file,
)

__version__ = "0.1.0"

__all__ = [
    "BindOptions",
    "Properties",
    "prop",
    "schema_for",
    "BindError",
    "MalformedLineError",
    "MissingRequiredFieldError",
    "SourceReadError",
    "TypeConversionError",
    "FieldDescriptor",
    "IMappingSource",
    "KindTag",
    "RawMapping",
    "RecordSchema",
    "Resolution",
    "ResolutionSource",
    "ResolvedRecord",
    "ValueKind",
    "load_schema_file",
    "schema_from_dict",
    "PropertiesBinder",
    "bind_defaults",
    "bind_from_file",
    "bind_from_mapping",
    "bind_from_text",
    "BOOL",
    "DECIMAL",
    "FLOAT",
    "INT",
    "PATH",
    "STR",
    "enum_kind",
    "kind_for_type",
    "kind_from_name",
    "convert",
    "export_to_mapping",
    "import_mapping",
    "DictSource",
    "FileSource",
    "TextSource",
    "format_properties",
    "parse_properties",
    "read_properties_file",
]
