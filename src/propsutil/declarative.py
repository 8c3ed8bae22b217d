"""Declare record schemas as dataclasses.

Usage::

    @dataclass
    class ServerConfig(Properties):
        host: str = prop(key="server.host", default="localhost", env="SERVER_HOST")
        port: int = prop(key="server.port", default="8080")
        tags: list[str] = prop(default="")
        debug_port: Optional[int] = prop()

    config = ServerConfig.from_file("server.properties")

Each dataclass field becomes a ``FieldDescriptor``: the annotation gives the
value kind, ``prop()`` gives key, default and environment variable. A field
without ``prop()`` uses its attribute name as key and its ordinary dataclass
default (``port: int = 8080``), if it has one.
"""

from __future__ import annotations

import dataclasses
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, TypeVar

from .config import BindOptions
from .interfaces import FieldDescriptor, RawMapping, RecordSchema
from .services.binder import bind_defaults, bind_from_file, bind_from_mapping, bind_from_text
from .services.converters import format_value, kind_for_type
from .services.import_export import convert, export_to_mapping

T = TypeVar("T", bound="Properties")

_METADATA_KEY = "propsutil"
_SCHEMA_ATTR = "__props_schema__"


@dataclass(frozen=True)
class PropSpec:
    """Per-field declaration captured by ``prop()``."""
    key: Optional[str] = None
    default: Any = None
    env: Optional[str] = None


def prop(
    key: Optional[str] = None,
    default: Any = None,
    env: Optional[str] = None,
) -> Any:
    """Declare how a dataclass field is bound.

    Args:
        key: Properties key. Defaults to the attribute name.
        default: Value used when neither environment nor mapping provide
            one. Strings are kept unparsed; other values are rendered to
            their canonical text first, so ``default=8080`` and
            ``default="8080"`` are equivalent.
        env: Environment variable that overrides the mapping.

    The returned field has no dataclass default: binding always passes
    every field.
    """
    return dataclasses.field(metadata={_METADATA_KEY: PropSpec(key, default, env)})


def _dataclass_default(f: dataclasses.Field) -> Any:
    """Plain ``= value`` or ``default_factory`` default, else ``None``."""
    if f.default is not dataclasses.MISSING:
        return f.default
    if f.default_factory is not dataclasses.MISSING:
        return f.default_factory()
    return None


def schema_for(cls: type) -> RecordSchema:
    """Build the ``RecordSchema`` of a dataclass, cached on the class.

    Raises:
        TypeError: If ``cls`` is not a dataclass, a field annotation has
            no value kind, or a default does not fit its field.
    """
    cached = cls.__dict__.get(_SCHEMA_ATTR)
    if cached is not None:
        return cached

    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls.__name__} is not a dataclass")

    hints = typing.get_type_hints(cls)
    descriptors = []
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        spec: PropSpec = f.metadata.get(_METADATA_KEY) or PropSpec()
        try:
            kind = kind_for_type(hints[f.name])
        except TypeError as e:
            raise TypeError(f"{cls.__name__}.{f.name}: {e}") from e

        default = spec.default
        if default is None:
            default = _dataclass_default(f)
        if default is not None and not isinstance(default, str):
            try:
                default = format_value(kind, default)
            except (TypeError, ValueError) as e:
                raise TypeError(f"{cls.__name__}.{f.name}: invalid default: {e}") from e

        descriptors.append(FieldDescriptor(
            key=spec.key or f.name,
            kind=kind,
            default=default,
            env_var=spec.env,
            name=f.name,
        ))

    schema = RecordSchema(cls.__name__, tuple(descriptors), factory=cls)
    setattr(cls, _SCHEMA_ATTR, schema)
    return schema


class Properties:
    """Mixin adding bind and export helpers to a dataclass."""

    @classmethod
    def props_schema(cls) -> RecordSchema:
        return schema_for(cls)

    @classmethod
    def from_file(
        cls: type[T],
        path: str | Path,
        environ: Optional[Mapping[str, str]] = None,
        options: Optional[BindOptions] = None,
    ) -> T:
        """Bind from a properties file."""
        return bind_from_file(schema_for(cls), path, environ, options)

    @classmethod
    def from_text(
        cls: type[T],
        text: str,
        environ: Optional[Mapping[str, str]] = None,
        options: Optional[BindOptions] = None,
    ) -> T:
        """Bind from properties text."""
        return bind_from_text(schema_for(cls), text, environ, options)

    @classmethod
    def from_mapping(
        cls: type[T],
        mapping: Mapping[Any, Any],
        environ: Optional[Mapping[str, str]] = None,
        options: Optional[BindOptions] = None,
    ) -> T:
        """Bind from a caller-supplied mapping."""
        return bind_from_mapping(schema_for(cls), mapping, environ, options)

    @classmethod
    def defaults(
        cls: type[T],
        environ: Optional[Mapping[str, str]] = None,
        options: Optional[BindOptions] = None,
    ) -> T:
        """Bind with no properties: environment and defaults only."""
        return bind_defaults(schema_for(cls), environ, options)

    @classmethod
    def from_record(
        cls: type[T],
        other: Any,
        environ: Optional[Mapping[str, str]] = None,
        options: Optional[BindOptions] = None,
    ) -> T:
        """Convert another ``Properties`` record (or a mapping) into this type.

        Values move across by matching properties keys, not attribute
        names.
        """
        if isinstance(other, Properties):
            return convert(schema_for(type(other)), other, schema_for(cls), environ, options)
        if isinstance(other, Mapping):
            return cls.from_mapping(other, environ, options)
        raise TypeError(
            f"Cannot convert {type(other).__name__} to {cls.__name__}; "
            f"expected a Properties dataclass or a mapping"
        )

    def to_mapping(
        self,
        include_field_names: bool = False,
        options: Optional[BindOptions] = None,
    ) -> RawMapping:
        """Export this record as ``key -> canonical text``."""
        return export_to_mapping(schema_for(type(self)), self, include_field_names, options)
