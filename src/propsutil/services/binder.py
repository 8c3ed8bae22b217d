"""Binder: resolve and convert every field of a schema into a record.

Binding is all-or-nothing. The first missing or unparsable field aborts the
call and no partial record is ever built. ``validate()`` runs the same steps
but collects every field error, for diagnostics.

Each call takes one snapshot of ``os.environ`` unless the caller passes an
explicit ``environ`` mapping. Concurrent changes to the process environment
during a call are not guarded against.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Mapping, Optional

from ..config import BindOptions
from ..errors import BindError
from ..interfaces import IMappingSource, RecordSchema, Resolution
from .converters import convert
from .properties import as_raw_mapping, parse_properties, read_properties_file
from .resolver import resolve, snapshot_environment

logger = logging.getLogger(__name__)


class PropertiesBinder:
    """Binds one ``RecordSchema`` against any number of mappings.

    The binder holds no per-call state, so one instance may serve
    concurrent calls.

    Args:
        schema: Schema to bind.
        options: Binder options; defaults to ``BindOptions()``.
    """

    def __init__(self, schema: RecordSchema, options: Optional[BindOptions] = None):
        self.schema = schema
        self.options = options or BindOptions()

    def _environment(self, environ: Optional[Mapping[str, str]]) -> Optional[Mapping[str, str]]:
        if not self.options.use_environment:
            return None
        if environ is None:
            return snapshot_environment()
        return environ

    def resolve_all(
        self,
        mapping: Mapping[str, str],
        environ: Optional[Mapping[str, str]] = None,
    ) -> dict[str, Resolution]:
        """Resolve every field without converting.

        Returns:
            ``field name -> Resolution`` in schema order.
        """
        env = self._environment(environ)
        return {d.name: resolve(d, mapping, env) for d in self.schema}

    def bind_mapping(
        self,
        mapping: Mapping[str, str],
        environ: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """Bind a record from an already parsed mapping.

        Args:
            mapping: ``key -> raw string``. Not modified.
            environ: Environment snapshot; ``None`` snapshots ``os.environ``.

        Returns:
            The record built by the schema factory.

        Raises:
            MissingRequiredFieldError: First required field with no value.
            TypeConversionError: First field whose value failed to parse.
        """
        t0 = time.monotonic()
        env = self._environment(environ)
        values: dict[str, Any] = {}

        for descriptor in self.schema:
            resolution = resolve(descriptor, mapping, env)
            if self.options.log_resolutions:
                logger.debug(
                    "%s.%s: key '%s' resolved from %s",
                    self.schema.name, descriptor.name, descriptor.key,
                    resolution.source.value,
                )
            values[descriptor.name] = convert(
                descriptor,
                resolution,
                list_separator=self.options.list_separator,
                schema_name=self.schema.name,
            )

        record = self.schema.build(values)

        elapsed = (time.monotonic() - t0) * 1000
        logger.info(
            "Bound %s (%d fields) in %.1fms",
            self.schema.name, len(self.schema), elapsed,
        )
        return record

    def bind_text(self, text: str, environ: Optional[Mapping[str, str]] = None) -> Any:
        """Parse properties text, then bind."""
        return self.bind_mapping(parse_properties(text), environ)

    def bind_file(self, path: str | Path, environ: Optional[Mapping[str, str]] = None) -> Any:
        """Read a properties file, then bind."""
        return self.bind_mapping(read_properties_file(path), environ)

    def bind_source(self, source: IMappingSource, environ: Optional[Mapping[str, str]] = None) -> Any:
        """Read any mapping source, then bind."""
        return self.bind_mapping(source.read(), environ)

    def bind_defaults(self, environ: Optional[Mapping[str, str]] = None) -> Any:
        """Bind against an empty mapping (environment and defaults only)."""
        return self.bind_mapping({}, environ)

    def validate(
        self,
        mapping: Mapping[str, str],
        environ: Optional[Mapping[str, str]] = None,
    ) -> list[BindError]:
        """Check every field and return all errors, in schema order.

        An empty list means ``bind_mapping`` would succeed with the same
        inputs.
        """
        env = self._environment(environ)
        errors: list[BindError] = []
        for descriptor in self.schema:
            try:
                convert(
                    descriptor,
                    resolve(descriptor, mapping, env),
                    list_separator=self.options.list_separator,
                    schema_name=self.schema.name,
                )
            except BindError as e:
                errors.append(e)
        return errors


def bind_from_mapping(
    schema: RecordSchema,
    mapping: Mapping[Any, Any],
    environ: Optional[Mapping[str, str]] = None,
    options: Optional[BindOptions] = None,
) -> Any:
    """Bind ``schema`` from a caller-supplied mapping."""
    return PropertiesBinder(schema, options).bind_mapping(as_raw_mapping(mapping), environ)


def bind_from_text(
    schema: RecordSchema,
    text: str,
    environ: Optional[Mapping[str, str]] = None,
    options: Optional[BindOptions] = None,
) -> Any:
    """Bind ``schema`` from properties text."""
    return PropertiesBinder(schema, options).bind_text(text, environ)


def bind_from_file(
    schema: RecordSchema,
    path: str | Path,
    environ: Optional[Mapping[str, str]] = None,
    options: Optional[BindOptions] = None,
) -> Any:
    """Bind ``schema`` from a properties file."""
    return PropertiesBinder(schema, options).bind_file(path, environ)


def bind_defaults(
    schema: RecordSchema,
    environ: Optional[Mapping[str, str]] = None,
    options: Optional[BindOptions] = None,
) -> Any:
    """Bind ``schema`` with an empty mapping."""
    return PropertiesBinder(schema, options).bind_defaults(environ)
