"""Properties text source.

Format:
- One ``key=value`` per line, split at the first ``=``.
- Lines whose first non-blank character is ``#`` or ``!`` are comments.
- Blank lines are skipped.
- Keys and values are trimmed.
- A repeated key keeps its last value.

A non-comment line without ``=`` fails the whole read with
``MalformedLineError``.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Mapping, Optional

from ..errors import MalformedLineError, SourceReadError
from ..interfaces import IMappingSource, RawMapping

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ("#", "!")
DEFAULT_ENCODING = "utf-8"


def parse_properties(text: str, source: str = "<string>") -> RawMapping:
    """Parse properties text into an ordered mapping.

    Args:
        text: Full properties text.
        source: Label used in error messages (usually the file path).

    Returns:
        ``key -> value`` in first-seen key order.

    Raises:
        MalformedLineError: On the first line lacking ``=``.
    """
    mapping: RawMapping = {}
    for line_number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith(COMMENT_PREFIXES):
            continue

        key, sep, value = line.partition("=")
        if not sep:
            raise MalformedLineError(line_number, line, source)

        key = key.strip()
        if key in mapping:
            logger.warning(
                "Duplicate key '%s' at line %d in %s; last value wins",
                key, line_number, source,
            )
        mapping[key] = value.strip()

    return mapping


def read_properties_file(
    path: str | Path,
    encoding: str = DEFAULT_ENCODING,
) -> RawMapping:
    """Read and parse a properties file.

    The file handle is released on every path, including decode errors.

    Raises:
        SourceReadError: If the file cannot be opened or decoded.
        MalformedLineError: If a line lacks ``=``.
    """
    t0 = time.monotonic()
    path = Path(path)
    try:
        with open(path, encoding=encoding) as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise SourceReadError(str(path), f"not valid {encoding} text ({e.reason})") from e
    except OSError as e:
        raise SourceReadError(str(path), e.strerror or str(e)) from e

    mapping = parse_properties(text, source=str(path))

    elapsed = (time.monotonic() - t0) * 1000
    logger.info("Read %d properties from %s in %.1fms", len(mapping), path, elapsed)
    return mapping


def format_properties(mapping: Mapping[str, str], header: Optional[str] = None) -> str:
    """Render a mapping as properties text.

    Keys must not contain ``=``; values are written as-is, so a value read
    back through ``parse_properties`` loses only surrounding whitespace.
    """
    lines: list[str] = []
    if header:
        lines.extend(f"# {h}" if h else "#" for h in header.splitlines())
    for key, value in mapping.items():
        if "=" in key:
            raise ValueError(f"Property key may not contain '=': {key!r}")
        lines.append(f"{key}={value}")
    return "\n".join(lines) + ("\n" if lines else "")


class TextSource(IMappingSource):
    """Mapping source over in-memory properties text."""

    def __init__(self, text: str, label: str = "<string>"):
        self.text = text
        self.label = label

    def read(self) -> RawMapping:
        return parse_properties(self.text, source=self.label)

    def describe(self) -> str:
        return self.label


class FileSource(IMappingSource):
    """Mapping source over a properties file, read on every ``read()``."""

    def __init__(self, path: str | Path, encoding: str = DEFAULT_ENCODING):
        self.path = Path(path)
        self.encoding = encoding

    def read(self) -> RawMapping:
        return read_properties_file(self.path, encoding=self.encoding)

    def describe(self) -> str:
        return str(self.path)


class DictSource(IMappingSource):
    """Mapping source over a caller-supplied mapping.

    Keys and values are rendered with ``str()``. Values are not trimmed.
    """

    def __init__(self, mapping: Mapping[Any, Any], label: str = "<mapping>"):
        self.mapping = mapping
        self.label = label

    def read(self) -> RawMapping:
        return as_raw_mapping(self.mapping)

    def describe(self) -> str:
        return self.label


def as_raw_mapping(mapping: Mapping[Any, Any]) -> RawMapping:
    """Copy a caller mapping into a fresh ``str -> str`` mapping."""
    return {
        k if isinstance(k, str) else str(k): v if isinstance(v, str) else str(v)
        for k, v in mapping.items()
    }
