"""Type conversion for resolved property values.

A ``Resolution`` plus the field's ``ValueKind`` gives the bound value:

- absent + optional kind      -> ``None``
- absent + any other kind     -> ``MissingRequiredFieldError``
- present + scalar / boolean  -> ``kind.parse(raw)``
- present + optional          -> ``kind.parse(raw)`` (the value itself)
- present + list              -> split on the separator, trim, drop empty
                                 segments, parse each; ``""`` gives ``[]``

Also maps Python annotations and textual type names onto kinds, which is
how dataclass declarations and schema files describe their fields.
"""

from __future__ import annotations

import enum
import re
import types
import typing
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Optional, Union

from ..config import DEFAULT_LIST_SEPARATOR
from ..errors import MissingRequiredFieldError, TypeConversionError
from ..interfaces import FieldDescriptor, KindTag, Resolution, ValueKind


def _parse_decimal(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise ValueError(f"invalid decimal literal {value!r}") from None


STR = ValueKind.scalar(str, "str")
INT = ValueKind.scalar(int, "int")
FLOAT = ValueKind.scalar(float, "float")
BOOL = ValueKind.boolean()
DECIMAL = ValueKind.scalar(_parse_decimal, "decimal")
PATH = ValueKind.scalar(Path, "path")

_KINDS_BY_TYPE: dict[type, ValueKind] = {
    str: STR,
    int: INT,
    float: FLOAT,
    bool: BOOL,
    Decimal: DECIMAL,
    Path: PATH,
}

_KINDS_BY_NAME: dict[str, ValueKind] = {
    "str": STR,
    "string": STR,
    "int": INT,
    "integer": INT,
    "float": FLOAT,
    "bool": BOOL,
    "boolean": BOOL,
    "decimal": DECIMAL,
    "path": PATH,
}

_WRAPPED_NAME = re.compile(r"^(optional|list)\[\s*(\w+)\s*\]$", re.IGNORECASE)


def enum_kind(enum_cls: type[enum.Enum]) -> ValueKind:
    """Kind for an ``Enum`` parsed and rendered by member value."""

    def parse(value: str) -> enum.Enum:
        for member in enum_cls:
            if str(member.value) == value:
                return member
        allowed = ", ".join(str(m.value) for m in enum_cls)
        raise ValueError(f"expected one of: {allowed}")

    return ValueKind.scalar(parse, enum_cls.__name__, lambda m: str(m.value))


def kind_for_type(annotation: Any) -> ValueKind:
    """Map a Python type annotation onto a ``ValueKind``.

    Supports the built-in scalar types, ``Enum`` subclasses, any other class
    constructible from one string, ``Optional[T]`` / ``T | None`` and
    ``list[T]`` / ``List[T]`` of those.

    Raises:
        TypeError: For unsupported or nested annotations.
    """
    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)

    if origin is Union or (hasattr(types, "UnionType") and origin is types.UnionType):
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) != 1 or len(args) != 2:
            raise TypeError(f"Only Optional[T] unions are supported, got {annotation!r}")
        inner = kind_for_type(non_none[0])
        return _wrap(ValueKind.optional, inner, annotation)

    if origin in (list, typing.List):
        if len(args) != 1:
            raise TypeError(f"List annotation needs an element type, got {annotation!r}")
        inner = kind_for_type(args[0])
        return _wrap(ValueKind.list_of, inner, annotation)

    if origin is not None:
        raise TypeError(f"Unsupported field annotation {annotation!r}")

    if annotation in _KINDS_BY_TYPE:
        return _KINDS_BY_TYPE[annotation]
    if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
        return enum_kind(annotation)
    if isinstance(annotation, type):
        return ValueKind.scalar(annotation, annotation.__name__)
    raise TypeError(f"Unsupported field annotation {annotation!r}")


def kind_from_name(name: str) -> ValueKind:
    """Map a type name such as ``int``, ``list[int]`` or ``optional[bool]``."""
    text = name.strip()
    match = _WRAPPED_NAME.match(text)
    if match:
        wrapper, inner_name = match.group(1).lower(), match.group(2)
        inner = kind_from_name(inner_name)
        if wrapper == "optional":
            return ValueKind.optional(inner)
        return ValueKind.list_of(inner)
    try:
        return _KINDS_BY_NAME[text.lower()]
    except KeyError:
        known = ", ".join(sorted(_KINDS_BY_NAME))
        raise ValueError(f"Unknown type name '{name}' (known: {known})") from None


def _wrap(ctor, inner: ValueKind, annotation: Any) -> ValueKind:
    try:
        return ctor(inner)
    except ValueError as e:
        raise TypeError(f"Unsupported field annotation {annotation!r}: {e}") from e


def _parse_one(descriptor: FieldDescriptor, kind: ValueKind, raw: str) -> Any:
    try:
        return kind.parse(raw)
    except (ValueError, TypeError, ArithmeticError) as e:
        raise TypeConversionError(
            descriptor.key, raw, descriptor.kind.describe(), str(e) or None
        ) from e


def split_list(raw: str, separator: str = DEFAULT_LIST_SEPARATOR) -> list[str]:
    """Split a list value, trimming segments and dropping empty ones."""
    return [s for s in (part.strip() for part in raw.split(separator)) if s]


def convert(
    descriptor: FieldDescriptor,
    resolution: Resolution,
    list_separator: str = DEFAULT_LIST_SEPARATOR,
    schema_name: Optional[str] = None,
) -> Any:
    """Convert one field's resolution into its bound value.

    Raises:
        MissingRequiredFieldError: Absent value for a non-optional field.
        TypeConversionError: The raw string (or a list segment) failed to
            parse.
    """
    kind = descriptor.kind

    if not resolution.present:
        if kind.is_optional:
            return None
        raise MissingRequiredFieldError(descriptor.key, schema_name)

    raw = resolution.raw
    if kind.tag is KindTag.LIST:
        return [_parse_one(descriptor, kind.inner, s) for s in split_list(raw, list_separator)]
    if kind.tag is KindTag.OPTIONAL:
        return _parse_one(descriptor, kind.inner, raw)
    return _parse_one(descriptor, kind, raw)


def format_value(
    kind: ValueKind,
    value: Any,
    list_separator: str = DEFAULT_LIST_SEPARATOR,
) -> Optional[str]:
    """Render a bound value back to canonical text.

    Returns ``None`` for an empty optional, which exporters omit.

    Raises:
        TypeError: If ``value`` does not fit ``kind`` (a non-bool for a
            boolean kind, a non-sequence for a list kind).
    """
    if kind.tag is KindTag.LIST:
        if not isinstance(value, (list, tuple)):
            raise TypeError(f"expected a list, got {type(value).__name__} {value!r}")
        return list_separator.join(kind.inner.format(v) for v in value)
    if kind.tag is KindTag.OPTIONAL:
        if value is None:
            return None
        return kind.inner.format(value)
    return kind.format(value)
