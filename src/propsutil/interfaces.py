"""Core data model for props-util.

A ``RecordSchema`` is an ordered list of ``FieldDescriptor`` values. Each
descriptor says where a field's raw string comes from (environment variable,
properties key, declared default) and how that string becomes a value
(its ``ValueKind``). The binder walks a schema against a ``RawMapping`` and
builds a record; the exporter walks it the other way.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterator, Mapping, Optional

# Parsed form of a properties source: ordered ``key -> value`` strings.
RawMapping = dict[str, str]


class KindTag(Enum):
    """Conversion strategy selector for a field."""
    SCALAR = "scalar"
    BOOLEAN = "boolean"
    OPTIONAL = "optional"
    LIST = "list"


_WRAPPER_TAGS = (KindTag.OPTIONAL, KindTag.LIST)


@dataclass(frozen=True)
class ValueKind:
    """How a raw string is parsed into a value and rendered back.

    Attributes:
        tag: Which conversion strategy applies.
        type_name: Human readable name of the target type (``int``, ``bool``).
        parse: Callable turning one trimmed string into a value. For
            wrapper kinds this is the inner kind's parser.
        format: Callable rendering one value back to its canonical text.
        inner: Wrapped kind for ``OPTIONAL`` and ``LIST``; ``None`` otherwise.
    """
    tag: KindTag
    type_name: str
    parse: Callable[[str], Any] = field(repr=False, compare=False)
    format: Callable[[Any], str] = field(default=str, repr=False, compare=False)
    inner: Optional["ValueKind"] = None

    def __post_init__(self):
        if self.tag in _WRAPPER_TAGS:
            if self.inner is None:
                raise ValueError(f"{self.tag.value} kind requires an inner kind")
            if self.inner.tag in _WRAPPER_TAGS:
                raise ValueError(
                    f"{self.tag.value} kind cannot wrap a "
                    f"{self.inner.tag.value} kind ({self.inner.describe()})"
                )
        elif self.inner is not None:
            raise ValueError(f"{self.tag.value} kind takes no inner kind")

    @classmethod
    def scalar(
        cls,
        parse: Callable[[str], Any],
        type_name: Optional[str] = None,
        format: Callable[[Any], str] = str,
    ) -> "ValueKind":
        """Kind for a single value parsed with ``parse``."""
        name = type_name or getattr(parse, "__name__", "value")
        return cls(KindTag.SCALAR, name, parse, format)

    @classmethod
    def boolean(cls) -> "ValueKind":
        """Kind for ``true``/``false`` literals (case-insensitive)."""
        return cls(KindTag.BOOLEAN, "bool", _parse_bool, _format_bool)

    @classmethod
    def optional(cls, inner: "ValueKind") -> "ValueKind":
        """Kind whose absence binds to ``None`` instead of failing."""
        return cls(KindTag.OPTIONAL, inner.type_name, inner.parse, inner.format, inner)

    @classmethod
    def list_of(cls, inner: "ValueKind") -> "ValueKind":
        """Kind for comma separated values of ``inner``."""
        return cls(KindTag.LIST, inner.type_name, inner.parse, inner.format, inner)

    @property
    def is_optional(self) -> bool:
        return self.tag is KindTag.OPTIONAL

    @property
    def is_list(self) -> bool:
        return self.tag is KindTag.LIST

    def describe(self) -> str:
        """Readable type name, e.g. ``list[int]`` or ``optional[bool]``."""
        if self.inner is not None:
            return f"{self.tag.value}[{self.inner.describe()}]"
        return self.type_name


def _parse_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"expected 'true' or 'false', got {value!r}")


def _format_bool(value: bool) -> str:
    if not isinstance(value, bool):
        raise TypeError(f"expected a bool, got {type(value).__name__} {value!r}")
    return "true" if value else "false"


@dataclass(frozen=True)
class FieldDescriptor:
    """Static metadata for one record field.

    Attributes:
        key: Lookup key in the properties mapping. Never empty.
        kind: Conversion strategy for the resolved string.
        default: Literal default, kept unparsed until conversion.
        env_var: Environment variable consulted before the mapping.
        name: Attribute name on the built record. Defaults to ``key``.
    """
    key: str
    kind: ValueKind
    default: Optional[str] = None
    env_var: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self):
        if not self.key:
            raise ValueError("FieldDescriptor.key must not be empty")
        if self.env_var is not None and not self.env_var:
            raise ValueError(f"env_var for '{self.key}' must not be empty")
        if self.name is None:
            object.__setattr__(self, "name", self.key)

    @property
    def required(self) -> bool:
        """True when absence of every source is a binding failure."""
        return not self.kind.is_optional


@dataclass(frozen=True)
class RecordSchema:
    """Ordered, immutable field list for one record type.

    Attributes:
        name: Record type name, used in log and error messages.
        fields: Descriptors in binding order.
        factory: Called with the resolved values as keyword arguments to
            build the record. ``None`` builds a ``ResolvedRecord``.
    """
    name: str
    fields: tuple[FieldDescriptor, ...]
    factory: Optional[Callable[..., Any]] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(self.fields))
        seen: set[str] = set()
        for descriptor in self.fields:
            if descriptor.name in seen:
                raise ValueError(
                    f"Duplicate field name '{descriptor.name}' in schema {self.name}"
                )
            seen.add(descriptor.name)

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def keys(self) -> list[str]:
        return [d.key for d in self.fields]

    def get_field(self, name: str) -> FieldDescriptor:
        """Look up a descriptor by attribute name."""
        for descriptor in self.fields:
            if descriptor.name == name:
                return descriptor
        raise KeyError(f"{self.name} has no field '{name}'")

    def build(self, values: Mapping[str, Any]) -> Any:
        """Assemble a record from fully resolved ``name -> value`` pairs."""
        if self.factory is None:
            return ResolvedRecord(self.name, dict(values))
        return self.factory(**values)


class ResolutionSource(Enum):
    """Where a field's raw string came from."""
    ENVIRONMENT = "environment"
    MAPPING = "mapping"
    DEFAULT = "default"
    ABSENT = "absent"


@dataclass(frozen=True)
class Resolution:
    """Outcome of the precedence lookup for one field.

    ``raw`` is ``None`` exactly when ``source`` is ``ABSENT``. An empty
    string is a present value.
    """
    raw: Optional[str]
    source: ResolutionSource

    @classmethod
    def absent(cls) -> "Resolution":
        return cls(None, ResolutionSource.ABSENT)

    @property
    def present(self) -> bool:
        return self.source is not ResolutionSource.ABSENT


class ResolvedRecord:
    """Generic record built when a schema has no factory.

    Values are reachable by item (``record["port"]``) and by attribute
    (``record.port``) using the field names of the schema. Item access is
    canonical: a field named ``get``, ``as_dict`` or ``schema_name`` is
    shadowed by the method of that name under attribute access.
    """

    __slots__ = ("_schema_name", "_values")

    def __init__(self, schema_name: str, values: dict[str, Any]):
        self._schema_name = schema_name
        self._values = values

    @property
    def schema_name(self) -> str:
        return self._schema_name

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(
                f"{self._schema_name} record has no field '{name}'"
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResolvedRecord):
            return NotImplemented
        return (
            self._schema_name == other._schema_name
            and self._values == other._values
        )

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self._values.items())
        return f"{self._schema_name}({fields})"


class IMappingSource(ABC):
    """Produces a ``RawMapping`` for one binding pass."""

    @abstractmethod
    def read(self) -> RawMapping:
        """Read the source and return a fresh mapping.

        Raises:
            SourceReadError: If the underlying text cannot be obtained.
            MalformedLineError: If the text is not valid properties text.
        """
        pass

    def describe(self) -> str:
        """Short label for log and error messages."""
        return type(self).__name__
