"""Errors raised while reading and binding properties.

Every error is terminal for the call that raised it. Nothing here is turned
back into a default value; the caller decides whether to retry with a
corrected source.
"""

from typing import Optional


class BindError(Exception):
    """Base class for all props-util failures."""


class SourceReadError(BindError, OSError):
    """The properties text could not be obtained.

    The original ``OSError`` (or decode error) is chained as ``__cause__``.
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Error reading properties file '{path}': {reason}")

    def __reduce__(self):
        return (type(self), (self.path, self.reason))


class MalformedLineError(BindError, ValueError):
    """A non-comment line has no ``=`` separator.

    Attributes:
        line_number: 1-based line number in the source.
        line: The offending line, trimmed.
        source: Label of the source (file path or ``<string>``).
    """

    def __init__(self, line_number: int, line: str, source: str = "<string>"):
        self.line_number = line_number
        self.line = line
        self.source = source
        super().__init__(
            f"Malformed line {line_number} in '{source}' (missing '='): {line}"
        )

    def __reduce__(self):
        return (type(self), (self.line_number, self.line, self.source))


class MissingRequiredFieldError(BindError):
    """No environment, mapping or default value for a required field."""

    def __init__(self, key: str, schema_name: Optional[str] = None):
        self.key = key
        self.schema_name = schema_name
        where = f" for {schema_name}" if schema_name else ""
        super().__init__(f"`{key}` value is not configured which is required{where}")

    def __reduce__(self):
        return (type(self), (self.key, self.schema_name))


class TypeConversionError(BindError, ValueError):
    """A resolved raw string could not be parsed into the declared type.

    Attributes:
        key: Properties key of the field.
        raw_value: The string that failed to parse. For list fields this is
            the failing segment, not the whole value.
        target_kind: Description of the expected type, e.g. ``list[int]``.
        detail: Message of the underlying parser error, if any.
    """

    def __init__(
        self,
        key: str,
        raw_value: str,
        target_kind: str,
        detail: Optional[str] = None,
    ):
        self.key = key
        self.raw_value = raw_value
        self.target_kind = target_kind
        self.detail = detail
        message = f"Error parsing `{key}` with value `{raw_value}` as {target_kind}"
        if detail:
            message += f": {detail}"
        super().__init__(message)

    def __reduce__(self):
        return (type(self), (self.key, self.raw_value, self.target_kind, self.detail))
