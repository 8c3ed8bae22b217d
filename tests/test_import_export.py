"""Tests for record export, import and cross-type conversion.

Covers:
- Export rendering (canonical text, lists, omitted optionals)
- Round trip: parse -> bind -> export reproduces the pairs
- Conversion between schemas sharing keys under different field names
"""

from dataclasses import dataclass
from typing import Optional

import pytest

from propsutil import (
    FieldDescriptor,
    RecordSchema,
    ValueKind,
    bind_defaults,
    bind_from_mapping,
    bind_from_text,
    convert,
    export_to_mapping,
    import_mapping,
    parse_properties,
)
from propsutil.errors import MissingRequiredFieldError, TypeConversionError
from propsutil.services.converters import BOOL, INT, STR


class TestExport:
    """Tests for export_to_mapping()."""

    def test_canonical_text(self, server_schema):
        """Values are rendered to canonical text under their keys."""
        record = bind_from_text(
            server_schema,
            "port=9090\ndebug=TRUE\naliases= a , b\ntimeout=30",
            environ={},
        )
        assert export_to_mapping(server_schema, record) == {
            "host": "localhost",
            "port": "9090",
            "debug": "true",
            "aliases": "a,b",
            "timeout": "30",
        }

    def test_optional_none_omitted(self, server_schema):
        """Empty optionals are left out, not written as ''."""
        mapping = export_to_mapping(server_schema, bind_defaults(server_schema, environ={}))
        assert "timeout" not in mapping
        assert mapping["aliases"] == ""

    def test_schema_order(self, server_schema):
        record = bind_defaults(server_schema, environ={})
        assert list(export_to_mapping(server_schema, record)) == [
            "host", "port", "debug", "aliases",
        ]

    def test_include_field_names(self, client_schema):
        """Field names are added next to keys when they differ."""
        record = bind_from_mapping(client_schema, {"host": "h", "port": "1"}, environ={})
        mapping = export_to_mapping(client_schema, record, include_field_names=True)
        assert mapping == {
            "server_host": "h",
            "server_port": "1",
            "host": "h",
            "port": "1",
            "retries": "3",
        }

    def test_key_wins_over_field_name(self):
        """A field name equal to another field's key does not overwrite it."""
        schema = RecordSchema("S", (
            FieldDescriptor("a", STR, name="b"),
            FieldDescriptor("b", STR, name="c"),
        ))
        record = bind_from_mapping(schema, {"a": "from-a", "b": "from-b"}, environ={})
        mapping = export_to_mapping(schema, record, include_field_names=True)
        assert mapping["b"] == "from-b"
        assert mapping["a"] == "from-a"
        assert mapping["c"] == "from-b"

    def test_export_plain_object(self):
        """Any object exposing the field names can be exported."""
        @dataclass
        class Plain:
            host: str
            port: int
            debug: Optional[bool]

        schema = RecordSchema("Plain", (
            FieldDescriptor("server.host", STR, name="host"),
            FieldDescriptor("server.port", INT, name="port"),
            FieldDescriptor("debug", ValueKind.optional(BOOL)),
        ))
        mapping = export_to_mapping(schema, Plain("h", 1, None))
        assert mapping == {"server.host": "h", "server.port": "1"}

    def test_export_mapping_record(self, client_schema):
        """Plain dicts keyed by field name are accepted as records."""
        record = {"server_host": "h", "server_port": 2, "retries": 5}
        assert export_to_mapping(client_schema, record) == {
            "host": "h", "port": "2", "retries": "5",
        }

    def test_string_in_bool_field_rejected(self):
        """A string "false" in a boolean field is not exported as true."""
        schema = RecordSchema("S", (FieldDescriptor("debug", BOOL),))
        with pytest.raises(TypeError, match=r"S\.debug"):
            export_to_mapping(schema, {"debug": "false"})

    def test_missing_attribute(self, client_schema):
        with pytest.raises(AttributeError, match="server_host"):
            export_to_mapping(client_schema, object())


class TestRoundTrip:
    """Parse -> bind -> export with an all-string identity schema."""

    def test_identity_round_trip(self):
        text = (
            "# header\n"
            "server.host = example.com\n"
            "server.port=9090\n"
            "\n"
            "! note\n"
            "list = a,b,c\n"
            "empty=\n"
        )
        mapping = parse_properties(text)
        schema = RecordSchema("Identity", tuple(FieldDescriptor(k, STR) for k in mapping))
        record = bind_from_mapping(schema, mapping, environ={})

        assert export_to_mapping(schema, record) == mapping


class TestConvert:
    """Tests for cross-type conversion."""

    def test_shared_keys_transfer(self, server_schema, client_schema):
        """Values move by key, regardless of field names."""
        server = bind_from_text(server_schema, "host=example.com\nport=9090", environ={})
        client = convert(server_schema, server, client_schema, environ={})

        assert client.server_host == "example.com"
        assert client.server_port == 9090
        assert client.retries == 3

    def test_default_transfers(self):
        """A source default reaches the target through the shared key."""
        schema_a = RecordSchema("A", (FieldDescriptor("host", STR, default="localhost"),))
        schema_b = RecordSchema("B", (FieldDescriptor("host", STR, name="server_host"),))

        a = bind_defaults(schema_a, environ={})
        b = convert(schema_a, a, schema_b, environ={})
        assert b.server_host == "localhost"

    def test_target_only_fields_resolve_independently(self, server_schema):
        """Target-only keys use their own env/default/absent handling."""
        target = RecordSchema("T", (
            FieldDescriptor("port", INT),
            FieldDescriptor("region", STR, env_var="TEST_REGION"),
            FieldDescriptor("zone", STR, default="z1"),
            FieldDescriptor("label", ValueKind.optional(STR)),
        ))
        server = bind_defaults(server_schema, environ={})
        converted = convert(server_schema, server, target, environ={"TEST_REGION": "eu"})

        assert converted.port == 8080
        assert converted.region == "eu"
        assert converted.zone == "z1"
        assert converted.label is None

    def test_missing_target_key_fails(self, server_schema):
        target = RecordSchema("T", (FieldDescriptor("password", STR),))
        server = bind_defaults(server_schema, environ={})
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            convert(server_schema, server, target, environ={})
        assert exc_info.value.key == "password"

    def test_type_mismatch_fails(self):
        """A shared value must parse as the target field's type."""
        source = RecordSchema("S", (FieldDescriptor("port", STR, default="http"),))
        target = RecordSchema("T", (FieldDescriptor("port", INT),))
        with pytest.raises(TypeConversionError):
            convert(source, bind_defaults(source, environ={}), target, environ={})

    def test_lists_and_optionals(self, server_schema):
        """Lists and optionals survive conversion."""
        target = RecordSchema("T", (
            FieldDescriptor("aliases", ValueKind.list_of(STR)),
            FieldDescriptor("timeout", ValueKind.optional(INT)),
        ))
        server = bind_from_text(server_schema, "aliases=x, y\ntimeout=5", environ={})
        converted = convert(server_schema, server, target, environ={})
        assert converted.aliases == ["x", "y"]
        assert converted.timeout == 5

    def test_import_mapping(self, client_schema):
        """import_mapping binds like bind_from_mapping."""
        record = import_mapping(client_schema, {"host": "h", "port": "1"}, environ={})
        assert record.server_host == "h"
