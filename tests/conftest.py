"""Pytest fixtures for props-util tests."""

import pytest

from propsutil import FieldDescriptor, RecordSchema, ValueKind
from propsutil.services.converters import BOOL, INT, STR


SAMPLE_PROPERTIES = """\
# Test configuration
! bang comments too

name = TestName
dept=Engineering
id=123
numeric_test=456
bool_test=true
spaced.key =   spaced value
missing_required=value_added_to_file
"""


@pytest.fixture
def test_schema():
    """Schema mirroring the sample properties file, with two required keys."""
    return RecordSchema("TestConfig", (
        FieldDescriptor("name", STR, default="DefaultName"),
        FieldDescriptor("dept", STR),
        FieldDescriptor("id", INT, default="0", name="empid"),
        FieldDescriptor("numeric_test", INT, default="999", name="numeric"),
        FieldDescriptor("bool_test", BOOL, default="false", name="boolean"),
        FieldDescriptor("spaced.key", STR, default="", name="spaced"),
        FieldDescriptor("missing_default", STR, default="DefaultValue"),
        FieldDescriptor("missing_required", STR),
    ))


@pytest.fixture
def server_schema():
    """Server-side schema with env override, list and optional fields."""
    return RecordSchema("ServerConfig", (
        FieldDescriptor("host", STR, default="localhost", env_var="TEST_SERVER_HOST"),
        FieldDescriptor("port", INT, default="8080"),
        FieldDescriptor("debug", BOOL, default="false"),
        FieldDescriptor("aliases", ValueKind.list_of(STR), default=""),
        FieldDescriptor("timeout", ValueKind.optional(INT)),
    ))


@pytest.fixture
def client_schema():
    """Client-side schema sharing ``host``/``port`` keys under other names."""
    return RecordSchema("ClientConfig", (
        FieldDescriptor("host", STR, name="server_host"),
        FieldDescriptor("port", INT, name="server_port"),
        FieldDescriptor("retries", INT, default="3"),
    ))


@pytest.fixture
def sample_file(tmp_path):
    """Write the sample properties text to a file."""
    path = tmp_path / "test.properties"
    path.write_text(SAMPLE_PROPERTIES)
    return path
