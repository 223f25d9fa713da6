"""
credgraph Exception Tests

Test Coverage:
- Base class with .code, .message, .details
- Deterministic error codes per class
- JSON serialization (to_dict, to_json)
- Foreign exception mapping through EXCEPTION_MAP
"""

import binascii
import json

import pytest

from credgraph.exceptions import (
    EXCEPTION_MAP,
    CanonicalEncodingError,
    ConfigError,
    CredGraphError,
    DuplicateLinkError,
    DuplicateNodeError,
    FormatError,
    GraphFrozenError,
    InternalError,
    InvalidRecordError,
    RangeError,
    SchemaLoadError,
    SchemaMismatchError,
    TypeMismatchError,
    UnknownLinkError,
    UnknownNodeError,
    wrap_internal_exception,
)


# =============================================================================
# Base class attributes
# =============================================================================

class TestCredGraphError:
    def test_error_has_code(self):
        assert CredGraphError("Test error").code == "CG_INTERNAL_ERROR"

    def test_details_defaults_to_empty_dict(self):
        assert CredGraphError("Test error").details == {}

    def test_str_has_code_prefix(self):
        assert str(TypeMismatchError("bad value")) == "[CG_TYPE_MISMATCH] bad value"

    def test_repr(self):
        error = RangeError("too wide", details={"width": 16})
        assert repr(error) == "RangeError(message='too wide', details={'width': 16})"

    def test_to_dict(self):
        error = SchemaMismatchError("no entry", details={"path": ["sbj", "alias"]})
        assert error.to_dict() == {
            "code": "CG_SCHEMA_MISMATCH",
            "message": "no entry",
            "details": {"path": ["sbj", "alias"]},
        }

    def test_to_json_handles_non_json_details(self):
        error = FormatError("bad", details={"value": b"\x00"})
        assert json.loads(error.to_json())["details"]["value"] == "b'\\x00'"


# =============================================================================
# Error codes
# =============================================================================

@pytest.mark.parametrize("error_class,code", [
    (DuplicateNodeError, "CG_DUPLICATE_NODE"),
    (DuplicateLinkError, "CG_DUPLICATE_LINK"),
    (UnknownNodeError, "CG_UNKNOWN_NODE"),
    (UnknownLinkError, "CG_UNKNOWN_LINK"),
    (TypeMismatchError, "CG_TYPE_MISMATCH"),
    (RangeError, "CG_RANGE"),
    (FormatError, "CG_FORMAT"),
    (SchemaMismatchError, "CG_SCHEMA_MISMATCH"),
    (InvalidRecordError, "CG_INVALID_RECORD"),
    (GraphFrozenError, "CG_GRAPH_FROZEN"),
    (SchemaLoadError, "CG_SCHEMA_LOAD"),
    (CanonicalEncodingError, "CG_CANONICAL_ENCODING"),
    (ConfigError, "CG_CONFIG"),
    (InternalError, "CG_INTERNAL_ERROR"),
])
def test_error_codes(error_class, code):
    error = error_class("message")
    assert error.code == code
    assert isinstance(error, CredGraphError)


# =============================================================================
# Mapping
# =============================================================================

class TestWrapInternalException:
    def test_value_error_maps_to_format(self):
        wrapped = wrap_internal_exception(ValueError("nope"))
        assert isinstance(wrapped, FormatError)
        assert wrapped.message == "nope"
        assert wrapped.details["internal_error"] == "ValueError"

    def test_subclass_resolves_through_mro(self):
        assert isinstance(wrap_internal_exception(binascii.Error("pad")), FormatError)
        assert isinstance(wrap_internal_exception(UnicodeDecodeError("utf-8", b"\xff", 0, 1, "x")), FormatError)

    def test_overflow_maps_to_range(self):
        assert isinstance(wrap_internal_exception(OverflowError("big")), RangeError)

    def test_unknown_maps_to_internal(self):
        assert isinstance(wrap_internal_exception(KeyError("k")), InternalError)

    def test_details_merged_and_copied(self):
        details = {"link": "bytes-x"}
        wrapped = wrap_internal_exception(TypeError("t"), default_message="custom", details=details)
        assert wrapped.message == "custom"
        assert wrapped.details == {"link": "bytes-x", "internal_error": "TypeError"}
        assert details == {"link": "bytes-x"}

    def test_map_targets_are_credgraph_errors(self):
        for target in EXCEPTION_MAP.values():
            assert issubclass(target, CredGraphError)
