"""Tests for schema loading, validation and fingerprinting."""

import json

import pytest
import yaml

from credgraph import (
    InvalidRecordError,
    SchemaLoadError,
    SchemaMismatchError,
    TransformationGraph,
)
from credgraph.schema_loader import (
    load_schema_dict,
    load_schema_file,
    schema_fingerprint,
    validate_schema,
)


# ---------------------------------------------------------------------------
# File loading
# ---------------------------------------------------------------------------

class TestLoadSchemaFile:
    def test_load_yaml(self, tmp_path, schema):
        path = tmp_path / "credential.yaml"
        path.write_text(yaml.safe_dump(schema), encoding="utf-8")
        assert load_schema_file(path) == schema

    def test_load_json(self, tmp_path, schema):
        path = tmp_path / "credential.json"
        path.write_text(json.dumps(schema), encoding="utf-8")
        assert load_schema_file(str(path)) == schema

    def test_loaded_schema_prepares(self, tmp_path, schema, credential, preparator):
        path = tmp_path / "credential.yml"
        path.write_text(yaml.safe_dump(schema), encoding="utf-8")
        loaded = load_schema_file(path, graph=preparator.graph)
        assert preparator.prepare(credential, loaded) == preparator.prepare(credential, schema)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SchemaLoadError, match="not found"):
            load_schema_file(tmp_path / "absent.yaml")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "schema.toml"
        path.write_text("x = 1", encoding="utf-8")
        with pytest.raises(SchemaLoadError, match="Unsupported"):
            load_schema_file(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("isr: [unclosed", encoding="utf-8")
        with pytest.raises(SchemaLoadError, match="Invalid YAML"):
            load_schema_file(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(SchemaLoadError, match="Invalid JSON"):
            load_schema_file(path)

    def test_document_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(SchemaLoadError, match="dictionary"):
            load_schema_file(path)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestValidateSchema:
    def test_valid_schema_returned(self, schema):
        assert validate_schema(schema) is schema

    def test_all_errors_reported(self, schema):
        schema = dict(schema, sch=[], isd="uint64-bytes")
        with pytest.raises(SchemaMismatchError) as exc_info:
            validate_schema(schema)
        errors = exc_info.value.details["errors"]
        assert len(errors) == 2
        assert any(error.startswith("sch:") for error in errors)
        assert any(error.startswith("isd:") for error in errors)

    def test_unknown_links_against_graph(self, schema):
        schema = dict(schema, sch=["uint32-bytes", "bytes-base99"])
        with pytest.raises(SchemaMismatchError) as exc_info:
            validate_schema(schema, TransformationGraph())
        assert exc_info.value.details["errors"] == ["sch: unknown link 'bytes-base99'"]

    def test_per_index_chains_accepted(self, schema):
        schema = dict(schema, sbj=dict(schema["sbj"], tags=[["utf8"], ["ascii-bytes"]]))
        validate_schema(schema, TransformationGraph())

    def test_missing_required_field(self, schema):
        schema = dict(schema)
        del schema["isd"]
        with pytest.raises(InvalidRecordError):
            load_schema_dict(schema)


# ---------------------------------------------------------------------------
# Fingerprint
# ---------------------------------------------------------------------------

class TestSchemaFingerprint:
    def test_stable_across_key_order(self, schema):
        reordered = dict(reversed(list(schema.items())))
        assert schema_fingerprint(schema) == schema_fingerprint(reordered)

    def test_changes_with_chain(self, schema):
        changed = dict(schema, sch=["uint32-bytes", "bytes-base32"])
        assert schema_fingerprint(schema) != schema_fingerprint(changed)

    def test_hex_sha256(self, schema):
        fingerprint = schema_fingerprint(schema)
        assert len(fingerprint) == 64
        int(fingerprint, 16)
