"""Tests for schema violations produced from jsonschema errors."""

from __future__ import annotations

import json

from ocifkit.parser.schema import SchemaValidator, load_ocif_schema
from tests.conftest import MISSING_ID_DOCUMENT, SAMPLE_DOCUMENT, WRONG_TYPE_DOCUMENT


def test_bundled_schema_loads() -> None:
    schema = load_ocif_schema()
    assert schema["required"] == ["ocif"]
    assert "node" in schema["$defs"]


def test_valid_document_has_no_violations(schema_validator: SchemaValidator) -> None:
    document = json.loads(SAMPLE_DOCUMENT)
    assert schema_validator.is_valid(document)
    assert list(schema_validator.iter_violations(document)) == []


def test_nodes_may_be_a_mapping(schema_validator: SchemaValidator) -> None:
    document = {"ocif": "v", "nodes": {"a": {"id": "a"}, "b": {"id": "b", "size": [10, 10]}}}
    assert schema_validator.is_valid(document)


def test_required_violation(schema_validator: SchemaValidator) -> None:
    violations = list(schema_validator.iter_violations(json.loads(MISSING_ID_DOCUMENT)))
    assert len(violations) == 1
    v = violations[0]
    assert v.path == "/nodes/0"
    assert v.keyword == "required"
    assert v.params == {"missingProperty": "id"}


def test_type_violation(schema_validator: SchemaValidator) -> None:
    violations = list(schema_validator.iter_violations(json.loads(WRONG_TYPE_DOCUMENT)))
    assert [v.path for v in violations] == ["/nodes/0/position"]
    assert violations[0].keyword == "type"
    assert violations[0].params == {"type": "array"}


def test_root_violation_has_empty_path(schema_validator: SchemaValidator) -> None:
    violations = list(schema_validator.iter_violations({"nodes": []}))
    assert violations[0].path == ""
    assert violations[0].params == {"missingProperty": "ocif"}


def test_all_errors_reported_in_path_order(schema_validator: SchemaValidator) -> None:
    document = {
        "ocif": "v",
        "nodes": [{"id": "a", "size": [-1, 5]}, {"size": [1, 1]}],
    }
    violations = list(schema_validator.iter_violations(document))
    assert [v.path for v in violations] == ["/nodes/0/size/0", "/nodes/1"]
    assert violations[0].keyword == "minimum"
    assert violations[0].params == {"comparison": ">=", "limit": 0}


def test_multiple_missing_properties_are_distinguished() -> None:
    validator = SchemaValidator({"type": "object", "required": ["a", "b"]})
    violations = list(validator.iter_violations({}))
    assert sorted(v.params["missingProperty"] for v in violations) == ["a", "b"]


def test_enum_and_const_params() -> None:
    validator = SchemaValidator(
        {
            "type": "object",
            "properties": {
                "kind": {"enum": ["rect", "oval"]},
                "version": {"const": 1},
            },
        }
    )
    violations = {v.keyword: v for v in validator.iter_violations({"kind": "x", "version": 2})}
    assert violations["enum"].params == {"allowedValues": ["rect", "oval"]}
    assert violations["enum"].path == "/kind"
    assert violations["const"].params == {"allowedValue": 1}
