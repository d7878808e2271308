"""JSON Schema validation producing validator-neutral violations."""

from __future__ import annotations

import json
from collections.abc import Iterator
from importlib import resources
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from ocifkit.models.errors import Violation
from ocifkit.parser.loader import join_pointer

_COMPARISONS = {
    "minimum": ">=",
    "maximum": "<=",
    "exclusiveMinimum": ">",
    "exclusiveMaximum": "<",
}

_LIMIT_KEYWORDS = {"minLength", "maxLength", "minItems", "maxItems", "minProperties", "maxProperties"}


def load_ocif_schema() -> dict[str, Any]:
    """Load the bundled OCIF JSON Schema."""
    with resources.files("ocifkit").joinpath("schema/ocif.schema.json").open(
        "r", encoding="utf-8"
    ) as fh:
        return json.load(fh)


def _missing_property(error: ValidationError) -> str | None:
    instance = error.instance if isinstance(error.instance, dict) else {}
    for name in error.validator_value or []:
        if name not in instance and error.message.startswith(repr(name)):
            return name
    return None


def violation_params(error: ValidationError) -> dict[str, Any]:
    """Describe a failed constraint in the keyword parameter vocabulary."""
    keyword = error.validator
    value = error.validator_value
    if keyword == "type":
        return {"type": value if isinstance(value, str) else ",".join(value)}
    if keyword == "enum":
        return {"allowedValues": list(value)}
    if keyword == "required":
        return {"missingProperty": _missing_property(error)}
    if keyword == "pattern":
        return {"pattern": value}
    if keyword == "format":
        return {"format": value}
    if keyword == "const":
        return {"allowedValue": value}
    if keyword in _COMPARISONS:
        return {"comparison": _COMPARISONS[keyword], "limit": value}
    if keyword in _LIMIT_KEYWORDS:
        return {"limit": value}
    return {}


def to_violation(error: ValidationError) -> Violation:
    return Violation(
        path=join_pointer(list(error.absolute_path)),
        keyword=str(error.validator),
        message=error.message,
        params=violation_params(error),
    )


class SchemaValidator:
    """A compiled schema; construct once and reuse across documents."""

    def __init__(self, schema: dict[str, Any] | None = None) -> None:
        self.schema = schema if schema is not None else load_ocif_schema()
        Draft202012Validator.check_schema(self.schema)
        self._validator = Draft202012Validator(self.schema)

    def is_valid(self, document: Any) -> bool:
        return self._validator.is_valid(document)

    def iter_violations(self, document: Any) -> Iterator[Violation]:
        """Yield every violation, ordered by document path."""
        errors = sorted(
            self._validator.iter_errors(document),
            key=lambda e: [(0, p) if isinstance(p, int) else (1, p) for p in e.absolute_path],
        )
        for error in errors:
            yield to_violation(error)
