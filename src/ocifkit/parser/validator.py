"""Document validation: parse, check against the schema, locate every violation."""

from __future__ import annotations

import json
import logging
from typing import Any

from ocifkit.models.errors import LocatedError, ValidationResult, Violation
from ocifkit.parser.loader import DocumentLoader, DocumentParseError, DocumentSafetyError
from ocifkit.parser.locator import Locator, ScanLocator, make_locator
from ocifkit.parser.schema import SchemaValidator

logger = logging.getLogger("ocifkit.validator")

PARSE_ERROR_MESSAGE = "Invalid JSON format"
_SUPPRESSED_PREFIX = "must be equal to constant"


def schema_details(violation: Violation) -> str:
    """Return the keyword-specific explanation shown next to a violation."""
    params = violation.params
    keyword = violation.keyword
    if keyword == "type":
        return f"Expected type: {params.get('type')}"
    if keyword == "enum":
        return f"Allowed values: {', '.join(str(v) for v in params.get('allowedValues', []))}"
    if keyword == "required":
        return f"Required property missing: {params.get('missingProperty')}"
    if keyword == "pattern":
        return f"Should match pattern: {params.get('pattern')}"
    if keyword == "format":
        return f"Should match format: {params.get('format')}"
    if keyword == "const":
        return f"Expected value: {json.dumps(params.get('allowedValue'))}"
    if keyword in ("minimum", "maximum", "minLength", "maxLength"):
        return f"{violation.message} ({json.dumps(params)})"
    if violation.message.startswith(_SUPPRESSED_PREFIX):
        return ""
    return violation.message


def context_line(text: str, line: int) -> str:
    """Return the trimmed source line (1-based), or ``""`` when out of range."""
    lines = text.split("\n")
    if 1 <= line <= len(lines):
        return lines[line - 1].strip()
    return ""


def enrich(violation: Violation, text: str, locator: Locator | None = None) -> LocatedError:
    """Map a violation onto the source text. Never raises."""
    path = violation.path or "/"
    locator = locator or ScanLocator(text)
    try:
        position = locator.find(path)
    except Exception:
        logger.debug("Could not locate %s", path, exc_info=True)
        position = None
    # A miss reports the document start with no context line
    if position is None:
        line, column, context = 1, 1, ""
    else:
        line, column = position.line, position.column
        context = context_line(text, line)
    return LocatedError(
        path=path,
        message=violation.message or "Unknown error",
        line=line,
        column=column,
        details=schema_details(violation),
        context=context,
        keyword=violation.keyword,
    )


class DocumentValidator:
    """Validates document text against a compiled schema.

    The schema validator and loader are explicit collaborators so that each
    instance owns its compiled state.
    """

    def __init__(
        self,
        schema_validator: SchemaValidator | None = None,
        loader: DocumentLoader | None = None,
        locator: str = "scan",
    ) -> None:
        self.schema_validator = schema_validator or SchemaValidator()
        self.loader = loader or DocumentLoader()
        self.locator = locator

    def parse(self, text: str) -> Any:
        return self.loader.loads(text)

    def validate_document(self, document: Any, text: str) -> ValidationResult:
        """Validate an already-parsed document, locating errors in *text*."""
        if self.schema_validator.is_valid(document):
            return ValidationResult(valid=True)
        violations = list(self.schema_validator.iter_violations(document))
        locator = make_locator(self.locator, text)
        errors = [enrich(v, text, locator) for v in violations]
        logger.debug("Document has %d schema violation(s)", len(errors))
        return ValidationResult(valid=False, errors=errors)

    def validate(self, text: str) -> ValidationResult:
        """Parse and validate *text*, returning every located error."""
        try:
            document = self.parse(text)
        except DocumentParseError as e:
            return ValidationResult(valid=False, errors=[parse_error(e)])
        return self.validate_document(document, text)


def parse_error(error: DocumentParseError) -> LocatedError:
    """A parse failure is reported once at the document start."""
    return LocatedError(
        path="/",
        message=PARSE_ERROR_MESSAGE,
        line=1,
        column=1,
        details=str(error) if isinstance(error, DocumentSafetyError) else "",
        keyword="parse",
    )
