"""Document parsing, schema validation and source position recovery."""

from ocifkit.parser.loader import DocumentLoader, DocumentParseError, DocumentSafetyError, SourceMap
from ocifkit.parser.locator import ScanLocator, SpanLocator, find_position, locate
from ocifkit.parser.schema import SchemaValidator
from ocifkit.parser.validator import DocumentValidator, enrich, schema_details

__all__ = [
    "DocumentLoader",
    "DocumentParseError",
    "DocumentSafetyError",
    "DocumentValidator",
    "ScanLocator",
    "SchemaValidator",
    "SourceMap",
    "SpanLocator",
    "enrich",
    "find_position",
    "locate",
    "schema_details",
]
