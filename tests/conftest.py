"""Shared test fixtures for ocifkit."""

from __future__ import annotations

import json
from typing import Any

import pytest

from ocifkit.layout.builder import DiagramBuilder
from ocifkit.parser.loader import DocumentLoader
from ocifkit.parser.schema import SchemaValidator
from ocifkit.parser.validator import DocumentValidator
from ocifkit.service.converter import DocumentConverter


@pytest.fixture(scope="session")
def schema_validator() -> SchemaValidator:
    return SchemaValidator()


@pytest.fixture
def loader() -> DocumentLoader:
    return DocumentLoader()


@pytest.fixture
def validator(schema_validator: SchemaValidator) -> DocumentValidator:
    return DocumentValidator(schema_validator)


@pytest.fixture
def builder() -> DiagramBuilder:
    return DiagramBuilder()


@pytest.fixture
def converter(validator: DocumentValidator) -> DocumentConverter:
    return DocumentConverter(validator)


@pytest.fixture
def sample_document() -> dict[str, Any]:
    return json.loads(SAMPLE_DOCUMENT)


SAMPLE_DOCUMENT = """\
{
  "ocif": "https://canvasprotocol.org/ocif/v0.4",
  "nodes": [
    {
      "id": "n1",
      "position": [100, 100],
      "size": [100, 50],
      "text": "Start"
    },
    {
      "id": "n2",
      "position": [300, 100],
      "size": [100, 50],
      "resource": "r1",
      "data": [{"type": "@ocif/node/oval", "strokeWidth": 3, "fillColor": "#ffeeee"}]
    },
    {
      "id": "arrow-1",
      "data": [{"type": "@ocif/node/arrow"}]
    }
  ],
  "relations": [
    {
      "id": "rel-group",
      "data": [
        {"type": "@ocif/rel/edge", "start": "n1", "end": "n2", "rel": "flow", "node": "arrow-1"},
        {"type": "@ocif/rel/edge", "start": "n1", "end": "missing"}
      ]
    }
  ],
  "resources": [
    {
      "id": "r1",
      "representations": [
        {"mime-type": "text/html", "content": "<b>End</b>"},
        {"mime-type": "text/plain", "content": "End"}
      ]
    }
  ]
}
"""

MISSING_ID_DOCUMENT = """\
{
  "ocif": "https://canvasprotocol.org/ocif/v0.4",
  "nodes": [
    {
      "position": [1, 2]
    }
  ]
}
"""

WRONG_TYPE_DOCUMENT = """\
{
  "ocif": "https://canvasprotocol.org/ocif/v0.4",
  "nodes": [
    {
      "id": "n1",
      "position": "oops"
    }
  ]
}
"""

JSON5_DOCUMENT = """\
{
  // OCIF written by hand
  ocif: 'https://canvasprotocol.org/ocif/v0.4',
  nodes: [
    {id: 'a', text: 'Hello'},
    {id: 'b', text: 'World'},
  ],
  relations: [
    {id: 'g', data: [{type: '@ocif/rel/edge', start: 'a', end: 'b'}]},
  ],
}
"""


def char_at(text: str, line: int, column: int) -> str:
    """Character at a 1-based line/column of *text*."""
    return text.split("\n")[line - 1][column - 1]
