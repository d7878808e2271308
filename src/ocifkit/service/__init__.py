"""Conversion services built on the parser, layout and render layers."""

from ocifkit.service.converter import ConversionResult, DocumentConverter, InvalidDocumentError

__all__ = ["ConversionResult", "DocumentConverter", "InvalidDocumentError"]
