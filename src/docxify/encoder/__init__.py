"""Encoders that serialise a finished document model."""

from docxify.encoder.docx_writer import encode_document

__all__ = ["encode_document"]
