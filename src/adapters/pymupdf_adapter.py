from __future__ import annotations

import logging
from typing import cast

import fitz  # type: ignore[import-untyped]

from src.domain.errors import ParsingError

logger = logging.getLogger(__name__)


class PyMuPdfAdapter:
    @staticmethod
    def _optimized_bytes(document: fitz.Document) -> bytes:
        return cast(
            bytes,
            document.tobytes(
                garbage=4,
                deflate=True,
                deflate_images=True,
                deflate_fonts=True,
            ),
        )

    def open_document(self, pdf_bytes: bytes) -> fitz.Document:
        """Parse PDF bytes into an open document the caller must close."""
        if not pdf_bytes:
            raise ParsingError("PDF content is empty")
        try:
            document = fitz.open(stream=pdf_bytes, filetype="pdf")
        except Exception as exc:
            raise ParsingError("Unable to parse PDF") from exc
        if document.needs_pass:
            document.close()
            raise ParsingError("PDF is password-protected")
        logger.debug(f"Parsed PDF with {document.page_count} pages ({len(pdf_bytes)} bytes)")
        return document

    def get_page_count(self, pdf_bytes: bytes) -> int:
        document = self.open_document(pdf_bytes)
        try:
            return int(document.page_count)
        finally:
            document.close()

    def render_page_thumbnail(self, pdf_bytes: bytes, page_index: int, width: int = 150) -> bytes:
        try:
            with fitz.open(stream=pdf_bytes, filetype="pdf") as document:
                page = document[page_index]
                zoom = width / page.rect.width if page.rect.width else 1.0
                matrix = fitz.Matrix(zoom, zoom)
                pixmap = page.get_pixmap(matrix=matrix, alpha=False)
                return cast(bytes, pixmap.tobytes("png"))
        except Exception as exc:
            raise ParsingError("Unable to render page thumbnail") from exc

    def new_document(self) -> fitz.Document:
        return fitz.open()

    def copy_page(self, output: fitz.Document, source: fitz.Document, page_index: int) -> None:
        if not 0 <= page_index < source.page_count:
            raise ParsingError(
                f"Page {page_index + 1} is out of range (1-{source.page_count})"
            )
        try:
            output.insert_pdf(source, from_page=page_index, to_page=page_index)
        except Exception as exc:
            raise ParsingError(f"Unable to copy page {page_index + 1}") from exc

    def to_bytes(self, document: fitz.Document, compress: bool = True) -> bytes:
        try:
            if compress:
                return self._optimized_bytes(document)
            return cast(bytes, document.tobytes(garbage=1))
        except Exception as exc:
            raise ParsingError("Unable to serialize merged PDF") from exc
