from __future__ import annotations

import logging
import uuid
from types import MappingProxyType
from typing import Callable, Mapping

from src.adapters.pymupdf_adapter import PyMuPdfAdapter
from src.domain.errors import (
    PageCountError,
    ParsingError,
    SizeLimitExceededError,
    TooManyDocumentsError,
    UnknownDocumentError,
    UnsupportedFileTypeError,
    ValidationError,
)
from src.domain.models import SourceDocument, UploadBatchResult, UploadRejection
from src.infrastructure.config import AppConfig
from src.services.output_naming import format_file_size, has_pdf_extension

logger = logging.getLogger(__name__)


class UploadRegistry:
    """Owns the uploaded source documents for one session.

    Documents are kept in upload order. The registry never creates pages;
    callers append them to the page index once a document is accepted.
    """

    def __init__(self, adapter: PyMuPdfAdapter, config: AppConfig) -> None:
        self.adapter = adapter
        self.config = config
        self._documents: dict[str, SourceDocument] = {}

    def _validate(self, content: bytes, name: str) -> None:
        if len(self._documents) >= self.config.max_documents:
            raise TooManyDocumentsError(
                f"Cannot add {name}: limit of {self.config.max_documents} documents reached."
            )
        if not has_pdf_extension(name):
            raise UnsupportedFileTypeError(
                f"Invalid file type for {name}. Only PDF files are allowed."
            )
        if len(content) > self.config.max_pdf_size_bytes:
            raise SizeLimitExceededError(
                f"{name} ({format_file_size(len(content))}) exceeds per-file limit of "
                f"{self.config.max_pdf_size_mb} MB"
            )

    def add_document(self, content: bytes, name: str) -> SourceDocument:
        self._validate(content, name)
        try:
            page_count = self.adapter.get_page_count(content)
        except ParsingError as exc:
            raise ParsingError(f"{name} is not a readable PDF: {exc}") from exc
        if page_count < 1:
            raise PageCountError(f"{name} contains no pages.")
        if page_count > self.config.max_pages_per_document:
            raise PageCountError(
                f"{name} has {page_count} pages; the limit is "
                f"{self.config.max_pages_per_document} per document."
            )

        document = SourceDocument(
            document_id=str(uuid.uuid4()),
            name=name,
            size_bytes=len(content),
            page_count=page_count,
            content=content,
        )
        self._documents[document.document_id] = document
        logger.info(f"Registered {name} ({page_count} pages, {format_file_size(len(content))})")
        return document

    def add_documents(
        self,
        files: list[tuple[str, bytes]],
        on_progress: Callable[[int, int, str], None] | None = None,
    ) -> UploadBatchResult:
        """Register each file independently; rejections do not stop the batch."""
        result = UploadBatchResult()
        total = len(files)
        for index, (name, content) in enumerate(files):
            try:
                result.accepted.append(self.add_document(content, name))
            except (ValidationError, ParsingError) as exc:
                logger.warning(f"Rejected upload {name}: {exc}")
                result.rejected.append(UploadRejection(name=name, reason=str(exc)))
            if on_progress is not None:
                on_progress(index + 1, total, name)
        if result.rejected:
            logger.info(
                f"Upload batch finished: {result.accepted_count} accepted, "
                f"{result.rejected_count} rejected"
            )
        return result

    def remove_document(self, document_id: str) -> SourceDocument | None:
        document = self._documents.pop(document_id, None)
        if document is not None:
            logger.info(f"Removed document {document.name}")
        return document

    def get(self, document_id: str) -> SourceDocument | None:
        return self._documents.get(document_id)

    def require(self, document_id: str) -> SourceDocument:
        document = self._documents.get(document_id)
        if document is None:
            raise UnknownDocumentError(f"Unknown source document: {document_id}")
        return document

    def clear(self) -> None:
        self._documents.clear()

    @property
    def documents(self) -> tuple[SourceDocument, ...]:
        return tuple(self._documents.values())

    @property
    def total_size_bytes(self) -> int:
        return sum(item.size_bytes for item in self._documents.values())

    def snapshot(self) -> Mapping[str, SourceDocument]:
        return MappingProxyType(dict(self._documents))

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._documents

    def __len__(self) -> int:
        return len(self._documents)
