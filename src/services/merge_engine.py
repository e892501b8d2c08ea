from __future__ import annotations

import logging
import threading
from typing import Callable, Mapping

import fitz  # type: ignore[import-untyped]

from src.adapters.pymupdf_adapter import PyMuPdfAdapter
from src.domain.errors import MergeCancelledError, MissingSourceError, NothingToMergeError
from src.domain.models import CollectionSnapshot, MergeResult, SourceDocument
from src.infrastructure.config import AppConfig
from src.services.output_naming import normalize_output_name

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, float], None]


class CancelToken:
    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise MergeCancelledError("Merge was cancelled.")


class SourceDocumentCache:
    """Parsed source documents for a single merge invocation.

    Each source document is parsed at most once, keyed by document id.
    Closing the cache closes every document it opened.
    """

    def __init__(self, adapter: PyMuPdfAdapter, documents: Mapping[str, SourceDocument]) -> None:
        self.adapter = adapter
        self.documents = documents
        self._parsed: dict[str, fitz.Document] = {}

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._parsed

    def __len__(self) -> int:
        return len(self._parsed)

    def get(self, document_id: str) -> fitz.Document:
        if document_id not in self._parsed:
            source = self.documents[document_id]
            logger.debug(f"Parsing source document {source.name}")
            self._parsed[document_id] = self.adapter.open_document(source.content)
        return self._parsed[document_id]

    def close(self) -> None:
        for document in self._parsed.values():
            document.close()
        self._parsed.clear()

    def __enter__(self) -> SourceDocumentCache:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class MergeEngine:
    def __init__(self, adapter: PyMuPdfAdapter, config: AppConfig) -> None:
        self.adapter = adapter
        self.config = config

    @staticmethod
    def _report(on_progress: ProgressCallback | None, message: str, percent: float) -> None:
        if on_progress is not None:
            on_progress(message, percent)

    def merge(
        self,
        snapshot: CollectionSnapshot,
        *,
        output_name: str | None = None,
        cancel_token: CancelToken | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> MergeResult:
        if snapshot.is_empty:
            raise NothingToMergeError("Cannot merge when no pages remain.")

        token = cancel_token or CancelToken()
        total = len(snapshot.pages)
        name = normalize_output_name(output_name, self.config.default_output_name)
        logger.info(f"Starting merge of {total} page(s) into {name}")

        output = self.adapter.new_document()
        try:
            with SourceDocumentCache(self.adapter, snapshot.documents) as cache:
                for position, page in enumerate(snapshot.pages):
                    if page.source_document_id not in snapshot.documents:
                        raise MissingSourceError(page.page_id, page.source_document_id)

                    if page.source_document_id not in cache:
                        source = snapshot.documents[page.source_document_id]
                        self._report(
                            on_progress, f"Loading {source.name}...", position / total * 100
                        )
                        token.raise_if_cancelled()
                        cache.get(page.source_document_id)

                    self._report(
                        on_progress,
                        f"Copying page {position + 1} of {total}...",
                        position / total * 100,
                    )
                    token.raise_if_cancelled()
                    self.adapter.copy_page(
                        output, cache.get(page.source_document_id), page.source_page_index
                    )

                token.raise_if_cancelled()
                parsed_documents = len(cache)
                self._report(on_progress, "Preparing download...", 100)
                output_pdf = self.adapter.to_bytes(output, compress=self.config.compress_output)
        except MergeCancelledError:
            logger.warning(f"Merge cancelled after partial progress; discarded {name}")
            raise
        finally:
            output.close()

        logger.info(
            f"Merged {total} page(s) from {parsed_documents} document(s) "
            f"into {name} ({len(output_pdf)} bytes)"
        )
        return MergeResult(
            output_name=name,
            output_pdf=output_pdf,
            merged_pages=total,
            source_documents=parsed_documents,
        )
