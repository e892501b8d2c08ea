from __future__ import annotations

import logging
import threading
from typing import Iterable

from src.adapters.pymupdf_adapter import PyMuPdfAdapter
from src.domain.errors import MergeBusyError, PageCountError, PdfAssemblerError
from src.domain.models import (
    CollectionSnapshot,
    MergeProgress,
    MergeResult,
    Page,
    SourceDocument,
    UploadBatchResult,
)
from src.infrastructure.config import AppConfig
from src.services.merge_engine import CancelToken, MergeEngine
from src.services.page_index import PageIndex
from src.services.progress_tracker import MergeProgressTracker
from src.services.selection_set import SelectionSet
from src.services.upload_registry import UploadRegistry

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to process PDF file"
MERGED_MESSAGE = "PDFs merged successfully"


class WorkspaceService:
    """The page collection for one interactive session.

    All mutations and snapshot capture run under one re-entrant lock, so a
    snapshot never sees a half-applied operation. Merging runs outside that
    lock on a snapshot; at most one merge is in flight at a time.
    """

    def __init__(self, adapter: PyMuPdfAdapter, config: AppConfig) -> None:
        self.adapter = adapter
        self.config = config
        self.registry = UploadRegistry(adapter, config)
        self.page_index = PageIndex()
        self.selection = SelectionSet(self.page_index)
        self.progress_tracker = MergeProgressTracker()
        self.merge_engine = MergeEngine(adapter, config)
        self._lock = threading.RLock()
        self._merge_lock = threading.Lock()

    @property
    def merge_in_flight(self) -> bool:
        return self._merge_lock.locked()

    def add_document(
        self, content: bytes, name: str, append_pages: bool = True
    ) -> SourceDocument:
        with self._lock:
            document = self.registry.add_document(content, name)
            if append_pages:
                self.page_index.append(document.document_id, document.page_count)
            return document

    def add_documents(self, files: list[tuple[str, bytes]]) -> UploadBatchResult:
        if not files:
            return UploadBatchResult()

        with self._lock:
            track = not self.merge_in_flight

            def on_progress(done: int, total: int, name: str) -> None:
                if track:
                    self.progress_tracker.start_loading(
                        f"Loading PDF {done} of {total}...", done / total * 100
                    )

            if track:
                self.progress_tracker.start_loading("Loading PDFs...", 0)
            result = self.registry.add_documents(files, on_progress=on_progress)
            for document in result.accepted:
                self.page_index.append(document.document_id, document.page_count)

            if track:
                if result.rejected and not result.accepted:
                    self.progress_tracker.fail(LOAD_FAILED_MESSAGE)
                else:
                    self.progress_tracker.reset()

        logger.info(
            f"Loaded {result.accepted_count} PDF(s) "
            f"({sum(item.page_count for item in result.accepted)} pages)"
        )
        return result

    def remove_document(self, document_id: str) -> None:
        with self._lock:
            removed_pages = self.page_index.delete_by_document(document_id)
            document = self.registry.remove_document(document_id)
        if document is not None:
            logger.info(f"Removed {document.name} and {removed_pages} page(s)")

    def append_pages(self, source_document_id: str, page_count: int) -> list[Page]:
        with self._lock:
            document = self.registry.require(source_document_id)
            if page_count > document.page_count:
                raise PageCountError(
                    f"{document.name} has only {document.page_count} pages; "
                    f"cannot append {page_count}."
                )
            return self.page_index.append(source_document_id, page_count)

    def reorder(self, page_id: str, new_position: int) -> None:
        with self._lock:
            self.page_index.reorder(page_id, new_position)

    def delete_one(self, page_id: str) -> None:
        with self._lock:
            self.page_index.delete_one(page_id)

    def delete_many(self, page_ids: Iterable[str]) -> None:
        with self._lock:
            self.page_index.delete_many(page_ids)

    def toggle_select(self, page_id: str) -> None:
        with self._lock:
            self.selection.toggle(page_id)

    def delete_selected(self) -> None:
        with self._lock:
            self.selection.delete_selected()

    def reset(self) -> None:
        with self._lock:
            if self.merge_in_flight:
                raise MergeBusyError("Cannot reset the workspace while a merge is running.")
            self.page_index.clear()
            self.selection.clear()
            self.registry.clear()
            self.progress_tracker.reset()
        logger.info("Workspace reset")

    def snapshot(self) -> CollectionSnapshot:
        with self._lock:
            return CollectionSnapshot.capture(self.page_index.snapshot(), self.registry.snapshot())

    def merge(
        self, output_name: str | None = None, cancel_token: CancelToken | None = None
    ) -> MergeResult:
        if not self._merge_lock.acquire(blocking=False):
            raise MergeBusyError("A merge is already in progress.")
        try:
            with self._lock:
                snapshot = self.snapshot()
                self.progress_tracker.start_processing("Merging PDFs...", 0)
            try:
                result = self.merge_engine.merge(
                    snapshot,
                    output_name=output_name,
                    cancel_token=cancel_token,
                    on_progress=self.progress_tracker.start_processing,
                )
            except PdfAssemblerError as exc:
                logger.warning(f"Merge failed: {exc}")
                self.progress_tracker.fail(str(exc))
                raise
            self.progress_tracker.complete(MERGED_MESSAGE)
            return result
        finally:
            self._merge_lock.release()

    @property
    def documents(self) -> tuple[SourceDocument, ...]:
        return self.registry.documents

    @property
    def pages(self) -> tuple[Page, ...]:
        return self.page_index.pages

    @property
    def selected(self) -> frozenset[str]:
        return self.selection.selected

    @property
    def progress(self) -> MergeProgress:
        return self.progress_tracker.state
