from __future__ import annotations

import logging

from src.adapters.pymupdf_adapter import PyMuPdfAdapter
from src.services.upload_registry import UploadRegistry

logger = logging.getLogger(__name__)


class PageRenderer:
    """PNG thumbnails for the preview grid.

    Only the UI consults this; merging never depends on it. Thumbnails are
    cached per (document, page, width) until the document is evicted.
    """

    def __init__(self, adapter: PyMuPdfAdapter, registry: UploadRegistry, width: int = 150) -> None:
        self.adapter = adapter
        self.registry = registry
        self.width = width
        self._cache: dict[tuple[str, int, int], bytes] = {}

    def request_thumbnail(self, source_document_id: str, page_number: int) -> bytes:
        key = (source_document_id, page_number, self.width)
        if key not in self._cache:
            document = self.registry.require(source_document_id)
            logger.debug(f"Rendering thumbnail for {document.name} page {page_number}")
            self._cache[key] = self.adapter.render_page_thumbnail(
                document.content, page_number - 1, width=self.width
            )
        return self._cache[key]

    def evict(self, source_document_id: str) -> None:
        self._cache = {
            key: value for key, value in self._cache.items() if key[0] != source_document_id
        }

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
