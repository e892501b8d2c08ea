from __future__ import annotations

import logging
import uuid
from typing import Callable, Iterable

from src.domain.models import Page

logger = logging.getLogger(__name__)

RemovalListener = Callable[[frozenset[str]], None]


class PageIndex:
    """Ordered page references that define the merge output order.

    Every removal path (single, batch, cascade) replaces the sequence in one
    assignment and then notifies removal listeners with the surviving ids
    before returning.
    """

    def __init__(self) -> None:
        self._pages: list[Page] = []
        self._listeners: list[RemovalListener] = []

    def add_removal_listener(self, listener: RemovalListener) -> None:
        self._listeners.append(listener)

    def _notify_removed(self) -> None:
        surviving = self.page_ids
        for listener in self._listeners:
            listener(surviving)

    def _replace(self, pages: list[Page]) -> int:
        removed = len(self._pages) - len(pages)
        if removed:
            self._pages = pages
            self._notify_removed()
        return removed

    def append(self, source_document_id: str, page_count: int) -> list[Page]:
        if page_count < 0:
            raise ValueError("page_count must not be negative")
        new_pages = [
            Page(
                page_id=str(uuid.uuid4()),
                source_document_id=source_document_id,
                source_page_number=number,
            )
            for number in range(1, page_count + 1)
        ]
        self._pages = self._pages + new_pages
        return new_pages

    def reorder(self, page_id: str, new_position: int) -> bool:
        current = self.position_of(page_id)
        if current is None:
            logger.debug(f"Ignoring reorder of absent page {page_id}")
            return False
        target = max(0, min(new_position, len(self._pages) - 1))
        if target == current:
            return False
        pages = list(self._pages)
        page = pages.pop(current)
        pages.insert(target, page)
        self._pages = pages
        logger.debug(f"Moved page {page_id} from {current} to {target}")
        return True

    def delete_one(self, page_id: str) -> bool:
        return self._replace([page for page in self._pages if page.page_id != page_id]) > 0

    def delete_many(self, page_ids: Iterable[str]) -> int:
        selected = set(page_ids)
        if not selected:
            return 0
        return self._replace([page for page in self._pages if page.page_id not in selected])

    def delete_by_document(self, source_document_id: str) -> int:
        return self._replace(
            [page for page in self._pages if page.source_document_id != source_document_id]
        )

    def clear(self) -> None:
        self._replace([])

    @property
    def pages(self) -> tuple[Page, ...]:
        return tuple(self._pages)

    @property
    def page_ids(self) -> frozenset[str]:
        return frozenset(page.page_id for page in self._pages)

    def get(self, page_id: str) -> Page | None:
        return next((page for page in self._pages if page.page_id == page_id), None)

    def position_of(self, page_id: str) -> int | None:
        for index, page in enumerate(self._pages):
            if page.page_id == page_id:
                return index
        return None

    def pages_for_document(self, source_document_id: str) -> list[Page]:
        return [page for page in self._pages if page.source_document_id == source_document_id]

    def snapshot(self) -> tuple[Page, ...]:
        return tuple(self._pages)

    def __contains__(self, page_id: object) -> bool:
        return any(page.page_id == page_id for page in self._pages)

    def __len__(self) -> int:
        return len(self._pages)
