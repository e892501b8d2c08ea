from __future__ import annotations

import logging

from src.services.page_index import PageIndex

logger = logging.getLogger(__name__)


class SelectionSet:
    def __init__(self, page_index: PageIndex) -> None:
        self.page_index = page_index
        self._selected: set[str] = set()
        page_index.add_removal_listener(self.prune)

    def toggle(self, page_id: str) -> bool:
        """Flip selection for a page and return whether it is now selected.

        Ids that are not in the page index are ignored.
        """
        if page_id in self._selected:
            self._selected.discard(page_id)
            return False
        if page_id not in self.page_index:
            return False
        self._selected.add(page_id)
        return True

    def clear(self) -> None:
        self._selected = set()

    def delete_selected(self) -> int:
        if not self._selected:
            return 0
        removed = self.page_index.delete_many(self._selected)
        self.clear()
        logger.info(f"Deleted {removed} selected page(s)")
        return removed

    def prune(self, surviving_ids: frozenset[str]) -> None:
        stale = self._selected - surviving_ids
        if stale:
            self._selected = self._selected & surviving_ids
            logger.debug(f"Pruned {len(stale)} stale selection(s)")

    def is_selected(self, page_id: str) -> bool:
        return page_id in self._selected

    @property
    def selected(self) -> frozenset[str]:
        return frozenset(self._selected)

    def __len__(self) -> int:
        return len(self._selected)
