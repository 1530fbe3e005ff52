"""
Bounded linear undo/redo log of full seat map snapshots.

One entry per discrete user action. Snapshots are deep-copied going in and
coming out so nothing outside the manager can alias a stored version.
"""

import logging
from typing import List, Optional

from seatmapper.core.config import settings
from seatmapper.schemas.seatmap import SeatMap

logger = logging.getLogger(__name__)


class HistoryManager:
    def __init__(self, limit: Optional[int] = None):
        self.limit = limit or settings.HISTORY_LIMIT
        self._entries: List[SeatMap] = []
        self._cursor = -1

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    def commit(self, doc: SeatMap) -> None:
        """Record ``doc`` after the cursor, discarding any redo branch."""
        del self._entries[self._cursor + 1:]
        self._entries.append(doc.model_copy(deep=True))
        self._cursor = len(self._entries) - 1

        if len(self._entries) > self.limit:
            self._entries.pop(0)
            self._cursor -= 1

        logger.debug("History commit: %d entries, cursor at %d", len(self._entries), self._cursor)

    def undo(self) -> Optional[SeatMap]:
        if not self.can_undo():
            return None
        self._cursor -= 1
        return self._entries[self._cursor].model_copy(deep=True)

    def redo(self) -> Optional[SeatMap]:
        if not self.can_redo():
            return None
        self._cursor += 1
        return self._entries[self._cursor].model_copy(deep=True)

    def reset(self, doc: SeatMap) -> None:
        """Start over with ``doc`` as the only entry (load / import)."""
        self._entries = []
        self._cursor = -1
        self.commit(doc)

    def current(self) -> Optional[SeatMap]:
        if self._cursor < 0:
            return None
        return self._entries[self._cursor].model_copy(deep=True)

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1
