"""In-memory storage for generated presentations."""

from __future__ import annotations

import itertools
import logging
import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .slide_models import PresentationRecord

LOGGER = logging.getLogger(__name__)


class InMemoryPresentationStore:
    """Keep :class:`PresentationRecord` instances in a process-local dict.

    Records are lost when the process exits.
    """

    def __init__(self) -> None:
        self._records: Dict[str, PresentationRecord] = {}
        self._order: Dict[str, int] = {}
        self._counter = itertools.count()
        self._lock = threading.Lock()

    def create(self, record: PresentationRecord) -> PresentationRecord:
        """Store ``record`` under a fresh id and return the stored copy."""

        stored = replace(
            record,
            id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._records[stored.id] = stored
            self._order[stored.id] = next(self._counter)
        LOGGER.info("Stored presentation %s (%s)", stored.id, stored.title)
        return stored

    def get(self, presentation_id: str) -> Optional[PresentationRecord]:
        with self._lock:
            return self._records.get(presentation_id)

    def list(self, limit: int = 10) -> List[PresentationRecord]:
        """Return up to ``limit`` records, newest first."""

        with self._lock:
            records = sorted(
                self._records.values(),
                key=lambda item: (item.created_at, self._order[item.id]),
                reverse=True,
            )
        return records[: max(limit, 0)]

    def delete(self, presentation_id: str) -> bool:
        with self._lock:
            removed = self._records.pop(presentation_id, None)
            self._order.pop(presentation_id, None)
        if removed is not None:
            LOGGER.info("Deleted presentation %s", presentation_id)
        return removed is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
