"""Drive uploads for a batch of attachments, one at a time."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .models import AttachmentRecord, UploadStatus
from .store import AttachmentStore
from .transfer import TransferEngine

logger = logging.getLogger(__name__)


class BatchSequencer:
    """Upload attachments strictly in submission order."""

    def __init__(self, store: AttachmentStore, engine: TransferEngine) -> None:
        self.store = store
        self.engine = engine

    async def upload_pending(
        self,
        records: Optional[Iterable[AttachmentRecord]] = None,
        sub_path: str | None = None,
    ) -> list[AttachmentRecord]:
        """Upload ``records``, or every pending record at call time.

        Returns the resolved records in submission order; skipped uploads are
        left out.
        """
        batch = list(records) if records is not None else self.store.pending()
        if not batch:
            return []

        resolved: list[AttachmentRecord] = []
        self.store.set_in_progress(True)
        try:
            for record in batch:
                outcome = await self.engine.transfer_one(record, sub_path)
                if outcome is not None:
                    resolved.append(outcome)
        finally:
            self.store.set_in_progress(False)

        failed = sum(1 for record in resolved if record.status is UploadStatus.ERROR)
        logger.info(
            "Batch complete: submitted=%s uploaded=%s failed=%s",
            len(batch),
            len(resolved) - failed,
            failed,
        )
        return resolved
