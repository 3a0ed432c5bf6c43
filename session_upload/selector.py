"""Turn picker results into queued attachments."""

from __future__ import annotations

import logging

from .collaborators import FilePicker
from .errors import SelectionError
from .models import AttachmentRecord, PickedFile, UploadStatus
from .store import AttachmentStore
from .utils import new_attachment_id

logger = logging.getLogger(__name__)


class Selector:
    """Invoke the picker and append what it returns as pending records."""

    def __init__(self, store: AttachmentStore, picker: FilePicker) -> None:
        self.store = store
        self.picker = picker

    async def pick_files(self) -> list[AttachmentRecord]:
        """Queue picked files; returns the new records (empty when cancelled)."""
        try:
            result = await self.picker.pick()
        except Exception as exc:
            logger.error("File picker failed: %s", exc)
            raise SelectionError(f"Unable to pick files: {exc}") from exc

        if result.cancelled:
            logger.debug("File picker dismissed without a selection")
            return []

        records: list[AttachmentRecord] = []
        handles: dict[str, str] = {}
        for item in result.items:
            record = self._to_record(item)
            records.append(record)
            handles[record.id] = item.handle

        self.store.append(records, handles)
        logger.info("Queued %d file(s) for upload", len(records))
        return records

    @staticmethod
    def _to_record(item: PickedFile) -> AttachmentRecord:
        return AttachmentRecord(
            id=new_attachment_id(),
            file_name=item.name,
            size_bytes=max(item.size or 0, 0),
            status=UploadStatus.PENDING,
        )
