"""In-memory, observable collection of attachment records."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Mapping, Optional

from .errors import DuplicateIdError, NotFoundError
from .models import AttachmentRecord, StoreSnapshot, UploadStatus

logger = logging.getLogger(__name__)

Listener = Callable[[StoreSnapshot], None]


class AttachmentStore:
    """Ordered attachment records plus the batch-in-progress flag.

    All mutation goes through the methods below; listeners are called
    synchronously, in registration order, once each mutation has committed.
    """

    def __init__(self) -> None:
        self._records: list[AttachmentRecord] = []
        self._handles: dict[str, str] = {}
        self._in_progress = False
        self._listeners: list[Listener] = []

    # -- read side -------------------------------------------------------

    @property
    def records(self) -> tuple[AttachmentRecord, ...]:
        return tuple(self._records)

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[AttachmentRecord]:
        return iter(tuple(self._records))

    def __contains__(self, attachment_id: object) -> bool:
        return self._index_of(attachment_id) is not None

    def get(self, attachment_id: str) -> AttachmentRecord:
        index = self._index_of(attachment_id)
        if index is None:
            raise NotFoundError(attachment_id)
        return self._records[index]

    def handle_for(self, attachment_id: str) -> Optional[str]:
        return self._handles.get(attachment_id)

    def pending(self) -> list[AttachmentRecord]:
        return [record for record in self._records if record.status is UploadStatus.PENDING]

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(records=tuple(self._records), in_progress=self._in_progress)

    # -- observers -------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it again."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    # -- mutation --------------------------------------------------------

    def append(
        self,
        records: Iterable[AttachmentRecord],
        handles: Mapping[str, str] | None = None,
    ) -> None:
        """Add records at the end; all or nothing."""
        incoming = list(records)
        if not incoming:
            return
        seen = {record.id for record in self._records}
        for record in incoming:
            if record.id in seen:
                raise DuplicateIdError(record.id)
            seen.add(record.id)

        self._records.extend(incoming)
        for record in incoming:
            handle = (handles or {}).get(record.id)
            if handle is not None:
                self._handles[record.id] = handle
        logger.debug("Queued %d attachment(s)", len(incoming))
        self._notify()

    def update_status(
        self,
        attachment_id: str,
        status: UploadStatus,
        *,
        error_message: str | None = None,
        remote_path: str | None = None,
    ) -> Optional[AttachmentRecord]:
        """Swap the record for a copy in ``status``.

        Returns the new record, or ``None`` when the id is no longer held
        (a transfer may resolve after the user removed its record).
        """
        index = self._index_of(attachment_id)
        if index is None:
            logger.debug("Ignoring %s update for removed attachment %s", status.value, attachment_id)
            return None
        updated = self._records[index].with_status(
            status, error_message=error_message, remote_path=remote_path
        )
        self._records[index] = updated
        logger.debug("Attachment %s -> %s", attachment_id, status.value)
        self._notify()
        return updated

    def remove(self, attachment_id: str) -> None:
        index = self._index_of(attachment_id)
        if index is None:
            return
        del self._records[index]
        self._handles.pop(attachment_id, None)
        self._notify()

    def clear(self) -> None:
        self._records.clear()
        self._handles.clear()
        self._notify()

    def clear_terminal(self) -> None:
        """Drop finished records, keeping pending and uploading ones in order."""
        kept = [record for record in self._records if not record.status.is_terminal]
        kept_ids = {record.id for record in kept}
        self._handles = {key: value for key, value in self._handles.items() if key in kept_ids}
        self._records = kept
        self._notify()

    def set_in_progress(self, value: bool) -> None:
        if self._in_progress == value:
            return
        self._in_progress = value
        self._notify()

    # -- internals -------------------------------------------------------

    def _index_of(self, attachment_id: object) -> Optional[int]:
        for index, record in enumerate(self._records):
            if record.id == attachment_id:
                return index
        return None

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Attachment store listener %r failed", listener)
