"""Consumer-facing view over the attachment store and the user intents it forwards."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .collaborators import FilePicker, FileReader, TransferChannel
from .models import AttachmentRecord, UploadStatus
from .selector import Selector
from .sequencer import BatchSequencer
from .store import AttachmentStore
from .transfer import TransferEngine
from .utils import format_size

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusLabels:
    """Localized suffixes appended to the size column."""

    uploading: str
    uploaded: str
    failed: str


LABELS_BY_LOCALE: dict[str, StatusLabels] = {
    "en": StatusLabels(uploading="Uploading...", uploaded="Uploaded", failed="Upload failed"),
    "de": StatusLabels(
        uploading="Wird hochgeladen...", uploaded="Hochgeladen", failed="Hochladen fehlgeschlagen"
    ),
}


def labels_for(locale: str | None) -> StatusLabels:
    """Labels for ``locale`` (``de-AT`` matches ``de``), English otherwise."""
    if locale:
        key = locale.replace("_", "-").split("-", 1)[0].lower()
        if key in LABELS_BY_LOCALE:
            return LABELS_BY_LOCALE[key]
    return LABELS_BY_LOCALE["en"]


def status_line(record: AttachmentRecord, labels: StatusLabels | None = None) -> str:
    labels = labels or LABELS_BY_LOCALE["en"]
    size = format_size(record.size_bytes)
    if record.status is UploadStatus.UPLOADING:
        return f"{size} - {labels.uploading}"
    if record.status is UploadStatus.SUCCESS:
        return f"{size} - {labels.uploaded}"
    if record.status is UploadStatus.ERROR:
        return f"{size} - {record.error_message or labels.failed}"
    return size


_STATUS_ICONS = {
    UploadStatus.PENDING: "[ ]",
    UploadStatus.UPLOADING: "[~]",
    UploadStatus.SUCCESS: "[+]",
    UploadStatus.ERROR: "[!]",
}


def render_attachments(
    records: Iterable[AttachmentRecord],
    labels: StatusLabels | None = None,
    *,
    offer_retry: bool = False,
) -> list[str]:
    """One text row per record; uploading rows offer no removal."""
    rows: list[str] = []
    for record in records:
        actions: list[str] = []
        if record.status is UploadStatus.ERROR and offer_retry:
            actions.append("retry")
        if record.status is not UploadStatus.UPLOADING:
            actions.append("remove")
        row = f"{_STATUS_ICONS[record.status]} {record.file_name} ({status_line(record, labels)})"
        if actions:
            row += " [" + ", ".join(actions) + "]"
        rows.append(row)
    return rows


class AttachmentController:
    """Wire the pipeline together for one session and expose user intents."""

    def __init__(
        self,
        picker: FilePicker,
        reader: FileReader,
        channel: TransferChannel,
        session_id: str | None = None,
        *,
        store: AttachmentStore | None = None,
        default_sub_path: str | None = None,
    ) -> None:
        self.store = store or AttachmentStore()
        self.selector = Selector(self.store, picker)
        self.engine = TransferEngine(self.store, reader, channel, session_id)
        self.sequencer = BatchSequencer(self.store, self.engine)
        self.default_sub_path = default_sub_path

    @property
    def session_id(self) -> Optional[str]:
        return self.engine.session_id

    @property
    def files(self) -> tuple[AttachmentRecord, ...]:
        return self.store.records

    @property
    def is_uploading(self) -> bool:
        return self.store.in_progress

    def bind_session(self, session_id: str | None) -> None:
        """Point the pipeline at another session; attachments do not carry over."""
        if session_id == self.engine.session_id:
            return
        logger.info("Switching upload session %s -> %s", self.engine.session_id, session_id)
        self.store.clear()
        self.engine.session_id = session_id

    async def request_pick_and_queue(self) -> list[AttachmentRecord]:
        return await self.selector.pick_files()

    async def request_upload_all(self, sub_path: str | None = None) -> list[AttachmentRecord]:
        if self.store.in_progress:
            logger.warning("Upload already in progress; ignoring new batch request")
            return []
        return await self.sequencer.upload_pending(sub_path=sub_path or self.default_sub_path)

    async def request_retry(
        self, record: AttachmentRecord, sub_path: str | None = None
    ) -> Optional[AttachmentRecord]:
        return await self.engine.retry(record, sub_path or self.default_sub_path)

    def request_remove(self, attachment_id: str) -> bool:
        """Remove a record unless its upload is in flight; unknown ids are ignored."""
        if attachment_id in self.store:
            if self.store.get(attachment_id).status is UploadStatus.UPLOADING:
                logger.warning("Refusing to remove %s while it is uploading", attachment_id)
                return False
        self.store.remove(attachment_id)
        return True

    def clear_files(self) -> None:
        self.store.clear()

    def clear_completed(self) -> None:
        self.store.clear_terminal()
