"""Upload a single attachment and resolve its status."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from pydantic import ValidationError

from .collaborators import FileReader, TransferChannel
from .errors import InvalidTransitionError
from .models import AttachmentRecord, UploadFileRequest, UploadFileResponse, UploadStatus
from .store import AttachmentStore
from .utils import encode_content

logger = logging.getLogger(__name__)

UPLOAD_METHOD = "uploadFile"
DEFAULT_FAILURE_MESSAGE = "Upload failed"


@dataclass(frozen=True)
class ReadOk:
    content: bytes


@dataclass(frozen=True)
class ReadFailed:
    reason: str


@dataclass(frozen=True)
class TransferOk:
    response: UploadFileResponse


@dataclass(frozen=True)
class TransferFailed:
    reason: str


ReadResult = Union[ReadOk, ReadFailed]
TransferResult = Union[TransferOk, TransferFailed]


def _describe(exc: BaseException) -> str:
    return str(exc) or DEFAULT_FAILURE_MESSAGE


async def read_local_file(reader: FileReader, handle: str) -> ReadResult:
    """Read ``handle``; I/O failures come back as :class:`ReadFailed`."""
    try:
        return ReadOk(await reader.read(handle))
    except Exception as exc:
        logger.warning("Could not read %s: %s", handle, exc)
        return ReadFailed(_describe(exc))


async def send_upload(
    channel: TransferChannel, session_id: str, request: UploadFileRequest
) -> TransferResult:
    """Deliver ``request``; transport faults and malformed replies become :class:`TransferFailed`."""
    try:
        raw = await channel.call(session_id, UPLOAD_METHOD, request.to_params())
        return TransferOk(UploadFileResponse.model_validate(raw))
    except ValidationError as exc:
        logger.warning("Malformed %s response for %s: %s", UPLOAD_METHOD, request.file_name, exc)
        return TransferFailed(f"Malformed response from session: {exc.error_count()} error(s)")
    except Exception as exc:
        logger.warning("Transfer of %s failed: %s", request.file_name, exc)
        return TransferFailed(_describe(exc))


class TransferEngine:
    """Read, encode and send one attachment to the bound session."""

    def __init__(
        self,
        store: AttachmentStore,
        reader: FileReader,
        channel: TransferChannel,
        session_id: str | None = None,
    ) -> None:
        self.store = store
        self.reader = reader
        self.channel = channel
        self.session_id = session_id

    async def transfer_one(
        self, record: AttachmentRecord, sub_path: str | None = None
    ) -> Optional[AttachmentRecord]:
        """Upload ``record`` and return its resolved state.

        Never raises for per-file failures: they end up as ``error`` status.
        Returns ``None`` if the upload was skipped (no session or no local
        handle) or the record was removed while in flight.
        """
        session_id = self.session_id
        handle = self.store.handle_for(record.id)
        if not session_id or not handle:
            logger.debug(
                "Skipping %s: session=%r, has_handle=%s", record.file_name, session_id, bool(handle)
            )
            return None

        self.store.update_status(record.id, UploadStatus.UPLOADING)

        read = await read_local_file(self.reader, handle)
        if isinstance(read, ReadFailed):
            return self.store.update_status(record.id, UploadStatus.ERROR, error_message=read.reason)

        request = UploadFileRequest(
            file_name=record.file_name,
            content=encode_content(read.content),
            sub_path=sub_path,
        )
        sent = await send_upload(self.channel, session_id, request)
        if isinstance(sent, TransferFailed):
            return self.store.update_status(record.id, UploadStatus.ERROR, error_message=sent.reason)

        response = sent.response
        if response.success:
            logger.info(
                "Uploaded %s to %s (%s bytes)", record.file_name, response.path, response.size
            )
            return self.store.update_status(
                record.id, UploadStatus.SUCCESS, remote_path=response.path
            )

        logger.warning("Session rejected %s: %s", record.file_name, response.error)
        return self.store.update_status(
            record.id,
            UploadStatus.ERROR,
            error_message=response.error or DEFAULT_FAILURE_MESSAGE,
        )

    async def retry(
        self, record: AttachmentRecord, sub_path: str | None = None
    ) -> Optional[AttachmentRecord]:
        """Re-run a failed upload; only ``error`` records can be retried."""
        current = self.store.get(record.id) if record.id in self.store else record
        if current.status is not UploadStatus.ERROR:
            raise InvalidTransitionError(
                f"Cannot retry {current.file_name!r} in status {current.status.value}"
            )
        return await self.transfer_one(current, sub_path)
