"""Typed containers shared across the upload pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class UploadStatus(str, Enum):
    """Lifecycle of a single attachment."""

    PENDING = "pending"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (UploadStatus.SUCCESS, UploadStatus.ERROR)


@dataclass(frozen=True)
class AttachmentRecord:
    """User-facing state of one attachment.

    The local file reference lives in the store, keyed by ``id``; it is never
    part of the record itself.
    """

    id: str
    file_name: str
    size_bytes: int = 0
    status: UploadStatus = UploadStatus.PENDING
    error_message: Optional[str] = None
    remote_path: Optional[str] = None

    def __post_init__(self) -> None:
        if self.size_bytes < 0:
            raise ValueError(f"size_bytes must be non-negative, got {self.size_bytes}")
        if self.error_message is not None and self.status is not UploadStatus.ERROR:
            raise ValueError("error_message is only allowed on records in error status")
        if self.remote_path is not None and self.status is not UploadStatus.SUCCESS:
            raise ValueError("remote_path is only allowed on records in success status")

    def with_status(
        self,
        status: UploadStatus,
        *,
        error_message: str | None = None,
        remote_path: str | None = None,
    ) -> "AttachmentRecord":
        """Return a copy in ``status`` carrying only the field that status allows."""
        return replace(
            self,
            status=status,
            error_message=error_message if status is UploadStatus.ERROR else None,
            remote_path=remote_path if status is UploadStatus.SUCCESS else None,
        )


@dataclass(frozen=True)
class PickedFile:
    """One item returned by a file picker."""

    name: str
    handle: str
    size: Optional[int] = None


@dataclass(frozen=True)
class PickResult:
    """Outcome of a picker invocation."""

    cancelled: bool
    items: list[PickedFile] = field(default_factory=list)


@dataclass(frozen=True)
class StoreSnapshot:
    """What observers receive after every store mutation."""

    records: tuple[AttachmentRecord, ...]
    in_progress: bool


class UploadFileRequest(BaseModel):
    """Parameters of the ``uploadFile`` session call."""

    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(..., alias="fileName")
    content: str
    sub_path: Optional[str] = Field(None, alias="subPath")

    def to_params(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class UploadFileResponse(BaseModel):
    """Structured reply of the ``uploadFile`` session call."""

    model_config = ConfigDict(extra="ignore")

    success: bool
    path: Optional[str] = None
    size: Optional[float] = None
    error: Optional[str] = None
