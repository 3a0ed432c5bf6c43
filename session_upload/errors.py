"""Exceptions raised by the upload pipeline."""

from __future__ import annotations


class UploadPipelineError(Exception):
    """Base class for pipeline errors."""


class SelectionError(UploadPipelineError):
    """The file picker failed; nothing was queued."""


class DuplicateIdError(UploadPipelineError):
    """An appended record reuses an id already held by the store."""

    def __init__(self, attachment_id: str) -> None:
        super().__init__(f"Attachment id already present: {attachment_id}")
        self.attachment_id = attachment_id


class NotFoundError(UploadPipelineError):
    """No record with the requested id is held by the store."""

    def __init__(self, attachment_id: str) -> None:
        super().__init__(f"Attachment not found: {attachment_id}")
        self.attachment_id = attachment_id


class InvalidTransitionError(UploadPipelineError):
    """A status change outside the upload state machine was requested."""
