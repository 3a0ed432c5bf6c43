"""Shared fakes for the upload pipeline tests."""
from __future__ import annotations

import asyncio
from typing import Any, Mapping

import pytest

from session_upload.models import PickedFile, PickResult
from session_upload.store import AttachmentStore


class FakePicker:
    def __init__(self, result: PickResult | None = None, error: Exception | None = None):
        self.result = result or PickResult(cancelled=True)
        self.error = error
        self.calls = 0

    async def pick(self) -> PickResult:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


class FakeReader:
    def __init__(self, contents: Mapping[str, bytes] | None = None):
        self.contents = dict(contents or {})
        self.reads: list[str] = []

    async def read(self, handle: str) -> bytes:
        self.reads.append(handle)
        await asyncio.sleep(0)
        if handle not in self.contents:
            raise FileNotFoundError(f"No such file: {handle}")
        return self.contents[handle]


class FakeChannel:
    """Answers calls from a per-file script and records start/end events."""

    def __init__(self, replies: Mapping[str, Any] | None = None, default: Any = None):
        self.replies = dict(replies or {})
        self.default = default if default is not None else {"success": True, "path": "/tmp/out"}
        self.calls: list[tuple[str, str, dict]] = []
        self.events: list[tuple[str, str]] = []

    async def call(self, session_id: str, method: str, params: Mapping[str, Any]):
        name = params["fileName"]
        self.calls.append((session_id, method, dict(params)))
        self.events.append(("start", name))
        await asyncio.sleep(0)
        reply = self.replies.get(name, self.default)
        self.events.append(("end", name))
        if isinstance(reply, Exception):
            raise reply
        return reply


def picked(*names: str, size: int | None = 10) -> PickResult:
    return PickResult(
        cancelled=False,
        items=[PickedFile(name=name, handle=f"/local/{name}", size=size) for name in names],
    )


@pytest.fixture
def store() -> AttachmentStore:
    return AttachmentStore()
