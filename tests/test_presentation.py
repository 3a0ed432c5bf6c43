from __future__ import annotations

import pytest

from conftest import FakeChannel, FakePicker, FakeReader, picked
from session_upload.models import AttachmentRecord, UploadStatus
from session_upload.presentation import (
    AttachmentController,
    labels_for,
    render_attachments,
    status_line,
)


def _controller(channel=None, names=("a.txt", "b.txt"), session_id="sess-1", **kwargs):
    reader = FakeReader({f"/local/{name}": b"payload" for name in names})
    return AttachmentController(
        FakePicker(picked(*names, size=1536)),
        reader,
        channel or FakeChannel(),
        session_id,
        **kwargs,
    )


def test_status_line_per_status():
    base = AttachmentRecord(id="a", file_name="a.txt", size_bytes=1536)

    assert status_line(base) == "1.5 KB"
    assert status_line(base.with_status(UploadStatus.UPLOADING)) == "1.5 KB - Uploading..."
    assert status_line(base.with_status(UploadStatus.SUCCESS, remote_path="/a")) == "1.5 KB - Uploaded"
    assert (
        status_line(base.with_status(UploadStatus.ERROR, error_message="disk full"))
        == "1.5 KB - disk full"
    )
    assert status_line(base.with_status(UploadStatus.ERROR)) == "1.5 KB - Upload failed"


def test_status_line_uses_localized_labels():
    record = AttachmentRecord(id="a", file_name="a.txt", status=UploadStatus.ERROR)

    assert status_line(record, labels_for("de_DE")) == "0 B - Hochladen fehlgeschlagen"
    assert labels_for("fr") == labels_for("en")
    assert labels_for(None) == labels_for("en")


def test_render_offers_actions_by_status():
    records = [
        AttachmentRecord(id="p", file_name="p.txt"),
        AttachmentRecord(id="u", file_name="u.txt", status=UploadStatus.UPLOADING),
        AttachmentRecord(id="e", file_name="e.txt", status=UploadStatus.ERROR, error_message="nope"),
    ]

    rows = render_attachments(records, offer_retry=True)

    assert rows == [
        "[ ] p.txt (0 B) [remove]",
        "[~] u.txt (0 B - Uploading...)",
        "[!] e.txt (0 B - nope) [retry, remove]",
    ]
    assert render_attachments(records[2:])[0].endswith("[remove]")
    assert render_attachments([]) == []


@pytest.mark.asyncio
async def test_pick_then_upload_all():
    controller = _controller(default_sub_path="drop")

    await controller.request_pick_and_queue()
    resolved = await controller.request_upload_all()

    assert [record.status for record in resolved] == [UploadStatus.SUCCESS] * 2
    assert controller.is_uploading is False
    assert controller.engine.channel.calls[0][2]["subPath"] == "drop"


@pytest.mark.asyncio
async def test_upload_all_refuses_while_a_batch_runs():
    channel = FakeChannel()
    controller = _controller(channel)
    await controller.request_pick_and_queue()
    controller.store.set_in_progress(True)

    assert await controller.request_upload_all() == []
    assert channel.calls == []


@pytest.mark.asyncio
async def test_retry_after_failure():
    channel = FakeChannel(replies={"a.txt": {"success": False, "error": "busy"}})
    controller = _controller(channel, names=("a.txt",))
    await controller.request_pick_and_queue()
    (failed,) = await controller.request_upload_all()
    assert failed.error_message == "busy"

    channel.replies.clear()
    retried = await controller.request_retry(failed)

    assert retried.status is UploadStatus.SUCCESS
    assert len(channel.calls) == 2


@pytest.mark.asyncio
async def test_remove_refuses_uploading_records_and_ignores_unknown_ids():
    controller = _controller(names=("a.txt",))
    (record,) = await controller.request_pick_and_queue()
    controller.store.update_status(record.id, UploadStatus.UPLOADING)

    assert controller.request_remove(record.id) is False
    assert controller.request_remove("unknown") is True
    assert len(controller.files) == 1

    controller.store.update_status(record.id, UploadStatus.ERROR, error_message="x")
    assert controller.request_remove(record.id) is True
    assert controller.files == ()


@pytest.mark.asyncio
async def test_clear_completed_and_clear_files():
    channel = FakeChannel(replies={"b.txt": {"success": False}})
    controller = _controller(channel, names=("a.txt", "b.txt"))
    await controller.request_pick_and_queue()
    await controller.request_upload_all()
    await controller.selector.pick_files()

    controller.clear_completed()
    assert [record.status for record in controller.files] == [UploadStatus.PENDING] * 2

    controller.clear_files()
    assert controller.files == ()


@pytest.mark.asyncio
async def test_switching_sessions_clears_attachments():
    controller = _controller()
    await controller.request_pick_and_queue()

    controller.bind_session("sess-1")
    assert len(controller.files) == 2

    controller.bind_session("sess-2")
    assert controller.files == ()
    assert controller.session_id == "sess-2"
