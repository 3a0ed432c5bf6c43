"""Entry point that uploads local files into a remote session's working directory."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
import sys

from dotenv import load_dotenv

# Ensure project root is on sys.path when running as a script
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from session_upload.collaborators import LocalFileReader, PathListPicker
from session_upload.config import Settings
from session_upload.errors import SelectionError
from session_upload.models import UploadStatus
from session_upload.presentation import AttachmentController, labels_for, render_attachments
from session_upload.session_rpc_client import HttpTransferChannel
from session_upload.utils import normalize_sub_path

load_dotenv()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Upload files to a session's working directory.")
    parser.add_argument("paths", nargs="+", type=Path, help="Files to upload")
    parser.add_argument("--session", help="Target session id (defaults to UPLOAD_SESSION_ID)")
    parser.add_argument(
        "--sub-path",
        help="Directory inside the session's working directory (defaults to UPLOAD_SUB_PATH)",
    )
    parser.add_argument("--dry-run", action="store_true", help="List files without uploading them")
    return parser


def resolve_session(args: argparse.Namespace, settings: Settings) -> str:
    session_id = args.session or settings.upload_session_id
    if not session_id:
        raise SystemExit("No session given; pass --session or set UPLOAD_SESSION_ID.")
    return session_id


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


async def run(args: argparse.Namespace, settings: Settings) -> dict[str, int]:
    labels = labels_for(settings.upload_locale)
    session_id = resolve_session(args, settings)
    channel = HttpTransferChannel(settings)
    controller = AttachmentController(
        picker=PathListPicker(args.paths),
        reader=LocalFileReader(),
        channel=channel,
        session_id=session_id,
        default_sub_path=normalize_sub_path(args.sub_path) or settings.upload_sub_path,
    )

    try:
        queued = await controller.request_pick_and_queue()
    except SelectionError as exc:
        channel.close()
        raise SystemExit(str(exc)) from exc

    stats = {"queued": len(queued), "uploaded": 0, "failed": 0}
    try:
        if args.dry_run:
            for row in render_attachments(controller.files, labels):
                logging.info("[DRY-RUN] Would upload %s", row)
            return stats

        for record in await controller.request_upload_all():
            if record.status is UploadStatus.SUCCESS:
                stats["uploaded"] += 1
            else:
                stats["failed"] += 1
    finally:
        channel.close()

    for row in render_attachments(controller.files, labels):
        print(row)
    return stats


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    settings = Settings()
    configure_logging(settings.log_level)

    stats = asyncio.run(run(args, settings))

    logging.info(
        "Run complete: queued=%s uploaded=%s failed=%s",
        stats["queued"],
        stats["uploaded"],
        stats["failed"],
    )
    if stats["failed"]:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
