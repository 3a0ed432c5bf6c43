"""Interfaces of the picker, reader and transfer channel plus local implementations."""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence
from urllib.parse import unquote_to_bytes, urlparse
from urllib.request import url2pathname

from .models import PickedFile, PickResult

logger = logging.getLogger(__name__)


class FilePicker(Protocol):
    async def pick(self) -> PickResult: ...


class FileReader(Protocol):
    async def read(self, handle: str) -> bytes: ...


class TransferChannel(Protocol):
    async def call(
        self, session_id: str, method: str, params: Mapping[str, Any]
    ) -> Mapping[str, Any]: ...


class PathListPicker:
    """Picker over a fixed list of paths, e.g. command line arguments.

    An empty list behaves like a dismissed dialog.
    """

    def __init__(self, paths: Sequence[str | Path]) -> None:
        self.paths = [Path(path) for path in paths]

    async def pick(self) -> PickResult:
        if not self.paths:
            return PickResult(cancelled=True)
        items = await asyncio.to_thread(self._describe_all)
        logger.debug("Picked %d file(s) from the command line", len(items))
        return PickResult(cancelled=False, items=items)

    def _describe_all(self) -> list[PickedFile]:
        items: list[PickedFile] = []
        for path in self.paths:
            resolved = path.expanduser().resolve()
            # stat() raises FileNotFoundError/PermissionError for the caller
            stat = resolved.stat()
            if not resolved.is_file():
                raise IsADirectoryError(f"Not a file: {path}")
            items.append(PickedFile(name=resolved.name, handle=str(resolved), size=stat.st_size))
        return items


class LocalFileReader:
    """Read a handle into bytes.

    Handles may be plain paths, ``file://`` URIs or base64 ``data:`` URIs.
    """

    async def read(self, handle: str) -> bytes:
        if handle.startswith("data:"):
            return self._decode_data_uri(handle)
        return await asyncio.to_thread(self._path_for(handle).read_bytes)

    @staticmethod
    def _path_for(handle: str) -> Path:
        parsed = urlparse(handle)
        if parsed.scheme == "file":
            return Path(url2pathname(parsed.path))
        return Path(handle)

    @staticmethod
    def _decode_data_uri(handle: str) -> bytes:
        header, sep, payload = handle.partition(",")
        if not sep:
            raise ValueError("Malformed data URI: missing ',' separator")
        if not header.endswith(";base64"):
            return unquote_to_bytes(payload)
        try:
            return base64.b64decode(payload, validate=True)
        except binascii.Error as exc:
            raise ValueError(f"Malformed data URI payload: {exc}") from exc
