"""Utility helpers shared across modules."""

from __future__ import annotations

import base64
import math
from uuid import uuid4

SIZE_UNITS = ("B", "KB", "MB", "GB")
_UNIT_STEP = 1024


def format_size(num_bytes: int) -> str:
    """Render a byte count as ``"<magnitude> <unit>"`` with one decimal."""
    if num_bytes < 0:
        raise ValueError(f"Byte count must be non-negative, got {num_bytes}")
    if num_bytes == 0:
        return "0 B"
    index = min(int(math.floor(math.log(num_bytes, _UNIT_STEP))), len(SIZE_UNITS) - 1)
    # log() can land a hair off an exact power of 1024
    if index + 1 < len(SIZE_UNITS) and num_bytes >= _UNIT_STEP ** (index + 1):
        index += 1
    elif index > 0 and num_bytes < _UNIT_STEP**index:
        index -= 1
    magnitude = num_bytes / _UNIT_STEP**index
    return f"{magnitude:.1f} {SIZE_UNITS[index]}"


def new_attachment_id() -> str:
    """Opaque identifier for a freshly picked attachment."""
    return uuid4().hex


def encode_content(payload: bytes) -> str:
    """Standard base64 without line wrapping, padding kept."""
    return base64.b64encode(payload).decode("ascii")


def normalize_sub_path(value: str | None) -> str | None:
    """Trim whitespace and surrounding slashes; blank means no sub path."""
    if value is None:
        return None
    stripped = value.strip().strip("/")
    return stripped or None
