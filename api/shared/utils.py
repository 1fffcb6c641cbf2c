"""Common utility functions for stored files."""
import re
import time
from typing import Optional

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9.-]")

KIB = 1024
MIB = 1024 * 1024


def sanitize_filename(filename: str) -> str:
    """Replace every character outside ``[A-Za-z0-9.-]`` with an underscore."""
    return _UNSAFE_FILENAME_CHARS.sub("_", filename)


def format_bytes(size: int) -> str:
    """Format bytes as ``B``, ``KB`` or ``MB``; KB and MB keep two decimals."""
    if size < KIB:
        return f"{size} B"
    if size < MIB:
        return f"{size / KIB:.2f} KB"
    return f"{size / MIB:.2f} MB"


def generate_storage_path(
    filename: str, prefix: str, timestamp_ms: Optional[int] = None
) -> str:
    """Generate a timestamped storage key ``<prefix>/<ms>-<sanitized name>``."""
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    return f"{prefix}/{timestamp_ms}-{sanitize_filename(filename)}"
