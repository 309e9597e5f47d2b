"""Payload reading, atomic output writing, and Pillow-based probing."""

import io
import logging
import os
import threading
from typing import Optional, Tuple

from PIL import Image

logger = logging.getLogger("texture_export")

# Container extensions Pillow can open for verification.
_PILLOW_FORMATS = {"dds": "DDS", "tga": "TGA"}


def read_payload(path: str, max_bytes: int = 0) -> bytes:
    """Read a raw texture payload.

    Raises ValueError when the file exceeds ``max_bytes`` (0 = unlimited)
    and IOError when it cannot be read.
    """
    try:
        size = os.path.getsize(path)
    except OSError as e:
        raise IOError(f"Payload not found or unreadable: {path} ({e})") from e
    if max_bytes > 0 and size > max_bytes:
        logger.warning(
            "Payload %s exceeds max_payload_bytes: %d > %d", path, size, max_bytes
        )
        raise ValueError(
            f"Payload too large: {size:,} bytes (max {max_bytes:,}). "
            "Increase max_payload_bytes to export it."
        )
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        logger.error("Failed to read payload '%s': %s", path, e)
        raise IOError(f"Failed to read payload: {path} ({e})") from e


def write_output(data: bytes, path: str) -> None:
    """Write ``data`` to ``path`` atomically (temp file + ``os.replace``)."""
    parent_dir = os.path.dirname(path) or "."
    os.makedirs(parent_dir, exist_ok=True)
    ext = os.path.splitext(path)[1]
    tmp_path = f"{path}.tmp.{os.getpid()}.{threading.get_ident()}{ext}"
    try:
        with open(tmp_path, "wb") as f:
            f.write(data)
        os.replace(tmp_path, path)
        logger.debug("Saved: %s (%d bytes)", path, len(data))
    finally:
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError:
                pass


def probe_container(data: bytes, extension: str) -> Optional[Tuple[int, int]]:
    """Open an encoded container with Pillow and return its size.

    Returns None for containers Pillow cannot read (KTX, PKM). Raises
    IOError when Pillow rejects a DDS or TGA buffer.
    """
    pil_format = _PILLOW_FORMATS.get(extension.lower().lstrip("."))
    if pil_format is None:
        return None
    try:
        with Image.open(io.BytesIO(data), formats=[pil_format]) as img:
            return img.size
    except Exception as e:
        raise IOError(f"Pillow could not open {pil_format} output: {e}") from e
