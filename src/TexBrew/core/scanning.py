"""Texture manifest I/O.

A manifest is a CSV file with one row per texture:
``name,width,height,texture_format,mipmap,payload,path_id``.
``texture_format`` is an upstream ordinal or a format name; ``payload`` is
a path to the raw pixel bytes, relative to the payload directory.
"""

import csv
import logging
import os
import threading
from dataclasses import dataclass
from typing import List

from ..config import TextureFormat

logger = logging.getLogger("texture_export")

MANIFEST_FIELDS = (
    "name", "width", "height", "texture_format", "mipmap", "payload", "path_id",
)

_REQUIRED_COLUMNS = {"width", "height", "texture_format", "payload"}
_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off", ""}


@dataclass
class TextureEntry:
    """Single texture row in the manifest."""

    name: str
    width: int
    height: int
    texture_format: int
    mipmap: bool
    payload: str
    path_id: int = 0

    def to_row(self) -> dict:
        fmt = TextureFormat.from_ordinal(self.texture_format)
        return {
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "texture_format": fmt.name if fmt is not None else self.texture_format,
            "mipmap": "true" if self.mipmap else "false",
            "payload": self.payload,
            "path_id": self.path_id,
        }


def _parse_bool(value: str, where: str) -> bool:
    lowered = str(value).strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"{where}: expected a boolean, got {value!r}")


def _parse_format(value: str, where: str) -> int:
    """Return the ordinal for a format name or number.

    Unknown numbers pass through so the encoder can report them.
    """
    raw = str(value).strip()
    if raw.lstrip("-").isdigit():
        return int(raw)
    fmt = TextureFormat.parse(raw)
    if fmt is None:
        raise ValueError(f"{where}: unknown texture format name {value!r}")
    return int(fmt)


def _parse_row(row: dict, line: int) -> TextureEntry:
    where = f"manifest line {line}"
    try:
        return TextureEntry(
            name=(row.get("name") or "").strip(),
            width=int(row["width"]),
            height=int(row["height"]),
            texture_format=_parse_format(row["texture_format"], where),
            mipmap=_parse_bool(row.get("mipmap", ""), where),
            payload=(row.get("payload") or "").strip(),
            path_id=int(row.get("path_id") or 0),
        )
    except KeyError as exc:
        raise ValueError(f"{where}: missing column {exc}") from exc
    except (TypeError, ValueError) as exc:
        if str(exc).startswith(where):
            raise
        raise ValueError(f"{where}: {exc}") from exc


def load_manifest(path: str) -> List[TextureEntry]:
    """Load texture entries from a manifest CSV. Raises ValueError on bad rows."""
    entries = []
    try:
        with open(path, "r", newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            missing = _REQUIRED_COLUMNS - set(reader.fieldnames or ())
            if missing:
                raise ValueError(
                    f"Manifest '{path}' is missing required columns: "
                    f"{', '.join(sorted(missing))}"
                )
            for line, row in enumerate(reader, start=2):
                entries.append(_parse_row(row, line))
    except OSError as e:
        raise OSError(f"Failed to read manifest '{path}': {e}") from e
    except csv.Error as e:
        raise ValueError(f"Malformed CSV manifest '{path}': {e}") from e
    logger.info("Loaded %d texture entries from %s", len(entries), path)
    return entries


def save_manifest(entries: List[TextureEntry], path: str):
    """Write texture entries to a manifest CSV."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    tmp_path = f"{path}.tmp.{os.getpid()}.{threading.get_ident()}"
    try:
        with open(tmp_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=MANIFEST_FIELDS)
            writer.writeheader()
            for entry in entries:
                writer.writerow(entry.to_row())
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError:
                pass
    logger.info("Manifest saved: %s (%d entries)", path, len(entries))
