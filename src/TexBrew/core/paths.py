"""Output path helpers."""

import os
from pathlib import Path, PurePosixPath


def _normalize_rel_payload_path(rel_path: str) -> Path:
    """Normalize a relative payload path to a canonical, traversal-free form."""
    raw = str(rel_path).replace("\\", "/")
    p = PurePosixPath(raw)
    if p.is_absolute():
        raise ValueError(f"Payload path must be relative, got absolute path: {rel_path}")

    parts = []
    for part in p.parts:
        if part in ("", "."):
            continue
        if part == "..":
            if parts:
                parts.pop()
            else:
                raise ValueError(f"Payload path escapes root via '..': {rel_path}")
            continue
        parts.append(part)

    if not parts:
        raise ValueError(f"Payload path is empty after normalization: {rel_path}")
    return Path(*parts)


def resolve_payload_path(rel_path: str, payload_dir: str) -> str:
    """Return the absolute-ish payload path under ``payload_dir``."""
    return os.path.join(payload_dir, str(_normalize_rel_payload_path(rel_path)))


def safe_file_stem(name: str) -> str:
    """Make a texture name usable as a file stem."""
    safe = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in name)
    safe = safe.strip(". ")
    return safe or "texture"


def get_output_path(output_dir: str, stem: str, ext: str) -> str:
    """Return the output path for a container file."""
    return os.path.join(output_dir, f"{safe_file_stem(stem)}.{ext.lstrip('.')}")
