"""Reorder 32-bit pixel channels into the order TGA writers expect."""

import logging

import numpy as np

from ..config import TextureFormat
from .errors import TextureContractError

logger = logging.getLogger("texture_export.channels")

# Formats whose channel order differs from what the TGA writer emits.
CONVERTED_FORMATS = frozenset({TextureFormat.ARGB32, TextureFormat.BGRA32})

_GREEN_ALPHA = np.uint32(0x00FF00FF)
_HIGH_BYTE = np.uint32(0xFF000000)
_LANE_1 = np.uint32(0x0000FF00)
_SHIFT_8 = np.uint32(8)
_SHIFT_16 = np.uint32(16)
_SHIFT_24 = np.uint32(24)


def needs_conversion(fmt: TextureFormat) -> bool:
    return fmt in CONVERTED_FORMATS


def convert_channels(payload: bytes, fmt: TextureFormat) -> bytes:
    """Return a reordered copy of ``payload``; the input is never modified.

    Each pixel is read as a big-endian 32-bit word.

    ARGB32 rotates the word left by 8 bits (``A R G B`` -> ``R G B A``).
    BGRA32 swaps the outer lanes and keeps green and alpha in place
    (``B G R A`` -> ``R G B A``). Other formats are returned unchanged.
    """
    if fmt not in CONVERTED_FORMATS:
        return bytes(payload)
    if len(payload) % 4:
        raise TextureContractError(
            f"{fmt.name} payload of {len(payload)} bytes is not a whole "
            f"number of 4-byte pixels"
        )

    words = np.frombuffer(payload, dtype=">u4").astype(np.uint32)
    if fmt == TextureFormat.ARGB32:
        out = (words << _SHIFT_8) | (words >> _SHIFT_24)
    else:
        out = words & _GREEN_ALPHA
        out |= (words & _HIGH_BYTE) >> _SHIFT_16
        out |= (words & _LANE_1) << _SHIFT_16
    logger.debug("Reordered %d %s pixels.", words.size, fmt.name)
    return out.astype(">u4").tobytes()
