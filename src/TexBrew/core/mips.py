"""Mip chain geometry."""

from typing import List

from .records import MipLevel


def mip_level_count(width: int, height: int) -> int:
    """Return the number of levels down to and including 1x1.

    The larger dimension governs: 300x1 halves 300 -> 150 -> ... -> 1 and
    yields 9 levels.
    """
    count = 1
    dim = max(width, height)
    while dim > 1:
        dim //= 2
        count += 1
    return count


def plan_mips(width: int, height: int, mipmap: bool,
              bits_per_pixel: int = 0) -> List[MipLevel]:
    """Return level geometry for a texture.

    With ``mipmap`` disabled the plan holds only the full-resolution level.
    ``byte_length`` is filled in for uncompressed formats when
    ``bits_per_pixel`` is given, else left at 0.
    """
    count = mip_level_count(width, height) if mipmap else 1
    levels = []
    w, h = width, height
    for index in range(count):
        levels.append(MipLevel(
            index=index,
            width=w,
            height=h,
            byte_length=w * h * bits_per_pixel // 8,
        ))
        w = max(1, w // 2)
        h = max(1, h // 2)
    return levels
