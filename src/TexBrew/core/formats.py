"""Map source texture formats to output container families."""

from typing import Dict, FrozenSet, Optional

from ..config import ContainerFamily, TextureFormat

# Fixed routing table. PKM is reserved: no format routes to it by default.
FAMILY_MEMBERS: Dict[ContainerFamily, FrozenSet[TextureFormat]] = {
    ContainerFamily.TGA: frozenset({
        TextureFormat.Alpha8,
        TextureFormat.RGB24,
        TextureFormat.RGBA32,
        TextureFormat.BGRA32,
        TextureFormat.ARGB32,
    }),
    ContainerFamily.KTX: frozenset({
        TextureFormat.PVRTC_RGB2,
        TextureFormat.PVRTC_RGBA2,
        TextureFormat.PVRTC_RGB4,
        TextureFormat.PVRTC_RGBA4,
        TextureFormat.ATC_RGB4,
        TextureFormat.ATC_RGBA8,
        TextureFormat.ETC_RGB4,
    }),
    ContainerFamily.DDS: frozenset({
        TextureFormat.ARGB4444,
        TextureFormat.RGB565,
        TextureFormat.DXT1,
        TextureFormat.DXT5,
    }),
    ContainerFamily.PKM: frozenset(),
}

_ROUTES: Dict[TextureFormat, ContainerFamily] = {
    fmt: family
    for family, members in FAMILY_MEMBERS.items()
    for fmt in members
}


def select_container(fmt) -> Optional[ContainerFamily]:
    """Return the container family for ``fmt``, or None if unsupported.

    Accepts enum members or raw ordinals; unknown ordinals are unsupported.
    """
    if not isinstance(fmt, TextureFormat):
        fmt = TextureFormat.from_ordinal(fmt)
        if fmt is None:
            return None
    return _ROUTES.get(fmt)
