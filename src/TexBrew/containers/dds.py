"""Write DirectDraw Surface (DDS) containers.

The header is the classic 128-byte layout (magic, 124-byte header block
with the 32-byte pixel-format block inside). Compressed payloads already
hold the full mip chain, so the payload is appended untouched.
"""

import logging
from dataclasses import dataclass
from typing import ClassVar, Dict, List, NamedTuple

from ..config import ContainerFamily, TextureFormat
from ..core.binary import BinaryLayout, fourcc
from ..core.errors import TextureContractError
from ..core.mips import mip_level_count
from ..core.records import EncodedOutput, TextureResource

logger = logging.getLogger("texture_export.dds")

DDS_MAGIC = b"DDS "
HEADER_SIZE = 124
PIXELFORMAT_SIZE = 32

# dwFlags
DDSD_CAPS = 0x1
DDSD_HEIGHT = 0x2
DDSD_WIDTH = 0x4
DDSD_PIXELFORMAT = 0x1000
DDSD_MIPMAPCOUNT = 0x20000
DDSD_LINEARSIZE = 0x80000
DDSD_TEXTURE = DDSD_CAPS | DDSD_HEIGHT | DDSD_WIDTH | DDSD_PIXELFORMAT

# dwCaps
DDSCAPS_COMPLEX = 0x8
DDSCAPS_TEXTURE = 0x1000
DDSCAPS_MIPMAP = 0x400000

# DDS_PIXELFORMAT dwFlags
DDPF_ALPHAPIXELS = 0x1
DDPF_ALPHA = 0x2
DDPF_FOURCC = 0x4
DDPF_RGB = 0x40
DDPF_RGBA = DDPF_RGB | DDPF_ALPHAPIXELS

NO_FOURCC = bytes(4)

_LAYOUT = BinaryLayout(
    "<4s7I44x2I4s5I5I",
    (
        "magic", "size", "flags", "height", "width",
        "pitch_or_linear_size", "depth", "mip_map_count",
        "pf_size", "pf_flags", "pf_fourcc", "pf_rgb_bit_count",
        "pf_r_mask", "pf_g_mask", "pf_b_mask", "pf_a_mask",
        "caps", "caps2", "caps3", "caps4", "reserved2",
    ),
)


class _PixelFormat(NamedTuple):
    flags: int
    bit_count: int = 0
    r_mask: int = 0
    g_mask: int = 0
    b_mask: int = 0
    a_mask: int = 0
    fourcc: bytes = NO_FOURCC


PIXEL_FORMATS: Dict[TextureFormat, _PixelFormat] = {
    TextureFormat.Alpha8: _PixelFormat(DDPF_ALPHA, 8, a_mask=0xFF),
    TextureFormat.RGB24: _PixelFormat(
        DDPF_RGB, 24, 0xFF0000, 0x00FF00, 0x0000FF),
    TextureFormat.RGBA32: _PixelFormat(
        DDPF_RGBA, 32, 0x000000FF, 0x0000FF00, 0x00FF0000, 0xFF000000),
    TextureFormat.BGRA32: _PixelFormat(
        DDPF_RGBA, 32, 0x00FF0000, 0x0000FF00, 0x000000FF, 0xFF000000),
    TextureFormat.ARGB32: _PixelFormat(
        DDPF_RGBA, 32, 0x0000FF00, 0x00FF0000, 0xFF000000, 0x000000FF),
    TextureFormat.ARGB4444: _PixelFormat(
        DDPF_RGBA, 16, 0x0F00, 0x00F0, 0x000F, 0xF000),
    TextureFormat.RGB565: _PixelFormat(
        DDPF_RGB, 16, 0xF800, 0x07E0, 0x001F),
    TextureFormat.DXT1: _PixelFormat(DDPF_FOURCC, fourcc=fourcc("DXT1")),
    TextureFormat.DXT5: _PixelFormat(DDPF_FOURCC, fourcc=fourcc("DXT5")),
}

SUPPORTED_FORMATS = frozenset(PIXEL_FORMATS)


@dataclass
class DDSHeader:
    """Field set of a legacy DDS header."""

    family: ClassVar[ContainerFamily] = ContainerFamily.DDS
    layout: ClassVar[BinaryLayout] = _LAYOUT

    width: int
    height: int
    flags: int = DDSD_TEXTURE
    pitch_or_linear_size: int = 0
    depth: int = 0
    mip_map_count: int = 0
    pf_flags: int = 0
    pf_fourcc: bytes = NO_FOURCC
    pf_rgb_bit_count: int = 0
    pf_r_mask: int = 0
    pf_g_mask: int = 0
    pf_b_mask: int = 0
    pf_a_mask: int = 0
    caps: int = DDSCAPS_TEXTURE
    caps2: int = 0
    caps3: int = 0
    caps4: int = 0
    reserved2: int = 0
    magic: bytes = DDS_MAGIC
    size: int = HEADER_SIZE
    pf_size: int = PIXELFORMAT_SIZE

    @classmethod
    def for_format(cls, fmt: TextureFormat, width: int, height: int,
                   mipmap: bool) -> "DDSHeader":
        """Build the header for ``fmt``; other formats break the contract."""
        pf = PIXEL_FORMATS.get(fmt)
        if pf is None:
            raise TextureContractError(f"Invalid texture format for DDS: {fmt!r}")

        header = cls(
            width=width,
            height=height,
            pf_flags=pf.flags,
            pf_fourcc=pf.fourcc,
            pf_rgb_bit_count=pf.bit_count,
            pf_r_mask=pf.r_mask,
            pf_g_mask=pf.g_mask,
            pf_b_mask=pf.b_mask,
            pf_a_mask=pf.a_mask,
        )

        if mipmap:
            header.flags |= DDSD_MIPMAPCOUNT
            header.caps |= DDSCAPS_COMPLEX | DDSCAPS_MIPMAP
            header.mip_map_count = mip_level_count(width, height)

        header.flags |= DDSD_LINEARSIZE
        if pf.fourcc != NO_FOURCC:
            header.pitch_or_linear_size = width * height
            # DXT1 stores 4 bits per pixel, DXT5 stores 8
            if fmt == TextureFormat.DXT1:
                header.pitch_or_linear_size //= 2
        else:
            header.pitch_or_linear_size = width * height * pf.bit_count // 8
        return header

    @classmethod
    def unpack(cls, data: bytes) -> "DDSHeader":
        return cls(**cls.layout.unpack(data))

    def pack(self) -> bytes:
        return self.layout.pack(self)


def encode(resource: TextureResource, payload: bytes) -> List[EncodedOutput]:
    """Return one DDS file holding the header and the untouched payload.

    Uncompressed payloads must hold a whole number of pixels.
    """
    header = DDSHeader.for_format(
        resource.format, resource.width, resource.height, resource.mipmap
    )
    stride = header.pf_rgb_bit_count // 8
    if header.pf_fourcc == NO_FOURCC and len(payload) % stride:
        raise TextureContractError(
            f"DDS {resource.format.name} payload of {len(payload)} bytes is not "
            f"a whole number of {stride}-byte pixels"
        )
    logger.debug(
        "DDS %s: %dx%d %s, mips=%d, linear size=%d",
        resource.display_name, resource.width, resource.height,
        resource.format.name, header.mip_map_count,
        header.pitch_or_linear_size,
    )
    return [EncodedOutput(
        container_bytes=header.pack() + payload,
        suggested_file_name=resource.display_name,
        file_extension=ContainerFamily.DDS.extension,
    )]
