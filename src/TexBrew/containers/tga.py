"""Write uncompressed Truevision TGA files, one per mip level."""

import logging
from dataclasses import dataclass
from typing import ClassVar, Dict, List, NamedTuple

from ..config import ContainerFamily, TextureFormat
from ..core.binary import BinaryLayout
from ..core.channels import convert_channels
from ..core.errors import TextureContractError
from ..core.mips import plan_mips
from ..core.records import EncodedOutput, TextureResource

logger = logging.getLogger("texture_export.tga")

HEADER_SIZE = 18
IMAGE_TYPE_TRUECOLOR = 2
IMAGE_TYPE_GRAYSCALE = 3
MIP_SUFFIX = "_mip_"
MAX_DIMENSION = 0xFFFF

_LAYOUT = BinaryLayout(
    "<BBBHHBHHHHBB",
    (
        "id_length", "color_map_type", "image_type",
        "color_map_origin", "color_map_length", "color_map_depth",
        "x_origin", "y_origin", "image_width", "image_height",
        "pixel_depth", "image_descriptor",
    ),
)


class _TGAFormat(NamedTuple):
    image_type: int
    pixel_depth: int


TGA_FORMATS: Dict[TextureFormat, _TGAFormat] = {
    TextureFormat.Alpha8: _TGAFormat(IMAGE_TYPE_GRAYSCALE, 8),
    TextureFormat.RGB24: _TGAFormat(IMAGE_TYPE_TRUECOLOR, 24),
    TextureFormat.RGBA32: _TGAFormat(IMAGE_TYPE_TRUECOLOR, 32),
    TextureFormat.ARGB32: _TGAFormat(IMAGE_TYPE_TRUECOLOR, 32),
    TextureFormat.BGRA32: _TGAFormat(IMAGE_TYPE_TRUECOLOR, 32),
}

SUPPORTED_FORMATS = frozenset(TGA_FORMATS)


@dataclass
class TGAHeader:
    """Field set of an 18-byte TGA header without image id or color map."""

    family: ClassVar[ContainerFamily] = ContainerFamily.TGA
    layout: ClassVar[BinaryLayout] = _LAYOUT

    image_width: int
    image_height: int
    image_type: int
    pixel_depth: int
    id_length: int = 0
    color_map_type: int = 0
    color_map_origin: int = 0
    color_map_length: int = 0
    color_map_depth: int = 0
    x_origin: int = 0
    y_origin: int = 0
    image_descriptor: int = 0

    @classmethod
    def for_format(cls, fmt: TextureFormat, width: int,
                   height: int) -> "TGAHeader":
        """Build the header for ``fmt``; other formats break the contract."""
        tga = TGA_FORMATS.get(fmt)
        if tga is None:
            raise TextureContractError(f"Invalid texture format for TGA: {fmt!r}")
        if width > MAX_DIMENSION or height > MAX_DIMENSION:
            raise TextureContractError(
                f"TGA dimensions {width}x{height} exceed {MAX_DIMENSION}"
            )
        return cls(
            image_width=width,
            image_height=height,
            image_type=tga.image_type,
            pixel_depth=tga.pixel_depth,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "TGAHeader":
        return cls(**cls.layout.unpack(data))

    def pack(self) -> bytes:
        return self.layout.pack(self)


def encode(resource: TextureResource, payload: bytes) -> List[EncodedOutput]:
    """Return one TGA file per planned mip level.

    Slice boundaries come from the mip plan. The payload must be consumed
    exactly; a short payload or a trailing remainder breaks the contract.
    """
    fmt = resource.format
    base = TGAHeader.for_format(fmt, resource.width, resource.height)
    pixels = convert_channels(payload, fmt)

    levels = plan_mips(resource.width, resource.height, resource.mipmap,
                       base.pixel_depth)
    expected = sum(level.byte_length for level in levels)
    if len(pixels) < expected:
        raise TextureContractError(
            f"TGA payload holds {len(pixels)} bytes but {len(levels)} "
            f"level(s) need {expected}"
        )
    if len(pixels) != expected:
        raise TextureContractError(
            f"TGA payload has {len(pixels) - expected} bytes left after "
            f"{len(levels)} level(s)"
        )

    outputs = []
    offset = 0
    for level in levels:
        header = TGAHeader.for_format(fmt, level.width, level.height)
        end = offset + level.byte_length
        name = resource.display_name
        if len(levels) > 1:
            name = f"{name}{MIP_SUFFIX}{level.index}"
        outputs.append(EncodedOutput(
            container_bytes=header.pack() + pixels[offset:end],
            suggested_file_name=name,
            file_extension=ContainerFamily.TGA.extension,
        ))
        offset = end

    logger.debug(
        "TGA %s: %d level(s) from %d bytes of %s",
        resource.display_name, len(levels), len(pixels), fmt.name,
    )
    return outputs
