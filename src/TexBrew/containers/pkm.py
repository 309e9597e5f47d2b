"""Write PKM containers for ETC1 data.

No source format routes here by default; enable it per format through
``container_overrides``.
"""

import logging
from dataclasses import dataclass
from typing import ClassVar, List

from ..config import ContainerFamily, TextureFormat
from ..core.binary import BinaryLayout
from ..core.errors import TextureContractError
from ..core.records import EncodedOutput, TextureResource

logger = logging.getLogger("texture_export.pkm")

PKM_MAGIC = b"PKM 10\x00\x00"

_LAYOUT = BinaryLayout(
    ">8sHHHH",
    ("magic", "texture_width", "texture_height", "width", "height"),
)

SUPPORTED_FORMATS = frozenset({TextureFormat.ETC_RGB4})
MAX_DIMENSION = 0xFFFF


def round_up_to_block(dim: int) -> int:
    """Round a dimension up to the next multiple of 4."""
    return ((dim - 1) | 3) + 1


@dataclass
class PKMHeader:
    """Field set of a 16-byte PKM 1.0 header."""

    family: ClassVar[ContainerFamily] = ContainerFamily.PKM
    layout: ClassVar[BinaryLayout] = _LAYOUT

    width: int
    height: int
    texture_width: int
    texture_height: int
    magic: bytes = PKM_MAGIC

    @classmethod
    def for_format(cls, fmt: TextureFormat, width: int,
                   height: int) -> "PKMHeader":
        if fmt not in SUPPORTED_FORMATS:
            raise TextureContractError(f"Invalid texture format for PKM: {fmt!r}")
        texture_width = round_up_to_block(width)
        texture_height = round_up_to_block(height)
        if texture_width > MAX_DIMENSION or texture_height > MAX_DIMENSION:
            raise TextureContractError(
                f"PKM block-aligned dimensions {texture_width}x{texture_height} "
                f"exceed {MAX_DIMENSION}"
            )
        return cls(
            width=width,
            height=height,
            texture_width=texture_width,
            texture_height=texture_height,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "PKMHeader":
        return cls(**cls.layout.unpack(data))

    def pack(self) -> bytes:
        return self.layout.pack(self)


def encode(resource: TextureResource, payload: bytes) -> List[EncodedOutput]:
    header = PKMHeader.for_format(resource.format, resource.width, resource.height)
    logger.debug(
        "PKM %s: %dx%d padded to %dx%d",
        resource.display_name, header.width, header.height,
        header.texture_width, header.texture_height,
    )
    return [EncodedOutput(
        container_bytes=header.pack() + payload,
        suggested_file_name=resource.display_name,
        file_extension=ContainerFamily.PKM.extension,
    )]
