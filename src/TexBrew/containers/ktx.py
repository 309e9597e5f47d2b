"""Write KTX 1.1 containers for mobile compressed formats."""

import logging
import struct
from dataclasses import dataclass
from typing import ClassVar, Dict, List, NamedTuple

from ..config import ContainerFamily, TextureFormat
from ..core.binary import BinaryLayout
from ..core.errors import TextureContractError
from ..core.mips import mip_level_count
from ..core.records import EncodedOutput, TextureResource

logger = logging.getLogger("texture_export.ktx")

KTX_IDENTIFIER = b"\xabKTX 11\xbb\r\n\x1a\n"
KTX_ENDIANNESS = 0x04030201

GL_RGB = 0x1907
GL_RGBA = 0x1908

GL_COMPRESSED_RGB_PVRTC_4BPPV1_IMG = 0x8C00
GL_COMPRESSED_RGB_PVRTC_2BPPV1_IMG = 0x8C01
GL_COMPRESSED_RGBA_PVRTC_4BPPV1_IMG = 0x8C02
GL_COMPRESSED_RGBA_PVRTC_2BPPV1_IMG = 0x8C03
GL_ATC_RGB_AMD = 0x8C92
GL_ATC_RGBA_EXPLICIT_ALPHA_AMD = 0x8C93
GL_ETC1_RGB8_OES = 0x8D64

_FIELDS = (
    "identifier", "endianness", "gl_type", "gl_type_size", "gl_format",
    "gl_internal_format", "gl_base_internal_format",
    "pixel_width", "pixel_height", "pixel_depth",
    "number_of_array_elements", "number_of_faces",
    "number_of_mipmap_levels", "bytes_of_key_value_data",
)
_LAYOUT_BE = BinaryLayout(">12s13I", _FIELDS)
_LAYOUT_LE = BinaryLayout("<12s13I", _FIELDS)


class _GLFormat(NamedTuple):
    internal_format: int
    base_internal_format: int = GL_RGB


GL_FORMATS: Dict[TextureFormat, _GLFormat] = {
    TextureFormat.PVRTC_RGB2: _GLFormat(GL_COMPRESSED_RGB_PVRTC_2BPPV1_IMG),
    TextureFormat.PVRTC_RGBA2: _GLFormat(
        GL_COMPRESSED_RGBA_PVRTC_2BPPV1_IMG, GL_RGBA),
    TextureFormat.PVRTC_RGB4: _GLFormat(GL_COMPRESSED_RGB_PVRTC_4BPPV1_IMG),
    TextureFormat.PVRTC_RGBA4: _GLFormat(
        GL_COMPRESSED_RGBA_PVRTC_4BPPV1_IMG, GL_RGBA),
    TextureFormat.ATC_RGB4: _GLFormat(GL_ATC_RGB_AMD),
    TextureFormat.ATC_RGBA8: _GLFormat(GL_ATC_RGBA_EXPLICIT_ALPHA_AMD, GL_RGBA),
    TextureFormat.ETC_RGB4: _GLFormat(GL_ETC1_RGB8_OES),
}

SUPPORTED_FORMATS = frozenset(GL_FORMATS)


@dataclass
class KTXHeader:
    """Field set of a KTX 1.1 header.

    ``swap`` selects big-endian field order. Readers on little-endian hosts
    then see the reversed endianness marker and byte-swap the fields.
    """

    family: ClassVar[ContainerFamily] = ContainerFamily.KTX

    pixel_width: int
    pixel_height: int
    gl_internal_format: int
    gl_base_internal_format: int = GL_RGB
    gl_type: int = 0
    gl_type_size: int = 1
    gl_format: int = 0
    pixel_depth: int = 0
    number_of_array_elements: int = 0
    number_of_faces: int = 1
    number_of_mipmap_levels: int = 1
    bytes_of_key_value_data: int = 0
    swap: bool = True
    identifier: bytes = KTX_IDENTIFIER
    endianness: int = KTX_ENDIANNESS

    @classmethod
    def for_format(cls, fmt: TextureFormat, width: int, height: int,
                   mipmap: bool, swap: bool = True) -> "KTXHeader":
        """Build the header for ``fmt``; other formats break the contract."""
        gl = GL_FORMATS.get(fmt)
        if gl is None:
            raise TextureContractError(f"Invalid texture format for KTX: {fmt!r}")
        return cls(
            pixel_width=width,
            pixel_height=height,
            gl_internal_format=gl.internal_format,
            gl_base_internal_format=gl.base_internal_format,
            number_of_mipmap_levels=mip_level_count(width, height) if mipmap else 1,
            swap=swap,
        )

    @property
    def byte_order(self) -> str:
        return ">" if self.swap else "<"

    @property
    def layout(self) -> BinaryLayout:
        return _LAYOUT_BE if self.swap else _LAYOUT_LE

    @classmethod
    def unpack(cls, data: bytes) -> "KTXHeader":
        """Read a header, detecting byte order from the endianness marker."""
        fields = _LAYOUT_LE.unpack(data)
        swap = fields["endianness"] != KTX_ENDIANNESS
        if swap:
            fields = _LAYOUT_BE.unpack(data)
        return cls(swap=swap, **fields)

    def pack(self) -> bytes:
        return self.layout.pack(self)


def encode(resource: TextureResource, payload: bytes, swap: bool = True,
           image_size_field: str = "width") -> List[EncodedOutput]:
    """Return one KTX file: header, image size prefix, untouched payload.

    The prefix holds the pixel width by default, which is what existing
    exports carry. ``image_size_field="payload"`` writes the payload length.
    """
    header = KTXHeader.for_format(
        resource.format, resource.width, resource.height, resource.mipmap,
        swap=swap,
    )
    if image_size_field == "payload":
        image_size = len(payload)
    else:
        image_size = header.pixel_width
    logger.debug(
        "KTX %s: %dx%d internal=0x%04X levels=%d",
        resource.display_name, header.pixel_width, header.pixel_height,
        header.gl_internal_format, header.number_of_mipmap_levels,
    )
    data = b"".join((
        header.pack(),
        struct.pack(header.byte_order + "I", image_size),
        payload,
    ))
    return [EncodedOutput(
        container_bytes=data,
        suggested_file_name=resource.display_name,
        file_extension=ContainerFamily.KTX.extension,
    )]
