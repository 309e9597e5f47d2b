"""Container writers -- one module per output family."""

from typing import Callable, Dict, FrozenSet, List, Type, Union

from ..config import ContainerFamily, TextureFormat
from ..core.records import EncodedOutput
from . import dds, ktx, pkm, tga
from .dds import DDSHeader
from .ktx import KTXHeader
from .pkm import PKMHeader
from .tga import TGAHeader

ContainerVariant = Union[DDSHeader, KTXHeader, TGAHeader, PKMHeader]

HEADER_TYPES: Dict[ContainerFamily, Type[ContainerVariant]] = {
    header.family: header
    for header in (DDSHeader, KTXHeader, TGAHeader, PKMHeader)
}

Encoder = Callable[..., List[EncodedOutput]]

ENCODERS: Dict[ContainerFamily, Encoder] = {
    ContainerFamily.DDS: dds.encode,
    ContainerFamily.KTX: ktx.encode,
    ContainerFamily.TGA: tga.encode,
    ContainerFamily.PKM: pkm.encode,
}

# Every format each writer can hold, a superset of what routes to it.
SUPPORTED_FORMATS: Dict[ContainerFamily, FrozenSet[TextureFormat]] = {
    ContainerFamily.DDS: dds.SUPPORTED_FORMATS,
    ContainerFamily.KTX: ktx.SUPPORTED_FORMATS,
    ContainerFamily.TGA: tga.SUPPORTED_FORMATS,
    ContainerFamily.PKM: pkm.SUPPORTED_FORMATS,
}


def read_header(family: ContainerFamily, data: bytes) -> ContainerVariant:
    """Parse the fixed header at the start of an encoded container."""
    return HEADER_TYPES[family].unpack(data)


__all__ = [
    "ContainerVariant",
    "DDSHeader", "KTXHeader", "TGAHeader", "PKMHeader",
    "ENCODERS", "HEADER_TYPES", "SUPPORTED_FORMATS", "read_header",
]
