"""Provide package metadata and the public encoding API of `TexBrew`."""

__version__ = "1.0.0"

from .config import ContainerFamily, ExportConfig, TextureFormat  # noqa: E402
from .core import (  # noqa: E402
    EncodedOutput,
    EncodeResult,
    TextureContractError,
    TextureResource,
)
from .encoder import TextureEncoder, encode_texture  # noqa: E402

__all__ = [
    "__version__",
    "ContainerFamily", "ExportConfig", "TextureFormat",
    "EncodedOutput", "EncodeResult", "TextureContractError", "TextureResource",
    "TextureEncoder", "encode_texture",
]
