"""Texture resource and encoded output dataclasses."""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..config import TextureFormat


@dataclass(frozen=True)
class TextureResource:
    """Decoded texture as delivered by the asset reader.

    ``texture_format`` keeps unknown upstream ordinals as plain ints so the
    encoder can report them instead of failing construction.
    """

    name: str
    width: int
    height: int
    texture_format: Union[TextureFormat, int]
    mipmap: bool
    payload: bytes = field(repr=False)
    path_id: int = 0

    def __post_init__(self) -> None:
        """Freeze the payload and normalize the format tag."""
        if not isinstance(self.payload, bytes):
            object.__setattr__(self, "payload", bytes(self.payload))
        fmt = self.texture_format
        if not isinstance(fmt, TextureFormat):
            known = TextureFormat.from_ordinal(fmt)
            object.__setattr__(
                self, "texture_format", known if known is not None else int(fmt)
            )

    @property
    def format(self) -> Optional[TextureFormat]:
        """Return the recognized format, or None for unknown ordinals."""
        if isinstance(self.texture_format, TextureFormat):
            return self.texture_format
        return None

    @property
    def display_name(self) -> str:
        """Return the name used for files, falling back to the path id."""
        return self.name or f"Texture2D_{self.path_id}"


@dataclass(frozen=True)
class MipLevel:
    """Geometry of one mip level."""

    index: int
    width: int
    height: int
    byte_length: int = 0


@dataclass(frozen=True)
class EncodedOutput:
    """One finished container file, ready for the sink."""

    container_bytes: bytes = field(repr=False)
    suggested_file_name: str
    file_extension: str

    @property
    def file_name(self) -> str:
        return f"{self.suggested_file_name}.{self.file_extension}"


@dataclass
class EncodeResult:
    """Outcome of encoding one texture: outputs, or a skip reason."""

    name: str
    outputs: List[EncodedOutput] = field(default_factory=list)
    skip_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.skip_reason is not None
