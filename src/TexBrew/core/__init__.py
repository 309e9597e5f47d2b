"""Core utilities -- re-exports all public symbols for convenience."""

from .errors import TextureContractError
from .records import TextureResource, MipLevel, EncodedOutput, EncodeResult
from .binary import BinaryLayout, fourcc
from .mips import mip_level_count, plan_mips
from .channels import convert_channels, needs_conversion
from .formats import FAMILY_MEMBERS, select_container
from .io import read_payload, write_output, probe_container
from .paths import get_output_path, resolve_payload_path, safe_file_stem
from .scanning import TextureEntry, load_manifest, save_manifest
from .logging import setup_logging

__all__ = [
    "TextureContractError",
    "TextureResource", "MipLevel", "EncodedOutput", "EncodeResult",
    "BinaryLayout", "fourcc",
    "mip_level_count", "plan_mips",
    "convert_channels", "needs_conversion",
    "FAMILY_MEMBERS", "select_container",
    "read_payload", "write_output", "probe_container",
    "get_output_path", "resolve_payload_path", "safe_file_stem",
    "TextureEntry", "load_manifest", "save_manifest",
    "setup_logging",
]
