"""Turn decoded texture resources into container files.

`TextureEncoder.encode` validates a resource, picks a container family,
and returns the finished file buffers. Recoverable problems (no payload,
unknown or unsupported format) become skips; broken invariants raise
`TextureContractError` naming the texture.
"""

import logging
from typing import Dict, Optional

from .config import ContainerFamily, ExportConfig, TextureFormat
from .containers import ENCODERS, SUPPORTED_FORMATS
from .core import (
    EncodeResult,
    TextureContractError,
    TextureResource,
    select_container,
)

logger = logging.getLogger("texture_export.encoder")


class TextureEncoder:
    """Encode texture resources into DDS, KTX, TGA, or PKM containers."""

    def __init__(self, config: Optional[ExportConfig] = None):
        """Initialize the encoder with optional runtime configuration."""
        self.config = config or ExportConfig()
        self._overrides: Dict[TextureFormat, ContainerFamily] = (
            self.config.resolved_overrides()
        )

    def family_for(self, fmt: TextureFormat) -> Optional[ContainerFamily]:
        """Return the family ``fmt`` is written to, honoring overrides."""
        override = self._overrides.get(fmt)
        if override is not None:
            return override
        return select_container(fmt)

    def encode(self, resource: TextureResource) -> EncodeResult:
        """Encode one texture.

        Returns an `EncodeResult` with outputs, or with a skip reason and
        no outputs. Raises `TextureContractError` when the resource breaks
        an invariant; no outputs are produced in that case.
        """
        name = resource.display_name
        result = EncodeResult(name=name)

        if not resource.payload:
            return self._skip(result, f"Texture2D {name} is empty")

        fmt = resource.format
        if fmt is None:
            return self._skip(
                result,
                f"Texture2D {name} has unknown texture format "
                f"{resource.texture_format}",
            )

        family = self.family_for(fmt)
        if family is None:
            return self._skip(
                result,
                f"Texture2D {name} has unsupported texture format {fmt.name}",
            )

        try:
            if resource.width <= 0 or resource.height <= 0:
                raise TextureContractError(
                    f"dimensions must be positive, got "
                    f"{resource.width}x{resource.height}"
                )
            if fmt not in SUPPORTED_FORMATS[family]:
                raise TextureContractError(
                    f"{family.value} writer cannot hold {fmt.name} textures"
                )
            result.outputs = ENCODERS[family](
                resource, resource.payload, **self._options(family)
            )
        except TextureContractError as exc:
            if exc.resource_name is None:
                exc.resource_name = name
            logger.debug("Contract violation for %s: %s", name, exc.invariant)
            raise

        logger.debug(
            "Encoded %s (%s) as %s: %d file(s)",
            name, fmt.name, family.value, len(result.outputs),
        )
        return result

    def _options(self, family: ContainerFamily) -> dict:
        if family == ContainerFamily.KTX:
            return {
                "swap": self.config.ktx.byte_swap,
                "image_size_field": self.config.ktx.image_size_field,
            }
        return {}

    @staticmethod
    def _skip(result: EncodeResult, reason: str) -> EncodeResult:
        logger.warning("%s", reason)
        result.skip_reason = reason
        return result


def encode_texture(resource: TextureResource,
                   config: Optional[ExportConfig] = None) -> EncodeResult:
    """Encode one texture with a throwaway `TextureEncoder`."""
    return TextureEncoder(config).encode(resource)
