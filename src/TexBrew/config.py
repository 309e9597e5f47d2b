"""Define texture format enums and the typed export configuration.

Use `ExportConfig` to load, validate, and persist runtime settings.
"""

import os
import logging
import yaml
from dataclasses import asdict, dataclass, field, is_dataclass
from enum import Enum, IntEnum
from typing import Dict, Optional

logger = logging.getLogger("texture_export.config")


class TextureFormat(IntEnum):
    """Enumerate source pixel encodings by their upstream ordinal."""

    Alpha8 = 1
    ARGB4444 = 2
    RGB24 = 3
    RGBA32 = 4
    ARGB32 = 5
    RGB565 = 7
    DXT1 = 10
    DXT5 = 12
    RGBA4444 = 13
    BGRA32 = 14
    PVRTC_RGB2 = 30
    PVRTC_RGBA2 = 31
    PVRTC_RGB4 = 32
    PVRTC_RGBA4 = 33
    ETC_RGB4 = 34
    ATC_RGB4 = 35
    ATC_RGBA8 = 36
    ATF_RGB_DXT1 = 38
    ATF_RGBA_JPG = 39
    ATF_RGB_JPG = 40

    @classmethod
    def from_ordinal(cls, value: int) -> Optional["TextureFormat"]:
        """Return the member for an upstream ordinal, or None if unknown."""
        try:
            return cls(int(value))
        except ValueError:
            return None

    @classmethod
    def parse(cls, text) -> Optional["TextureFormat"]:
        """Parse a member name (case-insensitive) or an integer ordinal."""
        if isinstance(text, int):
            return cls.from_ordinal(text)
        raw = str(text).strip()
        if raw.lstrip("-").isdigit():
            return cls.from_ordinal(int(raw))
        lowered = raw.lower()
        for member in cls:
            if member.name.lower() == lowered:
                return member
        return None


class ContainerFamily(Enum):
    """Enumerate supported output container families."""

    DDS = "dds"
    KTX = "ktx"
    TGA = "tga"
    PKM = "pkm"

    @property
    def extension(self) -> str:
        return self.value


@dataclass
class KTXConfig:
    """Store settings for the KTX container writer."""

    byte_swap: bool = True
    # "width" keeps the legacy width prefix, "payload" writes the real size
    image_size_field: str = "width"


_SUPPORTED_CONFIG_VERSION = 1
_VALID_IMAGE_SIZE_FIELDS = {"width", "payload"}


@dataclass
class ExportConfig:
    """Master export configuration."""

    config_version: int = 1
    manifest_path: str = "./textures/manifest.csv"
    payload_dir: str = ""
    output_dir: str = "./textures/export"
    max_workers: int = 4
    log_level: str = "INFO"
    dry_run: bool = False
    overwrite: bool = True
    verify_outputs: bool = False
    max_payload_bytes: int = 268435456  # 256 MiB
    container_overrides: Dict[str, str] = field(default_factory=dict)

    ktx: KTXConfig = field(default_factory=KTXConfig)

    @classmethod
    def from_yaml(cls, path: str) -> "ExportConfig":
        """Load a config file; a missing file yields validated defaults.

        Raises ValueError for unparsable YAML, a non-mapping document, or
        values that fail `validate()`.
        """
        config = cls()
        if not os.path.exists(path):
            logger.info("Config file '%s' not found. Using defaults.", path)
            config.validate()
            return config

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValueError(f"Failed to parse YAML config '{path}': {exc}") from exc
        data = {} if data is None else data
        if not isinstance(data, dict):
            raise ValueError(
                f"Config file '{path}' must contain a YAML mapping, "
                f"got {type(data).__name__}"
            )

        version = data.get("config_version", 1)
        if isinstance(version, int) and version > _SUPPORTED_CONFIG_VERSION:
            logger.warning(
                "Config file '%s' declares config_version=%d; version %d is "
                "the newest supported. Unknown settings will be ignored.",
                path, version, _SUPPORTED_CONFIG_VERSION,
            )

        _merge_dict_to_dataclass(config, data)
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"{path}: {exc}") from exc
        return config

    def to_yaml(self, path: str):
        """Write the configuration to ``path`` atomically."""
        from .core.io import write_output

        text = yaml.safe_dump(asdict(self), default_flow_style=False,
                              sort_keys=False)
        write_output(text.encode("utf-8"), path)

    def resolved_overrides(self) -> Dict[TextureFormat, ContainerFamily]:
        """Return `container_overrides` keyed by enum members.

        Call `validate()` first; invalid entries are dropped here.
        """
        resolved = {}
        for fmt_name, family_name in self.container_overrides.items():
            fmt = TextureFormat.parse(fmt_name)
            try:
                family = ContainerFamily(str(family_name).strip().lower())
            except ValueError:
                continue
            if fmt is not None:
                resolved[fmt] = family
        return resolved

    def validate(self):
        """Validate configuration values. Raises ValueError on invalid config."""
        from .containers import SUPPORTED_FORMATS

        errors = []

        valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.log_level.upper() not in valid_log_levels:
            errors.append(
                f"log_level must be one of {sorted(valid_log_levels)}, "
                f"got '{self.log_level}'"
            )

        if self.max_workers < 1:
            errors.append("max_workers must be >= 1")
        if self.max_workers > 128:
            errors.append("max_workers must be <= 128")
        if self.max_payload_bytes < 0:
            errors.append("max_payload_bytes must be >= 0 (0 = unlimited)")
        if not self.output_dir:
            errors.append("output_dir must not be empty")

        valid_families = {f.value for f in ContainerFamily}
        for fmt_name, family_name in self.container_overrides.items():
            fmt = TextureFormat.parse(fmt_name)
            if fmt is None:
                errors.append(
                    f"container_overrides: unknown texture format '{fmt_name}'"
                )
                continue
            family_key = str(family_name).strip().lower()
            if family_key not in valid_families:
                errors.append(
                    f"container_overrides.{fmt_name} must be one of "
                    f"{sorted(valid_families)}, got '{family_name}'"
                )
                continue
            family = ContainerFamily(family_key)
            if fmt not in SUPPORTED_FORMATS[family]:
                errors.append(
                    f"container_overrides.{fmt_name}: {family.value} cannot "
                    f"hold {fmt.name} textures"
                )

        if self.ktx.image_size_field not in _VALID_IMAGE_SIZE_FIELDS:
            errors.append(
                f"ktx.image_size_field must be one of "
                f"{sorted(_VALID_IMAGE_SIZE_FIELDS)}, "
                f"got '{self.ktx.image_size_field}'"
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" +
                "\n".join(f"  - {e}" for e in errors)
            )


def _coerce(value, default, key: str):
    """Return ``(ok, value)`` for assigning ``value`` over ``default``.

    Nulls and type mismatches are rejected with a warning. Whole floats are
    accepted for int fields and ints for float fields.
    """
    if value is None:
        logger.warning("Config key '%s' is null; keeping default %r.", key, default)
        return False, default
    expected = type(default)
    if isinstance(value, expected):
        return True, value
    if expected is float and isinstance(value, int) and not isinstance(value, bool):
        return True, float(value)
    if expected is int and isinstance(value, float) and value.is_integer():
        return True, int(value)
    logger.warning(
        "Config type mismatch for '%s': expected %s, got %s (%r). "
        "Keeping default.",
        key, expected.__name__, type(value).__name__, value,
    )
    return False, default


def _merge_dict_to_dataclass(obj, data: dict, _path: str = ""):
    """Overlay a YAML mapping onto a config dataclass in place."""
    for key, value in data.items():
        full_key = f"{_path}{key}"
        if not hasattr(obj, key):
            logger.warning("Unknown config key ignored: '%s'", full_key)
            continue
        current = getattr(obj, key)
        if is_dataclass(current) and isinstance(value, dict):
            _merge_dict_to_dataclass(current, value, f"{full_key}.")
            continue
        ok, value = _coerce(value, current, full_key)
        if not ok:
            continue
        if isinstance(current, dict):
            current.update(value)
        else:
            setattr(obj, key, value)
