"""Command-line interface for texture export."""

import argparse
import logging
import os
import sys

from .config import ExportConfig
from .core import setup_logging

logger = logging.getLogger("texture_export")

_EPILOG = """
Examples:
  TexBrew --manifest ./dump/manifest.csv --output ./textures
  TexBrew --config export.yaml
  TexBrew -m ./dump/manifest.csv --dry-run --verify
  TexBrew --generate-config
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="TexBrew",
        description="Export decoded textures to DDS, KTX, TGA, or PKM files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=_EPILOG,
    )
    parser.add_argument("--manifest", "-m", help="Texture manifest CSV")
    parser.add_argument("--output", "-o", help="Output directory")
    parser.add_argument("--config", "-c", help="Path to config YAML")
    parser.add_argument("--payload-dir",
                        help="Base directory of payload files (default: manifest folder)")
    parser.add_argument("--workers", type=int, help="Max parallel workers")
    parser.add_argument("--dry-run", action="store_true",
                        help="Encode everything but write nothing")
    parser.add_argument("--verify", action="store_true",
                        help="Open encoded TGA/DDS files with Pillow")
    parser.add_argument("--generate-config", action="store_true",
                        help="Write a default config YAML and exit")
    parser.add_argument("--log-level",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    return parser


def _fail(message: str):
    logger.error(message)
    print(f"Error: {message}")
    sys.exit(1)


def _generate_config(args):
    dest = args.config or args.output or "config.yaml"
    if os.path.isdir(dest):
        dest = os.path.join(dest, "config.yaml")
    ExportConfig().to_yaml(dest)
    logger.info("Generated default %s", dest)
    print(f"Generated default {dest}")


def _load_config(args) -> ExportConfig:
    if not args.config:
        return ExportConfig()
    if not os.path.exists(args.config):
        _fail(f"Config file not found: {args.config}")
    try:
        return ExportConfig.from_yaml(args.config)
    except ValueError as e:
        _fail(f"Invalid config: {e}")


def _apply_overrides(config: ExportConfig, args):
    if args.manifest:
        config.manifest_path = args.manifest
    if args.output:
        config.output_dir = args.output
    if args.payload_dir:
        config.payload_dir = args.payload_dir
    if args.workers is not None:
        config.max_workers = args.workers
    if args.dry_run:
        config.dry_run = True
    if args.verify:
        config.verify_outputs = True
    if args.log_level:
        config.log_level = args.log_level


def main(argv=None):
    """Export every texture in the manifest. Exits 1 on any failure."""
    args = build_parser().parse_args(argv)

    if args.generate_config:
        _generate_config(args)
        return

    # Bootstrap handler for config warnings; setup_logging replaces it below.
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    config = _load_config(args)
    _apply_overrides(config, args)

    if not config.manifest_path or not os.path.isfile(config.manifest_path):
        _fail(f"Manifest not found: {config.manifest_path}")
    try:
        config.validate()
    except ValueError as e:
        _fail(str(e))

    os.makedirs(config.output_dir, exist_ok=True)
    setup_logging(config.log_level, os.path.join(config.output_dir, "export.log"),
                  force=True)

    from .pipeline import TextureExporter
    try:
        summary = TextureExporter(config).run()
    except (OSError, ValueError) as exc:
        _fail(f"Export aborted: {exc}")
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        sys.exit(130)

    if not summary.ok:
        for message in summary.failed:
            logger.error("Failed: %s", message)
        sys.exit(1)


if __name__ == "__main__":
    main()
