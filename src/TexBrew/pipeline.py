"""Export every texture listed in a manifest.

`TextureExporter` loads the manifest, reads payloads, encodes textures in a
worker pool, and writes the finished containers to the output directory.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import List, Optional, Set

from tqdm import tqdm

from .config import ContainerFamily, ExportConfig
from .containers import read_header
from .core import (
    EncodedOutput,
    EncodeResult,
    TextureContractError,
    TextureEntry,
    TextureResource,
    get_output_path,
    load_manifest,
    probe_container,
    read_payload,
    resolve_payload_path,
    safe_file_stem,
    write_output,
)
from .encoder import TextureEncoder

logger = logging.getLogger("texture_export")


@dataclass
class ExportSummary:
    """Totals for one export run."""

    written: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass
class _Outcome:
    result: Optional[EncodeResult] = None
    skip: Optional[str] = None
    error: Optional[str] = None


class TextureExporter:
    """Batch exporter driven by an `ExportConfig`."""

    def __init__(self, config: ExportConfig):
        """Initialize the exporter with validated runtime configuration."""
        self.config = config
        self.encoder = TextureEncoder(config)
        self._used_names: Set[str] = set()

    def payload_dir(self) -> str:
        if self.config.payload_dir:
            return self.config.payload_dir
        return os.path.dirname(os.path.abspath(self.config.manifest_path))

    def load_resource(self, entry: TextureEntry) -> TextureResource:
        """Read an entry's payload and build the resource.

        Raises ValueError for oversize payloads and IOError for missing ones
        or payload paths that leave the payload directory.
        """
        try:
            path = resolve_payload_path(entry.payload, self.payload_dir())
        except ValueError as exc:
            raise IOError(str(exc)) from exc
        payload = read_payload(path, max_bytes=self.config.max_payload_bytes)
        return TextureResource(
            name=entry.name,
            width=entry.width,
            height=entry.height,
            texture_format=entry.texture_format,
            mipmap=entry.mipmap,
            payload=payload,
            path_id=entry.path_id,
        )

    def _process(self, entry: TextureEntry) -> _Outcome:
        label = entry.name or f"path_id {entry.path_id}"
        try:
            resource = self.load_resource(entry)
        except ValueError as exc:
            logger.warning("Skipping %s: %s", label, exc)
            return _Outcome(skip=f"{label}: {exc}")
        except OSError as exc:
            logger.error("Failed to load %s: %s", label, exc)
            return _Outcome(error=f"{label}: {exc}")

        try:
            result = self.encoder.encode(resource)
        except TextureContractError as exc:
            logger.error("Failed to encode %s: %s", label, exc)
            return _Outcome(error=str(exc))
        if result.skipped:
            return _Outcome(skip=result.skip_reason)
        return _Outcome(result=result)

    def _unique_stem(self, stem: str, ext: str) -> str:
        """Return ``stem`` or ``stem_<n>`` so no two outputs share a path."""
        candidate = stem
        n = 1
        while f"{candidate}.{ext}".lower() in self._used_names:
            candidate = f"{stem}_{n}"
            n += 1
        self._used_names.add(f"{candidate}.{ext}".lower())
        return candidate

    def _verify(self, output: EncodedOutput, path: str):
        """Re-read an encoded container; problems are logged as warnings.

        DDS and TGA go through Pillow. KTX and PKM, which Pillow cannot
        open, get their fixed header parsed back instead.
        """
        try:
            size = probe_container(output.container_bytes, output.file_extension)
            if size is None:
                family = ContainerFamily(output.file_extension)
                header = read_header(family, output.container_bytes)
                logger.debug("Verified %s header: %r", path, header)
            else:
                logger.debug("Verified %s: %dx%d", path, size[0], size[1])
        except (IOError, ValueError) as exc:
            logger.warning("Verification failed for %s: %s", path, exc)

    def _write(self, result: EncodeResult, summary: ExportSummary):
        for output in result.outputs:
            stem = self._unique_stem(
                safe_file_stem(output.suggested_file_name), output.file_extension
            )
            path = get_output_path(self.config.output_dir, stem, output.file_extension)

            if self.config.verify_outputs:
                self._verify(output, path)

            if self.config.dry_run:
                logger.info("[dry-run] Would write %s (%d bytes)",
                            path, len(output.container_bytes))
                summary.written.append(path)
                continue
            if os.path.exists(path) and not self.config.overwrite:
                logger.info("Keeping existing %s (overwrite disabled)", path)
                summary.skipped.append(f"{path}: exists")
                continue
            write_output(output.container_bytes, path)
            summary.written.append(path)

    def run(self, entries: Optional[List[TextureEntry]] = None) -> ExportSummary:
        """Export all entries (default: the configured manifest)."""
        if entries is None:
            entries = load_manifest(self.config.manifest_path)
        summary = ExportSummary()
        self._used_names.clear()
        if not entries:
            logger.warning("No textures to export.")
            return summary

        workers = max(1, min(self.config.max_workers, len(entries)))
        outcomes: List[Optional[_Outcome]] = [None] * len(entries)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self._process, entry): idx
                for idx, entry in enumerate(entries)
            }
            with tqdm(total=len(futures), desc="Encoding textures") as pbar:
                for future in as_completed(futures):
                    outcomes[futures[future]] = future.result()
                    pbar.update(1)

        # Write in manifest order so name de-duplication is deterministic.
        for outcome in outcomes:
            if outcome.error is not None:
                summary.failed.append(outcome.error)
            elif outcome.skip is not None:
                summary.skipped.append(outcome.skip)
            else:
                self._write(outcome.result, summary)

        logger.info(
            "Export finished: %d file(s) written, %d skipped, %d failed.",
            len(summary.written), len(summary.skipped), len(summary.failed),
        )
        return summary
