"""
Batch Enhancer Pipeline
Runs every image of the input folder through the enhancement chain and writes
`<stem>_upscaled<ext>` files into the output folder, one file at a time.
"""
from __future__ import annotations

import sys
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, TextIO

import cv2

from ..models.pipeline_config import PipelineConfig
from ..models.sr_engine import SuperResolutionModel
from ..services.image_service import ImageService
from ..services.enhancement_service import ImageEnhancementService
from ..exceptions import ImageReadError, ImageWriteError, TileInferenceError
from .progress import print_progress

logger = logging.getLogger(__name__)

DONE_LABEL = "Done"


@dataclass
class BatchResult:
    """Outcome of one batch run."""
    total: int
    saved: List[Path] = field(default_factory=list)
    failed: List[Path] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.saved)


def process_folder(
    config: PipelineConfig,
    model: SuperResolutionModel,
    *,
    image_service: ImageService | None = None,
    enhancement_service: ImageEnhancementService | None = None,
    stream: TextIO | None = None,
) -> BatchResult:
    """
    Enhance every supported image in `config.input_dir`.

    A file that cannot be read, enhanced or written is logged and skipped;
    the batch carries on with the next one.

    Args:
        config: run configuration.
        model: loaded super-resolution model shared by every image.
        image_service: I/O helper (defaults to a fresh ImageService).
        enhancement_service: enhancement chain (built from config and model by default).
        stream: where progress and "Saved" lines go (stdout by default).

    Returns:
        BatchResult: saved outputs and failed inputs.

    Raises:
        InputFolderNotFoundError: input folder missing or unreadable.
        NoImagesFoundError: input folder has no supported image.
    """
    stream = stream or sys.stdout
    image_service = image_service or ImageService()
    output_dir = image_service.prepare_output_dir(config.output_dir)

    paths = image_service.discover_images(config.input_dir)
    enhancement_service = enhancement_service or ImageEnhancementService(
        model,
        config.target_width,
        config.target_height,
        tile_size=config.tile_size,
    )

    result = BatchResult(total=len(paths))

    for count, path in enumerate(paths):
        print_progress(count, result.total, path.name, stream=stream)

        try:
            img = image_service.load(path)
        except ImageReadError as err:
            _fail(result, path, stream, "❌ Failed to read %s: %s", path, err)
            continue

        try:
            enhanced = enhancement_service.enhance(img)
        except (TileInferenceError, cv2.error) as err:
            _fail(result, path, stream, "❌ Failed to enhance %s: %s", path, err)
            continue

        enhanced.path = image_service.output_path_for(path, output_dir)
        try:
            image_service.save(enhanced)
        except ImageWriteError as err:
            _fail(result, path, stream, "❌ Failed to write %s: %s", enhanced.path, err)
            continue

        result.saved.append(enhanced.path)
        stream.write(f"\n✅ Saved: {enhanced.path}\n")

    print_progress(result.total, result.total, DONE_LABEL, stream=stream)
    log_batch_summary(result, stream=stream)
    return result


def _fail(result: BatchResult, path: Path, stream: TextIO, msg: str, *args) -> None:
    # End the in-place progress line before the diagnostic.
    stream.write("\n")
    stream.flush()
    logger.error(msg, *args)
    result.failed.append(path)


def log_batch_summary(result: BatchResult, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    if result.failed:
        logger.warning("%d of %d image(s) failed:", len(result.failed), result.total)
        for path in result.failed:
            logger.warning("   - %s", path)
        stream.write(f"⚠️ Processed {result.succeeded}/{result.total} images, "
                     f"{len(result.failed)} failed.\n")
    else:
        stream.write("✅ All images processed!\n")
    stream.flush()
