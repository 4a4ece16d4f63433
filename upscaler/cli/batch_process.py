import os
import sys
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from ..models.pipeline_config import PipelineConfig, DEFAULT_TILE_SIZE
from ..repositories.sr_model_repository import SuperResolutionModelRepository
from ..services.image_service import ImageService
from ..pipeline.batch_enhancer import process_folder
from ..exceptions import InputFolderNotFoundError, ModelLoadError, NoImagesFoundError

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="upscaler-batch",
        description="Denoise, 4x super-resolve, resize, equalize and sharpen every image in a folder",
    )
    p.add_argument("input_folder", type=Path, help="Folder with .jpg/.jpeg/.png/.bmp/.tiff/.webp images")
    p.add_argument("output_folder", type=Path, help="Created if missing")
    p.add_argument("target_width", type=positive_int, help="Output width in pixels")
    p.add_argument("target_height", type=positive_int, help="Output height in pixels")
    p.add_argument("model_path", type=Path, help="FSRCNN x4 model file (.pb)")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None,
         model_repository: Optional[SuperResolutionModelRepository] = None) -> int:
    args = parse_args(argv)
    configure_logging()

    config = PipelineConfig(
        input_dir=args.input_folder,
        output_dir=args.output_folder,
        target_width=args.target_width,
        target_height=args.target_height,
        model_path=args.model_path,
        tile_size=DEFAULT_TILE_SIZE,
    )
    ImageService.prepare_output_dir(config.output_dir)

    model_repository = model_repository or SuperResolutionModelRepository()
    try:
        model = model_repository.load(config.model_path)
    except ModelLoadError as err:
        logger.error("❌ Could not load model: %s", err)
        return 1

    try:
        process_folder(config, model)
    except (InputFolderNotFoundError, NoImagesFoundError) as err:
        logger.error("❌ %s", err)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
