from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Union
import logging

from ..models.image import Image
from ..repositories.image_repository import ImageRepository
from ..exceptions import NoImagesFoundError

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = "_upscaled"


class ImageService:
    """I/O helpers.  No CV logic, no model imports."""
    def __init__(self, image_repository: ImageRepository | None = None):
        self.image_repository = image_repository or ImageRepository()

    def load(self, path: str | Path) -> Image:
        """Load a single image from disk into an Image object."""
        return self.image_repository.load(path)

    def save(self, image: Image) -> None:
        """
        Business-level method to save the image to its own path.
        The container format follows the path's extension.
        """
        self.image_repository.save(image)

    def discover_images(
        self,
        folder: Union[str, Path],
        *,
        exts: Iterable[str] | None = None,
    ) -> List[Path]:
        """
        List the images a batch run should process.

        Raises:
            InputFolderNotFoundError: folder missing or unreadable.
            NoImagesFoundError: nothing with a supported extension inside.
        """
        paths = self.image_repository.scan_dir(folder, exts=exts)
        if not paths:
            raise NoImagesFoundError(f"No images found in {folder}")
        logger.info("Found %d image(s) in %s", len(paths), folder)
        return paths

    @staticmethod
    def prepare_output_dir(folder: Union[str, Path]) -> Path:
        folder = Path(folder)
        folder.mkdir(parents=True, exist_ok=True)
        return folder

    @staticmethod
    def output_path_for(source: Union[str, Path], output_dir: Union[str, Path]) -> Path:
        """`photo.JPG` → `<output_dir>/photo_upscaled.JPG`."""
        source = Path(source)
        return Path(output_dir) / f"{source.stem}{OUTPUT_SUFFIX}{source.suffix}"
