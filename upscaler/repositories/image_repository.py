from __future__ import annotations
from pathlib import Path
from typing import Union, Iterable, List
import os
import logging

import cv2
from dotenv import load_dotenv

from ..models.image import Image
from ..exceptions import (
    ImageReadError,
    ImageWriteError,
    InputFolderNotFoundError,
)

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_EXTS = ".jpg,.jpeg,.png,.bmp,.tiff,.webp"


def _normalise_ext(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"


class ImageRepository:
    """
    Handles file I/O for Image entities. Pixels stay in OpenCV's BGR order.
    """
    def __init__(self):
        raw = os.getenv("VALID_IMAGE_EXTENSIONS", DEFAULT_EXTS)
        self.VALID_EXTS = {_normalise_ext(ext) for ext in raw.split(",") if ext.strip()}

    @staticmethod
    def load(path: Union[str, Path]) -> Image:
        path = Path(path)
        arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if arr_bgr is None:
            raise ImageReadError(f"Image not found or unreadable: {path}")
        return Image(pixels=arr_bgr, path=path)

    @staticmethod
    def save(image: Image) -> None:
        if image.path is None:
            raise ImageWriteError("Image has no destination path")
        try:
            ok = cv2.imwrite(str(image.path), image.pixels)
        except cv2.error as err:
            raise ImageWriteError(f"Could not encode {image.path}: {err}") from err
        if not ok:
            raise ImageWriteError(f"Could not write {image.path}")

    def scan_dir(
        self,
        folder: Union[str, Path],
        *,
        exts: Iterable[str] | None = None,
    ) -> List[Path]:
        """
        Regular files directly inside `folder` with an allowed extension,
        sorted by name. Sub-directories are not descended into.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise InputFolderNotFoundError(f"Input folder not found: {folder}")

        allowed = {_normalise_ext(e) for e in (exts or self.VALID_EXTS)}

        try:
            entries = list(folder.iterdir())
        except OSError as err:
            raise InputFolderNotFoundError(f"Input folder not readable: {folder} ({err})") from err

        found = []
        for p in entries:
            if p.suffix.lower() not in allowed:
                logger.debug("Skipping due to extension: %s", p)
                continue
            if not p.is_file():
                logger.debug("Skipping because not a regular file: %s", p)
                continue
            found.append(p)

        return sorted(found, key=lambda p: p.name)
