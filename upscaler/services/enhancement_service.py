from __future__ import annotations

from typing import Tuple
import logging

import numpy as np
import cv2

from ..models.image import Image
from ..models.sr_engine import SuperResolutionModel
from ..models.pipeline_config import DEFAULT_TILE_SIZE
from .tiling_service import TiledUpscaler

logger = logging.getLogger(__name__)


class Denoiser:
    """Colour-preserving non-local means denoise with fixed strengths."""

    H_LUMA = 3
    H_COLOR = 3
    TEMPLATE_WINDOW = 7
    SEARCH_WINDOW = 21

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        return cv2.fastNlMeansDenoisingColored(
            pixels, None,
            self.H_LUMA, self.H_COLOR,
            self.TEMPLATE_WINDOW, self.SEARCH_WINDOW,
        )


class Resampler:
    """
    Resize to an exact (width, height) with 4-lobe Lanczos.
    Aspect ratio is not preserved.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Target size must be positive, got {width}x{height}")
        self.size: Tuple[int, int] = (width, height)

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        return cv2.resize(pixels, self.size, interpolation=cv2.INTER_LANCZOS4)


class ContrastEqualizer:
    """CLAHE on the L channel of Lab; a and b are left untouched."""

    CLIP_LIMIT = 2.0
    TILE_GRID: Tuple[int, int] = (8, 8)

    def __init__(self):
        self._clahe = cv2.createCLAHE(clipLimit=self.CLIP_LIMIT, tileGridSize=self.TILE_GRID)

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        lab = cv2.cvtColor(pixels, cv2.COLOR_BGR2Lab)
        l, a, b = cv2.split(lab)
        l = self._clahe.apply(l)
        return cv2.cvtColor(cv2.merge((l, a, b)), cv2.COLOR_Lab2BGR)


class Sharpener:
    """
    Unsharp mask: 1.5 * img - 0.5 * gaussian(img), saturated to uint8.
    Kernel size (0, 0) lets OpenCV derive it from sigma.
    """

    SIGMA = 3
    AMOUNT = 1.5
    BLUR_WEIGHT = -0.5

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        blurred = cv2.GaussianBlur(pixels, (0, 0), self.SIGMA)
        return cv2.addWeighted(pixels, self.AMOUNT, blurred, self.BLUR_WEIGHT, 0)


class ImageEnhancementService:
    """
    Runs the fixed five-stage chain on one image:
    denoise → tiled super-resolution → resize → CLAHE → unsharp mask.
    *   No I/O here—works only with Image objects (BGR numpy arrays).
    *   No branching on image content; every stage always runs.
    """

    def __init__(self,
                 model: SuperResolutionModel,
                 target_width: int,
                 target_height: int,
                 *,
                 tile_size: int = DEFAULT_TILE_SIZE,
                 denoiser: Denoiser | None = None,
                 upscaler: TiledUpscaler | None = None,
                 resampler: Resampler | None = None,
                 equalizer: ContrastEqualizer | None = None,
                 sharpener: Sharpener | None = None):
        self.denoiser = denoiser or Denoiser()
        self.upscaler = upscaler or TiledUpscaler(model, tile_size=tile_size)
        self.resampler = resampler or Resampler(target_width, target_height)
        self.equalizer = equalizer or ContrastEqualizer()
        self.sharpener = sharpener or Sharpener()

        logger.debug("ImageEnhancementService ready: x%d, target %dx%d, tile %d",
                     self.upscaler.scale, target_width, target_height, self.upscaler.tile_size)

    # ─── Public API ────────────────────────────────────────────────
    def enhance(self, img: Image) -> Image:
        """
        Returns a *new* Image carrying the source path; the input is not modified.

        Raises:
            TileInferenceError: super-resolution failed on one of the tiles.
        """
        pixels = self.enhance_pixels(img.pixels)
        return Image(pixels=pixels, path=img.path)

    def enhance_pixels(self, pixels: np.ndarray) -> np.ndarray:
        pixels = self.denoiser.apply(pixels)
        pixels = self.upscaler.upscale(pixels)
        pixels = self.resampler.apply(pixels)
        pixels = self.equalizer.apply(pixels)
        return self.sharpener.apply(pixels)
