"""
Tiled super-resolution.

Large images are split into non-overlapping tiles, each tile is run through the
model on its own, and the scaled tiles are pasted into one pre-allocated output
buffer. Tile seams are not blended, so a visible edge can appear where two
tiles meet.
"""
from __future__ import annotations

from typing import List
import logging

import numpy as np
from tqdm import tqdm

from ..models.tile import Tile
from ..models.sr_engine import SuperResolutionModel
from ..models.pipeline_config import DEFAULT_TILE_SIZE
from ..exceptions import TileInferenceError

logger = logging.getLogger(__name__)


class TilingService:
    """Splits an image area into clipped, row-major tiles."""

    @staticmethod
    def plan_tiles(width: int, height: int, tile_size: int = DEFAULT_TILE_SIZE) -> List[Tile]:
        """
        Args:
            width, height: source image size in pixels.
            tile_size: edge length T of a full tile.

        Returns:
            Tiles ordered row by row. Their union covers every source pixel
            exactly once; right/bottom tiles are clipped, never padded.
        """
        if tile_size < 1:
            raise ValueError(f"Tile size must be at least 1, got {tile_size}")
        return [
            Tile(x, y, min(tile_size, width - x), min(tile_size, height - y))
            for y in range(0, height, tile_size)
            for x in range(0, width, tile_size)
        ]


class TiledUpscaler:
    """
    Applies a fixed-scale super-resolution model to an arbitrarily large image
    while holding at most one tile's input and output in model memory.
    """

    def __init__(self,
                 model: SuperResolutionModel,
                 tile_size: int = DEFAULT_TILE_SIZE,
                 tiling_service: TilingService | None = None):
        if tile_size < 1:
            raise ValueError(f"Tile size must be at least 1, got {tile_size}")
        self.model = model
        self.tile_size = tile_size
        self.tiling_service = tiling_service or TilingService()

    @property
    def scale(self) -> int:
        return self.model.scale

    def upscale(self, pixels: np.ndarray) -> np.ndarray:
        """
        Returns an array of shape (H*scale, W*scale, C) with the dtype of `pixels`.

        Raises:
            TileInferenceError: the model failed on a tile, or produced a tile
                that does not fit the output buffer. No partial result is returned.
        """
        height, width = pixels.shape[:2]
        scale = self.scale
        out = np.zeros((height * scale, width * scale) + pixels.shape[2:], dtype=pixels.dtype)

        tiles = self.tiling_service.plan_tiles(width, height, self.tile_size)
        logger.debug("Upscaling %dx%d x%d in %d tile(s)", width, height, scale, len(tiles))

        for tile in tqdm(tiles, desc="tiles", ncols=70, leave=False, disable=len(tiles) <= 1):
            rows, cols = tile.slices()
            try:
                scaled = self.model.upsample(np.ascontiguousarray(pixels[rows, cols]))
            except Exception as err:
                raise TileInferenceError(tile, err) from err
            if scaled is None:
                raise TileInferenceError(tile, ValueError("model returned no output"))

            # Paste size comes from the model's real output, not the nominal tile size.
            ox, oy = tile.scaled_origin(scale)
            th, tw = scaled.shape[:2]
            if oy + th > out.shape[0] or ox + tw > out.shape[1]:
                raise TileInferenceError(
                    tile, ValueError(f"scaled tile {tw}x{th} at ({ox}, {oy}) overflows output")
                )
            out[oy:oy + th, ox:ox + tw] = scaled

        return out
