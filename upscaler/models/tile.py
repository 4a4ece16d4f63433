from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Tile:
    """
    Rectangular sub-region of a source image, in source pixel coordinates.
    Edge tiles are clipped to the image bounds, never padded.
    """
    x: int
    y: int
    width: int
    height: int

    def slices(self) -> Tuple[slice, slice]:
        """Row/column slices selecting this tile out of an (H, W, C) array."""
        return slice(self.y, self.y + self.height), slice(self.x, self.x + self.width)

    def scaled_origin(self, scale: int) -> Tuple[int, int]:
        """Top-left corner of this tile inside the upscaled output buffer."""
        return self.x * scale, self.y * scale
