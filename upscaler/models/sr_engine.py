# models/sr_engine.py
"""
Thin wrapper around OpenCV's DnnSuperResImpl.

• Holds one configured model (architecture + integer scale) for the whole run.
• Exposes .upsample(bgr)  →  bgr array scaled by .scale on both axes.
"""
from __future__ import annotations
from typing import Protocol
import numpy as np


class SuperResolutionModel(Protocol):
    """Anything with an integer scale that can upsample a BGR array."""
    scale: int

    def upsample(self, pixels: np.ndarray) -> np.ndarray:
        ...


class SuperResolutionEngine:
    """
    Loaded super-resolution model. Read-only after construction, so a single
    instance is reused for every image of a batch.
    """

    def __init__(self, impl, name: str, scale: int):
        self._impl = impl
        self.name = name
        self.scale = scale

    # --------------------------------------------------
    def upsample(self, pixels: np.ndarray) -> np.ndarray:
        """
        Args
        ----
        pixels : np.ndarray  (h, w, 3)  uint8  BGR order

        Returns
        -------
        np.ndarray  (h*scale, w*scale, 3)  uint8  BGR order
        """
        return self._impl.upsample(pixels)

    def __repr__(self) -> str:
        return f"SuperResolutionEngine(name={self.name!r}, scale={self.scale})"
