"""Batch image upscaler: denoise, tiled super-resolution, resize, CLAHE, sharpen."""

__version__ = "1.0.0"
