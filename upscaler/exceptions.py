from __future__ import annotations


class UpscalerError(Exception):
    """Base class for every error raised by the upscaler package."""


class InputFolderNotFoundError(UpscalerError, FileNotFoundError):
    """Input folder is missing, not a directory, or cannot be listed."""


class NoImagesFoundError(UpscalerError, ValueError):
    """Input folder holds no file with a supported image extension."""


class ModelLoadError(UpscalerError, RuntimeError):
    """Super-resolution model could not be read or configured."""


class ImageReadError(UpscalerError, OSError):
    """An image file could not be decoded."""


class ImageWriteError(UpscalerError, OSError):
    """An output image could not be encoded or written."""


class TileInferenceError(UpscalerError, RuntimeError):
    """
    Model inference failed on one tile.
    The whole image is abandoned; the partially filled buffer is never returned.
    """

    def __init__(self, tile, cause: BaseException):
        self.tile = tile
        self.cause = cause
        super().__init__(f"Inference failed on tile {tile}: {cause}")
