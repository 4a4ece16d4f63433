from pathlib import Path
from typing import Union
import logging

import cv2

from ..models.sr_engine import SuperResolutionEngine
from ..exceptions import ModelLoadError

logger = logging.getLogger(__name__)


class SuperResolutionModelRepository:
    """
    Loads a pretrained super-resolution model from disk and binds it to a
    fixed architecture, scale and CPU execution target.
    """

    MODEL_NAME = "fsrcnn"
    MODEL_SCALE = 4

    def load(self, model_path: Union[str, Path]) -> SuperResolutionEngine:
        path = Path(model_path)
        if not path.is_file():
            raise ModelLoadError(f"Super-resolution model not found at {path}")
        if not hasattr(cv2, "dnn_superres"):
            raise ModelLoadError(
                "This OpenCV build has no dnn_superres module; install opencv-contrib-python"
            )

        sr = cv2.dnn_superres.DnnSuperResImpl_create()
        try:
            sr.readModel(str(path))
            sr.setModel(self.MODEL_NAME, self.MODEL_SCALE)
            sr.setPreferableBackend(cv2.dnn.DNN_BACKEND_OPENCV)
            sr.setPreferableTarget(cv2.dnn.DNN_TARGET_CPU)
        except cv2.error as err:
            raise ModelLoadError(f"Could not load model {path}: {err}") from err

        engine = SuperResolutionEngine(sr, self.MODEL_NAME, self.MODEL_SCALE)
        logger.info("Loaded %s from %s (CPU)", engine, path)
        return engine
