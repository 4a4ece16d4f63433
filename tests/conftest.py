"""
Pytest configuration and fixtures for the batch upscaler tests.
"""
import sys
from pathlib import Path

import cv2
import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class NearestUpscaler:
    """Stand-in for the DNN model: nearest-neighbour upscale by an integer factor."""

    def __init__(self, scale: int = 4):
        self.scale = scale
        self.calls = []

    def upsample(self, pixels):
        self.calls.append(pixels.shape)
        return np.repeat(np.repeat(pixels, self.scale, axis=0), self.scale, axis=1)


class ExplodingUpscaler(NearestUpscaler):
    """Fails on the n-th tile it is given."""

    def __init__(self, fail_on: int = 1, scale: int = 4):
        super().__init__(scale)
        self.fail_on = fail_on

    def upsample(self, pixels):
        if len(self.calls) + 1 == self.fail_on:
            self.calls.append(pixels.shape)
            raise RuntimeError("inference blew up")
        return super().upsample(pixels)


class FakeModelRepository:
    """Replaces SuperResolutionModelRepository so no model file is needed."""

    def __init__(self, model=None):
        self.model = model or NearestUpscaler()
        self.loaded_from = None

    def load(self, model_path):
        self.loaded_from = model_path
        return self.model


@pytest.fixture
def fake_model():
    return NearestUpscaler()


@pytest.fixture
def fake_model_repository(fake_model):
    return FakeModelRepository(fake_model)


@pytest.fixture
def sample_pixels():
    """Deterministic 16x24 BGR image."""
    rng = np.random.default_rng(0)
    return rng.integers(0, 256, size=(16, 24, 3), dtype=np.uint8)


@pytest.fixture
def input_dir(tmp_path):
    folder = tmp_path / "input"
    folder.mkdir()
    return folder


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "output" / "nested"


@pytest.fixture
def write_image():
    """Write `pixels` to `path` with OpenCV and return the path."""
    def _write(path: Path, pixels: np.ndarray) -> Path:
        assert cv2.imwrite(str(path), pixels)
        return path
    return _write


@pytest.fixture
def model_file(tmp_path):
    """A path that exists; the fake repository never parses it."""
    path = tmp_path / "FSRCNN_x4.pb"
    path.write_bytes(b"not really a model")
    return path
