"""
Tests for the batch loop: per-file failures are skipped, fatal ones propagate.
"""
import io
import logging

import pytest
from PIL import Image as PILImage

from upscaler.models.pipeline_config import PipelineConfig
from upscaler.pipeline.batch_enhancer import process_folder
from upscaler.services.image_service import ImageService
from upscaler.exceptions import (
    ImageWriteError,
    InputFolderNotFoundError,
    NoImagesFoundError,
)

from conftest import NearestUpscaler, ExplodingUpscaler


def _config(input_dir, output_dir, model_file, width=50, height=30, tile_size=1024):
    return PipelineConfig(
        input_dir=input_dir,
        output_dir=output_dir,
        target_width=width,
        target_height=height,
        model_path=model_file,
        tile_size=tile_size,
    )


class TestProcessFolder:

    def test_valid_images_are_written_with_suffix(self, input_dir, output_dir, model_file,
                                                   write_image, sample_pixels):
        write_image(input_dir / "a.png", sample_pixels)
        write_image(input_dir / "b.bmp", sample_pixels)
        out = io.StringIO()

        result = process_folder(_config(input_dir, output_dir, model_file), NearestUpscaler(), stream=out)

        assert sorted(p.name for p in output_dir.iterdir()) == ["a_upscaled.png", "b_upscaled.bmp"]
        assert result.total == 2
        assert result.succeeded == 2
        assert result.failed == []
        assert "✅ Saved:" in out.getvalue()
        assert out.getvalue().rstrip().endswith("All images processed!")

    def test_output_has_requested_size(self, input_dir, output_dir, model_file,
                                       write_image, sample_pixels):
        """Resize ignores aspect ratio: 24x16 input, 31x77 output."""
        write_image(input_dir / "a.png", sample_pixels)
        process_folder(_config(input_dir, output_dir, model_file, 31, 77), NearestUpscaler(),
                       stream=io.StringIO())
        with PILImage.open(output_dir / "a_upscaled.png") as written:
            assert written.size == (31, 77)
            assert written.mode == "RGB"

    def test_corrupt_image_is_skipped(self, input_dir, output_dir, model_file,
                                      write_image, sample_pixels, caplog):
        (input_dir / "bad.jpg").write_bytes(b"corrupt bytes")
        write_image(input_dir / "good.png", sample_pixels)

        with caplog.at_level(logging.ERROR, logger="upscaler"):
            result = process_folder(_config(input_dir, output_dir, model_file), NearestUpscaler(),
                                    stream=io.StringIO())

        assert [p.name for p in output_dir.iterdir()] == ["good_upscaled.png"]
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "Failed to read" in errors[0].getMessage()
        assert [p.name for p in result.failed] == ["bad.jpg"]
        assert result.succeeded == 1

    def test_tile_failure_skips_only_that_image(self, input_dir, output_dir, model_file,
                                                write_image, sample_pixels, caplog):
        write_image(input_dir / "a.png", sample_pixels)
        write_image(input_dir / "b.png", sample_pixels)

        with caplog.at_level(logging.ERROR, logger="upscaler"):
            result = process_folder(_config(input_dir, output_dir, model_file),
                                    ExplodingUpscaler(fail_on=1), stream=io.StringIO())

        assert [p.name for p in result.failed] == ["a.png"]
        assert [p.name for p in output_dir.iterdir()] == ["b_upscaled.png"]
        assert "Failed to enhance" in caplog.text

    def test_write_failure_is_logged_and_skipped(self, input_dir, output_dir, model_file,
                                                 write_image, sample_pixels, caplog):
        write_image(input_dir / "a.png", sample_pixels)

        class BrokenDisk(ImageService):
            def save(self, image):
                raise ImageWriteError(f"disk full: {image.path}")

        with caplog.at_level(logging.ERROR, logger="upscaler"):
            result = process_folder(_config(input_dir, output_dir, model_file), NearestUpscaler(),
                                    image_service=BrokenDisk(), stream=io.StringIO())

        assert result.succeeded == 0
        assert len(result.failed) == 1
        assert "Failed to write" in caplog.text

    def test_progress_reaches_done(self, input_dir, output_dir, model_file,
                                   write_image, sample_pixels):
        write_image(input_dir / "a.png", sample_pixels)
        out = io.StringIO()
        process_folder(_config(input_dir, output_dir, model_file), NearestUpscaler(), stream=out)
        text = out.getvalue()
        assert "\rProcessing a.png [0%]" in text
        assert "\rProcessing Done [100%]\n" in text

    def test_empty_folder_is_fatal(self, input_dir, output_dir, model_file):
        with pytest.raises(NoImagesFoundError):
            process_folder(_config(input_dir, output_dir, model_file), NearestUpscaler(),
                           stream=io.StringIO())
        assert list(output_dir.iterdir()) == []

    def test_missing_folder_is_fatal(self, tmp_path, output_dir, model_file):
        with pytest.raises(InputFolderNotFoundError):
            process_folder(_config(tmp_path / "missing", output_dir, model_file), NearestUpscaler(),
                           stream=io.StringIO())

    def test_model_is_shared_across_files(self, input_dir, output_dir, model_file,
                                          write_image, sample_pixels):
        for name in ["a.png", "b.png", "c.png"]:
            write_image(input_dir / name, sample_pixels)
        model = NearestUpscaler()
        process_folder(_config(input_dir, output_dir, model_file), model, stream=io.StringIO())
        assert len(model.calls) == 3


class TestPipelineConfig:

    @pytest.mark.parametrize("width,height,tile", [(0, 10, 8), (10, -1, 8), (10, 10, 0)])
    def test_rejects_non_positive_values(self, tmp_path, width, height, tile):
        with pytest.raises(ValueError):
            PipelineConfig(tmp_path, tmp_path, width, height, tmp_path / "m.pb", tile)
