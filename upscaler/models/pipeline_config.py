from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_TILE_SIZE = int(os.getenv("SR_TILE_SIZE", "1024"))


@dataclass(frozen=True)
class PipelineConfig:
    """
    Everything one batch run needs. Built once by the CLI, never mutated.
    """
    input_dir: Path
    output_dir: Path
    target_width: int
    target_height: int
    model_path: Path
    tile_size: int = DEFAULT_TILE_SIZE

    def __post_init__(self):
        if self.target_width <= 0 or self.target_height <= 0:
            raise ValueError(
                f"Target size must be positive, got {self.target_width}x{self.target_height}"
            )
        if self.tile_size <= 0:
            raise ValueError(f"Tile size must be positive, got {self.tile_size}")
