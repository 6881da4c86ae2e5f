"""Preview module for image output and progress display.

Components:
    export: Binary PPM writer/reader and Pillow-based export
    progress: Console progress bar
"""

from .export import (
    compute_rmse,
    decode_ppm,
    encode_ppm,
    image_to_uint8,
    read_ppm,
    save_image,
    save_ppm,
)
from .progress import BarCharacters, ProgressBar

__all__ = [
    # Export functions
    "compute_rmse",
    "decode_ppm",
    "encode_ppm",
    "image_to_uint8",
    "read_ppm",
    "save_image",
    "save_ppm",
    # Progress
    "BarCharacters",
    "ProgressBar",
]
