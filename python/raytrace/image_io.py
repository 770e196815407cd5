"""
Pillow adapter for tone-mapped frames.

The renderer itself never writes files; this module turns its row-major
(R, G, B) grids into images for the command line front end.
"""
import logging
import os
from typing import Sequence, Tuple

from PIL import Image

logger = logging.getLogger(__name__)

Pixel = Tuple[int, int, int]


def to_image(ldr_rows: Sequence[Sequence[Pixel]]) -> Image.Image:
    """Build an 8-bit RGB image from row-major pixel rows."""
    H = len(ldr_rows)
    W = len(ldr_rows[0]) if H else 0
    if W == 0:
        raise ValueError("cannot build an image from an empty frame")
    img = Image.new("RGB", (W, H))
    img.putdata([px for row in ldr_rows for px in row])
    return img


def frame_filename(pattern: str, index: int) -> str:
    """Expand a pattern such as 'frame_{:04d}.png' for one frame index."""
    return pattern.format(index)


def save_frame(ldr_rows: Sequence[Sequence[Pixel]], output_path: str) -> str:
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    to_image(ldr_rows).save(output_path)
    logger.info("Saved %s", output_path)
    return output_path
