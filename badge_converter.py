"""
Turn an arbitrary picture into a badge: forced square resize to the badge
size, then a circular alpha mask. The mask uses the same circle as the
validator, so a converted opaque picture always passes the geometric checks.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
from PIL import Image

from badge_config import BADGE_SIZE, BadgeConfig
from badge_io import ImageSource, encode_png, load_image, write_bytes
from badge_validator import inscribed_circle_mask

logger = logging.getLogger(__name__)

RESAMPLE = Image.Resampling.LANCZOS


def apply_circle_mask(image: Image.Image) -> Image.Image:
    """Make every pixel outside the inscribed circle fully transparent."""
    rgba = np.array(image.convert("RGBA"), dtype=np.uint8)
    inside = inscribed_circle_mask(rgba.shape[0])
    rgba[..., 3] = np.where(inside, rgba[..., 3], 0).astype(np.uint8)
    return Image.fromarray(rgba)


def convert_to_badge(image: Image.Image, size: int = BADGE_SIZE,
                     resample: int = RESAMPLE) -> Image.Image:
    """Resize `image` to size x size (aspect ratio not kept) and mask it into a circle."""
    resized = image.convert("RGBA").resize((size, size), resample)
    return apply_circle_mask(resized)


def convert_to_png(source: ImageSource, config: Optional[BadgeConfig] = None) -> bytes:
    config = config or BadgeConfig()
    image = load_image(source, max_pixels=config.max_pixels)
    return encode_png(convert_to_badge(image, size=config.size))


def convert_file(input_path: ImageSource, output_path: Union[str, Path],
                 config: Optional[BadgeConfig] = None) -> Dict[str, Any]:
    """
    Convert the image at `input_path` and write the badge PNG to `output_path`.

    Returns a JSON-compatible summary. Raises BadgeIOError on read/decode/write failures.
    """
    config = config or BadgeConfig()
    data = convert_to_png(input_path, config)
    path = write_bytes(data, output_path)
    logger.info("Conversion successful. Badge saved at: %s", path)
    return {
        "input": "<bytes>" if isinstance(input_path, bytes) else str(input_path),
        "output": str(path),
        "size": config.size,
        "bytes": len(data),
    }
