"""
Image loading and PNG encoding for badges.

I/O failures are raised as BadgeIOError subclasses so callers can tell them
apart from validation verdicts, which are ordinary return values.
"""

import io
import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

ImageSource = Union[str, Path, bytes]


class BadgeIOError(Exception):
    """Base class for failures reading or writing badge images."""


class ImageNotFoundError(BadgeIOError, FileNotFoundError):
    pass


class ImageDecodeError(BadgeIOError, ValueError):
    pass


class ImageReadError(BadgeIOError, OSError):
    """The file exists but could not be read."""


class ImageEncodeError(BadgeIOError):
    pass


def _describe(source: ImageSource) -> str:
    if isinstance(source, bytes):
        return f"<{len(source)} bytes>"
    return str(source)


def load_image(source: ImageSource, max_pixels: Optional[int] = None) -> Image.Image:
    """
    Decode `source` (a path or raw encoded bytes) into an RGBA Pillow image.

    Images with more than `max_pixels` pixels are refused from their header,
    before the pixel data is decoded.

    Raises:
        ImageNotFoundError: the path does not exist or is not a file.
        ImageReadError: the file exists but cannot be read.
        ImageDecodeError: the data is not an image Pillow can decode, or is too large.
    """
    name = _describe(source)
    if isinstance(source, bytes):
        fp = io.BytesIO(source)
    else:
        path = Path(source)
        if not path.is_file():
            raise ImageNotFoundError(f"image not found: {path}")
        fp = path

    try:
        with Image.open(fp) as img:
            width, height = img.size
            if max_pixels is not None and width * height > max_pixels:
                raise ImageDecodeError(
                    f"image too large: {width}x{height} exceeds {max_pixels} pixels ({name})"
                )
            rgba = img.convert("RGBA")
    except FileNotFoundError as exc:
        raise ImageNotFoundError(f"image not found: {name}") from exc
    except (PermissionError, IsADirectoryError) as exc:
        raise ImageReadError(f"cannot read image {name}: {exc}") from exc
    except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
        raise ImageDecodeError(f"cannot decode image {name}: {exc}") from exc
    except OSError as exc:
        # truncated or corrupt data surfaces as OSError once pixels are read
        raise ImageDecodeError(f"cannot decode image {name}: {exc}") from exc

    logger.debug("Loaded %s: %dx%d (%s)", name, width, height, rgba.mode)
    return rgba


def to_pixel_buffer(image: Image.Image) -> np.ndarray:
    """Return an (H, W, 4) uint8 array in R, G, B, A channel order."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return np.array(image, dtype=np.uint8)


def load_pixel_buffer(source: ImageSource, max_pixels: Optional[int] = None) -> np.ndarray:
    return to_pixel_buffer(load_image(source, max_pixels=max_pixels))


def encode_png(image: Image.Image) -> bytes:
    """Serialize an image to PNG bytes, keeping its alpha channel."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    out = io.BytesIO()
    try:
        image.save(out, format="PNG")
    except (OSError, ValueError) as exc:
        raise ImageEncodeError(f"cannot encode PNG: {exc}") from exc
    return out.getvalue()


def write_bytes(data: bytes, output_path: Union[str, Path]) -> Path:
    path = Path(output_path)
    try:
        path.write_bytes(data)
    except OSError as exc:
        raise ImageEncodeError(f"cannot write {path}: {exc}") from exc
    logger.debug("Wrote %d bytes to %s", len(data), path)
    return path
