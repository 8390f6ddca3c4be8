"""
Color helpers shared by the badge validator.

A color sample is an RGB triple without alpha, written canonically as a
lowercase "#rrggbb" string. Packed integers use (r << 16) | (g << 8) | b.
Pixel buffers are uint8 arrays of shape (H, W, 4) in R, G, B, A order.
"""

import re
from typing import Iterable, List, Sequence, Set, Tuple

import numpy as np

COLOR_TOLERANCE = 30.0   # default max Euclidean RGB distance

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def normalize_hex(color: str) -> str:
    """Return `color` as "#rrggbb"; raise ValueError if it is not a 24-bit hex color."""
    m = _HEX_RE.match(color.strip()) if isinstance(color, str) else None
    if m is None:
        raise ValueError(f"not a #rrggbb color: {color!r}")
    return "#" + m.group(1).lower()


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    packed = int(normalize_hex(color)[1:], 16)
    return (packed >> 16) & 255, (packed >> 8) & 255, packed & 255


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return f"#{int(r):02x}{int(g):02x}{int(b):02x}"


def pack_rgb(rgb: np.ndarray) -> np.ndarray:
    """Pack the last axis (R, G, B[, A]) of a uint8 array into 24-bit ints; alpha is dropped."""
    rgb = rgb.astype(np.uint32)
    return (rgb[..., 0] << 16) | (rgb[..., 1] << 8) | rgb[..., 2]


def color_distance(color1: str, color2: str) -> float:
    """Euclidean distance between two colors in RGB space (0 .. ~441.67)."""
    a = np.array(hex_to_rgb(color1), dtype=np.float64)
    b = np.array(hex_to_rgb(color2), dtype=np.float64)
    return float(np.linalg.norm(a - b))


def are_colors_similar(color1: str, color2: str, tolerance: float = COLOR_TOLERANCE) -> bool:
    """True if the two colors are at most `tolerance` apart (inclusive)."""
    return color_distance(color1, color2) <= tolerance


def palette_array(palette: Iterable[str]) -> np.ndarray:
    """Stack a palette into a float (N, 3) array for vectorized distances."""
    return np.array([hex_to_rgb(c) for c in palette], dtype=np.float64).reshape(-1, 3)


def is_joyful_color(color: str, palette: Sequence[str], tolerance: float = COLOR_TOLERANCE) -> bool:
    """True if `color` is within `tolerance` of at least one palette entry."""
    refs = palette_array(palette)
    if len(refs) == 0:
        return False
    rgb = np.array(hex_to_rgb(color), dtype=np.float64)
    dists = np.linalg.norm(refs - rgb[None, :], axis=1)
    return bool((dists <= tolerance).any())


def extract_colors(buffer: np.ndarray, visible_only: bool = True) -> Set[str]:
    """
    Return the distinct "#rrggbb" colors of an RGBA buffer.

    Alpha is discarded, so pixels differing only in alpha collapse into one
    color. With `visible_only`, fully transparent pixels are skipped.
    """
    pixels = buffer.reshape(-1, buffer.shape[-1])
    if visible_only and buffer.shape[-1] == 4:
        pixels = pixels[pixels[:, 3] != 0]
    packed = np.unique(pack_rgb(pixels))
    return {rgb_to_hex((p >> 16) & 255, (p >> 8) & 255, p & 255) for p in packed.tolist()}


def find_missing_palette_colors(present: Iterable[str], required: Sequence[str]) -> List[str]:
    """
    Return, in the order of `required`, every required color with no exact
    match among `present`. Hex case is ignored; no tolerance is applied.
    """
    have = {normalize_hex(c) for c in present}
    return [c for c in required if normalize_hex(c) not in have]
