"""
Badge Image Validator

Implements the checks a badge must pass, in this order:
- Size exactly BADGE_SIZE x BADGE_SIZE (512 by default)
- At least one fully transparent pixel (transparent background)
- No transparent pixel inside the inscribed circle (distance from the
  center (size/2, size/2) to the integer pixel coordinate <= size/2)
- Every distinct visible color within COLOR_TOLERANCE (Euclidean RGB) of
  a "joyful" palette color

The first failing check decides the verdict; each failure kind has one
diagnostic message (in French, as the badge tool always reported them).

Use as a module:
    from badge_validator import validate
    report = validate("path/to/badge.png")

or from the command line: `badge validate <image_path>`.
"""

import enum
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Sequence, Set, Union

import numpy as np

from badge_colors import (
    COLOR_TOLERANCE,
    extract_colors,
    find_missing_palette_colors,
    is_joyful_color,
)
from badge_config import BADGE_SIZE, TRANSPARENCY_MARGIN, BadgeConfig
from badge_io import ImageSource, load_pixel_buffer

logger = logging.getLogger(__name__)


class FailureKind(enum.Enum):
    WRONG_SIZE = "wrong_size"
    NO_TRANSPARENCY = "no_transparency"
    TRANSPARENT_IN_CIRCLE = "transparent_in_circle"
    UNJOYFUL_COLOR = "unjoyful_color"


MESSAGES = {
    None:                               "Le badge est valide.",
    FailureKind.WRONG_SIZE:             "Le badge n'est pas à la bonne taille.",
    FailureKind.NO_TRANSPARENCY:        "Le badge n'a pas de fond transparent.",
    FailureKind.TRANSPARENT_IN_CIRCLE:  "Le badge contient des pixels transparents dans le cercle.",
    FailureKind.UNJOYFUL_COLOR:         "Le badge ne contient pas les couleurs joyeuses requises.",
}


@dataclass(frozen=True)
class Verdict:
    """Outcome of one validation: valid when `kind` is None."""

    kind: Optional[FailureKind] = None
    color: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind is None

    def __bool__(self) -> bool:
        return self.ok

    @property
    def message(self) -> str:
        msg = MESSAGES[self.kind]
        if self.color is not None:
            msg = f"{msg} (couleur : {self.color})"
        return msg


VALID = Verdict()


def validate_size(width: int, height: int, target_size: int) -> bool:
    return width == target_size and height == target_size


def is_circle_pixel(x: int, y: int, badge_size: int) -> bool:
    """True if pixel (x, y) lies inside the inscribed circle of a square badge."""
    radius = badge_size / 2.0
    return float(np.hypot(x - radius, y - radius)) <= radius


def circle_distances(size: int) -> np.ndarray:
    """Distance from the badge center to every integer pixel coordinate, shape (size, size)."""
    center = size / 2.0
    ys, xs = np.mgrid[0:size, 0:size]
    return np.hypot(xs - center, ys - center)


def inscribed_circle_mask(size: int, margin: float = 0) -> np.ndarray:
    """
    Boolean (size, size) mask of the pixels that must be opaque.

    With a margin, pixels within `margin` of the circle edge are left out
    of the mask so anti-aliased rims are tolerated.
    """
    return circle_distances(size) <= (size / 2.0) - margin


def has_transparency(buffer: np.ndarray) -> bool:
    return bool((buffer[..., 3] == 0).any())


def validate_geometry(buffer: np.ndarray, size: int = BADGE_SIZE,
                      margin: float = TRANSPARENCY_MARGIN) -> Verdict:
    """Check size, then background transparency, then circle opacity."""
    height, width = buffer.shape[:2]
    if not validate_size(width, height, size):
        logger.debug("Wrong size: %dx%d, expected %dx%d", width, height, size, size)
        return Verdict(FailureKind.WRONG_SIZE)

    if not has_transparency(buffer):
        return Verdict(FailureKind.NO_TRANSPARENCY)

    inside = inscribed_circle_mask(size, margin)
    holes = inside & (buffer[..., 3] == 0)
    if holes.any():
        ys, xs = np.nonzero(holes)
        logger.debug("%d transparent pixel(s) inside the circle, first at (%d, %d)",
                     len(xs), xs[0], ys[0])
        return Verdict(FailureKind.TRANSPARENT_IN_CIRCLE)

    return VALID


def validate_palette(colors: Iterable[str], palette: Sequence[str],
                     tolerance: float = COLOR_TOLERANCE) -> Verdict:
    """
    Every color must be within `tolerance` of some palette entry.

    Colors are checked in sorted order, so the reported offender is stable.
    An empty color set passes.
    """
    for color in sorted(colors):
        if not is_joyful_color(color, palette, tolerance):
            logger.debug("Color %s is farther than %s from every palette color", color, tolerance)
            return Verdict(FailureKind.UNJOYFUL_COLOR, color=color)
    return VALID


def validate_badge(buffer: np.ndarray, config: Optional[BadgeConfig] = None,
                   colors: Optional[Set[str]] = None) -> Verdict:
    """
    Run the geometric checks, then the palette check, on an RGBA buffer.

    `colors` may carry the already extracted colors of `buffer`.
    """
    config = config or BadgeConfig()
    verdict = validate_geometry(buffer, size=config.size, margin=config.transparency_margin)
    if verdict.ok:
        if colors is None:
            colors = extract_colors(buffer)
        verdict = validate_palette(colors, config.joyful_colors, config.color_tolerance)
    return verdict


def validate(image_path: Union[ImageSource, np.ndarray],
             config: Optional[BadgeConfig] = None) -> Dict[str, Any]:
    """
    Validate a badge image and return a JSON-compatible report:
      file, status, reason, message, color, width, height, unique_colors, missing_colors

    Raises BadgeIOError if the image cannot be read; that is not a verdict.
    """
    t0 = time.time()
    config = config or BadgeConfig()

    if isinstance(image_path, np.ndarray):
        buffer, name = image_path, "<buffer>"
    else:
        buffer = load_pixel_buffer(image_path, max_pixels=config.max_pixels)
        name = "<bytes>" if isinstance(image_path, bytes) else str(Path(image_path))

    colors = extract_colors(buffer)
    verdict = validate_badge(buffer, config, colors=colors)
    height, width = buffer.shape[:2]

    report = {
        "file": name,
        "status": "pass" if verdict.ok else "fail",
        "reason": verdict.kind.value if verdict.kind else None,
        "message": verdict.message,
        "color": verdict.color,
        "width": int(width),
        "height": int(height),
        "unique_colors": len(colors),
        "missing_colors": find_missing_palette_colors(colors, config.joyful_colors),
    }

    logger.info("%s: %s", name, verdict.message)
    logger.debug("Validated %s in %.3fs", name, time.time() - t0)
    return report
