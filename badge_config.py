"""
Badge configuration.

Defaults are plain module constants; BadgeConfig (pydantic settings) bundles
them so callers and the CLI can override any of them per run, or from the
environment:

    BADGE_SIZE                 canonical width/height in pixels (512)
    BADGE_JOYFUL_COLORS        comma-separated hex colors, e.g. "#FF0000,#00FF00"
    BADGE_PALETTE_PROFILE      "joyful" (8 colors) or "primary" (3 colors)
    BADGE_COLOR_TOLERANCE      max Euclidean RGB distance to a palette color (30)
    BADGE_TRANSPARENCY_MARGIN  width of the exempt band inside the circle edge (0)
    BADGE_MAX_PIXELS           refuse to decode images larger than this
"""

from typing import Annotated, Any, Optional, Tuple

from pydantic import Field, PositiveInt, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from badge_colors import COLOR_TOLERANCE, normalize_hex

BADGE_SIZE          = 512
TRANSPARENCY_MARGIN = 0       # px; 0 keeps the exact circle test
MAX_PIXELS          = 4096 * 4096

PALETTE_PROFILES = {
    "primary": ('#FF0000', '#00FF00', '#0000FF'),
    "joyful":  ('#FF0000', '#00FF00', '#0000FF', '#FFFF00',
                '#FF00FF', '#00FFFF', '#FFA500', '#008000'),
}
DEFAULT_PROFILE = "joyful"
JOYFUL_COLORS = PALETTE_PROFILES[DEFAULT_PROFILE]


def palette_for_profile(name: str) -> Tuple[str, ...]:
    """Return the normalized palette of a strictness profile."""
    try:
        colors = PALETTE_PROFILES[name]
    except KeyError:
        known = ", ".join(sorted(PALETTE_PROFILES))
        raise ValueError(f"unknown palette profile {name!r} (expected one of: {known})") from None
    return tuple(normalize_hex(c) for c in colors)


def parse_palette(value: str) -> Tuple[str, ...]:
    """Parse a comma-separated list of hex colors."""
    return tuple(normalize_hex(c) for c in value.split(",") if c.strip())


class BadgeConfig(BaseSettings):
    """Everything the validator and converter need to know about a badge."""

    size: int = Field(default=BADGE_SIZE, gt=0, description="Badge width and height in pixels")
    palette_profile: str = Field(default=DEFAULT_PROFILE, description="Palette used when no colors are given")
    joyful_colors: Annotated[Tuple[str, ...], NoDecode] = Field(
        default=(), description="Reference palette, normalized to #rrggbb"
    )
    color_tolerance: float = Field(default=COLOR_TOLERANCE, ge=0, description="Max RGB distance to a palette color")
    transparency_margin: int = Field(default=TRANSPARENCY_MARGIN, ge=0, description="Exempt band inside the circle edge")
    max_pixels: Optional[PositiveInt] = Field(default=MAX_PIXELS, description="Largest image accepted for decoding")

    model_config = SettingsConfigDict(
        env_prefix="BADGE_",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    @model_validator(mode="before")
    @classmethod
    def palette_from_profile(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("joyful_colors") is None:
            profile = data.get("palette_profile") or DEFAULT_PROFILE
            data = {**data, "joyful_colors": palette_for_profile(profile)}
        return data

    @field_validator("palette_profile")
    @classmethod
    def known_profile(cls, value: str) -> str:
        palette_for_profile(value)
        return value

    @field_validator("joyful_colors", mode="before")
    @classmethod
    def normalize_palette(cls, value: Any) -> Tuple[str, ...]:
        palette = parse_palette(value) if isinstance(value, str) else tuple(normalize_hex(c) for c in value)
        if not palette:
            raise ValueError("palette must contain at least one color")
        return palette

    def override(self, **changes) -> "BadgeConfig":
        """Return a validated copy with every non-None keyword applied."""
        values = self.model_dump()
        values.update({k: v for k, v in changes.items() if v is not None})
        return type(self)(**values)
