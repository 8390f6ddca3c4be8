"""
Command line entry point.

    badge validate <image_path>
    badge convert <image_path> <output.png> [--validate]

Reports are printed to stdout as JSON; logs go to stderr.
Exit codes: 0 valid/converted, 1 invalid badge, 2 bad usage or configuration (click),
3 unreadable or unwritable image.
"""

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional, Tuple

import click

from badge_config import PALETTE_PROFILES, BadgeConfig, palette_for_profile
from badge_converter import convert_file
from badge_io import BadgeIOError
from badge_validator import validate

logger = logging.getLogger(__name__)

EXIT_INVALID = 1
EXIT_USAGE = 2        # click.UsageError
EXIT_IO_ERROR = 3


def _emit(payload: dict) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _fail_io(exc: BadgeIOError) -> NoReturn:
    logger.error("%s", exc)
    _emit({"error": str(exc)})
    sys.exit(EXIT_IO_ERROR)


@click.group()
@click.option("--size", type=int, default=None, help="Badge width and height in pixels.")
@click.option("--tolerance", type=float, default=None, help="Max RGB distance to a palette color.")
@click.option("--margin", type=int, default=None, help="Exempt band inside the circle edge, in pixels.")
@click.option("--profile", type=click.Choice(sorted(PALETTE_PROFILES)), default=None,
              help="Reference palette profile.")
@click.option("--color", "colors", multiple=True, help="Palette color (#rrggbb); repeatable.")
@click.option("--max-pixels", type=int, default=None, help="Refuse images larger than this.")
@click.option("--log-level", default="WARNING", show_default=True,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False))
@click.pass_context
def main(ctx: click.Context, size: Optional[int], tolerance: Optional[float], margin: Optional[int],
         profile: Optional[str], colors: Tuple[str, ...], max_pixels: Optional[int],
         log_level: str) -> None:
    """Validate badge images or convert pictures into badges."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        palette = colors or None
        if profile and not colors:
            palette = palette_for_profile(profile)
        config = BadgeConfig().override(
            size=size, color_tolerance=tolerance, transparency_margin=margin,
            palette_profile=profile, joyful_colors=palette, max_pixels=max_pixels,
        )
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    ctx.obj = config


@main.command("validate")
@click.argument("image_path", type=click.Path(path_type=Path))
@click.pass_obj
def validate_command(config: BadgeConfig, image_path: Path) -> None:
    """Check that IMAGE_PATH is a valid badge."""
    try:
        report = validate(image_path, config)
    except BadgeIOError as exc:
        _fail_io(exc)
    _emit(report)
    if report["status"] != "pass":
        sys.exit(EXIT_INVALID)


@main.command("convert")
@click.argument("image_path", type=click.Path(path_type=Path))
@click.argument("output_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--validate", "then_validate", is_flag=True,
              help="Validate the written badge and include the report.")
@click.pass_obj
def convert_command(config: BadgeConfig, image_path: Path, output_path: Path,
                    then_validate: bool) -> None:
    """Resize IMAGE_PATH into a circular badge saved as OUTPUT_PATH (PNG)."""
    try:
        summary = convert_file(image_path, output_path, config)
        if then_validate:
            summary["validation"] = validate(output_path, config)
    except BadgeIOError as exc:
        _fail_io(exc)
    _emit(summary)
    if then_validate and summary["validation"]["status"] != "pass":
        sys.exit(EXIT_INVALID)


if __name__ == "__main__":
    main()
