from __future__ import annotations

from functools import lru_cache
import logging

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from pageplot.raster.canvas import RGBA, blend_coverage


LOGGER = logging.getLogger(__name__)

DEFAULT_FONT_SIZE_PX = 12.0
# Helvetica first, then metric-compatible sans faces; Pillow searches the
# platform font directories for bare file names.
SANS_FONT_FILES = (
    "Helvetica.ttc",
    "Helvetica.ttf",
    "Arial.ttf",
    "LiberationSans-Regular.ttf",
    "DejaVuSans.ttf",
)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    *,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    rotate_deg: int = 0,
) -> None:
    """Blend text whose (rotated) bounding box has its top-left corner at (x, y)."""
    if not text:
        return
    coverage = _coverage(text, _pixel_size(font_size_px))
    turns = _quarter_turns(rotate_deg)
    if turns:
        coverage = np.rot90(coverage, k=turns)
    blend_coverage(dst, x, y, coverage, color)


def text_size(text: str, *, font_size_px: float = DEFAULT_FONT_SIZE_PX, rotate_deg: int = 0) -> tuple[int, int]:
    """Pixel (width, height) of the rendered text box, swapped for odd quarter turns."""
    font = load_font(_pixel_size(font_size_px))
    if text:
        left, top, right, bottom = font.getbbox(text)
        size = (max(0, int(right - left)), max(1, int(bottom - top)))
    else:
        ascent, descent = font.getmetrics()
        size = (0, max(1, int(ascent + descent)))
    if _quarter_turns(rotate_deg) % 2:
        return size[1], size[0]
    return size


@lru_cache(maxsize=32)
def load_font(size_px: int) -> Font:
    for name in SANS_FONT_FILES:
        try:
            return ImageFont.truetype(name, size=size_px)
        except OSError:
            continue
    LOGGER.warning("no sans-serif TrueType font found (tried %s); using Pillow's built-in font", ", ".join(SANS_FONT_FILES))
    return ImageFont.load_default(size=size_px)


@lru_cache(maxsize=512)
def _coverage(text: str, size_px: int) -> np.ndarray:
    font = load_font(size_px)
    left, top, right, bottom = font.getbbox(text)
    mask = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(mask).text((-left, -top), text, fill=255, font=font)
    out = np.asarray(mask, dtype=np.uint8)
    out.flags.writeable = False
    return out


def _pixel_size(font_size_px: float) -> int:
    return max(1, int(round(font_size_px)))


def _quarter_turns(rotate_deg: int) -> int:
    if rotate_deg % 90 != 0:
        raise ValueError(f"text can only be rotated by multiples of 90 degrees, not {rotate_deg}")
    return (rotate_deg // 90) % 4
