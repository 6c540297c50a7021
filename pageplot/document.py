from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from enum import Enum
import logging
import math
from pathlib import Path
from typing import Iterator, NamedTuple

import numpy as np
from PIL import Image

from pageplot.errors import PlotConfigError
from pageplot.layout import Point, Size
from pageplot.raster import RGBA, blit_rgb, draw_dots, draw_polyline, draw_text, new_canvas, text_size
from pageplot.util import to_count


LOGGER = logging.getLogger(__name__)

POINTS_PER_INCH = 72.0
MAX_PAGE_PIXELS = 2**15


class Color(NamedTuple):
    red: int
    green: int
    blue: int

    @classmethod
    def gray(cls, level: int) -> "Color":
        return cls(level, level, level)

    def rgba(self) -> RGBA:
        return (self.red, self.green, self.blue, 255)


class Alignment(Enum):
    # (horizontal, vertical) position of the anchor on the text box
    TOP_LEFT = ("left", "top")
    TOP_CENTER = ("center", "top")
    TOP_RIGHT = ("right", "top")
    CENTER_LEFT = ("left", "center")
    CENTER = ("center", "center")
    CENTER_RIGHT = ("right", "center")
    BOTTOM_LEFT = ("left", "bottom")
    BOTTOM_CENTER = ("center", "bottom")
    BOTTOM_RIGHT = ("right", "bottom")


_H_OFFSET = {"left": 0.0, "center": -0.5, "right": -1.0}
_V_OFFSET = {"top": -1.0, "center": -0.5, "bottom": 0.0}


@dataclass(frozen=True)
class Matrix:
    """2-D affine transform in PDF row-vector form ``[a b 0; c d 0; e f 1]``.

    ``m1 * m2`` applies ``m1`` first and then ``m2``.
    """

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> "Matrix":
        return cls()

    @classmethod
    def scale(cls, sx: float, sy: float) -> "Matrix":
        return cls(a=sx, d=sy)

    @classmethod
    def translate(cls, tx: float, ty: float) -> "Matrix":
        return cls(e=tx, f=ty)

    @classmethod
    def rotate_deg(cls, degrees: float) -> "Matrix":
        if degrees % 90 == 0:
            # exact quarter turns keep text axis-aligned
            turns = int(degrees // 90) % 4
            cos, sin = ((1, 0), (0, 1), (-1, 0), (0, -1))[turns]
        else:
            rad = math.radians(degrees)
            cos, sin = math.cos(rad), math.sin(rad)
        return cls(a=cos, b=sin, c=-sin, d=cos)

    def __mul__(self, other: "Matrix") -> "Matrix":
        return Matrix(
            a=self.a * other.a + self.b * other.c,
            b=self.a * other.b + self.b * other.d,
            c=self.c * other.a + self.d * other.c,
            d=self.c * other.b + self.d * other.d,
            e=self.e * other.a + self.f * other.c + other.e,
            f=self.e * other.b + self.f * other.d + other.f,
        )

    def apply(self, x, y):
        return (self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)

    def quarter_turns(self) -> int:
        angle = math.degrees(math.atan2(self.b, self.a))
        turns = round(angle / 90.0)
        if abs(angle - turns * 90.0) > 1e-6:
            raise ValueError(f"text can only be drawn at quarter-turn rotations, not {angle:.3f} degrees")
        return turns % 4


@dataclass
class GraphicsState:
    color: Color = Color.gray(0)
    line_width: float = 1.0
    ctm: Matrix = field(default_factory=Matrix.identity)
    # device-pixel box (x0, y0, x1, y1), end-exclusive
    clip: tuple[int, int, int, int] | None = None


class Page:
    """One page of a Document: PDF-style drawing on an RGBA raster.

    Coordinates are page units with the origin at the bottom-left corner.
    """

    def __init__(self, size: Size, *, scale: float, font_size: float) -> None:
        self.size = size
        self.scale = scale
        self.font_size = font_size
        px_w = to_count(size.width * scale, what="page width in pixels", limit=MAX_PAGE_PIXELS)
        px_h = to_count(size.height * scale, what="page height in pixels", limit=MAX_PAGE_PIXELS)
        if px_w == 0 or px_h == 0:
            raise PlotConfigError(f"page size {size.width} x {size.height} is empty")
        self.canvas = new_canvas(px_w, px_h)
        self._state = GraphicsState()
        self._saved: list[GraphicsState] = []
        self._path: list[tuple[float, float]] = []

    # --- state -------------------------------------------------------------

    @property
    def state(self) -> GraphicsState:
        return self._state

    def set_color(self, color: Color) -> "Page":
        self._state.color = color
        return self

    def set_line_width(self, width: float) -> "Page":
        self._state.line_width = width
        return self

    def transform(self, matrix: Matrix) -> "Page":
        self._state.ctm = matrix * self._state.ctm
        return self

    def set_clipping_box(self, origin: Point, size: Size) -> "Page":
        corners = [
            self._to_device(origin.x, origin.y),
            self._to_device(origin.x + size.width, origin.y + size.height),
        ]
        xs = [c[0] for c in corners]
        ys = [c[1] for c in corners]
        box = (
            max(0, math.floor(min(xs))),
            max(0, math.floor(min(ys))),
            min(self.canvas.shape[1], math.ceil(max(xs))),
            min(self.canvas.shape[0], math.ceil(max(ys))),
        )
        current = self._state.clip
        if current is not None:
            box = (max(box[0], current[0]), max(box[1], current[1]), min(box[2], current[2]), min(box[3], current[3]))
        self._state.clip = box
        return self

    @contextmanager
    def saved_state(self) -> Iterator["Page"]:
        self._saved.append(replace(self._state))
        try:
            yield self
        finally:
            self._state = self._saved.pop()

    # --- paths -------------------------------------------------------------

    def move_to(self, point: Point) -> "Page":
        self._path = [(point.x, point.y)]
        return self

    def line_to(self, point: Point) -> "Page":
        self._path.append((point.x, point.y))
        return self

    def end_line(self) -> "Page":
        if self._path:
            xs = np.asarray([p[0] for p in self._path], dtype=np.float64)
            ys = np.asarray([p[1] for p in self._path], dtype=np.float64)
            self._stroke(xs, ys)
        self._path = []
        return self

    def draw_rectangle(self, origin: Point, size: Size) -> "Page":
        x0, y0 = origin
        x1, y1 = x0 + size.width, y0 + size.height
        self._stroke(np.asarray([x0, x1, x1, x0, x0]), np.asarray([y0, y0, y1, y1, y0]))
        return self

    def draw_line(self, xs: np.ndarray, ys: np.ndarray) -> "Page":
        """Stroke a polyline; non-finite points split it into separate runs."""
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        for start, stop in _finite_runs(np.isfinite(xs) & np.isfinite(ys)):
            self._stroke(xs[start:stop], ys[start:stop])
        return self

    def draw_dots(self, xs: np.ndarray, ys: np.ndarray, size: float) -> "Page":
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        keep = np.isfinite(xs) & np.isfinite(ys)
        dx, dy = self._to_device(xs[keep], ys[keep])
        target, ox, oy = self._target()
        size_px = max(1, int(round(size * self.scale)))
        lx = dx - ox
        ly = dy - oy
        # only dots that can touch the target reach the integer conversion
        reach = size_px // 2 + 1
        near = (lx >= -reach) & (lx <= target.shape[1] + reach) & (ly >= -reach) & (ly <= target.shape[0] + reach)
        px = np.rint(lx[near]).astype(np.int64)
        py = np.rint(ly[near]).astype(np.int64)
        draw_dots(target, px, py, self._state.color.rgba(), size=size_px)
        return self

    def _stroke(self, xs: np.ndarray, ys: np.ndarray) -> None:
        if xs.size == 0:
            return
        dx, dy = self._to_device(xs, ys)
        target, ox, oy = self._target()
        width = max(1, int(round(self._state.line_width * self.scale)))
        draw_polyline(target, dx - ox, dy - oy, self._state.color.rgba(), width=width)

    # --- text --------------------------------------------------------------

    def width_of(self, text: str) -> float:
        return measure_text(text, font_size=self.font_size, scale=self.scale)

    def draw_text(self, point: Point, alignment: Alignment, text: str) -> "Page":
        if not text:
            return self
        ctm = self._state.ctm
        turns = ctm.quarter_turns()
        w_px, h_px = text_size(text, font_size_px=self.font_size * self.scale)
        w, h = w_px / self.scale, h_px / self.scale

        # text box in its own frame: u along the baseline, v towards the top
        horizontal, vertical = alignment.value
        u0 = _H_OFFSET[horizontal] * w
        v0 = _V_OFFSET[vertical] * h
        cos, sin = ((1, 0), (0, 1), (-1, 0), (0, -1))[turns]
        ax, ay = ctm.apply(point.x, point.y)
        corners_x = []
        corners_y = []
        for u in (u0, u0 + w):
            for v in (v0, v0 + h):
                corners_x.append(ax + u * cos - v * sin)
                corners_y.append(ay + u * sin + v * cos)

        dev_x, dev_y = self._page_to_device(np.asarray(corners_x), np.asarray(corners_y))
        target, ox, oy = self._target()
        draw_text(
            target,
            int(round(float(np.min(dev_x)))) - ox,
            int(round(float(np.min(dev_y)))) - oy,
            text,
            self._state.color.rgba(),
            font_size_px=self.font_size * self.scale,
            rotate_deg=turns * 90,
        )
        return self

    # --- images ------------------------------------------------------------

    def add_image_at(self, rgb: np.ndarray, origin: Point) -> "Page":
        """Place an (h, w, 3) image over [x, x+w] x [y, y+h] in user space, row 0 on top."""
        ctm = self._state.ctm
        if ctm.b != 0 or ctm.c != 0:
            raise ValueError("images can only be placed with scale/translate transforms")
        height, width, _ = rgb.shape
        dx, dy = self._to_device(
            np.asarray([origin.x, origin.x + width], dtype=np.float64),
            np.asarray([origin.y, origin.y + height], dtype=np.float64),
        )
        tw = int(round(abs(float(dx[1] - dx[0]))))
        th = int(round(abs(float(dy[1] - dy[0]))))
        if tw == 0 or th == 0:
            return self

        image = Image.fromarray(np.ascontiguousarray(rgb, dtype=np.uint8), "RGB")
        if dx[1] < dx[0]:
            image = image.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
        # the top row sits at the larger user-space y, i.e. the smaller device y
        if dy[1] > dy[0]:
            image = image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
        patch = np.asarray(image.resize((tw, th), Image.Resampling.NEAREST), dtype=np.uint8)

        target, ox, oy = self._target()
        left = int(round(float(min(dx))))
        top = int(round(float(min(dy))))
        blit_rgb(target, patch, left - ox, top - oy)
        return self

    # --- device mapping ----------------------------------------------------

    def _to_device(self, x, y):
        px, py = self._state.ctm.apply(x, y)
        return self._page_to_device(px, py)

    def _page_to_device(self, x, y):
        return (x * self.scale, self.canvas.shape[0] - y * self.scale)

    def _target(self) -> tuple[np.ndarray, int, int]:
        clip = self._state.clip
        if clip is None:
            return self.canvas, 0, 0
        x0, y0, x1, y1 = clip
        x1 = max(x0, x1)
        y1 = max(y0, y1)
        return self.canvas[y0:y1, x0:x1], x0, y0


class Document:
    """Ordered pages rendered at ``resolution`` dots per inch."""

    def __init__(self, *, resolution: float = 144.0, font_size: float = 12.0) -> None:
        self.resolution = resolution
        self.font_size = font_size
        self.pages: list[Page] = []

    @property
    def scale(self) -> float:
        return self.resolution / POINTS_PER_INCH

    def add_page(self, size: Size) -> Page:
        page = Page(size, scale=self.scale, font_size=self.font_size)
        self.pages.append(page)
        return page

    def width_of(self, text: str) -> float:
        return measure_text(text, font_size=self.font_size, scale=self.scale)

    def write_to(self, path: str | Path) -> None:
        out = Path(path)
        if not self.pages:
            raise PlotConfigError("document has no pages to write")
        fmt = Image.registered_extensions().get(out.suffix.lower())
        if fmt is None:
            raise PlotConfigError(f"unsupported output format: {out.suffix or out.name!r}")
        if len(self.pages) > 1 and fmt not in Image.SAVE_ALL:
            raise PlotConfigError(f"{fmt} holds a single page; {len(self.pages)} pages need a .pdf output")

        images = [Image.fromarray(page.canvas, "RGBA").convert("RGB") for page in self.pages]
        first, rest = images[0], images[1:]
        if rest:
            first.save(out, format=fmt, save_all=True, append_images=rest, resolution=self.resolution)
        else:
            first.save(out, format=fmt, resolution=self.resolution)
        LOGGER.info("wrote %d page(s) to %s", len(images), out)


def measure_text(text: str, *, font_size: float, scale: float) -> float:
    w_px, _ = text_size(text, font_size_px=font_size * scale)
    return w_px / scale


def _finite_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    runs: list[tuple[int, int]] = []
    start = int(idx[0])
    prev = int(idx[0])
    for v in idx[1:]:
        iv = int(v)
        if iv == prev + 1:
            prev = iv
            continue
        runs.append((start, prev + 1))
        start = iv
        prev = iv
    runs.append((start, prev + 1))
    return runs
