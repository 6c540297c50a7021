from __future__ import annotations

import math

import numpy as np

from pageplot.raster.canvas import RGBA, stamp


Box = tuple[float, float, float, float]


def draw_polyline(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: int = 1) -> None:
    """Stroke the polyline through float pixel coordinates with a width x width square pen.

    Segments are clipped to dst, grown by the pen width, before they are traced,
    so points far outside the canvas cost no more than points on its edge.
    """
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    width = max(1, int(width))
    box = (-width, -width, dst.shape[1] - 1 + width, dst.shape[0] - 1 + width)

    if xs.size == 1:
        x, y = float(xs[0]), float(ys[0])
        if box[0] <= x <= box[2] and box[1] <= y <= box[3]:
            stamp(dst, np.rint(xs).astype(np.int64), np.rint(ys).astype(np.int64), square_pen(width), color)
        return

    traced_x: list[np.ndarray] = []
    traced_y: list[np.ndarray] = []
    for x0, y0, x1, y1 in zip(xs[:-1].tolist(), ys[:-1].tolist(), xs[1:].tolist(), ys[1:].tolist()):
        clipped = clip_segment(x0, y0, x1, y1, box)
        if clipped is None:
            continue
        ends = np.rint(np.asarray(clipped)).astype(np.int64)
        px, py = trace_polyline(ends[0::2], ends[1::2])
        traced_x.append(px)
        traced_y.append(py)
    if traced_x:
        stamp(dst, np.concatenate(traced_x), np.concatenate(traced_y), square_pen(width), color)


def clip_segment(x0: float, y0: float, x1: float, y1: float, box: Box) -> tuple[float, float, float, float] | None:
    """Liang-Barsky clip of one segment to ``box`` (xmin, ymin, xmax, ymax); None when it misses."""
    if not all(math.isfinite(v) for v in (x0, y0, x1, y1)):
        return None
    xmin, ymin, xmax, ymax = box
    # halved so the difference of two finite coordinates stays finite
    hdx = 0.5 * x1 - 0.5 * x0
    hdy = 0.5 * y1 - 0.5 * y0
    t0, t1 = 0.0, 1.0
    for p, q in (
        (-hdx, 0.5 * x0 - 0.5 * xmin),
        (hdx, 0.5 * xmax - 0.5 * x0),
        (-hdy, 0.5 * y0 - 0.5 * ymin),
        (hdy, 0.5 * ymax - 0.5 * y0),
    ):
        if p == 0.0:
            if q < 0.0:
                return None
            continue
        r = q / p
        if p < 0.0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)
    # clamped: interpolating between huge coordinates can land a rounding error outside the box
    return (
        min(max(x0 * (1.0 - t0) + x1 * t0, xmin), xmax),
        min(max(y0 * (1.0 - t0) + y1 * t0, ymin), ymax),
        min(max(x0 * (1.0 - t1) + x1 * t1, xmin), xmax),
        min(max(y0 * (1.0 - t1) + y1 * t1, ymin), ymax),
    )


def trace_polyline(xs: np.ndarray, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Pixel centres visited by the polyline, one step per pixel along the major axis."""
    if xs.size <= 1:
        return xs.copy(), ys.copy()
    traced_x = [xs[:1]]
    traced_y = [ys[:1]]
    for x0, y0, x1, y1 in zip(xs[:-1].tolist(), ys[:-1].tolist(), xs[1:].tolist(), ys[1:].tolist()):
        steps = max(abs(x1 - x0), abs(y1 - y0))
        if steps == 0:
            continue
        t = np.arange(1, steps + 1, dtype=np.float64) / steps
        traced_x.append(np.rint(x0 + t * (x1 - x0)).astype(np.int64))
        traced_y.append(np.rint(y0 + t * (y1 - y0)).astype(np.int64))
    return np.concatenate(traced_x), np.concatenate(traced_y)


def square_pen(width: int) -> np.ndarray:
    width = max(1, int(width))
    lo = (width - 1) // 2
    offsets = np.arange(-lo, width - lo, dtype=np.int64)
    gx, gy = np.meshgrid(offsets, offsets)
    return np.stack([gx.ravel(), gy.ravel()], axis=1)
