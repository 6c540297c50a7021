from __future__ import annotations

import numpy as np

from pageplot.raster.canvas import RGBA, stamp


def draw_dots(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, size: int = 1) -> None:
    stamp(
        dst,
        np.asarray(xs, dtype=np.int64),
        np.asarray(ys, dtype=np.int64),
        disc_footprint(max(0, int(size) // 2)),
        color,
    )


def disc_footprint(radius: int) -> np.ndarray:
    offsets = np.arange(-radius, radius + 1, dtype=np.int64)
    gx, gy = np.meshgrid(offsets, offsets)
    # r*r + r keeps the four edge midpoints and rounds the corners
    keep = gx * gx + gy * gy <= radius * radius + radius
    return np.stack([gx[keep], gy[keep]], axis=1)
