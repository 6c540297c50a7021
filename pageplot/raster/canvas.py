from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]

WHITE: RGBA = (255, 255, 255, 255)


def new_canvas(width: int, height: int, color: RGBA = WHITE) -> np.ndarray:
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = color
    return canvas


def blit_rgb(dst: np.ndarray, src: np.ndarray, x0: int = 0, y0: int = 0) -> None:
    """Copy an opaque (h, w, 3) patch onto dst with its top-left at (x0, y0), clipped to dst."""
    h, w, _ = src.shape
    xa = max(0, x0)
    ya = max(0, y0)
    xb = min(dst.shape[1], x0 + w)
    yb = min(dst.shape[0], y0 + h)
    if ya >= yb or xa >= xb:
        return
    dst[ya:yb, xa:xb, :3] = src[ya - y0 : yb - y0, xa - x0 : xb - x0]
    dst[ya:yb, xa:xb, 3] = 255


def stamp(dst: np.ndarray, px: np.ndarray, py: np.ndarray, footprint: np.ndarray, color: RGBA) -> None:
    """Paint ``footprint`` (k, 2 pixel offsets) centred on every (px, py).

    Each covered pixel is blended once, however many stamps overlap it.
    """
    if px.size == 0 or footprint.size == 0:
        return
    xs = (px[:, None] + footprint[None, :, 0]).ravel()
    ys = (py[:, None] + footprint[None, :, 1]).ravel()
    inside = (xs >= 0) & (xs < dst.shape[1]) & (ys >= 0) & (ys < dst.shape[0])
    if not np.any(inside):
        return
    flat = np.unique(ys[inside] * dst.shape[1] + xs[inside])
    rows, cols = np.divmod(flat, dst.shape[1])

    alpha = color[3] / 255.0
    current = dst[rows, cols, :3].astype(np.float32)
    ink = np.asarray(color[:3], dtype=np.float32)
    dst[rows, cols, :3] = np.clip(ink * alpha + current * (1.0 - alpha), 0, 255).astype(np.uint8)
    dst[rows, cols, 3] = 255


def blend_coverage(dst: np.ndarray, x: int, y: int, coverage: np.ndarray, color: RGBA) -> None:
    """Blend color through an 8-bit coverage mask whose top-left lands at (x, y)."""
    h, w = coverage.shape
    xa = max(0, x)
    ya = max(0, y)
    xb = min(dst.shape[1], x + w)
    yb = min(dst.shape[0], y + h)
    if xa >= xb or ya >= yb:
        return

    alpha = coverage[ya - y : yb - y, xa - x : xb - x].astype(np.float32) * (color[3] / (255.0 * 255.0))
    if not np.any(alpha > 0):
        return
    patch = dst[ya:yb, xa:xb]
    ink = np.asarray(color[:3], dtype=np.float32)
    mixed = ink * alpha[:, :, None] + patch[:, :, :3].astype(np.float32) * (1.0 - alpha[:, :, None])
    patch[:, :, :3] = np.clip(mixed, 0, 255).astype(np.uint8)
    patch[:, :, 3] = 255
