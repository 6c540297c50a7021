from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
import logging
from typing import Any

import numpy as np

from pageplot.errors import PlotConfigError, PlotDataError
from pageplot.util import to_count


LOGGER = logging.getLogger(__name__)

try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]


@dataclass(frozen=True)
class SeriesData:
    x: np.ndarray
    y: np.ndarray

    @property
    def is_empty(self) -> bool:
        return self.x.size == 0

    @property
    def finite_mask(self) -> np.ndarray:
        return np.isfinite(self.x) & np.isfinite(self.y)


def normalize_xy(x: Any, y: Any) -> SeriesData:
    x_arr = coerce_1d_numeric(x, label="x")
    y_arr = coerce_1d_numeric(y, label="y")
    if x_arr.size != y_arr.size:
        n = min(x_arr.size, y_arr.size)
        LOGGER.debug("x and y lengths differ (%d != %d); pairing the first %d", x_arr.size, y_arr.size, n)
        x_arr = x_arr[:n]
        y_arr = y_arr[:n]
    return SeriesData(x=x_arr, y=y_arr)


def coerce_image(data: Any, width: int, height: int) -> np.ndarray:
    """Flatten scalar image data, row 0 first, checking it holds width*height values."""
    expected = _pixel_count(width, height)
    arr = np.asarray(data, dtype=np.float64).ravel()
    if arr.size != expected:
        raise PlotConfigError(f"image data has {arr.size} values, expected {width}*{height}={expected}")
    return arr


def coerce_rgb(data: Any, width: int, height: int) -> np.ndarray:
    expected = _pixel_count(width, height) * 3
    if isinstance(data, (bytes, bytearray, memoryview)):
        arr = np.frombuffer(bytes(data), dtype=np.uint8)
    else:
        arr = np.asarray(data)
        if arr.dtype != np.uint8:
            if arr.size and (np.min(arr) < 0 or np.max(arr) > 255):
                raise PlotDataError("RGB image values must be within 0..255")
            arr = arr.astype(np.uint8)
        arr = arr.ravel()
    if arr.size != expected:
        raise PlotConfigError(f"RGB image data has {arr.size} bytes, expected {width}*{height}*3={expected}")
    return arr.reshape(height, width, 3)


def _pixel_count(width: int, height: int) -> int:
    w = to_count(float(width), what="image width")
    h = to_count(float(height), what="image height")
    if w != width or h != height:
        raise PlotConfigError(f"image size must be whole pixels, got {width!r} x {height!r}")
    if w == 0 or h == 0:
        raise PlotConfigError(f"image size must be non-empty, got {w} x {h}")
    return w * h


def coerce_1d_numeric(value: Any, *, label: str) -> np.ndarray:
    if value is None:
        return np.empty(0, dtype=np.float64)

    if pd is not None and isinstance(value, pd.Series):
        return _coerce_ndarray(value.to_numpy(), label=label)

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        arr = np.asarray(value, dtype=object)
        if arr.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return _coerce_ndarray(arr, label=label)

    raise PlotDataError(f"unsupported {label} input type: {type(value)!r}")


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None:
            out[i] = np.nan
            continue
        if isinstance(raw, Decimal):
            out[i] = float(raw)
            continue
        try:
            out[i] = float(raw)
        except (TypeError, ValueError) as exc:
            raise PlotDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out
