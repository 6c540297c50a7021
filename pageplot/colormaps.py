from __future__ import annotations

import numpy as np


# Ten evenly spaced anchor colours of the viridis ramp.
_VIRIDIS_STOPS = (
    (0x44, 0x01, 0x54),
    (0x48, 0x28, 0x78),
    (0x3E, 0x4A, 0x89),
    (0x31, 0x68, 0x8E),
    (0x26, 0x82, 0x8E),
    (0x1F, 0x9E, 0x89),
    (0x35, 0xB7, 0x79),
    (0x6D, 0xCD, 0x59),
    (0xB4, 0xDE, 0x2C),
    (0xFD, 0xE7, 0x25),
)


def _expand(stops: tuple[tuple[int, int, int], ...], size: int = 256) -> np.ndarray:
    anchors = np.linspace(0.0, 1.0, len(stops))
    positions = np.linspace(0.0, 1.0, size)
    table = np.asarray(stops, dtype=np.float64)
    channels = [np.interp(positions, anchors, table[:, c]) for c in range(3)]
    out = np.rint(np.stack(channels, axis=1)).astype(np.uint8)
    out.flags.writeable = False
    return out


VIRIDIS_APPROX = _expand(_VIRIDIS_STOPS)
"""256-entry viridis lookup table, linearly interpolated between ten anchor colours.

Only the two end entries are exact; entries in between can differ from the
published viridis table by a few levels per channel.
"""
NON_FINITE_COLOR = (255, 255, 255)


def apply_colormap(values: np.ndarray, colormap: np.ndarray = VIRIDIS_APPROX) -> np.ndarray:
    """Map scalar values to an (n, 3) uint8 RGB array.

    Values are scaled to the finite min/max of the buffer; NaN and infinities
    render as white.
    """
    values = np.asarray(values, dtype=np.float64).ravel()
    out = np.empty((values.size, 3), dtype=np.uint8)
    finite = np.isfinite(values)
    out[~finite] = NON_FINITE_COLOR
    if not np.any(finite):
        return out

    vmin = float(np.min(values[finite]))
    vmax = float(np.max(values[finite]))
    top = colormap.shape[0] - 1
    if vmax > vmin:
        scaled = (values[finite] - vmin) / (vmax - vmin) * top
        index = np.clip(scaled.astype(np.int64), 0, top)
    else:
        index = np.zeros(int(np.count_nonzero(finite)), dtype=np.int64)
    out[finite] = colormap[index]
    return out
