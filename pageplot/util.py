from __future__ import annotations

import math
from typing import Iterable

from pageplot.errors import PlotOverflowError


MAX_COUNT = 2**31 - 1


def round_half_away(value: float) -> float:
    # Python's round() is half-to-even; tick planning rounds halves away from zero.
    return math.copysign(math.floor(abs(value) + 0.5), value)


def to_count(value: float, *, what: str = "value", limit: int = MAX_COUNT) -> int:
    if not math.isfinite(value):
        raise PlotOverflowError(f"{what} is not finite: {value!r}")
    rounded = round_half_away(value)
    if rounded < 0:
        raise PlotOverflowError(f"{what} is negative: {value!r}")
    if rounded > limit:
        raise PlotOverflowError(f"{what} is too large: {value!r} > {limit}")
    return int(rounded)


def float_max(values: Iterable[float], default: float = 0.0) -> float:
    out = -math.inf
    for v in values:
        if v > out:
            out = v
    return default if out == -math.inf else out
