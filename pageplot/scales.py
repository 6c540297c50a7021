from __future__ import annotations

from dataclasses import dataclass
import logging
import math

import numpy as np

from pageplot.errors import PlotConfigError
from pageplot.util import round_half_away, to_count


LOGGER = logging.getLogger(__name__)

TARGET_TICKS = 5
MAX_TICKS = 10_000


@dataclass(frozen=True)
class Extent:
    vmin: float
    vmax: float

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.vmin) and math.isfinite(self.vmax)


@dataclass(frozen=True)
class AxisTicks:
    limits: tuple[float, float]
    tick_interval: float
    num_ticks: int

    def tick_values(self) -> np.ndarray:
        return self.limits[0] + np.arange(self.num_ticks, dtype=np.float64) * self.tick_interval


@dataclass(frozen=True)
class Axis(AxisTicks):
    tick_labels: tuple[str, ...]
    # page units this axis takes up across its own direction
    margin: float


def data_extent(values: np.ndarray) -> Extent:
    """Min/max over the non-NaN values; an empty input gives (inf, -inf)."""
    present = values[~np.isnan(values)]
    if present.size == 0:
        return Extent(math.inf, -math.inf)
    return Extent(float(np.min(present)), float(np.max(present)))


def compute_tick_interval(span: float) -> float:
    """Pick a 1/2/5 power-of-ten interval giving as close to five ticks as possible."""
    span = abs(span)
    if not math.isfinite(span) or span == 0.0:
        raise PlotConfigError(f"cannot choose a tick interval for a range of {span!r}")
    magnitude = 10.0 ** round_half_away(math.log10(span))
    candidates = (
        magnitude / 10.0,
        magnitude / 5.0,
        magnitude / 2.0,
        magnitude,
        magnitude * 2.0,
    )
    if not all(math.isfinite(c) and c > 0.0 for c in candidates):
        raise PlotConfigError(f"a range of {span!r} is outside what tick intervals can represent")
    counts = [round_half_away(span / c) for c in candidates]
    # min() keeps the first of equally distant candidates
    chosen = min(range(len(candidates)), key=lambda i: abs(counts[i] - TARGET_TICKS))
    return candidates[chosen]


def plan_axis(
    extent: Extent,
    *,
    limits: tuple[float, float] | None = None,
    tick_interval: float | None = None,
    name: str = "axis",
) -> AxisTicks:
    """Limits, signed tick interval and tick count for one axis.

    Pinned limits are used as given. Inferred limits are snapped outwards to
    the provisional interval and then snapped again to the interval recomputed
    from them, so the last tick always lands on the upper limit: data 1..31
    gets limits (0, 40) rather than (0, 35) with a tick-less tail.
    """
    inferred = limits is None
    if limits is None:
        if not extent.is_finite:
            raise PlotConfigError(
                f"cannot infer {name} limits from data with extent ({extent.vmin}, {extent.vmax}); "
                f"pin the limits explicitly"
            )
        vmin, vmax = extent.vmin, extent.vmax
        if vmin == vmax:
            vmin -= 1.0
            vmax += 1.0
        # Snap the limits to multiples of a provisional interval.
        interval = tick_interval if tick_interval is not None else compute_tick_interval(vmax - vmin)
        limits = _snap(vmin, vmax, interval)

    span = limits[1] - limits[0]
    if span == 0.0:
        raise PlotConfigError(f"{name} limits must span a non-zero range, got {limits!r}")

    # Recompute from the final limits; this corrects for odd pinned or snapped ranges.
    interval = tick_interval if tick_interval is not None else compute_tick_interval(span)
    if inferred:
        # The recomputed interval need not divide the snapped span (0..35 -> 10).
        limits = _snap(limits[0], limits[1], interval, slack=1e-9)
        span = limits[1] - limits[0]
    num_ticks = to_count(abs(span) / interval, what=f"{name} tick count") + 1
    if num_ticks > MAX_TICKS:
        raise PlotConfigError(f"{name} would have {num_ticks} ticks; use a larger tick interval")

    signed = math.copysign(interval, span)
    LOGGER.debug("%s: limits=%r interval=%g ticks=%d", name, limits, signed, num_ticks)
    return AxisTicks(limits=limits, tick_interval=signed, num_ticks=num_ticks)


def _snap(vmin: float, vmax: float, interval: float, slack: float = 0.0) -> tuple[float, float]:
    lo = vmin / interval
    hi = vmax / interval
    if not (math.isfinite(lo) and math.isfinite(hi)):
        raise PlotConfigError(
            f"tick interval {interval!r} is too small for the range ({vmin}, {vmax}); use a larger tick interval"
        )
    return (math.floor(lo + slack) * interval, math.ceil(hi - slack) * interval)


def format_tick(value: float, *, tick_precision: float, tick_max: float) -> str:
    if value == 0.0:
        return "0"
    if tick_precision < 0:
        # Keep the last significant digit of the interval visible.
        return f"{value:.{math.ceil(abs(tick_precision))}f}"
    if tick_max < 4:
        return f"{value:.2f}"
    digits = max(math.ceil(abs(tick_max - tick_precision)) - 1, 1)
    return f"{value:.{digits}e}"


def format_tick_labels(ticks: AxisTicks) -> tuple[str, ...]:
    tick_precision = math.log10(abs(ticks.tick_interval))
    largest = max(abs(ticks.limits[0]), abs(ticks.limits[1]))
    tick_max = math.log10(largest) if largest > 0 else -math.inf
    return tuple(
        format_tick(float(v), tick_precision=tick_precision, tick_max=tick_max) for v in ticks.tick_values()
    )
