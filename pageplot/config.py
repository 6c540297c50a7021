from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
import math
from pathlib import Path
import tomllib
from typing import Any

from pageplot.errors import PlotConfigError


class Marker(str, Enum):
    DOT = "dot"


class LineStyle(str, Enum):
    SOLID = "solid"


Limits = tuple[float, float]


@dataclass
class PlotConfig:
    """Builder state for one Plot.

    Sizes are page units (PDF points). ``font_size`` is the spacing unit the
    axis margins are built from; ``label_font_size`` is the size labels are
    drawn and measured at.
    """

    width: float = 810.0
    height: float = 630.0
    font_size: float = 20.0
    label_font_size: float = 12.0
    tick_length: float = 10.0
    x_tick_interval: float | None = None
    y_tick_interval: float | None = None
    xlim: Limits | None = None
    ylim: Limits | None = None
    xlabel: str | None = None
    ylabel: str | None = None
    marker: Marker | None = None
    linestyle: LineStyle | None = LineStyle.SOLID
    resolution: float = 144.0

    def __post_init__(self) -> None:
        for name in ("width", "height", "font_size", "label_font_size", "resolution"):
            _require_positive(name, getattr(self, name))
        _require_non_negative("tick_length", self.tick_length)
        if self.x_tick_interval is not None:
            _require_positive("x_tick_interval", self.x_tick_interval)
        if self.y_tick_interval is not None:
            _require_positive("y_tick_interval", self.y_tick_interval)
        if self.xlim is not None:
            self.xlim = coerce_limits("xlim", self.xlim)
        if self.ylim is not None:
            self.ylim = coerce_limits("ylim", self.ylim)


def coerce_limits(name: str, value: Any) -> Limits:
    try:
        lo, hi = value
        out = (float(lo), float(hi))
    except (TypeError, ValueError) as exc:
        raise PlotConfigError(f"{name} must be a (min, max) pair, got {value!r}") from exc
    if not (math.isfinite(out[0]) and math.isfinite(out[1])):
        raise PlotConfigError(f"{name} must be finite, got {out!r}")
    return out


def coerce_interval(name: str, value: Any) -> float:
    try:
        interval = float(value)
    except (TypeError, ValueError) as exc:
        raise PlotConfigError(f"{name} must be a number, got {value!r}") from exc
    _require_positive(name, interval)
    return interval


def coerce_length(name: str, value: Any) -> float:
    try:
        length = float(value)
    except (TypeError, ValueError) as exc:
        raise PlotConfigError(f"{name} must be a number, got {value!r}") from exc
    _require_non_negative(name, length)
    return length


def load_plot_config(path: str | Path) -> PlotConfig:
    config_path = Path(path)
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise PlotConfigError(f"invalid plot config {config_path}: {exc}") from exc
    table = raw.get("plot", {})
    if not isinstance(table, dict):
        raise PlotConfigError(f"[plot] in {config_path} must be a table")
    return plot_config_from_mapping(table)


def plot_config_from_mapping(table: dict[str, Any]) -> PlotConfig:
    known = {f.name for f in fields(PlotConfig)}
    unknown = sorted(set(table) - known)
    if unknown:
        raise PlotConfigError(f"unknown plot config keys: {', '.join(unknown)}")

    kwargs: dict[str, Any] = {}
    for key, value in table.items():
        if key in {"xlim", "ylim"}:
            kwargs[key] = coerce_limits(key, value)
        elif key in {"xlabel", "ylabel"}:
            if not isinstance(value, str):
                raise PlotConfigError(f"{key} must be a string, got {value!r}")
            kwargs[key] = value
        elif key == "marker":
            kwargs[key] = coerce_enum(Marker, key, value)
        elif key == "linestyle":
            kwargs[key] = coerce_enum(LineStyle, key, value)
        else:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise PlotConfigError(f"{key} must be a number, got {value!r}")
            kwargs[key] = float(value)
    return PlotConfig(**kwargs)


def coerce_enum(enum_type: type[Enum], key: str, value: Any) -> Any:
    if value == "none":
        return None
    try:
        return enum_type(value)
    except ValueError as exc:
        allowed = ", ".join([m.value for m in enum_type] + ["none"])
        raise PlotConfigError(f"{key} must be one of: {allowed}; got {value!r}") from exc


def _require_positive(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise PlotConfigError(f"{name} must be > 0, got {value!r}")


def _require_non_negative(name: str, value: float) -> None:
    if not math.isfinite(value) or value < 0:
        raise PlotConfigError(f"{name} must be >= 0, got {value!r}")
