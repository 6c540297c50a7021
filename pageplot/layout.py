from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, NamedTuple

import numpy as np

from pageplot.config import PlotConfig
from pageplot.errors import PlotConfigError
from pageplot.scales import Axis, AxisTicks, data_extent, format_tick_labels, plan_axis
from pageplot.util import float_max


LOGGER = logging.getLogger(__name__)

TextWidth = Callable[[str], float]


class Point(NamedTuple):
    x: float
    y: float


class Size(NamedTuple):
    width: float
    height: float


def x_axis_margin(font_size: float, tick_length: float) -> float:
    # axis title (1.5 lines), tick label row, tick marks, padding
    return font_size * 1.5 + font_size + tick_length + font_size


def y_axis_margin(font_size: float, tick_length: float, widest_label: float) -> float:
    # rotated axis title, widest tick label, tick marks, padding
    return font_size * 2.0 + widest_label + tick_length + font_size


def _with_labels(ticks: AxisTicks, margin: Callable[[tuple[str, ...]], float]) -> Axis:
    labels = format_tick_labels(ticks)
    return Axis(
        limits=ticks.limits,
        tick_interval=ticks.tick_interval,
        num_ticks=ticks.num_ticks,
        tick_labels=labels,
        margin=margin(labels),
    )


def resolve_axes(config: PlotConfig, x: np.ndarray, y: np.ndarray, width_of: TextWidth) -> tuple[Axis, Axis]:
    """Plan ticks, labels and margins for both axes.

    Both axes are planned before any label is measured so that a configuration
    error on either one is raised before the caller draws anything.
    """
    x_ticks = plan_axis(data_extent(x), limits=config.xlim, tick_interval=config.x_tick_interval, name="x")
    y_ticks = plan_axis(data_extent(y), limits=config.ylim, tick_interval=config.y_tick_interval, name="y")

    xaxis = _with_labels(x_ticks, lambda labels: x_axis_margin(config.font_size, config.tick_length))
    yaxis = _with_labels(
        y_ticks,
        lambda labels: y_axis_margin(
            config.font_size,
            config.tick_length,
            float_max(width_of(label) for label in labels),
        ),
    )
    LOGGER.debug("margins: x=%.2f y=%.2f", xaxis.margin, yaxis.margin)
    return xaxis, yaxis


@dataclass(frozen=True)
class CoordinateMapper:
    """Independent affine maps from data space to page space for each axis."""

    x_limits: tuple[float, float]
    y_limits: tuple[float, float]
    plot_width: float
    plot_height: float
    x_offset: float
    y_offset: float

    @classmethod
    def for_page(
        cls,
        page: Size,
        xaxis: Axis,
        yaxis: Axis,
        *,
        last_x_label_width: float,
        font_size: float,
    ) -> "CoordinateMapper":
        # The last x label is centred on the right edge, so keep room for it.
        plot_width = page.width - yaxis.margin - last_x_label_width
        plot_height = page.height - xaxis.margin - font_size
        return cls.for_plot_area(xaxis, yaxis, plot_width=plot_width, plot_height=plot_height)

    @classmethod
    def for_plot_area(cls, xaxis: Axis, yaxis: Axis, *, plot_width: float, plot_height: float) -> "CoordinateMapper":
        if plot_width <= 0 or plot_height <= 0:
            raise PlotConfigError(
                f"page is too small for the axis margins (plot area {plot_width:.1f} x {plot_height:.1f})"
            )
        return cls(
            x_limits=xaxis.limits,
            y_limits=yaxis.limits,
            plot_width=plot_width,
            plot_height=plot_height,
            x_offset=yaxis.margin,
            y_offset=xaxis.margin,
        )

    def to_canvas_x(self, x):
        lo, hi = self.x_limits
        return (x - lo) / (hi - lo) * self.plot_width + self.x_offset

    def to_canvas_y(self, y):
        lo, hi = self.y_limits
        return (y - lo) / (hi - lo) * self.plot_height + self.y_offset

    def to_canvas(self, point: Point) -> Point:
        return Point(self.to_canvas_x(point.x), self.to_canvas_y(point.y))

    def plot_origin(self) -> Point:
        return Point(self.to_canvas_x(self.x_limits[0]), self.to_canvas_y(self.y_limits[0]))

    def plot_size(self) -> Size:
        return Size(
            self.to_canvas_x(self.x_limits[1]) - self.to_canvas_x(self.x_limits[0]),
            self.to_canvas_y(self.y_limits[1]) - self.to_canvas_y(self.y_limits[0]),
        )


@dataclass(frozen=True)
class ImageGeometry:
    page: Size
    plot_size: float
    mapper: CoordinateMapper


def resolve_image_geometry(
    config: PlotConfig,
    xaxis: Axis,
    yaxis: Axis,
    *,
    last_x_label_width: float,
) -> ImageGeometry:
    """Square plot area for an image and the page size that fits it exactly.

    The returned page size replaces the configured one for the image page only.
    """
    plot_width = config.width - yaxis.margin - last_x_label_width
    plot_height = config.height - xaxis.margin - config.font_size
    plot_size = min(plot_width, plot_height)
    mapper = CoordinateMapper.for_plot_area(xaxis, yaxis, plot_width=plot_size, plot_height=plot_size)
    page = Size(
        width=plot_size + yaxis.margin + config.font_size,
        height=plot_size + xaxis.margin + config.font_size,
    )
    LOGGER.debug("image page %.1f x %.1f, plot %.1f", page.width, page.height, plot_size)
    return ImageGeometry(page=page, plot_size=plot_size, mapper=mapper)
