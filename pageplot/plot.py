from __future__ import annotations

from dataclasses import replace
import logging
from pathlib import Path
from typing import Any

import numpy as np

from pageplot.adapters import coerce_image, coerce_rgb, normalize_xy
from pageplot.colormaps import apply_colormap
from pageplot.config import (
    LineStyle,
    Marker,
    PlotConfig,
    coerce_enum,
    coerce_interval,
    coerce_length,
    coerce_limits,
    load_plot_config,
)
from pageplot.document import Alignment, Color, Document, Matrix, Page
from pageplot.layout import CoordinateMapper, Point, Size, resolve_axes, resolve_image_geometry
from pageplot.scales import Axis


LOGGER = logging.getLogger(__name__)

INK = Color.gray(0)
SERIES_COLOR = Color(31, 119, 180)
SERIES_LINE_WIDTH = 1.5
DOT_SIZE = 3.0
CLIP_PAD = 2.0
TICK_LABEL_GAP = 2.0


class Plot:
    """A document of single-series plots and images, one page per render call.

    Configuration calls return the Plot so they can be chained::

        Plot().xlim(0, 600).ylim(-100, 600).plot(x, y).write_to("plot.pdf")
    """

    def __init__(self, config: PlotConfig | None = None) -> None:
        self.config = replace(config) if config is not None else PlotConfig()
        self.document = Document(resolution=self.config.resolution, font_size=self.config.label_font_size)
        self._last_axes: tuple[Axis, Axis] | None = None
        self._last_mapper: CoordinateMapper | None = None

    @classmethod
    def from_toml(cls, path: str | Path) -> "Plot":
        return cls(load_plot_config(path))

    # --- configuration -----------------------------------------------------

    def xlim(self, vmin: float, vmax: float) -> "Plot":
        self.config.xlim = coerce_limits("xlim", (vmin, vmax))
        return self

    def ylim(self, vmin: float, vmax: float) -> "Plot":
        self.config.ylim = coerce_limits("ylim", (vmin, vmax))
        return self

    def xlabel(self, text: str) -> "Plot":
        self.config.xlabel = str(text)
        return self

    def ylabel(self, text: str) -> "Plot":
        self.config.ylabel = str(text)
        return self

    def tick_length(self, length: float) -> "Plot":
        self.config.tick_length = coerce_length("tick_length", length)
        return self

    def x_tick_interval(self, interval: float) -> "Plot":
        self.config.x_tick_interval = coerce_interval("x_tick_interval", interval)
        return self

    def y_tick_interval(self, interval: float) -> "Plot":
        self.config.y_tick_interval = coerce_interval("y_tick_interval", interval)
        return self

    def marker(self, marker: Marker | str | None) -> "Plot":
        self.config.marker = None if marker is None else coerce_enum(Marker, "marker", marker)
        return self

    def linestyle(self, style: LineStyle | str | None) -> "Plot":
        self.config.linestyle = None if style is None else coerce_enum(LineStyle, "linestyle", style)
        return self

    def font_size(self, size: float, *, label_size: float | None = None) -> "Plot":
        self.config.font_size = coerce_interval("font_size", size)
        if label_size is not None:
            self.config.label_font_size = coerce_interval("label_font_size", label_size)
        return self

    def page_size(self, width: float, height: float) -> "Plot":
        self.config.width = coerce_interval("width", width)
        self.config.height = coerce_interval("height", height)
        return self

    # --- rendering ---------------------------------------------------------

    def plot(self, x: Any = (), y: Any = ()) -> "Plot":
        """Add a page with x/y axes and a line through the paired points.

        Pairs are truncated to the shorter input. With no data only the axes
        are drawn, which needs both limits pinned.
        """
        series = normalize_xy(x, y)
        self.document.font_size = self.config.label_font_size
        xaxis, yaxis = resolve_axes(self.config, series.x, series.y, self.document.width_of)
        page_size = Size(self.config.width, self.config.height)
        mapper = CoordinateMapper.for_page(
            page_size,
            xaxis,
            yaxis,
            last_x_label_width=self.document.width_of(xaxis.tick_labels[-1]),
            font_size=self.config.font_size,
        )

        page = self.document.add_page(page_size)
        self._draw_axes(page, xaxis, yaxis, mapper)
        if not series.is_empty:
            self._draw_series(page, mapper, series.x, series.y)
        self._remember(xaxis, yaxis, mapper)
        return self

    def image(self, data: Any, width: int, height: int) -> "Plot":
        """Add a page showing scalar data through the viridis ramp, row 0 at the top."""
        values = coerce_image(data, width, height)
        rgb = apply_colormap(values).reshape(height, width, 3)
        return self._draw_image(rgb)

    def image_rgb(self, data: Any, width: int, height: int) -> "Plot":
        """Add a page showing width*height*3 RGB bytes as given."""
        return self._draw_image(coerce_rgb(data, width, height))

    def write_to(self, path: str | Path) -> None:
        self.document.write_to(path)

    def last_axes(self) -> tuple[Axis, Axis] | None:
        return self._last_axes

    def last_mapper(self) -> CoordinateMapper | None:
        return self._last_mapper

    # --- helpers -----------------------------------------------------------

    def _remember(self, xaxis: Axis, yaxis: Axis, mapper: CoordinateMapper) -> None:
        self._last_axes = (xaxis, yaxis)
        self._last_mapper = mapper

    def _draw_image(self, rgb: np.ndarray) -> "Plot":
        empty = np.empty(0, dtype=np.float64)
        self.document.font_size = self.config.label_font_size
        xaxis, yaxis = resolve_axes(self.config, empty, empty, self.document.width_of)
        geometry = resolve_image_geometry(
            self.config,
            xaxis,
            yaxis,
            last_x_label_width=self.document.width_of(xaxis.tick_labels[-1]),
        )
        mapper = geometry.mapper

        page = self.document.add_page(geometry.page)
        self._draw_axes(page, xaxis, yaxis, mapper)

        origin = mapper.plot_origin()
        extent = mapper.plot_size()
        height, width, _ = rgb.shape
        with page.saved_state():
            # unit image pixels -> plot area, inset by half a unit
            page.transform(
                Matrix.scale((extent.width - 1.0) / width, (extent.height - 1.0) / height)
                * Matrix.translate(origin.x + 0.5, origin.y + 0.5)
            )
            page.add_image_at(rgb, Point(0.0, 0.0))
        self._remember(xaxis, yaxis, mapper)
        return self

    def _draw_axes(self, page: Page, xaxis: Axis, yaxis: Axis, mapper: CoordinateMapper) -> None:
        cfg = self.config
        tick = cfg.tick_length
        page.set_color(INK).set_line_width(1.0).draw_rectangle(mapper.plot_origin(), mapper.plot_size())

        x_base = mapper.to_canvas_y(yaxis.limits[0])
        for value, label in zip(xaxis.tick_values(), xaxis.tick_labels):
            cx = mapper.to_canvas_x(float(value))
            page.move_to(Point(cx, x_base)).line_to(Point(cx, x_base - tick)).end_line()
            page.draw_text(Point(cx, x_base - tick), Alignment.TOP_CENTER, label)

        y_base = mapper.to_canvas_x(xaxis.limits[0])
        for value, label in zip(yaxis.tick_values(), yaxis.tick_labels):
            cy = mapper.to_canvas_y(float(value))
            page.move_to(Point(y_base, cy)).line_to(Point(y_base - tick, cy)).end_line()
            page.draw_text(Point(y_base - tick - TICK_LABEL_GAP, cy), Alignment.CENTER_RIGHT, label)

        if cfg.xlabel:
            mid = xaxis.limits[0] + (xaxis.limits[1] - xaxis.limits[0]) / 2.0
            page.draw_text(Point(mapper.to_canvas_x(mid), 4.0 + cfg.font_size / 2.0), Alignment.BOTTOM_CENTER, cfg.xlabel)

        if cfg.ylabel:
            mid = yaxis.limits[0] + (yaxis.limits[1] - yaxis.limits[0]) / 2.0
            with page.saved_state():
                page.transform(Matrix.rotate_deg(90))
                page.draw_text(Point(mapper.to_canvas_y(mid), -6.0), Alignment.TOP_CENTER, cfg.ylabel)

    def _draw_series(self, page: Page, mapper: CoordinateMapper, x: np.ndarray, y: np.ndarray) -> None:
        cfg = self.config
        origin = mapper.plot_origin()
        size = mapper.plot_size()
        cx = mapper.to_canvas_x(x)
        cy = mapper.to_canvas_y(y)
        with page.saved_state():
            page.set_clipping_box(
                Point(origin.x - CLIP_PAD, origin.y - CLIP_PAD),
                Size(size.width + 2 * CLIP_PAD, size.height + 2 * CLIP_PAD),
            )
            page.set_line_width(SERIES_LINE_WIDTH).set_color(SERIES_COLOR)
            if cfg.linestyle is LineStyle.SOLID:
                page.draw_line(cx, cy)
            if cfg.marker is Marker.DOT:
                page.draw_dots(cx, cy, DOT_SIZE)
        LOGGER.debug("drew %d points", x.size)
