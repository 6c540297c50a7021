from pageplot.colormaps import VIRIDIS_APPROX, apply_colormap
from pageplot.config import LineStyle, Marker, PlotConfig, load_plot_config
from pageplot.errors import PlotConfigError, PlotDataError, PlotError, PlotOverflowError
from pageplot.layout import CoordinateMapper, Point, Size
from pageplot.loadtxt import loadtxt, loadtxt_matrix
from pageplot.plot import Plot
from pageplot.scales import Axis, compute_tick_interval

__all__ = [
    "Axis",
    "CoordinateMapper",
    "LineStyle",
    "Marker",
    "Plot",
    "PlotConfig",
    "PlotConfigError",
    "PlotDataError",
    "PlotError",
    "PlotOverflowError",
    "Point",
    "Size",
    "VIRIDIS_APPROX",
    "apply_colormap",
    "compute_tick_interval",
    "load_plot_config",
    "loadtxt",
    "loadtxt_matrix",
]
