from __future__ import annotations


class PlotError(Exception):
    """Base class for every error raised by pageplot."""


class PlotConfigError(PlotError, ValueError):
    """The plot cannot be rendered with the current configuration."""


class PlotDataError(PlotError, ValueError):
    """Input data cannot be interpreted as a numeric series."""


class PlotOverflowError(PlotError, OverflowError):
    """A page-space quantity does not fit the integer size the backend needs."""
