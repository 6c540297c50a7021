from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

import numpy as np

from pageplot import Plot, PlotConfig, PlotConfigError, PlotError, load_plot_config, loadtxt, loadtxt_matrix


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("data", type=Path, help="Whitespace-separated numeric text file.")
    parser.add_argument("-o", "--output", type=Path, default=Path("plot.pdf"))
    parser.add_argument("--config", type=Path, default=None, help="TOML file with a [plot] table.")
    parser.add_argument("--xlim", type=float, nargs=2, metavar=("MIN", "MAX"), default=None)
    parser.add_argument("--ylim", type=float, nargs=2, metavar=("MIN", "MAX"), default=None)
    parser.add_argument("--x-tick-interval", type=float, default=None)
    parser.add_argument("--y-tick-interval", type=float, default=None)
    parser.add_argument("--tick-length", type=float, default=None)
    parser.add_argument("--xlabel", default=None)
    parser.add_argument("--ylabel", default=None)
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pageplot")
    sub = parser.add_subparsers(dest="command", required=True)

    line = sub.add_parser("plot", help="Plot one column against another.")
    _add_common_args(line)
    line.add_argument("--x-column", type=int, default=0, help="Ignored when the file has a single column.")
    line.add_argument("--y-column", type=int, default=1)
    line.add_argument("--marker", choices=["dot", "none"], default=None)
    line.add_argument("--linestyle", choices=["solid", "none"], default=None)

    image = sub.add_parser("image", help="Show a numeric table as a colour-mapped image (rows top to bottom).")
    _add_common_args(image)
    return parser


def _configure(plot: Plot, args: argparse.Namespace) -> None:
    if args.xlim is not None:
        plot.xlim(*args.xlim)
    if args.ylim is not None:
        plot.ylim(*args.ylim)
    if args.x_tick_interval is not None:
        plot.x_tick_interval(args.x_tick_interval)
    if args.y_tick_interval is not None:
        plot.y_tick_interval(args.y_tick_interval)
    if args.tick_length is not None:
        plot.tick_length(args.tick_length)
    if args.xlabel is not None:
        plot.xlabel(args.xlabel)
    if args.ylabel is not None:
        plot.ylabel(args.ylabel)


def _select_columns(columns: list[np.ndarray], x_column: int, y_column: int) -> tuple[np.ndarray, np.ndarray]:
    if not columns:
        return np.empty(0), np.empty(0)
    if len(columns) == 1:
        y = columns[0]
        return np.arange(y.size, dtype=np.float64), y
    for name, idx in (("x", x_column), ("y", y_column)):
        if not 0 <= idx < len(columns):
            raise PlotConfigError(f"--{name}-column {idx} is out of range; the file has {len(columns)} columns")
    return columns[x_column], columns[y_column]


def run(args: argparse.Namespace) -> None:
    config = load_plot_config(args.config) if args.config is not None else PlotConfig()
    plot = Plot(config)
    _configure(plot, args)

    if args.command == "plot":
        if args.marker is not None:
            plot.marker(None if args.marker == "none" else args.marker)
        if args.linestyle is not None:
            plot.linestyle(None if args.linestyle == "none" else args.linestyle)
        x, y = _select_columns(loadtxt(args.data), args.x_column, args.y_column)
        plot.plot(x, y)
    else:
        matrix = loadtxt_matrix(args.data)
        height, width = matrix.shape
        plot.image(matrix, width, height)

    plot.write_to(args.output)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        run(args)
    except PlotError as exc:
        print(f"pageplot: {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"pageplot: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
