from __future__ import annotations

from pathlib import Path

import numpy as np

from pageplot.errors import PlotDataError


def loadtxt(path: str | Path) -> list[np.ndarray]:
    """Read whitespace-separated numbers and return one float64 array per column.

    Rows may be ragged; a column only collects the rows that reach it.
    """
    columns: list[list[float]] = []
    with Path(path).open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            for col, word in enumerate(line.split()):
                if len(columns) <= col:
                    columns.append([])
                try:
                    columns[col].append(float(word))
                except ValueError as exc:
                    raise PlotDataError(f"{path}:{line_no}: not a number: {word!r}") from exc
    return [np.asarray(column, dtype=np.float64) for column in columns]


def loadtxt_matrix(path: str | Path) -> np.ndarray:
    """Read a rectangular whitespace-separated table as a 2-D float64 array."""
    rows: list[list[float]] = []
    with Path(path).open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            words = line.split()
            if not words:
                continue
            try:
                row = [float(word) for word in words]
            except ValueError as exc:
                raise PlotDataError(f"{path}:{line_no}: {exc}") from exc
            if rows and len(row) != len(rows[0]):
                raise PlotDataError(f"{path}:{line_no}: expected {len(rows[0])} values, found {len(row)}")
            rows.append(row)
    if not rows:
        raise PlotDataError(f"{path}: no data")
    return np.asarray(rows, dtype=np.float64)
