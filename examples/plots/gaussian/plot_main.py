from __future__ import annotations

import numpy as np

from pageplot import Plot


def main() -> None:
    x = np.linspace(0.0, 600.0, 4096)
    y = np.exp(-((x - 300.0) ** 2) / 1200.0) * 600.0
    (
        Plot()
        .ylim(-100.0, 600.0)
        .xlim(0.0, 600.0)
        .plot(x, y)
        .write_to("plot.pdf")
    )


if __name__ == "__main__":
    main()
