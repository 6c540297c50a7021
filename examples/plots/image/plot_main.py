from __future__ import annotations

import numpy as np

from pageplot import Plot


def main() -> None:
    # A 100x100 radial ramp with a NaN hole in the middle, which renders white.
    yy, xx = np.mgrid[0:100, 0:100]
    data = np.hypot(xx - 50.0, yy - 50.0)
    data[45:55, 45:55] = np.nan
    (
        Plot()
        .xlabel("xlabel")
        .ylabel("ylabel")
        .ylim(0.0, 0.05)
        .xlim(150.0, 500.0)
        .tick_length(10.0)
        .x_tick_interval(50.0)
        .y_tick_interval(0.008)
        .image(data, 100, 100)
        .write_to("image.pdf")
    )


if __name__ == "__main__":
    main()
