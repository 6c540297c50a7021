from __future__ import annotations

from decimal import Decimal
import unittest

import numpy as np

from pageplot.adapters import coerce_image, coerce_rgb, normalize_xy
from pageplot.colormaps import NON_FINITE_COLOR, VIRIDIS_APPROX, apply_colormap
from pageplot.errors import PlotConfigError, PlotDataError, PlotOverflowError

try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None


class ColormapTests(unittest.TestCase):
    def test_table_runs_dark_purple_to_yellow(self) -> None:
        self.assertEqual(VIRIDIS_APPROX.shape, (256, 3))
        self.assertEqual(tuple(int(v) for v in VIRIDIS_APPROX[0]), (0x44, 0x01, 0x54))
        self.assertEqual(tuple(int(v) for v in VIRIDIS_APPROX[255]), (0xFD, 0xE7, 0x25))
        self.assertFalse(VIRIDIS_APPROX.flags.writeable)

    def test_table_is_a_smooth_ramp_between_its_anchor_colours(self) -> None:
        green = VIRIDIS_APPROX[:, 1].astype(np.int64)
        self.assertTrue(np.all(np.diff(green) >= 0))
        # anchors sit every 255 / 9 entries, so entries 85 and 170 land on one
        self.assertEqual(tuple(int(v) for v in VIRIDIS_APPROX[85]), (0x31, 0x68, 0x8E))
        self.assertEqual(tuple(int(v) for v in VIRIDIS_APPROX[170]), (0x35, 0xB7, 0x79))

    def test_min_and_max_use_table_ends(self) -> None:
        rgb = apply_colormap(np.asarray([0.0, 0.0, 0.0, 1.0]))
        self.assertEqual(rgb.shape, (4, 3))
        self.assertEqual(rgb.dtype, np.uint8)
        for row in rgb[:3]:
            self.assertTrue(np.array_equal(row, VIRIDIS_APPROX[0]))
        self.assertTrue(np.array_equal(rgb[3], VIRIDIS_APPROX[255]))

    def test_midpoint_lands_in_the_middle_of_the_table(self) -> None:
        rgb = apply_colormap(np.asarray([-2.0, 0.0, 2.0]))
        self.assertTrue(np.array_equal(rgb[1], VIRIDIS_APPROX[127]))

    def test_non_finite_values_are_white(self) -> None:
        rgb = apply_colormap(np.asarray([np.nan, 1.0, np.inf, 3.0]))
        self.assertEqual(tuple(int(v) for v in rgb[0]), NON_FINITE_COLOR)
        self.assertEqual(tuple(int(v) for v in rgb[2]), NON_FINITE_COLOR)
        self.assertTrue(np.array_equal(rgb[1], VIRIDIS_APPROX[0]))
        self.assertTrue(np.array_equal(rgb[3], VIRIDIS_APPROX[255]))

    def test_all_nan_buffer_is_white(self) -> None:
        rgb = apply_colormap(np.full(5, np.nan))
        self.assertTrue(np.all(rgb == 255))

    def test_constant_buffer_uses_first_entry(self) -> None:
        rgb = apply_colormap(np.full(6, 7.5))
        self.assertTrue(np.all(rgb == VIRIDIS_APPROX[0]))


class AdapterTests(unittest.TestCase):
    def test_normalize_xy_pairs_up_to_the_shorter_input(self) -> None:
        series = normalize_xy([1, 2, 3, 4], [10.0, 20.0])
        self.assertEqual(series.x.tolist(), [1.0, 2.0])
        self.assertEqual(series.y.tolist(), [10.0, 20.0])
        self.assertFalse(series.is_empty)

    def test_normalize_xy_accepts_decimal_and_none(self) -> None:
        series = normalize_xy([Decimal("1.5"), None, 3], np.asarray([1, 2, 3], dtype=np.int32))
        self.assertEqual(series.x[0], 1.5)
        self.assertTrue(np.isnan(series.x[1]))
        self.assertEqual(series.y.dtype, np.float64)
        self.assertEqual(series.finite_mask.tolist(), [True, False, True])

    def test_missing_input_is_empty(self) -> None:
        self.assertTrue(normalize_xy(None, None).is_empty)
        self.assertTrue(normalize_xy((), ()).is_empty)

    def test_bad_series_input_is_a_data_error(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_xy(np.zeros((2, 2)), [1.0, 2.0])
        with self.assertRaises(PlotDataError):
            normalize_xy("123", [1.0])
        with self.assertRaises(PlotDataError):
            normalize_xy(["a", "b"], [1.0, 2.0])

    @unittest.skipIf(pd is None, "pandas not installed")
    def test_pandas_series_is_accepted(self) -> None:
        series = normalize_xy(pd.Series([1.0, 2.0]), pd.Series([3, 4]))
        self.assertEqual(series.y.tolist(), [3.0, 4.0])

    def test_image_length_must_match_dimensions(self) -> None:
        self.assertEqual(coerce_image(np.ones((2, 3)), 3, 2).shape, (6,))
        with self.assertRaises(PlotConfigError):
            coerce_image(np.ones(5), 3, 2)

    def test_image_dimensions_are_validated(self) -> None:
        with self.assertRaises(PlotOverflowError):
            coerce_image([], -1, 2)
        with self.assertRaises(PlotConfigError):
            coerce_image([1.0, 2.0], 2.5, 1)
        with self.assertRaises(PlotConfigError):
            coerce_image([], 0, 4)

    def test_rgb_bytes_are_reshaped_row_major(self) -> None:
        rgb = coerce_rgb(bytes(range(12)), 2, 2)
        self.assertEqual(rgb.shape, (2, 2, 3))
        self.assertEqual(rgb[1, 0].tolist(), [6, 7, 8])

    def test_rgb_values_out_of_range_are_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            coerce_rgb([0, 0, 300], 1, 1)
        with self.assertRaises(PlotConfigError):
            coerce_rgb(bytes(5), 1, 1)


if __name__ == "__main__":
    unittest.main()
