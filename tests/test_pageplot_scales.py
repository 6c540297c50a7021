from __future__ import annotations

import math
import unittest

import numpy as np

from pageplot.errors import PlotConfigError, PlotOverflowError
from pageplot.scales import (
    AxisTicks,
    Extent,
    compute_tick_interval,
    data_extent,
    format_tick_labels,
    plan_axis,
)
from pageplot.util import float_max, round_half_away, to_count


def _candidate_distances(span: float) -> list[float]:
    magnitude = 10.0 ** round_half_away(math.log10(span))
    candidates = [magnitude / 10.0, magnitude / 5.0, magnitude / 2.0, magnitude, magnitude * 2.0]
    return [abs(round_half_away(span / c) - 5) for c in candidates]


class TickIntervalTests(unittest.TestCase):
    def test_interval_is_closest_to_five_ticks_across_magnitudes(self) -> None:
        for span in np.geomspace(1e-3, 1e6, 241).tolist():
            interval = compute_tick_interval(span)
            achieved = abs(round_half_away(span / interval) - 5)
            self.assertEqual(achieved, min(_candidate_distances(span)), msg=f"span={span}")

    def test_interval_is_a_one_two_five_multiple(self) -> None:
        for span in (0.0037, 0.9, 4.0, 16.0, 350.0, 123456.0):
            interval = compute_tick_interval(span)
            mantissa = interval / 10.0 ** math.floor(math.log10(interval) + 1e-12)
            self.assertTrue(any(math.isclose(mantissa, m) for m in (1.0, 2.0, 5.0)), msg=f"{span} -> {interval}")

    def test_sign_of_range_is_ignored(self) -> None:
        self.assertEqual(compute_tick_interval(-16.0), compute_tick_interval(16.0))

    def test_known_intervals(self) -> None:
        self.assertEqual(compute_tick_interval(4.0), 1.0)
        self.assertEqual(compute_tick_interval(16.0), 5.0)
        self.assertEqual(compute_tick_interval(20.0), 5.0)
        self.assertEqual(compute_tick_interval(10.0), 2.0)

    def test_ties_prefer_the_smaller_interval(self) -> None:
        # 14: counts 14, 7, 3, 1, 1 for (1, 2, 5, 10, 20); 2 and 5 are both two ticks off
        self.assertEqual(compute_tick_interval(14.0), 2.0)

    def test_degenerate_range_is_a_configuration_error(self) -> None:
        with self.assertRaises(PlotConfigError):
            compute_tick_interval(0.0)
        with self.assertRaises(PlotConfigError):
            compute_tick_interval(math.inf)

    def test_ranges_at_the_float_limits_are_configuration_errors(self) -> None:
        # subnormal: the smallest candidates underflow to zero
        with self.assertRaises(PlotConfigError):
            compute_tick_interval(1e-323)
        # the largest candidate overflows
        with self.assertRaises(PlotConfigError):
            compute_tick_interval(1.5e308)


class PlanAxisTests(unittest.TestCase):
    def test_inferred_limits_snap_to_tick_multiples(self) -> None:
        ticks = plan_axis(Extent(0.0, 16.0), name="y")
        self.assertEqual(ticks.limits, (0.0, 20.0))
        self.assertEqual(ticks.tick_interval, 5.0)
        self.assertEqual(ticks.num_ticks, 5)

    def test_last_tick_lands_on_upper_limit(self) -> None:
        extents = [(0.0, 4.0), (1.0, 31.0), (-3.3, 7.9), (0.001, 0.0093), (-2e5, 9.1e5), (12.5, 12.75)]
        for vmin, vmax in extents:
            ticks = plan_axis(Extent(vmin, vmax))
            lo, hi = ticks.limits
            tol = 1e-9 * abs(hi - lo)
            self.assertLessEqual(lo, vmin + tol)
            self.assertGreaterEqual(hi, vmax - tol)
            last = ticks.tick_values()[-1]
            self.assertAlmostEqual(last, lo + (ticks.num_ticks - 1) * ticks.tick_interval)
            self.assertLessEqual(abs(last - hi), tol, msg=f"extent=({vmin}, {vmax})")

    def test_snapped_range_that_the_final_interval_does_not_divide_is_widened(self) -> None:
        ticks = plan_axis(Extent(1.0, 31.0))
        self.assertEqual(ticks.limits, (0.0, 40.0))
        self.assertEqual(ticks.tick_interval, 10.0)
        self.assertEqual(ticks.num_ticks, 5)

    def test_pinned_limits_are_used_verbatim(self) -> None:
        ticks = plan_axis(Extent(math.inf, -math.inf), limits=(0.0, 600.0))
        self.assertEqual(ticks.limits, (0.0, 600.0))
        self.assertEqual(ticks.tick_interval, 100.0)
        self.assertEqual(ticks.num_ticks, 7)

    def test_pinned_interval_is_used_for_both_passes(self) -> None:
        ticks = plan_axis(Extent(0.0, 0.05), limits=(0.0, 0.05), tick_interval=0.008)
        self.assertEqual(ticks.tick_interval, 0.008)
        self.assertEqual(ticks.num_ticks, 7)

        snapped = plan_axis(Extent(0.3, 9.2), tick_interval=3.0)
        self.assertEqual(snapped.limits, (0.0, 12.0))
        self.assertEqual(snapped.num_ticks, 5)

    def test_interval_sign_follows_limits(self) -> None:
        inverted = plan_axis(Extent(0.0, 1.0), limits=(10.0, 0.0))
        self.assertEqual(inverted.tick_interval, -2.0)
        self.assertEqual(inverted.tick_values().tolist(), [10.0, 8.0, 6.0, 4.0, 2.0, 0.0])

        for limits in ((0.0, 5.0), (5.0, 0.0), (-3.0, -40.0), (-40.0, -3.0)):
            ticks = plan_axis(Extent(0.0, 1.0), limits=limits)
            self.assertEqual(math.copysign(1.0, ticks.tick_interval), math.copysign(1.0, limits[1] - limits[0]))

    def test_constant_data_is_widened(self) -> None:
        ticks = plan_axis(Extent(3.0, 3.0))
        self.assertLess(ticks.limits[0], 3.0)
        self.assertGreater(ticks.limits[1], 3.0)

    def test_non_finite_extent_without_pinned_limits_is_rejected(self) -> None:
        with self.assertRaises(PlotConfigError):
            plan_axis(data_extent(np.empty(0)), name="y")
        with self.assertRaises(PlotConfigError):
            plan_axis(Extent(0.0, math.inf))

    def test_zero_span_limits_are_rejected(self) -> None:
        with self.assertRaises(PlotConfigError):
            plan_axis(Extent(0.0, 1.0), limits=(2.0, 2.0), tick_interval=1.0)

    def test_too_many_ticks_are_rejected(self) -> None:
        with self.assertRaises(PlotConfigError):
            plan_axis(Extent(0.0, 1.0), limits=(0.0, 1.0), tick_interval=1e-6)

    def test_interval_too_small_to_snap_is_a_configuration_error(self) -> None:
        with self.assertRaises(PlotConfigError):
            plan_axis(Extent(0.0, 1e10), tick_interval=1e-310)

    def test_unrepresentable_pinned_tick_count_is_an_overflow_error(self) -> None:
        with self.assertRaises(PlotOverflowError):
            plan_axis(Extent(0.0, 1.0), limits=(0.0, 1e10), tick_interval=1e-310)

    def test_data_extent_skips_nan(self) -> None:
        extent = data_extent(np.asarray([np.nan, 2.0, -1.0, np.nan]))
        self.assertEqual((extent.vmin, extent.vmax), (-1.0, 2.0))
        self.assertFalse(data_extent(np.asarray([np.nan])).is_finite)


class TickLabelTests(unittest.TestCase):
    def test_small_interval_shows_its_last_digit(self) -> None:
        labels = format_tick_labels(AxisTicks(limits=(0.0, 0.01), tick_interval=0.001, num_ticks=11))
        self.assertEqual(labels[0], "0")
        self.assertEqual(labels[1], "0.001")
        for label in labels[1:]:
            self.assertEqual(len(label.split(".")[1]), 3, msg=label)

    def test_large_magnitudes_use_scientific_notation(self) -> None:
        labels = format_tick_labels(AxisTicks(limits=(0.0, 1e6), tick_interval=50000.0, num_ticks=21))
        self.assertEqual(labels[0], "0")
        self.assertEqual(labels[1], "5.0e+04")
        self.assertTrue(all("e" in label for label in labels[1:]))

    def test_unit_magnitudes_use_two_decimals(self) -> None:
        labels = format_tick_labels(AxisTicks(limits=(0.0, 4.0), tick_interval=1.0, num_ticks=5))
        self.assertEqual(labels, ("0", "1.00", "2.00", "3.00", "4.00"))

    def test_zero_is_plain_in_every_regime(self) -> None:
        for ticks in (
            AxisTicks(limits=(-0.02, 0.02), tick_interval=0.01, num_ticks=5),
            AxisTicks(limits=(-2.0, 2.0), tick_interval=1.0, num_ticks=5),
            AxisTicks(limits=(-1e6, 1e6), tick_interval=5e5, num_ticks=5),
        ):
            self.assertEqual(format_tick_labels(ticks)[2], "0")

    def test_labels_match_tick_count(self) -> None:
        ticks = plan_axis(Extent(-7.0, 130.0))
        self.assertEqual(len(format_tick_labels(ticks)), ticks.num_ticks)


class UtilTests(unittest.TestCase):
    def test_round_half_away_from_zero(self) -> None:
        self.assertEqual(round_half_away(2.5), 3.0)
        self.assertEqual(round_half_away(-2.5), -3.0)
        self.assertEqual(round_half_away(0.4), 0.0)

    def test_to_count_rejects_out_of_range_values(self) -> None:
        self.assertEqual(to_count(4.6), 5)
        for bad in (-1.0, math.nan, math.inf, 2.0**40):
            with self.assertRaises(PlotOverflowError):
                to_count(bad)

    def test_float_max_default(self) -> None:
        self.assertEqual(float_max([]), 0.0)
        self.assertEqual(float_max([1.0, 3.5, 2.0]), 3.5)


if __name__ == "__main__":
    unittest.main()
