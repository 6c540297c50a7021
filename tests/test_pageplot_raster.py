from __future__ import annotations

import unittest

import numpy as np

from pageplot.raster import blend_coverage, blit_rgb, draw_dots, draw_polyline, draw_text, new_canvas, stamp, text_size
from pageplot.raster.draw_lines import clip_segment, square_pen, trace_polyline
from pageplot.raster.draw_markers import disc_footprint


class RasterTests(unittest.TestCase):
    def test_trace_visits_every_pixel_along_the_major_axis(self) -> None:
        px, py = trace_polyline(np.asarray([0, 4, 4]), np.asarray([0, 2, 5]))
        self.assertEqual(px.tolist(), [0, 1, 2, 3, 4, 4, 4, 4])
        self.assertEqual(py[0], 0)
        self.assertEqual(py[4], 2)
        self.assertEqual(py[-1], 5)

    def test_single_point_is_kept(self) -> None:
        px, py = trace_polyline(np.asarray([3]), np.asarray([7]))
        self.assertEqual((px.tolist(), py.tolist()), ([3], [7]))

    def test_segments_are_clipped_to_the_box(self) -> None:
        box = (0.0, 0.0, 10.0, 10.0)
        for got, want in zip(clip_segment(-10.0, 5.0, 20.0, 5.0, box), (0.0, 5.0, 10.0, 5.0)):
            self.assertAlmostEqual(got, want)
        self.assertEqual(clip_segment(2.0, 3.0, 4.0, 5.0, box), (2.0, 3.0, 4.0, 5.0))
        self.assertIsNone(clip_segment(-5.0, -5.0, -1.0, 20.0, box))
        self.assertIsNone(clip_segment(0.0, 0.0, float("inf"), 1.0, box))

        x0, y0, x1, y1 = clip_segment(-1e308, 5.0, 1.7e308, 5.0, box)
        for v in (x0, x1):
            self.assertGreaterEqual(v, 0.0)
            self.assertLessEqual(v, 10.0)
        self.assertAlmostEqual(y0, 5.0)
        self.assertAlmostEqual(y1, 5.0)

    def test_far_away_polyline_costs_only_its_visible_part(self) -> None:
        canvas = new_canvas(20, 20)
        draw_polyline(canvas, np.asarray([5.0, 1e15]), np.asarray([10.0, 10.0]), (0, 0, 0, 255))
        self.assertTrue(np.all(canvas[10, 5:, :3] == 0))
        self.assertTrue(np.all(canvas[10, :5, :3] == 255))

        draw_polyline(canvas, np.asarray([1e19, 2e19]), np.asarray([3.0, 3.0]), (0, 0, 0, 255))
        self.assertTrue(np.all(canvas[3, :, :3] == 255))

    def test_pens_and_discs(self) -> None:
        self.assertEqual(square_pen(1).tolist(), [[0, 0]])
        self.assertEqual(len(square_pen(3)), 9)
        self.assertEqual(len(disc_footprint(0)), 1)
        self.assertEqual(len(disc_footprint(1)), 9)
        # corners are dropped from larger discs
        self.assertNotIn([3, 3], disc_footprint(3).tolist())
        self.assertIn([3, 0], disc_footprint(3).tolist())

    def test_overlapping_stamps_blend_once(self) -> None:
        canvas = new_canvas(5, 5)
        points = np.asarray([2, 2])
        stamp(canvas, points, points, square_pen(1), (0, 0, 0, 128))
        once = canvas[2, 2, 0]
        self.assertGreater(once, 100)
        self.assertLess(once, 150)

    def test_drawing_is_clipped_to_the_canvas(self) -> None:
        canvas = new_canvas(10, 10)
        draw_polyline(canvas, np.asarray([-20, 30]), np.asarray([5, 5]), (0, 0, 0, 255), width=3)
        self.assertTrue(np.all(canvas[4:7, :, :3] == 0))
        self.assertTrue(np.all(canvas[:4, :, :3] == 255))

        draw_dots(canvas, np.asarray([100]), np.asarray([100]), (0, 0, 0, 255), size=5)
        self.assertTrue(np.all(canvas[7:, :, :3] == 255))

    def test_blit_and_coverage_are_clipped(self) -> None:
        canvas = new_canvas(4, 4)
        blit_rgb(canvas, np.zeros((3, 3, 3), dtype=np.uint8), 2, 2)
        self.assertEqual(int(np.count_nonzero(canvas[:, :, 0] == 0)), 4)

        blend_coverage(canvas, -1, -1, np.full((2, 2), 255, dtype=np.uint8), (10, 20, 30, 255))
        self.assertEqual(canvas[0, 0, :3].tolist(), [10, 20, 30])
        self.assertEqual(canvas[1, 1, :3].tolist(), [255, 255, 255])

    def test_text_is_antialiased_and_rotates(self) -> None:
        w, h = text_size("Axis title", font_size_px=24.0)
        self.assertEqual(text_size("Axis title", font_size_px=24.0, rotate_deg=90), (h, w))
        self.assertEqual(text_size("", font_size_px=24.0)[0], 0)

        canvas = new_canvas(w + 4, h + 4)
        draw_text(canvas, 2, 2, "Axis title", (0, 0, 0, 255), font_size_px=24.0)
        channel = canvas[:, :, 0]
        self.assertTrue(np.any(channel < 255))
        self.assertTrue(np.any((channel > 0) & (channel < 255)))
        with self.assertRaises(ValueError):
            draw_text(canvas, 0, 0, "x", (0, 0, 0, 255), rotate_deg=45)


if __name__ == "__main__":
    unittest.main()
