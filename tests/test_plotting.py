"""
Case Plotter Tests
==================

Smoke tests for the schematic rendering, using the non-interactive Agg
backend.
"""

import sys
from pathlib import Path
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from src.case_designer import (
    CalcInputs,
    EXAMPLE_INPUTS,
    SlabKind,
    calculate_battery,
    generate_stack_layout,
    layout_for_result,
)
from src.case_designer.plotting import CasePlotter, box_faces, half_case_box


class TestBoxFaces(unittest.TestCase):
    """Test box geometry helper."""

    def test_six_quad_faces(self):
        faces = box_faces((0.0, 0.0, 0.0), (2.0, 4.0, 6.0))
        self.assertEqual(len(faces), 6)
        for face in faces:
            self.assertEqual(face.shape, (4, 3))

    def test_extent(self):
        faces = box_faces((1.0, 0.0, -1.0), (2.0, 4.0, 6.0))
        points = np.vstack(faces)
        np.testing.assert_allclose(points.min(axis=0), [0.0, -2.0, -4.0])
        np.testing.assert_allclose(points.max(axis=0), [2.0, 2.0, 2.0])


class TestHalfCase(unittest.TestCase):
    """The cut-away case must enclose the plate stack."""

    def setUp(self):
        inputs = CalcInputs.from_mapping(EXAMPLE_INPUTS)
        self.result = calculate_battery(EXAMPLE_INPUTS["Qn"], inputs)
        self.layout = layout_for_result(self.result)

    def test_keeps_full_length_and_half_width(self):
        dims = self.result.dims.external
        center, size = half_case_box(dims)
        self.assertEqual(center[0], 0.0)
        self.assertAlmostEqual(size[0], dims.length)
        self.assertAlmostEqual(size[1], dims.width / 2)

    def test_every_slab_inside_half_case(self):
        center, size = half_case_box(self.result.dims.external)
        x_min = center[0] - size[0] / 2
        x_max = center[0] + size[0] / 2
        for slab in self.layout:
            self.assertGreaterEqual(slab.left, x_min)
            self.assertLessEqual(slab.right, x_max)


class TestCasePlotter(unittest.TestCase):
    """Figures build without error and show the expected content."""

    def setUp(self):
        inputs = CalcInputs.from_mapping(EXAMPLE_INPUTS)
        self.result = calculate_battery(EXAMPLE_INPUTS["Qn"], inputs)
        self.layout = layout_for_result(self.result)
        self.plotter = CasePlotter()

    def tearDown(self):
        plt.close("all")

    def test_plot_battery_has_two_3d_views(self):
        fig = self.plotter.plot_battery(self.result, self.layout)
        self.assertEqual(len(fig.axes), 2)
        for ax in fig.axes:
            self.assertEqual(ax.name, "3d")
        fig.canvas.draw()

    def test_plot_battery_reuses_figure(self):
        fig = plt.figure()
        returned = self.plotter.plot_battery(self.result, self.layout, fig=fig)
        self.assertIs(returned, fig)
        self.plotter.plot_battery(self.result, self.layout, fig=fig)
        self.assertEqual(len(fig.axes), 2)

    def test_overflow_title(self):
        layout = generate_stack_layout(0.05, 0.1, 0.2, 11, 12)
        fig = self.plotter.plot_battery(self.result, layout)
        self.assertIn("overflow", fig._suptitle.get_text())

    def test_stack_profile_one_patch_per_slab(self):
        fig = self.plotter.plot_stack_profile(self.layout)
        ax = fig.axes[0]
        self.assertEqual(len(ax.patches), len(self.layout))
        fig.canvas.draw()

    def test_legend_covers_slab_kinds(self):
        labels = [h.get_label() for h in self.plotter.legend_handles()]
        self.assertEqual(len(labels), len(SlabKind))
        self.assertIn("Separator", labels)

    def test_single_slab_profile(self):
        layout = generate_stack_layout(0.2, 0.1, 0.2, 0, 1)
        fig = self.plotter.plot_stack_profile(layout)
        self.assertIn("n/a", fig.axes[0].get_title())


if __name__ == "__main__":
    unittest.main()
