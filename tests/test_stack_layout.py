"""
Stack Layout Tests
==================

Validates plate/separator ordering, gap solving and slab positions.

Test Methodology:
- Emission order follows N | S P S N | S P S N ...
- Material plus gaps fill the usable envelope exactly
- Degenerate stacks (single slab, no negatives, surplus negatives)
- Overflowing stacks are reported, not corrected
"""

import sys
from pathlib import Path
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.case_designer import (
    CalcInputs,
    CaseDesignerConfig,
    EXAMPLE_INPUTS,
    LayoutOverflow,
    LayoutWarning,
    SlabKind,
    StackSequence,
    calculate_battery,
    generate_stack_layout,
    layout_for_result,
)
from src.case_designer.config import (
    ELECTRODE_THICKNESS_M,
    SEPARATOR_THICKNESS_M,
    ENVELOPE_MARGIN_M,
)
from src.case_designer.calculations.stacking import (
    calculate_used_thickness,
    solve_uniform_gap,
    slab_center,
)
from src.case_designer.debugger import CalculationDebugger

N = SlabKind.NEGATIVE
P = SlabKind.POSITIVE
S = SlabKind.SEPARATOR

STACKING_LOGGER = "src.case_designer.calculations.stacking"


class TestStackSequence(unittest.TestCase):
    """Test the emission state machine."""

    def test_standard_bracketing(self):
        """Two positives, three negatives."""
        self.assertEqual(
            list(StackSequence(2, 3)),
            [N, S, P, S, N, S, P, S, N]
        )

    def test_single_negative_only(self):
        self.assertEqual(list(StackSequence(0, 1)), [N])

    def test_no_negatives(self):
        """Pure separator/positive/separator groups."""
        self.assertEqual(list(StackSequence(2, 0)), [S, P, S, S, P, S])

    def test_empty(self):
        self.assertEqual(list(StackSequence(0, 0)), [])

    def test_fewer_negatives_than_groups(self):
        """Negatives run out before the groups do."""
        self.assertEqual(list(StackSequence(3, 2)), [N, S, P, S, N, S, P, S, S, P, S])

    def test_surplus_negatives_truncated(self):
        """Loop ends after pos_count groups; extra negatives are not emitted."""
        sequence = StackSequence(1, 5)
        self.assertEqual(list(sequence), [N, S, P, S, N])
        self.assertEqual(sequence.placed_negatives, 2)
        self.assertEqual(sequence.unplaced_negatives, 3)

    def test_restartable(self):
        sequence = StackSequence(4, 5)
        self.assertEqual(list(sequence), list(sequence))

    def test_length_matches_emission(self):
        for pos in range(0, 6):
            for neg in range(0, 9):
                sequence = StackSequence(pos, neg)
                self.assertEqual(len(sequence), len(list(sequence)))

    def test_never_adjacent_opposite_electrodes(self):
        """Every electrode pair of opposite polarity has a separator between."""
        for pos in range(0, 8):
            for neg in range(0, pos + 3):
                kinds = list(StackSequence(pos, neg))
                for a, b in zip(kinds, kinds[1:]):
                    self.assertFalse({a, b} == {N, P}, f"pos={pos}, neg={neg}")

    def test_positive_always_between_separators(self):
        for pos in range(1, 8):
            kinds = list(StackSequence(pos, pos + 1))
            for i, kind in enumerate(kinds):
                if kind is P:
                    self.assertIs(kinds[i - 1], S)
                    self.assertIs(kinds[i + 1], S)

    def test_negative_counts_rejected(self):
        with self.assertRaises(ValueError):
            StackSequence(-1, 2)
        with self.assertRaises(ValueError):
            StackSequence(2, -1)


class TestGapSolving(unittest.TestCase):
    """Test the uniform gap and used thickness."""

    def test_used_thickness(self):
        used = calculate_used_thickness(2, 3, 0.003, 0.0015)
        self.assertAlmostEqual(used, 5 * 0.003 + 4 * 0.0015)

    def test_gap_formula(self):
        gap = solve_uniform_gap(0.18, 11, 12, 0.003, 0.0015)
        self.assertAlmostEqual(gap, (0.18 - 0.102) / 44)

    def test_single_slab_has_no_gap(self):
        self.assertIsNone(solve_uniform_gap(0.18, 0, 1, 0.003, 0.0015))
        self.assertIsNone(solve_uniform_gap(0.18, 0, 0, 0.003, 0.0015))

    def test_slab_center_closed_form(self):
        """Third slab after one electrode and one separator."""
        center = slab_center(
            start=-1.0, electrodes_before=1, separators_before=1, own_thickness=0.5,
            electrode_thickness=0.5, separator_thickness=0.25, gap=0.125
        )
        self.assertAlmostEqual(center, -1.0 + 0.5 + 0.25 + 2 * 0.125 + 0.25)


class TestLayoutGeometry(unittest.TestCase):
    """Test that slabs fill the envelope evenly."""

    def _layout(self, pos, neg, length=0.3):
        return generate_stack_layout(length, 0.2, 0.2, pos, neg)

    def test_counts(self):
        for pos in range(0, 16):
            layout = self._layout(pos, pos + 1)
            self.assertEqual(layout.count(P), pos)
            self.assertEqual(layout.count(S), 2 * pos)
            self.assertEqual(layout.count(N), pos + 1)

    def test_material_plus_gaps_fill_envelope(self):
        for pos in range(1, 16):
            layout = self._layout(pos, pos + 1)
            total = sum(s.thickness for s in layout) + (len(layout) - 1) * layout.gap
            self.assertAlmostEqual(total / layout.usable_length, 1.0, delta=1e-9)

    def test_stack_spans_envelope(self):
        layout = self._layout(5, 6)
        half = layout.usable_length / 2
        self.assertAlmostEqual(layout.slabs[0].left, -half, places=12)
        self.assertAlmostEqual(layout.slabs[-1].right, half, places=12)
        self.assertAlmostEqual(layout.occupied_length, layout.usable_length, places=12)

    def test_uniform_spacing(self):
        layout = self._layout(6, 7)
        for a, b in zip(layout.slabs, layout.slabs[1:]):
            self.assertAlmostEqual(b.left - a.right, layout.gap, places=12)

    def test_thickness_by_kind(self):
        layout = self._layout(3, 4)
        for slab in layout:
            expected = SEPARATOR_THICKNESS_M if slab.kind is S else ELECTRODE_THICKNESS_M
            self.assertEqual(slab.thickness, expected)

    def test_indices_in_order(self):
        layout = self._layout(3, 4)
        self.assertEqual([s.index for s in layout], list(range(len(layout))))

    def test_envelope_margin_applied(self):
        layout = generate_stack_layout(0.3, 0.2, 0.25, 2, 3)
        self.assertAlmostEqual(layout.usable_length, 0.3 - ENVELOPE_MARGIN_M)
        self.assertAlmostEqual(layout.plate_width, 0.2 - ENVELOPE_MARGIN_M)
        self.assertAlmostEqual(layout.plate_height, 0.25 - ENVELOPE_MARGIN_M)

    def test_deterministic(self):
        self.assertEqual(self._layout(4, 5), self._layout(4, 5))


class TestDegenerateLayouts(unittest.TestCase):
    """Edge cases from the stack rules."""

    def test_single_negative(self):
        """One negative plate: a single slab, no gap, no separators."""
        layout = generate_stack_layout(0.2, 0.1, 0.2, 0, 1)
        self.assertEqual(layout.kinds, (N,))
        self.assertIsNone(layout.gap)
        self.assertEqual(layout.count(S), 0)
        self.assertIsNone(layout.overflow)
        self.assertAlmostEqual(layout.slabs[0].left, -layout.usable_length / 2)

    def test_no_negatives(self):
        layout = generate_stack_layout(0.2, 0.1, 0.2, 2, 0)
        self.assertEqual(layout.kinds, (S, P, S, S, P, S))
        self.assertEqual(len(layout), 6)
        self.assertEqual(layout.count(N), 0)
        self.assertEqual(layout.warnings, ())

    def test_empty_stack(self):
        layout = generate_stack_layout(0.2, 0.1, 0.2, 0, 0)
        self.assertEqual(len(layout), 0)
        self.assertIsNone(layout.gap)
        self.assertEqual(layout.occupied_length, 0.0)

    def test_exact_fit_gives_zero_gap(self):
        """Envelope exactly equal to the material: slabs touch, no overflow."""
        used = calculate_used_thickness(2, 3, 0.25, 0.125)
        layout = generate_stack_layout(
            used, 1.0, 1.0, 2, 3,
            electrode_thickness=0.25, separator_thickness=0.125, envelope_margin=0.0
        )
        self.assertEqual(layout.gap, 0.0)
        self.assertIsNone(layout.overflow)
        layout.raise_for_overflow()
        for a, b in zip(layout.slabs, layout.slabs[1:]):
            self.assertAlmostEqual(a.right, b.left, places=12)

    def test_exact_fit_with_default_thicknesses(self):
        used = calculate_used_thickness(2, 3, ELECTRODE_THICKNESS_M, SEPARATOR_THICKNESS_M)
        layout = generate_stack_layout(used + ENVELOPE_MARGIN_M, 0.1, 0.2, 2, 3)
        self.assertAlmostEqual(layout.gap, 0.0, places=12)
        self.assertTrue(layout.is_valid)

    def test_negative_count_rejected(self):
        with self.assertRaises(ValueError):
            generate_stack_layout(0.2, 0.1, 0.2, -1, 0)


class TestLayoutConditions(unittest.TestCase):
    """Overflow and surplus negatives are reported to the caller."""

    def test_overflow_reported_not_raised(self):
        with self.assertLogs(STACKING_LOGGER, level="WARNING"):
            layout = generate_stack_layout(0.05, 0.1, 0.2, 11, 12)
        self.assertEqual(len(layout), 45)
        self.assertLess(layout.gap, 0)
        self.assertFalse(layout.is_valid)

        overflow = layout.overflow
        self.assertIsInstance(overflow, LayoutOverflow)
        self.assertAlmostEqual(overflow.gap, layout.gap)
        self.assertGreater(overflow.excess, 0)

    def test_raise_for_overflow(self):
        layout = generate_stack_layout(0.05, 0.1, 0.2, 11, 12)
        with self.assertRaises(LayoutOverflow):
            layout.raise_for_overflow()

    def test_overflow_in_summary(self):
        layout = generate_stack_layout(0.05, 0.1, 0.2, 11, 12)
        self.assertIn("OVERFLOW", layout.summary())

    def test_surplus_negatives_warning(self):
        with self.assertLogs(STACKING_LOGGER, level="WARNING"):
            layout = generate_stack_layout(0.2, 0.1, 0.2, 1, 4)
        self.assertEqual(layout.kinds, (N, S, P, S, N))
        self.assertEqual(len(layout.warnings), 1)
        warning = layout.warnings[0]
        self.assertIsInstance(warning, LayoutWarning)
        self.assertEqual(warning.requested_negatives, 4)
        self.assertEqual(warning.placed_negatives, 2)
        self.assertEqual(warning.unplaced_negatives, 2)

    def test_surplus_negatives_keep_requested_gap(self):
        """The gap is solved for the requested plates, placed or not."""
        layout = generate_stack_layout(0.2, 0.1, 0.2, 1, 4)
        expected = solve_uniform_gap(
            0.2 - ENVELOPE_MARGIN_M, 1, 4, ELECTRODE_THICKNESS_M, SEPARATOR_THICKNESS_M
        )
        self.assertEqual(layout.gap, expected)
        self.assertLess(layout.occupied_length, layout.usable_length)

    def test_strict_raises_warning(self):
        with self.assertRaises(LayoutWarning):
            generate_stack_layout(0.2, 0.1, 0.2, 1, 4, strict=True)

    def test_standard_counts_have_no_warning(self):
        layout = generate_stack_layout(0.2, 0.1, 0.2, 5, 6, strict=True)
        self.assertEqual(layout.warnings, ())


class TestLayoutForResult(unittest.TestCase):
    """Dimensioning output feeds the layout generator."""

    def setUp(self):
        inputs = CalcInputs.from_mapping(EXAMPLE_INPUTS)
        self.result = calculate_battery(EXAMPLE_INPUTS["Qn"], inputs)

    def test_reference_design_layout(self):
        layout = layout_for_result(self.result)
        self.assertEqual(layout.count(P), 11)
        self.assertEqual(layout.count(N), 12)
        self.assertEqual(layout.count(S), 22)
        self.assertAlmostEqual(layout.usable_length, 0.18)
        self.assertAlmostEqual(layout.gap, (0.18 - 0.102) / 44)
        self.assertIsNone(layout.overflow)

    def test_config_thicknesses_used(self):
        config = CaseDesignerConfig(electrode_thickness_m=0.004, separator_thickness_m=0.002)
        layout = layout_for_result(self.result, config)
        self.assertEqual(layout.slabs[0].thickness, 0.004)
        self.assertEqual(layout.slabs[1].thickness, 0.002)

    def test_layout_trace(self):
        debugger = CalculationDebugger()
        layout_for_result(self.result, debugger=debugger)
        self.assertEqual(debugger.find_step_by_result("slabs").result, 45)
        self.assertAlmostEqual(debugger.find_step_by_result("gap").result, (0.18 - 0.102) / 44)


def run_validation():
    """Run validation tests and print summary."""
    print("=" * 60)
    print("Stack Layout Validation")
    print("=" * 60)
    print()

    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    suite.addTests(loader.loadTestsFromTestCase(TestStackSequence))
    suite.addTests(loader.loadTestsFromTestCase(TestGapSolving))
    suite.addTests(loader.loadTestsFromTestCase(TestLayoutGeometry))
    suite.addTests(loader.loadTestsFromTestCase(TestDegenerateLayouts))
    suite.addTests(loader.loadTestsFromTestCase(TestLayoutConditions))
    suite.addTests(loader.loadTestsFromTestCase(TestLayoutForResult))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    print()
    print("=" * 60)
    if result.wasSuccessful():
        print("All validation tests PASSED")
    else:
        print(f"FAILED: {len(result.failures)} failures, {len(result.errors)} errors")
    print("=" * 60)

    return result.wasSuccessful()


if __name__ == "__main__":
    success = run_validation()
    sys.exit(0 if success else 1)
