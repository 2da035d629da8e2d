"""
Case Designer Calculations Module
=================================

Pure functions for case dimensioning and plate stack layout.
Chemistry inputs are in mm and g; geometry outputs are in m.
"""

from .dimensioning import (
    calculate_battery,
    calculate_actual_capacity,
    calculate_positive_pbso4_mass,
    calculate_positive_active_mass,
    calculate_plate_counts,
    calculate_negative_masses,
    calculate_internal_dimensions_mm,
    calculate_external_dimensions_mm,
)

from .stacking import (
    StackState,
    StackSequence,
    calculate_used_thickness,
    solve_uniform_gap,
    slab_center,
    generate_stack_layout,
    layout_for_result,
)

__all__ = [
    # Dimensioning
    "calculate_battery",
    "calculate_actual_capacity",
    "calculate_positive_pbso4_mass",
    "calculate_positive_active_mass",
    "calculate_plate_counts",
    "calculate_negative_masses",
    "calculate_internal_dimensions_mm",
    "calculate_external_dimensions_mm",
    # Stacking
    "StackState",
    "StackSequence",
    "calculate_used_thickness",
    "solve_uniform_gap",
    "slab_center",
    "generate_stack_layout",
    "layout_for_result",
]
