"""
Battery Case Designer Module
============================

Structural calculation of a lead-acid battery case.

From a handful of electrochemical and mechanical parameters the designer
derives active-mass requirements, plate counts and case dimensions, then
lays out the internal plate/separator stack for a schematic 3D model.

Features:
---------
- Actual capacity and PbSO4/active-mass requirements
- Positive/negative plate counts (N- = N+ + 1)
- Internal and external case dimensions
- Evenly spaced negative/separator/positive stack layout
- Step-by-step calculation trace

Usage:
------
    from src.case_designer import CalcInputs, EXAMPLE_INPUTS, calculate_battery, layout_for_result

    inputs = CalcInputs.from_mapping(EXAMPLE_INPUTS)
    result = calculate_battery(EXAMPLE_INPUTS["Qn"], inputs)
    layout = layout_for_result(result)

    print(result.summary())
    print(layout.summary())
"""

from .models.inputs import CalcInputs
from .models.result import Box, CaseDimensions, CalcResult
from .models.stack import SlabKind, Slab, StackLayout
from .errors import CaseDesignerError, DomainError, LayoutOverflow, LayoutWarning
from .config import (
    CaseDesignerConfig,
    DEFAULT_CONFIG,
    EXAMPLE_INPUTS,
    FIELD_SPECS,
    check_recommended_ranges,
)
from .calculations.dimensioning import calculate_battery
from .calculations.stacking import StackSequence, generate_stack_layout, layout_for_result
from .debugger import CalculationDebugger
from .debug_trace import run_traced, trace_case_calculations

__all__ = [
    # Models
    "CalcInputs",
    "Box",
    "CaseDimensions",
    "CalcResult",
    "SlabKind",
    "Slab",
    "StackLayout",
    # Errors
    "CaseDesignerError",
    "DomainError",
    "LayoutOverflow",
    "LayoutWarning",
    # Config
    "CaseDesignerConfig",
    "DEFAULT_CONFIG",
    "EXAMPLE_INPUTS",
    "FIELD_SPECS",
    "check_recommended_ranges",
    # Calculations
    "calculate_battery",
    "StackSequence",
    "generate_stack_layout",
    "layout_for_result",
    # Debugger
    "CalculationDebugger",
    "run_traced",
    "trace_case_calculations",
]
