"""
Debug Trace Functions
=====================

Runs the dimensioning engine and the stack layout generator with a fresh
debugger and returns the recorded trace.
"""

from typing import Optional, Tuple

from .debugger import CalculationDebugger
from .config import CaseDesignerConfig, DEFAULT_CONFIG, check_recommended_ranges
from .models.inputs import CalcInputs
from .models.result import CalcResult
from .models.stack import StackLayout
from .calculations.dimensioning import calculate_battery
from .calculations.stacking import layout_for_result


def run_traced(
    qn: float,
    inputs: CalcInputs,
    config: Optional[CaseDesignerConfig] = None
) -> Tuple[CalcResult, StackLayout, CalculationDebugger]:
    """
    Dimension the case and lay out its plate stack, recording every step.

    Parameters:
    ----------
    qn : float
        Nominal rated capacity (Ah)

    inputs : CalcInputs
        Chemistry and mechanical parameters

    config : CaseDesignerConfig, optional
        Layout settings. Uses DEFAULT_CONFIG if not specified.

    Returns:
    -------
    Tuple[CalcResult, StackLayout, CalculationDebugger]
    """
    config = config if config is not None else DEFAULT_CONFIG

    debugger = CalculationDebugger()
    debugger.start(Qn=qn, **inputs.as_dict())

    # Disabled tracing still returns a started, empty debugger
    recorder = debugger if config.trace_calculations else None

    if recorder is not None:
        for message in check_recommended_ranges(qn, inputs):
            recorder.add_note(message)

    result = calculate_battery(qn, inputs, debugger=recorder)
    layout = layout_for_result(result, config, debugger=recorder)

    debugger.finish()
    return result, layout, debugger


def trace_case_calculations(
    qn: float,
    inputs: CalcInputs,
    config: Optional[CaseDesignerConfig] = None
) -> CalculationDebugger:
    """Trace both calculations and return only the debugger."""
    _, _, debugger = run_traced(qn, inputs, config)
    return debugger
