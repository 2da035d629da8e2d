"""
Calculation Debugger
====================

Records every dimensioning and layout step (formula, inputs, result) so a
design can be checked by hand. Passed explicitly to the calculation
functions; there is no shared instance.
"""

from dataclasses import dataclass
from typing import List, Any, Optional, Dict
from datetime import datetime


@dataclass
class CalculationStep:
    """A single calculation step with inputs, formula, and result."""
    category: str           # e.g., "Capacity", "Plates", "Case"
    description: str
    formula: str
    variables: dict         # Input variables with values
    result: Any
    result_name: str
    result_unit: str = ""
    comment: str = ""


class CalculationDebugger:
    """
    Traces and records calculation steps.

    Usage:
        debugger = CalculationDebugger()
        debugger.start(Qn=92)
        result = calculate_battery(92, inputs, debugger=debugger)
        debugger.finish()
        print(debugger.get_report())
    """

    def __init__(self):
        self.steps: List[CalculationStep] = []
        self.sections: List[tuple] = []  # (step index, section name)
        self.notes: List[str] = []
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.metadata: Dict[str, Any] = {}

    def start(self, **metadata):
        """Start a new session, discarding anything recorded before."""
        self.steps = []
        self.sections = []
        self.notes = []
        self.end_time = None
        self.start_time = datetime.now()
        self.metadata = metadata

    def finish(self):
        """Finish the session."""
        self.end_time = datetime.now()

    def start_section(self, name: str):
        """Start a new section of calculations."""
        self.sections.append((len(self.steps), name))

    def add_step(
        self,
        category: str,
        description: str,
        formula: str,
        variables: dict,
        result: Any,
        result_name: str,
        result_unit: str = "",
        comment: str = ""
    ):
        """Add a calculation step."""
        self.steps.append(CalculationStep(
            category=category,
            description=description,
            formula=formula,
            variables=variables,
            result=result,
            result_name=result_name,
            result_unit=result_unit,
            comment=comment,
        ))

    def add_constant(self, name: str, value: Any, unit: str = "", description: str = ""):
        """Add a constant value."""
        self.add_step(
            category="Constant",
            description=description or f"Constant: {name}",
            formula="",
            variables={},
            result=value,
            result_name=name,
            result_unit=unit,
        )

    def add_note(self, text: str):
        """Attach a free-text note (warnings, overflow) to the report."""
        self.notes.append(text)

    def find_steps_by_category(self, category: str) -> List[CalculationStep]:
        """Find all steps in a given category."""
        return [s for s in self.steps if s.category == category]

    def find_step_by_result(self, result_name: str) -> Optional[CalculationStep]:
        """Find the most recent step that produced a specific result."""
        for step in reversed(self.steps):
            if step.result_name == result_name:
                return step
        return None

    @staticmethod
    def _format_value(value: Any) -> str:
        if isinstance(value, float):
            return f"{value:.6g}"
        return str(value)

    def get_report(self, include_sections: bool = True) -> str:
        """
        Generate a formatted text report of all recorded steps.

        Parameters:
        ----------
        include_sections : bool
            Include section headers in the report

        Returns:
        -------
        str
            Formatted calculation trace
        """
        lines = ["=" * 70, "CASE CALCULATION TRACE", "=" * 70]

        if self.start_time:
            lines.append(f"Generated: {self.start_time.strftime('%Y-%m-%d %H:%M:%S')}")

        if self.metadata:
            lines.append("")
            lines.append("Inputs:")
            for key, value in self.metadata.items():
                lines.append(f"  {key}: {self._format_value(value)}")

        lines.append("")

        section_indices = {idx: name for idx, name in self.sections}
        current_category = None

        for i, step in enumerate(self.steps):
            if include_sections and i in section_indices:
                lines.extend(["", "=" * 70, f">>> {section_indices[i]}", "=" * 70, ""])
                current_category = None

            if step.category != current_category and step.category != "Constant":
                lines.append(f"--- {step.category} ---")
                lines.append("")
                current_category = step.category

            lines.append(f"[{i + 1}] {step.description}")

            if step.variables:
                var_strs = [
                    f"{name}={self._format_value(value)}"
                    for name, value in step.variables.items()
                ]
                lines.append(f"    Inputs: {', '.join(var_strs)}")

            if step.formula:
                lines.append(f"    Formula: {step.formula}")

            result_text = f"    => {step.result_name} = {self._format_value(step.result)}"
            if step.result_unit:
                result_text += f" {step.result_unit}"
            lines.append(result_text)

            if step.comment:
                lines.append(f"    // {step.comment}")

            lines.append("")

        if self.notes:
            lines.append("--- Notes ---")
            lines.extend(f"  ! {note}" for note in self.notes)
            lines.append("")

        lines.append("=" * 70)
        lines.append(f"Total Steps: {len(self.steps)}")
        if self.start_time and self.end_time:
            elapsed = (self.end_time - self.start_time).total_seconds()
            lines.append(f"Elapsed Time: {elapsed:.3f} seconds")
        lines.append("=" * 70)

        return "\n".join(lines)
