"""
Case Designer Configuration
===========================

Contains physical constants, chemistry defaults, stack layout constants,
the example parameter set and configuration settings for lead-acid case
dimensioning.

Units:
- Capacity: Ah
- Mass: g
- Chemistry-level lengths (inputs): mm
- Geometry-level lengths (outputs, stack layout): m
"""

from dataclasses import dataclass
from typing import Optional, List, Dict, Any


# =============================================================================
# Physical Constants
# =============================================================================

# Stoichiometric conversion between equivalent capacity and PbSO4 mass (g/Ah)
# M(PbSO4) = 303 g/mol, 2 electrons, 26.8 Ah per Faraday equivalent
K_PBSO4 = 303 / (2 * 26.8)

# Actual delivered capacity over nominal rated capacity
CAPACITY_RESERVE_FACTOR = 1.2

# Length unit conversion
MM_PER_M = 1000.0


# =============================================================================
# Chemistry Defaults
# =============================================================================

# Per-plate thickness (mm)
DEFAULT_DELTA_PLUS_MM = 4.6
DEFAULT_DELTA_MINUS_MM = 4.2

# Active mass per plate (g)
DEFAULT_DELTA_G_PLUS_G = 120.0
DEFAULT_DELTA_G_MINUS_G = 110.0

# Grid mass (g) - reserved, not consumed by the derivation
DEFAULT_G_GRID_G = 110.0


# =============================================================================
# Stack Layout Constants (m)
# =============================================================================

# Rendered electrode thickness, same for both polarities
ELECTRODE_THICKNESS_M = 0.003

# Rendered separator thickness
SEPARATOR_THICKNESS_M = 0.0015

# Clearance subtracted from case length, width and height
ENVELOPE_MARGIN_M = 0.02

# Solved gaps above -GAP_TOLERANCE_M count as touching, not overflowing
GAP_TOLERANCE_M = 1e-12


# =============================================================================
# Example Parameter Set
# =============================================================================
# A typical 12V automotive starter battery. The calculation engine never
# reads this table; callers pass it in explicitly.

EXAMPLE_INPUTS = {
    "Qn": 92.0,
    "K_usage_plus": 0.55,
    "a_plus_PbSO4": 0.90,
    "a_minus_PbSO4": 0.96,
    "l_plus": 183.0,
    "h_plus": 170.0,
    "delta_l_sep": 3.5,
    "delta_h": 5.5,
    "wall_thk": 5.0,
    "lid_thk": 3.0,
    "base_thk": 5.0,
    "bonnet_h": 15.0,
}


# =============================================================================
# Form Fields
# =============================================================================

@dataclass(frozen=True)
class FieldSpec:
    """Description of one input field on the parameter form."""
    name: str
    label: str
    unit: str = ""
    step: float = 1.0
    min_value: Optional[float] = None   # Recommended minimum
    max_value: Optional[float] = None   # Recommended maximum


FIELD_SPECS = (
    FieldSpec("Qn", "Nominal capacity", "Ah", 1.0),
    FieldSpec("K_usage_plus", "PbSO4 utilization coefficient", "", 0.01, 0.55, 0.65),
    FieldSpec("a_plus_PbSO4", "PbSO4 content in positive active mass", "", 0.01, 0.90, 0.93),
    FieldSpec("a_minus_PbSO4", "PbSO4 content in negative active mass", "", 0.01, 0.94, 0.96),
    FieldSpec("l_plus", "Electrode length", "mm", 1.0),
    FieldSpec("h_plus", "Electrode height", "mm", 1.0),
    FieldSpec("delta_l_sep", "Separator protrusion width from electrode", "mm", 0.1, 2.5, 3.5),
    FieldSpec("delta_h", "Height from electrode to base", "mm", 0.1),
    FieldSpec("wall_thk", "Battery case wall thickness", "mm", 0.5),
    FieldSpec("lid_thk", "Case lid thickness", "mm", 0.5),
    FieldSpec("base_thk", "Case base thickness", "mm", 0.5),
    FieldSpec("bonnet_h", "Case bonnet height", "mm", 1.0),
)


def get_field_spec(name: str) -> FieldSpec:
    """Look up a form field by parameter name."""
    for spec in FIELD_SPECS:
        if spec.name == name:
            return spec
    raise KeyError(f"Unknown field: {name}")


def check_recommended_ranges(qn: float, inputs: Any) -> List[str]:
    """
    Compare input values against recommended practice ranges.

    Advisory only: values outside the ranges are still calculated.

    Parameters:
    ----------
    qn : float
        Nominal rated capacity (Ah)

    inputs : CalcInputs
        Chemistry and mechanical inputs

    Returns:
    -------
    List[str]
        One message per out-of-range field (empty if all fields are in range)
    """
    values: Dict[str, float] = {"Qn": qn}
    for spec in FIELD_SPECS:
        if hasattr(inputs, spec.name):
            values[spec.name] = getattr(inputs, spec.name)

    messages = []
    for spec in FIELD_SPECS:
        value = values.get(spec.name)
        if value is None:
            continue
        if spec.min_value is not None and value < spec.min_value:
            messages.append(
                f"{spec.name}={value:g} is below the recommended minimum {spec.min_value:g}"
            )
        if spec.max_value is not None and value > spec.max_value:
            messages.append(
                f"{spec.name}={value:g} is above the recommended maximum {spec.max_value:g}"
            )
    return messages


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class CaseDesignerConfig:
    """
    Configuration for stack layout generation and tracing.

    Attributes:
    ----------
    electrode_thickness_m : float
        Rendered electrode thickness, both polarities (m)

    separator_thickness_m : float
        Rendered separator thickness (m)

    envelope_margin_m : float
        Clearance subtracted from case length/width/height (m)

    strict_layout : bool
        Raise LayoutWarning instead of attaching it to the layout when
        negative plates cannot all be bracketed

    trace_calculations : bool
        Record every calculation step in a CalculationDebugger
    """
    electrode_thickness_m: float = ELECTRODE_THICKNESS_M
    separator_thickness_m: float = SEPARATOR_THICKNESS_M
    envelope_margin_m: float = ENVELOPE_MARGIN_M

    strict_layout: bool = False
    trace_calculations: bool = True

    def validate(self) -> tuple[bool, str]:
        """Validate configuration values."""
        errors = []

        if self.electrode_thickness_m <= 0:
            errors.append("Electrode thickness must be positive")
        if self.separator_thickness_m <= 0:
            errors.append("Separator thickness must be positive")
        if self.envelope_margin_m < 0:
            errors.append("Envelope margin cannot be negative")

        if errors:
            return False, "; ".join(errors)
        return True, ""


DEFAULT_CONFIG = CaseDesignerConfig()
