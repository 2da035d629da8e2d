"""
Dimensioning Calculations
=========================

Converts lead-acid chemistry parameters into plate counts and case
dimensions:
- Actual capacity with reserve
- PbSO4 and active mass requirements
- Positive/negative plate counts
- Internal and external case dimensions

Inputs are in mm and g; dimensions are returned in m.
"""

import math
from typing import Optional, Tuple

from ..config import K_PBSO4, CAPACITY_RESERVE_FACTOR, MM_PER_M
from ..debugger import CalculationDebugger
from ..errors import DomainError
from ..models.inputs import CalcInputs
from ..models.result import Box, CaseDimensions, CalcResult


def _require_positive(name: str, value: float):
    if not value > 0:
        raise DomainError(name, value)


def calculate_actual_capacity(qn: float) -> float:
    """
    Capacity the battery is designed to deliver.

    Qp = 1.2 × Qn
    """
    return CAPACITY_RESERVE_FACTOR * qn


def calculate_positive_pbso4_mass(qp: float, k_usage_plus: float) -> float:
    """
    PbSO4 mass formed in the positive active mass.

    G_PbSO4+ = Qp × K_PbSO4 / K_usage+

    Raises:
    ------
    DomainError
        If the utilization coefficient is not positive
    """
    _require_positive("K_usage_plus", k_usage_plus)
    return (qp * K_PBSO4) / k_usage_plus


def calculate_positive_active_mass(g_pbso4_plus: float, a_plus_pbso4: float) -> float:
    """
    Total positive active mass.

    G+ = G_PbSO4+ / a+_PbSO4

    Raises:
    ------
    DomainError
        If the PbSO4 content is not positive
    """
    _require_positive("a_plus_PbSO4", a_plus_pbso4)
    return g_pbso4_plus / a_plus_pbso4


def calculate_plate_counts(g_plus: float, delta_g_plus: float) -> Tuple[int, int]:
    """
    Positive and negative plate counts.

    N+ = ceil(G+ / Δg+), N- = N+ + 1

    A fractional plate requirement always takes a whole extra plate, so the
    stack never carries less active mass than required. One more negative
    than positive plate puts a negative on both faces of every positive.

    Returns:
    -------
    Tuple[int, int]
        (N_plus, N_minus)
    """
    _require_positive("delta_g_plus", delta_g_plus)
    n_plus = int(math.ceil(g_plus / delta_g_plus))
    return n_plus, n_plus + 1


def calculate_negative_masses(
    n_minus: int,
    delta_g_minus: float,
    a_minus_pbso4: float
) -> Tuple[float, float]:
    """
    Negative active mass and its PbSO4 content.

    G- = Δg- × N-, G_PbSO4- = G- × a-_PbSO4

    Returns:
    -------
    Tuple[float, float]
        (G_minus, G_PbSO4_minus) in g
    """
    g_minus = delta_g_minus * n_minus
    return g_minus, g_minus * a_minus_pbso4


def calculate_internal_dimensions_mm(
    inputs: CalcInputs,
    n_plus: int,
    n_minus: int
) -> Tuple[float, float, float]:
    """
    Case cavity size.

    A_in = l+ + 2Δl_sep          (along the electrode face)
    B_in = N+·δ+ + N-·δ-         (across the plate stack)
    C_in = h+ + Δh               (height)

    Returns:
    -------
    Tuple[float, float, float]
        (A_in, B_in, C_in) in mm
    """
    b_in = n_plus * inputs.delta_plus + n_minus * inputs.delta_minus
    a_in = inputs.l_plus + 2 * inputs.delta_l_sep
    c_in = inputs.h_plus + inputs.delta_h
    return a_in, b_in, c_in


def calculate_external_dimensions_mm(
    inputs: CalcInputs,
    internal_mm: Tuple[float, float, float]
) -> Tuple[float, float, float]:
    """
    Case outer envelope.

    A_out = A_in + 2·wall, B_out = B_in + 2·wall,
    C_out = C_in + lid + base + bonnet

    Returns:
    -------
    Tuple[float, float, float]
        (A_out, B_out, C_out) in mm
    """
    a_in, b_in, c_in = internal_mm
    a_out = a_in + 2 * inputs.wall_thk
    b_out = b_in + 2 * inputs.wall_thk
    c_out = c_in + inputs.lid_thk + inputs.base_thk + inputs.bonnet_h
    return a_out, b_out, c_out


def _box_from_mm(dims_mm: Tuple[float, float, float]) -> Box:
    length, width, height = dims_mm
    return Box(
        length=length / MM_PER_M,
        width=width / MM_PER_M,
        height=height / MM_PER_M,
    )


def calculate_battery(
    qn: float,
    inputs: CalcInputs,
    debugger: Optional[CalculationDebugger] = None
) -> CalcResult:
    """
    Dimension a lead-acid battery case.

    Parameters:
    ----------
    qn : float
        Nominal rated capacity (Ah)

    inputs : CalcInputs
        Chemistry and mechanical parameters

    debugger : CalculationDebugger, optional
        Receives one step per derivation stage

    Returns:
    -------
    CalcResult
        Capacities, masses, plate counts and case dimensions (m)

    Raises:
    ------
    DomainError
        If K_usage_plus, a_plus_PbSO4 or delta_g_plus is not positive,
        or Qn is not finite
    """
    # Fail before any partial work
    if not math.isfinite(qn):
        raise DomainError("Qn", qn, "a finite number")
    _require_positive("K_usage_plus", inputs.K_usage_plus)
    _require_positive("a_plus_PbSO4", inputs.a_plus_PbSO4)
    _require_positive("delta_g_plus", inputs.delta_g_plus)

    qp = calculate_actual_capacity(qn)
    g_pbso4_plus = calculate_positive_pbso4_mass(qp, inputs.K_usage_plus)
    g_plus = calculate_positive_active_mass(g_pbso4_plus, inputs.a_plus_PbSO4)
    n_plus, n_minus = calculate_plate_counts(g_plus, inputs.delta_g_plus)
    g_minus, g_pbso4_minus = calculate_negative_masses(
        n_minus, inputs.delta_g_minus, inputs.a_minus_PbSO4
    )
    internal_mm = calculate_internal_dimensions_mm(inputs, n_plus, n_minus)
    external_mm = calculate_external_dimensions_mm(inputs, internal_mm)

    if debugger is not None:
        _trace_dimensioning(
            debugger, qn, inputs, qp, g_pbso4_plus, g_plus,
            n_plus, n_minus, g_minus, g_pbso4_minus, internal_mm, external_mm
        )

    return CalcResult(
        Qn=qn,
        Qp=qp,
        G_PbSO4_plus=g_pbso4_plus,
        G_PbSO4_minus=g_pbso4_minus,
        G_plus=g_plus,
        G_minus=g_minus,
        N_plus=n_plus,
        N_minus=n_minus,
        dims=CaseDimensions(
            internal=_box_from_mm(internal_mm),
            external=_box_from_mm(external_mm),
        ),
    )


def _trace_dimensioning(
    debugger: CalculationDebugger,
    qn, inputs, qp, g_pbso4_plus, g_plus,
    n_plus, n_minus, g_minus, g_pbso4_minus, internal_mm, external_mm
):
    """Record the derivation in the debugger."""
    a_in, b_in, c_in = internal_mm
    a_out, b_out, c_out = external_mm

    debugger.start_section("Dimensioning")
    debugger.add_constant("K_PbSO4", K_PBSO4, "g/Ah", "303 / (2 × 26.8)")

    debugger.add_step(
        category="Capacity",
        description="Actual capacity with reserve",
        formula="Qp = 1.2 × Qn",
        variables={"Qn": qn},
        result=qp,
        result_name="Qp",
        result_unit="Ah",
    )
    debugger.add_step(
        category="Active Mass",
        description="PbSO4 in positive active mass",
        formula="G_PbSO4+ = Qp × K_PbSO4 / K_usage+",
        variables={"Qp": qp, "K_PbSO4": K_PBSO4, "K_usage+": inputs.K_usage_plus},
        result=g_pbso4_plus,
        result_name="G_PbSO4+",
        result_unit="g",
    )
    debugger.add_step(
        category="Active Mass",
        description="Positive active mass",
        formula="G+ = G_PbSO4+ / a+_PbSO4",
        variables={"G_PbSO4+": g_pbso4_plus, "a+_PbSO4": inputs.a_plus_PbSO4},
        result=g_plus,
        result_name="G+",
        result_unit="g",
    )
    debugger.add_step(
        category="Plates",
        description="Positive plate count",
        formula="N+ = ceil(G+ / Δg+)",
        variables={"G+": g_plus, "Δg+": inputs.delta_g_plus},
        result=n_plus,
        result_name="N+",
        comment="Rounded up so required active mass is always covered",
    )
    debugger.add_step(
        category="Plates",
        description="Negative plate count",
        formula="N- = N+ + 1",
        variables={"N+": n_plus},
        result=n_minus,
        result_name="N-",
    )
    debugger.add_step(
        category="Active Mass",
        description="Negative active mass",
        formula="G- = Δg- × N-",
        variables={"Δg-": inputs.delta_g_minus, "N-": n_minus},
        result=g_minus,
        result_name="G-",
        result_unit="g",
    )
    debugger.add_step(
        category="Active Mass",
        description="PbSO4 in negative active mass",
        formula="G_PbSO4- = G- × a-_PbSO4",
        variables={"G-": g_minus, "a-_PbSO4": inputs.a_minus_PbSO4},
        result=g_pbso4_minus,
        result_name="G_PbSO4-",
        result_unit="g",
    )
    debugger.add_step(
        category="Case",
        description="Internal width (plate stack)",
        formula="B_in = N+·δ+ + N-·δ-",
        variables={"N+": n_plus, "δ+": inputs.delta_plus, "N-": n_minus, "δ-": inputs.delta_minus},
        result=b_in,
        result_name="B_in",
        result_unit="mm",
    )
    debugger.add_step(
        category="Case",
        description="Internal length",
        formula="A_in = l+ + 2·Δl_sep",
        variables={"l+": inputs.l_plus, "Δl_sep": inputs.delta_l_sep},
        result=a_in,
        result_name="A_in",
        result_unit="mm",
    )
    debugger.add_step(
        category="Case",
        description="Internal height",
        formula="C_in = h+ + Δh",
        variables={"h+": inputs.h_plus, "Δh": inputs.delta_h},
        result=c_in,
        result_name="C_in",
        result_unit="mm",
    )
    debugger.add_step(
        category="Case",
        description="External length",
        formula="A_out = A_in + 2·wall",
        variables={"A_in": a_in, "wall": inputs.wall_thk},
        result=a_out,
        result_name="A_out",
        result_unit="mm",
    )
    debugger.add_step(
        category="Case",
        description="External width",
        formula="B_out = B_in + 2·wall",
        variables={"B_in": b_in, "wall": inputs.wall_thk},
        result=b_out,
        result_name="B_out",
        result_unit="mm",
    )
    debugger.add_step(
        category="Case",
        description="External height",
        formula="C_out = C_in + lid + base + bonnet",
        variables={
            "C_in": c_in,
            "lid": inputs.lid_thk,
            "base": inputs.base_thk,
            "bonnet": inputs.bonnet_h,
        },
        result=c_out,
        result_name="C_out",
        result_unit="mm",
    )
