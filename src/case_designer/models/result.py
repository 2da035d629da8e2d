"""
Calculation Result
==================

Capacities, active masses, plate counts and case dimensions produced by
the dimensioning engine.
"""

from dataclasses import dataclass
from typing import Tuple

from ..config import MM_PER_M


@dataclass(frozen=True)
class Box:
    """
    Rectangular envelope.

    All dimensions in m.
    Length runs along the electrode face, width across the plate stack.
    """
    length: float
    width: float
    height: float

    @property
    def volume_l(self) -> float:
        """Envelope volume (L)."""
        return self.length * self.width * self.height * 1000.0

    def to_mm(self) -> Tuple[float, float, float]:
        """Return (length, width, height) in mm."""
        return (
            self.length * MM_PER_M,
            self.width * MM_PER_M,
            self.height * MM_PER_M,
        )

    def contains(self, other: "Box") -> bool:
        """True if every dimension is at least the other's."""
        return (
            self.length >= other.length
            and self.width >= other.width
            and self.height >= other.height
        )


@dataclass(frozen=True)
class CaseDimensions:
    """Internal cavity and external envelope of the battery case."""
    internal: Box
    external: Box


@dataclass(frozen=True)
class CalcResult:
    """
    Output of the dimensioning engine.

    Capacities in Ah, masses in g, dimensions in m.
    """
    Qn: float
    Qp: float
    G_PbSO4_plus: float
    G_PbSO4_minus: float
    G_plus: float
    G_minus: float
    N_plus: int
    N_minus: int
    dims: CaseDimensions

    @property
    def total_plates(self) -> int:
        """Positive plus negative plate count."""
        return self.N_plus + self.N_minus

    def summary(self) -> str:
        """Formatted summary string."""
        a_in, b_in, c_in = self.dims.internal.to_mm()
        a_out, b_out, c_out = self.dims.external.to_mm()
        lines = [
            f"Qp (actual capacity):      {self.Qp:>10.2f} Ah",
            f"PbSO4+ :                   {self.G_PbSO4_plus:>10.1f} g",
            f"PbSO4- :                   {self.G_PbSO4_minus:>10.1f} g",
            f"G+ :                       {self.G_plus:>10.1f} g",
            f"G- :                       {self.G_minus:>10.1f} g",
            f"Positive electrodes (N+):  {self.N_plus:>10d}",
            f"Negative electrodes (N-):  {self.N_minus:>10d}",
            "",
            "Internal dimensions (mm)",
            f"  A: {a_in:.3f}   B: {b_in:.3f}   C: {c_in:.3f}",
            "External dimensions (mm)",
            f"  A: {a_out:.0f}   B: {b_out:.0f}   C: {c_out:.0f}",
            f"  Volume: {self.dims.external.volume_l:.2f} L",
        ]
        return "\n".join(lines)
