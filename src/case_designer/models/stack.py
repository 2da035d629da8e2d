"""
Stack Layout Model
==================

Positioned electrodes and separators inside the battery case.

Offsets are along the case length axis, in m, with the origin at the
centre of the case.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, List

from ..config import GAP_TOLERANCE_M
from ..errors import LayoutOverflow, LayoutWarning


class SlabKind(Enum):
    """Kind of slab in the plate stack."""
    NEGATIVE = "negative-electrode"
    POSITIVE = "positive-electrode"
    SEPARATOR = "separator"

    @property
    def is_electrode(self) -> bool:
        return self is not SlabKind.SEPARATOR


@dataclass(frozen=True)
class Slab:
    """A single plate or separator."""
    index: int            # Position in emission order
    kind: SlabKind
    thickness: float      # m
    center: float         # m along length axis

    @property
    def left(self) -> float:
        """Leading face offset (m)."""
        return self.center - self.thickness / 2.0

    @property
    def right(self) -> float:
        """Trailing face offset (m)."""
        return self.center + self.thickness / 2.0


@dataclass(frozen=True)
class StackLayout:
    """
    Ordered plate/separator stack.

    Attributes:
    ----------
    slabs : tuple of Slab
        Slabs in emission order, leftmost first

    gap : float or None
        Uniform spacing between adjacent slabs (m). None when fewer than
        two slabs were requested.

    usable_length : float
        Length of the stack envelope (m)

    plate_width, plate_height : float
        Face size of every slab (m)

    used_thickness : float
        Summed material thickness of the requested slabs (m)

    pos_count, neg_count : int
        Requested positive/negative plate counts
    """
    slabs: Tuple[Slab, ...]
    gap: Optional[float]
    usable_length: float
    plate_width: float
    plate_height: float
    used_thickness: float
    pos_count: int
    neg_count: int
    warnings: Tuple[LayoutWarning, ...] = field(default=())

    def __len__(self) -> int:
        return len(self.slabs)

    def __iter__(self):
        return iter(self.slabs)

    @property
    def overflow(self) -> Optional[LayoutOverflow]:
        """Overflow condition if the solved gap is negative, else None."""
        if self.gap is None or self.gap >= -GAP_TOLERANCE_M:
            return None
        return LayoutOverflow(self.gap, self.usable_length, self.used_thickness)

    @property
    def is_valid(self) -> bool:
        """True when slabs do not overlap."""
        return self.overflow is None

    def raise_for_overflow(self):
        """Raise LayoutOverflow if the slabs overlap."""
        overflow = self.overflow
        if overflow is not None:
            raise overflow

    def slabs_of_kind(self, kind: SlabKind) -> List[Slab]:
        """All slabs of the given kind, in order."""
        return [s for s in self.slabs if s.kind == kind]

    def count(self, kind: SlabKind) -> int:
        """Number of slabs of the given kind."""
        return sum(1 for s in self.slabs if s.kind == kind)

    @property
    def kinds(self) -> Tuple[SlabKind, ...]:
        """Slab kinds in emission order."""
        return tuple(s.kind for s in self.slabs)

    @property
    def occupied_length(self) -> float:
        """Distance from the first slab's leading face to the last slab's trailing face (m)."""
        if not self.slabs:
            return 0.0
        return self.slabs[-1].right - self.slabs[0].left

    def summary(self) -> str:
        """Formatted summary string."""
        gap_text = "n/a" if self.gap is None else f"{self.gap * 1000:.3f} mm"
        lines = [
            f"Stack: {self.count(SlabKind.POSITIVE)} positive, "
            f"{self.count(SlabKind.NEGATIVE)} negative, "
            f"{self.count(SlabKind.SEPARATOR)} separators",
            f"  Envelope: {self.usable_length * 1000:.1f} mm usable, "
            f"{self.used_thickness * 1000:.1f} mm material",
            f"  Gap: {gap_text}",
        ]
        overflow = self.overflow
        if overflow is not None:
            lines.append(f"  OVERFLOW: {overflow}")
        for warning in self.warnings:
            lines.append(f"  WARNING: {warning}")
        return "\n".join(lines)
