"""
Case Designer Errors
====================

Error conditions raised or reported by the dimensioning engine and the
stack layout generator.

- DomainError: a divisor of the derivation is not positive, or Qn is not finite
- LayoutOverflow: the requested plates do not fit the stack envelope
- LayoutWarning: more negative plates requested than the stack can bracket
"""


class CaseDesignerError(Exception):
    """Base class for case designer errors."""


class DomainError(CaseDesignerError, ValueError):
    """A parameter is outside the domain the derivation is defined on."""

    def __init__(self, parameter: str, value: float, requirement: str = "greater than 0"):
        self.parameter = parameter
        self.value = value
        super().__init__(
            f"{parameter} must be {requirement}, got {value!r}"
        )


class LayoutOverflow(CaseDesignerError):
    """
    Solved inter-slab gap is negative.

    The plates and separators are thicker in total than the usable stack
    envelope, so adjacent slabs overlap.
    """

    def __init__(self, gap: float, usable_length: float, used_thickness: float):
        self.gap = gap
        self.usable_length = usable_length
        self.used_thickness = used_thickness
        super().__init__(
            f"Stack overflows envelope: material {used_thickness * 1000:.2f} mm "
            f"in {usable_length * 1000:.2f} mm usable (gap {gap * 1000:.4f} mm)"
        )

    @property
    def excess(self) -> float:
        """Material thickness beyond the usable length (m)."""
        return self.used_thickness - self.usable_length


class LayoutWarning(CaseDesignerError):
    """Negative plates beyond what the positive plates can bracket were not placed."""

    def __init__(self, requested_negatives: int, placed_negatives: int, positive_count: int):
        self.requested_negatives = requested_negatives
        self.placed_negatives = placed_negatives
        self.positive_count = positive_count
        super().__init__(
            f"{requested_negatives - placed_negatives} of {requested_negatives} negative "
            f"plates not placed: {positive_count} positive plates bracket at most "
            f"{positive_count + 1}"
        )

    @property
    def unplaced_negatives(self) -> int:
        """Number of negative plates left out of the stack."""
        return self.requested_negatives - self.placed_negatives
