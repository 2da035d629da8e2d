"""
Calculation Inputs
==================

Chemistry and mechanical parameters consumed by the dimensioning engine.
"""

from dataclasses import dataclass, fields, MISSING
from typing import Optional, Dict, Any, Mapping

from ..config import (
    DEFAULT_DELTA_PLUS_MM,
    DEFAULT_DELTA_MINUS_MM,
    DEFAULT_DELTA_G_PLUS_G,
    DEFAULT_DELTA_G_MINUS_G,
    DEFAULT_G_GRID_G,
)


@dataclass(frozen=True)
class CalcInputs:
    """
    Input parameters for lead-acid case dimensioning.

    Field names follow the designer's notation (+ for positive, - for
    negative electrode).

    Attributes:
    ----------
    K_usage_plus : float
        Positive active-mass utilization coefficient, (0, 1]

    a_plus_PbSO4 : float
        PbSO4 mass fraction in positive active mass, (0, 1]

    a_minus_PbSO4 : float
        PbSO4 mass fraction in negative active mass, (0, 1]

    l_plus, h_plus : float
        Electrode length and height (mm)

    delta_l_sep : float
        Separator protrusion beyond the electrode edge, each side (mm)

    delta_h : float
        Margin between electrode top and case interior ceiling (mm)

    wall_thk, lid_thk, base_thk, bonnet_h : float
        Case wall, lid and base thickness and bonnet height (mm)

    delta_plus, delta_minus : float
        Positive/negative plate thickness (mm)

    delta_g_plus, delta_g_minus : float
        Active mass per positive/negative plate (g)

    g_grid : float
        Grid mass (g), reserved

    K_usage_minus : float, optional
        Negative utilization coefficient, reserved
    """
    K_usage_plus: float
    a_plus_PbSO4: float
    a_minus_PbSO4: float
    l_plus: float
    h_plus: float
    delta_l_sep: float
    delta_h: float
    wall_thk: float
    lid_thk: float
    base_thk: float
    bonnet_h: float

    delta_plus: float = DEFAULT_DELTA_PLUS_MM
    delta_minus: float = DEFAULT_DELTA_MINUS_MM
    delta_g_plus: float = DEFAULT_DELTA_G_PLUS_G
    delta_g_minus: float = DEFAULT_DELTA_G_MINUS_G
    g_grid: float = DEFAULT_G_GRID_G
    K_usage_minus: Optional[float] = None

    @classmethod
    def field_names(cls) -> tuple:
        """All accepted parameter names, in declaration order."""
        return tuple(f.name for f in fields(cls))

    @classmethod
    def required_field_names(cls) -> tuple:
        """Parameter names without a default value."""
        return tuple(
            f.name for f in fields(cls)
            if f.default is MISSING and f.default_factory is MISSING
        )

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "CalcInputs":
        """
        Build inputs from a mapping of form values.

        Values may be numbers or numeric strings. Keys that are not input
        fields (such as "Qn") are ignored. Blank optional fields fall back to
        their defaults.

        Raises:
        ------
        ValueError
            If a required field is missing/blank or a value is not numeric
        """
        known = set(cls.field_names())
        kwargs: Dict[str, float] = {}

        for name, raw in values.items():
            if name not in known:
                continue
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                continue
            kwargs[name] = parse_number(name, raw)

        missing = [name for name in cls.required_field_names() if name not in kwargs]
        if missing:
            raise ValueError(f"Missing required parameters: {', '.join(missing)}")

        return cls(**kwargs)

    def as_dict(self) -> Dict[str, Any]:
        """Return the inputs as a plain dictionary."""
        return {name: getattr(self, name) for name in self.field_names()}


def parse_number(name: str, raw: Any) -> float:
    """Convert a form value to float, naming the field on failure."""
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{name}: '{raw}' is not a number")
