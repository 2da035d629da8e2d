"""
Case Designer Models
====================

Value types for case dimensioning and plate stack layout.
"""

from .inputs import CalcInputs
from .result import Box, CaseDimensions, CalcResult
from .stack import SlabKind, Slab, StackLayout

__all__ = [
    "CalcInputs",
    "Box",
    "CaseDimensions",
    "CalcResult",
    "SlabKind",
    "Slab",
    "StackLayout",
]
