"""
BatteryCaseDesigner UI Module
=============================

User interface components for the BatteryCaseDesigner tools:

- CaseDesignerUI: parameter form, results, 3D model and calculation trace

Usage:
------
    from src.ui import CaseDesignerUI

    CaseDesignerUI().run()
"""

from .case_designer_ui import CaseDesignerUI

__all__ = [
    "CaseDesignerUI",
]
