"""
BatteryCaseDesigner - Main Package
==================================

Tools for the structural design of lead-acid battery cases.

This package provides modules for:
- Case Designer (case_designer): plate counts, case dimensions and plate
  stack layout from chemistry parameters
- UI (ui): parameter form with schematic 3D model

Author: BatteryCaseDesigner Team
License: See LICENSE file in project root
"""

__version__ = "0.1.0"
__author__ = "BatteryCaseDesigner Team"
