#!/usr/bin/env python3
"""
Battery Case Designer Launcher
==============================

Launch script for the Battery Case Designer GUI.

This tool sizes a lead-acid battery case from electrochemical and
mechanical parameters and renders a schematic 3D model of the case and
its plate stack.

Features:
- Actual capacity, PbSO4 and active-mass requirements
- Positive/negative plate counts
- Internal and external case dimensions
- Evenly spaced plate/separator stack in a cut-away 3D view
- Step-by-step calculation trace

Usage:
    python run_case_designer.py
    python run_case_designer.py --no-gui

Requirements:
    - Python 3.9+
    - tkinter (usually included with Python)
    - matplotlib
    - numpy
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent))


def run_console():
    """Print the example design and its calculation trace."""
    from src.case_designer import CalcInputs, EXAMPLE_INPUTS, run_traced

    inputs = CalcInputs.from_mapping(EXAMPLE_INPUTS)
    result, layout, debugger = run_traced(EXAMPLE_INPUTS["Qn"], inputs)

    print(result.summary())
    print()
    print(layout.summary())
    print()
    print(debugger.get_report())


def main():
    """Launch the Battery Case Designer UI."""
    print("=" * 60)
    print("Battery Case Designer")
    print("=" * 60)
    print()

    if "--no-gui" in sys.argv[1:]:
        run_console()
        return

    print("Loading GUI...")
    print()

    from src.ui.case_designer_ui import CaseDesignerUI

    app = CaseDesignerUI()
    app.run()


if __name__ == "__main__":
    main()
