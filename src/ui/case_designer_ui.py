"""
Battery Case Designer User Interface
====================================

Graphical user interface for the structural calculation of a lead-acid
battery case.

Features:
---------
- Twelve-parameter input form with recommended ranges
- One-click example parameter set
- Calculation results (capacity, masses, plate counts, dimensions)
- Schematic 3D model (exterior and cut-away with plate stack)
- Step-by-step calculation trace

Usage:
------
    from src.ui.case_designer_ui import CaseDesignerUI

    app = CaseDesignerUI()
    app.run()
"""

import tkinter as tk
from tkinter import ttk, messagebox
from typing import Optional, Dict
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

# Import matplotlib with TkAgg backend
import matplotlib
matplotlib.use('TkAgg')
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg, NavigationToolbar2Tk
from matplotlib.figure import Figure

from src.case_designer import (
    CalcInputs,
    CalcResult,
    StackLayout,
    CaseDesignerConfig,
    DomainError,
    LayoutWarning,
    EXAMPLE_INPUTS,
    FIELD_SPECS,
    check_recommended_ranges,
    run_traced,
)
from src.case_designer.models.inputs import parse_number
from src.case_designer.plotting import CasePlotter


class CaseDesignerUI:
    """
    Graphical user interface for the Battery Case Designer.

    Provides:
    - Parameter entry (all fields start empty)
    - Example parameter loading
    - Results, 3D model and debug trace tabs
    """

    WINDOW_TITLE = "Battery Case Designer - Structural Calculation"
    WINDOW_MIN_WIDTH = 1200
    WINDOW_MIN_HEIGHT = 850

    FRAME_PADDING = 10
    WIDGET_PADDING = 3
    FIELDS_PER_ROW = 3

    def __init__(self):
        """Initialize the Case Designer UI."""
        self.config = CaseDesignerConfig()
        self.plotter = CasePlotter(self.config)

        self.current_result: Optional[CalcResult] = None
        self.current_layout: Optional[StackLayout] = None

        self.root = tk.Tk()
        self.root.title(self.WINDOW_TITLE)
        self.root.minsize(self.WINDOW_MIN_WIDTH, self.WINDOW_MIN_HEIGHT)

        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(2, weight=1)

        self.field_vars: Dict[str, tk.StringVar] = {}

        self._create_header()
        self._create_input_form()
        self._create_results_panel()
        self._create_plot_panel()
        self._create_status_bar()

    def _create_header(self):
        """Create header section."""
        header_frame = ttk.Frame(self.root, padding=self.FRAME_PADDING)
        header_frame.grid(row=0, column=0, sticky="ew")

        ttk.Label(
            header_frame,
            text="Structural calculation of the battery",
            font=("Helvetica", 16, "bold")
        ).pack(anchor="w")

        ttk.Label(
            header_frame,
            text="Enter chemistry and case parameters, then generate the case dimensions and 3D model",
            font=("Helvetica", 10)
        ).pack(anchor="w")

        ttk.Separator(header_frame, orient="horizontal").pack(fill="x", pady=5)

    def _create_input_form(self):
        """Create the parameter form."""
        form_frame = ttk.LabelFrame(self.root, text="Parameters", padding=self.FRAME_PADDING)
        form_frame.grid(row=1, column=0, sticky="ew", padx=self.FRAME_PADDING)

        for col in range(self.FIELDS_PER_ROW):
            form_frame.columnconfigure(col, weight=1)

        for i, spec in enumerate(FIELD_SPECS):
            row, col = divmod(i, self.FIELDS_PER_ROW)
            cell = ttk.Frame(form_frame)
            cell.grid(row=row, column=col, sticky="ew", padx=5, pady=self.WIDGET_PADDING)

            label = spec.label + (f" ({spec.unit})" if spec.unit else "")
            ttk.Label(cell, text=label).pack(anchor="w")

            var = tk.StringVar(value="")
            ttk.Entry(cell, textvariable=var, width=20).pack(fill="x")
            self.field_vars[spec.name] = var

            if spec.min_value is not None and spec.max_value is not None:
                ttk.Label(
                    cell,
                    text=f"Recommended {spec.min_value:g} - {spec.max_value:g}",
                    font=("Helvetica", 8),
                    foreground="gray"
                ).pack(anchor="w")

        btn_frame = ttk.Frame(form_frame)
        btn_frame.grid(
            row=len(FIELD_SPECS) // self.FIELDS_PER_ROW + 1,
            column=0, columnspan=self.FIELDS_PER_ROW, sticky="e", pady=(10, 0)
        )
        ttk.Button(btn_frame, text="Load default values", command=self._load_defaults).pack(side="left", padx=5)
        ttk.Button(btn_frame, text="Calculate & Generate 3D Model", command=self._calculate).pack(side="left")

    def _create_results_panel(self):
        """Create tabbed results panel."""
        results_frame = ttk.Frame(self.root, padding=self.FRAME_PADDING)
        results_frame.grid(row=2, column=0, sticky="nsew")

        self.results_notebook = ttk.Notebook(results_frame)
        self.results_notebook.pack(fill="both", expand=True)

        # Results tab
        self.summary_frame = ttk.Frame(self.results_notebook, padding=5)
        self.results_notebook.add(self.summary_frame, text="Calculation Results")
        self.summary_text = tk.Text(
            self.summary_frame, height=20, width=60, state="disabled", font=("Courier", 10)
        )
        self.summary_text.pack(fill="both", expand=True)

        # 3D model tab
        self.model_frame = ttk.Frame(self.results_notebook, padding=5)
        self.results_notebook.add(self.model_frame, text="3D Model")

        # Debug tab
        self.debug_frame = ttk.Frame(self.results_notebook, padding=5)
        self.results_notebook.add(self.debug_frame, text="Debug")

        debug_container = ttk.Frame(self.debug_frame)
        debug_container.pack(fill="both", expand=True)

        debug_scrollbar = ttk.Scrollbar(debug_container)
        debug_scrollbar.pack(side="right", fill="y")

        self.debug_text = tk.Text(
            debug_container,
            height=25,
            width=80,
            state="disabled",
            font=("Courier", 9),
            wrap="none",
            yscrollcommand=debug_scrollbar.set
        )
        self.debug_text.pack(side="left", fill="both", expand=True)
        debug_scrollbar.config(command=self.debug_text.yview)

    def _create_plot_panel(self):
        """Create the 3D model canvas."""
        self.fig = Figure(figsize=(12, 6), dpi=100)

        self.canvas = FigureCanvasTkAgg(self.fig, master=self.model_frame)
        self.canvas.draw()
        self.canvas.get_tk_widget().pack(fill="both", expand=True)

        toolbar_frame = ttk.Frame(self.model_frame)
        toolbar_frame.pack(fill="x")
        toolbar = NavigationToolbar2Tk(self.canvas, toolbar_frame)
        toolbar.update()

    def _create_status_bar(self):
        """Create status bar."""
        self.status_var = tk.StringVar(value="Ready - Enter parameters or load default values")
        ttk.Label(
            self.root,
            textvariable=self.status_var,
            relief="sunken",
            anchor="w"
        ).grid(row=3, column=0, sticky="ew")

    def _load_defaults(self):
        """Fill the form with the example parameter set."""
        for name, value in EXAMPLE_INPUTS.items():
            if name in self.field_vars:
                self.field_vars[name].set(f"{value:g}")
        self.status_var.set("Loaded default values")

    def _read_form(self) -> Dict[str, str]:
        return {name: var.get() for name, var in self.field_vars.items()}

    def _calculate(self):
        """Run the calculation and refresh every tab."""
        try:
            form = self._read_form()
            qn_text = form.get("Qn", "")
            if not qn_text.strip():
                raise ValueError("Missing required parameters: Qn")
            qn = parse_number("Qn", qn_text)
            inputs = CalcInputs.from_mapping(form)

            result, layout, debugger = run_traced(qn, inputs, self.config)

            self.current_result = result
            self.current_layout = layout

            self._display_results(result, layout, check_recommended_ranges(qn, inputs))
            self._plot_model(result, layout)
            self._set_text(self.debug_text, debugger.get_report())
            self.debug_text.see("1.0")

            if layout.overflow is not None:
                self.status_var.set(f"Calculated with layout overflow: {layout.overflow}")
            else:
                self.status_var.set(
                    f"Calculated: {result.N_plus} positive / {result.N_minus} negative plates"
                )

        except DomainError as e:
            messagebox.showerror("Domain Error", str(e))
        except LayoutWarning as e:
            messagebox.showwarning("Layout Warning", str(e))
        except ValueError as e:
            messagebox.showerror("Input Error", f"Invalid input: {e}")
        except Exception as e:
            messagebox.showerror("Calculation Error", f"Error during calculation: {e}")

    def _display_results(self, result: CalcResult, layout: StackLayout, advisories):
        lines = [
            "=" * 50,
            "CALCULATION RESULTS",
            "=" * 50,
            result.summary(),
            "",
            "=" * 50,
            "PLATE STACK",
            "=" * 50,
            layout.summary(),
        ]
        if advisories:
            lines.extend(["", "=" * 50, "OUTSIDE RECOMMENDED RANGE", "=" * 50])
            lines.extend(advisories)

        self._set_text(self.summary_text, "\n".join(lines))

    def _plot_model(self, result: CalcResult, layout: StackLayout):
        self.plotter.plot_battery(result, layout, fig=self.fig)
        self.canvas.draw()

    @staticmethod
    def _set_text(widget: tk.Text, text: str):
        widget.config(state="normal")
        widget.delete(1.0, tk.END)
        widget.insert(tk.END, text)
        widget.config(state="disabled")

    def run(self):
        """Run the UI application."""
        self.root.mainloop()


def main():
    """Main entry point."""
    app = CaseDesignerUI()
    app.run()


if __name__ == "__main__":
    main()
