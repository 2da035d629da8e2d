"""
Case Designer Plotting Module
=============================

Schematic 3D rendering of a dimensioned lead-acid battery.

Plot Types Available:
--------------------
- Exterior view: case, lid, cell caps, terminal posts, handle and
  dimension annotations
- Cut-away view: translucent case with the positioned plate stack and
  part annotations
- Stack profile: 2D strip of the plate stack along the case length

Axis convention: x = case length, y = case width, z = height, origin at
the centre of the case body. All dimensions in m.

Usage:
-----
    from src.case_designer.plotting import CasePlotter

    plotter = CasePlotter()
    fig = plotter.plot_battery(result, layout)
    plt.show()
"""

from typing import Optional, Tuple, List, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.axes import Axes
from matplotlib.patches import Patch, Rectangle
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from .config import CaseDesignerConfig, DEFAULT_CONFIG, MM_PER_M
from .models.result import Box, CalcResult
from .models.stack import SlabKind, StackLayout


# Cell count of a 12V lead-acid block (6 × 2V)
CELLS_PER_BLOCK = 6
CELL_VOLTAGE = 2


def box_faces(
    center: Sequence[float],
    size: Sequence[float]
) -> List[np.ndarray]:
    """
    Six quadrilateral faces of an axis-aligned box.

    Parameters:
    ----------
    center : (x, y, z)
        Box centre (m)

    size : (dx, dy, dz)
        Box edge lengths (m)

    Returns:
    -------
    List[np.ndarray]
        Six (4, 3) vertex arrays
    """
    c = np.asarray(center, dtype=float)
    h = np.asarray(size, dtype=float) / 2.0

    # Corner signs, bottom ring then top ring
    signs = np.array([
        [-1, -1, -1], [1, -1, -1], [1, 1, -1], [-1, 1, -1],
        [-1, -1, 1], [1, -1, 1], [1, 1, 1], [-1, 1, 1],
    ], dtype=float)
    corners = c + signs * h

    faces = [
        [0, 1, 2, 3],  # bottom
        [4, 5, 6, 7],  # top
        [0, 1, 5, 4],  # front
        [2, 3, 7, 6],  # back
        [1, 2, 6, 5],  # right
        [0, 3, 7, 4],  # left
    ]
    return [corners[f] for f in faces]


def half_case_box(dims: Box) -> Tuple[Tuple[float, float, float], Tuple[float, float, float]]:
    """
    Centre and size of the back half of the case, cut along the width.

    The full length stays, so a stack centred on the origin sits inside it.
    """
    return (0.0, dims.width / 4, 0.0), (dims.length, dims.width / 2, dims.height)


class CasePlotter:
    """
    Battery case visualization class.

    Attributes:
    ----------
    config : CaseDesignerConfig
        Configuration object (envelope margin used for plate faces).

    Example:
    -------
        plotter = CasePlotter()
        fig = plotter.plot_battery(result, layout)
        fig.savefig("battery.png")
    """

    # =========================================================================
    # Default Plot Styling
    # =========================================================================

    DEFAULT_FIGURE_SIZE = (14, 7)

    COLORS = {
        SlabKind.POSITIVE: "#ff5555",
        SlabKind.NEGATIVE: "#5555ff",
        SlabKind.SEPARATOR: "#cccccc",
        "case": "#444444",
        "lid": "#333333",
        "cap": "#222222",
        "terminal_pos": "#e50000",
        "terminal_neg": "#000000",
        "annotation": "#b8a000",
        "dimension": "#555555",
    }

    LEGEND_LABELS = {
        SlabKind.POSITIVE: "Positive Electrode",
        SlabKind.NEGATIVE: "Negative Electrode",
        SlabKind.SEPARATOR: "Separator",
    }

    # Fixed accessory sizes (m)
    LID_THICKNESS = 0.012
    POST_HEIGHT = 0.03
    POST_RADIUS = 0.01
    HANDLE_THICKNESS = 0.015
    HANDLE_ELEVATION = 0.16
    CAP_HEIGHT = 0.02

    def __init__(self, config: Optional[CaseDesignerConfig] = None):
        """
        Initialize the CasePlotter.

        Parameters:
        ----------
        config : CaseDesignerConfig, optional
            Configuration object. Uses default if not specified.
        """
        self.config = config if config is not None else DEFAULT_CONFIG

    # =========================================================================
    # Primitives
    # =========================================================================

    def _add_box(
        self,
        ax: Axes,
        center: Sequence[float],
        size: Sequence[float],
        color: str,
        alpha: float = 1.0,
        edgecolor: Optional[str] = None
    ) -> Poly3DCollection:
        collection = Poly3DCollection(
            box_faces(center, size),
            facecolors=color,
            edgecolors=edgecolor if edgecolor is not None else color,
            linewidths=0.3,
            alpha=alpha,
        )
        ax.add_collection3d(collection)
        return collection

    def _add_cylinder(
        self,
        ax: Axes,
        center: Sequence[float],
        radius: float,
        height: float,
        color: str,
        resolution: int = 24
    ):
        theta = np.linspace(0, 2 * np.pi, resolution)
        z = np.linspace(center[2] - height / 2, center[2] + height / 2, 2)
        theta_grid, z_grid = np.meshgrid(theta, z)
        x_grid = center[0] + radius * np.cos(theta_grid)
        y_grid = center[1] + radius * np.sin(theta_grid)
        ax.plot_surface(x_grid, y_grid, z_grid, color=color, linewidth=0, shade=True)

    def _set_limits(self, ax: Axes, dims: Box):
        extent = max(dims.length, dims.width, dims.height) * 0.65
        top = dims.height / 2 + self.LID_THICKNESS + self.HANDLE_ELEVATION + self.HANDLE_THICKNESS
        ax.set_xlim(-extent, extent)
        ax.set_ylim(-extent, extent)
        ax.set_zlim(-dims.height / 2 - 0.05, max(extent, top + 0.02))
        ax.set_xlabel("Length (m)")
        ax.set_ylabel("Width (m)")
        ax.set_zlabel("Height (m)")

    # =========================================================================
    # Case Parts
    # =========================================================================

    def _draw_lid(self, ax: Axes, dims: Box):
        self._add_box(
            ax,
            (0.0, 0.0, dims.height / 2 + self.LID_THICKNESS / 2),
            (dims.length * 1.02, dims.width * 1.02, self.LID_THICKNESS),
            self.COLORS["lid"],
        )

    def _draw_cell_caps(self, ax: Axes, dims: Box):
        spacing = dims.length / CELLS_PER_BLOCK
        radius = spacing * 0.12
        z = dims.height / 2 + self.LID_THICKNESS + self.CAP_HEIGHT / 2

        for i in range(CELLS_PER_BLOCK):
            x = -dims.length / 2 + spacing * (i + 0.5)
            self._add_cylinder(ax, (x, 0.0, z), radius, self.CAP_HEIGHT, self.COLORS["cap"])
            ax.text(x, 0.0, z + self.CAP_HEIGHT, f"{CELL_VOLTAGE}V",
                    color="green", fontsize=7, ha="center")

        ax.text(0.0, 0.0, z + self.CAP_HEIGHT + 0.08,
                f"{CELLS_PER_BLOCK} × {CELL_VOLTAGE}V = {CELLS_PER_BLOCK * CELL_VOLTAGE}V",
                color="green", fontsize=9, ha="center")

    def _terminal_positions(self, dims: Box) -> Tuple[Tuple[float, float, float], Tuple[float, float, float]]:
        z = dims.height / 2 + self.LID_THICKNESS + self.POST_HEIGHT / 2
        positive = (dims.length / 4, dims.width / 2.5, z)
        negative = (-dims.length / 4, dims.width / 2.5, z)
        return positive, negative

    def _draw_terminals(self, ax: Axes, dims: Box):
        positive, negative = self._terminal_positions(dims)
        self._add_cylinder(ax, positive, self.POST_RADIUS, self.POST_HEIGHT, self.COLORS["terminal_pos"])
        self._add_cylinder(ax, negative, self.POST_RADIUS, self.POST_HEIGHT, self.COLORS["terminal_neg"])

    def _draw_handle(self, ax: Axes, dims: Box):
        t = self.HANDLE_THICKNESS
        base = dims.height / 2
        post_z = base + self.HANDLE_ELEVATION / 2
        bar_z = base + self.HANDLE_ELEVATION + t / 2
        color = self.COLORS["cap"]

        for x in (-dims.length / 2, dims.length / 2):
            self._add_box(ax, (x, 0.0, post_z), (t, t, self.HANDLE_ELEVATION), color)
        self._add_box(ax, (0.0, 0.0, bar_z), (dims.length, t, t), color)

    def _draw_dimensions(self, ax: Axes, dims: Box, offset: float = 0.05):
        """Dashed dimension lines with mm labels."""
        L, W, H = dims.length, dims.width, dims.height
        color = self.COLORS["dimension"]
        length_mm, width_mm, height_mm = dims.to_mm()

        # Length along the front bottom edge
        z = -H / 2 - offset
        ax.plot([-L / 2, L / 2], [-W / 2, -W / 2], [z, z], linestyle="--", color=color)
        ax.text(0.0, -W / 2, z - 0.02, f"{length_mm:.0f} mm", color=color, ha="center", fontsize=8)

        # Width along the right bottom edge
        x = L / 2 + offset
        ax.plot([x, x], [-W / 2, W / 2], [-H / 2, -H / 2], linestyle="--", color=color)
        ax.text(x + 0.02, 0.0, -H / 2, f"{width_mm:.0f} mm", color=color, ha="center", fontsize=8)

        # Height at the right back corner
        x = L / 2 + offset * 2
        ax.plot([x, x], [W / 2, W / 2], [-H / 2, H / 2], linestyle="--", color=color)
        ax.text(x + 0.02, W / 2, 0.0, f"{height_mm:.0f} mm", color=color, ha="center", fontsize=8)

    def _draw_annotations(self, ax: Axes, dims: Box):
        """Leader lines naming the case parts."""
        L, W, H = dims.length, dims.width, dims.height
        plate_y = (W - self.config.envelope_margin_m) / 2
        term_z = H / 2 + self.LID_THICKNESS + self.POST_HEIGHT / 2
        handle_z = H / 2 + self.LID_THICKNESS + self.HANDLE_ELEVATION + 0.01

        parts = [
            ("Positive Terminal", (L / 4, plate_y, term_z), (L / 4 + 0.1, plate_y + 0.05, term_z + 0.1), "left"),
            ("Negative Terminal", (-L / 4, plate_y, term_z), (-L / 4 - 0.1, plate_y + 0.05, term_z + 0.1), "right"),
            ("Lid", (0.0, 0.0, H / 2 + self.LID_THICKNESS / 2), (0.2, 0.0, H / 2 + self.LID_THICKNESS + 0.05), "left"),
            ("Handle", (0.0, 0.0, handle_z), (-0.3, 0.0, handle_z + 0.2), "left"),
        ]

        color = self.COLORS["annotation"]
        for name, point, label_point, anchor in parts:
            ax.plot(*zip(point, label_point), color=color, linewidth=1)
            ax.text(*label_point, name, color=color, fontsize=8, ha=anchor)

    # =========================================================================
    # Stack
    # =========================================================================

    def draw_stack(self, ax: Axes, layout: StackLayout):
        """Draw every slab of the layout as a thin box."""
        for slab in layout:
            alpha = 0.6 if slab.kind is SlabKind.SEPARATOR else 1.0
            self._add_box(
                ax,
                (slab.center, 0.0, 0.0),
                (slab.thickness, layout.plate_width, layout.plate_height),
                self.COLORS[slab.kind],
                alpha=alpha,
            )

    def legend_handles(self) -> List[Patch]:
        """Proxy artists for the slab colours."""
        return [
            Patch(facecolor=self.COLORS[kind], edgecolor="black", label=label)
            for kind, label in self.LEGEND_LABELS.items()
        ]

    # =========================================================================
    # Views
    # =========================================================================

    def plot_exterior(self, ax: Axes, dims: Box, title: Optional[str] = None) -> Axes:
        """Closed case with lid, caps, terminals, handle and dimensions."""
        self._add_box(ax, (0.0, 0.0, 0.0), (dims.length, dims.width, dims.height),
                      self.COLORS["case"], alpha=0.9, edgecolor="black")
        self._draw_lid(ax, dims)
        self._draw_cell_caps(ax, dims)
        self._draw_terminals(ax, dims)
        self._draw_handle(ax, dims)
        self._draw_dimensions(ax, dims)
        self._set_limits(ax, dims)
        ax.set_title(title or "External View")
        return ax

    def plot_cutaway(
        self,
        ax: Axes,
        dims: Box,
        layout: StackLayout,
        title: Optional[str] = None
    ) -> Axes:
        """Translucent half case exposing the plate stack."""
        center, size = half_case_box(dims)
        self._add_box(ax, center, size, self.COLORS["case"], alpha=0.15, edgecolor="black")
        self._draw_lid(ax, dims)
        self._draw_terminals(ax, dims)
        self.draw_stack(ax, layout)
        self._draw_annotations(ax, dims)
        self._set_limits(ax, dims)
        ax.set_title(title or "Cut-away View")
        return ax

    def plot_battery(
        self,
        result: CalcResult,
        layout: StackLayout,
        figsize: Optional[Tuple[int, int]] = None,
        fig: Optional[Figure] = None
    ) -> Figure:
        """
        Exterior and cut-away views side by side, with a slab legend.

        Parameters:
        ----------
        result : CalcResult
            Dimensioned case (external dimensions are drawn)

        layout : StackLayout
            Plate stack for the cut-away view

        figsize : tuple, optional
            Figure size (width, height) in inches

        fig : Figure, optional
            Existing figure to draw into (cleared first)

        Returns:
        -------
        Figure
        """
        if fig is None:
            fig = plt.figure(figsize=figsize or self.DEFAULT_FIGURE_SIZE)
        else:
            fig.clear()

        dims = result.dims.external
        ax_ext = fig.add_subplot(1, 2, 1, projection="3d")
        ax_cut = fig.add_subplot(1, 2, 2, projection="3d")

        self.plot_exterior(ax_ext, dims)
        self.plot_cutaway(
            ax_cut, dims, layout,
            title=f"Cut-away View ({result.N_plus}+ / {result.N_minus}- plates)"
        )

        fig.legend(handles=self.legend_handles(), loc="upper right")

        overflow = layout.overflow
        if overflow is not None:
            fig.suptitle(f"Layout overflow: {overflow}", color="red")

        return fig

    def plot_stack_profile(
        self,
        layout: StackLayout,
        ax: Optional[Axes] = None,
        figsize: Optional[Tuple[int, int]] = None
    ) -> Figure:
        """
        Plate stack as a 2D strip along the case length (mm).

        Useful for checking gaps and overlap at a glance.
        """
        if ax is None:
            fig, ax = plt.subplots(figsize=figsize or (10, 2.5))
        else:
            fig = ax.get_figure()

        half_height = layout.plate_height * MM_PER_M / 2
        for slab in layout:
            ax.add_patch(Rectangle(
                (slab.left * MM_PER_M, -half_height),
                slab.thickness * MM_PER_M,
                2 * half_height,
                facecolor=self.COLORS[slab.kind],
                edgecolor="black",
                linewidth=0.3,
            ))

        half_length = layout.usable_length * MM_PER_M / 2
        ax.axvline(-half_length, color="gray", linestyle="--", alpha=0.7)
        ax.axvline(half_length, color="gray", linestyle="--", alpha=0.7)
        ax.set_xlim(-half_length * 1.05, half_length * 1.05)
        ax.set_ylim(-half_height * 1.1, half_height * 1.1)
        ax.set_xlabel("Position along case length (mm)")
        ax.set_yticks([])

        gap_text = "n/a" if layout.gap is None else f"{layout.gap * MM_PER_M:.3f} mm"
        ax.set_title(f"Plate stack ({len(layout)} slabs, gap {gap_text})")
        ax.legend(handles=self.legend_handles(), loc="upper right", fontsize=8)

        return fig
