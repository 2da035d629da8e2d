"""
Stack Layout Calculations
=========================

Arranges negative electrodes, separators and positive electrodes along the
case length so that material plus uniform gaps fill the stack envelope:

    N | S P S N | S P S N | ... | S P S N

- Emission order is a small finite-state machine (StackSequence)
- The gap is solved once for the requested plate counts
- Each slab centre is a closed-form function of the slabs before it

Negative plates beyond N+ + 1 cannot be bracketed and are not placed; the
layout carries a LayoutWarning for them. A stack thicker than its envelope
still produces a layout, with a negative gap and a LayoutOverflow attached.
"""

import logging
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from ..config import CaseDesignerConfig, DEFAULT_CONFIG
from ..debugger import CalculationDebugger
from ..errors import LayoutWarning
from ..models.result import CalcResult
from ..models.stack import SlabKind, Slab, StackLayout


logger = logging.getLogger(__name__)


class StackState(Enum):
    """States of the emission state machine."""
    AWAITING_NEGATIVE = "awaiting_negative"   # Leading negative, before any cell
    SEPARATOR_BEFORE = "separator_before"
    POSITIVE = "positive"
    SEPARATOR_AFTER = "separator_after"
    CLOSING_NEGATIVE = "closing_negative"     # Negative after a S P S group
    DONE = "done"


class StackSequence:
    """
    Emission order of slab kinds for a plate stack.

    Iterating yields SlabKind values; each iteration starts afresh, so the
    same sequence can be walked any number of times.

    Transitions:
        AWAITING_NEGATIVE -> SEPARATOR_BEFORE (emit N if any negatives)
        SEPARATOR_BEFORE  -> POSITIVE          (emit S)
        POSITIVE          -> SEPARATOR_AFTER   (emit P)
        SEPARATOR_AFTER   -> CLOSING_NEGATIVE  (emit S)
        CLOSING_NEGATIVE  -> SEPARATOR_BEFORE  (emit N if any negatives, groups left)
        CLOSING_NEGATIVE  -> DONE              (emit N if any negatives, no groups left)
        SEPARATOR_BEFORE  -> DONE              (no groups left)

    DONE is reached after pos_count groups regardless of how many negatives
    remain.
    """

    def __init__(self, pos_count: int, neg_count: int):
        if pos_count < 0 or neg_count < 0:
            raise ValueError(
                f"Plate counts cannot be negative, got pos={pos_count}, neg={neg_count}"
            )
        self.pos_count = int(pos_count)
        self.neg_count = int(neg_count)

    def __iter__(self) -> Iterator[SlabKind]:
        return self._generate()

    def __len__(self) -> int:
        return self.pos_count * 3 + self.placed_negatives

    @property
    def placed_negatives(self) -> int:
        """Negatives emitted: one leading plus one per group, at most neg_count."""
        return min(self.neg_count, self.pos_count + 1)

    @property
    def unplaced_negatives(self) -> int:
        """Negatives left out when DONE is reached."""
        return self.neg_count - self.placed_negatives

    @property
    def separator_count(self) -> int:
        return 2 * self.pos_count

    @property
    def nominal_slab_count(self) -> int:
        """Requested slab count, placed or not."""
        return self.pos_count + self.neg_count + self.separator_count

    def _generate(self) -> Iterator[SlabKind]:
        negatives_left = self.neg_count
        groups_left = self.pos_count
        state = StackState.AWAITING_NEGATIVE

        while state is not StackState.DONE:
            if state in (StackState.AWAITING_NEGATIVE, StackState.CLOSING_NEGATIVE):
                if negatives_left > 0:
                    negatives_left -= 1
                    yield SlabKind.NEGATIVE
                state = StackState.SEPARATOR_BEFORE

            elif state is StackState.SEPARATOR_BEFORE:
                if groups_left == 0:
                    state = StackState.DONE
                    continue
                groups_left -= 1
                yield SlabKind.SEPARATOR
                state = StackState.POSITIVE

            elif state is StackState.POSITIVE:
                yield SlabKind.POSITIVE
                state = StackState.SEPARATOR_AFTER

            elif state is StackState.SEPARATOR_AFTER:
                yield SlabKind.SEPARATOR
                state = StackState.CLOSING_NEGATIVE


def calculate_used_thickness(
    pos_count: int,
    neg_count: int,
    electrode_thickness: float,
    separator_thickness: float
) -> float:
    """
    Summed material thickness of the requested slabs.

    used = (N+ + N-)·t_e + 2N+·t_s
    """
    return (pos_count + neg_count) * electrode_thickness + 2 * pos_count * separator_thickness


def solve_uniform_gap(
    usable_length: float,
    pos_count: int,
    neg_count: int,
    electrode_thickness: float,
    separator_thickness: float
) -> Optional[float]:
    """
    Constant spacing that spreads the requested slabs across the envelope.

    gap = (usable_length - used) / (slab_count - 1)

    Returns:
    -------
    float or None
        Gap (m), negative if the material does not fit. None when fewer
        than two slabs are requested.
    """
    slab_count = pos_count + neg_count + 2 * pos_count
    if slab_count <= 1:
        return None
    used = calculate_used_thickness(pos_count, neg_count, electrode_thickness, separator_thickness)
    return (usable_length - used) / (slab_count - 1)


def slab_center(
    start: float,
    electrodes_before: int,
    separators_before: int,
    own_thickness: float,
    electrode_thickness: float,
    separator_thickness: float,
    gap: float
) -> float:
    """
    Centre of a slab from the slabs that precede it.

    center = start + n_e·t_e + n_s·t_s + (n_e + n_s)·gap + t/2
    """
    preceding = electrodes_before + separators_before
    return (
        start
        + electrodes_before * electrode_thickness
        + separators_before * separator_thickness
        + preceding * gap
        + own_thickness / 2.0
    )


def generate_stack_layout(
    length: float,
    width: float,
    height: float,
    pos_count: int,
    neg_count: int,
    electrode_thickness: float = DEFAULT_CONFIG.electrode_thickness_m,
    separator_thickness: float = DEFAULT_CONFIG.separator_thickness_m,
    envelope_margin: float = DEFAULT_CONFIG.envelope_margin_m,
    strict: bool = False,
    debugger: Optional[CalculationDebugger] = None
) -> StackLayout:
    """
    Position plates and separators inside a case.

    Parameters:
    ----------
    length, width, height : float
        Case dimensions (m)

    pos_count, neg_count : int
        Positive/negative plate counts (normally neg_count = pos_count + 1)

    electrode_thickness, separator_thickness : float
        Slab thicknesses (m)

    envelope_margin : float
        Clearance subtracted from each case dimension (m)

    strict : bool
        Raise LayoutWarning when negatives cannot all be placed

    debugger : CalculationDebugger, optional
        Receives the layout steps

    Returns:
    -------
    StackLayout
        Positioned slabs. Check layout.overflow for a negative gap.

    Raises:
    ------
    ValueError
        If a plate count is negative
    LayoutWarning
        If strict and negatives were left out
    """
    sequence = StackSequence(pos_count, neg_count)

    usable_length = length - envelope_margin
    plate_width = width - envelope_margin
    plate_height = height - envelope_margin

    used = calculate_used_thickness(
        sequence.pos_count, sequence.neg_count, electrode_thickness, separator_thickness
    )
    gap = solve_uniform_gap(
        usable_length, sequence.pos_count, sequence.neg_count,
        electrode_thickness, separator_thickness
    )

    # Stack envelope is centred on the case origin
    start = -usable_length / 2.0
    step_gap = 0.0 if gap is None else gap

    slabs: List[Slab] = []
    electrodes_before = 0
    separators_before = 0
    for index, kind in enumerate(sequence):
        thickness = electrode_thickness if kind.is_electrode else separator_thickness
        center = slab_center(
            start, electrodes_before, separators_before, thickness,
            electrode_thickness, separator_thickness, step_gap
        )
        slabs.append(Slab(index=index, kind=kind, thickness=thickness, center=center))
        if kind.is_electrode:
            electrodes_before += 1
        else:
            separators_before += 1

    warnings: Tuple[LayoutWarning, ...] = ()
    if sequence.unplaced_negatives > 0:
        warning = LayoutWarning(
            sequence.neg_count, sequence.placed_negatives, sequence.pos_count
        )
        if strict:
            raise warning
        logger.warning("%s", warning)
        warnings = (warning,)

    layout = StackLayout(
        slabs=tuple(slabs),
        gap=gap,
        usable_length=usable_length,
        plate_width=plate_width,
        plate_height=plate_height,
        used_thickness=used,
        pos_count=sequence.pos_count,
        neg_count=sequence.neg_count,
        warnings=warnings,
    )

    overflow = layout.overflow
    if overflow is not None:
        logger.warning("%s", overflow)

    if debugger is not None:
        _trace_layout(debugger, layout, sequence, electrode_thickness, separator_thickness)

    return layout


def layout_for_result(
    result: CalcResult,
    config: Optional[CaseDesignerConfig] = None,
    debugger: Optional[CalculationDebugger] = None
) -> StackLayout:
    """
    Stack layout for a dimensioned case.

    Uses the external case dimensions and the plate counts of the result.
    """
    config = config if config is not None else DEFAULT_CONFIG
    external = result.dims.external
    return generate_stack_layout(
        external.length,
        external.width,
        external.height,
        result.N_plus,
        result.N_minus,
        electrode_thickness=config.electrode_thickness_m,
        separator_thickness=config.separator_thickness_m,
        envelope_margin=config.envelope_margin_m,
        strict=config.strict_layout,
        debugger=debugger,
    )


def _trace_layout(
    debugger: CalculationDebugger,
    layout: StackLayout,
    sequence: StackSequence,
    electrode_thickness: float,
    separator_thickness: float
):
    """Record the layout solution in the debugger."""
    debugger.start_section("Stack Layout")
    debugger.add_step(
        category="Stack",
        description="Requested slab count",
        formula="n = N+ + N- + 2N+",
        variables={"N+": sequence.pos_count, "N-": sequence.neg_count},
        result=sequence.nominal_slab_count,
        result_name="n",
    )
    debugger.add_step(
        category="Stack",
        description="Material thickness",
        formula="used = (N+ + N-)·t_e + 2N+·t_s",
        variables={
            "N+": sequence.pos_count,
            "N-": sequence.neg_count,
            "t_e": electrode_thickness,
            "t_s": separator_thickness,
        },
        result=layout.used_thickness,
        result_name="used",
        result_unit="m",
    )
    debugger.add_step(
        category="Stack",
        description="Uniform gap",
        formula="gap = (L_usable - used) / (n - 1)",
        variables={"L_usable": layout.usable_length, "used": layout.used_thickness},
        result=layout.gap if layout.gap is not None else "undefined",
        result_name="gap",
        result_unit="m" if layout.gap is not None else "",
        comment="Single slab: no gap" if layout.gap is None else "",
    )
    debugger.add_step(
        category="Stack",
        description="Slabs placed",
        formula="",
        variables={"negatives placed": sequence.placed_negatives},
        result=len(layout),
        result_name="slabs",
    )

    overflow = layout.overflow
    if overflow is not None:
        debugger.add_note(str(overflow))
    for warning in layout.warnings:
        debugger.add_note(str(warning))
