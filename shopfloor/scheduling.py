"""
Scheduling arithmetic for the labor planning board.

Pure functions, no database access:
- how long a job takes (hourly or piecework)
- which snap grid fits a bar
- whether a bar fits on a lane (availability, shift window, overlap, capacity)
- labels, colours and clock formatting
"""

import math

from shopfloor.conf import get_setting
from shopfloor.results import (
    AVAILABILITY,
    CAPACITY,
    ISSUE_PRIORITY,
    OK,
    OVERLAP,
    WINDOW,
    AssignmentBlock,
    ConstraintIssue,
    ConstraintMessage,
    ConstraintResult,
    LaneWindow,
    TimeMarker,
    UnscheduledBarState,
)

LABOR_CATEGORY_COLORS = ("#0ea5e9", "#22c55e", "#a855f7", "#f97316", "#e11d48", "#14b8a6")

HOURLY = "hourly"
PIECE = "piece"


# ══════════════════════════════════════════════════════════════
# DURATION & SNAP
# ══════════════════════════════════════════════════════════════


def calculate_duration_minutes(
    effort,
    minimum_minutes: float = 0,
    default_minutes_per_piece: float | None = None,
) -> float:
    """
    Minutes of work for a job.

    `effort` is any object with some of: duration_minutes, time_required,
    time_unit, quantity, pay_type, minutes_per_piece_estimate.

    Piecework falls back to the per-piece estimate, then to the configured
    default (5 minutes). Hourly work without any time is just the minimum.
    """
    quantity = to_number(getattr(effort, "quantity", None))
    if quantity is None:
        quantity = 1
    base_minutes = _resolve_base_minutes(effort)
    pay_type = normalize_pay_type(getattr(effort, "pay_type", None))

    if pay_type == PIECE:
        per_piece = base_minutes
        if per_piece is None:
            per_piece = to_number(getattr(effort, "minutes_per_piece_estimate", None))
        if per_piece is None:
            per_piece = (
                default_minutes_per_piece
                if default_minutes_per_piece is not None
                else get_setting("DEFAULT_MINUTES_PER_PIECE")
            )
        return max(per_piece * quantity, minimum_minutes)

    if base_minutes is not None:
        return max(base_minutes * quantity, minimum_minutes)

    return minimum_minutes or 0


def choose_snap_increment(
    duration_minutes: float,
    increments: list[int] | None = None,
    default: int | None = None,
) -> int:
    """Smallest increment covering a third of the bar, else the largest one."""
    if increments is None:
        increments = get_setting("SNAP_INCREMENTS")
    if default is None:
        default = get_setting("DEFAULT_SNAP_INCREMENT")

    candidates = sorted(value for value in increments if value > 0)
    if not _is_finite(duration_minutes) or not candidates:
        return default

    target = duration_minutes / 3
    for increment in candidates:
        if increment >= target:
            return increment

    return candidates[-1]


def build_unscheduled_bar_state(
    effort,
    start_minutes: int | None = None,
    minimum_minutes: float = 0,
    increments: list[int] | None = None,
) -> UnscheduledBarState:
    duration = calculate_duration_minutes(effort, minimum_minutes=minimum_minutes)
    snap = choose_snap_increment(duration, increments)
    start = start_minutes if start_minutes is not None else get_setting("UNSCHEDULED_START_MINUTES")

    return UnscheduledBarState(
        duration_minutes=duration,
        snap_increment=snap,
        start_minutes=start,
        end_minutes=start + duration,
    )


def clamp_minutes(value, minimum, maximum):
    return min(max(value, minimum), maximum)


def snap_to_grid(value, increment, minimum, maximum) -> int:
    """Round to the nearest grid line, then keep it inside [minimum, maximum]."""
    snapped = js_round(value / increment) * increment
    return clamp_minutes(snapped, minimum, maximum)


# ══════════════════════════════════════════════════════════════
# LANE CONSTRAINTS
# ══════════════════════════════════════════════════════════════


def check_lane_constraints(
    existing: list[AssignmentBlock],
    candidate: AssignmentBlock,
    window: LaneWindow | None = None,
    capacity_minutes: int | None = None,
    availability=None,
) -> ConstraintResult:
    """
    Check whether `candidate` can go on a lane already holding `existing`.

    Bars that only touch (one ends when the next starts) do not overlap.
    """
    overlaps = [
        block
        for block in existing
        if ranges_overlap(
            block.start_minutes, block.end_minutes, candidate.start_minutes, candidate.end_minutes
        )
    ]
    issues = []

    if availability is not None and not is_lane_available(availability):
        issues.append(
            ConstraintIssue(AVAILABILITY, "Staff member is not available for scheduling on this date.")
        )

    if window is not None and not is_within_window(candidate, window):
        issues.append(ConstraintIssue(WINDOW, "Assignment extends outside the allowed shift window."))

    if overlaps:
        issues.append(
            ConstraintIssue(OVERLAP, "Assignment overlaps with an existing booking in this lane.")
        )

    overrun_minutes = None
    if capacity_minutes is not None:
        used = sum(block.minutes for block in existing)
        projected = used + candidate.minutes
        if projected > capacity_minutes:
            overrun_minutes = projected - capacity_minutes
            issues.append(
                ConstraintIssue(
                    CAPACITY,
                    f"Planned time exceeds lane capacity by {overrun_minutes} "
                    f"minute{'' if overrun_minutes == 1 else 's'}.",
                )
            )

    return ConstraintResult(
        status=_derive_status(issues),
        issues=issues,
        overlaps=overlaps,
        overrun_minutes=overrun_minutes,
    )


def build_constraint_message(
    result: ConstraintResult,
    staff_name: str,
    window: LaneWindow | None = None,
) -> ConstraintMessage:
    """Toast-style title and description for a blocked drop."""
    if result.status == AVAILABILITY:
        return ConstraintMessage(
            "Staff unavailable",
            f"{staff_name} is off-shift or inactive for the selected date.",
        )

    if result.status == WINDOW:
        if window is None:
            start, end = get_setting("DAY_START_MINUTES"), get_setting("DAY_END_MINUTES")
        else:
            start, end = window.start_minutes, window.end_minutes
        return ConstraintMessage(
            "Outside shift window",
            f"Place this job within {format_time_label(start)} – {format_time_label(end)} "
            f"for {staff_name}.",
        )

    if result.status == OVERLAP:
        conflicting = result.overlaps[0] if result.overlaps else None
        label = (conflicting.label if conflicting else None) or "another assignment"
        if conflicting is not None:
            timing = (
                f"{format_time_label(conflicting.start_minutes)} – "
                f"{format_time_label(conflicting.end_minutes)}"
            )
        else:
            timing = "this window"
        return ConstraintMessage(
            "Overlap detected",
            f"This drop conflicts with {label} ({timing}). Move the bar to an open slot.",
        )

    if result.status == CAPACITY and result.overrun_minutes is not None:
        overrun = result.overrun_minutes
        return ConstraintMessage(
            "Lane capacity exceeded",
            f"This schedule exceeds {staff_name}'s capacity by {overrun} "
            f"minute{'' if overrun == 1 else 's'}.",
        )

    return ConstraintMessage(
        "Cannot place job",
        result.issues[0].message if result.issues else "Lane conflict detected.",
    )


def ranges_overlap(a_start, a_end, b_start, b_end) -> bool:
    return max(a_start, b_start) < min(a_end, b_end)


def is_within_window(block: AssignmentBlock, window: LaneWindow) -> bool:
    return block.start_minutes >= window.start_minutes and block.end_minutes <= window.end_minutes


def is_lane_available(availability) -> bool:
    for flag in ("is_active", "is_current", "is_available_on_date"):
        if getattr(availability, flag, None) is False:
            return False
    return True


def _derive_status(issues: list[ConstraintIssue]) -> str:
    if not issues:
        return OK
    return min(issues, key=lambda issue: ISSUE_PRIORITY.index(issue.type)).type


# ══════════════════════════════════════════════════════════════
# LABELS & COLOURS
# ══════════════════════════════════════════════════════════════


def get_category_color(category) -> str | None:
    """Stable palette colour for a category id (int) or name (str)."""
    if category is None:
        return None
    if isinstance(category, int):
        key = category
    else:
        key = _hash_string(str(category))
    return LABOR_CATEGORY_COLORS[abs(key) % len(LABOR_CATEGORY_COLORS)]


def build_assignment_label(
    order_number: str | None = None,
    job_name: str | None = None,
    product_name: str | None = None,
    category_name: str | None = None,
    quantity=None,
    pay_type: str | None = None,
) -> str:
    """
    Bar label, e.g. 'SO-1042 • Upholstery • Armchair · 4 pcs'.
    """
    parts = []
    if order_number:
        parts.append(order_number)
    if job_name:
        parts.append(job_name)

    context = []
    if product_name:
        context.append(product_name)
    elif category_name:
        context.append(category_name)

    qty = to_number(quantity)
    if qty and qty > 1:
        qty_text = _format_number(qty)
        context.append(f"{qty_text} pcs" if normalize_pay_type(pay_type) == PIECE else f"x{qty_text}")

    if context:
        parts.append(" · ".join(context))
    return " • ".join(parts)


def _hash_string(value: str) -> int:
    """32-bit signed `hash * 31 + code unit` over UTF-16, like Java's String.hashCode."""
    data = value.encode("utf-16-le")
    hash_ = 0
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        hash_ = ((hash_ << 5) - hash_ + code_unit) & 0xFFFFFFFF
    if hash_ >= 0x80000000:
        hash_ -= 0x100000000
    return hash_


# ══════════════════════════════════════════════════════════════
# CLOCK
# ══════════════════════════════════════════════════════════════


def clock_to_minutes(value: str) -> int:
    """'08:30' → 510. Unparseable input gives 0."""
    hours_raw, _, minutes_raw = str(value).partition(":")
    try:
        hours = float(hours_raw)
        minutes = float(minutes_raw) if minutes_raw else 0.0
    except ValueError:
        return 0
    if not (_is_finite(hours) and _is_finite(minutes)):
        return 0
    return int(hours * 60 + minutes)


def minutes_to_clock(value) -> str:
    """510 → '08:30'."""
    if not _is_finite(value):
        return "00:00"
    hours = math.floor(value / 60)
    minutes = max(0, js_round(value - hours * 60))
    return f"{hours:02d}:{minutes:02d}"


def format_time_label(minutes: int) -> str:
    """510 → '8:30 AM'."""
    hours = int(minutes // 60)
    mins = int(minutes % 60)
    suffix = "PM" if hours >= 12 else "AM"
    normalized = hours % 12 or 12
    return f"{normalized}:{mins:02d} {suffix}"


def format_duration(minutes: int) -> str:
    """90 → '1h 30m'."""
    hours, mins = divmod(int(minutes), 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def build_time_markers(start: int, end: int) -> list[TimeMarker]:
    """Hourly major markers plus half-hour markers before the end."""
    markers = []
    for minutes in range(start, end + 1, 60):
        markers.append(TimeMarker(minutes=minutes, label=format_time_label(minutes), is_major=True))
        half = minutes + 30
        if half < end:
            markers.append(TimeMarker(minutes=half, label=format_time_label(half)))
    return markers


# ══════════════════════════════════════════════════════════════
# NORMALIZATION
# ══════════════════════════════════════════════════════════════


def to_number(value) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if _is_finite(number) else None


def normalize_pay_type(value) -> str | None:
    if not value:
        return None
    normalized = str(value).lower()
    if normalized in (HOURLY, PIECE):
        return normalized
    return None


def convert_to_minutes(time_value, unit: str | None = None) -> float | None:
    """Time in `unit` (hours when missing) expressed in minutes."""
    numeric = to_number(time_value)
    if numeric is None:
        return None

    normalized = (unit or "hours").lower()
    if normalized == "minutes":
        return numeric
    if normalized == "seconds":
        return numeric / 60
    return numeric * 60


def js_round(value: float) -> int:
    """Half-up rounding (2.5 → 3, -2.5 → -2)."""
    return int(math.floor(value + 0.5))


def _resolve_base_minutes(effort) -> float | None:
    duration = to_number(getattr(effort, "duration_minutes", None))
    if duration is not None:
        return duration
    return convert_to_minutes(
        getattr(effort, "time_required", None),
        getattr(effort, "time_unit", None),
    )


def _format_number(value: float):
    return int(value) if float(value).is_integer() else value


def _is_finite(value) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False
