"""
Placement service -- drop, move and resize bars on staff lanes.

The pointer position arrives in minutes (the caller converts pixels with
Timeline.minutes_at). Every placement is snapped, checked against the
lane and only then persisted.

All methods are @classmethod so the mixin can be composed into Board
without instantiation.
"""

import logging
from dataclasses import dataclass
from datetime import date

from shopfloor.conf import get_day_window, get_setting
from shopfloor.exceptions import ShopfloorError
from shopfloor.models import AssignmentStatus, LaborAssignment, StaffMember
from shopfloor.results import AssignmentBlock, ConstraintResult, LaneWindow
from shopfloor.scheduling import (
    build_constraint_message,
    calculate_duration_minutes,
    check_lane_constraints,
    choose_snap_increment,
    clamp_minutes,
    snap_to_grid,
)
from shopfloor.services.assignments import assign_job_to_staff, update_job_schedule
from shopfloor.services.events import log_scheduling_event
from shopfloor.services.planning import staff_availability

logger = logging.getLogger(__name__)

JOB = "job"
MOVE = "assignment"
RESIZE_START = "resize-start"
RESIZE_END = "resize-end"

PLACEMENT_KINDS = (JOB, MOVE, RESIZE_START, RESIZE_END)


@dataclass
class Placement:
    """Where a bar lands once snapped."""

    start_minutes: int
    end_minutes: int
    snap_increment: int


# ══════════════════════════════════════════════════════════════
# GEOMETRY
# ══════════════════════════════════════════════════════════════


def resolve_job_drop(job, pointer_minutes) -> Placement:
    """New bar from the unscheduled list, starting under the pointer."""
    day_start, day_end = get_day_window()
    minimum = get_setting("MIN_DURATION_MINUTES")

    duration = max(calculate_duration_minutes(job, minimum_minutes=minimum), minimum)
    return _snap_bar(pointer_minutes, duration, day_start, day_end)


def resolve_move(start_minutes, end_minutes, pointer_minutes) -> Placement:
    """Existing bar dragged to a new start, keeping its length."""
    day_start, day_end = get_day_window()
    duration = (end_minutes or 0) - (start_minutes or 0)
    if duration <= 0:
        duration = get_setting("MIN_DURATION_MINUTES")
    return _snap_bar(pointer_minutes, duration, day_start, day_end)


def resolve_resize_start(start_minutes, end_minutes, pointer_minutes) -> Placement:
    day_start, day_end = get_day_window()
    snap = choose_snap_increment(end_minutes - start_minutes)
    max_start = min(
        end_minutes - get_setting("MIN_RESIZE_MINUTES"),
        day_end - get_setting("MIN_DURATION_MINUTES"),
    )
    start = snap_to_grid(pointer_minutes, snap, day_start, max_start)
    return Placement(start_minutes=start, end_minutes=end_minutes, snap_increment=snap)


def resolve_resize_end(start_minutes, end_minutes, pointer_minutes) -> Placement:
    day_start, day_end = get_day_window()
    snap = choose_snap_increment(end_minutes - start_minutes)
    min_end = start_minutes + get_setting("MIN_RESIZE_MINUTES")
    end = snap_to_grid(pointer_minutes, snap, min_end, day_end)
    return Placement(start_minutes=start_minutes, end_minutes=end, snap_increment=snap)


def _snap_bar(pointer_minutes, duration, day_start, day_end) -> Placement:
    clamped = clamp_minutes(pointer_minutes, day_start, day_end)
    snap = choose_snap_increment(duration)
    start = snap_to_grid(clamped, snap, day_start, day_end - duration)
    end = min(start + duration, day_end)
    return Placement(start_minutes=start, end_minutes=end, snap_increment=snap)


# ══════════════════════════════════════════════════════════════
# LANE CHECK
# ══════════════════════════════════════════════════════════════


def lane_blocks(staff: StaffMember, assignment_date: date, exclude_job_key: str | None = None):
    """Bars already on the staff member's lane for the day."""
    qs = (
        LaborAssignment.objects.filter(
            staff=staff,
            assignment_date=assignment_date,
            status=AssignmentStatus.SCHEDULED,
            start_minutes__isnull=False,
            end_minutes__isnull=False,
        )
        .select_related("order", "order_detail__product", "bol__product", "job__category")
    )
    if exclude_job_key:
        qs = qs.exclude(job_key=exclude_job_key)

    return [
        AssignmentBlock(
            id=assignment.job_key,
            start_minutes=assignment.start_minutes,
            end_minutes=assignment.end_minutes,
            lane_id=str(staff.pk),
            label=assignment.label,
            category_id=assignment.job.category_id if assignment.job_id else None,
        )
        for assignment in qs
    ]


def check_placement(
    staff: StaffMember,
    assignment_date: date,
    job_key: str,
    placement: Placement,
) -> ConstraintResult:
    """
    Check a placement against the lane; raise SCHEDULE_CONFLICT when blocked.
    """
    day_start, day_end = get_day_window()
    window = LaneWindow(day_start, day_end)
    candidate = AssignmentBlock(
        id=job_key,
        start_minutes=placement.start_minutes,
        end_minutes=placement.end_minutes,
        lane_id=str(staff.pk),
    )

    result = check_lane_constraints(
        lane_blocks(staff, assignment_date, exclude_job_key=job_key),
        candidate,
        window=window,
        availability=staff_availability(staff),
    )

    if result.has_conflict:
        message = build_constraint_message(result, staff.name, window)
        log_scheduling_event(
            "drop_blocked",
            message.description,
            job_key=job_key,
            staff_id=staff.pk,
            date=str(assignment_date),
            start_minutes=placement.start_minutes,
            end_minutes=placement.end_minutes,
            reason=result.status,
            detail=message.title,
        )
        raise ShopfloorError(
            "SCHEDULE_CONFLICT",
            status=result.status,
            title=message.title,
            description=message.description,
            job_key=job_key,
            staff_id=staff.pk,
        )

    log_scheduling_event(
        "drop_attempt",
        job_key=job_key,
        staff_id=staff.pk,
        date=str(assignment_date),
        start_minutes=placement.start_minutes,
        end_minutes=placement.end_minutes,
    )
    return result


class BoardPlacement:
    """
    Drag and drop operations on the board.

    Each method snaps the pointer position, checks the lane and persists
    the result, raising ShopfloorError('SCHEDULE_CONFLICT') when the lane
    rejects the bar.
    """

    @classmethod
    def drop_job(cls, job, staff: StaffMember, start_minutes, date: date) -> LaborAssignment:
        """Drop a planning job from the unscheduled list onto a lane."""
        placement = resolve_job_drop(job, start_minutes)
        check_placement(staff, date, job.id, placement)
        return assign_job_to_staff(
            job, staff, placement.start_minutes, placement.end_minutes, date
        )

    @classmethod
    def move(cls, assignment: LaborAssignment, staff: StaffMember, start_minutes) -> LaborAssignment:
        """Drag a placed bar to a new start (and possibly another lane)."""
        if staff is None:
            raise ShopfloorError("MISSING_REFERENCE", job_key=assignment.job_key, field="staff")
        placement = resolve_move(assignment.start_minutes, assignment.end_minutes, start_minutes)
        check_placement(staff, assignment.assignment_date, assignment.job_key, placement)
        return update_job_schedule(
            assignment.job_key,
            assignment.assignment_date,
            staff=staff,
            start_minutes=placement.start_minutes,
            end_minutes=placement.end_minutes,
        )

    @classmethod
    def resize(cls, assignment: LaborAssignment, edge: str, minutes) -> LaborAssignment:
        """Drag the start or end handle of a placed bar."""
        if not assignment.is_scheduled:
            raise ShopfloorError(
                "INVALID_STATUS",
                job_key=assignment.job_key,
                status=assignment.status,
            )

        if edge == RESIZE_START:
            placement = resolve_resize_start(assignment.start_minutes, assignment.end_minutes, minutes)
        elif edge == RESIZE_END:
            placement = resolve_resize_end(assignment.start_minutes, assignment.end_minutes, minutes)
        else:
            raise ValueError(f"Unknown resize edge: {edge}")

        check_placement(assignment.staff, assignment.assignment_date, assignment.job_key, placement)
        return update_job_schedule(
            assignment.job_key,
            assignment.assignment_date,
            start_minutes=placement.start_minutes,
            end_minutes=placement.end_minutes,
        )

    @classmethod
    def place(cls, kind: str, target, staff: StaffMember | None, minutes, date: date | None = None):
        """
        Dispatch a drop payload by kind.

        target is a PlanningJob for 'job' drops and a LaborAssignment for
        the others.
        """
        if kind == JOB:
            return cls.drop_job(target, staff, minutes, date)
        if kind == MOVE:
            return cls.move(target, staff or target.staff, minutes)
        if kind in (RESIZE_START, RESIZE_END):
            return cls.resize(target, kind, minutes)
        raise ValueError(f"Unknown placement kind: {kind}")
