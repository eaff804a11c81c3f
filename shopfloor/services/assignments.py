"""
Assignment persistence: assign, update and unassign jobs on staff lanes.

One row per (job_key, assignment_date). Assigning an already placed job
updates the existing row instead of failing.
"""

import logging
from datetime import date

from django.db import DatabaseError, transaction

from shopfloor.models import AssignmentStatus, LaborAssignment, PayType
from shopfloor.scheduling import js_round, normalize_pay_type
from shopfloor.services.events import log_scheduling_event
from shopfloor.signals import assignment_scheduled, assignment_unassigned

logger = logging.getLogger(__name__)

_UNSET = object()


def _log_failure(operation: str, job_key: str, assignment_date, exc: Exception, **fields) -> None:
    log_scheduling_event(
        "mutation_failed",
        str(exc),
        job_key=job_key,
        date=str(assignment_date),
        reason=operation,
        detail=exc.__class__.__name__,
        **fields,
    )


def assign_job_to_staff(job, staff, start_minutes, end_minutes, assignment_date: date) -> LaborAssignment:
    """
    Place a planning job on a staff lane (upsert on job key + date).

    `job` is a PlanningJob or anything with the same attributes
    (id, order_id, order_detail_id, bol_id, job_id, pay_type, rates).
    """
    defaults = {
        "order_id": getattr(job, "order_id", None),
        "order_detail_id": getattr(job, "order_detail_id", None),
        "bol_id": getattr(job, "bol_id", None),
        "job_id": getattr(job, "job_id", None),
        "staff": staff,
        "start_minutes": js_round(start_minutes),
        "end_minutes": js_round(end_minutes),
        "status": AssignmentStatus.SCHEDULED,
        "pay_type": normalize_pay_type(getattr(job, "pay_type", None)) or PayType.HOURLY,
        "hourly_rate_id": getattr(job, "hourly_rate_id", None),
        "piece_rate_id": getattr(job, "piece_rate_id", None),
    }

    try:
        assignment, created = LaborAssignment.objects.update_or_create(
            job_key=job.id,
            assignment_date=assignment_date,
            defaults=defaults,
        )
    except DatabaseError as exc:
        _log_failure("assign", job.id, assignment_date, exc, staff_id=staff.pk)
        raise

    log_scheduling_event(
        "assigned",
        f"Job {job.id} assigned to {staff}",
        job_key=assignment.job_key,
        job_label=getattr(job, "name", None),
        staff_id=staff.pk,
        date=str(assignment_date),
        start_minutes=assignment.start_minutes,
        end_minutes=assignment.end_minutes,
    )
    assignment_scheduled.send(sender=LaborAssignment, assignment=assignment, created=created)
    return assignment


def update_job_schedule(
    job_key: str,
    assignment_date: date,
    staff=_UNSET,
    start_minutes=_UNSET,
    end_minutes=_UNSET,
    status: str = AssignmentStatus.SCHEDULED,
    pay_type=_UNSET,
    hourly_rate=_UNSET,
    piece_rate=_UNSET,
) -> LaborAssignment:
    """
    Move/resize an assignment. Arguments left out keep their stored value.

    Creates the row when it does not exist yet.
    """
    fields = {"status": status}
    if staff is not _UNSET:
        fields["staff"] = staff
    if start_minutes is not _UNSET:
        fields["start_minutes"] = js_round(start_minutes) if start_minutes is not None else None
    if end_minutes is not _UNSET:
        fields["end_minutes"] = js_round(end_minutes) if end_minutes is not None else None
    if pay_type is not _UNSET:
        fields["pay_type"] = normalize_pay_type(pay_type) or PayType.HOURLY
    if hourly_rate is not _UNSET:
        fields["hourly_rate"] = hourly_rate
    if piece_rate is not _UNSET:
        fields["piece_rate"] = piece_rate

    try:
        with transaction.atomic():
            assignment = (
                LaborAssignment.objects.select_for_update()
                .filter(job_key=job_key, assignment_date=assignment_date)
                .first()
            )
            created = assignment is None
            if created:
                logger.info(f"No assignment for {job_key} on {assignment_date}, creating it")
                assignment = LaborAssignment(job_key=job_key, assignment_date=assignment_date)

            for name, value in fields.items():
                setattr(assignment, name, value)
            assignment.save()
    except DatabaseError as exc:
        _log_failure("update", job_key, assignment_date, exc)
        raise

    log_scheduling_event(
        "updated",
        job_key=job_key,
        staff_id=assignment.staff_id,
        date=str(assignment_date),
        start_minutes=assignment.start_minutes,
        end_minutes=assignment.end_minutes,
    )
    assignment_scheduled.send(sender=LaborAssignment, assignment=assignment, created=created)
    return assignment


def unassign_job(job_key: str, assignment_date: date) -> LaborAssignment:
    """
    Return a job to the unscheduled list.

    When no row exists an unsaved placeholder in unscheduled state is
    returned so callers can treat both cases alike.
    """
    assignment = LaborAssignment.objects.filter(
        job_key=job_key, assignment_date=assignment_date
    ).first()

    if assignment is None:
        return LaborAssignment(
            job_key=job_key,
            assignment_date=assignment_date,
            status=AssignmentStatus.UNSCHEDULED,
            pay_type=PayType.HOURLY,
        )

    previous_staff = assignment.staff_id
    previous_start, previous_end = assignment.start_minutes, assignment.end_minutes

    assignment.staff = None
    assignment.status = AssignmentStatus.UNSCHEDULED
    assignment.start_minutes = None
    assignment.end_minutes = None
    try:
        assignment.save(update_fields=["staff", "status", "start_minutes", "end_minutes", "updated_at"])
    except DatabaseError as exc:
        _log_failure("unassign", job_key, assignment_date, exc, staff_id=previous_staff)
        raise

    log_scheduling_event(
        "unassigned",
        f"Job {job_key} returned to unscheduled",
        job_key=job_key,
        date=str(assignment_date),
        staff_id=previous_staff,
        start_minutes=previous_start,
        end_minutes=previous_end,
    )
    assignment_unassigned.send(sender=LaborAssignment, assignment=assignment)
    return assignment
