"""
Execution service -- issue, start, hold, resume, complete.

All methods are @classmethod so the mixin can be composed into Board
without instantiation.
"""

import logging
from datetime import datetime

from django.core.exceptions import ValidationError
from django.utils import timezone

from shopfloor.exceptions import ShopfloorError
from shopfloor.models import JobStatus, LaborAssignment
from shopfloor.results import IssueResult
from shopfloor.scheduling import clock_to_minutes, minutes_to_clock
from shopfloor.services import job_cards

logger = logging.getLogger(__name__)


def parse_minutes(value) -> int | None:
    """Accept minutes from midnight or an 'HH:MM' string."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return clock_to_minutes(value)
    return int(value)


def suggest_actual_times(assignment: LaborAssignment, now: datetime | None = None) -> tuple[str, str]:
    """
    Pre-filled actual times for the completion form.

    Start is the scheduled start. End is the current time once the
    scheduled start has passed, otherwise the scheduled end.
    """
    now = timezone.localtime(now) if now else timezone.localtime()
    current = now.hour * 60 + now.minute
    start = assignment.start_minutes or 0
    end = current if current > start else (assignment.end_minutes or start)
    return minutes_to_clock(start), minutes_to_clock(end)


class BoardExecution:
    """
    Job execution operations.

    Thin wrappers over the job card transfers and the LaborAssignment
    lifecycle methods that turn model validation into ShopfloorError and
    add refresh-from-db semantics.
    """

    @classmethod
    def issue(cls, assignment: LaborAssignment, staff=None, quantity=None, user=None) -> IssueResult:
        """Issue a job card (full or partial quantity)."""
        return job_cards.issue_job_card(assignment, staff=staff, quantity=quantity, user=user)

    @classmethod
    def unissue(cls, assignment: LaborAssignment, staff=None, user=None) -> int:
        """Take an issued job card back."""
        return job_cards.unissue_job_card(assignment, staff=staff, user=user)

    @classmethod
    def available(cls, assignment: LaborAssignment) -> int | None:
        """Quantity of the assignment's job still waiting to be issued."""
        _, job = job_cards.resolve_references(assignment)
        if assignment.order_id is None or job is None:
            return None
        return job_cards.available_quantity(assignment.order, job)

    @classmethod
    def start(cls, assignment: LaborAssignment, user=None) -> LaborAssignment:
        return cls._transition(assignment, "start", user=user)

    @classmethod
    def hold(cls, assignment: LaborAssignment, reason: str = "", user=None) -> LaborAssignment:
        return cls._transition(assignment, "hold", reason, user=user)

    @classmethod
    def resume(cls, assignment: LaborAssignment, user=None) -> LaborAssignment:
        return cls._transition(assignment, "resume", user=user)

    @classmethod
    def complete(
        cls,
        assignment: LaborAssignment,
        actual_start,
        actual_end,
        notes: str = "",
        user=None,
    ) -> LaborAssignment:
        """
        Record actual times and complete the job.

        Times may be minutes from midnight or 'HH:MM' strings.

        Raises:
            ShopfloorError: INVALID_TIMES if either time is missing or the
                duration is not positive, INVALID_STATUS if already completed
        """
        start = parse_minutes(actual_start)
        end = parse_minutes(actual_end)
        if start is None or end is None or end - start <= 0:
            raise ShopfloorError(
                "INVALID_TIMES",
                actual_start=actual_start,
                actual_end=actual_end,
            )
        if assignment.job_status == JobStatus.COMPLETED:
            raise ShopfloorError(
                "INVALID_STATUS",
                job_key=assignment.job_key,
                current=assignment.job_status,
            )

        assignment.complete(start, end, notes=notes, user=user)
        assignment.refresh_from_db()
        return assignment

    @classmethod
    def _transition(cls, assignment: LaborAssignment, method: str, *args, user=None) -> LaborAssignment:
        current = assignment.job_status
        try:
            getattr(assignment, method)(*args, user=user)
        except ValidationError as exc:
            raise ShopfloorError(
                "INVALID_STATUS",
                job_key=assignment.job_key,
                current=current,
                action=method,
                error=" ".join(exc.messages),
            ) from exc
        assignment.refresh_from_db()
        return assignment
