"""
Shopfloor Result Types.

Structured values passed between the board geometry, the lane
constraint checks and the job card services.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shopfloor.models import JobCard, JobCardItem, LaborAssignment


# Constraint status, highest priority first
AVAILABILITY = "availability"
WINDOW = "window"
OVERLAP = "overlap"
CAPACITY = "capacity"
OK = "ok"

ISSUE_PRIORITY = (AVAILABILITY, WINDOW, OVERLAP, CAPACITY)


@dataclass
class AssignmentBlock:
    """A bar on a lane, in minutes from midnight."""

    id: str
    start_minutes: int
    end_minutes: int
    lane_id: str | None = None
    label: str | None = None
    category_id: int | str | None = None
    category_name: str | None = None

    @property
    def minutes(self) -> int:
        return max(0, self.end_minutes - self.start_minutes)


@dataclass
class LaneWindow:
    start_minutes: int
    end_minutes: int


@dataclass
class LaneAvailability:
    """None means unknown, which never blocks a drop."""

    is_active: bool | None = None
    is_current: bool | None = None
    is_available_on_date: bool | None = None
    has_summary_on_date: bool | None = None


@dataclass
class ConstraintIssue:
    type: str
    message: str


@dataclass
class ConstraintResult:
    """
    Outcome of checking a candidate bar against a lane.

    status is the highest priority issue type, or 'ok'.
    """

    status: str = OK
    issues: list[ConstraintIssue] = field(default_factory=list)
    overlaps: list[AssignmentBlock] = field(default_factory=list)
    overrun_minutes: int | None = None

    @property
    def has_conflict(self) -> bool:
        return self.status != OK


@dataclass
class ConstraintMessage:
    """User-facing explanation of a blocked drop."""

    title: str
    description: str


@dataclass
class UnscheduledBarState:
    """Preview bar of a job not yet on a lane."""

    duration_minutes: float
    snap_increment: int
    start_minutes: int
    end_minutes: float
    status: str = "unscheduled"


@dataclass
class TimeMarker:
    minutes: int
    label: str
    is_major: bool = False
    position: float | None = None


@dataclass
class IssueResult:
    """
    Result of issuing a job card to a staff member.

    remaining > 0 means the source item was split and the rest is still
    waiting to be issued.
    """

    card: JobCard
    item: JobCardItem | None
    issued: int
    remaining: int
    assignment: LaborAssignment | None = None

    @property
    def was_split(self) -> bool:
        return self.remaining > 0
