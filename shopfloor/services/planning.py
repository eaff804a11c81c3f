"""
Planning queries -- everything the labor planning board shows.

Orders expand into planning jobs (one per order line × BOL line, plus
job card items added by hand), staff become lanes, and assignments sit
on those lanes.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta

from django.db.models import Case, Count, F, IntegerField, Q, Sum, Value, When
from django.utils import timezone

from shopfloor.conf import get_day_window, get_setting
from shopfloor.models import (
    AssignmentStatus,
    JobCardItem,
    JobCardItemStatus,
    JobCardStatus,
    JobStatus,
    JobTimeHistory,
    LaborAssignment,
    Order,
    PayType,
    StaffMember,
    TimeDailySummary,
)
from shopfloor.results import LaneAvailability
from shopfloor.scheduling import get_category_color, js_round
from shopfloor.services.events import log_scheduling_event
from shopfloor.timeline import lane_utilization

logger = logging.getLogger(__name__)

SCHEDULED = "scheduled"
UNSCHEDULED = "unscheduled"


# ══════════════════════════════════════════════════════════════
# TYPES
# ══════════════════════════════════════════════════════════════


@dataclass
class PlanningJob:
    """A unit of work waiting for (or placed on) a lane."""

    id: str
    name: str
    order_id: int
    order_detail_id: int | None = None
    product_id: int | None = None
    product_name: str | None = None
    bol_id: int | None = None
    job_id: int | None = None
    category_name: str | None = None
    category_color: str | None = None
    pay_type: str = PayType.HOURLY
    quantity: int = 1
    duration_minutes: float | None = None
    duration_hours: float = 0
    time_unit: str = "hours"
    hourly_rate_id: int | None = None
    piece_rate_id: int | None = None
    owner: str = "Unassigned"
    status: str = "ready"
    schedule_status: str = UNSCHEDULED


@dataclass
class PlanningOrder:
    id: str
    order_id: int
    order_number: str
    customer: str
    priority: str
    due_date: date | None
    status_name: str | None
    jobs: list[PlanningJob] = field(default_factory=list)


@dataclass
class StaffRosterEntry:
    id: int
    name: str
    role: str | None
    availability: LaneAvailability
    capacity_hours: float | None = None


@dataclass
class StaffLane:
    """A roster entry with the bars placed on it for the day."""

    staff: StaffRosterEntry
    assignments: list[LaborAssignment]
    utilization: int
    available_from: int
    available_to: int


@dataclass
class PlanningPayload:
    date: date | None
    orders: list[PlanningOrder]
    staff: list[StaffRosterEntry]
    unscheduled_jobs: list[PlanningJob]
    assignments: list[LaborAssignment]
    lanes: list[StaffLane]


@dataclass
class DaySummary:
    date: date
    total_assigned_minutes: int
    assignment_count: int
    utilization: int
    is_today: bool = False


class BoardPlanning:
    """
    Read side of the board.

    All methods are @classmethod so the mixin can be composed into Board
    without instantiation.
    """

    @classmethod
    def open_orders(cls, today: date | None = None) -> list[PlanningOrder]:
        return fetch_open_orders_with_labor(today=today)

    @classmethod
    def find_job(cls, job_key: str) -> PlanningJob | None:
        return find_planning_job(job_key)

    @classmethod
    def roster(cls, on_date: date | None = None, include_inactive: bool = False):
        return fetch_staff_roster(on_date=on_date, include_inactive=include_inactive)

    @classmethod
    def payload(cls, on_date: date) -> PlanningPayload:
        return fetch_planning_payload(on_date)

    @classmethod
    def week(cls, on_date: date) -> list[DaySummary]:
        return fetch_week_summary(on_date)

    @classmethod
    def in_factory(cls) -> list[LaborAssignment]:
        return jobs_in_factory()

    @classmethod
    def time_stats(cls, job, product=None) -> dict:
        return JobTimeHistory.stats(job, product=product)


# ══════════════════════════════════════════════════════════════
# ORDERS → PLANNING JOBS
# ══════════════════════════════════════════════════════════════


def fetch_open_orders_with_labor(today: date | None = None) -> list[PlanningOrder]:
    """Orders not in a closed status (no status counts as open), soonest first."""
    today = today or timezone.localdate()
    closed = [status.lower() for status in get_setting("CLOSED_ORDER_STATUSES")]

    orders = (
        Order.objects.filter(Q(status__isnull=True) | ~Q(status__in=closed))
        .order_by(F("delivery_date").asc(nulls_last=True), "pk")
        .prefetch_related(
            "details__product__bol_items__job__category",
        )
    )

    card_items_by_order = _load_job_card_items_by_order()

    return [
        _normalize_order(order, card_items_by_order.get(order.pk, []), today)
        for order in orders
    ]


def _normalize_order(order: Order, card_items: list[JobCardItem], today: date) -> PlanningOrder:
    bol_jobs = []
    for detail in order.details.all():
        bol_jobs.extend(_normalize_detail_jobs(order, detail))

    bol_pairs = {(job.job_id, job.product_id) for job in bol_jobs}
    manual_jobs = [
        _normalize_job_card_item(order.pk, item)
        for item in card_items
        if (item.job_id, item.product_id) not in bol_pairs
    ]

    return PlanningOrder(
        id=order.display_number,
        order_id=order.pk,
        order_number=order.display_number,
        customer=order.customer_name or "Unknown customer",
        priority=derive_priority(order.due_date, today),
        due_date=order.due_date,
        status_name=order.status,
        jobs=bol_jobs + manual_jobs,
    )


def _normalize_detail_jobs(order: Order, detail) -> list[PlanningJob]:
    product = detail.product
    jobs = []

    for bol in product.bol_items.all():
        job = bol.job
        category = job.category if job else None
        quantity = (bol.quantity or 1) * detail.quantity
        per_unit = bol.minutes_per_unit
        total = per_unit * quantity if per_unit is not None else None
        category_name = category.name if category else None

        jobs.append(
            PlanningJob(
                id=build_job_id(order.pk, detail.pk, bol.pk, bol.job_id),
                name=job.name if job else f"Job {bol.job_id or ''}".strip(),
                order_id=order.pk,
                order_detail_id=detail.pk,
                product_id=product.pk,
                product_name=product.name,
                bol_id=bol.pk,
                job_id=bol.job_id,
                category_name=category_name,
                category_color=get_category_color(category.pk if category else None),
                pay_type=bol.pay_type or PayType.HOURLY,
                quantity=quantity,
                duration_minutes=per_unit,
                duration_hours=round(total / 60, 2) if total is not None else 0,
                time_unit=bol.time_unit,
                hourly_rate_id=bol.hourly_rate_id,
                piece_rate_id=bol.piece_rate_id,
                owner=category_name or product.name or "Unassigned",
            )
        )

    return jobs


def _load_job_card_items_by_order() -> dict[int, list[JobCardItem]]:
    """Open items of non-cancelled cards linked to an order."""
    items = (
        JobCardItem.objects.filter(job_card__order__isnull=False)
        .exclude(job_card__status=JobCardStatus.CANCELLED)
        .exclude(status=JobCardItemStatus.COMPLETED)
        .select_related("job_card", "job__category", "product")
        .order_by("pk")
    )

    result = defaultdict(list)
    for item in items:
        result[item.job_card.order_id].append(item)
    return result


def _normalize_job_card_item(order_id: int, item: JobCardItem) -> PlanningJob:
    job = item.job
    category = job.category if job else None
    category_name = category.name if category else None
    per_unit = job.minutes_per_unit if job else None
    total = per_unit * item.quantity if per_unit is not None else None

    return PlanningJob(
        id=f"order-{order_id}:jci-{item.pk}",
        name=job.name if job else f"Job Card Item {item.pk}",
        order_id=order_id,
        product_id=item.product_id,
        product_name=item.product.name if item.product else None,
        job_id=item.job_id,
        category_name=category_name,
        category_color=get_category_color(category.pk if category else None),
        pay_type=PayType.PIECE if item.piece_rate is not None else PayType.HOURLY,
        quantity=item.quantity,
        duration_minutes=per_unit,
        duration_hours=round(total / 60, 2) if total is not None else 0,
        time_unit="minutes",
        owner=category_name or (item.product.name if item.product else None) or "Unassigned",
    )


def find_planning_job(job_key: str) -> PlanningJob | None:
    """Planning job for a job key among the open orders."""
    for order in fetch_open_orders_with_labor():
        for job in order.jobs:
            if job.id == job_key:
                return job
    return None


def build_job_id(order_id, order_detail_id=None, bol_id=None, job_id=None) -> str:
    """'order-12:detail-40:bol-7:job-3' (missing parts are skipped)."""
    pieces = [f"order-{order_id}"]
    if order_detail_id is not None:
        pieces.append(f"detail-{order_detail_id}")
    if bol_id is not None:
        pieces.append(f"bol-{bol_id}")
    if job_id is not None:
        pieces.append(f"job-{job_id}")
    return ":".join(pieces)


def derive_priority(due_date: date | None, today: date | None = None) -> str:
    if due_date is None:
        return "medium"
    today = today or timezone.localdate()
    days = (due_date - today).days
    if days <= 2:
        return "high"
    if days <= 7:
        return "medium"
    return "low"


# ══════════════════════════════════════════════════════════════
# STAFF
# ══════════════════════════════════════════════════════════════


def staff_availability(staff: StaffMember, has_summary: bool = False) -> LaneAvailability:
    return LaneAvailability(
        is_active=staff.is_active,
        is_current=staff.is_current,
        has_summary_on_date=has_summary,
        is_available_on_date=staff.is_active and staff.is_current,
    )


def fetch_staff_roster(
    on_date: date | None = None,
    include_inactive: bool = False,
) -> list[StaffRosterEntry]:
    qs = StaffMember.objects.order_by("last_name", "first_name")
    if not include_inactive:
        qs = qs.filter(is_active=True)

    summaries = set()
    if on_date is not None:
        summaries = set(
            TimeDailySummary.objects.filter(date_worked=on_date).values_list("staff_id", flat=True)
        )

    return [
        StaffRosterEntry(
            id=member.pk,
            name=member.name,
            role=member.role or None,
            availability=staff_availability(member, has_summary=member.pk in summaries),
            capacity_hours=float(member.weekly_hours) if member.weekly_hours is not None else None,
        )
        for member in qs
    ]


# ══════════════════════════════════════════════════════════════
# ASSIGNMENTS & BOARD
# ══════════════════════════════════════════════════════════════


def fetch_labor_assignments(on_date: date | None = None) -> list[LaborAssignment]:
    qs = LaborAssignment.objects.select_related(
        "order",
        "order_detail__product",
        "bol__product",
        "job__category",
        "staff",
    ).order_by(F("start_minutes").asc(nulls_last=True), "pk")
    if on_date is not None:
        qs = qs.filter(assignment_date=on_date)
    return list(qs)


def fetch_planning_payload(on_date: date) -> PlanningPayload:
    """Everything the board needs for one day."""
    orders = fetch_open_orders_with_labor()
    staff = fetch_staff_roster(on_date=on_date)
    assignments = fetch_labor_assignments(on_date=on_date)

    by_job = {assignment.job_key: assignment for assignment in assignments}
    for order in orders:
        for job in order.jobs:
            placed = by_job.get(job.id)
            job.schedule_status = (
                SCHEDULED
                if placed is not None and placed.status != AssignmentStatus.UNSCHEDULED
                else UNSCHEDULED
            )

    unscheduled = [
        job for order in orders for job in order.jobs if job.schedule_status != SCHEDULED
    ]

    if not any(entry.availability.is_available_on_date for entry in staff):
        log_scheduling_event(
            "missing_staff",
            f"No staff available on {on_date}",
            date=str(on_date),
            reason="roster_empty" if not staff else "no_available_staff",
            detail=f"Staff rows: {len(staff)}",
        )

    return PlanningPayload(
        date=on_date,
        orders=orders,
        staff=staff,
        unscheduled_jobs=unscheduled,
        assignments=assignments,
        lanes=build_staff_lanes(staff, assignments),
    )


def build_staff_lanes(staff: list[StaffRosterEntry], assignments: list[LaborAssignment]) -> list[StaffLane]:
    day_start, day_end = get_day_window()
    shift_minutes = day_end - day_start

    by_staff = defaultdict(list)
    for assignment in assignments:
        if assignment.is_scheduled:
            by_staff[assignment.staff_id].append(assignment)

    lanes = []
    for entry in staff:
        placed = sorted(by_staff.get(entry.id, []), key=lambda a: a.start_minutes)
        lanes.append(
            StaffLane(
                staff=entry,
                assignments=placed,
                utilization=lane_utilization(placed, shift_minutes),
                available_from=day_start,
                available_to=day_end,
            )
        )
    return lanes


def fetch_week_summary(on_date: date) -> list[DaySummary]:
    """
    Booked minutes per day of the work week containing `on_date`.

    Utilization is against the shift capacity of all available staff.
    """
    monday = on_date - timedelta(days=on_date.weekday())
    days = [monday + timedelta(days=i) for i in range(get_setting("WORK_WEEK_DAYS"))]

    rows = (
        LaborAssignment.objects.filter(
            assignment_date__in=days,
            status=AssignmentStatus.SCHEDULED,
            staff__isnull=False,
            start_minutes__isnull=False,
            end_minutes__isnull=False,
        )
        .values("assignment_date")
        .annotate(
            total=Sum(F("end_minutes") - F("start_minutes")),
            count=Count("pk"),
        )
    )
    totals = {row["assignment_date"]: row for row in rows}

    day_start, day_end = get_day_window()
    available_staff = StaffMember.objects.filter(is_active=True, is_current=True).count()
    capacity = available_staff * (day_end - day_start)
    today = timezone.localdate()

    summaries = []
    for day in days:
        row = totals.get(day)
        total = row["total"] if row else 0
        summaries.append(
            DaySummary(
                date=day,
                total_assigned_minutes=total,
                assignment_count=row["count"] if row else 0,
                utilization=min(js_round(total / capacity * 100), 100) if capacity > 0 else 0,
                is_today=day == today,
            )
        )
    return summaries


def jobs_in_factory() -> list[LaborAssignment]:
    """Jobs out on the floor: in progress first, then oldest issued."""
    return list(
        LaborAssignment.objects.filter(job_status__in=[JobStatus.ISSUED, JobStatus.IN_PROGRESS])
        .select_related("order", "job", "staff", "order_detail__product")
        .annotate(
            floor_rank=Case(
                When(job_status=JobStatus.IN_PROGRESS, then=Value(1)),
                default=Value(2),
                output_field=IntegerField(),
            )
        )
        .order_by("floor_rank", F("issued_at").asc(nulls_last=True))
    )
