"""
Tests for board queries (shopfloor.services.planning).
"""

import logging
from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from shopfloor.models import (
    AssignmentStatus,
    BillOfLabour,
    Job,
    JobCard,
    JobCardItem,
    JobCategory,
    JobStatus,
    LaborAssignment,
    Order,
    OrderDetail,
    Product,
    StaffMember,
    TimeDailySummary,
)
from shopfloor.scheduling import get_category_color
from shopfloor.services.planning import (
    build_job_id,
    derive_priority,
    fetch_open_orders_with_labor,
    fetch_planning_payload,
    fetch_staff_roster,
    fetch_week_summary,
    jobs_in_factory,
)

MONDAY = date(2026, 3, 2)


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def category(db):
    return JobCategory.objects.create(name="Upholstery")


@pytest.fixture
def job(db, category):
    return Job.objects.create(name="Cover seat", category=category, estimated_minutes=Decimal("20"))


@pytest.fixture
def product(db):
    return Product.objects.create(code="armchair", name="Armchair")


@pytest.fixture
def bol(db, product, job):
    return BillOfLabour.objects.create(
        product=product,
        job=job,
        time_required=Decimal("30"),
        time_unit="minutes",
        quantity=2,
    )


@pytest.fixture
def order(db):
    return Order.objects.create(
        order_number="SO-1042",
        customer_name="Acme Furniture",
        delivery_date=MONDAY + timedelta(days=4),
    )


@pytest.fixture
def detail(db, order, product, bol):
    return OrderDetail.objects.create(order=order, product=product, quantity=3)


@pytest.fixture
def staff(db):
    return StaffMember.objects.create(first_name="Thandi", last_name="Mokoena", weekly_hours=Decimal("40"))


# ═══════════════════════════════════════════════════════════════════
# Orders
# ═══════════════════════════════════════════════════════════════════


class TestOpenOrders:
    def test_bol_lines_become_planning_jobs(self, order, detail, bol, job, category):
        (planning_order,) = fetch_open_orders_with_labor(today=MONDAY)
        (planning_job,) = planning_order.jobs

        assert planning_order.order_number == "SO-1042"
        assert planning_order.customer == "Acme Furniture"
        assert planning_job.id == f"order-{order.pk}:detail-{detail.pk}:bol-{bol.pk}:job-{job.pk}"
        assert planning_job.quantity == 6
        assert planning_job.duration_minutes == 30
        assert planning_job.duration_hours == 3.0
        assert planning_job.category_color == get_category_color(category.pk)
        assert planning_job.owner == "Upholstery"
        assert planning_job.pay_type == "hourly"

    def test_closed_orders_are_hidden(self, db):
        Order.objects.create(order_number="OPEN")
        Order.objects.create(order_number="BUSY", status="in_production")
        Order.objects.create(order_number="DONE", status="completed")
        Order.objects.create(order_number="GONE", status="cancelled")

        numbers = [o.order_number for o in fetch_open_orders_with_labor(today=MONDAY)]

        assert sorted(numbers) == ["BUSY", "OPEN"]

    def test_ordered_by_delivery_date_nulls_last(self, db):
        Order.objects.create(order_number="NONE")
        Order.objects.create(order_number="LATE", delivery_date=MONDAY + timedelta(days=9))
        Order.objects.create(order_number="SOON", delivery_date=MONDAY + timedelta(days=1))

        numbers = [o.order_number for o in fetch_open_orders_with_labor(today=MONDAY)]

        assert numbers == ["SOON", "LATE", "NONE"]

    def test_manual_card_items_become_jobs(self, order, detail, product):
        extra_job = Job.objects.create(name="Fit castors", estimated_minutes=Decimal("10"))
        card = JobCard.objects.create(order=order)
        item = JobCardItem.objects.create(
            job_card=card,
            job=extra_job,
            product=product,
            quantity=4,
            piece_rate=Decimal("3.00"),
        )

        (planning_order,) = fetch_open_orders_with_labor(today=MONDAY)
        manual = planning_order.jobs[-1]

        assert len(planning_order.jobs) == 2
        assert manual.id == f"order-{order.pk}:jci-{item.pk}"
        assert manual.pay_type == "piece"
        assert manual.duration_hours == round(40 / 60, 2)

    def test_card_items_duplicating_bol_are_skipped(self, order, detail, job, product):
        card = JobCard.objects.create(order=order)
        JobCardItem.objects.create(job_card=card, job=job, product=product, quantity=6)

        (planning_order,) = fetch_open_orders_with_labor(today=MONDAY)

        assert len(planning_order.jobs) == 1

    def test_priority_from_due_date(self, order, detail):
        (planning_order,) = fetch_open_orders_with_labor(today=MONDAY)

        assert planning_order.priority == "medium"


class TestPriority:
    @pytest.mark.parametrize(
        "days,expected",
        [(-3, "high"), (0, "high"), (2, "high"), (3, "medium"), (7, "medium"), (8, "low")],
    )
    def test_derive_priority(self, days, expected):
        assert derive_priority(MONDAY + timedelta(days=days), MONDAY) == expected

    def test_missing_due_date(self):
        assert derive_priority(None, MONDAY) == "medium"

    def test_build_job_id_skips_missing_parts(self):
        assert build_job_id(12, None, 7, 3) == "order-12:bol-7:job-3"


# ═══════════════════════════════════════════════════════════════════
# Staff
# ═══════════════════════════════════════════════════════════════════


class TestRoster:
    def test_ordered_by_last_name(self, db):
        StaffMember.objects.create(first_name="Zola", last_name="Zulu")
        StaffMember.objects.create(first_name="Ann", last_name="Adams")

        assert [entry.name for entry in fetch_staff_roster()] == ["Ann Adams", "Zola Zulu"]

    def test_inactive_excluded_unless_asked(self, staff):
        StaffMember.objects.create(first_name="Old", last_name="Timer", is_active=False)

        assert len(fetch_staff_roster()) == 1
        assert len(fetch_staff_roster(include_inactive=True)) == 2

    def test_availability_flags(self, staff):
        staff.is_current = False
        staff.save()
        TimeDailySummary.objects.create(staff=staff, date_worked=MONDAY, total_minutes=480)

        (entry,) = fetch_staff_roster(on_date=MONDAY)

        assert entry.availability.is_active is True
        assert entry.availability.is_current is False
        assert entry.availability.is_available_on_date is False
        assert entry.availability.has_summary_on_date is True
        assert entry.capacity_hours == 40.0


# ═══════════════════════════════════════════════════════════════════
# Board payload
# ═══════════════════════════════════════════════════════════════════


class TestPayload:
    def test_scheduled_jobs_leave_the_unscheduled_list(self, order, detail, bol, job, staff):
        job_key = build_job_id(order.pk, detail.pk, bol.pk, job.pk)
        LaborAssignment.objects.create(
            job_key=job_key,
            order=order,
            order_detail=detail,
            bol=bol,
            job=job,
            staff=staff,
            assignment_date=MONDAY,
            start_minutes=480,
            end_minutes=660,
        )

        payload = fetch_planning_payload(MONDAY)

        assert payload.orders[0].jobs[0].schedule_status == "scheduled"
        assert payload.unscheduled_jobs == []
        (lane,) = payload.lanes
        assert lane.staff.id == staff.pk
        assert [a.job_key for a in lane.assignments] == [job_key]
        assert lane.utilization == 25
        assert (lane.available_from, lane.available_to) == (420, 1140)

    def test_unassigned_row_counts_as_unscheduled(self, order, detail, bol, job, staff):
        LaborAssignment.objects.create(
            job_key=build_job_id(order.pk, detail.pk, bol.pk, job.pk),
            assignment_date=MONDAY,
            status=AssignmentStatus.UNSCHEDULED,
        )

        payload = fetch_planning_payload(MONDAY)

        assert len(payload.unscheduled_jobs) == 1
        assert payload.lanes[0].assignments == []

    def test_other_days_are_ignored(self, order, detail, bol, job, staff):
        LaborAssignment.objects.create(
            job_key=build_job_id(order.pk, detail.pk, bol.pk, job.pk),
            staff=staff,
            assignment_date=MONDAY + timedelta(days=1),
            start_minutes=480,
            end_minutes=540,
        )

        payload = fetch_planning_payload(MONDAY)

        assert payload.assignments == []
        assert len(payload.unscheduled_jobs) == 1

    def test_missing_staff_is_logged(self, order, detail, caplog):
        with caplog.at_level(logging.WARNING, logger="shopfloor.scheduling"):
            fetch_planning_payload(MONDAY)

        (record,) = [r for r in caplog.records if getattr(r, "event", None) == "missing_staff"]
        assert record.reason == "roster_empty"


# ═══════════════════════════════════════════════════════════════════
# Week strip & floor
# ═══════════════════════════════════════════════════════════════════


class TestWeekSummary:
    def test_work_week_from_monday(self, staff):
        LaborAssignment.objects.create(
            job_key="a", staff=staff, assignment_date=MONDAY, start_minutes=480, end_minutes=540
        )
        LaborAssignment.objects.create(
            job_key="b", staff=staff, assignment_date=MONDAY, start_minutes=600, end_minutes=720
        )
        LaborAssignment.objects.create(
            job_key="c",
            assignment_date=MONDAY,
            status=AssignmentStatus.UNSCHEDULED,
        )

        days = fetch_week_summary(MONDAY + timedelta(days=2))

        assert [d.date for d in days] == [MONDAY + timedelta(days=i) for i in range(5)]
        assert days[0].total_assigned_minutes == 180
        assert days[0].assignment_count == 2
        assert days[0].utilization == 25
        assert days[1].total_assigned_minutes == 0
        assert days[1].utilization == 0

    def test_no_staff_means_no_utilization(self, db):
        days = fetch_week_summary(MONDAY)

        assert all(d.utilization == 0 for d in days)

    def test_today_is_flagged(self, db):
        today = timezone.localdate()

        days = fetch_week_summary(today)

        flagged = [d.date for d in days if d.is_today]
        assert flagged == ([today] if today.weekday() < 5 else [])


class TestJobsInFactory:
    def test_in_progress_first_then_oldest_issue(self, staff):
        now = timezone.now()
        issued_late = LaborAssignment.objects.create(
            job_key="late",
            staff=staff,
            assignment_date=MONDAY,
            job_status=JobStatus.ISSUED,
            issued_at=now - timedelta(minutes=10),
        )
        issued_early = LaborAssignment.objects.create(
            job_key="early",
            staff=staff,
            assignment_date=MONDAY,
            job_status=JobStatus.ISSUED,
            issued_at=now - timedelta(hours=2),
        )
        running = LaborAssignment.objects.create(
            job_key="running",
            staff=staff,
            assignment_date=MONDAY,
            job_status=JobStatus.IN_PROGRESS,
            started_at=now - timedelta(minutes=45),
            issued_at=now - timedelta(hours=3),
        )
        LaborAssignment.objects.create(job_key="done", assignment_date=MONDAY, job_status=JobStatus.COMPLETED)

        floor = jobs_in_factory()

        assert [a.job_key for a in floor] == [running.job_key, issued_early.job_key, issued_late.job_key]
        assert floor[0].minutes_elapsed == 45
