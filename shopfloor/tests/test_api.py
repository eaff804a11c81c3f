"""
Tests for Shopfloor API views (shopfloor.api.views).

Verifies the board endpoints, job cards CRUD and the assignment actions,
including the error codes mapped to 400/404/409.
"""

import pytest

pytestmark = pytest.mark.urls("shopfloor.tests.test_api_urls")
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from shopfloor.models import (
    AssignmentStatus,
    BillOfLabour,
    Job,
    JobCard,
    JobCardItem,
    JobStatus,
    JobTimeHistory,
    LaborAssignment,
    Order,
    OrderDetail,
    Product,
    StaffMember,
)
from shopfloor.services.planning import build_job_id

User = get_user_model()

WORK_DAY = date(2026, 3, 2)
BASE = "/api/shopfloor"


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def api_client(db):
    user = User.objects.create_user(username="planner", password="test123")
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def staff(db):
    return StaffMember.objects.create(first_name="Thandi", last_name="Mokoena")


@pytest.fixture
def job(db):
    return Job.objects.create(name="Cover seat")


@pytest.fixture
def product(db):
    return Product.objects.create(code="armchair", name="Armchair")


@pytest.fixture
def order(db):
    return Order.objects.create(order_number="SO-1042", delivery_date=date(2026, 3, 6))


@pytest.fixture
def job_key(db, order, product, job):
    """Four armchairs at 30 minutes each: a 120 minute bar."""
    bol = BillOfLabour.objects.create(
        product=product,
        job=job,
        time_required=Decimal("30"),
        time_unit="minutes",
    )
    detail = OrderDetail.objects.create(order=order, product=product, quantity=4)
    return build_job_id(order.pk, detail.pk, bol.pk, job.pk)


@pytest.fixture
def assignment(api_client, job_key, staff):
    response = api_client.post(
        f"{BASE}/assignments/assign/",
        {"job_key": job_key, "staff": staff.pk, "date": "2026-03-02", "start_minutes": 480},
        format="json",
    )
    assert response.status_code == 201
    return LaborAssignment.objects.get(pk=response.data["id"])


@pytest.fixture
def pool_item(db, order, job, product):
    card = JobCard.objects.create(order=order)
    return JobCardItem.objects.create(job_card=card, job=job, product=product, quantity=4)


# ═══════════════════════════════════════════════════════════════════
# Board
# ═══════════════════════════════════════════════════════════════════


class TestBoardAPI:
    def test_board_payload(self, api_client, job_key, staff):
        """GET /board/ returns orders, lanes and unscheduled jobs."""
        response = api_client.get(f"{BASE}/board/", {"date": "2026-03-02"})

        assert response.status_code == 200
        assert response.data["date"] == "2026-03-02"
        assert response.data["orders"][0]["jobs"][0]["id"] == job_key
        assert [j["id"] for j in response.data["unscheduled_jobs"]] == [job_key]
        assert response.data["lanes"][0]["staff"]["name"] == "Thandi Mokoena"

    def test_board_lists_unscheduled_rows(self, api_client, assignment):
        """Rows sent back to the unscheduled list stay in the payload."""
        api_client.post(f"{BASE}/assignments/{assignment.pk}/unassign/")

        response = api_client.get(f"{BASE}/board/", {"date": "2026-03-02"})

        (row,) = response.data["assignments"]
        assert row["id"] == assignment.pk
        assert row["status"] == AssignmentStatus.UNSCHEDULED
        assert response.data["lanes"][0]["assignments"] == []

    def test_board_invalid_date(self, api_client):
        """An unparseable date is a 400."""
        response = api_client.get(f"{BASE}/board/", {"date": "not-a-date"})

        assert response.status_code == 400

    def test_week(self, api_client, assignment):
        """GET /board/week/ returns the work week."""
        response = api_client.get(f"{BASE}/board/week/", {"date": "2026-03-04"})

        assert response.status_code == 200
        assert len(response.data) == 5
        assert response.data[0]["date"] == "2026-03-02"
        assert response.data[0]["total_assigned_minutes"] == 120

    def test_in_factory(self, api_client, assignment):
        """GET /board/in-factory/ lists issued and running jobs only."""
        assert api_client.get(f"{BASE}/board/in-factory/").data == []

        api_client.post(f"{BASE}/assignments/{assignment.pk}/start/")
        response = api_client.get(f"{BASE}/board/in-factory/")

        assert [row["id"] for row in response.data] == [assignment.pk]

    def test_staff_roster(self, api_client, staff):
        """GET /staff/ returns the roster with availability."""
        response = api_client.get(f"{BASE}/staff/")

        assert response.status_code == 200
        assert response.data[0]["availability"]["is_available_on_date"] is True

    def test_job_time_stats(self, api_client, job):
        """GET /jobs/{id}/time-stats/ aggregates the history."""
        JobTimeHistory.objects.create(job=job, estimated_minutes=30, actual_minutes=40, variance_minutes=10)

        response = api_client.get(f"{BASE}/jobs/{job.pk}/time-stats/")

        assert response.status_code == 200
        assert response.data["sample_size"] == 1
        assert response.data["avg_variance_minutes"] == Decimal("10.0")

    def test_unauthenticated_returns_401(self, db):
        """Unauthenticated request returns 401/403."""
        response = APIClient().get(f"{BASE}/board/")

        assert response.status_code in (401, 403)


# ═══════════════════════════════════════════════════════════════════
# Placement
# ═══════════════════════════════════════════════════════════════════


class TestPlacementAPI:
    def test_assign(self, assignment, staff):
        """POST assign/ drops the job on the lane."""
        assert assignment.staff == staff
        assert (assignment.start_minutes, assignment.end_minutes) == (480, 600)

    def test_assign_unknown_job(self, api_client, staff):
        """Unknown job keys are a 404."""
        response = api_client.post(
            f"{BASE}/assignments/assign/",
            {"job_key": "order-999:job-1", "staff": staff.pk, "date": "2026-03-02", "start_minutes": 480},
            format="json",
        )

        assert response.status_code == 404
        assert response.data["code"] == "MISSING_REFERENCE"

    def test_assign_conflict_is_409(self, api_client, job_key, staff):
        """A blocked drop returns 409 with the constraint status."""
        LaborAssignment.objects.create(
            job_key="order-99:job-1",
            staff=staff,
            assignment_date=WORK_DAY,
            start_minutes=540,
            end_minutes=600,
        )

        response = api_client.post(
            f"{BASE}/assignments/assign/",
            {"job_key": job_key, "staff": staff.pk, "date": "2026-03-02", "start_minutes": 480},
            format="json",
        )

        assert response.status_code == 409
        assert response.data["code"] == "SCHEDULE_CONFLICT"
        assert response.data["status"] == "overlap"

    def test_assign_missing_fields(self, api_client):
        response = api_client.post(f"{BASE}/assignments/assign/", {}, format="json")

        assert response.status_code == 400

    def test_move(self, api_client, assignment):
        """POST place/ moves the bar keeping its length."""
        response = api_client.post(
            f"{BASE}/assignments/{assignment.pk}/place/",
            {"kind": "assignment", "minutes": 720},
            format="json",
        )

        assert response.status_code == 200
        assert (response.data["start_minutes"], response.data["end_minutes"]) == (720, 840)

    def test_move_to_another_lane(self, api_client, assignment):
        other = StaffMember.objects.create(first_name="Sipho", last_name="Dlamini")

        response = api_client.post(
            f"{BASE}/assignments/{assignment.pk}/place/",
            {"minutes": 480, "staff": other.pk},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["staff"] == other.pk

    def test_resize_end(self, api_client, assignment):
        response = api_client.post(
            f"{BASE}/assignments/{assignment.pk}/place/",
            {"kind": "resize-end", "minutes": 652},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["end_minutes"] == 660

    def test_unassign(self, api_client, assignment):
        """POST unassign/ returns the job to the unscheduled list."""
        response = api_client.post(f"{BASE}/assignments/{assignment.pk}/unassign/")

        assert response.status_code == 200
        assert response.data["status"] == AssignmentStatus.UNSCHEDULED
        assert response.data["staff"] is None
        assert response.data["start_minutes"] is None

    def test_list_by_date(self, api_client, assignment):
        assert len(api_client.get(f"{BASE}/assignments/", {"date": "2026-03-02"}).data) == 1
        assert api_client.get(f"{BASE}/assignments/", {"date": "2026-03-03"}).data == []


# ═══════════════════════════════════════════════════════════════════
# Execution
# ═══════════════════════════════════════════════════════════════════


class TestExecutionAPI:
    def test_issue_partial(self, api_client, assignment, pool_item, staff):
        """POST issue/ hands out part of the pool."""
        response = api_client.post(
            f"{BASE}/assignments/{assignment.pk}/issue/",
            {"quantity": 3},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["issued"] == 3
        assert response.data["remaining"] == 1
        assert response.data["job_status"] == JobStatus.ISSUED
        assert response.data["job_card"]["staff"] == staff.pk

        available = api_client.get(f"{BASE}/assignments/{assignment.pk}/available/")
        assert available.data == {"available": 1}

    def test_issue_zero_quantity(self, api_client, assignment):
        response = api_client.post(
            f"{BASE}/assignments/{assignment.pk}/issue/",
            {"quantity": 0},
            format="json",
        )

        assert response.status_code == 400

    def test_unissue(self, api_client, assignment, pool_item):
        """POST unissue/ returns the quantity to the pool."""
        api_client.post(f"{BASE}/assignments/{assignment.pk}/issue/", {"quantity": 3}, format="json")

        response = api_client.post(f"{BASE}/assignments/{assignment.pk}/unissue/")

        assert response.status_code == 200
        assert response.data == {"returned": 3, "job_status": JobStatus.SCHEDULED}

    def test_unissue_not_issued(self, api_client, assignment):
        response = api_client.post(f"{BASE}/assignments/{assignment.pk}/unissue/")

        assert response.status_code == 400
        assert response.data["code"] == "NOT_ISSUED"

    def test_start_hold_resume(self, api_client, assignment):
        url = f"{BASE}/assignments/{assignment.pk}"

        assert api_client.post(f"{url}/start/").data["job_status"] == JobStatus.IN_PROGRESS
        held = api_client.post(f"{url}/hold/", {"reason": "No fabric"}, format="json")
        assert held.data["job_status"] == JobStatus.ON_HOLD
        assert api_client.post(f"{url}/resume/").data["job_status"] == JobStatus.IN_PROGRESS

    def test_invalid_transition(self, api_client, assignment):
        response = api_client.post(f"{BASE}/assignments/{assignment.pk}/resume/")

        assert response.status_code == 400
        assert response.data["code"] == "INVALID_STATUS"

    def test_complete(self, api_client, assignment):
        """POST complete/ records actual times."""
        response = api_client.post(
            f"{BASE}/assignments/{assignment.pk}/complete/",
            {"actual_start": "08:10", "actual_end": "10:25", "notes": "Done"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["job_status"] == JobStatus.COMPLETED
        assert response.data["actual_duration_minutes"] == 135
        assert response.data["variance_minutes"] == 15

    def test_complete_accepts_minutes(self, api_client, assignment):
        response = api_client.post(
            f"{BASE}/assignments/{assignment.pk}/complete/",
            {"actual_start": "480", "actual_end": "540"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["actual_duration_minutes"] == 60

    def test_complete_malformed_time(self, api_client, assignment):
        response = api_client.post(
            f"{BASE}/assignments/{assignment.pk}/complete/",
            {"actual_start": "eight", "actual_end": "09:00"},
            format="json",
        )

        assert response.status_code == 400
        assert "actual_start" in response.data

    def test_complete_end_before_start(self, api_client, assignment):
        response = api_client.post(
            f"{BASE}/assignments/{assignment.pk}/complete/",
            {"actual_start": "10:00", "actual_end": "09:00"},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["code"] == "INVALID_TIMES"


# ═══════════════════════════════════════════════════════════════════
# Job cards
# ═══════════════════════════════════════════════════════════════════


class TestJobCardAPI:
    def test_create_with_items(self, api_client, order, staff, job, product):
        """POST /job-cards/ creates the card and its items."""
        response = api_client.post(
            f"{BASE}/job-cards/",
            {
                "order": order.pk,
                "staff": staff.pk,
                "items": [{"job": job.pk, "product": product.pk, "quantity": 3}],
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.data["total_quantity"] == 3
        assert response.data["items"][0]["job_name"] == "Cover seat"

    def test_update_replaces_items(self, api_client, pool_item, job):
        card = pool_item.job_card

        response = api_client.patch(
            f"{BASE}/job-cards/{card.pk}/",
            {"items": [{"job": job.pk, "quantity": 7}]},
            format="json",
        )

        assert response.status_code == 200
        assert [item["quantity"] for item in response.data["items"]] == [7]
        assert not JobCardItem.objects.filter(pk=pool_item.pk).exists()

    def test_filter_by_staff(self, api_client, pool_item, staff, order):
        JobCard.objects.create(order=order, staff=staff)

        response = api_client.get(f"{BASE}/job-cards/", {"staff": staff.pk})

        assert len(response.data) == 1
        assert response.data[0]["staff_name"] == "Thandi Mokoena"
