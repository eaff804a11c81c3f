"""
Tests for shopfloor signal handlers.
"""

from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from shopfloor.models import (
    BillOfLabour,
    Job,
    JobTimeHistory,
    LaborAssignment,
    Order,
    OrderDetail,
    Product,
    StaffMember,
)
from shopfloor.signals import job_completed

WORK_DAY = date(2026, 3, 2)


@pytest.fixture
def assignment(db):
    job = Job.objects.create(name="Frame assembly")
    product = Product.objects.create(code="sofa", name="Sofa")
    bol = BillOfLabour.objects.create(product=product, job=job, time_required=Decimal("1"), time_unit="hours")
    order = Order.objects.create(order_number="SO-7")
    detail = OrderDetail.objects.create(order=order, product=product, quantity=1)
    staff = StaffMember.objects.create(first_name="Lerato")
    return LaborAssignment.objects.create(
        job_key="order-7:job-1",
        order=order,
        order_detail=detail,
        bol=bol,
        job=job,
        staff=staff,
        assignment_date=WORK_DAY,
        start_minutes=480,
        end_minutes=540,
    )


class TestRecordJobTime:
    def test_completion_records_history(self, assignment):
        assignment.complete(480, 555)

        record = JobTimeHistory.objects.get(assignment=assignment)
        assert record.job_id == assignment.job_id
        assert record.product == assignment.product
        assert record.staff_id == assignment.staff_id
        assert record.order_id == assignment.order_id
        assert record.estimated_minutes == 60
        assert record.actual_minutes == 75
        assert record.variance_minutes == 15
        assert record.assignment_date == WORK_DAY
        assert record.pay_type == "hourly"

    def test_without_bol_variance_is_zero(self, assignment):
        assignment.bol = None
        assignment.save()

        assignment.complete(480, 530)

        record = JobTimeHistory.objects.get(assignment=assignment)
        assert record.estimated_minutes is None
        assert record.variance_minutes == 0

    def test_records_the_completing_user(self, assignment):
        user = get_user_model().objects.create_user(username="supervisor")

        assignment.complete(480, 540, user=user)

        assert JobTimeHistory.objects.get(assignment=assignment).created_by == user

    def test_signal_without_actuals_is_ignored(self, assignment):
        job_completed.send(sender=LaborAssignment, assignment=assignment, user=None)

        assert not JobTimeHistory.objects.exists()
