"""
Job card transfers -- issue and un-issue.

Work still to be handed out for an order sits on the order's unassigned
"pool" card (staff is null). Issuing moves quantity from the pool onto a
new card for the staff member, splitting the pool item when only part of
it is issued. Un-issuing sends it back.
"""

import logging

from django.db import transaction
from django.db.models import Sum

from shopfloor.exceptions import ShopfloorError
from shopfloor.models import (
    JobCard,
    JobCardItem,
    JobCardItemStatus,
    JobCardStatus,
    JobStatus,
    LaborAssignment,
    PayType,
)
from shopfloor.results import IssueResult
from shopfloor.scheduling import minutes_to_clock
from shopfloor.signals import job_card_issued, job_card_unissued

logger = logging.getLogger(__name__)


def pool_items(order, job):
    """Open items for (order, job) on the order's unassigned cards."""
    return (
        JobCardItem.objects.filter(
            job_card__order=order,
            job_card__staff__isnull=True,
            job=job,
        )
        .exclude(job_card__status=JobCardStatus.CANCELLED)
        .exclude(status=JobCardItemStatus.COMPLETED)
    )


def available_quantity(order, job) -> int | None:
    """Quantity still waiting to be issued, or None when nothing is left."""
    total = pool_items(order, job).aggregate(total=Sum("quantity"))["total"]
    return total or None


def resolve_references(assignment: LaborAssignment):
    """(product, job) of an assignment, preferring its BOL line."""
    product = assignment.product
    job = assignment.job
    if assignment.bol_id:
        product = product or assignment.bol.product
        job = assignment.bol.job or job
    return product, job


def _piece_rate(assignment: LaborAssignment):
    if assignment.pay_type == PayType.PIECE and assignment.piece_rate_id:
        return assignment.piece_rate.rate
    return None


def _schedule_note(assignment: LaborAssignment) -> str:
    if assignment.start_minutes is None or assignment.end_minutes is None:
        return ""
    return (
        f"Scheduled: {minutes_to_clock(assignment.start_minutes)} - "
        f"{minutes_to_clock(assignment.end_minutes)}"
    )


def issue_job_card(assignment: LaborAssignment, staff=None, quantity=None, user=None) -> IssueResult:
    """
    Issue a job card for an assignment to a staff member.

    Args:
        assignment: Placed assignment
        staff: Staff member receiving the card (default: the lane's staff)
        quantity: Units to issue (default: everything waiting in the pool,
            or BOL quantity × order quantity when the pool is empty)

    Returns:
        IssueResult with the new card, its item and the issued/remaining
        quantities.

    Raises:
        ShopfloorError: INVALID_QUANTITY, INVALID_STATUS, MISSING_REFERENCE,
            ALREADY_ISSUED
    """
    staff = staff or assignment.staff
    if staff is None:
        raise ShopfloorError("MISSING_REFERENCE", job_key=assignment.job_key, field="staff")
    if quantity is not None and quantity <= 0:
        raise ShopfloorError("INVALID_QUANTITY", quantity=quantity)
    if assignment.job_status == JobStatus.COMPLETED:
        raise ShopfloorError(
            "INVALID_STATUS",
            job_key=assignment.job_key,
            current=assignment.job_status,
        )

    product, job = resolve_references(assignment)
    order = assignment.order
    piece_rate = _piece_rate(assignment)

    with transaction.atomic():
        source = None
        if order is not None and job is not None:
            source = (
                pool_items(order, job)
                .select_for_update()
                .select_related("job_card")
                .order_by("-quantity", "pk")
                .first()
            )
            if source is None:
                issued_elsewhere = JobCardItem.objects.filter(
                    job_card__order=order,
                    job_card__staff__isnull=False,
                    job=job,
                ).exists()
                if issued_elsewhere:
                    raise ShopfloorError(
                        "ALREADY_ISSUED",
                        job_key=assignment.job_key,
                        order_id=order.pk,
                        job_id=job.pk,
                    )

        if source is None and job is None and product is None:
            raise ShopfloorError("MISSING_REFERENCE", job_key=assignment.job_key, field="job")

        if quantity is not None:
            requested = quantity
        elif source is not None:
            requested = available_quantity(order, job)
        else:
            requested = assignment.quantity

        card = JobCard.objects.create(
            order=order,
            staff=staff,
            issue_date=assignment.assignment_date,
            due_date=order.due_date if order else None,
            status=JobCardStatus.PENDING,
            notes=_schedule_note(assignment),
        )

        if source is not None:
            remaining = source.quantity - requested
            if remaining > 0:
                source.quantity = remaining
                source.save(update_fields=["quantity", "updated_at"])
                item = JobCardItem.objects.create(
                    job_card=card,
                    product_id=source.product_id or (product.pk if product else None),
                    job=job,
                    quantity=requested,
                    piece_rate=source.piece_rate if source.piece_rate is not None else piece_rate,
                )
                issued = requested
            else:
                source_card = source.job_card
                issued = source.quantity
                remaining = 0
                source.job_card = card
                source.save(update_fields=["job_card", "updated_at"])
                item = source
                if not source_card.items.exists():
                    source_card.delete()
        else:
            remaining = 0
            issued = requested
            item = JobCardItem.objects.create(
                job_card=card,
                product=product,
                job=job,
                quantity=issued,
                piece_rate=piece_rate,
            )

        assignment.mark_issued(user)

    logger.info(
        f"Job card #{card.pk} issued to {staff.name}"
        + (f" ({issued} issued, {remaining} remaining)" if remaining > 0 else ""),
        extra={
            "event": "issued",
            "job_key": assignment.job_key,
            "staff_id": staff.pk,
            "date": str(assignment.assignment_date),
            "quantity": issued,
        },
    )

    result = IssueResult(card=card, item=item, issued=issued, remaining=remaining, assignment=assignment)
    job_card_issued.send(sender=JobCard, result=result, user=user)
    return result


def unissue_job_card(assignment: LaborAssignment, staff=None, user=None) -> int:
    """
    Take an issued job card back and return its quantity to the pool.

    Returns:
        Units returned to the order's pool.

    Raises:
        ShopfloorError: NOT_ISSUED if the assignment was never issued
    """
    if assignment.job_status != JobStatus.ISSUED:
        raise ShopfloorError(
            "NOT_ISSUED",
            job_key=assignment.job_key,
            current=assignment.job_status,
        )

    staff = staff or assignment.staff
    _, job = resolve_references(assignment)
    order = assignment.order
    returned = 0

    with transaction.atomic():
        if order is not None and job is not None and staff is not None:
            staff_cards = list(JobCard.objects.filter(order=order, staff=staff))
            issued_items = JobCardItem.objects.select_for_update().filter(
                job_card__in=staff_cards,
                job=job,
            )

            for item in issued_items:
                returned += item.quantity
                target = pool_items(order, job).select_for_update().order_by("pk").first()
                if target is not None:
                    target.quantity += item.quantity
                    target.save(update_fields=["quantity", "updated_at"])
                    item.delete()
                else:
                    item.job_card = _get_or_create_pool_card(order)
                    item.save(update_fields=["job_card", "updated_at"])

            for card in staff_cards:
                if not card.items.exists():
                    card.delete()

        assignment.mark_unissued(user)

    logger.info(
        f"Job card for {assignment.job_key} un-issued, {returned} returned",
        extra={
            "event": "unissued",
            "job_key": assignment.job_key,
            "staff_id": staff.pk if staff else None,
            "date": str(assignment.assignment_date),
            "quantity": returned,
        },
    )
    job_card_unissued.send(sender=JobCard, assignment=assignment, returned=returned, user=user)
    return returned


def _get_or_create_pool_card(order) -> JobCard:
    card = (
        JobCard.objects.filter(order=order, staff__isnull=True)
        .exclude(status=JobCardStatus.CANCELLED)
        .order_by("pk")
        .first()
    )
    if card is None:
        card = JobCard.objects.create(order=order, staff=None, status=JobCardStatus.PENDING)
    return card
