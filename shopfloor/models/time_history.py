"""
JobTimeHistory model.

One row per completed assignment; averages feed future estimates.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.db import models
from django.db.models import Avg, Count, Max, Min
from django.utils.translation import gettext_lazy as _

from shopfloor.models.catalog import PayType

logger = logging.getLogger(__name__)


class JobTimeHistory(models.Model):
    """Estimated vs actual minutes of a finished job."""

    job = models.ForeignKey(
        "shopfloor.Job",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="time_history",
        verbose_name=_("Job"),
    )
    product = models.ForeignKey(
        "shopfloor.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("Product"),
    )
    assignment = models.ForeignKey(
        "shopfloor.LaborAssignment",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="time_history",
        verbose_name=_("Assignment"),
    )
    staff = models.ForeignKey(
        "shopfloor.StaffMember",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("Staff member"),
    )
    order = models.ForeignKey(
        "shopfloor.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("Order"),
    )

    estimated_minutes = models.IntegerField(null=True, blank=True, verbose_name=_("Estimated"))
    actual_minutes = models.IntegerField(verbose_name=_("Actual"))
    variance_minutes = models.IntegerField(
        verbose_name=_("Variance"),
        help_text=_("Actual minus estimated (positive = took longer)"),
    )
    assignment_date = models.DateField(null=True, blank=True, verbose_name=_("Date"))
    pay_type = models.CharField(
        max_length=10,
        choices=PayType.choices,
        blank=True,
        verbose_name=_("Pay type"),
    )

    recorded_at = models.DateTimeField(auto_now_add=True, db_index=True, verbose_name=_("Recorded at"))
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("Recorded by"),
    )

    class Meta:
        db_table = "shopfloor_job_time_history"
        verbose_name = _("Job time record")
        verbose_name_plural = _("Job time history")
        ordering = ["-recorded_at"]
        indexes = [
            models.Index(fields=["job", "product"], name="shopfloor_history_job_prod_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.job}: {self.actual_minutes} min"

    @classmethod
    def record_for(cls, assignment, user=None) -> "JobTimeHistory | None":
        """Create the history row of a completed assignment."""
        if assignment.actual_duration_minutes is None:
            return None

        estimated = assignment.bol.estimated_minutes if assignment.bol_id else None
        actual = assignment.actual_duration_minutes
        variance = actual - (estimated if estimated is not None else actual)

        record = cls.objects.create(
            job_id=assignment.job_id,
            product=assignment.product,
            assignment=assignment,
            staff_id=assignment.staff_id,
            order_id=assignment.order_id,
            estimated_minutes=estimated,
            actual_minutes=actual,
            variance_minutes=variance,
            assignment_date=assignment.assignment_date,
            pay_type=assignment.pay_type,
            created_by=user if user is not None and user.is_authenticated else None,
        )
        logger.info(
            f"Time history recorded for assignment {assignment.pk}",
            extra={"job_id": assignment.job_id, "actual": actual, "variance": variance},
        )
        return record

    @classmethod
    def stats(cls, job, product=None) -> dict:
        """
        Time statistics for a job, optionally for one product.

        Returns:
            {
                'avg_actual_minutes': Decimal('52.5'),
                'avg_estimated_minutes': Decimal('45.0'),
                'avg_variance_minutes': Decimal('7.5'),
                'min_actual_minutes': 40,
                'max_actual_minutes': 65,
                'sample_size': 2,
                'last_recorded_at': datetime(...),
            }
        """
        qs = cls.objects.filter(job=job)
        if product is not None:
            qs = qs.filter(product=product)

        agg = qs.aggregate(
            avg_actual=Avg("actual_minutes"),
            avg_estimated=Avg("estimated_minutes"),
            avg_variance=Avg("variance_minutes"),
            min_actual=Min("actual_minutes"),
            max_actual=Max("actual_minutes"),
            sample_size=Count("pk"),
            last_recorded_at=Max("recorded_at"),
        )

        return {
            "avg_actual_minutes": _one_decimal(agg["avg_actual"]),
            "avg_estimated_minutes": _one_decimal(agg["avg_estimated"]),
            "avg_variance_minutes": _one_decimal(agg["avg_variance"]),
            "min_actual_minutes": agg["min_actual"],
            "max_actual_minutes": agg["max_actual"],
            "sample_size": agg["sample_size"],
            "last_recorded_at": agg["last_recorded_at"],
        }


def _one_decimal(value) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
