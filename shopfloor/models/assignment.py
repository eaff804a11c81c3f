"""
LaborAssignment model.

LaborAssignment = one job instance placed on a staff lane for a day.

Lifecycle (job_status):
    SCHEDULED → ISSUED → IN_PROGRESS → COMPLETED
                   ↘       ↕
                    ON_HOLD

The schedule itself (status SCHEDULED/UNSCHEDULED, start/end minutes)
is independent from the job lifecycle: unassigning a job keeps the row
so it can be dropped again later.
"""

import logging

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

from shopfloor.models.catalog import PayType
from shopfloor.scheduling import build_assignment_label

logger = logging.getLogger(__name__)


class AssignmentStatus(models.TextChoices):
    SCHEDULED = "scheduled", _("Scheduled")
    UNSCHEDULED = "unscheduled", _("Unscheduled")


class JobStatus(models.TextChoices):
    SCHEDULED = "scheduled", _("Scheduled")
    ISSUED = "issued", _("Issued")
    IN_PROGRESS = "in_progress", _("In progress")
    COMPLETED = "completed", _("Completed")
    ON_HOLD = "on_hold", _("On hold")


class LaborAssignment(models.Model):
    """
    Job placed on a staff lane.

    Times are minutes from midnight on assignment_date, like the board's
    time axis. actual_* fields are filled on completion.
    """

    job_key = models.CharField(
        max_length=255,
        verbose_name=_("Job instance"),
        help_text=_("e.g. 'order-12:detail-40:bol-7:job-3'"),
    )
    order = models.ForeignKey(
        "shopfloor.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assignments",
        verbose_name=_("Order"),
    )
    order_detail = models.ForeignKey(
        "shopfloor.OrderDetail",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assignments",
        verbose_name=_("Order line"),
    )
    bol = models.ForeignKey(
        "shopfloor.BillOfLabour",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assignments",
        verbose_name=_("BOL line"),
    )
    job = models.ForeignKey(
        "shopfloor.Job",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assignments",
        verbose_name=_("Job"),
    )
    staff = models.ForeignKey(
        "shopfloor.StaffMember",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assignments",
        verbose_name=_("Staff member"),
    )

    # Schedule
    assignment_date = models.DateField(db_index=True, verbose_name=_("Date"))
    start_minutes = models.IntegerField(null=True, blank=True, verbose_name=_("Start"))
    end_minutes = models.IntegerField(null=True, blank=True, verbose_name=_("End"))
    status = models.CharField(
        max_length=20,
        choices=AssignmentStatus.choices,
        default=AssignmentStatus.SCHEDULED,
        verbose_name=_("Schedule status"),
    )

    # Pay
    pay_type = models.CharField(
        max_length=10,
        choices=PayType.choices,
        default=PayType.HOURLY,
        verbose_name=_("Pay type"),
    )
    hourly_rate = models.ForeignKey(
        "shopfloor.HourlyRate",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("Hourly rate"),
    )
    piece_rate = models.ForeignKey(
        "shopfloor.PieceWorkRate",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("Piecework rate"),
    )

    # Job lifecycle
    job_status = models.CharField(
        max_length=20,
        choices=JobStatus.choices,
        default=JobStatus.SCHEDULED,
        db_index=True,
        verbose_name=_("Job status"),
    )
    issued_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Issued at"))
    started_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Started at"))
    completed_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Completed at"))
    actual_start_minutes = models.IntegerField(null=True, blank=True, verbose_name=_("Actual start"))
    actual_end_minutes = models.IntegerField(null=True, blank=True, verbose_name=_("Actual end"))
    actual_duration_minutes = models.IntegerField(
        null=True,
        blank=True,
        verbose_name=_("Actual duration"),
    )
    completion_notes = models.TextField(blank=True, verbose_name=_("Completion notes"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Updated at"))

    history = HistoricalRecords()

    class Meta:
        db_table = "shopfloor_labor_assignment"
        verbose_name = _("Labor assignment")
        verbose_name_plural = _("Labor assignments")
        ordering = ["assignment_date", "start_minutes"]
        constraints = [
            models.UniqueConstraint(
                fields=["job_key", "assignment_date"],
                name="shopfloor_assignment_job_date_uniq",
            ),
        ]
        indexes = [
            models.Index(fields=["assignment_date", "job_status"], name="shopfloor_asg_date_status_idx"),
            models.Index(fields=["staff", "assignment_date"], name="shopfloor_asg_staff_date_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.job_key} @ {self.assignment_date}"

    # ══════════════════════════════════════════════════════════════
    # JOB LIFECYCLE
    # ══════════════════════════════════════════════════════════════

    def mark_issued(self, user=None):
        """Job card printed and handed to the staff member."""
        if self.job_status == JobStatus.COMPLETED:
            raise ValidationError(_("A completed job cannot be issued again"))

        self.job_status = JobStatus.ISSUED
        self.issued_at = timezone.now()
        self.save(update_fields=["job_status", "issued_at", "updated_at"])

        logger.info(
            f"Assignment {self.pk}: job card issued",
            extra={
                "job_key": self.job_key,
                "staff_id": self.staff_id,
                "user": user.username if user else None,
            },
        )

    def mark_unissued(self, user=None):
        """Job card taken back; the bar stays on the lane."""
        if self.job_status != JobStatus.ISSUED:
            raise ValidationError(_("Only issued jobs can be un-issued"))

        self.job_status = JobStatus.SCHEDULED
        self.issued_at = None
        self.save(update_fields=["job_status", "issued_at", "updated_at"])

        logger.info(
            f"Assignment {self.pk}: job card un-issued",
            extra={"job_key": self.job_key, "staff_id": self.staff_id},
        )

    def start(self, user=None):
        """Worker started the job."""
        if self.job_status not in (JobStatus.SCHEDULED, JobStatus.ISSUED):
            raise ValidationError(
                _(f"Cannot start a job with status {self.job_status}")
            )

        self.job_status = JobStatus.IN_PROGRESS
        self.started_at = timezone.now()
        self.save(update_fields=["job_status", "started_at", "updated_at"])
        logger.info(f"Assignment {self.pk} started")

    def hold(self, reason: str = "", user=None):
        """Put an issued or running job on hold."""
        if self.job_status not in (JobStatus.ISSUED, JobStatus.IN_PROGRESS):
            raise ValidationError(_("Only issued or running jobs can be put on hold"))

        self.job_status = JobStatus.ON_HOLD
        self.save(update_fields=["job_status", "updated_at"])
        logger.info(f"Assignment {self.pk} on hold: {reason}")

    def resume(self, user=None):
        """Take a job off hold."""
        if self.job_status != JobStatus.ON_HOLD:
            raise ValidationError(_("Only jobs on hold can be resumed"))

        self.job_status = JobStatus.IN_PROGRESS
        if self.started_at is None:
            self.started_at = timezone.now()
        self.save(update_fields=["job_status", "started_at", "updated_at"])
        logger.info(f"Assignment {self.pk} resumed")

    def complete(
        self,
        actual_start_minutes: int,
        actual_end_minutes: int,
        notes: str = "",
        user=None,
    ):
        """
        Record the actual times and close the job.

        Behavior:
            - Marks as 'completed' with actual start/end/duration
            - Emits signal 'job_completed' (time history is recorded there)
        """
        if self.job_status == JobStatus.COMPLETED:
            logger.warning(f"Assignment {self.pk} already completed")
            return

        duration = actual_end_minutes - actual_start_minutes
        if duration <= 0:
            raise ValidationError(_("Actual end must be after actual start"))

        self.job_status = JobStatus.COMPLETED
        self.completed_at = timezone.now()
        self.actual_start_minutes = actual_start_minutes
        self.actual_end_minutes = actual_end_minutes
        self.actual_duration_minutes = duration
        self.completion_notes = notes or ""

        self.save(
            update_fields=[
                "job_status",
                "completed_at",
                "actual_start_minutes",
                "actual_end_minutes",
                "actual_duration_minutes",
                "completion_notes",
                "updated_at",
            ]
        )

        logger.info(
            f"Assignment {self.pk} completed in {duration} minutes",
            extra={
                "event": "completed",
                "job_key": self.job_key,
                "staff_id": self.staff_id,
                "actual_minutes": duration,
                "scheduled_minutes": self.duration_minutes,
            },
        )

        from shopfloor.signals import job_completed

        job_completed.send(sender=self.__class__, assignment=self, user=user)

    # ══════════════════════════════════════════════════════════════
    # PROPERTIES
    # ══════════════════════════════════════════════════════════════

    @property
    def is_scheduled(self) -> bool:
        return (
            self.status == AssignmentStatus.SCHEDULED
            and self.staff_id is not None
            and self.start_minutes is not None
            and self.end_minutes is not None
        )

    @property
    def duration_minutes(self) -> int | None:
        """Scheduled bar length."""
        if self.start_minutes is None or self.end_minutes is None:
            return None
        return self.end_minutes - self.start_minutes

    @property
    def variance_minutes(self) -> int | None:
        """Actual minus scheduled (positive = took longer)."""
        if self.actual_duration_minutes is None or self.duration_minutes is None:
            return None
        return self.actual_duration_minutes - self.duration_minutes

    @property
    def minutes_elapsed(self) -> int | None:
        """Minutes since the job went out (issued) or started (in progress)."""
        if self.job_status == JobStatus.ISSUED and self.issued_at:
            since = self.issued_at
        elif self.job_status == JobStatus.IN_PROGRESS and self.started_at:
            since = self.started_at
        else:
            return None
        return int((timezone.now() - since).total_seconds() // 60)

    @property
    def product(self):
        if self.order_detail_id:
            return self.order_detail.product
        if self.bol_id:
            return self.bol.product
        return None

    @property
    def quantity(self) -> int:
        """Units of work: BOL quantity times the ordered quantity."""
        bol_qty = self.bol.quantity if self.bol_id else 1
        order_qty = self.order_detail.quantity if self.order_detail_id else 1
        return bol_qty * order_qty

    @property
    def label(self) -> str:
        product = self.product
        category = self.job.category if self.job_id else None
        return build_assignment_label(
            order_number=self.order.display_number if self.order_id else None,
            job_name=self.job.name if self.job_id else None,
            product_name=product.name if product else None,
            category_name=category.name if category else None,
            quantity=self.quantity,
            pay_type=self.pay_type,
        )
