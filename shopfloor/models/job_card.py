"""
JobCard and JobCardItem models.

A JobCard is a work order handed to one staff member (or, with no staff,
the unassigned pool of work still to be issued for an order).
Items carry the quantities that move between cards on issue/un-issue.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords


class JobCardStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    IN_PROGRESS = "in_progress", _("In progress")
    COMPLETED = "completed", _("Completed")
    CANCELLED = "cancelled", _("Cancelled")


class JobCardItemStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    IN_PROGRESS = "in_progress", _("In progress")
    COMPLETED = "completed", _("Completed")


class JobCard(models.Model):
    """Printed card listing the work a staff member has to do."""

    order = models.ForeignKey(
        "shopfloor.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="job_cards",
        verbose_name=_("Order"),
    )
    staff = models.ForeignKey(
        "shopfloor.StaffMember",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="job_cards",
        verbose_name=_("Staff member"),
        help_text=_("Empty for the order's unassigned pool card"),
    )
    issue_date = models.DateField(default=timezone.localdate, verbose_name=_("Issue date"))
    due_date = models.DateField(null=True, blank=True, verbose_name=_("Due date"))
    completion_date = models.DateField(null=True, blank=True, verbose_name=_("Completed on"))
    status = models.CharField(
        max_length=20,
        choices=JobCardStatus.choices,
        default=JobCardStatus.PENDING,
        db_index=True,
        verbose_name=_("Status"),
    )
    notes = models.TextField(blank=True, verbose_name=_("Notes"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Updated at"))

    history = HistoricalRecords()

    class Meta:
        db_table = "shopfloor_job_card"
        verbose_name = _("Job card")
        verbose_name_plural = _("Job cards")
        ordering = ["-issue_date", "-pk"]
        indexes = [
            models.Index(fields=["order", "staff"], name="shopfloor_card_order_staff_idx"),
        ]

    def __str__(self) -> str:
        owner = self.staff.name if self.staff_id else _("unassigned")
        return f"Job card #{self.pk} ({owner})"

    @property
    def is_unassigned(self) -> bool:
        return self.staff_id is None

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items.all())


class JobCardItem(models.Model):
    """Quantity of one job (for one product) on a card."""

    job_card = models.ForeignKey(
        JobCard,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name=_("Job card"),
    )
    product = models.ForeignKey(
        "shopfloor.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("Product"),
    )
    job = models.ForeignKey(
        "shopfloor.Job",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="card_items",
        verbose_name=_("Job"),
    )
    quantity = models.PositiveIntegerField(default=1, verbose_name=_("Quantity"))
    completed_quantity = models.PositiveIntegerField(default=0, verbose_name=_("Completed"))
    piece_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_("Piece rate"),
    )
    status = models.CharField(
        max_length=20,
        choices=JobCardItemStatus.choices,
        default=JobCardItemStatus.PENDING,
        verbose_name=_("Status"),
    )
    start_time = models.DateTimeField(null=True, blank=True, verbose_name=_("Started at"))
    completion_time = models.DateTimeField(null=True, blank=True, verbose_name=_("Completed at"))
    notes = models.TextField(blank=True, verbose_name=_("Notes"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Updated at"))

    class Meta:
        db_table = "shopfloor_job_card_item"
        verbose_name = _("Job card item")
        verbose_name_plural = _("Job card items")
        indexes = [
            models.Index(fields=["job", "status"], name="shopfloor_item_job_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.quantity} × {self.job or self.product}"

    @property
    def earnings(self):
        """Piecework pay for the completed quantity."""
        if self.piece_rate is None:
            return None
        return self.piece_rate * self.completed_quantity
