"""
StaffMember model.

A staff member is one lane on the labor planning board.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class StaffMember(models.Model):
    """
    Person who can receive job assignments and job cards.

    A lane accepts drops only when the member is active and current.
    """

    first_name = models.CharField(max_length=100, verbose_name=_("First name"))
    last_name = models.CharField(max_length=100, blank=True, verbose_name=_("Last name"))
    role = models.CharField(
        max_length=100,
        blank=True,
        verbose_name=_("Role"),
        help_text=_("Job description, e.g. 'Upholsterer'"),
    )
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))
    is_current = models.BooleanField(
        default=True,
        verbose_name=_("Current staff"),
        help_text=_("Unset for people who left but keep their history"),
    )
    weekly_hours = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_("Weekly hours"),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created at"))

    class Meta:
        db_table = "shopfloor_staff"
        verbose_name = _("Staff member")
        verbose_name_plural = _("Staff")
        ordering = ["last_name", "first_name"]

    def __str__(self) -> str:
        return self.name

    @property
    def name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part).strip()

    @property
    def is_available(self) -> bool:
        """Can be scheduled at all (active and still employed)."""
        return self.is_active and self.is_current


class TimeDailySummary(models.Model):
    """Clocked time of one staff member on one day."""

    staff = models.ForeignKey(
        StaffMember,
        on_delete=models.CASCADE,
        related_name="daily_summaries",
        verbose_name=_("Staff member"),
    )
    date_worked = models.DateField(db_index=True, verbose_name=_("Date"))
    total_minutes = models.PositiveIntegerField(default=0, verbose_name=_("Minutes worked"))

    class Meta:
        db_table = "shopfloor_time_daily_summary"
        verbose_name = _("Daily time summary")
        verbose_name_plural = _("Daily time summaries")
        constraints = [
            models.UniqueConstraint(
                fields=["staff", "date_worked"], name="shopfloor_daily_summary_staff_date_uniq"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.staff} {self.date_worked}: {self.total_minutes} min"
