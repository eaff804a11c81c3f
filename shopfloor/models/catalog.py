"""
Catalog models: jobs, products, bill of materials and bill of labour.

BillOfMaterials = components needed to make a product.
BillOfLabour = jobs (and their time) needed to make a product.
"""

from datetime import date
from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _

from shopfloor.scheduling import convert_to_minutes


class TimeUnit(models.TextChoices):
    HOURS = "hours", _("Hours")
    MINUTES = "minutes", _("Minutes")
    SECONDS = "seconds", _("Seconds")


class PayType(models.TextChoices):
    HOURLY = "hourly", _("Hourly")
    PIECE = "piece", _("Piecework")


class JobCategory(models.Model):
    """Grouping of jobs (Cutting, Sewing, Assembly...)."""

    name = models.CharField(max_length=100, unique=True, verbose_name=_("Name"))
    sort_order = models.PositiveIntegerField(default=0, verbose_name=_("Order"))

    class Meta:
        db_table = "shopfloor_job_category"
        verbose_name = _("Job category")
        verbose_name_plural = _("Job categories")
        ordering = ["sort_order", "name"]

    def __str__(self) -> str:
        return self.name


class Job(models.Model):
    """A kind of work that can be done on the floor."""

    name = models.CharField(max_length=150, verbose_name=_("Name"))
    category = models.ForeignKey(
        JobCategory,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="jobs",
        verbose_name=_("Category"),
    )
    estimated_minutes = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_("Estimated time"),
        help_text=_("Per unit, expressed in the time unit below"),
    )
    time_unit = models.CharField(
        max_length=10,
        choices=TimeUnit.choices,
        default=TimeUnit.MINUTES,
        verbose_name=_("Time unit"),
    )
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))

    class Meta:
        db_table = "shopfloor_job"
        verbose_name = _("Job")
        verbose_name_plural = _("Jobs")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    @property
    def minutes_per_unit(self) -> float | None:
        return convert_to_minutes(self.estimated_minutes, self.time_unit)


class HourlyRate(models.Model):
    """Hourly pay rate, optionally bound to a job."""

    job = models.ForeignKey(
        Job,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="hourly_rates",
        verbose_name=_("Job"),
    )
    name = models.CharField(max_length=100, blank=True, verbose_name=_("Name"))
    rate = models.DecimalField(max_digits=10, decimal_places=2, verbose_name=_("Rate"))

    class Meta:
        db_table = "shopfloor_hourly_rate"
        verbose_name = _("Hourly rate")
        verbose_name_plural = _("Hourly rates")

    def __str__(self) -> str:
        return f"{self.name or self.job} @ {self.rate}/h"


class Product(models.Model):
    """Something the factory makes (or buys as a component)."""

    code = models.SlugField(max_length=50, unique=True, verbose_name=_("Code"))
    name = models.CharField(max_length=200, verbose_name=_("Name"))
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))

    class Meta:
        db_table = "shopfloor_product"
        verbose_name = _("Product")
        verbose_name_plural = _("Products")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    def component_requirements(self, quantity) -> list[dict]:
        """
        Components needed to make `quantity` units.

        Returns:
            [{"product": <Product>, "quantity": Decimal("6.000"), "unit": "m"}, ...]
        """
        quantity = Decimal(str(quantity))
        return [
            {
                "product": line.component,
                "quantity": line.quantity * quantity,
                "unit": line.unit,
            }
            for line in self.bom_items.select_related("component")
        ]


class BillOfMaterials(models.Model):
    """One component line of a product's BOM."""

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="bom_items",
        verbose_name=_("Product"),
    )
    component = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="used_in",
        verbose_name=_("Component"),
    )
    quantity = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        default=Decimal("1"),
        verbose_name=_("Quantity"),
    )
    unit = models.CharField(max_length=20, default="un", verbose_name=_("Unit"))

    class Meta:
        db_table = "shopfloor_bom"
        verbose_name = _("BOM line")
        verbose_name_plural = _("Bill of materials")
        constraints = [
            models.UniqueConstraint(
                fields=["product", "component"], name="shopfloor_bom_product_component_uniq"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product} ← {self.quantity} {self.unit} {self.component}"


class PieceWorkRate(models.Model):
    """Rate paid per piece for a job (optionally per product)."""

    job = models.ForeignKey(
        Job,
        on_delete=models.CASCADE,
        related_name="piece_rates",
        verbose_name=_("Job"),
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="piece_rates",
        verbose_name=_("Product"),
    )
    rate = models.DecimalField(max_digits=10, decimal_places=2, verbose_name=_("Rate"))
    effective_date = models.DateField(default=date.today, verbose_name=_("Effective from"))
    end_date = models.DateField(
        null=True,
        blank=True,
        verbose_name=_("Until"),
        help_text=_("Empty means currently active"),
    )

    class Meta:
        db_table = "shopfloor_piece_rate"
        verbose_name = _("Piecework rate")
        verbose_name_plural = _("Piecework rates")
        constraints = [
            models.UniqueConstraint(
                fields=["job", "product", "effective_date"],
                name="shopfloor_piece_rate_job_product_date_uniq",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.job} @ {self.rate}/pc"


class BillOfLabour(models.Model):
    """One job line of a product's BOL."""

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="bol_items",
        verbose_name=_("Product"),
    )
    job = models.ForeignKey(
        Job,
        on_delete=models.PROTECT,
        related_name="bol_items",
        verbose_name=_("Job"),
    )
    time_required = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_("Time required"),
        help_text=_("Per unit of the job"),
    )
    time_unit = models.CharField(
        max_length=10,
        choices=TimeUnit.choices,
        default=TimeUnit.HOURS,
        verbose_name=_("Time unit"),
    )
    quantity = models.PositiveIntegerField(default=1, verbose_name=_("Quantity"))
    pay_type = models.CharField(
        max_length=10,
        choices=PayType.choices,
        default=PayType.HOURLY,
        verbose_name=_("Pay type"),
    )
    hourly_rate = models.ForeignKey(
        HourlyRate,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("Hourly rate"),
    )
    piece_rate = models.ForeignKey(
        PieceWorkRate,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("Piecework rate"),
    )

    class Meta:
        db_table = "shopfloor_bol"
        verbose_name = _("BOL line")
        verbose_name_plural = _("Bill of labour")

    def __str__(self) -> str:
        return f"{self.product}: {self.job}"

    @property
    def minutes_per_unit(self) -> float | None:
        return convert_to_minutes(self.time_required, self.time_unit)

    @property
    def estimated_minutes(self) -> int | None:
        """Whole minutes for one unit, as recorded in time history."""
        minutes = self.minutes_per_unit
        if minutes is None:
            return None
        return round(minutes)
