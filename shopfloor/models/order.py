"""
Order and OrderDetail models.

Open orders feed the labor planning board: every order line expands into
the jobs of its product's bill of labour.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class OrderStatus(models.TextChoices):
    NEW = "new", _("New")
    IN_PRODUCTION = "in_production", _("In production")
    COMPLETED = "completed", _("Completed")
    DELIVERED = "delivered", _("Delivered")
    CLOSED = "closed", _("Closed")
    CANCELLED = "cancelled", _("Cancelled")


class Order(models.Model):
    """Customer sales order."""

    order_number = models.CharField(
        max_length=50,
        blank=True,
        verbose_name=_("Order number"),
    )
    customer_name = models.CharField(max_length=200, blank=True, verbose_name=_("Customer"))
    order_date = models.DateField(null=True, blank=True, verbose_name=_("Order date"))
    delivery_date = models.DateField(
        null=True,
        blank=True,
        db_index=True,
        verbose_name=_("Delivery date"),
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
        verbose_name=_("Status"),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created at"))

    class Meta:
        db_table = "shopfloor_order"
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        ordering = ["delivery_date", "pk"]

    def __str__(self) -> str:
        return self.display_number

    @property
    def display_number(self) -> str:
        return self.order_number or f"SO-{self.pk}"

    @property
    def due_date(self):
        return self.delivery_date or self.order_date


class OrderDetail(models.Model):
    """One product line of an order."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="details",
        verbose_name=_("Order"),
    )
    product = models.ForeignKey(
        "shopfloor.Product",
        on_delete=models.PROTECT,
        related_name="order_details",
        verbose_name=_("Product"),
    )
    quantity = models.PositiveIntegerField(default=1, verbose_name=_("Quantity"))

    class Meta:
        db_table = "shopfloor_order_detail"
        verbose_name = _("Order line")
        verbose_name_plural = _("Order lines")

    def __str__(self) -> str:
        return f"{self.order}: {self.quantity} × {self.product}"
