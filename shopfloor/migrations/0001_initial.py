# Generated manually: initial shopfloor schema

import datetime
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
import simple_history.models
from django.conf import settings
from django.db import migrations, models

TIME_UNITS = [("hours", "Hours"), ("minutes", "Minutes"), ("seconds", "Seconds")]
PAY_TYPES = [("hourly", "Hourly"), ("piece", "Piecework")]
JOB_CARD_STATUSES = [
    ("pending", "Pending"),
    ("in_progress", "In progress"),
    ("completed", "Completed"),
    ("cancelled", "Cancelled"),
]
ASSIGNMENT_STATUSES = [("scheduled", "Scheduled"), ("unscheduled", "Unscheduled")]
JOB_STATUSES = [
    ("scheduled", "Scheduled"),
    ("issued", "Issued"),
    ("in_progress", "In progress"),
    ("completed", "Completed"),
    ("on_hold", "On hold"),
]
HISTORY_TYPES = [("+", "Created"), ("~", "Changed"), ("-", "Deleted")]


def _id():
    return models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")


def _history_id():
    return models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")


def _history_fk(to, verbose_name):
    return models.ForeignKey(
        blank=True,
        db_constraint=False,
        null=True,
        on_delete=django.db.models.deletion.DO_NOTHING,
        related_name="+",
        to=to,
        verbose_name=verbose_name,
    )


def _history_fields():
    return [
        ("history_id", models.AutoField(primary_key=True, serialize=False)),
        ("history_date", models.DateTimeField(db_index=True)),
        ("history_change_reason", models.CharField(max_length=100, null=True)),
        ("history_type", models.CharField(choices=HISTORY_TYPES, max_length=1)),
        (
            "history_user",
            models.ForeignKey(
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        # ══════════════════════════════════════════════════════════════
        # STAFF
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="StaffMember",
            fields=[
                ("id", _id()),
                ("first_name", models.CharField(max_length=100, verbose_name="First name")),
                ("last_name", models.CharField(blank=True, max_length=100, verbose_name="Last name")),
                (
                    "role",
                    models.CharField(
                        blank=True,
                        help_text="Job description, e.g. 'Upholsterer'",
                        max_length=100,
                        verbose_name="Role",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                (
                    "is_current",
                    models.BooleanField(
                        default=True,
                        help_text="Unset for people who left but keep their history",
                        verbose_name="Current staff",
                    ),
                ),
                (
                    "weekly_hours",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=5, null=True, verbose_name="Weekly hours"
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
            ],
            options={
                "verbose_name": "Staff member",
                "verbose_name_plural": "Staff",
                "db_table": "shopfloor_staff",
                "ordering": ["last_name", "first_name"],
            },
        ),
        migrations.CreateModel(
            name="TimeDailySummary",
            fields=[
                ("id", _id()),
                ("date_worked", models.DateField(db_index=True, verbose_name="Date")),
                ("total_minutes", models.PositiveIntegerField(default=0, verbose_name="Minutes worked")),
                (
                    "staff",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="daily_summaries",
                        to="shopfloor.staffmember",
                        verbose_name="Staff member",
                    ),
                ),
            ],
            options={
                "verbose_name": "Daily time summary",
                "verbose_name_plural": "Daily time summaries",
                "db_table": "shopfloor_time_daily_summary",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("staff", "date_worked"), name="shopfloor_daily_summary_staff_date_uniq"
                    ),
                ],
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # CATALOG
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="JobCategory",
            fields=[
                ("id", _id()),
                ("name", models.CharField(max_length=100, unique=True, verbose_name="Name")),
                ("sort_order", models.PositiveIntegerField(default=0, verbose_name="Order")),
            ],
            options={
                "verbose_name": "Job category",
                "verbose_name_plural": "Job categories",
                "db_table": "shopfloor_job_category",
                "ordering": ["sort_order", "name"],
            },
        ),
        migrations.CreateModel(
            name="Job",
            fields=[
                ("id", _id()),
                ("name", models.CharField(max_length=150, verbose_name="Name")),
                (
                    "estimated_minutes",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Per unit, expressed in the time unit below",
                        max_digits=8,
                        null=True,
                        verbose_name="Estimated time",
                    ),
                ),
                (
                    "time_unit",
                    models.CharField(choices=TIME_UNITS, default="minutes", max_length=10, verbose_name="Time unit"),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="jobs",
                        to="shopfloor.jobcategory",
                        verbose_name="Category",
                    ),
                ),
            ],
            options={
                "verbose_name": "Job",
                "verbose_name_plural": "Jobs",
                "db_table": "shopfloor_job",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="HourlyRate",
            fields=[
                ("id", _id()),
                ("name", models.CharField(blank=True, max_length=100, verbose_name="Name")),
                ("rate", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Rate")),
                (
                    "job",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="hourly_rates",
                        to="shopfloor.job",
                        verbose_name="Job",
                    ),
                ),
            ],
            options={
                "verbose_name": "Hourly rate",
                "verbose_name_plural": "Hourly rates",
                "db_table": "shopfloor_hourly_rate",
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", _id()),
                ("code", models.SlugField(unique=True, verbose_name="Code")),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "db_table": "shopfloor_product",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="BillOfMaterials",
            fields=[
                ("id", _id()),
                (
                    "quantity",
                    models.DecimalField(decimal_places=3, default=Decimal("1"), max_digits=10, verbose_name="Quantity"),
                ),
                ("unit", models.CharField(default="un", max_length=20, verbose_name="Unit")),
                (
                    "component",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="used_in",
                        to="shopfloor.product",
                        verbose_name="Component",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bom_items",
                        to="shopfloor.product",
                        verbose_name="Product",
                    ),
                ),
            ],
            options={
                "verbose_name": "BOM line",
                "verbose_name_plural": "Bill of materials",
                "db_table": "shopfloor_bom",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("product", "component"), name="shopfloor_bom_product_component_uniq"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PieceWorkRate",
            fields=[
                ("id", _id()),
                ("rate", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Rate")),
                ("effective_date", models.DateField(default=datetime.date.today, verbose_name="Effective from")),
                (
                    "end_date",
                    models.DateField(
                        blank=True, help_text="Empty means currently active", null=True, verbose_name="Until"
                    ),
                ),
                (
                    "job",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="piece_rates",
                        to="shopfloor.job",
                        verbose_name="Job",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="piece_rates",
                        to="shopfloor.product",
                        verbose_name="Product",
                    ),
                ),
            ],
            options={
                "verbose_name": "Piecework rate",
                "verbose_name_plural": "Piecework rates",
                "db_table": "shopfloor_piece_rate",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("job", "product", "effective_date"),
                        name="shopfloor_piece_rate_job_product_date_uniq",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="BillOfLabour",
            fields=[
                ("id", _id()),
                (
                    "time_required",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Per unit of the job",
                        max_digits=8,
                        null=True,
                        verbose_name="Time required",
                    ),
                ),
                (
                    "time_unit",
                    models.CharField(choices=TIME_UNITS, default="hours", max_length=10, verbose_name="Time unit"),
                ),
                ("quantity", models.PositiveIntegerField(default=1, verbose_name="Quantity")),
                (
                    "pay_type",
                    models.CharField(choices=PAY_TYPES, default="hourly", max_length=10, verbose_name="Pay type"),
                ),
                (
                    "hourly_rate",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="shopfloor.hourlyrate",
                        verbose_name="Hourly rate",
                    ),
                ),
                (
                    "job",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bol_items",
                        to="shopfloor.job",
                        verbose_name="Job",
                    ),
                ),
                (
                    "piece_rate",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="shopfloor.pieceworkrate",
                        verbose_name="Piecework rate",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bol_items",
                        to="shopfloor.product",
                        verbose_name="Product",
                    ),
                ),
            ],
            options={
                "verbose_name": "BOL line",
                "verbose_name_plural": "Bill of labour",
                "db_table": "shopfloor_bol",
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # ORDERS
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", _id()),
                ("order_number", models.CharField(blank=True, max_length=50, verbose_name="Order number")),
                ("customer_name", models.CharField(blank=True, max_length=200, verbose_name="Customer")),
                ("order_date", models.DateField(blank=True, null=True, verbose_name="Order date")),
                (
                    "delivery_date",
                    models.DateField(blank=True, db_index=True, null=True, verbose_name="Delivery date"),
                ),
                (
                    "status",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("new", "New"),
                            ("in_production", "In production"),
                            ("completed", "Completed"),
                            ("delivered", "Delivered"),
                            ("closed", "Closed"),
                            ("cancelled", "Cancelled"),
                        ],
                        max_length=20,
                        null=True,
                        verbose_name="Status",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "db_table": "shopfloor_order",
                "ordering": ["delivery_date", "pk"],
            },
        ),
        migrations.CreateModel(
            name="OrderDetail",
            fields=[
                ("id", _id()),
                ("quantity", models.PositiveIntegerField(default=1, verbose_name="Quantity")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="details",
                        to="shopfloor.order",
                        verbose_name="Order",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="order_details",
                        to="shopfloor.product",
                        verbose_name="Product",
                    ),
                ),
            ],
            options={
                "verbose_name": "Order line",
                "verbose_name_plural": "Order lines",
                "db_table": "shopfloor_order_detail",
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # JOB CARDS
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="JobCard",
            fields=[
                ("id", _id()),
                ("issue_date", models.DateField(default=django.utils.timezone.localdate, verbose_name="Issue date")),
                ("due_date", models.DateField(blank=True, null=True, verbose_name="Due date")),
                ("completion_date", models.DateField(blank=True, null=True, verbose_name="Completed on")),
                (
                    "status",
                    models.CharField(
                        choices=JOB_CARD_STATUSES,
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="job_cards",
                        to="shopfloor.order",
                        verbose_name="Order",
                    ),
                ),
                (
                    "staff",
                    models.ForeignKey(
                        blank=True,
                        help_text="Empty for the order's unassigned pool card",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="job_cards",
                        to="shopfloor.staffmember",
                        verbose_name="Staff member",
                    ),
                ),
            ],
            options={
                "verbose_name": "Job card",
                "verbose_name_plural": "Job cards",
                "db_table": "shopfloor_job_card",
                "ordering": ["-issue_date", "-pk"],
                "indexes": [models.Index(fields=["order", "staff"], name="shopfloor_card_order_staff_idx")],
            },
        ),
        migrations.CreateModel(
            name="JobCardItem",
            fields=[
                ("id", _id()),
                ("quantity", models.PositiveIntegerField(default=1, verbose_name="Quantity")),
                ("completed_quantity", models.PositiveIntegerField(default=0, verbose_name="Completed")),
                (
                    "piece_rate",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name="Piece rate"),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("in_progress", "In progress"), ("completed", "Completed")],
                        default="pending",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("start_time", models.DateTimeField(blank=True, null=True, verbose_name="Started at")),
                ("completion_time", models.DateTimeField(blank=True, null=True, verbose_name="Completed at")),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                (
                    "job",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="card_items",
                        to="shopfloor.job",
                        verbose_name="Job",
                    ),
                ),
                (
                    "job_card",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="shopfloor.jobcard",
                        verbose_name="Job card",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="shopfloor.product",
                        verbose_name="Product",
                    ),
                ),
            ],
            options={
                "verbose_name": "Job card item",
                "verbose_name_plural": "Job card items",
                "db_table": "shopfloor_job_card_item",
                "indexes": [models.Index(fields=["job", "status"], name="shopfloor_item_job_status_idx")],
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # ASSIGNMENTS
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="LaborAssignment",
            fields=[
                ("id", _id()),
                (
                    "job_key",
                    models.CharField(
                        help_text="e.g. 'order-12:detail-40:bol-7:job-3'",
                        max_length=255,
                        verbose_name="Job instance",
                    ),
                ),
                ("assignment_date", models.DateField(db_index=True, verbose_name="Date")),
                ("start_minutes", models.IntegerField(blank=True, null=True, verbose_name="Start")),
                ("end_minutes", models.IntegerField(blank=True, null=True, verbose_name="End")),
                (
                    "status",
                    models.CharField(
                        choices=ASSIGNMENT_STATUSES, default="scheduled", max_length=20, verbose_name="Schedule status"
                    ),
                ),
                (
                    "pay_type",
                    models.CharField(choices=PAY_TYPES, default="hourly", max_length=10, verbose_name="Pay type"),
                ),
                (
                    "job_status",
                    models.CharField(
                        choices=JOB_STATUSES,
                        db_index=True,
                        default="scheduled",
                        max_length=20,
                        verbose_name="Job status",
                    ),
                ),
                ("issued_at", models.DateTimeField(blank=True, null=True, verbose_name="Issued at")),
                ("started_at", models.DateTimeField(blank=True, null=True, verbose_name="Started at")),
                ("completed_at", models.DateTimeField(blank=True, null=True, verbose_name="Completed at")),
                ("actual_start_minutes", models.IntegerField(blank=True, null=True, verbose_name="Actual start")),
                ("actual_end_minutes", models.IntegerField(blank=True, null=True, verbose_name="Actual end")),
                (
                    "actual_duration_minutes",
                    models.IntegerField(blank=True, null=True, verbose_name="Actual duration"),
                ),
                ("completion_notes", models.TextField(blank=True, verbose_name="Completion notes")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                (
                    "bol",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assignments",
                        to="shopfloor.billoflabour",
                        verbose_name="BOL line",
                    ),
                ),
                (
                    "hourly_rate",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="shopfloor.hourlyrate",
                        verbose_name="Hourly rate",
                    ),
                ),
                (
                    "job",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assignments",
                        to="shopfloor.job",
                        verbose_name="Job",
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assignments",
                        to="shopfloor.order",
                        verbose_name="Order",
                    ),
                ),
                (
                    "order_detail",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assignments",
                        to="shopfloor.orderdetail",
                        verbose_name="Order line",
                    ),
                ),
                (
                    "piece_rate",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="shopfloor.pieceworkrate",
                        verbose_name="Piecework rate",
                    ),
                ),
                (
                    "staff",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assignments",
                        to="shopfloor.staffmember",
                        verbose_name="Staff member",
                    ),
                ),
            ],
            options={
                "verbose_name": "Labor assignment",
                "verbose_name_plural": "Labor assignments",
                "db_table": "shopfloor_labor_assignment",
                "ordering": ["assignment_date", "start_minutes"],
                "indexes": [
                    models.Index(fields=["assignment_date", "job_status"], name="shopfloor_asg_date_status_idx"),
                    models.Index(fields=["staff", "assignment_date"], name="shopfloor_asg_staff_date_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("job_key", "assignment_date"), name="shopfloor_assignment_job_date_uniq"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="JobTimeHistory",
            fields=[
                ("id", _id()),
                ("estimated_minutes", models.IntegerField(blank=True, null=True, verbose_name="Estimated")),
                ("actual_minutes", models.IntegerField(verbose_name="Actual")),
                (
                    "variance_minutes",
                    models.IntegerField(
                        help_text="Actual minus estimated (positive = took longer)", verbose_name="Variance"
                    ),
                ),
                ("assignment_date", models.DateField(blank=True, null=True, verbose_name="Date")),
                (
                    "pay_type",
                    models.CharField(blank=True, choices=PAY_TYPES, max_length=10, verbose_name="Pay type"),
                ),
                ("recorded_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Recorded at")),
                (
                    "assignment",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="time_history",
                        to="shopfloor.laborassignment",
                        verbose_name="Assignment",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Recorded by",
                    ),
                ),
                (
                    "job",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="time_history",
                        to="shopfloor.job",
                        verbose_name="Job",
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="shopfloor.order",
                        verbose_name="Order",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="shopfloor.product",
                        verbose_name="Product",
                    ),
                ),
                (
                    "staff",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="shopfloor.staffmember",
                        verbose_name="Staff member",
                    ),
                ),
            ],
            options={
                "verbose_name": "Job time record",
                "verbose_name_plural": "Job time history",
                "db_table": "shopfloor_job_time_history",
                "ordering": ["-recorded_at"],
                "indexes": [models.Index(fields=["job", "product"], name="shopfloor_history_job_prod_idx")],
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # HISTORY
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="HistoricalJobCard",
            fields=[
                ("id", _history_id()),
                ("issue_date", models.DateField(default=django.utils.timezone.localdate, verbose_name="Issue date")),
                ("due_date", models.DateField(blank=True, null=True, verbose_name="Due date")),
                ("completion_date", models.DateField(blank=True, null=True, verbose_name="Completed on")),
                (
                    "status",
                    models.CharField(
                        choices=JOB_CARD_STATUSES,
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="Updated at")),
                *_history_fields(),
                ("order", _history_fk("shopfloor.order", "Order")),
                ("staff", _history_fk("shopfloor.staffmember", "Staff member")),
            ],
            options={
                "verbose_name": "historical Job card",
                "verbose_name_plural": "historical Job cards",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="HistoricalLaborAssignment",
            fields=[
                ("id", _history_id()),
                ("job_key", models.CharField(max_length=255, verbose_name="Job instance")),
                ("assignment_date", models.DateField(db_index=True, verbose_name="Date")),
                ("start_minutes", models.IntegerField(blank=True, null=True, verbose_name="Start")),
                ("end_minutes", models.IntegerField(blank=True, null=True, verbose_name="End")),
                (
                    "status",
                    models.CharField(
                        choices=ASSIGNMENT_STATUSES, default="scheduled", max_length=20, verbose_name="Schedule status"
                    ),
                ),
                (
                    "pay_type",
                    models.CharField(choices=PAY_TYPES, default="hourly", max_length=10, verbose_name="Pay type"),
                ),
                (
                    "job_status",
                    models.CharField(
                        choices=JOB_STATUSES,
                        db_index=True,
                        default="scheduled",
                        max_length=20,
                        verbose_name="Job status",
                    ),
                ),
                ("issued_at", models.DateTimeField(blank=True, null=True, verbose_name="Issued at")),
                ("started_at", models.DateTimeField(blank=True, null=True, verbose_name="Started at")),
                ("completed_at", models.DateTimeField(blank=True, null=True, verbose_name="Completed at")),
                ("actual_start_minutes", models.IntegerField(blank=True, null=True, verbose_name="Actual start")),
                ("actual_end_minutes", models.IntegerField(blank=True, null=True, verbose_name="Actual end")),
                (
                    "actual_duration_minutes",
                    models.IntegerField(blank=True, null=True, verbose_name="Actual duration"),
                ),
                ("completion_notes", models.TextField(blank=True, verbose_name="Completion notes")),
                ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="Updated at")),
                *_history_fields(),
                ("bol", _history_fk("shopfloor.billoflabour", "BOL line")),
                ("hourly_rate", _history_fk("shopfloor.hourlyrate", "Hourly rate")),
                ("job", _history_fk("shopfloor.job", "Job")),
                ("order", _history_fk("shopfloor.order", "Order")),
                ("order_detail", _history_fk("shopfloor.orderdetail", "Order line")),
                ("piece_rate", _history_fk("shopfloor.pieceworkrate", "Piecework rate")),
                ("staff", _history_fk("shopfloor.staffmember", "Staff member")),
            ],
            options={
                "verbose_name": "historical Labor assignment",
                "verbose_name_plural": "historical Labor assignments",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
