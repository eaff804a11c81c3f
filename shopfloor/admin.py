"""
Shopfloor Admin -- plain Django admin for staff, catalog, orders,
job cards and labor assignments.

Job cards and assignments use SimpleHistoryAdmin so their change history
is browsable.
"""

from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from shopfloor.models import (
    BillOfLabour,
    BillOfMaterials,
    HourlyRate,
    Job,
    JobCard,
    JobCardItem,
    JobCategory,
    JobTimeHistory,
    LaborAssignment,
    Order,
    OrderDetail,
    PieceWorkRate,
    Product,
    StaffMember,
    TimeDailySummary,
)


# ── Staff ──


@admin.register(StaffMember)
class StaffMemberAdmin(admin.ModelAdmin):
    list_display = ("last_name", "first_name", "role", "is_active", "is_current", "weekly_hours")
    list_filter = ("is_active", "is_current")
    search_fields = ("first_name", "last_name", "role")


@admin.register(TimeDailySummary)
class TimeDailySummaryAdmin(admin.ModelAdmin):
    list_display = ("staff", "date_worked", "total_minutes")
    list_filter = ("date_worked",)
    raw_id_fields = ("staff",)


# ── Jobs ──


class HourlyRateInline(admin.TabularInline):
    model = HourlyRate
    extra = 0


class PieceWorkRateInline(admin.TabularInline):
    model = PieceWorkRate
    extra = 0
    raw_id_fields = ("product",)


@admin.register(JobCategory)
class JobCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "sort_order")


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    """Admin for jobs and their pay rates."""

    list_display = ("name", "category", "estimated_minutes", "time_unit", "is_active")
    list_filter = ("category", "is_active")
    search_fields = ("name",)
    inlines = [HourlyRateInline, PieceWorkRateInline]


# ── Products ──


class BillOfMaterialsInline(admin.TabularInline):
    model = BillOfMaterials
    fk_name = "product"
    extra = 1
    raw_id_fields = ("component",)


class BillOfLabourInline(admin.TabularInline):
    model = BillOfLabour
    extra = 1
    fields = ("job", "time_required", "time_unit", "quantity", "pay_type", "hourly_rate", "piece_rate")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin for products with their BOM and BOL."""

    list_display = ("code", "name", "is_active")
    list_filter = ("is_active",)
    search_fields = ("code", "name")
    inlines = [BillOfMaterialsInline, BillOfLabourInline]


# ── Orders ──


class OrderDetailInline(admin.TabularInline):
    model = OrderDetail
    extra = 1
    raw_id_fields = ("product",)


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("__str__", "customer_name", "order_date", "delivery_date", "status")
    list_filter = ("status",)
    search_fields = ("order_number", "customer_name")
    date_hierarchy = "delivery_date"
    inlines = [OrderDetailInline]


# ── Job cards ──


class JobCardItemInline(admin.TabularInline):
    model = JobCardItem
    extra = 1
    fields = ("job", "product", "quantity", "completed_quantity", "piece_rate", "status")
    raw_id_fields = ("job", "product")


@admin.register(JobCard)
class JobCardAdmin(SimpleHistoryAdmin):
    list_display = ("__str__", "order", "staff", "issue_date", "status")
    list_filter = ("status", "issue_date")
    raw_id_fields = ("order", "staff")
    inlines = [JobCardItemInline]
    readonly_fields = ("created_at", "updated_at")


# ── Assignments ──


@admin.register(LaborAssignment)
class LaborAssignmentAdmin(SimpleHistoryAdmin):
    """Admin for labor assignments."""

    list_display = ("job_key", "staff", "assignment_date", "start_minutes", "end_minutes", "job_status")
    list_filter = ("job_status", "status", "assignment_date")
    search_fields = ("job_key",)
    date_hierarchy = "assignment_date"
    raw_id_fields = ("order", "order_detail", "bol", "job", "staff")
    readonly_fields = ("issued_at", "started_at", "completed_at", "created_at", "updated_at")


@admin.register(JobTimeHistory)
class JobTimeHistoryAdmin(admin.ModelAdmin):
    list_display = ("job", "product", "staff", "estimated_minutes", "actual_minutes", "variance_minutes", "recorded_at")
    list_filter = ("job",)
    raw_id_fields = ("job", "product", "assignment", "staff", "order")
