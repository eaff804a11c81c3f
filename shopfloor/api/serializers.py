"""
Shopfloor API Serializers.
"""

from rest_framework import serializers

from shopfloor.models import JobCard, JobCardItem, LaborAssignment
from shopfloor.services.placement import MOVE, RESIZE_END, RESIZE_START


# ══════════════════════════════════════════════════════════════
# MODELS
# ══════════════════════════════════════════════════════════════


class JobCardItemSerializer(serializers.ModelSerializer):
    """Serializer for JobCardItem model."""

    job_name = serializers.CharField(source="job.name", read_only=True, default=None)
    product_name = serializers.CharField(source="product.name", read_only=True, default=None)
    earnings = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = JobCardItem
        fields = [
            "id",
            "product",
            "product_name",
            "job",
            "job_name",
            "quantity",
            "completed_quantity",
            "piece_rate",
            "status",
            "start_time",
            "completion_time",
            "notes",
            "earnings",
        ]
        read_only_fields = ["job_name", "product_name", "earnings"]


class JobCardSerializer(serializers.ModelSerializer):
    """
    Serializer for JobCard model.

    Items are written together with the card; sending `items` on update
    replaces them.
    """

    items = JobCardItemSerializer(many=True, required=False)
    staff_name = serializers.CharField(source="staff.name", read_only=True, default=None)
    total_quantity = serializers.IntegerField(read_only=True)

    class Meta:
        model = JobCard
        fields = [
            "id",
            "order",
            "staff",
            "staff_name",
            "issue_date",
            "due_date",
            "completion_date",
            "status",
            "notes",
            "items",
            "total_quantity",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["staff_name", "total_quantity", "created_at", "updated_at"]

    def create(self, validated_data):
        items = validated_data.pop("items", [])
        card = JobCard.objects.create(**validated_data)
        for item in items:
            JobCardItem.objects.create(job_card=card, **item)
        return card

    def update(self, instance, validated_data):
        items = validated_data.pop("items", None)
        instance = super().update(instance, validated_data)
        if items is not None:
            instance.items.all().delete()
            for item in items:
                JobCardItem.objects.create(job_card=instance, **item)
        return instance


class LaborAssignmentSerializer(serializers.ModelSerializer):
    """Serializer for LaborAssignment model."""

    staff_name = serializers.CharField(source="staff.name", read_only=True, default=None)
    label = serializers.CharField(read_only=True)
    duration_minutes = serializers.IntegerField(read_only=True)
    variance_minutes = serializers.IntegerField(read_only=True)
    minutes_elapsed = serializers.IntegerField(read_only=True)

    class Meta:
        model = LaborAssignment
        fields = [
            "id",
            "job_key",
            "order",
            "order_detail",
            "bol",
            "job",
            "staff",
            "staff_name",
            "label",
            "assignment_date",
            "start_minutes",
            "end_minutes",
            "duration_minutes",
            "status",
            "pay_type",
            "hourly_rate",
            "piece_rate",
            "job_status",
            "issued_at",
            "started_at",
            "completed_at",
            "minutes_elapsed",
            "actual_start_minutes",
            "actual_end_minutes",
            "actual_duration_minutes",
            "variance_minutes",
            "completion_notes",
        ]
        read_only_fields = fields


# ══════════════════════════════════════════════════════════════
# BOARD
# ══════════════════════════════════════════════════════════════


class AvailabilitySerializer(serializers.Serializer):
    is_active = serializers.BooleanField(allow_null=True)
    is_current = serializers.BooleanField(allow_null=True)
    is_available_on_date = serializers.BooleanField(allow_null=True)
    has_summary_on_date = serializers.BooleanField(allow_null=True)


class StaffRosterSerializer(serializers.Serializer):
    """Serializer for a roster entry (lane header)."""

    id = serializers.IntegerField()
    name = serializers.CharField()
    role = serializers.CharField(allow_null=True)
    availability = AvailabilitySerializer()
    capacity_hours = serializers.FloatField(allow_null=True)


class PlanningJobSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    order_id = serializers.IntegerField()
    order_detail_id = serializers.IntegerField(allow_null=True)
    product_id = serializers.IntegerField(allow_null=True)
    product_name = serializers.CharField(allow_null=True)
    bol_id = serializers.IntegerField(allow_null=True)
    job_id = serializers.IntegerField(allow_null=True)
    category_name = serializers.CharField(allow_null=True)
    category_color = serializers.CharField(allow_null=True)
    pay_type = serializers.CharField()
    quantity = serializers.IntegerField()
    duration_minutes = serializers.FloatField(allow_null=True)
    duration_hours = serializers.FloatField()
    time_unit = serializers.CharField()
    owner = serializers.CharField()
    status = serializers.CharField()
    schedule_status = serializers.CharField()


class PlanningOrderSerializer(serializers.Serializer):
    id = serializers.CharField()
    order_id = serializers.IntegerField()
    order_number = serializers.CharField()
    customer = serializers.CharField()
    priority = serializers.CharField()
    due_date = serializers.DateField(allow_null=True)
    status_name = serializers.CharField(allow_null=True)
    jobs = PlanningJobSerializer(many=True)


class StaffLaneSerializer(serializers.Serializer):
    staff = StaffRosterSerializer()
    assignments = LaborAssignmentSerializer(many=True)
    utilization = serializers.IntegerField()
    available_from = serializers.IntegerField()
    available_to = serializers.IntegerField()


class PlanningPayloadSerializer(serializers.Serializer):
    """Everything the board renders for one day."""

    date = serializers.DateField()
    orders = PlanningOrderSerializer(many=True)
    staff = StaffRosterSerializer(many=True)
    unscheduled_jobs = PlanningJobSerializer(many=True)
    assignments = LaborAssignmentSerializer(many=True)
    lanes = StaffLaneSerializer(many=True)


class DaySummarySerializer(serializers.Serializer):
    date = serializers.DateField()
    total_assigned_minutes = serializers.IntegerField()
    assignment_count = serializers.IntegerField()
    utilization = serializers.IntegerField()
    is_today = serializers.BooleanField()


# ══════════════════════════════════════════════════════════════
# ACTIONS
# ══════════════════════════════════════════════════════════════


class AssignSerializer(serializers.Serializer):
    """Serializer for dropping a planning job on a lane."""

    job_key = serializers.CharField(help_text="Planning job id, e.g. 'order-12:detail-40:bol-7:job-3'")
    staff = serializers.IntegerField(help_text="Staff member id")
    date = serializers.DateField()
    start_minutes = serializers.IntegerField(help_text="Pointer position in minutes from midnight")


class PlaceSerializer(serializers.Serializer):
    """Serializer for moving or resizing a placed bar."""

    kind = serializers.ChoiceField(choices=[MOVE, RESIZE_START, RESIZE_END], default=MOVE)
    staff = serializers.IntegerField(required=False, help_text="Target lane (move only)")
    minutes = serializers.IntegerField(help_text="Pointer position in minutes from midnight")


class IssueSerializer(serializers.Serializer):
    """Serializer for the issue action."""

    staff = serializers.IntegerField(required=False)
    quantity = serializers.IntegerField(
        required=False,
        min_value=1,
        help_text="Units to issue (optional, defaults to everything waiting in the pool)",
    )


class HoldSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class CompleteSerializer(serializers.Serializer):
    """Serializer for the complete action."""

    actual_start = serializers.CharField(help_text="'HH:MM' or minutes from midnight")
    actual_end = serializers.CharField(help_text="'HH:MM' or minutes from midnight")
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_actual_start(self, value):
        return _clock_or_minutes(value)

    def validate_actual_end(self, value):
        return _clock_or_minutes(value)


def _clock_or_minutes(value: str):
    value = value.strip()
    if value.isdigit():
        return int(value)
    if ":" not in value:
        raise serializers.ValidationError("Expected 'HH:MM' or minutes from midnight")
    return value
