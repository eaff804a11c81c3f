"""
Shopfloor API ViewSets.
"""

from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from shopfloor.exceptions import ShopfloorError
from shopfloor.models import Job, JobCard, LaborAssignment, Product, StaffMember
from shopfloor.service import Board

from .serializers import (
    AssignSerializer,
    CompleteSerializer,
    DaySummarySerializer,
    HoldSerializer,
    IssueSerializer,
    JobCardItemSerializer,
    JobCardSerializer,
    LaborAssignmentSerializer,
    PlaceSerializer,
    PlanningPayloadSerializer,
    StaffRosterSerializer,
)


def _error_response(exc: ShopfloorError) -> Response:
    code = status.HTTP_409_CONFLICT if exc.is_conflict else status.HTTP_400_BAD_REQUEST
    return Response(exc.as_dict(), status=code)


def _date_param(request, required: bool = False):
    raw = request.query_params.get("date")
    if not raw:
        if required:
            raise DRFValidationError({"date": "This query parameter is required."})
        return timezone.localdate()
    value = parse_date(raw)
    if value is None:
        raise DRFValidationError({"date": f"Invalid date: {raw}"})
    return value


class StaffViewSet(viewsets.ViewSet):
    """
    Staff roster (read-only).

    list: Roster with availability for ?date= (default today)
    """

    permission_classes = [IsAuthenticated]

    def list(self, request):
        include_inactive = request.query_params.get("include_inactive") in ("1", "true")
        roster = Board.roster(on_date=_date_param(request), include_inactive=include_inactive)
        return Response(StaffRosterSerializer(roster, many=True).data)


class JobCardViewSet(viewsets.ModelViewSet):
    """
    ViewSet for JobCard.

    list: List job cards (?staff=, ?order= filters)
    create: Create a card with its items
    retrieve: Get a specific card
    update: Update a card (items replaced when sent)
    destroy: Delete a card
    """

    permission_classes = [IsAuthenticated]
    queryset = JobCard.objects.select_related("staff").prefetch_related("items__job", "items__product")
    serializer_class = JobCardSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        staff = self.request.query_params.get("staff")
        order = self.request.query_params.get("order")
        if staff:
            qs = qs.filter(staff_id=staff)
        if order:
            qs = qs.filter(order_id=order)
        return qs


class LaborAssignmentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for LaborAssignment.

    list: Assignments for ?date= (all dates when omitted)
    retrieve: Get a specific assignment
    assign: Drop a planning job on a staff lane
    place: Move or resize a placed bar
    unassign: Send a job back to the unscheduled list
    issue / unissue: Hand out or take back the job card
    start / hold / resume / complete: Job lifecycle
    available: Quantity still waiting to be issued
    """

    permission_classes = [IsAuthenticated]
    queryset = LaborAssignment.objects.select_related(
        "order", "order_detail__product", "bol__product", "job__category", "staff"
    )
    serializer_class = LaborAssignmentSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        if "date" in self.request.query_params:
            qs = qs.filter(assignment_date=_date_param(self.request))
        return qs

    def _respond(self, assignment, http_status=status.HTTP_200_OK):
        return Response(LaborAssignmentSerializer(assignment).data, status=http_status)

    @action(detail=False, methods=["post"])
    def assign(self, request):
        """
        Drop a planning job on a staff lane.

        POST /api/shopfloor/assignments/assign/
        {
            "job_key": "order-12:detail-40:bol-7:job-3",
            "staff": 4,
            "date": "2025-12-08",
            "start_minutes": 485
        }
        """
        serializer = AssignSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        job = Board.find_job(data["job_key"])
        if job is None:
            return Response(
                {"code": "MISSING_REFERENCE", "job_key": data["job_key"]},
                status=status.HTTP_404_NOT_FOUND,
            )
        staff = get_object_or_404(StaffMember, pk=data["staff"])

        try:
            assignment = Board.drop_job(job, staff, data["start_minutes"], data["date"])
        except ShopfloorError as e:
            return _error_response(e)
        return self._respond(assignment, status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def place(self, request, pk=None):
        """
        Move or resize a placed bar.

        POST /api/shopfloor/assignments/{pk}/place/
        {
            "kind": "assignment",   // or "resize-start" / "resize-end"
            "staff": 5,             // optional, move only
            "minutes": 540
        }
        """
        assignment = self.get_object()
        serializer = PlaceSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        staff = get_object_or_404(StaffMember, pk=data["staff"]) if "staff" in data else None

        try:
            assignment = Board.place(data["kind"], assignment, staff, data["minutes"])
        except ShopfloorError as e:
            return _error_response(e)
        return self._respond(assignment)

    @action(detail=True, methods=["post"])
    def unassign(self, request, pk=None):
        """POST /api/shopfloor/assignments/{pk}/unassign/"""
        assignment = Board.unassign(self.get_object())
        return self._respond(assignment)

    @action(detail=True, methods=["post"])
    def issue(self, request, pk=None):
        """
        Issue the job card.

        POST /api/shopfloor/assignments/{pk}/issue/
        {
            "quantity": 10  // optional
        }
        """
        assignment = self.get_object()
        serializer = IssueSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        staff = get_object_or_404(StaffMember, pk=data["staff"]) if "staff" in data else None

        try:
            result = Board.issue(
                assignment,
                staff=staff,
                quantity=data.get("quantity"),
                user=request.user,
            )
        except ShopfloorError as e:
            return _error_response(e)

        return Response(
            {
                "job_card": JobCardSerializer(result.card).data,
                "item": JobCardItemSerializer(result.item).data if result.item else None,
                "issued": result.issued,
                "remaining": result.remaining,
                "job_status": result.assignment.job_status,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["post"])
    def unissue(self, request, pk=None):
        """POST /api/shopfloor/assignments/{pk}/unissue/"""
        assignment = self.get_object()
        try:
            returned = Board.unissue(assignment, user=request.user)
        except ShopfloorError as e:
            return _error_response(e)
        return Response({"returned": returned, "job_status": assignment.job_status})

    @action(detail=True, methods=["post"])
    def start(self, request, pk=None):
        """POST /api/shopfloor/assignments/{pk}/start/"""
        try:
            assignment = Board.start(self.get_object(), user=request.user)
        except ShopfloorError as e:
            return _error_response(e)
        return self._respond(assignment)

    @action(detail=True, methods=["post"])
    def hold(self, request, pk=None):
        """
        Put the job on hold.

        POST /api/shopfloor/assignments/{pk}/hold/
        {
            "reason": "Waiting for fabric"  // optional
        }
        """
        serializer = HoldSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            assignment = Board.hold(
                self.get_object(),
                reason=serializer.validated_data["reason"],
                user=request.user,
            )
        except ShopfloorError as e:
            return _error_response(e)
        return self._respond(assignment)

    @action(detail=True, methods=["post"])
    def resume(self, request, pk=None):
        """POST /api/shopfloor/assignments/{pk}/resume/"""
        try:
            assignment = Board.resume(self.get_object(), user=request.user)
        except ShopfloorError as e:
            return _error_response(e)
        return self._respond(assignment)

    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):
        """
        Record actual times and complete the job.

        POST /api/shopfloor/assignments/{pk}/complete/
        {
            "actual_start": "08:10",
            "actual_end": "09:05",
            "notes": ""  // optional
        }
        """
        assignment = self.get_object()
        serializer = CompleteSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        try:
            assignment = Board.complete(
                assignment,
                data["actual_start"],
                data["actual_end"],
                notes=data["notes"],
                user=request.user,
            )
        except ShopfloorError as e:
            return _error_response(e)
        return self._respond(assignment)

    @action(detail=True, methods=["get"])
    def available(self, request, pk=None):
        """GET /api/shopfloor/assignments/{pk}/available/"""
        assignment = self.get_object()
        return Response({"available": Board.available(assignment)})


# ══════════════════════════════════════════════════════════════
# BOARD VIEWS
# ══════════════════════════════════════════════════════════════


class BoardView(APIView):
    """GET /api/shopfloor/board/?date=2025-12-08"""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        payload = Board.payload(_date_param(request))
        return Response(PlanningPayloadSerializer(payload).data)


class WeekView(APIView):
    """GET /api/shopfloor/board/week/?date=2025-12-08"""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        days = Board.week(_date_param(request))
        return Response(DaySummarySerializer(days, many=True).data)


class InFactoryView(APIView):
    """GET /api/shopfloor/board/in-factory/"""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(LaborAssignmentSerializer(Board.in_factory(), many=True).data)


class JobTimeStatsView(APIView):
    """GET /api/shopfloor/jobs/{id}/time-stats/?product=3"""

    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        job = get_object_or_404(Job, pk=pk)
        product = None
        if request.query_params.get("product"):
            product = get_object_or_404(Product, pk=request.query_params["product"])
        return Response(Board.time_stats(job, product=product))
