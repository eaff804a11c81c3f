"""
Shopfloor API URLs.

Include this in your project's urlpatterns:

    path('api/shopfloor/', include('shopfloor.api.urls')),
"""

from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import (
    BoardView,
    InFactoryView,
    JobCardViewSet,
    JobTimeStatsView,
    LaborAssignmentViewSet,
    StaffViewSet,
    WeekView,
)

router = DefaultRouter()
router.register("staff", StaffViewSet, basename="staff")
router.register("job-cards", JobCardViewSet)
router.register("assignments", LaborAssignmentViewSet)

urlpatterns = [
    path("board/", BoardView.as_view(), name="shopfloor-board"),
    path("board/week/", WeekView.as_view(), name="shopfloor-board-week"),
    path("board/in-factory/", InFactoryView.as_view(), name="shopfloor-in-factory"),
    path("jobs/<int:pk>/time-stats/", JobTimeStatsView.as_view(), name="shopfloor-job-time-stats"),
] + router.urls
