"""
URL configuration for Shopfloor API tests.

Used as ROOT_URLCONF in test settings via @pytest.mark.urls.
"""

from django.urls import include, path

urlpatterns = [
    path("api/shopfloor/", include("shopfloor.api.urls")),
]
