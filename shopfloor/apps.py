"""
Django Shopfloor app configuration.
"""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class ShopfloorConfig(AppConfig):
    """Shopfloor application configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "shopfloor"
    verbose_name = _("Shop Floor")

    def ready(self):
        """Import signal handlers when app is ready."""
        from shopfloor.signals import handlers  # noqa: F401
