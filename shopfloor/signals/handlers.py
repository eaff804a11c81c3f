"""
Shopfloor Signal Handlers.

This module is imported in apps.py to register handlers.
"""

import logging

from django.dispatch import receiver

from shopfloor.signals import job_completed

logger = logging.getLogger(__name__)


@receiver(job_completed)
def record_job_time_on_complete(sender, assignment, user=None, **kwargs):
    """
    Keep a time history row for every completed assignment.

    Estimated minutes come from the BOL line; without one the variance
    is recorded as zero.
    """
    from shopfloor.models import JobTimeHistory

    if assignment.actual_duration_minutes is None:
        logger.info(f"Assignment {assignment.pk} has no actual duration, skipping time history")
        return

    JobTimeHistory.record_for(assignment, user=user)
