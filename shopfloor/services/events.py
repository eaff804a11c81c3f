"""
Scheduling event log.

Every board interaction (drops, blocked drops, failed writes...) is
logged with a structured `extra` payload so it can be shipped to any
log sink configured in LOGGING.
"""

import logging

logger = logging.getLogger("shopfloor.scheduling")

WARNING_EVENTS = {"drop_blocked", "mutation_failed", "missing_staff"}


def log_scheduling_event(event: str, message: str = "", **fields) -> None:
    """
    Log a scheduling event.

    Usage:
        log_scheduling_event("drop_blocked", job_key=key, staff_id=4, reason="overlap")
    """
    extra = {"event": event}
    extra.update({key: value for key, value in fields.items() if value is not None})

    level = logging.WARNING if event in WARNING_EVENTS else logging.INFO
    logger.log(level, message or f"Scheduling event: {event}", extra=extra)
