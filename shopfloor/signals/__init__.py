"""
Shopfloor Signals.

Other apps (payroll, notifications, printing) react to the board via
these signals instead of being called directly.

Signals:
    assignment_scheduled: a job was placed (or moved) on a staff lane
    assignment_unassigned: a job went back to the unscheduled list
    job_card_issued: a job card was handed to a staff member
    job_card_unissued: an issued job card was taken back
    job_completed: actual times recorded for a job
"""

from django.dispatch import Signal

# Args: assignment, created
assignment_scheduled = Signal()

# Args: assignment
assignment_unassigned = Signal()

# Args: result (IssueResult), user
job_card_issued = Signal()

# Args: assignment, returned, user
job_card_unissued = Signal()

# Sent by LaborAssignment.complete()
# Args: assignment, user
job_completed = Signal()

__all__ = [
    "assignment_scheduled",
    "assignment_unassigned",
    "job_card_issued",
    "job_card_unissued",
    "job_completed",
]
