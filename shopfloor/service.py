"""
Shopfloor Service - Thin facade over the service mixins.

Usage:
    from shopfloor import board, ShopfloorError

    payload = board.payload(date(2025, 12, 8))
    job = payload.unscheduled_jobs[0]

    assignment = board.drop_job(job, staff, start_minutes=485, date=date(2025, 12, 8))
    result = board.issue(assignment, quantity=10)
    board.complete(assignment, actual_start="08:10", actual_end="09:05")
"""

import logging

from shopfloor.services import BoardExecution, BoardPlacement, BoardPlanning
from shopfloor.services.assignments import unassign_job

logger = logging.getLogger(__name__)


class Board(BoardPlanning, BoardPlacement, BoardExecution):
    """
    Labor planning board.

    Read side (BoardPlanning), drag and drop (BoardPlacement) and job
    execution (BoardExecution) in one place.
    """

    @classmethod
    def unassign(cls, assignment):
        """Send a placed job back to the unscheduled list."""
        return unassign_job(assignment.job_key, assignment.assignment_date)


board = Board
