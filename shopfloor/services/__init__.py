"""
Shopfloor Services.

Business logic that doesn't belong in models:
- assignments: assign, update and unassign jobs on staff lanes
- placement: drop, move and resize bars with lane checks
- job_cards: issue and un-issue quantities between job cards
- execution: issue, start, hold, resume, complete
- planning: board queries (orders, roster, lanes, week strip)
"""

from shopfloor.services.execution import BoardExecution
from shopfloor.services.placement import BoardPlacement
from shopfloor.services.planning import BoardPlanning

__all__ = [
    "BoardPlanning",
    "BoardPlacement",
    "BoardExecution",
]
