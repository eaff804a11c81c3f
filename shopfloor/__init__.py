"""
Django Shopfloor - labor planning for a manufacturing shop floor.

Staff lanes, job assignments, job cards and time tracking on top of
the Django ORM.

Usage:
    from shopfloor import board, ShopfloorError

    # Drop an unscheduled job onto a staff lane
    assignment = board.drop_job(job, staff, start_minutes=485, date=date(2026, 3, 2))

    # Print the job card and hand it out
    result = board.issue(assignment, quantity=10)
    print(f"Card #{result.card.pk}: {result.issued} issued, {result.remaining} left")

    # Record the actual times when the worker is done
    board.complete(assignment, actual_start="08:10", actual_end="09:05")
"""

from shopfloor.exceptions import ShopfloorError


def __getattr__(name):
    """Lazy import to avoid AppRegistryNotReady errors."""
    if name in ("board", "Board"):
        from shopfloor.service import Board

        return Board
    if name == "ConstraintResult":
        from shopfloor.results import ConstraintResult

        return ConstraintResult
    if name == "IssueResult":
        from shopfloor.results import IssueResult

        return IssueResult
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["board", "Board", "ShopfloorError", "ConstraintResult", "IssueResult"]
__version__ = "0.1.0"
