"""
Shopfloor Exceptions.

Services raise ShopfloorError with a machine code; the API turns it into
a JSON body. Model lifecycle methods keep raising Django's ValidationError
and the service layer translates those into INVALID_STATUS.
"""

from typing import Any

ERROR_CODES = {
    "INVALID_QUANTITY": "Quantity must be positive",
    "INVALID_TIMES": "Actual end is not after actual start",
    "INVALID_STATUS": "Job status transition not allowed",
    "SCHEDULE_CONFLICT": "Drop blocked by lane constraints",
    "ALREADY_ISSUED": "Job already issued with no balance left in the pool",
    "NOT_ISSUED": "Job card was never issued",
    "MISSING_REFERENCE": "Assignment lacks the order, job or staff to work with",
}

# Codes the API answers with 409 instead of 400
CONFLICT_CODES = frozenset({"SCHEDULE_CONFLICT"})


class ShopfloorError(Exception):
    """
    Domain error with a code from ERROR_CODES and free-form details.

        raise ShopfloorError("SCHEDULE_CONFLICT", status="overlap", staff_id=4)
    """

    def __init__(self, code: str, **details: Any):
        self.code = code
        self.details = details
        super().__init__(ERROR_CODES.get(code, code))

    @property
    def is_conflict(self) -> bool:
        return self.code in CONFLICT_CODES

    def as_dict(self) -> dict:
        return {"code": self.code, **self.details}

    def __str__(self) -> str:
        pairs = ", ".join(f"{key}={value}" for key, value in self.details.items())
        body = f"{self.code}: {pairs}" if pairs else self.code
        return f"ShopfloorError({body})"
