"""
Shopfloor Models.

Core models for labor planning:
- StaffMember: a lane on the planning board
- Job, JobCategory: kinds of work
- Product, BillOfMaterials, BillOfLabour: what to make and how
- HourlyRate, PieceWorkRate: pay rates
- Order, OrderDetail: demand feeding the board
- JobCard, JobCardItem: work handed to staff
- LaborAssignment: a job placed on a staff lane for a day
- JobTimeHistory: estimated vs actual time of finished jobs
"""

from shopfloor.models.assignment import AssignmentStatus, JobStatus, LaborAssignment
from shopfloor.models.catalog import (
    BillOfLabour,
    BillOfMaterials,
    HourlyRate,
    Job,
    JobCategory,
    PayType,
    PieceWorkRate,
    Product,
    TimeUnit,
)
from shopfloor.models.job_card import JobCard, JobCardItem, JobCardItemStatus, JobCardStatus
from shopfloor.models.order import Order, OrderDetail, OrderStatus
from shopfloor.models.staff import StaffMember, TimeDailySummary
from shopfloor.models.time_history import JobTimeHistory

__all__ = [
    "StaffMember",
    "TimeDailySummary",
    "JobCategory",
    "Job",
    "TimeUnit",
    "PayType",
    "HourlyRate",
    "PieceWorkRate",
    "Product",
    "BillOfMaterials",
    "BillOfLabour",
    "Order",
    "OrderDetail",
    "OrderStatus",
    "JobCard",
    "JobCardItem",
    "JobCardStatus",
    "JobCardItemStatus",
    "LaborAssignment",
    "AssignmentStatus",
    "JobStatus",
    "JobTimeHistory",
]
