"""
Shopfloor REST API.

Provides DRF ViewSets for:
- Staff roster (read-only)
- JobCard (full CRUD with nested items)
- LaborAssignment (read-only + board actions)
and board views (day payload, week strip, jobs in factory, time stats).
"""
