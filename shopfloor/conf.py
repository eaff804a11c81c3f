"""
Shopfloor Settings.

Supports two formats (dict takes priority):

    # Option 1: Dict
    SHOPFLOOR = {
        "DAY_START_MINUTES": 6 * 60,
        "DAY_END_MINUTES": 18 * 60,
    }

    # Option 2: Flat
    SHOPFLOOR_DAY_START_MINUTES = 6 * 60
    SHOPFLOOR_DAY_END_MINUTES = 18 * 60

All settings have sensible defaults, so no configuration is required.
"""

from django.conf import settings


# ── Defaults ──

DEFAULTS = {
    "DAY_START_MINUTES": 7 * 60,
    "DAY_END_MINUTES": 19 * 60,
    "MIN_DURATION_MINUTES": 30,
    "MIN_RESIZE_MINUTES": 15,
    "SNAP_INCREMENTS": [5, 10, 15, 30, 60],
    "DEFAULT_SNAP_INCREMENT": 15,
    "DEFAULT_MINUTES_PER_PIECE": 5,
    "UNSCHEDULED_START_MINUTES": 8 * 60,
    "CLOSED_ORDER_STATUSES": ["completed", "cancelled", "closed", "delivered"],
    "WORK_WEEK_DAYS": 5,
}


# ── Accessors ──

_sentinel = object()


def get_setting(name, default=_sentinel):
    """
    Get a shopfloor setting.

    Looks up in order:
    1. SHOPFLOOR dict (e.g. SHOPFLOOR = {"DAY_START_MINUTES": 360})
    2. Flat setting (e.g. SHOPFLOOR_DAY_START_MINUTES = 360)
    3. DEFAULTS
    """
    shopfloor_dict = getattr(settings, "SHOPFLOOR", {})
    if name in shopfloor_dict:
        return shopfloor_dict[name]

    flat_value = getattr(settings, f"SHOPFLOOR_{name}", _sentinel)
    if flat_value is not _sentinel:
        return flat_value

    if default is not _sentinel:
        return default

    return DEFAULTS.get(name)


def get_day_window() -> tuple[int, int]:
    """Return (start, end) of the board in minutes from midnight."""
    return get_setting("DAY_START_MINUTES"), get_setting("DAY_END_MINUTES")
