"""
Board geometry: minutes ↔ pixels/percent on the time axis.

A Timeline with a fixed width works in pixels; without one, in percent
of the lane width.
"""

from dataclasses import dataclass

from shopfloor.conf import get_day_window
from shopfloor.scheduling import build_time_markers, clamp_minutes, js_round, snap_to_grid


@dataclass
class SnapPreview:
    """Drag indicator: where the pointer is and where the bar would land."""

    minutes: int
    snapped_minutes: int
    x: float


@dataclass
class BarGeometry:
    left: float
    width: float


class Timeline:
    """
    Time axis from start_minutes to end_minutes.

    Usage:
        axis = Timeline(7 * 60, 19 * 60, width=1440)
        axis.to_position(8 * 60)          # 120.0 px
        axis.minutes_at(300, 1440)        # 570 (09:30)
    """

    def __init__(self, start_minutes: int | None = None, end_minutes: int | None = None, width=None):
        day_start, day_end = get_day_window()
        self.start_minutes = day_start if start_minutes is None else start_minutes
        self.end_minutes = day_end if end_minutes is None else end_minutes
        if self.end_minutes <= self.start_minutes:
            raise ValueError("Timeline end must be after its start")
        self.width = width

    def __repr__(self) -> str:
        return f"Timeline({self.start_minutes}, {self.end_minutes}, width={self.width})"

    @property
    def total_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    @property
    def uses_fixed_width(self) -> bool:
        return self.width is not None and self.width > 0

    def _scale(self, ratio: float) -> float:
        return ratio * self.width if self.uses_fixed_width else ratio * 100

    def to_position(self, minutes) -> float:
        return self._scale((minutes - self.start_minutes) / self.total_minutes)

    def to_width(self, start, end) -> float:
        return self._scale((end - start) / self.total_minutes)

    def to_percent(self, minutes) -> float:
        return (minutes - self.start_minutes) / self.total_minutes * 100

    def minutes_at(self, offset: float, element_width: float) -> int:
        """Minutes under a pointer `offset` px from the lane's left edge."""
        offset = clamp_minutes(offset, 0, element_width)
        ratio = 0 if element_width == 0 else offset / element_width
        return js_round(self.start_minutes + ratio * self.total_minutes)

    def snap_preview(self, offset: float, element_width: float, increment: int) -> SnapPreview:
        minutes = self.minutes_at(offset, element_width)
        snapped = snap_to_grid(minutes, increment, self.start_minutes, self.end_minutes)
        x = (snapped - self.start_minutes) / self.total_minutes * element_width
        return SnapPreview(minutes=minutes, snapped_minutes=snapped, x=x)

    def bar_geometry(self, start, end, min_px: float = 80, min_percent: float = 8) -> BarGeometry:
        """Left/width of a bar, never narrower than the minimum visible size."""
        width = self.to_width(start, end)
        minimum = min_px if self.uses_fixed_width else min_percent
        return BarGeometry(left=self.to_position(start), width=max(width, minimum))

    def markers(self):
        markers = build_time_markers(self.start_minutes, self.end_minutes)
        for marker in markers:
            marker.position = self.to_position(marker.minutes)
        return markers


def lane_utilization(blocks, shift_minutes: int) -> int:
    """Percent of the shift already booked, capped at 100."""
    if shift_minutes <= 0:
        return 0
    assigned = sum(max(0, block.end_minutes - block.start_minutes) for block in blocks)
    return min(js_round(assigned / shift_minutes * 100), 100)
