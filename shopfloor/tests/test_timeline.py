"""
Tests for board geometry (shopfloor.timeline).
"""

import pytest

from shopfloor.results import AssignmentBlock
from shopfloor.timeline import Timeline, lane_utilization


@pytest.fixture
def axis():
    """07:00-19:00 drawn 1440 px wide (2 px per minute)."""
    return Timeline(420, 1140, width=1440)


class TestTimeline:
    def test_defaults_to_day_window(self):
        timeline = Timeline()

        assert timeline.start_minutes == 420
        assert timeline.end_minutes == 1140
        assert not timeline.uses_fixed_width

    def test_end_must_follow_start(self):
        with pytest.raises(ValueError):
            Timeline(600, 600)

    def test_pixel_positions(self, axis):
        assert axis.total_minutes == 720
        assert axis.to_position(480) == 120.0
        assert axis.to_width(480, 540) == 120.0

    def test_percent_positions_without_width(self):
        timeline = Timeline()

        assert timeline.to_position(780) == 50.0
        assert timeline.to_percent(420) == 0.0

    def test_minutes_at_pointer(self, axis):
        assert axis.minutes_at(300, 1440) == 570

    def test_minutes_at_clamps_pointer(self, axis):
        assert axis.minutes_at(-50, 1440) == 420
        assert axis.minutes_at(5000, 1440) == 1140
        assert axis.minutes_at(10, 0) == 420

    def test_snap_preview(self, axis):
        preview = axis.snap_preview(310, 1440, 15)

        assert preview.minutes == 575
        assert preview.snapped_minutes == 570
        assert preview.x == 300.0

    def test_short_bar_keeps_minimum_width(self, axis):
        geometry = axis.bar_geometry(480, 490)

        assert geometry.left == 120.0
        assert geometry.width == 80

    def test_short_bar_minimum_percent(self):
        assert Timeline().bar_geometry(480, 490).width == 8

    def test_markers_carry_positions(self):
        markers = Timeline(420, 540, width=120).markers()

        assert [m.minutes for m in markers] == [420, 450, 480, 510, 540]
        assert markers[1].position == 30.0


class TestLaneUtilization:
    def test_rounded_percent(self):
        blocks = [
            AssignmentBlock(id="a", start_minutes=480, end_minutes=540),
            AssignmentBlock(id="b", start_minutes=600, end_minutes=660),
        ]
        assert lane_utilization(blocks, 720) == 17

    def test_capped_at_full(self):
        blocks = [AssignmentBlock(id="a", start_minutes=0, end_minutes=1000)]
        assert lane_utilization(blocks, 720) == 100

    def test_empty_shift(self):
        assert lane_utilization([], 0) == 0
