"""
Tests for the scheduling arithmetic (shopfloor.scheduling).

Covers:
- Duration for hourly and piecework jobs
- Snap increment choice and grid snapping
- Lane constraint checks and their user-facing messages
- Labels, category colours and clock formatting
"""

import math
from types import SimpleNamespace

import pytest

from shopfloor.results import AssignmentBlock, LaneAvailability, LaneWindow
from shopfloor.scheduling import (
    build_assignment_label,
    build_constraint_message,
    build_time_markers,
    build_unscheduled_bar_state,
    calculate_duration_minutes,
    check_lane_constraints,
    choose_snap_increment,
    clock_to_minutes,
    convert_to_minutes,
    format_duration,
    format_time_label,
    get_category_color,
    js_round,
    minutes_to_clock,
    normalize_pay_type,
    snap_to_grid,
)


# ═══════════════════════════════════════════════════════════════════
# Duration
# ═══════════════════════════════════════════════════════════════════


class TestCalculateDuration:
    def test_hourly_multiplies_by_quantity(self):
        effort = SimpleNamespace(duration_minutes=20, quantity=3, pay_type="hourly")
        assert calculate_duration_minutes(effort) == 60

    def test_time_required_in_hours(self):
        effort = SimpleNamespace(time_required=1.5, time_unit="hours", quantity=2)
        assert calculate_duration_minutes(effort) == 180

    def test_piecework_falls_back_to_default_per_piece(self):
        effort = SimpleNamespace(quantity=4, pay_type="piece")
        assert calculate_duration_minutes(effort) == 20

    def test_piecework_uses_estimate(self):
        effort = SimpleNamespace(quantity=10, pay_type="PIECE", minutes_per_piece_estimate=2)
        assert calculate_duration_minutes(effort) == 20

    def test_minimum_applies(self):
        effort = SimpleNamespace(quantity=4, pay_type="piece")
        assert calculate_duration_minutes(effort, minimum_minutes=30) == 30

    def test_hourly_without_time_is_minimum(self):
        effort = SimpleNamespace(quantity=2, pay_type="hourly")
        assert calculate_duration_minutes(effort, minimum_minutes=30) == 30
        assert calculate_duration_minutes(effort) == 0

    def test_missing_quantity_counts_as_one(self):
        effort = SimpleNamespace(duration_minutes=25, quantity=None)
        assert calculate_duration_minutes(effort) == 25


class TestSnap:
    @pytest.mark.parametrize(
        "duration,expected",
        [(12, 5), (30, 10), (45, 15), (60, 30), (600, 60)],
    )
    def test_choose_snap_increment(self, duration, expected):
        assert choose_snap_increment(duration) == expected

    def test_non_finite_duration_uses_default(self):
        assert choose_snap_increment(math.inf) == 15

    def test_no_usable_increments_uses_default(self):
        assert choose_snap_increment(60, increments=[0, -5]) == 15

    def test_snap_to_grid_rounds_to_nearest_line(self):
        assert snap_to_grid(487, 15, 420, 1080) == 480
        assert snap_to_grid(490, 15, 420, 1080) == 495

    def test_snap_to_grid_clamps(self):
        assert snap_to_grid(400, 15, 420, 1080) == 420
        assert snap_to_grid(1130, 15, 420, 1080) == 1080

    def test_unscheduled_bar_state(self):
        state = build_unscheduled_bar_state(SimpleNamespace(duration_minutes=45, quantity=1))

        assert state.duration_minutes == 45
        assert state.snap_increment == 15
        assert state.start_minutes == 480
        assert state.end_minutes == 525
        assert state.status == "unscheduled"


# ═══════════════════════════════════════════════════════════════════
# Lane constraints
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def booked():
    return [AssignmentBlock(id="a", start_minutes=480, end_minutes=540, label="SO-1 • Sewing")]


class TestLaneConstraints:
    def test_touching_bars_do_not_overlap(self, booked):
        candidate = AssignmentBlock(id="b", start_minutes=540, end_minutes=600)
        result = check_lane_constraints(booked, candidate)

        assert result.status == "ok"
        assert not result.has_conflict

    def test_overlap(self, booked):
        candidate = AssignmentBlock(id="b", start_minutes=500, end_minutes=560)
        result = check_lane_constraints(booked, candidate)

        assert result.status == "overlap"
        assert result.overlaps == booked

    def test_outside_window(self, booked):
        candidate = AssignmentBlock(id="b", start_minutes=1100, end_minutes=1200)
        result = check_lane_constraints(booked, candidate, window=LaneWindow(420, 1140))

        assert result.status == "window"

    def test_availability_wins_over_overlap(self, booked):
        candidate = AssignmentBlock(id="b", start_minutes=500, end_minutes=560)
        result = check_lane_constraints(
            booked,
            candidate,
            availability=LaneAvailability(is_active=False),
        )

        assert result.status == "availability"
        assert [issue.type for issue in result.issues] == ["availability", "overlap"]

    def test_unknown_availability_does_not_block(self, booked):
        candidate = AssignmentBlock(id="b", start_minutes=600, end_minutes=660)
        result = check_lane_constraints(booked, candidate, availability=LaneAvailability())

        assert result.status == "ok"

    def test_capacity_overrun(self, booked):
        candidate = AssignmentBlock(id="b", start_minutes=600, end_minutes=660)
        result = check_lane_constraints(booked, candidate, capacity_minutes=100)

        assert result.status == "capacity"
        assert result.overrun_minutes == 20
        assert "by 20 minutes" in result.issues[0].message


class TestConstraintMessage:
    def test_overlap_message_names_conflicting_bar(self, booked):
        candidate = AssignmentBlock(id="b", start_minutes=500, end_minutes=560)
        message = build_constraint_message(check_lane_constraints(booked, candidate), "Thandi")

        assert message.title == "Overlap detected"
        assert message.description == (
            "This drop conflicts with SO-1 • Sewing (8:00 AM – 9:00 AM). "
            "Move the bar to an open slot."
        )

    def test_window_message_defaults_to_day_window(self, booked):
        candidate = AssignmentBlock(id="b", start_minutes=1100, end_minutes=1200)
        result = check_lane_constraints(booked, candidate, window=LaneWindow(420, 1140))
        message = build_constraint_message(result, "Thandi")

        assert message.title == "Outside shift window"
        assert message.description == "Place this job within 7:00 AM – 7:00 PM for Thandi."

    def test_availability_message(self, booked):
        candidate = AssignmentBlock(id="b", start_minutes=600, end_minutes=630)
        result = check_lane_constraints(booked, candidate, availability=LaneAvailability(is_current=False))
        message = build_constraint_message(result, "Sipho")

        assert message.title == "Staff unavailable"
        assert message.description.startswith("Sipho is off-shift")

    def test_capacity_message_singular(self, booked):
        candidate = AssignmentBlock(id="b", start_minutes=600, end_minutes=641)
        result = check_lane_constraints(booked, candidate, capacity_minutes=100)
        message = build_constraint_message(result, "Sipho")

        assert message.title == "Lane capacity exceeded"
        assert message.description == "This schedule exceeds Sipho's capacity by 1 minute."


# ═══════════════════════════════════════════════════════════════════
# Labels & colours
# ═══════════════════════════════════════════════════════════════════


class TestLabels:
    def test_piecework_label(self):
        label = build_assignment_label(
            order_number="SO-1042",
            job_name="Upholstery",
            product_name="Armchair",
            quantity=4,
            pay_type="piece",
        )
        assert label == "SO-1042 • Upholstery • Armchair · 4 pcs"

    def test_hourly_label_uses_multiplier(self):
        label = build_assignment_label(order_number="SO-7", job_name="Cutting", product_name="Sofa", quantity=2)
        assert label == "SO-7 • Cutting • Sofa · x2"

    def test_single_unit_has_no_quantity(self):
        assert build_assignment_label(order_number="SO-1", job_name="Cut", product_name="Chair", quantity=1) == (
            "SO-1 • Cut • Chair"
        )

    def test_category_when_no_product(self):
        label = build_assignment_label(job_name="Frame", category_name="Carpentry", quantity=2.5)
        assert label == "Frame • Carpentry · x2.5"

    def test_category_color_by_id(self):
        assert get_category_color(0) == "#0ea5e9"
        assert get_category_color(7) == "#22c55e"
        assert get_category_color(None) is None

    def test_category_color_by_name_is_stable(self):
        assert get_category_color("a") == "#22c55e"
        assert get_category_color("ab") == "#f97316"
        assert get_category_color("Sewing") == get_category_color("Sewing")


# ═══════════════════════════════════════════════════════════════════
# Clock & units
# ═══════════════════════════════════════════════════════════════════


class TestClock:
    def test_clock_to_minutes(self):
        assert clock_to_minutes("08:30") == 510
        assert clock_to_minutes("9") == 540
        assert clock_to_minutes("abc") == 0

    def test_minutes_to_clock(self):
        assert minutes_to_clock(510) == "08:30"
        assert minutes_to_clock(0) == "00:00"
        assert minutes_to_clock(float("nan")) == "00:00"

    def test_format_time_label(self):
        assert format_time_label(0) == "12:00 AM"
        assert format_time_label(720) == "12:00 PM"
        assert format_time_label(1140) == "7:00 PM"

    def test_format_duration(self):
        assert format_duration(90) == "1h 30m"
        assert format_duration(45) == "45m"
        assert format_duration(120) == "2h"

    def test_time_markers(self):
        markers = build_time_markers(420, 540)

        assert [m.minutes for m in markers] == [420, 450, 480, 510, 540]
        assert [m.is_major for m in markers] == [True, False, True, False, True]
        assert markers[0].label == "7:00 AM"

    def test_js_round_is_half_up(self):
        assert js_round(2.5) == 3
        assert js_round(-2.5) == -2
        assert js_round(2.4) == 2

    def test_convert_to_minutes(self):
        assert convert_to_minutes(2, "hours") == 120
        assert convert_to_minutes(90, "seconds") == 1.5
        assert convert_to_minutes(5) == 300
        assert convert_to_minutes(None) is None

    def test_normalize_pay_type(self):
        assert normalize_pay_type("PIECE") == "piece"
        assert normalize_pay_type("salary") is None
        assert normalize_pay_type(None) is None
