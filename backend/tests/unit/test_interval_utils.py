"""
Unit tests for half-open interval helpers.
"""

from utils.interval_utils import (
    Interval, intersect_intervals, intervals_overlap, merge_intervals, overlaps_any,
)


class TestIntervalsOverlap:
    """Test overlap detection between two intervals."""

    def test_no_overlap(self):
        assert not intervals_overlap(Interval(540, 600), Interval(660, 720))

    def test_partial_overlap(self):
        assert intervals_overlap(Interval(540, 660), Interval(600, 720))

    def test_containment(self):
        assert intervals_overlap(Interval(540, 720), Interval(600, 660))

    def test_touching_ends_do_not_overlap(self):
        """An appointment ending at 10:00 does not block a slot starting at 10:00."""
        assert not intervals_overlap(Interval(540, 600), Interval(600, 660))
        assert not intervals_overlap(Interval(600, 660), Interval(540, 600))

    def test_overlaps_any(self):
        occupied = [Interval(540, 570), Interval(660, 690)]
        assert overlaps_any(Interval(650, 680), occupied)
        assert not overlaps_any(Interval(570, 660), occupied)
        assert not overlaps_any(Interval(570, 660), [])


class TestMergeIntervals:
    """Test union-merge of interval sets."""

    def test_overlapping_entries_merge(self):
        assert merge_intervals([Interval(540, 720), Interval(660, 840)]) == [Interval(540, 840)]

    def test_touching_entries_merge(self):
        assert merge_intervals([Interval(540, 600), Interval(600, 660)]) == [Interval(540, 660)]

    def test_disjoint_entries_are_sorted(self):
        result = merge_intervals([Interval(900, 1140), Interval(540, 780)])
        assert result == [Interval(540, 780), Interval(900, 1140)]

    def test_contained_entry_is_absorbed(self):
        assert merge_intervals([Interval(540, 1080), Interval(600, 660)]) == [Interval(540, 1080)]

    def test_empty_and_inverted_are_dropped(self):
        assert merge_intervals([Interval(600, 600), Interval(700, 650)]) == []

    def test_empty_input(self):
        assert merge_intervals([]) == []


class TestIntersectIntervals:
    """Test intersection of two interval sets."""

    def test_doctor_inside_clinic_hours(self):
        result = intersect_intervals([Interval(540, 780)], [Interval(480, 1200)])
        assert result == [Interval(540, 780)]

    def test_doctor_exceeds_clinic_hours(self):
        result = intersect_intervals([Interval(420, 1260)], [Interval(540, 1080)])
        assert result == [Interval(540, 1080)]

    def test_split_shift_against_single_opening(self):
        doctor = [Interval(540, 780), Interval(900, 1200)]
        clinic = [Interval(600, 1140)]
        assert intersect_intervals(doctor, clinic) == [Interval(600, 780), Interval(900, 1140)]

    def test_no_common_time(self):
        assert intersect_intervals([Interval(480, 540)], [Interval(540, 1080)]) == []

    def test_inputs_are_normalized_first(self):
        doctor = [Interval(660, 840), Interval(540, 720)]
        assert intersect_intervals(doctor, [Interval(0, 1440)]) == [Interval(540, 840)]

    def test_empty_side(self):
        assert intersect_intervals([], [Interval(540, 1080)]) == []
        assert intersect_intervals([Interval(540, 1080)], []) == []

    def test_length(self):
        assert Interval(540, 600).length == 60
