"""Tests for conflict detection."""

from datetime import date, time, timedelta

from dayblocks.engine.conflicts import ConflictDetector, find_conflicts
from dayblocks.models.block import BlockStatus

DAY = date(2024, 6, 5)


class TestFindConflicts:
    """find_conflicts() over an in-memory block list."""

    def test_returns_overlapping_block(self, make_event):
        a = make_event(title="A", start_time=time(9, 0), end_time=time(10, 0))
        b = make_event(title="B", start_time=time(11, 0), end_time=time(12, 0))

        result = find_conflicts("09:30", "10:30", [a, b])

        assert [c.id for c in result] == [a.id]

    def test_touching_is_not_a_conflict(self, make_event):
        a = make_event(start_time=time(9, 0), end_time=time(10, 0))
        assert find_conflicts("10:00", "11:00", [a]) == []
        assert find_conflicts("08:00", "09:00", [a]) == []

    def test_cancelled_blocks_never_conflict(self, make_event):
        a = make_event(start_time=time(9, 0), end_time=time(10, 0), status=BlockStatus.CANCELLED)
        assert find_conflicts("09:00", "10:00", [a]) == []

    def test_exclude_id_skips_own_placement(self, make_event):
        a = make_event(start_time=time(9, 0), end_time=time(10, 0))
        assert find_conflicts("09:15", "09:45", [a], exclude_id=a.id) == []


class TestConflictDetector:
    """ConflictDetector against the database."""

    def test_scenario_partial_overlap(self, block_repository, make_event):
        """A 09:00-10:00 and B 09:30-10:30: checking B's slot returns A."""
        a = make_event(title="A", start_time=time(9, 0), end_time=time(10, 0))
        detector = ConflictDetector(block_repository)

        result = detector.conflicts(DAY, "09:30", "10:30")

        assert len(result) == 1
        assert result[0].id == a.id

    def test_other_days_are_ignored(self, block_repository, make_event):
        make_event(start_time=time(9, 0), end_time=time(10, 0))
        detector = ConflictDetector(block_repository)

        assert detector.conflicts(DAY + timedelta(days=1), "09:00", "10:00") == []

    def test_containment_and_identical(self, block_repository, make_event):
        a = make_event(start_time=time(9, 0), end_time=time(12, 0))
        detector = ConflictDetector(block_repository)

        assert [c.id for c in detector.conflicts(DAY, "10:00", "11:00")] == [a.id]
        assert [c.id for c in detector.conflicts(DAY, "08:00", "13:00")] == [a.id]
        assert [c.id for c in detector.conflicts(DAY, "09:00", "12:00")] == [a.id]

    def test_empty_day_has_no_conflicts(self, block_repository):
        detector = ConflictDetector(block_repository)
        assert detector.conflicts(date(2030, 1, 1), "00:00", "23:59") == []
