"""Tests for the daily planned/effective aggregation."""

import uuid
from datetime import date, time

from dayblocks.engine.summary import build_daily_summary
from dayblocks.models.block import Block, BlockKind, BlockStatus, CategorySnapshot
from dayblocks.models.constants import UNCATEGORIZED_NAME

DAY = date(2024, 6, 5)
WORK = CategorySnapshot(id="cat-work", name="Work", color="#3B82F6")
OTHER_WORK = CategorySnapshot(id="cat-other-work", name="Work", color="#F97316")
HEALTH = CategorySnapshot(id="cat-health", name="Health", color="#10B981")


def block(start, end, status=BlockStatus.SCHEDULED, category=None, day=DAY):
    return Block(
        id=str(uuid.uuid4()),
        kind=BlockKind.EVENT,
        title="b",
        date=day,
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        status=status,
        category=category,
    )


class TestDailySummary:
    """build_daily_summary()"""

    def test_empty_day(self):
        summary = build_daily_summary(DAY, [])
        assert summary.date == DAY
        assert summary.total_planned_minutes == 0
        assert summary.total_effective_minutes == 0
        assert summary.categories == []

    def test_completed_block_counts_as_planned_and_effective(self):
        summary = build_daily_summary(DAY, [block("09:00", "10:30", BlockStatus.COMPLETED, WORK)])

        assert summary.total_planned_minutes == 90
        assert summary.total_effective_minutes == 90
        assert len(summary.categories) == 1
        work = summary.categories[0]
        assert work.category_name == "Work"
        assert work.category_color == "#3B82F6"
        assert (work.planned_minutes, work.effective_minutes) == (90, 90)

    def test_scheduled_block_is_planned_only(self):
        summary = build_daily_summary(DAY, [block("09:00", "10:00", BlockStatus.SCHEDULED, WORK)])
        assert summary.total_planned_minutes == 60
        assert summary.total_effective_minutes == 0

    def test_in_progress_and_partial_count_as_effective(self):
        summary = build_daily_summary(DAY, [
            block("09:00", "09:30", BlockStatus.IN_PROGRESS, WORK),
            block("10:00", "10:45", BlockStatus.PARTIALLY_COMPLETED, WORK),
        ])
        assert summary.total_effective_minutes == 75

    def test_cancelled_blocks_are_ignored(self):
        summary = build_daily_summary(DAY, [
            block("09:00", "10:00", BlockStatus.CANCELLED, WORK),
            block("11:00", "11:30", BlockStatus.COMPLETED, HEALTH),
        ])
        assert summary.total_planned_minutes == 30
        assert [c.category_name for c in summary.categories] == ["Health"]

    def test_other_days_are_ignored(self):
        summary = build_daily_summary(DAY, [block("09:00", "10:00", category=WORK, day=date(2024, 6, 6))])
        assert summary.total_planned_minutes == 0

    def test_same_name_different_id_stay_separate(self):
        summary = build_daily_summary(DAY, [
            block("09:00", "10:00", category=WORK),
            block("10:00", "10:30", category=OTHER_WORK),
        ])
        assert sorted((c.category_id, c.planned_minutes) for c in summary.categories) == [
            ("cat-other-work", 30),
            ("cat-work", 60),
        ]

    def test_uncategorized_bucket(self):
        summary = build_daily_summary(DAY, [block("09:00", "09:20"), block("13:00", "13:10")])
        assert len(summary.categories) == 1
        assert summary.categories[0].category_id is None
        assert summary.categories[0].category_name == UNCATEGORIZED_NAME
        assert summary.categories[0].planned_minutes == 30

    def test_categories_sorted_by_planned_then_name(self):
        summary = build_daily_summary(DAY, [
            block("08:00", "08:30", category=HEALTH),
            block("09:00", "10:00", category=WORK),
            block("11:00", "11:30"),
        ])
        assert [c.category_name for c in summary.categories] == ["Work", "Health", UNCATEGORIZED_NAME]

    def test_effective_never_exceeds_planned(self):
        statuses = list(BlockStatus)
        blocks = [block(f"{8 + i:02d}:00", f"{8 + i:02d}:40", status, WORK) for i, status in enumerate(statuses)]
        summary = build_daily_summary(DAY, blocks)

        assert summary.total_effective_minutes <= summary.total_planned_minutes
        for category in summary.categories:
            assert category.effective_minutes <= category.planned_minutes
        assert summary.total_planned_minutes == sum(c.planned_minutes for c in summary.categories)
