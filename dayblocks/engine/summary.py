"""Planned vs. effective minutes per category for one day."""

from datetime import date
from typing import Dict, Iterable, Tuple

from dayblocks.engine.intervals import duration_minutes
from dayblocks.models.block import Block
from dayblocks.models.constants import EFFECTIVE_STATUSES, PLANNED_STATUSES, UNCATEGORIZED_NAME
from dayblocks.models.summary import CategorySummary, DailySummary


def _category_key(block: Block) -> Tuple[str, str]:
    # Key by id when there is one so same-named ad hoc categories stay separate.
    category = block.category
    if category is not None and category.id:
        return ("id", category.id)
    name = category.name if category is not None and category.name else UNCATEGORIZED_NAME
    return ("name", name)


def build_daily_summary(day: date, blocks: Iterable[Block]) -> DailySummary:
    """Aggregate one day's blocks.

    Cancelled blocks are ignored. Planned covers scheduled, in-progress, partially
    completed and completed blocks; effective drops scheduled, so it never exceeds
    planned.
    """
    entries: Dict[Tuple[str, str], CategorySummary] = {}
    total_planned = 0
    total_effective = 0

    for block in blocks:
        if block.date != day:
            continue
        planned = block.status in PLANNED_STATUSES
        effective = block.status in EFFECTIVE_STATUSES
        if not planned:
            continue

        minutes = max(duration_minutes(block.start_time, block.end_time), 0)
        key = _category_key(block)
        entry = entries.get(key)
        if entry is None:
            category = block.category
            entry = CategorySummary(
                category_id=category.id if category else None,
                category_name=(category.name if category and category.name else UNCATEGORIZED_NAME),
                category_color=category.color if category else None,
            )
            entries[key] = entry

        entry.planned_minutes += minutes
        total_planned += minutes
        if effective:
            entry.effective_minutes += minutes
            total_effective += minutes

    categories = sorted(entries.values(), key=lambda c: (-c.planned_minutes, c.category_name))
    return DailySummary(
        date=day,
        total_planned_minutes=total_planned,
        total_effective_minutes=total_effective,
        categories=categories,
    )
