"""Conflict detection for candidate placements on a single day."""

from datetime import date
from typing import Iterable, List, Optional

from dayblocks.database.block_repository import BlockRepository
from dayblocks.engine.intervals import TimeLike, interval_minutes, overlaps, to_minutes
from dayblocks.models.block import Block


def find_conflicts(
    start: TimeLike,
    end: TimeLike,
    existing: Iterable[Block],
    exclude_id: Optional[str] = None,
) -> List[Block]:
    """Return active blocks from `existing` that overlap [start, end).

    Cancelled blocks never conflict. `existing` is assumed to be one day's blocks.
    """
    s, e = interval_minutes(start, end)
    return [
        block
        for block in existing
        if block.is_active
        and block.id != exclude_id
        and overlaps(s, e, to_minutes(block.start_time), to_minutes(block.end_time))
    ]


class ConflictDetector:
    """Tests a candidate interval against the stored active blocks of the same day."""

    def __init__(self, repository: BlockRepository):
        self.repository = repository

    def conflicts(
        self,
        day: date,
        start: TimeLike,
        end: TimeLike,
        exclude_id: Optional[str] = None,
    ) -> List[Block]:
        existing = self.repository.get_by_date(day, active_only=True)
        return find_conflicts(start, end, existing, exclude_id=exclude_id)
