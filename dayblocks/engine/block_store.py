"""Block store: validated, conflict-checked CRUD and queries over blocks.

Writes are check-then-act (conflict query, then persist) without a surrounding
transaction, so two concurrent writers can both pass the check. Callers that need
stronger guarantees must serialize writes themselves.
"""

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from dayblocks.database.block_repository import BlockRepository
from dayblocks.engine.conflicts import ConflictDetector, find_conflicts
from dayblocks.engine.intervals import TimeLike, validate_interval
from dayblocks.engine.layout import compute_layouts
from dayblocks.engine.summary import build_daily_summary
from dayblocks.errors import (
    BlockNotFoundError,
    ScheduleConflictError,
    ScheduleValidationError,
)
from dayblocks.integrations.lookups import CategoryLookup, TaskLookup
from dayblocks.models.block import (
    Block,
    BlockCreate,
    BlockKind,
    BlockPatch,
    BlockStatus,
    CategorySnapshot,
    TaskRef,
)
from dayblocks.models.constants import (
    DEFAULT_PAST_INCOMPLETE_LIMIT,
    MAX_PAST_INCOMPLETE_LIMIT,
)
from dayblocks.models.layout import BlockLayout
from dayblocks.models.summary import DailySummary

logger = logging.getLogger(__name__)

_NON_NULLABLE_PATCH_FIELDS = ("date", "start_time", "end_time", "status", "title")


def clamp_limit(limit: Optional[int]) -> int:
    """Missing or non-positive limits fall back to the default; large ones are capped."""
    if limit is None or limit <= 0:
        return DEFAULT_PAST_INCOMPLETE_LIMIT
    return min(limit, MAX_PAST_INCOMPLETE_LIMIT)


def lookback_start(before_date: date, days: Optional[int]) -> Optional[date]:
    """First day of a `days`-long look-back window ending before `before_date`."""
    if days is None or days <= 0:
        return None
    return before_date - timedelta(days=days)


class BlockStore:
    """Entry point for every block write and query."""

    def __init__(
        self,
        repository: BlockRepository,
        task_lookup: TaskLookup,
        category_lookup: CategoryLookup,
        conflict_detector: Optional[ConflictDetector] = None,
    ):
        self.repository = repository
        self.task_lookup = task_lookup
        self.category_lookup = category_lookup
        self.conflict_detector = conflict_detector or ConflictDetector(repository)

    # -- snapshots ---------------------------------------------------------

    def _snapshot_task(self, task_id: str) -> TaskRef:
        task = self.task_lookup.get_task(task_id)
        if task is None:
            raise ScheduleValidationError(f"Task {task_id} does not exist", field="task_id")
        chain = task.parent_chain
        return TaskRef(
            task_id=task.id,
            title=task.title,
            parent_title=chain[0] if len(chain) > 0 else None,
            grandparent_title=chain[1] if len(chain) > 1 else None,
        )

    def _snapshot_category(self, category_id: str) -> CategorySnapshot:
        category = self.category_lookup.get_category(category_id)
        if category is None:
            raise ScheduleValidationError(f"Category {category_id} does not exist", field="category_id")
        return CategorySnapshot(id=category.id, name=category.name, color=category.color)

    # -- validation --------------------------------------------------------

    def _build_block(self, data: BlockCreate) -> Block:
        validate_interval(data.start_time, data.end_time)

        kind = data.kind or (BlockKind.TASK if data.task_id else BlockKind.EVENT)
        task_ref = None
        if kind == BlockKind.TASK:
            if not data.task_id:
                raise ScheduleValidationError("task_id is required for task blocks", field="task_id")
            task_ref = self._snapshot_task(data.task_id)
            title = task_ref.title
        else:
            title = (data.title or "").strip()
            if not title:
                raise ScheduleValidationError("title is required for event blocks", field="title")

        category = self._snapshot_category(data.category_id) if data.category_id else None
        now = datetime.utcnow()
        return Block(
            id=str(uuid.uuid4()),
            kind=kind,
            title=title,
            date=data.date,
            start_time=data.start_time,
            end_time=data.end_time,
            status=data.status,
            task_ref=task_ref,
            category=category,
            comment=(data.comment or "").strip() or None,
            created_at=now,
            updated_at=now,
        )

    def _ensure_no_conflict(
        self,
        day: date,
        start: TimeLike,
        end: TimeLike,
        exclude_id: Optional[str] = None,
        pending: Sequence[Block] = (),
    ) -> None:
        conflicts = self.conflict_detector.conflicts(day, start, end, exclude_id=exclude_id)
        conflicts += find_conflicts(start, end, [b for b in pending if b.date == day])
        if conflicts:
            titles = ", ".join(c.title for c in conflicts)
            logger.info(f"Rejected placement on {day} {start}-{end}: overlaps {len(conflicts)} block(s)")
            raise ScheduleConflictError(f"Time conflict on {day}: overlaps {titles}", conflicts)

    # -- writes ------------------------------------------------------------

    def create(self, data: BlockCreate) -> Block:
        """Validate, conflict-check, snapshot and persist a new block."""
        block = self._build_block(data)
        if block.is_active:
            self._ensure_no_conflict(block.date, block.start_time, block.end_time)
        return self.repository.create(block)

    def create_batch(self, items: Iterable[BlockCreate]) -> List[Block]:
        """Create several blocks, all or nothing.

        Each candidate is checked against stored blocks and the candidates before it.
        """
        built: List[Block] = []
        for data in items:
            block = self._build_block(data)
            if block.is_active:
                self._ensure_no_conflict(block.date, block.start_time, block.end_time, pending=built)
            built.append(block)
        if not built:
            return []
        return self.repository.create_batch(built)

    def update(self, block_id: str, patch: BlockPatch) -> Block:
        """Apply the fields set on `patch`; fields left unset are untouched."""
        current = self.get(block_id)
        changes = patch.model_dump(exclude_unset=True)

        for field in _NON_NULLABLE_PATCH_FIELDS:
            if field in changes and changes[field] is None:
                raise ScheduleValidationError(f"{field} cannot be cleared", field=field)

        updates = {key: changes[key] for key in ("date", "start_time", "end_time", "status", "comment") if key in changes}
        if "title" in changes:
            title = changes["title"].strip()
            if not title:
                raise ScheduleValidationError("title cannot be blank", field="title")
            updates["title"] = title
        if "category_id" in changes:
            category_id = changes["category_id"]
            updates["category"] = self._snapshot_category(category_id) if category_id else None

        updated = current.model_copy(update=updates)
        validate_interval(updated.start_time, updated.end_time)

        reopened = current.status == BlockStatus.CANCELLED and updated.is_active
        if updated.is_active and (patch.touches_interval() or reopened):
            self._ensure_no_conflict(updated.date, updated.start_time, updated.end_time, exclude_id=block_id)

        result = self.repository.update(updated)
        if result is None:
            raise BlockNotFoundError(block_id)
        return result

    def set_status(self, block_id: str, status: BlockStatus) -> Block:
        return self.update(block_id, BlockPatch(status=status))

    def delete(self, block_id: str) -> None:
        """Hard-delete a block."""
        if not self.repository.delete(block_id):
            raise BlockNotFoundError(block_id)

    # -- queries -----------------------------------------------------------

    def get(self, block_id: str) -> Block:
        block = self.repository.get(block_id)
        if block is None:
            raise BlockNotFoundError(block_id)
        return block

    def conflicts(
        self,
        day: date,
        start: TimeLike,
        end: TimeLike,
        exclude_id: Optional[str] = None,
    ) -> List[Block]:
        """Active blocks that a placement of [start, end) on `day` would overlap."""
        validate_interval(start, end)
        return self.conflict_detector.conflicts(day, start, end, exclude_id=exclude_id)

    def query_range(
        self,
        start_date: date,
        end_date: date,
        *,
        statuses: Optional[Iterable[BlockStatus]] = None,
        task_id: Optional[str] = None,
        category_id: Optional[str] = None,
    ) -> List[Block]:
        return self.repository.get_range(
            start_date,
            end_date,
            statuses=statuses,
            task_id=task_id,
            category_id=category_id,
        )

    def query_day(self, day: date) -> List[Block]:
        return self.repository.get_by_date(day)

    def query_week(self, week_start: date) -> Dict[date, List[Block]]:
        """Blocks for the seven days starting at `week_start`, grouped by date."""
        week: Dict[date, List[Block]] = {}
        for block in self.query_range(week_start, week_start + timedelta(days=6)):
            week.setdefault(block.date, []).append(block)
        return week

    def query_by_task(self, task_id: str) -> List[Block]:
        return self.repository.get_by_task(task_id)

    def query_past_incomplete(
        self,
        before_date: date,
        since_date: Optional[date] = None,
        limit: Optional[int] = DEFAULT_PAST_INCOMPLETE_LIMIT,
    ) -> List[Block]:
        """Unresolved blocks before `before_date`, newest day first, for review."""
        return self.repository.get_past_incomplete(
            before_date,
            since_date=since_date,
            limit=clamp_limit(limit),
        )

    def daily_summary(self, day: date) -> DailySummary:
        return build_daily_summary(day, self.query_day(day))

    def day_layout(self, day: date) -> Dict[str, BlockLayout]:
        return compute_layouts(self.query_day(day))
