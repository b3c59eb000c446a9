"""Repository for Block database operations."""

import logging
from datetime import date
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError

from dayblocks.errors import PersistenceError
from dayblocks.models.block import Block, BlockStatus, TERMINAL_STATUSES
from dayblocks.database.models import BlockDB, enum_to_value

logger = logging.getLogger(__name__)

_RESOLVED_STATUSES = tuple(sorted(status.value for status in TERMINAL_STATUSES))


class BlockRepository:
    """Repository for Block database operations.

    Durable key-by-id storage with date-range queries. No conflict logic lives here;
    callers check placements before writing.
    """

    def __init__(self, db: Session):
        self.db = db

    def _fetch(self, query, what: str) -> List[Block]:
        try:
            return [row.to_pydantic() for row in query.all()]
        except SQLAlchemyError as e:
            logger.error(f"Failed to load {what}: {type(e).__name__}: {str(e)}")
            raise PersistenceError(f"Failed to load {what}") from e

    def _row(self, block_id: str) -> Optional[BlockDB]:
        try:
            return self.db.query(BlockDB).filter(BlockDB.id == block_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load block {block_id}: {type(e).__name__}: {str(e)}")
            raise PersistenceError(f"Failed to load block {block_id}") from e

    def create(self, block: Block) -> Block:
        """Create a new block."""
        try:
            block_db = BlockDB.from_pydantic(block)
            self.db.add(block_db)
            self.db.commit()
            self.db.refresh(block_db)
            logger.debug(f"Created block {block.id} on {block.date} {block.start_time}-{block.end_time}")
            return block_db.to_pydantic()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create block {block.id}: {type(e).__name__}: {str(e)}")
            raise PersistenceError(f"Failed to create block {block.id}") from e

    def create_batch(self, blocks: List[Block]) -> List[Block]:
        """Create multiple blocks in one transaction."""
        try:
            blocks_db = [BlockDB.from_pydantic(block) for block in blocks]
            self.db.add_all(blocks_db)
            self.db.commit()
            for block_db in blocks_db:
                self.db.refresh(block_db)
            logger.debug(f"Created {len(blocks)} blocks")
            return [block_db.to_pydantic() for block_db in blocks_db]
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create blocks: {type(e).__name__}: {str(e)}")
            raise PersistenceError("Failed to create blocks") from e

    def get(self, block_id: str) -> Optional[Block]:
        """Get a block by ID."""
        row = self._row(block_id)
        return row.to_pydantic() if row else None

    def update(self, block: Block) -> Optional[Block]:
        """Overwrite the mutable fields of an existing block.

        Returns None if the block does not exist.
        """
        row = self._row(block.id)
        if row is None:
            return None
        try:
            row.apply(block)
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Updated block {block.id}")
            return row.to_pydantic()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update block {block.id}: {type(e).__name__}: {str(e)}")
            raise PersistenceError(f"Failed to update block {block.id}") from e

    def delete(self, block_id: str) -> bool:
        """Hard-delete a block. Returns False if it did not exist."""
        row = self._row(block_id)
        if row is None:
            return False
        try:
            self.db.delete(row)
            self.db.commit()
            logger.debug(f"Deleted block {block_id}")
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete block {block_id}: {type(e).__name__}: {str(e)}")
            raise PersistenceError(f"Failed to delete block {block_id}") from e

    def get_by_date(self, day: date, *, active_only: bool = False) -> List[Block]:
        """Get one day's blocks sorted by start_time."""
        query = self.db.query(BlockDB).filter(BlockDB.date == day)
        if active_only:
            query = query.filter(BlockDB.status != BlockStatus.CANCELLED.value)
        query = query.order_by(BlockDB.start_time, BlockDB.end_time, BlockDB.id)
        return self._fetch(query, f"blocks for {day}")

    def get_range(
        self,
        start_date: date,
        end_date: date,
        *,
        statuses: Optional[Iterable[BlockStatus]] = None,
        task_id: Optional[str] = None,
        category_id: Optional[str] = None,
    ) -> List[Block]:
        """Get blocks with start_date <= date <= end_date, sorted by date then start_time."""
        query = self.db.query(BlockDB).filter(BlockDB.date >= start_date, BlockDB.date <= end_date)
        if statuses:
            query = query.filter(BlockDB.status.in_([enum_to_value(s) for s in statuses]))
        if task_id is not None:
            query = query.filter(BlockDB.task_id == task_id)
        if category_id is not None:
            query = query.filter(BlockDB.category_id == category_id)
        query = query.order_by(BlockDB.date, BlockDB.start_time, BlockDB.id)
        return self._fetch(query, f"blocks for {start_date}..{end_date}")

    def get_by_task(self, task_id: str) -> List[Block]:
        """Get all blocks referencing a task, sorted by date then start_time."""
        query = (
            self.db.query(BlockDB)
            .filter(BlockDB.task_id == task_id)
            .order_by(BlockDB.date, BlockDB.start_time, BlockDB.id)
        )
        return self._fetch(query, f"blocks for task {task_id}")

    def get_past_incomplete(
        self,
        before_date: date,
        *,
        since_date: Optional[date] = None,
        limit: int,
    ) -> List[Block]:
        """Get unresolved blocks dated before `before_date` (newest day first)."""
        query = self.db.query(BlockDB).filter(
            BlockDB.date < before_date,
            BlockDB.status.notin_(_RESOLVED_STATUSES),
        )
        if since_date is not None:
            query = query.filter(BlockDB.date >= since_date)
        query = query.order_by(desc(BlockDB.date), BlockDB.start_time, BlockDB.id).limit(limit)
        return self._fetch(query, f"past incomplete blocks before {before_date}")
