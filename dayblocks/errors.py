"""Structured scheduling errors.

Every failure is raised to the caller; nothing here retries or resolves conflicts.
"""

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from dayblocks.models.block import Block


class ScheduleError(Exception):
    """Base class for errors surfaced by the block store."""


class ScheduleValidationError(ScheduleError, ValueError):
    """Malformed interval, or a field the block's kind requires is missing or unknown."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ScheduleConflictError(ScheduleError):
    """The requested placement overlaps one or more active blocks."""

    def __init__(self, message: str, conflicts: List["Block"]):
        super().__init__(message)
        self.conflicts = list(conflicts)


class BlockNotFoundError(ScheduleError, LookupError):
    """Update/delete referenced an unknown block id."""

    def __init__(self, block_id: str):
        super().__init__(f"Block {block_id} not found")
        self.block_id = block_id


class PersistenceError(ScheduleError):
    """The underlying store could not be reached or rejected the write."""
