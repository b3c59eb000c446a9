"""Block data model for dayblocks."""

import datetime as dt
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class BlockKind(str, Enum):
    """Block kind enumeration."""
    TASK = "task"
    EVENT = "event"


class BlockStatus(str, Enum):
    """Block status enumeration.

    COMPLETED and CANCELLED are terminal; the engine never moves a block between
    statuses on its own.
    """
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    PARTIALLY_COMPLETED = "partially_completed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({BlockStatus.COMPLETED, BlockStatus.CANCELLED})


def truncate_to_minute(value: Optional[dt.time]) -> Optional[dt.time]:
    """Drop seconds/microseconds so all interval math is in whole minutes."""
    if value is None:
        return None
    return value.replace(second=0, microsecond=0, tzinfo=None)


class TaskRef(BaseModel):
    """Snapshot of the external task a block was created for.

    Captured once at creation; later renames of the task are not reflected here.
    """

    task_id: str = Field(..., description="External task identifier")
    title: str = Field(..., description="Task title at creation time")
    parent_title: Optional[str] = Field(None, description="Parent task title at creation time")
    grandparent_title: Optional[str] = Field(None, description="Grandparent task title at creation time")


class CategorySnapshot(BaseModel):
    """Snapshot of a category's display metadata."""

    id: Optional[str] = Field(None, description="External category identifier")
    name: str = Field(..., description="Category display name")
    color: Optional[str] = Field(None, description="Category display color")


class Block(BaseModel):
    """A single time interval on one calendar day."""

    id: str = Field(..., description="Unique block identifier")
    kind: BlockKind = Field(..., description="task (references an external task) or event (standalone)")
    title: str = Field(..., description="Display title")
    date: dt.date = Field(..., description="Calendar day the block lives on")
    start_time: dt.time = Field(..., description="Start of the half-open interval")
    end_time: dt.time = Field(..., description="End of the half-open interval")
    status: BlockStatus = Field(BlockStatus.SCHEDULED, description="Block status")
    task_ref: Optional[TaskRef] = Field(None, description="Denormalized task snapshot")
    category: Optional[CategorySnapshot] = Field(None, description="Denormalized category snapshot")
    comment: Optional[str] = Field(None, description="Free text")
    created_at: Optional[dt.datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[dt.datetime] = Field(None, description="Last update timestamp")

    @field_validator("start_time", "end_time")
    @classmethod
    def _whole_minutes(cls, v):
        return truncate_to_minute(v)

    @field_validator("end_time")
    @classmethod
    def _validate_end_after_start(cls, v, info):
        start = info.data.get("start_time")
        if start is not None and v <= start:
            raise ValueError("end_time must be after start_time")
        return v

    @property
    def task_id(self) -> Optional[str]:
        return self.task_ref.task_id if self.task_ref else None

    @property
    def category_id(self) -> Optional[str]:
        return self.category.id if self.category else None

    @property
    def is_active(self) -> bool:
        """Active blocks take part in conflict checks and aggregation."""
        return self.status != BlockStatus.CANCELLED


class BlockCreate(BaseModel):
    """Input for creating a block.

    Interval and kind requirements are validated by the store so that they surface
    as scheduling errors rather than model errors.
    """

    kind: Optional[BlockKind] = Field(None, description="Defaults to task when task_id is set, else event")
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    title: Optional[str] = Field(None, description="Required for events; ignored for tasks")
    task_id: Optional[str] = Field(None, description="Required for task blocks")
    category_id: Optional[str] = None
    comment: Optional[str] = None
    status: BlockStatus = BlockStatus.SCHEDULED

    @field_validator("start_time", "end_time")
    @classmethod
    def _whole_minutes(cls, v):
        return truncate_to_minute(v)


class BlockPatch(BaseModel):
    """Partial update. Only fields explicitly set are applied."""

    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    status: Optional[BlockStatus] = None
    title: Optional[str] = None
    comment: Optional[str] = None
    category_id: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _whole_minutes(cls, v):
        return truncate_to_minute(v)

    def touches_interval(self) -> bool:
        return bool({"date", "start_time", "end_time"} & self.model_fields_set)
