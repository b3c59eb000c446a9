"""SQLAlchemy database models for dayblocks."""

from datetime import datetime
from typing import Union, TypeVar, Type
import uuid
from sqlalchemy import Column, String, Date, Time, DateTime, Index

from dayblocks.database.database import Base
from dayblocks.errors import PersistenceError
from dayblocks.models.block import BlockKind, BlockStatus

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string).

    Args:
        enum_obj: Enum instance or string value

    Returns:
        String value of the enum, or the string itself if already a string
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T]) -> T:
    """Convert a stored string to its enum member.

    Args:
        value: String value read from the database
        enum_class: Enum class to convert to

    Returns:
        Enum instance

    Raises:
        PersistenceError: If the stored value is not a member of `enum_class`
    """
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError) as e:
        raise PersistenceError(
            f"Stored value {value!r} is not a valid {enum_class.__name__}"
        ) from e


class BlockDB(Base):
    """Database model for Block.

    Task and category snapshots are flattened into columns.
    """

    __tablename__ = "schedule_blocks"
    __table_args__ = (
        Index("ix_schedule_blocks_date_range", "date", "start_time", "end_time"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    kind = Column(String, nullable=False, default=BlockKind.EVENT.value)
    title = Column(String, nullable=False)

    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    status = Column(String, nullable=False, default=BlockStatus.SCHEDULED.value, index=True)
    comment = Column(String, nullable=True)

    # Task snapshot (captured at creation)
    task_id = Column(String, nullable=True, index=True)
    task_title = Column(String, nullable=True)
    parent_title = Column(String, nullable=True)
    grandparent_title = Column(String, nullable=True)

    # Category snapshot
    category_id = Column(String, nullable=True)
    category_name = Column(String, nullable=True)
    category_color = Column(String, nullable=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from dayblocks.models.block import Block, TaskRef, CategorySnapshot

        task_ref = None
        if self.task_id:
            task_ref = TaskRef(
                task_id=self.task_id,
                title=self.task_title or self.title,
                parent_title=self.parent_title,
                grandparent_title=self.grandparent_title,
            )

        category = None
        if self.category_id or self.category_name:
            category = CategorySnapshot(
                id=self.category_id,
                name=self.category_name or "",
                color=self.category_color,
            )

        return Block(
            id=self.id,
            kind=value_to_enum(self.kind, BlockKind),
            title=self.title,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            status=value_to_enum(self.status, BlockStatus),
            task_ref=task_ref,
            category=category,
            comment=self.comment,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, block):
        """Create database model from Pydantic model."""
        task_ref = block.task_ref
        category = block.category
        return cls(
            id=block.id,
            kind=enum_to_value(block.kind),
            title=block.title,
            date=block.date,
            start_time=block.start_time,
            end_time=block.end_time,
            status=enum_to_value(block.status),
            comment=block.comment,
            task_id=task_ref.task_id if task_ref else None,
            task_title=task_ref.title if task_ref else None,
            parent_title=task_ref.parent_title if task_ref else None,
            grandparent_title=task_ref.grandparent_title if task_ref else None,
            category_id=category.id if category else None,
            category_name=category.name if category else None,
            category_color=category.color if category else None,
            created_at=block.created_at or datetime.utcnow(),
            updated_at=block.updated_at or datetime.utcnow(),
        )

    def apply(self, block) -> None:
        """Copy mutable fields from a Pydantic Block onto this row."""
        category = block.category
        self.title = block.title
        self.date = block.date
        self.start_time = block.start_time
        self.end_time = block.end_time
        self.status = enum_to_value(block.status)
        self.comment = block.comment
        self.category_id = category.id if category else None
        self.category_name = category.name if category else None
        self.category_color = category.color if category else None
