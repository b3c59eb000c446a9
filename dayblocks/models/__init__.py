"""Data models for dayblocks."""

from dayblocks.models.block import (
    Block,
    BlockKind,
    BlockStatus,
    BlockCreate,
    BlockPatch,
    TaskRef,
    CategorySnapshot,
    TERMINAL_STATUSES,
)
from dayblocks.models.layout import LayoutItem, BlockLayout, VerticalLayout
from dayblocks.models.summary import CategorySummary, DailySummary

__all__ = [
    "Block",
    "BlockKind",
    "BlockStatus",
    "BlockCreate",
    "BlockPatch",
    "TaskRef",
    "CategorySnapshot",
    "TERMINAL_STATUSES",
    "LayoutItem",
    "BlockLayout",
    "VerticalLayout",
    "CategorySummary",
    "DailySummary",
]
