"""Scheduling engine for dayblocks."""

from dayblocks.engine.intervals import to_minutes, overlaps, times_overlap, validate_interval
from dayblocks.engine.conflicts import ConflictDetector, find_conflicts
from dayblocks.engine.layout import compute_layouts, group_overlapping, assign_columns, vertical_layout
from dayblocks.engine.summary import build_daily_summary
from dayblocks.engine.block_store import BlockStore, clamp_limit, lookback_start

__all__ = [
    "to_minutes",
    "overlaps",
    "times_overlap",
    "validate_interval",
    "ConflictDetector",
    "find_conflicts",
    "compute_layouts",
    "group_overlapping",
    "assign_columns",
    "vertical_layout",
    "build_daily_summary",
    "BlockStore",
    "clamp_limit",
    "lookback_start",
]
