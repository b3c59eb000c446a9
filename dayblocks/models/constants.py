"""Constants for dayblocks.

This module centralizes all magic numbers and default values used throughout the application.
"""

from dayblocks.models.block import BlockStatus


# Past-incomplete review queries
DEFAULT_PAST_INCOMPLETE_LIMIT = 50
MAX_PAST_INCOMPLETE_LIMIT = 200

# Vertical layout
DEFAULT_PIXELS_PER_MINUTE = 1.0
MIN_BLOCK_HEIGHT_PX = 20.0  # keeps very short blocks clickable

# Daily summary
UNCATEGORIZED_NAME = "Uncategorized"

PLANNED_STATUSES = frozenset({
    BlockStatus.SCHEDULED,
    BlockStatus.IN_PROGRESS,
    BlockStatus.PARTIALLY_COMPLETED,
    BlockStatus.COMPLETED,
})
EFFECTIVE_STATUSES = frozenset({
    BlockStatus.IN_PROGRESS,
    BlockStatus.PARTIALLY_COMPLETED,
    BlockStatus.COMPLETED,
})

MINUTES_PER_DAY = 24 * 60
