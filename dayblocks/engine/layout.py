"""Side-by-side layout for overlapping blocks on a day timeline.

Blocks are clustered into overlap-groups (connected components of the "intervals
overlap" relation) and each group is packed into columns with greedy interval
coloring. Every block in a group gets the same width: 100 / group column count.
Pure and stateless; nothing is cached between calls.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List

from dayblocks.engine.intervals import overlaps, to_minutes
from dayblocks.errors import ScheduleValidationError
from dayblocks.models.constants import DEFAULT_PIXELS_PER_MINUTE, MIN_BLOCK_HEIGHT_PX
from dayblocks.models.layout import BlockLayout, VerticalLayout


@dataclass(frozen=True)
class Span:
    """A block reduced to its id and minute offsets."""

    id: str
    start: int
    end: int

    def overlaps(self, other: "Span") -> bool:
        return overlaps(self.start, self.end, other.start, other.end)


def _sort_key(span: Span):
    # Earlier first; on equal start the longer block first; id keeps ties stable.
    return (span.start, -span.end, span.id)


def to_spans(blocks: Iterable) -> List[Span]:
    """Normalize anything with id/start_time/end_time into sorted Spans."""
    spans = [Span(str(b.id), to_minutes(b.start_time), to_minutes(b.end_time)) for b in blocks]
    return sorted(spans, key=_sort_key)


def group_overlapping(spans: List[Span]) -> List[List[Span]]:
    """Cluster spans into connected overlap-groups.

    A first pass puts each span in the first group it directly overlaps. That only
    guarantees direct overlap with one member, so groups that are linked through a
    chain (A-B, B-C, not A-C) are then merged until no two groups share an overlap.
    """
    groups: List[List[Span]] = []
    for span in sorted(spans, key=_sort_key):
        for group in groups:
            if any(span.overlaps(member) for member in group):
                group.append(span)
                break
        else:
            groups.append([span])

    merged = True
    while merged:
        merged = False
        for i in range(len(groups) - 1):
            for j in range(i + 1, len(groups)):
                if any(a.overlaps(b) for a in groups[i] for b in groups[j]):
                    groups[i].extend(groups.pop(j))
                    merged = True
                    break
            if merged:
                break

    return [sorted(group, key=_sort_key) for group in groups]


def assign_columns(group: List[Span]) -> Dict[str, int]:
    """Greedy interval coloring: first column where no placed span overlaps.

    Every occupant of a column is checked, not only the latest one: a zero-length
    span can follow a longer span it does not overlap. With spans visited by start
    time this uses exactly as many columns as the largest set of mutually
    overlapping spans.
    """
    columns: List[List[Span]] = []
    assignment: Dict[str, int] = {}
    for span in sorted(group, key=_sort_key):
        for index, occupants in enumerate(columns):
            if not any(span.overlaps(occupant) for occupant in occupants):
                occupants.append(span)
                assignment[span.id] = index
                break
        else:
            columns.append([span])
            assignment[span.id] = len(columns) - 1
    return assignment


def compute_layouts(blocks: Iterable) -> Dict[str, BlockLayout]:
    """Map block id -> column geometry for every block given.

    Block ids must be unique; a duplicate id raises ScheduleValidationError.
    """
    spans = to_spans(blocks)
    seen = set()
    for span in spans:
        if span.id in seen:
            raise ScheduleValidationError(f"Duplicate block id in layout input: {span.id}", field="id")
        seen.add(span.id)

    layouts: Dict[str, BlockLayout] = {}
    for group in group_overlapping(spans):
        assignment = assign_columns(group)
        # Column count is only known once the whole group is placed.
        total_columns = len(set(assignment.values()))
        for span in group:
            column = assignment[span.id]
            layouts[span.id] = BlockLayout(
                block_id=span.id,
                column=column,
                total_columns=total_columns,
                left_pct=column / total_columns * 100,
                width_pct=1 / total_columns * 100,
            )
    return layouts


def vertical_layout(
    block,
    pixels_per_minute: float = DEFAULT_PIXELS_PER_MINUTE,
    min_height: float = MIN_BLOCK_HEIGHT_PX,
) -> VerticalLayout:
    """Top offset and height in pixels; height never drops below `min_height`."""
    if pixels_per_minute <= 0:
        raise ScheduleValidationError("pixels_per_minute must be positive", field="pixels_per_minute")
    start = to_minutes(block.start_time)
    duration = to_minutes(block.end_time) - start
    return VerticalLayout(
        top=start * pixels_per_minute,
        height=max(duration * pixels_per_minute, min_height),
    )
