"""Layout models for rendering blocks on a day timeline."""

import datetime as dt
from pydantic import BaseModel, Field, field_validator


class LayoutItem(BaseModel):
    """Minimal shape the layout engine needs (id plus interval)."""

    id: str = Field(..., description="Block identifier")
    start_time: dt.time = Field(..., description="Interval start")
    end_time: dt.time = Field(..., description="Interval end")

    @field_validator("end_time")
    @classmethod
    def _validate_end_not_before_start(cls, v, info):
        # Zero-length items are allowed here; only inverted ones are rejected.
        start = info.data.get("start_time")
        if start is not None and v < start:
            raise ValueError("end_time must not be before start_time")
        return v


class BlockLayout(BaseModel):
    """Horizontal placement of a block within its overlap-group."""

    block_id: str
    column: int = Field(..., ge=0, description="Zero-based column within the overlap-group")
    total_columns: int = Field(..., ge=1, description="Columns used by the overlap-group")
    left_pct: float = Field(..., description="Left offset as a percentage of the day column width")
    width_pct: float = Field(..., description="Width as a percentage of the day column width")


class VerticalLayout(BaseModel):
    """Vertical placement of a block on the time axis, in pixels."""

    top: float
    height: float
