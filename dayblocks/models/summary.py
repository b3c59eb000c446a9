"""Daily planned/effective time summary models."""

import datetime as dt
from typing import List, Optional
from pydantic import BaseModel, Field


class CategorySummary(BaseModel):
    """Minutes for one category on one day."""

    category_id: Optional[str] = None
    category_name: str
    category_color: Optional[str] = None
    planned_minutes: int = 0
    effective_minutes: int = 0


class DailySummary(BaseModel):
    """Planned vs. effective minutes for one day."""

    date: dt.date
    total_planned_minutes: int = 0
    total_effective_minutes: int = 0
    categories: List[CategorySummary] = Field(default_factory=list)
