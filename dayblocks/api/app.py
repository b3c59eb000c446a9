"""FastAPI web application for dayblocks."""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from dayblocks import __version__
from dayblocks.database.block_repository import BlockRepository
from dayblocks.database.database import get_db
from dayblocks.engine.block_store import BlockStore, lookback_start
from dayblocks.engine.layout import compute_layouts, vertical_layout
from dayblocks.errors import (
    BlockNotFoundError,
    PersistenceError,
    ScheduleConflictError,
    ScheduleError,
    ScheduleValidationError,
)
from dayblocks.integrations.lookups import (
    CategoryLookup,
    InMemoryCategoryLookup,
    InMemoryTaskLookup,
    TaskLookup,
)
from dayblocks.models.block import Block, BlockCreate, BlockPatch, BlockStatus
from dayblocks.models.constants import DEFAULT_PAST_INCOMPLETE_LIMIT, DEFAULT_PIXELS_PER_MINUTE
from dayblocks.models.layout import BlockLayout, LayoutItem, VerticalLayout
from dayblocks.models.summary import DailySummary

logger = logging.getLogger(__name__)

router = APIRouter()


# Request/response models
class DeleteResponse(BaseModel):
    success: bool = True
    id: str


class LayoutRequest(BaseModel):
    """Blocks to lay out side by side."""
    blocks: List[LayoutItem] = Field(default_factory=list)
    pixels_per_minute: float = Field(DEFAULT_PIXELS_PER_MINUTE, gt=0)


class LayoutResponse(BaseModel):
    layouts: Dict[str, BlockLayout] = Field(default_factory=dict)
    vertical: Dict[str, VerticalLayout] = Field(default_factory=dict)


def _http_error(e: ScheduleError) -> HTTPException:
    """Translate a scheduling error into the matching HTTP status."""
    if isinstance(e, ScheduleConflictError):
        return HTTPException(
            status_code=409,
            detail={"message": str(e), "conflicts": jsonable_encoder(e.conflicts)},
        )
    if isinstance(e, BlockNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ScheduleValidationError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, PersistenceError):
        logger.error(f"Persistence failure: {str(e)}")
        return HTTPException(status_code=503, detail="Schedule storage is unavailable")
    return HTTPException(status_code=500, detail=str(e))


def date_today() -> date:
    # Routes take a `date` query parameter, which shadows the type inside them.
    return date.today()


def _layout_response(items, pixels_per_minute: float) -> LayoutResponse:
    return LayoutResponse(
        layouts=compute_layouts(items),
        vertical={str(item.id): vertical_layout(item, pixels_per_minute) for item in items},
    )


# Dependencies
def get_task_lookup(request: Request) -> TaskLookup:
    return request.app.state.task_lookup


def get_category_lookup(request: Request) -> CategoryLookup:
    return request.app.state.category_lookup


def get_block_store(
    db: Session = Depends(get_db),
    task_lookup: TaskLookup = Depends(get_task_lookup),
    category_lookup: CategoryLookup = Depends(get_category_lookup),
) -> BlockStore:
    return BlockStore(BlockRepository(db), task_lookup, category_lookup)


@router.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@router.post("/blocks", response_model=Block, status_code=201)
def create_block(payload: BlockCreate, store: BlockStore = Depends(get_block_store)):
    """Create a block; 409 with the conflicting blocks if the slot is taken."""
    try:
        return store.create(payload)
    except ScheduleError as e:
        raise _http_error(e)


@router.get("/blocks", response_model=List[Block])
def list_blocks(
    start: date,
    end: date,
    status: Optional[List[BlockStatus]] = Query(None),
    task_id: Optional[str] = None,
    category_id: Optional[str] = None,
    store: BlockStore = Depends(get_block_store),
):
    """Blocks dated within [start, end], ordered by date then start time."""
    try:
        return store.query_range(start, end, statuses=status, task_id=task_id, category_id=category_id)
    except ScheduleError as e:
        raise _http_error(e)


@router.get("/blocks/{block_id}", response_model=Block)
def get_block(block_id: str, store: BlockStore = Depends(get_block_store)):
    try:
        return store.get(block_id)
    except ScheduleError as e:
        raise _http_error(e)


@router.patch("/blocks/{block_id}", response_model=Block)
def update_block(block_id: str, patch: BlockPatch, store: BlockStore = Depends(get_block_store)):
    """Partial update; a conflicting move leaves the block unchanged."""
    try:
        return store.update(block_id, patch)
    except ScheduleError as e:
        raise _http_error(e)


@router.delete("/blocks/{block_id}", response_model=DeleteResponse)
def delete_block(block_id: str, store: BlockStore = Depends(get_block_store)):
    try:
        store.delete(block_id)
    except ScheduleError as e:
        raise _http_error(e)
    return DeleteResponse(id=block_id)


@router.get("/tasks/{task_id}/blocks", response_model=List[Block])
def list_task_blocks(task_id: str, store: BlockStore = Depends(get_block_store)):
    try:
        return store.query_by_task(task_id)
    except ScheduleError as e:
        raise _http_error(e)


@router.get("/schedule/day", response_model=List[Block])
def day_schedule(date: Optional[date] = None, store: BlockStore = Depends(get_block_store)):
    """One day's blocks (defaults to today)."""
    try:
        return store.query_day(date or date_today())
    except ScheduleError as e:
        raise _http_error(e)


@router.get("/schedule/week", response_model=Dict[str, List[Block]])
def week_schedule(start: Optional[date] = None, store: BlockStore = Depends(get_block_store)):
    """Seven days from `start` (defaults to this week's Monday), grouped by date."""
    if start is None:
        today = date_today()
        start = today - timedelta(days=today.weekday())
    try:
        week = store.query_week(start)
    except ScheduleError as e:
        raise _http_error(e)
    return {day.isoformat(): blocks for day, blocks in week.items()}


@router.get("/schedule/past-incomplete", response_model=List[Block])
def past_incomplete(
    before: Optional[date] = None,
    days: Optional[int] = None,
    limit: Optional[int] = DEFAULT_PAST_INCOMPLETE_LIMIT,
    store: BlockStore = Depends(get_block_store),
):
    """Unresolved blocks before `before` (default today), optionally within `days`."""
    before_date = before or date_today()
    try:
        return store.query_past_incomplete(
            before_date,
            since_date=lookback_start(before_date, days),
            limit=limit,
        )
    except ScheduleError as e:
        raise _http_error(e)


@router.get("/schedule/conflicts", response_model=List[Block])
def check_conflicts(
    date: date,
    start: str,
    end: str,
    exclude_id: Optional[str] = None,
    store: BlockStore = Depends(get_block_store),
):
    """Pre-check a placement without writing anything."""
    try:
        return store.conflicts(date, start, end, exclude_id=exclude_id)
    except ScheduleError as e:
        raise _http_error(e)


@router.get("/schedule/summary", response_model=DailySummary)
def daily_summary(date: Optional[date] = None, store: BlockStore = Depends(get_block_store)):
    try:
        return store.daily_summary(date or date_today())
    except ScheduleError as e:
        raise _http_error(e)


@router.get("/schedule/layout", response_model=LayoutResponse)
def day_layout(
    date: Optional[date] = None,
    pixels_per_minute: float = Query(DEFAULT_PIXELS_PER_MINUTE, gt=0),
    store: BlockStore = Depends(get_block_store),
):
    """Column and vertical geometry for one day's blocks."""
    try:
        blocks = store.query_day(date or date_today())
    except ScheduleError as e:
        raise _http_error(e)
    return _layout_response(blocks, pixels_per_minute)


@router.post("/layout", response_model=LayoutResponse)
def layout(payload: LayoutRequest):
    """Column and vertical geometry for caller-supplied blocks."""
    try:
        return _layout_response(payload.blocks, payload.pixels_per_minute)
    except ScheduleError as e:
        raise _http_error(e)


def create_app(
    task_lookup: Optional[TaskLookup] = None,
    category_lookup: Optional[CategoryLookup] = None,
) -> FastAPI:
    """Build the API with its task/category lookups attached to app state."""
    application = FastAPI(
        title="dayblocks API",
        description="Per-day block scheduling with conflict checks, overlap layout and daily summaries",
        version=__version__,
    )
    application.state.task_lookup = task_lookup or InMemoryTaskLookup()
    application.state.category_lookup = category_lookup or InMemoryCategoryLookup()
    application.include_router(router)
    return application


app = create_app()
