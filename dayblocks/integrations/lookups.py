"""Task and category lookups consulted when a block snapshot is taken.

The task and category services themselves live outside this package; the store only
needs read access by id. In-memory implementations back the API app and the tests.
"""

from typing import Dict, Iterable, List, Optional, Protocol
from pydantic import BaseModel, Field


class TaskInfo(BaseModel):
    """What the store needs to know about an external task."""

    id: str
    title: str
    parent_chain: List[str] = Field(
        default_factory=list,
        description="Ancestor titles, nearest first (parent, grandparent, ...)",
    )


class CategoryInfo(BaseModel):
    """Display metadata for a category."""

    id: str
    name: str
    color: Optional[str] = None


class TaskLookup(Protocol):
    def get_task(self, task_id: str) -> Optional[TaskInfo]:
        ...


class CategoryLookup(Protocol):
    def get_category(self, category_id: str) -> Optional[CategoryInfo]:
        ...


class InMemoryTaskLookup:
    """Dict-backed TaskLookup."""

    def __init__(self, tasks: Optional[Iterable[TaskInfo]] = None):
        self._tasks: Dict[str, TaskInfo] = {t.id: t for t in (tasks or [])}

    def add(self, task: TaskInfo) -> None:
        self._tasks[task.id] = task

    def get_task(self, task_id: str) -> Optional[TaskInfo]:
        return self._tasks.get(task_id)


class InMemoryCategoryLookup:
    """Dict-backed CategoryLookup."""

    def __init__(self, categories: Optional[Iterable[CategoryInfo]] = None):
        self._categories: Dict[str, CategoryInfo] = {c.id: c for c in (categories or [])}

    def add(self, category: CategoryInfo) -> None:
        self._categories[category.id] = category

    def get_category(self, category_id: str) -> Optional[CategoryInfo]:
        return self._categories.get(category_id)
