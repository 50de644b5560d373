"""
Write-then-reload collections

Every write goes to the store and is followed by a full reload of the
collection; there are no optimistic local edits and no conflict detection.
Screens hold one of these per collection they show.
"""

import logging
from typing import Generic, List, Optional

from ..models import RecordT
from .base import SheetRepository, RecordInput


logger = logging.getLogger(__name__)


class ReloadingCollection(Generic[RecordT]):
    """The last loaded list of one sheet, optionally scoped to a project"""

    def __init__(self, repository: SheetRepository[RecordT], project_id: Optional[str] = None):
        self.repository = repository
        self.project_id = project_id
        self.items: List[RecordT] = []
        self.loaded = False

    async def load(self) -> List[RecordT]:
        if self.project_id is not None:
            items = await self.repository.get_by_project(self.project_id)
        else:
            items = await self.repository.get_all()
        self.items = items
        self.loaded = True
        return items

    async def add(self, record: RecordInput) -> List[RecordT]:
        if self.project_id is not None:
            record = _with_project(record, self.project_id)
        await self.repository.create(record)
        return await self.load()

    async def edit(self, record_id: str, record: RecordInput) -> List[RecordT]:
        await self.repository.update(record_id, record)
        return await self.load()

    async def remove(self, record_id: str) -> List[RecordT]:
        await self.repository.delete(record_id)
        return await self.load()


def _with_project(record: RecordInput, project_id: str) -> RecordInput:
    if isinstance(record, dict):
        return {**record, "projectId": project_id}
    return record.model_copy(update={"project_id": project_id})
