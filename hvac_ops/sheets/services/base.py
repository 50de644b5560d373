"""
Sheet Repository Base

Maps the fixed verb set (list-all, list-by-project, get-by-id, create,
update, delete) onto gateway calls for one sheet. Subclasses choose the sheet,
the record model and which verbs the sheet offers.
"""

import logging
from typing import Any, Dict, FrozenSet, Generic, List, Mapping, Type, Union

from ..client import SheetsGateway
from ..config import Action, Sheet
from ..exceptions import UnsupportedOperation
from ..models import RecordT, SheetRecord, decode_many, decode_one


logger = logging.getLogger(__name__)

ALL_VERBS = frozenset({
    Action.GET_ALL,
    Action.GET_BY_PROJECT,
    Action.GET_BY_ID,
    Action.CREATE,
    Action.UPDATE,
    Action.DELETE,
})

# Equipment, work days, payments and photos hang off a project
PROJECT_CHILD_VERBS = frozenset({
    Action.GET_ALL,
    Action.GET_BY_PROJECT,
    Action.CREATE,
    Action.DELETE,
})

RecordInput = Union[RecordT, Mapping[str, Any]]


class SheetRepository(Generic[RecordT]):
    """Typed CRUD verbs for a single sheet. Gateway errors propagate unchanged."""

    sheet: Sheet
    model: Type[RecordT]
    supported: FrozenSet[Action] = ALL_VERBS

    def __init__(self, gateway: SheetsGateway):
        """
        Initialize the repository

        Args:
            gateway: Gateway used for every call
        """
        self.gateway = gateway

    def _require(self, action: Action) -> None:
        if action not in self.supported:
            raise UnsupportedOperation(f"{self.sheet.value} does not support {action.value}")

    def _record_body(self, record: RecordInput) -> Dict[str, Any]:
        if isinstance(record, SheetRecord):
            return record.to_record()
        return {k: v for k, v in dict(record).items() if k != "id"}

    async def get_all(self) -> List[RecordT]:
        """List every record in the sheet, in the order the store returns them"""
        self._require(Action.GET_ALL)
        logger.info(f"Fetching all {self.sheet.value}")
        data = await self.gateway.get({"action": Action.GET_ALL.value, "sheet": self.sheet.value})
        records = decode_many(self.model, data)
        logger.info(f"Found {len(records)} {self.sheet.value}")
        return records

    async def get_by_project(self, project_id: str) -> List[RecordT]:
        """List the records that belong to one project (filtered remotely)"""
        self._require(Action.GET_BY_PROJECT)
        logger.info(f"Fetching {self.sheet.value} for project {project_id}")
        data = await self.gateway.get({
            "action": Action.GET_BY_PROJECT.value,
            "sheet": self.sheet.value,
            "projectId": project_id,
        })
        return decode_many(self.model, data)

    async def get_by_id(self, record_id: str) -> RecordT:
        """
        Fetch one record

        Raises:
            RequestFailed: If the store has no record with that id
        """
        self._require(Action.GET_BY_ID)
        logger.info(f"Fetching {self.sheet.value} record {record_id}")
        data = await self.gateway.get({
            "action": Action.GET_BY_ID.value,
            "sheet": self.sheet.value,
            "id": record_id,
        })
        return decode_one(self.model, data)

    async def create(self, record: RecordInput) -> RecordT:
        """
        Create a record

        Returns:
            The created record, including the id assigned by the store
        """
        self._require(Action.CREATE)
        body = self._record_body(record)
        logger.info(f"Creating {self.sheet.value} record")
        data = await self.gateway.post({
            "action": Action.CREATE.value,
            "sheet": self.sheet.value,
            "record": body,
        })
        created = self._merge_response(body, data)
        logger.info(f"Created {self.sheet.value} record with ID: {created.id}")
        return created

    async def update(self, record_id: str, record: RecordInput) -> RecordT:
        """
        Replace a record. The whole record is sent; fields left out may be
        cleared by the store.
        """
        self._require(Action.UPDATE)
        body = self._record_body(record)
        logger.info(f"Updating {self.sheet.value} record {record_id}")
        data = await self.gateway.post({
            "action": Action.UPDATE.value,
            "sheet": self.sheet.value,
            "id": record_id,
            "record": body,
        })
        return self._merge_response({**body, "id": record_id}, data)

    async def delete(self, record_id: str) -> None:
        """Delete a record. Repeat deletes behave however the store decides."""
        self._require(Action.DELETE)
        logger.info(f"Deleting {self.sheet.value} record {record_id}")
        await self.gateway.post({
            "action": Action.DELETE.value,
            "sheet": self.sheet.value,
            "id": record_id,
        })
        logger.info(f"Deleted {self.sheet.value} record {record_id}")

    def _merge_response(self, submitted: Dict[str, Any], data: Any) -> RecordT:
        # The store may echo the full record or only {id}; the envelope
        # itself comes back when there is no data at all.
        if isinstance(data, dict):
            returned = {k: v for k, v in data.items() if k not in ("success", "error", "data")}
            return decode_one(self.model, {**submitted, **returned})
        return decode_one(self.model, submitted)
