"""
Projects Service

Handles project records and project deletion. A project owns equipment,
work days, payments and photos through their projectId; whether those go
with it is an explicit choice made by the caller.
"""

import logging
from enum import Enum
from typing import Dict, Optional

from ..config import Action, Sheet
from ..models import Project
from .base import SheetRepository


logger = logging.getLogger(__name__)


class DeletePolicy(Enum):
    """What happens to a project's child records when it is deleted"""
    ORPHAN = "orphan"
    CASCADE = "cascade"


class ProjectsService(SheetRepository[Project]):
    """Service for the Projects sheet"""

    sheet = Sheet.PROJECTS
    model = Project
    supported = frozenset({
        Action.GET_ALL,
        Action.GET_BY_ID,
        Action.CREATE,
        Action.UPDATE,
        Action.DELETE,
    })

    async def delete_project(self, project_id: str, policy: DeletePolicy = DeletePolicy.ORPHAN,
                             children: Optional[Dict[str, SheetRepository]] = None) -> Dict[str, int]:
        """
        Delete a project under an explicit child-record policy

        Args:
            project_id: Project to delete
            policy: ORPHAN leaves child rows in place; CASCADE deletes them first
            children: Child repositories keyed by sheet name (required for CASCADE)

        Returns:
            Number of child records deleted per sheet

        Raises:
            ValueError: If CASCADE is requested without child repositories
        """
        deleted: Dict[str, int] = {}

        if policy is DeletePolicy.CASCADE:
            if not children:
                raise ValueError("Cascade delete needs the child repositories")
            for sheet_name, repository in children.items():
                records = await repository.get_by_project(project_id)
                for record in records:
                    await repository.delete(record.id)
                deleted[sheet_name] = len(records)
                logger.info(f"Deleted {len(records)} {sheet_name} for project {project_id}")
        else:
            logger.warning(f"Deleting project {project_id} without its child records")

        await self.delete(project_id)
        return deleted
