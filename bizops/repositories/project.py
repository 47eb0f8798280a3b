"""Project repository."""

from bizops.domain.project import Project
from bizops.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    model = Project
    entity_name = "Project"
