"""Application layer: reference context used to resolve names to ids."""
import logging
from typing import Callable, List

from sqlalchemy.exc import SQLAlchemyError

from app.config import MAX_CONTEXT_ITEMS
from app.domain.commands import NamedRef, ReferenceContext
from app.infrastructure.repositories import ClientRepository, ProjectRepository

logger = logging.getLogger(__name__)


class ContextLoader:
    """Reads a bounded snapshot of projects and clients for one organization.

    Fails open: a failed read yields an empty slice instead of aborting.
    """

    def __init__(self, projects: ProjectRepository, clients: ClientRepository, limit: int = MAX_CONTEXT_ITEMS):
        self.projects = projects
        self.clients = clients
        self.limit = max(1, min(limit, MAX_CONTEXT_ITEMS))

    def load(self, organization_id: str) -> ReferenceContext:
        projects = self._safe_slice("projects", lambda: self.projects.list_recent(organization_id, self.limit))
        clients = self._safe_slice("clients", lambda: self.clients.list_recent(organization_id, self.limit))
        logger.info(f"📚 [CONTEXT] org={organization_id} projects={len(projects)} clients={len(clients)}")
        return ReferenceContext(projects=projects, clients=clients)

    def _safe_slice(self, name: str, query: Callable[[], list]) -> List[NamedRef]:
        try:
            rows = query() or []
        except SQLAlchemyError as e:
            logger.warning(f"⚠️ [CONTEXT] Could not load {name}, continuing without them: {e}")
            return []
        return [NamedRef(id=str(row.id), name=str(row.name)) for row in rows[:self.limit]]
