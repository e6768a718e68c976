"""
Unit tests for the reference context loader.
"""
from types import SimpleNamespace
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from app.application.context_loader import ContextLoader
from app.infrastructure.repositories import SqlAlchemyClientRepository, SqlAlchemyProjectRepository
from database.models import Client, Project
from tests.conftest import ORG_A, ORG_B


def _row(i):
    return SimpleNamespace(id=f"id-{i}", name=f"name-{i}")


class TestContextLoader:

    def test_loads_only_own_organization(self, test_db_session, sample_project, sample_client):
        test_db_session.add(Project(id="p-other", organization_id=ORG_B, name="Other Org Project"))
        test_db_session.add(Client(id="c-archived", organization_id=ORG_A, name="Old Client", status="archived"))
        test_db_session.commit()

        loader = ContextLoader(SqlAlchemyProjectRepository(test_db_session), SqlAlchemyClientRepository(test_db_session))
        context = loader.load(ORG_A)

        assert [(p.id, p.name) for p in context.projects] == [("p1", "Levi Villa")]
        assert [(c.id, c.name) for c in context.clients] == [("c1", "Dana Cohen")]

    def test_fails_open_per_slice(self):
        projects = MagicMock()
        projects.list_recent.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        clients = MagicMock()
        clients.list_recent.return_value = [_row(1)]

        context = ContextLoader(projects, clients).load(ORG_A)

        assert context.projects == []
        assert [c.id for c in context.clients] == ["id-1"]

    def test_caps_each_list_at_twenty(self):
        projects = MagicMock()
        projects.list_recent.return_value = [_row(i) for i in range(30)]
        clients = MagicMock()
        clients.list_recent.return_value = []

        loader = ContextLoader(projects, clients, limit=50)
        context = loader.load(ORG_A)

        assert loader.limit == 20
        assert len(context.projects) == 20
        projects.list_recent.assert_called_once_with(ORG_A, 20)
