"""Infrastructure layer: Repository interfaces and implementations.

Every method takes the organization id explicitly; nothing here falls back
to a default tenant.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, TypeVar
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from database.models import Client, CommandReceipt, Project
from utils.time import utc_now

T = TypeVar("T")


class ProjectRepository(ABC):
    """Repository interface for Project operations."""

    @abstractmethod
    def list_recent(self, organization_id: str, limit: int = 20) -> List[Project]:
        """Non-deleted projects of an organization, most recently updated first."""
        pass

    @abstractmethod
    def get(self, organization_id: str, project_id: str) -> Optional[Project]:
        """Get a project only if it belongs to the organization."""
        pass

    @abstractmethod
    def update_status(self, organization_id: str, project_id: str, status: str) -> Optional[Project]:
        """Set a project's status; None if no such project in the organization."""
        pass


class ClientRepository(ABC):
    """Repository interface for Client operations."""

    @abstractmethod
    def list_recent(self, organization_id: str, limit: int = 20) -> List[Client]:
        """Non-archived clients of an organization."""
        pass


class RecordRepository(ABC):
    """Insert-only store for tasks, leads, time entries and meetings."""

    @abstractmethod
    def add(self, record: T) -> T:
        """Persist a new record and return it refreshed."""
        pass


class ReceiptRepository(ABC):
    """Stored responses keyed by client-supplied idempotency keys."""

    @abstractmethod
    def get(self, organization_id: str, idempotency_key: str) -> Optional[CommandReceipt]:
        pass

    @abstractmethod
    def save(self, receipt: CommandReceipt) -> bool:
        """Store a receipt; False if one already exists for the key."""
        pass


class SqlAlchemyProjectRepository(ProjectRepository):
    """SQLAlchemy implementation of ProjectRepository."""

    def __init__(self, db: Session):
        self.db = db

    def list_recent(self, organization_id: str, limit: int = 20) -> List[Project]:
        try:
            return self.db.query(Project).filter(
                Project.organization_id == organization_id,
                Project.deleted_at.is_(None)
            ).order_by(Project.updated_at.desc()).limit(limit).all()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def get(self, organization_id: str, project_id: str) -> Optional[Project]:
        return self.db.query(Project).filter(
            Project.id == project_id,
            Project.organization_id == organization_id,
            Project.deleted_at.is_(None)
        ).first()

    def update_status(self, organization_id: str, project_id: str, status: str) -> Optional[Project]:
        project = self.get(organization_id, project_id)
        if project is None:
            return None
        try:
            project.status = status
            project.updated_at = utc_now()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(project)
        return project


class SqlAlchemyClientRepository(ClientRepository):
    """SQLAlchemy implementation of ClientRepository."""

    def __init__(self, db: Session):
        self.db = db

    def list_recent(self, organization_id: str, limit: int = 20) -> List[Client]:
        try:
            return self.db.query(Client).filter(
                Client.organization_id == organization_id,
                Client.deleted_at.is_(None),
                Client.status != "archived"
            ).order_by(Client.updated_at.desc()).limit(limit).all()
        except SQLAlchemyError:
            self.db.rollback()
            raise


class SqlAlchemyRecordRepository(RecordRepository):
    """SQLAlchemy implementation of RecordRepository."""

    def __init__(self, db: Session):
        self.db = db

    def add(self, record: T) -> T:
        try:
            self.db.add(record)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(record)
        return record


class SqlAlchemyReceiptRepository(ReceiptRepository):
    """SQLAlchemy implementation of ReceiptRepository."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, organization_id: str, idempotency_key: str) -> Optional[CommandReceipt]:
        return self.db.query(CommandReceipt).filter(
            CommandReceipt.organization_id == organization_id,
            CommandReceipt.idempotency_key == idempotency_key
        ).first()

    def save(self, receipt: CommandReceipt) -> bool:
        try:
            self.db.add(receipt)
            self.db.commit()
            return True
        except SQLAlchemyError:
            self.db.rollback()
            if self.get(receipt.organization_id, receipt.idempotency_key) is not None:
                return False
            raise
