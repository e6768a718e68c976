from sqlalchemy import (
    Column, String, DateTime, Date, Text, Boolean, Float, JSON, UniqueConstraint,
)
from sqlalchemy.orm import declarative_base
import uuid
from datetime import date, datetime, timezone


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SerializableMixin:
    """Column-level JSON-friendly export of a row."""

    def to_dict(self) -> dict:
        out = {}
        for column in self.__table__.columns:
            value = getattr(self, column.name)
            if isinstance(value, (datetime, date)):
                value = value.isoformat()
            out[column.name] = value
        return out


Base = declarative_base(cls=SerializableMixin)


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(64), primary_key=True, default=_new_id)
    organization_id = Column(String(64), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    company = Column(String(200))
    status = Column(String(20), nullable=False, default="active")
    created_by = Column(String(64))
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)
    deleted_at = Column(DateTime(timezone=True))


class Project(Base):
    __tablename__ = "projects"

    id = Column(String(64), primary_key=True, default=_new_id)
    organization_id = Column(String(64), nullable=False, index=True)
    client_id = Column(String(64))
    name = Column(String(200), nullable=False)
    description = Column(Text)
    status = Column(String(20), nullable=False, default="planning")
    created_by = Column(String(64))
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)
    deleted_at = Column(DateTime(timezone=True))


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(64), primary_key=True, default=_new_id)
    organization_id = Column(String(64), nullable=False, index=True)
    project_id = Column(String(64))
    title = Column(String(300), nullable=False)
    description = Column(Text)
    status = Column(String(20), nullable=False, default="todo")
    priority = Column(String(20), nullable=False, default="medium")
    due_date = Column(Date)
    created_by = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)


class Lead(Base):
    __tablename__ = "leads"

    id = Column(String(64), primary_key=True, default=_new_id)
    organization_id = Column(String(64), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    company = Column(String(200))
    budget = Column(Float)
    description = Column(Text)
    status = Column(String(20), nullable=False, default="new")
    created_by = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)


class TimeEntry(Base):
    __tablename__ = "time_entries"

    id = Column(String(64), primary_key=True, default=_new_id)
    organization_id = Column(String(64), nullable=False, index=True)
    project_id = Column(String(64))
    user_id = Column(String(64), nullable=False)
    description = Column(Text)
    hours = Column(Float, nullable=False)
    date = Column(Date, nullable=False)
    is_billable = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)


class Meeting(Base):
    __tablename__ = "meetings"

    id = Column(String(64), primary_key=True, default=_new_id)
    organization_id = Column(String(64), nullable=False, index=True)
    project_id = Column(String(64))
    title = Column(String(200), nullable=False)
    scheduled_at = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(300))
    meeting_type = Column(String(40), nullable=False, default="other")
    status = Column(String(20), nullable=False, default="scheduled")
    created_by = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)


class CommandReceipt(Base):
    """Stored response of a successfully executed command, keyed by the
    client-supplied idempotency key within an organization."""
    __tablename__ = "command_receipts"
    __table_args__ = (UniqueConstraint("organization_id", "idempotency_key", name="uq_receipt_org_key"),)

    id = Column(String(64), primary_key=True, default=_new_id)
    organization_id = Column(String(64), nullable=False)
    idempotency_key = Column(String(200), nullable=False)
    user_id = Column(String(64), nullable=False)
    request_hash = Column(String(64), nullable=False)
    action = Column(String(40), nullable=False)
    response = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
