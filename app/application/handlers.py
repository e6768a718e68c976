"""Application layer: one handler per action kind, each doing a single write."""
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from app.domain.actions import (
    AddTimeCommand,
    CreateLeadCommand,
    CreateMeetingCommand,
    CreateTaskCommand,
    UpdateProjectStatusCommand,
    ValidatedCommand,
)
from app.domain.commands import ActionKind, ExecutionOutcome, RequestContext
from app.domain.messages import translate
from app.infrastructure.repositories import ProjectRepository, RecordRepository
from database.models import Lead, Meeting, Task, TimeEntry
from utils.time import utc_now, utc_today

logger = logging.getLogger(__name__)

DEFAULT_MEETING_TYPE = "other"


class ActionHandler(ABC):
    """Handler interface for executing one validated action."""

    @abstractmethod
    async def handle(self, command: ValidatedCommand, ctx: RequestContext) -> ExecutionOutcome:
        """Execute the command on behalf of ctx's organization and user."""
        pass


class RecordWriteHandler(ActionHandler):
    """Base for handlers inserting a new record."""

    def __init__(self, records: RecordRepository, projects: ProjectRepository):
        self.records = records
        self.projects = projects

    def _foreign_project(self, project_id: Optional[str], ctx: RequestContext) -> bool:
        """True if project_id is set but not a project of ctx's organization."""
        if not project_id:
            return False
        if self.projects.get(ctx.organization_id, project_id) is None:
            logger.warning(f"🚫 [DISPATCH] project {project_id} not found in org {ctx.organization_id}")
            return True
        return False

    def _created(self, record, ctx: RequestContext) -> ExecutionOutcome:
        saved = self.records.add(record)
        return ExecutionOutcome(True, saved.to_dict(), translate("action.done", ctx.locale))


def project_not_found(ctx: RequestContext) -> ExecutionOutcome:
    return ExecutionOutcome(False, None, translate("project.not_found", ctx.locale))


class CreateTaskHandler(RecordWriteHandler):
    async def handle(self, command: CreateTaskCommand, ctx: RequestContext) -> ExecutionOutcome:
        if self._foreign_project(command.project_id, ctx):
            return project_not_found(ctx)
        task = Task(
            organization_id=ctx.organization_id,
            created_by=ctx.user_id,
            project_id=command.project_id,
            title=command.title,
            description=command.description,
            priority=command.priority.value,
            status="todo",
            due_date=command.due_date,
        )
        return self._created(task, ctx)


class CreateLeadHandler(RecordWriteHandler):
    async def handle(self, command: CreateLeadCommand, ctx: RequestContext) -> ExecutionOutcome:
        lead = Lead(
            organization_id=ctx.organization_id,
            created_by=ctx.user_id,
            name=command.name,
            company=command.company,
            budget=command.budget,
            description=command.description,
            status="new",
        )
        return self._created(lead, ctx)


class AddTimeHandler(RecordWriteHandler):
    async def handle(self, command: AddTimeCommand, ctx: RequestContext) -> ExecutionOutcome:
        if self._foreign_project(command.project_id, ctx):
            return project_not_found(ctx)
        entry = TimeEntry(
            organization_id=ctx.organization_id,
            user_id=ctx.user_id,
            project_id=command.project_id,
            description=command.description,
            hours=command.hours,
            date=command.date or utc_today(),
            is_billable=True,
        )
        return self._created(entry, ctx)


class CreateMeetingHandler(RecordWriteHandler):
    async def handle(self, command: CreateMeetingCommand, ctx: RequestContext) -> ExecutionOutcome:
        meeting = Meeting(
            organization_id=ctx.organization_id,
            created_by=ctx.user_id,
            title=command.title,
            scheduled_at=command.scheduled_at or utc_now(),
            location=command.location,
            meeting_type=command.meeting_type or DEFAULT_MEETING_TYPE,
            status="scheduled",
        )
        return self._created(meeting, ctx)


class UpdateProjectStatusHandler(ActionHandler):
    def __init__(self, projects: ProjectRepository):
        self.projects = projects

    async def handle(self, command: UpdateProjectStatusCommand, ctx: RequestContext) -> ExecutionOutcome:
        project = self.projects.update_status(ctx.organization_id, command.project_id, command.status.value)
        if project is None:
            logger.warning(
                f"🚫 [DISPATCH] status update refused: project {command.project_id} not in org {ctx.organization_id}"
            )
            return project_not_found(ctx)
        return ExecutionOutcome(True, project.to_dict(), translate("action.done", ctx.locale))


class UnknownActionHandler(ActionHandler):
    """No-op branch: never touches a store."""

    async def handle(self, command: ValidatedCommand, ctx: RequestContext) -> ExecutionOutcome:
        return ExecutionOutcome(False, None, translate("unknown.message", ctx.locale))


class ActionDispatcher:
    """Routes a validated command to its handler and reports store failures."""

    def __init__(self, handlers: Dict[ActionKind, ActionHandler]):
        self.handlers = dict(handlers)
        self.handlers.setdefault(ActionKind.UNKNOWN, UnknownActionHandler())

    @classmethod
    def from_repositories(cls, records: RecordRepository, projects: ProjectRepository) -> "ActionDispatcher":
        return cls({
            ActionKind.CREATE_TASK: CreateTaskHandler(records, projects),
            ActionKind.CREATE_LEAD: CreateLeadHandler(records, projects),
            ActionKind.ADD_TIME: AddTimeHandler(records, projects),
            ActionKind.CREATE_MEETING: CreateMeetingHandler(records, projects),
            ActionKind.UPDATE_PROJECT_STATUS: UpdateProjectStatusHandler(projects),
        })

    async def execute(self, command: ValidatedCommand, ctx: RequestContext) -> ExecutionOutcome:
        handler = self.handlers.get(command.kind)
        if handler is None or command.kind == ActionKind.UNKNOWN:
            handler = self.handlers[ActionKind.UNKNOWN]
        try:
            outcome = await handler.handle(command, ctx)
        except SQLAlchemyError as e:
            logger.error(f"❌ [DISPATCH] Store failure for {command.kind.value}: {e}")
            return ExecutionOutcome(False, None, translate("action.failed", ctx.locale))
        logger.info(f"📝 [DISPATCH] {command.kind.value} org={ctx.organization_id} success={outcome.success}")
        return outcome
