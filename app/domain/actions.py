"""Typed per-action commands.

Each model is one variant of the validated command union; the dispatcher
only ever receives instances of these, never the raw classifier map.
"""
import math
import datetime as dt
from enum import Enum
from typing import Annotated, ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from app.domain.commands import ActionKind

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=500)]
OptionalText = Optional[Annotated[str, StringConstraints(strip_whitespace=True, max_length=5000)]]


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _coerce_number(value):
    """Accept real numbers and numeric strings; reject booleans and NaN/inf."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    if isinstance(value, str):
        cleaned = value.strip().replace(",", "")
        if not cleaned:
            return None
        value = cleaned
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError("not a number")
    if math.isnan(number) or math.isinf(number):
        raise ValueError("not a finite number")
    return number


def _parse_datetime(value):
    if value is None or isinstance(value, dt.datetime):
        return value
    if not isinstance(value, str):
        raise ValueError("expected ISO datetime string")
    parsed = dt.datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed


def _parse_date(value):
    if value is None:
        return value
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        raise ValueError("expected ISO date string")
    text = value.strip()
    try:
        return dt.date.fromisoformat(text)
    except ValueError:
        return dt.datetime.fromisoformat(text.replace("Z", "+00:00")).date()


def _normalize_enum_text(value):
    if isinstance(value, str):
        return value.strip().lower().replace(" ", "_").replace("-", "_")
    return value


class ActionCommand(BaseModel):
    """Base for validated commands: unknown keys are ignored, never forwarded."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    kind: ClassVar[ActionKind]
    required_fields: ClassVar[tuple] = ()


class CreateTaskCommand(ActionCommand):
    kind: ClassVar[ActionKind] = ActionKind.CREATE_TASK
    required_fields: ClassVar[tuple] = ("title",)

    title: NonEmptyStr
    project_id: Optional[NonEmptyStr] = None
    description: OptionalText = None
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[dt.date] = None

    @field_validator("project_id", "description", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v):
        v = _blank_to_none(_normalize_enum_text(v))
        return TaskPriority.MEDIUM if v is None else v

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v):
        return _parse_date(_blank_to_none(v))


class CreateLeadCommand(ActionCommand):
    kind: ClassVar[ActionKind] = ActionKind.CREATE_LEAD
    required_fields: ClassVar[tuple] = ("name",)

    name: NonEmptyStr
    company: Optional[NonEmptyStr] = None
    budget: Optional[float] = Field(default=None, ge=0)
    description: OptionalText = None

    @field_validator("company", "description", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("budget", mode="before")
    @classmethod
    def coerce_budget(cls, v):
        return _coerce_number(v)


class AddTimeCommand(ActionCommand):
    kind: ClassVar[ActionKind] = ActionKind.ADD_TIME
    required_fields: ClassVar[tuple] = ("hours",)

    hours: float = Field(gt=0)
    description: OptionalText = None
    project_id: Optional[NonEmptyStr] = None
    date: Optional[dt.date] = None

    @field_validator("hours", mode="before")
    @classmethod
    def coerce_hours(cls, v):
        return _coerce_number(v)

    @field_validator("description", "project_id", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("date", mode="before")
    @classmethod
    def parse_entry_date(cls, v):
        return _parse_date(_blank_to_none(v))


class CreateMeetingCommand(ActionCommand):
    kind: ClassVar[ActionKind] = ActionKind.CREATE_MEETING
    required_fields: ClassVar[tuple] = ("title",)

    title: NonEmptyStr
    scheduled_at: Optional[dt.datetime] = None
    location: Optional[NonEmptyStr] = None
    meeting_type: Optional[Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=40)]] = None

    @field_validator("location", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("meeting_type", mode="before")
    @classmethod
    def normalize_meeting_type(cls, v):
        return _blank_to_none(_normalize_enum_text(v))

    @field_validator("scheduled_at", mode="before")
    @classmethod
    def parse_scheduled_at(cls, v):
        return _parse_datetime(_blank_to_none(v))


class UpdateProjectStatusCommand(ActionCommand):
    kind: ClassVar[ActionKind] = ActionKind.UPDATE_PROJECT_STATUS
    required_fields: ClassVar[tuple] = ("project_id", "status")

    project_id: NonEmptyStr
    status: ProjectStatus

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return _normalize_enum_text(v)


class UnknownCommand(ActionCommand):
    """No-op variant: carries nothing and never reaches a store."""

    kind: ClassVar[ActionKind] = ActionKind.UNKNOWN


ValidatedCommand = Union[
    CreateTaskCommand,
    CreateLeadCommand,
    AddTimeCommand,
    CreateMeetingCommand,
    UpdateProjectStatusCommand,
    UnknownCommand,
]

ACTION_SCHEMAS = {
    model.kind: model
    for model in (
        CreateTaskCommand,
        CreateLeadCommand,
        AddTimeCommand,
        CreateMeetingCommand,
        UpdateProjectStatusCommand,
    )
}

# Field lists advertised to the classifier, derived from the models above.
ACTION_FIELDS = {
    kind: {
        "required": list(model.required_fields),
        "optional": [name for name in model.model_fields if name not in model.required_fields],
    }
    for kind, model in ACTION_SCHEMAS.items()
}
