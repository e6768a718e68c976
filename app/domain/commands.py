"""Domain layer: value objects flowing through the command interpreter."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

Primitive = Union[str, int, float, bool, None]


class ActionKind(str, Enum):
    """Closed set of actions the interpreter may perform."""

    CREATE_TASK = "create_task"
    CREATE_LEAD = "create_lead"
    ADD_TIME = "add_time"
    CREATE_MEETING = "create_meeting"
    UPDATE_PROJECT_STATUS = "update_project_status"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "ActionKind":
        """Map an arbitrary oracle value onto the closed set; anything else is UNKNOWN."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return cls.UNKNOWN
        return cls.UNKNOWN


@dataclass(frozen=True)
class NamedRef:
    id: str
    name: str


@dataclass(frozen=True)
class ReferenceContext:
    """Bounded snapshot of entities used to resolve free-text mentions."""

    projects: List[NamedRef] = field(default_factory=list)
    clients: List[NamedRef] = field(default_factory=list)


@dataclass(frozen=True)
class RequestContext:
    """Tenant and user a command runs on behalf of."""

    organization_id: str
    user_id: str
    locale: str


@dataclass
class ParsedCommand:
    """Untrusted classifier output, not yet checked against any schema."""

    action: ActionKind
    data: Dict[str, Primitive] = field(default_factory=dict)
    summary: str = ""


@dataclass
class ExecutionOutcome:
    success: bool
    record: Optional[Dict[str, Any]] = None
    message: str = ""


@dataclass
class CommandResponse:
    action: ActionKind
    summary: str
    success: bool
    result: Dict[str, Any]
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.value,
            "summary": self.summary,
            "success": self.success,
            "result": self.result,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "CommandResponse":
        return cls(
            action=ActionKind.parse(payload.get("action")),
            summary=str(payload.get("summary") or ""),
            success=bool(payload.get("success")),
            result=dict(payload.get("result") or {}),
            message=str(payload.get("message") or ""),
        )
