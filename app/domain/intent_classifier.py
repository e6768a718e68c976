"""Domain layer: intent classification using Strategy pattern."""
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from app.domain.actions import ACTION_FIELDS
from app.domain.commands import ActionKind, ParsedCommand, ReferenceContext
from app.domain.messages import translate

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = (str, int, float, bool, type(None))


class ClassificationUnavailable(Exception):
    """The classification oracle could not be reached or answered with an error."""


class IntentClassifier(ABC):
    """Strategy interface for classifying user intents."""

    @abstractmethod
    async def classify(self, message: str, context: ReferenceContext, locale: str) -> ParsedCommand:
        """Classify message into a ParsedCommand.

        Raises ClassificationUnavailable only for transport/oracle failures;
        anything the oracle says that cannot be understood becomes UNKNOWN.
        """


def not_understood(locale: str) -> ParsedCommand:
    return ParsedCommand(ActionKind.UNKNOWN, {}, translate("summary.not_understood", locale))


def not_configured(locale: str) -> ParsedCommand:
    return ParsedCommand(ActionKind.UNKNOWN, {}, translate("summary.not_configured", locale))


def describe_actions() -> str:
    lines = []
    for kind, fields in ACTION_FIELDS.items():
        required = ", ".join(fields["required"])
        optional = ", ".join(f"{name}?" for name in fields["optional"])
        lines.append(f"- {kind.value}: {{ {', '.join(p for p in (required, optional) if p)} }}")
    lines.append(f"- {ActionKind.UNKNOWN.value}: {{}} (when the request matches none of the above)")
    return "\n".join(lines)


def describe_context(context: ReferenceContext) -> Dict[str, str]:
    projects = ", ".join(f"{p.name} (id: {p.id})" for p in context.projects)
    clients = ", ".join(f"{c.name} (id: {c.id})" for c in context.clients)
    return {"projects": projects or "none", "clients": clients or "none"}


def build_system_prompt(context: ReferenceContext, locale: str, today: str) -> str:
    refs = describe_context(context)
    return f"""You interpret commands for a studio-management platform used by architects and interior designers.

Today's date: {today}
Existing projects: {refs['projects']}
Existing clients: {refs['clients']}

The user writes a free-text command. Map it onto exactly ONE of these actions and its fields:
{describe_actions()}

RULES:
1. Use only the action names listed above. If unsure, use "unknown" with empty data.
2. Resolve project and client mentions to the ids listed above; never invent ids.
3. priority is one of: low, medium, high, urgent.
4. project status is one of: planning, active, on_hold, completed, cancelled.
5. Dates are ISO 8601 (YYYY-MM-DD); scheduled_at is an ISO 8601 datetime.
6. hours and budget are plain numbers.
7. summary is one short sentence in {translate('language.name', locale)} describing what will be done.
8. Reply only through the record_command tool, with no other text."""


def response_tool_schema() -> Dict[str, Any]:
    """Closed response schema the oracle must answer with."""
    return {
        "name": "record_command",
        "description": "Record the single action interpreted from the user's command.",
        "input_schema": {
            "type": "object",
            "properties": {
                "action": {"type": "string", "enum": [kind.value for kind in ActionKind]},
                "data": {
                    "type": "object",
                    "description": "Fields for the chosen action",
                    "additionalProperties": {"type": ["string", "number", "boolean", "null"]},
                },
                "summary": {"type": "string"},
            },
            "required": ["action", "data", "summary"],
        },
    }


def parse_oracle_payload(payload: Any, locale: str) -> ParsedCommand:
    """Turn the oracle's structured reply into a ParsedCommand, degrading to UNKNOWN."""
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except ValueError:
            logger.warning("⚠️ [CLASSIFIER] Reply is not valid JSON")
            return not_understood(locale)
    if not isinstance(payload, dict):
        logger.warning(f"⚠️ [CLASSIFIER] Reply is not an object: {type(payload).__name__}")
        return not_understood(locale)

    action = ActionKind.parse(payload.get("action"))
    summary = payload.get("summary")
    if not isinstance(summary, str):
        summary = ""
    if action == ActionKind.UNKNOWN:
        if payload.get("action") not in (None, ActionKind.UNKNOWN.value):
            logger.warning(f"⚠️ [CLASSIFIER] Unrecognized action collapsed to unknown: {payload.get('action')!r}")
        return ParsedCommand(ActionKind.UNKNOWN, {}, summary or translate("summary.not_understood", locale))

    raw_data = payload.get("data")
    if not isinstance(raw_data, dict):
        raw_data = {}
    data = {}
    for key, value in raw_data.items():
        if isinstance(value, PRIMITIVE_TYPES):
            data[str(key)] = value
        else:
            logger.info(f"🧹 [CLASSIFIER] Discarding non-primitive field '{key}'")
    return ParsedCommand(action, data, summary.strip())


def extract_reply(content: Any, tool_name: str) -> Optional[Any]:
    """Return the tool input (preferred) or the first text block of a Messages API reply."""
    text = None
    for block in content or []:
        block_type = getattr(block, "type", None)
        if block_type == "tool_use" and getattr(block, "name", None) == tool_name:
            return getattr(block, "input", None)
        if block_type == "text" and text is None:
            text = getattr(block, "text", None)
    return text
