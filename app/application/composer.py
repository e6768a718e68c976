"""Application layer: user-facing response composition."""
import logging
from typing import Optional

from app.domain.commands import ActionKind, CommandResponse, ExecutionOutcome
from app.domain.messages import template, translate

logger = logging.getLogger(__name__)


def _format_hours(value) -> str:
    number = float(value)
    return str(int(number)) if number.is_integer() else f"{number:g}"


class ResponseComposer:
    """Turns an execution outcome into a single localized response. Never raises."""

    def compose(self, action: ActionKind, outcome: ExecutionOutcome, summary: Optional[str], locale: str) -> CommandResponse:
        record = outcome.record or {}
        message = outcome.message
        if outcome.success:
            try:
                message = self._success_message(action, record, locale)
            except (KeyError, IndexError, TypeError, ValueError) as e:
                logger.warning(f"⚠️ [COMPOSER] Falling back to outcome message for {action.value}: {e}")
                message = outcome.message
        elif not message:
            key = "unknown.message" if action == ActionKind.UNKNOWN else "action.failed"
            message = translate(key, locale)

        return CommandResponse(
            action=action,
            summary=summary or "",
            success=outcome.success,
            result=dict(record),
            message=message,
        )

    def _success_message(self, action: ActionKind, record: dict, locale: str) -> str:
        text = template(f"{action.value}.success", locale)
        if action == ActionKind.ADD_TIME:
            return text.format(hours=_format_hours(record["hours"]))
        if action == ActionKind.UPDATE_PROJECT_STATUS:
            status = record["status"]
            return text.format(status=translate(f"status.{status}", locale))
        return text.format(**record)
