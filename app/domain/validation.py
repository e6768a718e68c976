"""Domain layer: validation of classifier output against per-action schemas."""
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Type, Union

from pydantic import ValidationError

from app.domain.actions import ACTION_SCHEMAS, ActionCommand, ValidatedCommand
from app.domain.commands import ActionKind, ParsedCommand

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rejection:
    """Why a parsed command cannot be executed."""

    action: ActionKind
    reason: str
    field: Optional[str] = None


ValidationResult = Union[ValidatedCommand, Rejection]


class CommandValidator:
    """Maps untrusted ParsedCommand data onto one of the typed action models.

    Missing or malformed required fields reject the whole command; malformed
    optional fields are dropped so their schema default applies.
    """

    def __init__(self, schemas: Optional[Dict[ActionKind, Type[ActionCommand]]] = None):
        self.schemas = schemas or ACTION_SCHEMAS

    def validate(self, parsed: ParsedCommand) -> ValidationResult:
        if parsed.action == ActionKind.UNKNOWN:
            return Rejection(ActionKind.UNKNOWN, "unrecognized action")

        model = self.schemas.get(parsed.action)
        if model is None:
            return Rejection(parsed.action, "no schema for action")

        data = dict(parsed.data or {})
        for _ in range(2):
            try:
                return model.model_validate(data)
            except ValidationError as e:
                bad_fields = {str(err["loc"][0]) for err in e.errors() if err.get("loc")}
                required = [f for f in model.required_fields if f in bad_fields]
                if required:
                    field = required[0]
                    reason = "missing" if field not in data or data[field] is None else "invalid"
                    logger.warning(
                        f"🚫 [VALIDATOR] Rejected {parsed.action.value}: required field '{field}' {reason}"
                    )
                    return Rejection(parsed.action, f"required field '{field}' {reason}", field)
                logger.info(f"🧹 [VALIDATOR] Dropping invalid optional fields for {parsed.action.value}: {sorted(bad_fields)}")
                for name in bad_fields:
                    data.pop(name, None)

        return Rejection(parsed.action, "fields could not be validated")
