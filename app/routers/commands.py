"""Natural-language command endpoint."""
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.application.command_processor import CommandInterpreter, IdempotencyKeyConflict
from app.dependencies import get_command_interpreter
from app.domain.commands import RequestContext
from app.domain.intent_classifier import ClassificationUnavailable
from app.domain.messages import resolve_locale, translate
from app.schemas import CommandRequest, CommandResponseBody, ErrorResponse

router = APIRouter(tags=["commands"])
logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("message", "organizationId", "userId")
ERROR_RESPONSES = {400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}}


@router.post("/command", response_model=CommandResponseBody, responses=ERROR_RESPONSES)
@router.post("/api/ai/command", response_model=CommandResponseBody, responses=ERROR_RESPONSES)
async def run_command(request: Request, interpreter: CommandInterpreter = Depends(get_command_interpreter)):
    try:
        payload = await request.json()
    except ValueError:
        return JSONResponse(status_code=400, content={"error": "Invalid JSON body", "fields": list(REQUIRED_FIELDS)})
    if not isinstance(payload, dict):
        return JSONResponse(status_code=400, content={"error": "Invalid JSON body", "fields": list(REQUIRED_FIELDS)})

    try:
        body = CommandRequest.model_validate(payload)
    except ValidationError as e:
        missing, invalid = _classify_errors(e, payload)
        fields = sorted(missing | invalid)
        logger.info(f"Rejected command request, missing={sorted(missing)} invalid={sorted(invalid)}")
        error = "Missing required fields" if missing else "Invalid fields"
        return JSONResponse(status_code=400, content={"error": error, "fields": fields})

    ctx = RequestContext(
        organization_id=body.organization_id,
        user_id=body.user_id,
        locale=resolve_locale(body.locale),
    )
    logger.info(f"🎯 Command from user={ctx.user_id} org={ctx.organization_id}: {body.message[:80]}")

    try:
        response = await interpreter.process(body.message, ctx, idempotency_key=body.idempotency_key)
    except IdempotencyKeyConflict:
        return JSONResponse(status_code=409, content={
            "error": "Idempotency key already used",
            "success": False,
            "message": translate("error.idempotency_conflict", ctx.locale),
        })
    except ClassificationUnavailable:
        return JSONResponse(status_code=503, content={
            "error": "Classification service unavailable",
            "success": False,
            "message": translate("error.service_unavailable", ctx.locale),
        })
    except Exception as e:
        logger.error(f"❌ Command processing error: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={
            "error": "Internal server error",
            "success": False,
            "message": translate("error.internal", ctx.locale),
        })
    return response.to_dict()


def _wire_name(field) -> str:
    aliases = {"organization_id": "organizationId", "user_id": "userId", "idempotency_key": "idempotencyKey"}
    return aliases.get(str(field), str(field))


def _classify_errors(error: ValidationError, payload: dict):
    """Split failing fields into absent-or-blank and present-but-invalid."""
    missing, invalid = set(), set()
    for err in error.errors():
        if not err.get("loc"):
            continue
        name = _wire_name(err["loc"][0])
        value = payload.get(name, payload.get(str(err["loc"][0])))
        if err["type"] == "missing" or value is None or (isinstance(value, str) and not value.strip()):
            missing.add(name)
        else:
            invalid.add(name)
    return missing, invalid
