"""Application layer: natural-language command interpreter.

Single pass per request:
received → context-loaded → classified → {validated → executed} | rejected-unknown → composed
"""
import hashlib
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from app.application.composer import ResponseComposer
from app.application.context_loader import ContextLoader
from app.application.handlers import ActionDispatcher
from app.domain.actions import UnknownCommand
from app.domain.commands import ActionKind, CommandResponse, RequestContext
from app.domain.intent_classifier import IntentClassifier
from app.domain.messages import translate
from app.domain.validation import CommandValidator, Rejection
from app.infrastructure.repositories import ReceiptRepository
from database.models import CommandReceipt

logger = logging.getLogger(__name__)


class IdempotencyKeyConflict(Exception):
    """An idempotency key was reused for a different message or user."""


def request_fingerprint(message: str, user_id: str) -> str:
    return hashlib.sha256(f"{user_id}\n{message}".encode("utf-8")).hexdigest()


class CommandInterpreter:
    """Turns free text into at most one validated, tenant-scoped write."""

    def __init__(self, context_loader: ContextLoader, intent_classifier: IntentClassifier,
                 dispatcher: ActionDispatcher, validator: Optional[CommandValidator] = None,
                 composer: Optional[ResponseComposer] = None,
                 receipts: Optional[ReceiptRepository] = None):
        self.context_loader = context_loader
        self.intent_classifier = intent_classifier
        self.dispatcher = dispatcher
        self.validator = validator or CommandValidator()
        self.composer = composer or ResponseComposer()
        self.receipts = receipts

    async def process(self, message: str, ctx: RequestContext,
                      idempotency_key: Optional[str] = None) -> CommandResponse:
        """Interpret and execute one command.

        Raises ClassificationUnavailable if the oracle cannot be reached and
        IdempotencyKeyConflict if a stored key belongs to another request; every
        other classification or validation problem becomes an UNKNOWN response.
        """
        fingerprint = request_fingerprint(message, ctx.user_id)
        replay = self._replay(ctx, idempotency_key, fingerprint)
        if replay is not None:
            return replay

        context = self.context_loader.load(ctx.organization_id)
        parsed = await self.intent_classifier.classify(message, context, ctx.locale)

        validated = self.validator.validate(parsed)
        summary = parsed.summary
        if isinstance(validated, Rejection):
            if validated.action != ActionKind.UNKNOWN:
                logger.warning(f"🚫 [INTERPRETER] {validated.action.value} rejected: {validated.reason}")
                summary = translate("summary.not_understood", ctx.locale)
            validated = UnknownCommand()

        outcome = await self.dispatcher.execute(validated, ctx)
        response = self.composer.compose(validated.kind, outcome, summary, ctx.locale)
        logger.info(f"✅ [INTERPRETER] action={response.action.value} success={response.success}")

        if response.success and idempotency_key and self.receipts is not None:
            self._store_receipt(ctx, idempotency_key, fingerprint, response)
        return response

    def _replay(self, ctx: RequestContext, idempotency_key: Optional[str],
                fingerprint: str) -> Optional[CommandResponse]:
        if not idempotency_key or self.receipts is None:
            return None
        receipt = self.receipts.get(ctx.organization_id, idempotency_key)
        if receipt is None:
            return None
        if receipt.request_hash != fingerprint:
            logger.warning(f"🚫 [INTERPRETER] Key {idempotency_key} reused for a different request")
            raise IdempotencyKeyConflict(idempotency_key)
        logger.info(f"🔁 [INTERPRETER] Replaying stored response for key {idempotency_key}")
        return CommandResponse.from_dict(receipt.response)

    def _store_receipt(self, ctx: RequestContext, idempotency_key: str, fingerprint: str,
                       response: CommandResponse) -> None:
        receipt = CommandReceipt(
            organization_id=ctx.organization_id,
            idempotency_key=idempotency_key,
            user_id=ctx.user_id,
            request_hash=fingerprint,
            action=response.action.value,
            response=response.to_dict(),
        )
        # The write is already committed; the response stays successful.
        try:
            stored = self.receipts.save(receipt)
        except SQLAlchemyError as e:
            logger.error(f"❌ [INTERPRETER] Could not store receipt for key {idempotency_key}: {e}", exc_info=True)
            return
        if not stored:
            logger.warning(f"⚠️ [INTERPRETER] Receipt for key {idempotency_key} already stored by a concurrent request")
