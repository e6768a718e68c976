"""Infrastructure layer: Claude-backed implementation of the intent classifier."""
import logging
from typing import Optional

import anthropic

from app.domain.commands import ParsedCommand, ReferenceContext
from app.domain.intent_classifier import (
    ClassificationUnavailable,
    IntentClassifier,
    build_system_prompt,
    extract_reply,
    not_configured,
    not_understood,
    parse_oracle_payload,
    response_tool_schema,
)
from utils.time import utc_today

logger = logging.getLogger(__name__)


class AnthropicIntentClassifier(IntentClassifier):
    """Classifies commands with a single forced tool call at temperature 0."""

    def __init__(self, api_key: Optional[str] = None, model: str = "claude-3-5-sonnet-20241022",
                 max_tokens: int = 1024, timeout: float = 20.0, client=None):
        self.model = model
        self.max_tokens = max_tokens
        self.tool = response_tool_schema()

        if client is not None:
            self.claude_client = client
        elif api_key and api_key.strip():
            self.claude_client = anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout)
        else:
            self.claude_client = None
        self.llm_enabled = self.claude_client is not None

        if self.llm_enabled:
            logger.info(f"✅ Intent classifier ready (model={self.model})")
        else:
            logger.warning("⚠️ ANTHROPIC_API_KEY not set - every command will be classified as unknown")

    async def classify(self, message: str, context: ReferenceContext, locale: str) -> ParsedCommand:
        if not self.llm_enabled:
            return not_configured(locale)

        system_prompt = build_system_prompt(context, locale, utc_today().isoformat())
        logger.info(f"🤖 [CLASSIFIER] Classifying: {message[:80]}")

        try:
            response = await self.claude_client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=0.0,
                system=system_prompt,
                messages=[{"role": "user", "content": message}],
                tools=[self.tool],
                tool_choice={"type": "tool", "name": self.tool["name"]},
            )
        except (anthropic.APIConnectionError, anthropic.APIStatusError) as e:
            logger.error(f"❌ [CLASSIFIER] Oracle call failed: {e}", exc_info=True)
            raise ClassificationUnavailable("classification oracle unavailable") from e

        reply = extract_reply(getattr(response, "content", None), self.tool["name"])
        if reply is None:
            logger.warning("⚠️ [CLASSIFIER] Oracle returned neither a tool call nor text")
            return not_understood(locale)

        parsed = parse_oracle_payload(reply, locale)
        logger.info(f"🎯 [CLASSIFIER] action={parsed.action.value} fields={sorted(parsed.data)}")
        return parsed
