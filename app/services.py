"""Service singletons (initialized once) used across routers.

Only stateless, request-independent collaborators live here; anything that
needs a database session is assembled per request in app.dependencies.
"""
import logging
from app.config import get_settings
from app.domain.intent_classifier import IntentClassifier
from app.infrastructure.anthropic_classifier import AnthropicIntentClassifier

logger = logging.getLogger(__name__)


def build_intent_classifier(settings=None) -> IntentClassifier:
    settings = settings or get_settings()
    return AnthropicIntentClassifier(
        api_key=settings.anthropic_api_key if settings.classifier_enabled else None,
        model=settings.classifier_model,
        max_tokens=settings.classifier_max_tokens,
        timeout=settings.classifier_timeout_seconds,
    )


intent_classifier = build_intent_classifier()
logger.info(f"🤖 Command interpreter classifier enabled={intent_classifier.llm_enabled}")
