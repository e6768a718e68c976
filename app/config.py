"""Configuration module centralizing environment access.

A plain Settings object instead of ad-hoc os.getenv calls scattered through
the interpreter stages.
"""
import os
from typing import Optional

SUPPORTED_LOCALES = ("he", "en")
MAX_CONTEXT_ITEMS = 20


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Settings:
    def __init__(self) -> None:
        # Core
        inferred_testing = (
            os.getenv("PYTEST_CURRENT_TEST")
            or os.getenv("ENVIRONMENT") == "testing"
            or os.getenv("TESTING") == "1"
        )
        self.environment: str = "testing" if inferred_testing else os.getenv("ENVIRONMENT", "development")
        self.port: int = _int_env("PORT", 8000)
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # Database
        self.database_url: str = os.getenv("DATABASE_URL") or "sqlite:///./app.db"

        # Classification oracle (Anthropic)
        self.anthropic_api_key: Optional[str] = os.getenv("ANTHROPIC_API_KEY") or os.getenv("CLAUDE_API_KEY")
        self.classifier_enabled: bool = bool(self.anthropic_api_key and self.anthropic_api_key.strip())
        self.classifier_model: str = os.getenv("CLASSIFIER_MODEL", "claude-3-5-sonnet-20241022")
        self.classifier_max_tokens: int = _int_env("CLASSIFIER_MAX_TOKENS", 1024)
        self.classifier_timeout_seconds: float = _float_env("CLASSIFIER_TIMEOUT_SECONDS", 20.0)

        # Reference context sent to the classifier is bounded regardless of env
        self.context_limit: int = max(1, min(_int_env("CONTEXT_LIMIT", MAX_CONTEXT_ITEMS), MAX_CONTEXT_ITEMS))

        # Localization
        locale = os.getenv("DEFAULT_LOCALE", "he").lower()
        self.default_locale: str = locale if locale in SUPPORTED_LOCALES else "he"


_SETTINGS_CACHE: Optional[Settings] = None


def get_settings(refresh: bool = False) -> Settings:
    """Return a (possibly cached) Settings instance.

    Pass refresh=True in tests after modifying environment variables to force
    re-evaluation.
    """
    global _SETTINGS_CACHE
    if refresh or os.getenv("FORCE_SETTINGS_REFRESH") == "1" or _SETTINGS_CACHE is None:
        _SETTINGS_CACHE = Settings()
    return _SETTINGS_CACHE
