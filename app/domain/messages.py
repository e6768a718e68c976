"""Localized user-facing strings.

Hebrew is the studio's working language; English is available per request.
"""
import logging
from typing import Dict

from app.config import SUPPORTED_LOCALES, get_settings

logger = logging.getLogger(__name__)

MESSAGES: Dict[str, Dict[str, str]] = {
    "he": {
        "create_task.success": '✅ משימה "{title}" נוצרה בהצלחה',
        "create_lead.success": '✅ ליד "{name}" נוצר בהצלחה',
        "add_time.success": "✅ {hours} שעות נרשמו בהצלחה",
        "create_meeting.success": '✅ פגישה "{title}" נוצרה בהצלחה',
        "update_project_status.success": '✅ סטטוס הפרויקט עודכן ל"{status}"',
        "action.done": "✅ הפעולה בוצעה בהצלחה",
        "action.failed": "❌ לא ניתן היה לבצע את הפעולה. נסה שוב.",
        "project.not_found": "❌ הפרויקט לא נמצא",
        "unknown.message": "❓ לא הצלחתי לפרש את הפקודה. נסה לנסח אחרת.",
        "summary.not_understood": "לא הצלחתי לפרש את הפקודה",
        "summary.not_configured": "מפתח סיווג AI לא מוגדר",
        "error.service_unavailable": "❌ שירות ה-AI אינו זמין כרגע. נסה שוב מאוחר יותר.",
        "error.internal": "❌ אירעה שגיאה בעיבוד הפקודה",
        "error.idempotency_conflict": "❌ מפתח הבקשה כבר שימש לפקודה אחרת",
        "language.name": "Hebrew",
        "status.planning": "תכנון",
        "status.active": "פעיל",
        "status.on_hold": "מושהה",
        "status.completed": "הושלם",
        "status.cancelled": "בוטל",
    },
    "en": {
        "create_task.success": '✅ Task "{title}" created',
        "create_lead.success": '✅ Lead "{name}" created',
        "add_time.success": "✅ {hours} hours logged",
        "create_meeting.success": '✅ Meeting "{title}" created',
        "update_project_status.success": '✅ Project status updated to "{status}"',
        "action.done": "✅ Done",
        "action.failed": "❌ The action could not be completed. Please try again.",
        "project.not_found": "❌ Project not found",
        "unknown.message": "❓ I couldn't interpret the command. Try rephrasing it.",
        "summary.not_understood": "Could not interpret the command",
        "summary.not_configured": "AI classification key is not configured",
        "error.service_unavailable": "❌ The AI service is unavailable right now. Please try again later.",
        "error.internal": "❌ An error occurred while processing the command",
        "error.idempotency_conflict": "❌ This request key was already used for a different command",
        "language.name": "English",
        "status.planning": "Planning",
        "status.active": "Active",
        "status.on_hold": "On hold",
        "status.completed": "Completed",
        "status.cancelled": "Cancelled",
    },
}


def resolve_locale(locale: str = None) -> str:
    """Return a supported locale, falling back to the configured default."""
    if locale:
        candidate = locale.strip().lower().split("-")[0]
        if candidate in SUPPORTED_LOCALES:
            return candidate
    return get_settings().default_locale


def template(key: str, locale: str = None) -> str:
    """Raw (uninterpolated) template for key, or the key itself if missing."""
    table = MESSAGES.get(resolve_locale(locale), {})
    if key in table:
        return table[key]
    fallback = MESSAGES.get(get_settings().default_locale, {})
    if key not in fallback:
        logger.warning(f"⚠️ Missing message key: {key}")
    return fallback.get(key, key)


def translate(key: str, locale: str = None, **kwargs) -> str:
    text = template(key, locale)
    return text.format(**kwargs) if kwargs else text
