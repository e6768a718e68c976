"""Shared FastAPI dependencies.

Centralizes per-request assembly of the command interpreter so routers stay
thin and tests can override single collaborators.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from app import services
from app.application.command_processor import CommandInterpreter
from app.application.context_loader import ContextLoader
from app.application.handlers import ActionDispatcher
from app.config import get_settings
from app.domain.intent_classifier import IntentClassifier
from app.infrastructure.repositories import (
    SqlAlchemyClientRepository,
    SqlAlchemyProjectRepository,
    SqlAlchemyReceiptRepository,
    SqlAlchemyRecordRepository,
)
from database.connection import get_db


def get_intent_classifier() -> IntentClassifier:
    return services.intent_classifier


def get_command_interpreter(
    db: Session = Depends(get_db),
    classifier: IntentClassifier = Depends(get_intent_classifier),
) -> CommandInterpreter:
    projects = SqlAlchemyProjectRepository(db)
    return CommandInterpreter(
        context_loader=ContextLoader(projects, SqlAlchemyClientRepository(db), limit=get_settings().context_limit),
        intent_classifier=classifier,
        dispatcher=ActionDispatcher.from_repositories(SqlAlchemyRecordRepository(db), projects),
        receipts=SqlAlchemyReceiptRepository(db),
    )
