"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ledger_bot.infrastructure.clients.telegram import TelegramClient
from ledger_bot.infrastructure.database.session import get_db
from ledger_bot.services.router import CommandRouter


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_telegram_client() -> TelegramClient:
    """Provide Bot API client instance"""
    return TelegramClient()


def get_command_router(db: Session = Depends(get_db)) -> CommandRouter:
    """Provide a router bound to the request's session"""
    return CommandRouter.for_session(db)
