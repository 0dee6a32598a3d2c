"""POST /telegram/webhook - inbound Bot API updates"""

import hmac
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Header, HTTPException, Request

from ledger_bot.api.dependencies import get_command_router, get_request_id, get_telegram_client
from ledger_bot.api.v1.schemas import Update, WebhookAck
from ledger_bot.config import settings
from ledger_bot.domain.models import CallerContext
from ledger_bot.infrastructure.clients.telegram import TelegramClient
from ledger_bot.services.router import CommandRouter

router = APIRouter()


def _secret_matches(received: Optional[str]) -> bool:
    expected = settings.telegram_secret_token
    if not expected:
        return True
    return received is not None and hmac.compare_digest(received, expected)


@router.post("/telegram/webhook", response_model=WebhookAck)
def telegram_webhook(
    update: Update,
    background_tasks: BackgroundTasks,
    request: Request,
    secret_token: Optional[str] = Header(default=None, alias="X-Telegram-Bot-Api-Secret-Token"),
    command_router: CommandRouter = Depends(get_command_router),
    telegram: TelegramClient = Depends(get_telegram_client),
):
    """
    Process one command message and schedule the reply.

    Flow:
    1. Reject requests without the configured secret token
    2. Ignore updates without text and chats other than the authorized one
    3. Route + dispatch the text to a domain service
    4. Send the reply in the background
    """
    request_id = get_request_id(request)

    if not _secret_matches(secret_token):
        logging.warning("Webhook called with invalid secret token", extra={"request_id": request_id})
        raise HTTPException(status_code=403, detail="Invalid secret token")

    message = update.message or update.edited_message
    if message is None or not message.text:
        return WebhookAck()

    chat_id = message.chat.id
    if settings.authorized_chat_id is None or chat_id != settings.authorized_chat_id:
        logging.warning(
            f"Unauthorized chat {chat_id} tried to use the bot",
            extra={"request_id": request_id, "chat_id": str(chat_id)},
        )
        return WebhookAck()

    context = CallerContext(chat_id=str(chat_id), display_name=message.chat.display_name)
    command, args = command_router.route(message.text)
    reply = command_router.dispatch(command, args, context)

    background_tasks.add_task(
        telegram.send_message,
        context.chat_id,
        reply,
        command_router.formatting_hint(command),
    )

    return WebhookAck()


@router.get("/telegram/webhook", response_model=WebhookAck)
def telegram_webhook_probe():
    return WebhookAck()
