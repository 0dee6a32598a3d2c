"""Bot API client for sending replies, with exponential backoff retry"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from ledger_bot.config import settings
from ledger_bot.infrastructure.observability.metrics import reply_failure_counter, reply_latency_histogram


class TelegramClient:
    """Client for the Bot API sendMessage method"""

    def __init__(
        self,
        token: str | None = None,
        api_base: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token = token if token is not None else settings.telegram_bot_token
        self.api_base = (api_base or settings.telegram_api_base).rstrip("/")
        self.timeout = settings.http_timeout_seconds if timeout is None else timeout
        self.max_retries = settings.reply_max_retries if max_retries is None else max_retries
        self.backoff_base = settings.reply_backoff_base if backoff_base is None else backoff_base
        self.transport = transport

    @property
    def send_message_url(self) -> str:
        return f"{self.api_base}/bot{self.token}/sendMessage"

    async def send_message(self, chat_id: str, text: str, parse_mode: Optional[str] = None) -> None:
        """
        Send a reply to a chat.

        Retry strategy:
        - Exponential backoff: base^attempt (1s, 2s, 4s with defaults)
        - Retries on 5xx errors and network failures, not on 4xx
        - Tracks latency histogram and failure counter

        Raises:
            httpx.HTTPError: After the last failed attempt or on a 4xx answer
        """
        payload: Dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode:
            payload["parse_mode"] = parse_mode

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with reply_latency_histogram.time():
                        response = await client.post(self.send_message_url, json=payload)
                        response.raise_for_status()
                        return

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    reply_failure_counter.inc()

                    retryable = not isinstance(e, httpx.HTTPStatusError) or e.response.status_code >= 500
                    if not retryable or attempt >= self.max_retries:
                        logging.error(
                            f"Reply delivery failed after {attempt} attempt(s): {e}",
                            extra={"chat_id": chat_id},
                        )
                        raise

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
