"""Run the webhook service: python -m ledger_bot"""

import uvicorn

from ledger_bot.api.main import app
from ledger_bot.config import settings


def main() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
