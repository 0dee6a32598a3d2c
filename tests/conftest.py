"""Pytest fixtures for testing"""

import pytest
from datetime import datetime
from typing import Generator, List, Optional, Tuple
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from ledger_bot.api.main import create_app
from ledger_bot.api.dependencies import get_command_router, get_telegram_client
from ledger_bot.config import settings
from ledger_bot.infrastructure.database.models import Base
from ledger_bot.infrastructure.database.session import get_db
from ledger_bot.services.router import CommandRouter


# Test database
TEST_DATABASE_URL = "sqlite:///./test_ledger.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

AUTHORIZED_CHAT_ID = 123456


class FixedClock:
    """Settable stand-in for now_local"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeTelegramClient:
    """Records replies instead of calling the Bot API"""

    def __init__(self):
        self.sent: List[Tuple[str, str, Optional[str]]] = []

    async def send_message(self, chat_id: str, text: str, parse_mode: Optional[str] = None) -> None:
        self.sent.append((chat_id, text, parse_mode))


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock() -> FixedClock:
    """Monday 5 May 2025: before the day-10 cutoff, after May's first Thursday"""
    return FixedClock(datetime(2025, 5, 5, 12, 0, 0))


@pytest.fixture
def command_router(db: Session, clock: FixedClock) -> CommandRouter:
    return CommandRouter.for_session(db, clock=clock)


@pytest.fixture
def telegram() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def client(db: Session, clock: FixedClock, telegram: FakeTelegramClient, monkeypatch) -> TestClient:
    """Create FastAPI test client with test database and a fake Bot API"""
    monkeypatch.setattr(settings, "authorized_chat_id", AUTHORIZED_CHAT_ID)
    monkeypatch.setattr(settings, "telegram_secret_token", "secret-token")

    app = create_app(create_tables=False)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_command_router] = lambda: CommandRouter.for_session(db, clock=clock)
    app.dependency_overrides[get_telegram_client] = lambda: telegram
    return TestClient(app)
