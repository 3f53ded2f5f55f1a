"""Shared fixtures: in-memory database, session context, API client, fake Gemini client."""
import os
import tempfile
from types import SimpleNamespace

# Configure before focusmate is imported (settings are read at import time)
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(), "focusmate-test.db")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["GEMINI_API_KEY"] = ""
os.environ["EXTERNAL_LOGIN_DELAY_SECONDS"] = "0"

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from focusmate.db.base import Base  # noqa: E402
from focusmate.db.session import get_db  # noqa: E402
from focusmate.main import app  # noqa: E402
from focusmate.routers.deps import (  # noqa: E402
    get_ai_client_factory,
    get_chat_registry,
    get_external_provider,
)
from focusmate.services.coach import CoachChatRegistry  # noqa: E402
from focusmate.services.external_auth import MockGoogleProvider  # noqa: E402
from focusmate.services.identity import SessionContext  # noqa: E402


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture()
async def engine():
    """Fresh in-memory SQLite shared by every connection of one test."""
    eng = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def ctx() -> SessionContext:
    """Anonymous session slot."""
    return SessionContext()


# ---------------------------------------------------------------------------
# Fake Gemini client
# ---------------------------------------------------------------------------


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeChat:
    def __init__(self, owner, model, config):
        self.owner = owner
        self.model = model
        self.config = config
        self.sent = []

    async def send_message(self, message):
        self.sent.append(message)
        if self.owner.error is not None:
            raise self.owner.error
        return FakeResponse(self.owner.reply)


class FakeGenAI:
    """Stands in for genai.Client: only the `aio` chats/models surface is used."""

    def __init__(self):
        self.reply = "Keep going!"
        self.analysis_text = (
            '{"summary": "Solid month", "trends": ["More hours"], '
            '"mistakes": ["Late nights"], "suggestions": ["Use Pomodoro"]}'
        )
        self.error = None
        self.chats_created = []
        self.requests = []
        self.aio = SimpleNamespace(
            chats=SimpleNamespace(create=self._create_chat),
            models=SimpleNamespace(generate_content=self._generate_content),
        )

    def _create_chat(self, model, config):
        chat = FakeChat(self, model, config)
        self.chats_created.append(chat)
        return chat

    async def _generate_content(self, model, contents, config):
        self.requests.append(SimpleNamespace(model=model, contents=contents, config=config))
        if self.error is not None:
            raise self.error
        return FakeResponse(self.analysis_text)


@pytest.fixture()
def fake_ai() -> FakeGenAI:
    return FakeGenAI()


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------


@pytest.fixture()
def chat_registry() -> CoachChatRegistry:
    return CoachChatRegistry()


@pytest.fixture()
async def client(session_factory, fake_ai, chat_registry):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_external_provider] = lambda: MockGoogleProvider(delay_seconds=0)
    app.dependency_overrides[get_chat_registry] = lambda: chat_registry
    app.dependency_overrides[get_ai_client_factory] = lambda: (lambda: fake_ai)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


FIELD_DEFAULTS = {
    "date": "2024-03-10",
    "subjects": "Linear algebra",
    "duration_minutes": 90,
    "focus_level": 7,
    "remarks": "",
}


@pytest.fixture()
def entry_fields():
    """Factory for valid entry fields; override what the test cares about."""

    def _fields(**overrides) -> dict:
        return {**FIELD_DEFAULTS, **overrides}

    return _fields


@pytest.fixture()
def make_entry(entry_fields):
    """Factory for full DailyEntry dicts as the store accepts them."""

    def _make(entry_id: str, timestamp: int = 1_000, **overrides) -> dict:
        return {**entry_fields(**overrides), "id": entry_id, "timestamp": timestamp}

    return _make
