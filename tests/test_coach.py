"""Tests for the coach wrapper around the Gemini client."""
import json

import httpx
import pytest

from focusmate.core.config import Settings
from focusmate.core.errors import ConfigurationError, ProviderError
from focusmate.schemas.coach import AIAnalysisSchema
from focusmate.schemas.entry import DailyEntrySchema
from focusmate.services import coach


@pytest.fixture()
def entries(make_entry) -> list[DailyEntrySchema]:
    return [
        DailyEntrySchema(**make_entry("e1", timestamp=1, subjects="Calculus", remarks="phone buzzing")),
        DailyEntrySchema(**make_entry("e2", timestamp=2, duration_minutes=25, focus_level=3)),
    ]


class TestClientConfiguration:
    @pytest.mark.parametrize("key", ["", "YOUR_API_KEY", "PLACEHOLDER_API_KEY_HERE"])
    def test_missing_or_placeholder_key(self, key) -> None:
        with pytest.raises(ConfigurationError):
            coach.get_ai_client(Settings(gemini_api_key=key))

    def test_create_chat_without_key(self, entries) -> None:
        with pytest.raises(ConfigurationError):
            coach.create_coach_chat(entries, "Ada", settings=Settings(gemini_api_key=""))


class TestChat:
    def test_system_instruction_carries_logs(self, fake_ai, entries) -> None:
        coach.create_coach_chat(entries, "Ada", client=fake_ai)

        (chat,) = fake_ai.chats_created
        instruction = str(chat.config.system_instruction)
        assert "Ada" in instruction
        assert '"subject": "Calculus"' in instruction
        assert '"duration": "25m"' in instruction
        assert '"focus": "3/10"' in instruction
        assert '"note": "phone buzzing"' in instruction

    def test_no_logs(self, fake_ai) -> None:
        coach.create_coach_chat([], "Ada", client=fake_ai)

        assert coach.NO_LOGS in str(fake_ai.chats_created[0].config.system_instruction)

    async def test_send_message(self, fake_ai) -> None:
        chat = coach.create_coach_chat([], "Ada", client=fake_ai)

        reply = await coach.send_message_to_coach(chat, "How did I do?")

        assert reply == "Keep going!"
        assert chat.sent == ["How did I do?"]

    async def test_empty_reply_falls_back(self, fake_ai) -> None:
        fake_ai.reply = None
        chat = coach.create_coach_chat([], "Ada", client=fake_ai)

        assert await coach.send_message_to_coach(chat, "hi") == coach.EMPTY_REPLY

    async def test_transport_failure(self, fake_ai) -> None:
        fake_ai.error = httpx.ConnectError("connection refused")
        chat = coach.create_coach_chat([], "Ada", client=fake_ai)

        with pytest.raises(ProviderError):
            await coach.send_message_to_coach(chat, "hi")


class TestAnalysis:
    async def test_structured_result(self, fake_ai, entries) -> None:
        analysis = await coach.analyze_progress(entries, client=fake_ai)

        assert analysis == AIAnalysisSchema(
            summary="Solid month",
            trends=["More hours"],
            mistakes=["Late nights"],
            suggestions=["Use Pomodoro"],
        )
        (request,) = fake_ai.requests
        assert request.config.response_mime_type == "application/json"
        assert '"duration": "90 mins"' in request.contents

    @pytest.mark.parametrize(
        "text",
        [
            None,
            "",
            "not json",
            json.dumps({"summary": "missing lists"}),
        ],
    )
    async def test_absent_or_malformed_result(self, fake_ai, entries, text) -> None:
        fake_ai.analysis_text = text

        with pytest.raises(ProviderError):
            await coach.analyze_progress(entries, client=fake_ai)

    async def test_transport_failure(self, fake_ai, entries) -> None:
        fake_ai.error = httpx.ReadTimeout("timed out")

        with pytest.raises(ProviderError):
            await coach.analyze_progress(entries, client=fake_ai)


def test_registry() -> None:
    registry = coach.CoachChatRegistry(max_chats=4)
    registry.set("s1", "chat")

    assert registry.get("s1") == "chat"
    registry.discard("s1")
    registry.discard("s1")
    assert registry.get("s1") is None


def test_registry_drops_least_recently_used() -> None:
    registry = coach.CoachChatRegistry(max_chats=2)
    registry.set("s1", "one")
    registry.set("s2", "two")
    registry.get("s1")

    registry.set("s3", "three")

    assert len(registry) == 2
    assert registry.get("s2") is None
    assert registry.get("s1") == "one"
    assert registry.get("s3") == "three"
