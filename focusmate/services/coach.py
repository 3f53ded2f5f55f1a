"""AI coach on top of Gemini: chat seeded with recent logs, and monthly analysis."""
import json
import logging
from collections import OrderedDict
from typing import Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import ValidationError as PydanticValidationError

from focusmate.core.config import Settings, get_settings
from focusmate.core.errors import ConfigurationError, ProviderError
from focusmate.schemas.coach import AIAnalysisSchema
from focusmate.schemas.entry import DailyEntrySchema

logger = logging.getLogger(__name__)

PROVIDER_ERRORS = (genai_errors.APIError, httpx.HTTPError)

WELCOME_MESSAGE = (
    "Hi! I'm your FocusMate Coach. I've looked at your recent study logs. "
    "How can I help you improve today?"
)
EMPTY_REPLY = "I'm having trouble thinking right now. Try again?"
NO_LOGS = "No recent logs found."

SYSTEM_INSTRUCTION = """You are FocusMate Coach, a friendly and motivating study partner for {user_name}.

Your goal is to help the student improve their habits, stay consistent, and overcome challenges.
You have access to their recent study logs (provided below). Use this data to give specific, personalized advice.

Recent Logs:
{logs}

Guidelines:
1. Be concise, encouraging, and constructive.
2. If focus was low, ask gently about distractions.
3. If they studied a lot, praise their consistency.
4. Suggest breaks or techniques (like Pomodoro) if appropriate.
5. Keep responses short (under 100 words) unless asked for detailed explanations."""

ANALYSIS_PROMPT = """Analyze the following study log entries.
Identify patterns, mistakes, and improvements.

Data: {data}"""


def get_ai_client(settings: Settings | None = None) -> genai.Client:
    settings = settings or get_settings()
    api_key = settings.gemini_api_key
    if not api_key or "API_KEY" in api_key:
        raise ConfigurationError("API key is missing or invalid. Set GEMINI_API_KEY in your environment.")
    return genai.Client(api_key=api_key)


def build_log_context(entries: list[DailyEntrySchema]) -> str:
    """Compact JSON of the entries for the system instruction."""
    if not entries:
        return NO_LOGS
    return json.dumps([
        {
            "date": e.date.isoformat(),
            "subject": e.subjects,
            "duration": f"{e.duration_minutes}m",
            "focus": f"{e.focus_level}/10",
            "note": e.remarks,
        }
        for e in entries
    ])


def build_analysis_data(entries: list[DailyEntrySchema]) -> list[dict[str, Any]]:
    return [
        {
            "date": e.date.isoformat(),
            "subjects": e.subjects,
            "duration": f"{e.duration_minutes} mins",
            "focus": f"{e.focus_level}/10",
            "remarks": e.remarks,
        }
        for e in entries
    ]


def create_coach_chat(
    recent_entries: list[DailyEntrySchema],
    user_name: str,
    client: genai.Client | None = None,
    settings: Settings | None = None,
):
    """Start an async chat whose system instruction carries the user's recent logs."""
    settings = settings or get_settings()
    client = client or get_ai_client(settings)
    instruction = SYSTEM_INSTRUCTION.format(user_name=user_name, logs=build_log_context(recent_entries))
    return client.aio.chats.create(
        model=settings.gemini_model,
        config=types.GenerateContentConfig(system_instruction=instruction),
    )


async def send_message_to_coach(chat, message: str) -> str:
    try:
        response = await chat.send_message(message)
    except PROVIDER_ERRORS as exc:
        logger.exception("Coach chat request failed")
        raise ProviderError() from exc
    return response.text or EMPTY_REPLY


async def analyze_progress(
    entries: list[DailyEntrySchema],
    client: genai.Client | None = None,
    settings: Settings | None = None,
) -> AIAnalysisSchema:
    """Ask the model for a structured report on the given entries."""
    settings = settings or get_settings()
    client = client or get_ai_client(settings)
    prompt = ANALYSIS_PROMPT.format(data=json.dumps(build_analysis_data(entries)))
    try:
        response = await client.aio.models.generate_content(
            model=settings.gemini_model,
            contents=prompt,
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=AIAnalysisSchema,
            ),
        )
    except PROVIDER_ERRORS as exc:
        logger.exception("Analysis request failed")
        raise ProviderError() from exc

    text = response.text
    if not text:
        raise ProviderError("No response from AI.")
    try:
        return AIAnalysisSchema.model_validate_json(text)
    except PydanticValidationError as exc:
        logger.warning("Malformed analysis payload from provider")
        raise ProviderError("The AI returned an unreadable report.") from exc


class CoachChatRegistry:
    """Active chat per session id, kept in process memory.

    Bounded: once `max_chats` sessions hold a chat, the least recently used
    one is dropped and rebuilt from the store on its next message.
    """

    def __init__(self, max_chats: int | None = None):
        self.max_chats = max_chats if max_chats is not None else get_settings().coach_max_chats
        self._chats: OrderedDict[str, Any] = OrderedDict()

    def __len__(self) -> int:
        return len(self._chats)

    def get(self, session_id: str):
        chat = self._chats.get(session_id)
        if chat is not None:
            self._chats.move_to_end(session_id)
        return chat

    def set(self, session_id: str, chat) -> None:
        self._chats[session_id] = chat
        self._chats.move_to_end(session_id)
        while len(self._chats) > self.max_chats:
            evicted, _ = self._chats.popitem(last=False)
            logger.debug("Dropped coach chat for session %s", evicted)

    def discard(self, session_id: str) -> None:
        self._chats.pop(session_id, None)


chat_registry = CoachChatRegistry()
