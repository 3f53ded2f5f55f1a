"""Coach routes: chat with the AI coach and request a monthly analysis."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from focusmate.core.config import get_settings
from focusmate.core.errors import ValidationError
from focusmate.db.session import get_db
from focusmate.routers.deps import get_ai_client_factory, get_chat_registry, get_session_context
from focusmate.schemas.coach import (
    AIAnalysisSchema,
    AnalysisRequestSchema,
    CoachMessageInSchema,
    CoachReplySchema,
)
from focusmate.schemas.user import SessionUserSchema
from focusmate.services import entries as entry_store
from focusmate.services.analytics import sort_by_date
from focusmate.services.coach import (
    WELCOME_MESSAGE,
    CoachChatRegistry,
    analyze_progress,
    create_coach_chat,
    send_message_to_coach,
)
from focusmate.services.identity import SessionContext, require_user

router = APIRouter(prefix="/api/coach", tags=["coach"])
settings = get_settings()

Db = Annotated[AsyncSession, Depends(get_db)]
Ctx = Annotated[SessionContext, Depends(get_session_context)]
Registry = Annotated[CoachChatRegistry, Depends(get_chat_registry)]


async def _start_chat(db: AsyncSession, ctx: SessionContext, user: SessionUserSchema, registry, client_factory):
    recent = await entry_store.list_recent_entries(db, ctx, settings.coach_recent_entries)
    chat = create_coach_chat(recent, user.name, client=client_factory())
    registry.set(ctx.session_id, chat)
    return chat


@router.post("/session", response_model=CoachReplySchema)
async def start_session(
    db: Db,
    ctx: Ctx,
    registry: Registry,
    client_factory=Depends(get_ai_client_factory),
):
    """(Re)create the coach chat from the latest logs and greet the user."""
    user = require_user(ctx)
    await _start_chat(db, ctx, user, registry, client_factory)
    return CoachReplySchema(text=WELCOME_MESSAGE)


@router.post("/messages", response_model=CoachReplySchema)
async def send_message(
    body: CoachMessageInSchema,
    db: Db,
    ctx: Ctx,
    registry: Registry,
    client_factory=Depends(get_ai_client_factory),
):
    user = require_user(ctx)
    chat = registry.get(ctx.session_id)
    if chat is None:
        chat = await _start_chat(db, ctx, user, registry, client_factory)
    text = await send_message_to_coach(chat, body.text)
    return CoachReplySchema(text=text)


@router.post("/analysis", response_model=AIAnalysisSchema)
async def analyze_month(
    body: AnalysisRequestSchema,
    db: Db,
    ctx: Ctx,
    client_factory=Depends(get_ai_client_factory),
):
    """Structured report for one month of entries."""
    month_entries = await entry_store.list_entries_by_month(db, ctx, body.year, body.month)
    if not month_entries:
        raise ValidationError("Not enough data to generate a report. Add some logs first!")
    return await analyze_progress(sort_by_date(month_entries), client=client_factory())
