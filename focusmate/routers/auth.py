"""Auth routes: signup, login, guest, Google (mock), logout, me."""
from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from focusmate.core.config import get_settings
from focusmate.db.session import get_db
from focusmate.routers.deps import (
    get_chat_registry,
    get_external_provider,
    get_session_context,
    write_session,
)
from focusmate.schemas.user import AuthOutSchema, LoginSchema, SessionUserSchema, SignupSchema
from focusmate.services import identity
from focusmate.services.coach import CoachChatRegistry
from focusmate.services.external_auth import ExternalIdentityProvider
from focusmate.services.identity import SessionContext

router = APIRouter(prefix="/auth", tags=["auth"])
settings = get_settings()


@router.post("/signup", response_model=AuthOutSchema, status_code=201)
async def signup_post(
    body: SignupSchema,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[SessionContext, Depends(get_session_context)],
):
    """Create an account and log it in."""
    await identity.signup(db, ctx, body.email, body.password, body.name)
    return write_session(response, ctx)


@router.post("/login", response_model=AuthOutSchema)
async def login_post(
    body: LoginSchema,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[SessionContext, Depends(get_session_context)],
):
    """404 account_not_found tells the client to offer signup instead."""
    await identity.login(db, ctx, body.email, body.password)
    return write_session(response, ctx)


@router.post("/guest", response_model=AuthOutSchema)
async def guest_post(
    response: Response,
    ctx: Annotated[SessionContext, Depends(get_session_context)],
):
    identity.login_as_guest(ctx)
    return write_session(response, ctx)


@router.post("/google", response_model=AuthOutSchema)
async def google_post(
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[SessionContext, Depends(get_session_context)],
    provider: Annotated[ExternalIdentityProvider, Depends(get_external_provider)],
):
    await identity.login_with_external_provider(db, ctx, provider)
    return write_session(response, ctx)


@router.post("/logout", status_code=204)
async def logout_post(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[SessionContext, Depends(get_session_context)],
    registry: Annotated[CoachChatRegistry, Depends(get_chat_registry)],
):
    """Revoke the session and clear the auth cookie. Always succeeds."""
    if ctx.session_id is not None:
        registry.discard(ctx.session_id)
        await identity.revoke_session(db, ctx.session_id)
    identity.logout(ctx)
    response = Response(status_code=204)
    # path must match the one used in set_cookie()
    response.delete_cookie(settings.auth_cookie_name, path="/")
    return response


@router.get("/me", response_model=SessionUserSchema)
async def me_get(ctx: Annotated[SessionContext, Depends(get_session_context)]):
    return identity.require_user(ctx)
