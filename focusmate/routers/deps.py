"""Request dependencies shared by the routers."""
from typing import Annotated

from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from focusmate.core.config import get_settings
from focusmate.db.session import get_db
from focusmate.schemas.user import AuthOutSchema
from focusmate.services import identity
from focusmate.services.coach import CoachChatRegistry, chat_registry, get_ai_client
from focusmate.services.external_auth import ExternalIdentityProvider, MockGoogleProvider
from focusmate.services.identity import SessionContext

settings = get_settings()


def _context_from_bearer(header: str | None) -> SessionContext | None:
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return SessionContext.from_access_token(token.strip())


async def get_session_context(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SessionContext:
    """A valid bearer token wins, otherwise the auth cookie. Revoked sessions are anonymous."""
    ctx = _context_from_bearer(request.headers.get("authorization"))
    if ctx is None:
        ctx = SessionContext.from_token(request.cookies.get(settings.auth_cookie_name))
    if await identity.is_session_revoked(db, ctx.session_id):
        return SessionContext()
    return ctx


def write_session(response: Response, ctx: SessionContext) -> AuthOutSchema:
    """Persist an authenticated context into the cookie and issue a bearer token."""
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=ctx.to_token(),
        max_age=settings.auth_cookie_max_age,
        httponly=True,
        samesite="lax",
        path="/",
    )
    return AuthOutSchema(user=ctx.user, access_token=ctx.to_access_token())


def get_external_provider() -> ExternalIdentityProvider:
    return MockGoogleProvider(delay_seconds=settings.external_login_delay_seconds)


def get_ai_client_factory():
    """Callable building the Gemini client; raises ConfigurationError without a key."""
    return get_ai_client


def get_chat_registry() -> CoachChatRegistry:
    return chat_registry
