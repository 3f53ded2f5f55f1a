"""Identity store: registered users, guest identity and the session slot.

Every operation takes an explicit `SessionContext`. The HTTP layer restores
it from the auth cookie or a bearer token and writes it back after login.
Each login gets a fresh random session id; logout revokes that id, which
invalidates the cookie and any bearer token issued for the same session.
"""
from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from focusmate.core.config import get_settings
from focusmate.core.errors import (
    AccountNotFound,
    DuplicateAccount,
    InvalidCredentials,
    NotAuthenticated,
    ValidationError,
)
from focusmate.core.security import (
    create_access_token,
    create_session_token,
    decode_access_token,
    hash_password,
    verify_password,
    verify_session_token,
)
from focusmate.models.revoked_session import RevokedSession
from focusmate.models.user import User
from focusmate.schemas.user import SessionUserSchema
from focusmate.services.external_auth import ExternalIdentityProvider

logger = logging.getLogger(__name__)

GUEST_USER_ID = "guest"
GUEST_EMAIL = "guest@focusmate.app"
GUEST_NAME = "Guest User"

# Simple, practical email check
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def avatar_url(name: str, background: str = "6366f1", color: str = "fff") -> str:
    """Default avatar for a display name."""
    return f"https://ui-avatars.com/api/?name={quote(name)}&background={background}&color={color}"


GUEST_AVATAR = avatar_url("Guest", background="e2e8f0", color="64748b")


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


class SessionContext:
    """The session slot: Anonymous (user is None) or Authenticated(user)."""

    def __init__(self, user: SessionUserSchema | None = None, session_id: str | None = None):
        self.user = user
        self.session_id = session_id if user is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def establish(self, user: SessionUserSchema) -> SessionUserSchema:
        # re-authenticating overwrites the slot and starts a new session
        self.user = user
        self.session_id = uuid.uuid4().hex
        return user

    def clear(self) -> None:
        self.user = None
        self.session_id = None

    @classmethod
    def from_payload(cls, user: Any, session_id: Any) -> SessionContext:
        """Build from decoded token fields; anything unusable is an anonymous session."""
        if not isinstance(session_id, str) or not session_id:
            return cls()
        try:
            return cls(SessionUserSchema.model_validate(user), session_id)
        except PydanticValidationError:
            logger.warning("Discarding malformed session payload")
            return cls()

    @classmethod
    def from_token(cls, token: str | None) -> SessionContext:
        """Restore from a signed cookie."""
        data = verify_session_token(token)
        if data is None:
            return cls()
        return cls.from_payload(data.get("user"), data.get("sid"))

    def to_token(self) -> str | None:
        if self.user is None:
            return None
        return create_session_token({"user": self.user.model_dump(), "sid": self.session_id})

    def to_access_token(self) -> str | None:
        """Bearer token for the same session; the session id travels as `jti`."""
        if self.user is None:
            return None
        return create_access_token(self.user.id, extra={"user": self.user.model_dump(), "jti": self.session_id})

    @classmethod
    def from_access_token(cls, token: str) -> SessionContext | None:
        """None when `token` is not a valid bearer token."""
        claims = decode_access_token(token)
        if claims is None:
            return None
        ctx = cls.from_payload(claims.get("user"), claims.get("jti"))
        return ctx if ctx.is_authenticated else None


def to_session_user(user: User) -> SessionUserSchema:
    return SessionUserSchema(
        id=user.id,
        email=user.email,
        name=user.name,
        avatar=avatar_url(user.name),
        is_guest=False,
    )


async def find_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email_normalized == normalize_email(email)))
    return result.scalar_one_or_none()


def _validate_signup(email: str, password: str, name: str) -> None:
    settings = get_settings()
    if not EMAIL_RE.match(normalize_email(email)):
        raise ValidationError("Please enter a valid email address.")
    if not (name or "").strip():
        raise ValidationError("Name is required.")
    pwd = password or ""
    if len(pwd) < settings.password_min_length:
        raise ValidationError(f"Password must be at least {settings.password_min_length} characters.")
    # bcrypt hard limit: 72 bytes (UTF-8)
    if len(pwd.encode("utf-8")) > 72:
        raise ValidationError("Password is too long.")


async def _insert_user(db: AsyncSession, user: User) -> None:
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as exc:
        # lost a race against another signup for the same email
        await db.rollback()
        raise DuplicateAccount() from exc


async def signup(
    db: AsyncSession,
    ctx: SessionContext,
    email: str,
    password: str,
    name: str,
) -> SessionUserSchema:
    """Create a registered user and log it in."""
    _validate_signup(email, password, name)
    if await find_user_by_email(db, email) is not None:
        raise DuplicateAccount()

    user = User(
        id=uuid.uuid4().hex,
        email=email.strip(),
        email_normalized=normalize_email(email),
        name=name.strip(),
        hashed_password=hash_password(password),
        auth_provider="email",
    )
    await _insert_user(db, user)
    logger.info("Registered user %s", user.id)
    return ctx.establish(to_session_user(user))


async def login(db: AsyncSession, ctx: SessionContext, email: str, password: str) -> SessionUserSchema:
    user = await find_user_by_email(db, email)
    if user is None:
        raise AccountNotFound()
    if not verify_password(password or "", user.hashed_password):
        logger.info("Rejected password for user %s", user.id)
        raise InvalidCredentials()
    logger.info("User %s logged in", user.id)
    return ctx.establish(to_session_user(user))


def login_as_guest(ctx: SessionContext) -> SessionUserSchema:
    guest = SessionUserSchema(
        id=GUEST_USER_ID,
        email=GUEST_EMAIL,
        name=GUEST_NAME,
        avatar=GUEST_AVATAR,
        is_guest=True,
    )
    logger.info("Guest session started")
    return ctx.establish(guest)


async def login_with_external_provider(
    db: AsyncSession,
    ctx: SessionContext,
    provider: ExternalIdentityProvider,
) -> SessionUserSchema:
    """Log in with an identity asserted by `provider`, creating the account on first use."""
    identity = await provider.authenticate()
    user = await find_user_by_email(db, identity.email)
    if user is None:
        user = User(
            id=uuid.uuid4().hex,
            email=identity.email,
            email_normalized=normalize_email(identity.email),
            name=identity.name,
            hashed_password=None,
            auth_provider=provider.name,
        )
        try:
            await _insert_user(db, user)
        except DuplicateAccount:
            user = await find_user_by_email(db, identity.email)
            if user is None:
                raise
        else:
            logger.info("Registered %s user %s", provider.name, user.id)
    logger.info("User %s logged in via %s", user.id, provider.name)
    return ctx.establish(to_session_user(user))


def logout(ctx: SessionContext) -> None:
    if ctx.user is not None:
        logger.info("User %s logged out", ctx.user.id)
    ctx.clear()


def _session_lifetime() -> int:
    # a revoked id must outlive every token that can still carry it
    settings = get_settings()
    return max(settings.auth_cookie_max_age, settings.access_token_expire_minutes * 60)


async def revoke_session(db: AsyncSession, session_id: str | None) -> None:
    """Invalidate every token carrying `session_id`; prunes revocations that can no longer match."""
    if not session_id:
        return
    now = int(time.time())
    await db.execute(delete(RevokedSession).where(RevokedSession.expires_at < now))
    if await db.get(RevokedSession, session_id) is None:
        db.add(RevokedSession(session_id=session_id, expires_at=now + _session_lifetime()))
    await db.commit()
    logger.info("Revoked session %s", session_id)


async def is_session_revoked(db: AsyncSession, session_id: str | None) -> bool:
    if not session_id:
        return False
    return await db.get(RevokedSession, session_id) is not None


def get_current_user(ctx: SessionContext) -> SessionUserSchema | None:
    return ctx.user


def require_user(ctx: SessionContext) -> SessionUserSchema:
    if ctx.user is None:
        raise NotAuthenticated()
    return ctx.user
