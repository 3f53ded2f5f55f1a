"""Registered user. Guests never get a row here."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from focusmate.db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True)  # uuid4 hex, unrelated to the email
    email = Column(String(255), nullable=False)  # original case as entered
    email_normalized = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    hashed_password = Column(String(255), nullable=True)  # null for provider-only accounts
    auth_provider = Column(String(16), nullable=False, default="email")  # email | google
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
