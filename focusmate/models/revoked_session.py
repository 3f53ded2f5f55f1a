"""Session ids invalidated by logout; checked for cookies and bearer tokens alike."""
from sqlalchemy import BigInteger, Column, String

from focusmate.db.session import Base


class RevokedSession(Base):
    __tablename__ = "revoked_sessions"

    session_id = Column(String(32), primary_key=True)
    expires_at = Column(BigInteger, nullable=False, index=True)  # epoch seconds; row can be pruned after
