"""SQLAlchemy declarative base and model imports for Alembic."""
from focusmate.db.session import Base

# Import all models so Alembic can see them
from focusmate.models.entry import Entry  # noqa: F401
from focusmate.models.revoked_session import RevokedSession  # noqa: F401
from focusmate.models.user import User  # noqa: F401

__all__ = ["Base", "User", "Entry", "RevokedSession"]
