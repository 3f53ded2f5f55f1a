from focusmate.models.user import User
from focusmate.models.entry import Entry
from focusmate.models.revoked_session import RevokedSession

__all__ = ["User", "Entry", "RevokedSession"]
