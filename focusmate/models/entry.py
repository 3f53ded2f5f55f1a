"""Entry model: one logged study session, owned by a user id (registered or guest)."""
from sqlalchemy import BigInteger, Column, Date, Integer, String, Text, UniqueConstraint

from focusmate.db.session import Base


class Entry(Base):
    __tablename__ = "entries"
    __table_args__ = (UniqueConstraint("owner_id", "entry_id", name="uq_entries_owner_entry"),)

    # surrogate key; ascending pk is the collection's storage order
    pk = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(64), nullable=False, index=True)
    entry_id = Column(String(128), nullable=False)  # caller-supplied, e.g. "2024-03-01-1709251200000"

    date = Column(Date, nullable=False)
    subjects = Column(Text, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    focus_level = Column(Integer, nullable=False)  # 1-10
    remarks = Column(Text, nullable=True)
    timestamp = Column(BigInteger, nullable=False)  # creation instant, epoch ms
