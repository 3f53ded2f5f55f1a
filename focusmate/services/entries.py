"""Entry store: the current user's study-log collection.

The owner key is read from the SessionContext on every call, so a different
session always sees a different collection.
"""
import calendar
import datetime as dt
import logging
import time
from typing import Any

from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from focusmate.core.errors import ValidationError
from focusmate.models.entry import Entry
from focusmate.schemas.entry import DailyEntrySchema
from focusmate.services.identity import SessionContext, require_user

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 5


def now_ms() -> int:
    return int(time.time() * 1000)


def make_entry_id(date: dt.date, timestamp: int) -> str:
    """Id for a new entry: practically unique within one user's collection."""
    return f"{date.isoformat()}-{timestamp}"


def _describe(exc: PydanticValidationError) -> str:
    err = exc.errors()[0]
    field = ".".join(str(part) for part in err.get("loc", ())) or "entry"
    return f"{field}: {err.get('msg', 'invalid value')}"


def validate_entry(entry: DailyEntrySchema | dict[str, Any]) -> DailyEntrySchema:
    """Re-check the entry invariants regardless of where the value came from."""
    data = entry.model_dump() if isinstance(entry, BaseModel) else entry
    try:
        return DailyEntrySchema.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(_describe(exc)) from exc


def _row_to_entry(row: Entry) -> DailyEntrySchema | None:
    try:
        return DailyEntrySchema(
            id=row.entry_id,
            date=row.date,
            subjects=row.subjects,
            duration_minutes=row.duration_minutes,
            focus_level=row.focus_level,
            remarks=row.remarks,
            timestamp=row.timestamp,
        )
    except PydanticValidationError:
        logger.warning("Skipping unreadable entry %s of owner %s", row.entry_id, row.owner_id)
        return None


def _rows_to_entries(rows) -> list[DailyEntrySchema]:
    entries = []
    for row in rows:
        entry = _row_to_entry(row)
        if entry is not None:
            entries.append(entry)
    return entries


def _apply(row: Entry, entry: DailyEntrySchema) -> None:
    row.date = entry.date
    row.subjects = entry.subjects
    row.duration_minutes = entry.duration_minutes
    row.focus_level = entry.focus_level
    row.remarks = entry.remarks
    row.timestamp = entry.timestamp


async def _get_row(db: AsyncSession, owner_id: str, entry_id: str) -> Entry | None:
    result = await db.execute(
        select(Entry).where(Entry.owner_id == owner_id, Entry.entry_id == entry_id)
    )
    return result.scalar_one_or_none()


async def upsert_entry(
    db: AsyncSession,
    ctx: SessionContext,
    entry: DailyEntrySchema | dict[str, Any],
) -> None:
    """Replace the entry with the same id in place, or append it."""
    owner_id = require_user(ctx).id
    data = validate_entry(entry)

    row = await _get_row(db, owner_id, data.id)
    if row is not None:
        _apply(row, data)
        await db.commit()
        return

    row = Entry(owner_id=owner_id, entry_id=data.id)
    _apply(row, data)
    db.add(row)
    try:
        await db.commit()
    except IntegrityError:
        # a concurrent insert won; update that row instead
        await db.rollback()
        row = await _get_row(db, owner_id, data.id)
        if row is None:
            raise
        _apply(row, data)
        await db.commit()


async def list_entries(db: AsyncSession, ctx: SessionContext) -> list[DailyEntrySchema]:
    owner_id = require_user(ctx).id
    result = await db.execute(select(Entry).where(Entry.owner_id == owner_id).order_by(Entry.pk.asc()))
    return _rows_to_entries(result.scalars().all())


async def get_entry(db: AsyncSession, ctx: SessionContext, entry_id: str) -> DailyEntrySchema | None:
    owner_id = require_user(ctx).id
    row = await _get_row(db, owner_id, entry_id)
    return _row_to_entry(row) if row is not None else None


async def delete_entry(db: AsyncSession, ctx: SessionContext, entry_id: str) -> None:
    """Remove the entry if present; absent ids are a no-op."""
    owner_id = require_user(ctx).id
    await db.execute(delete(Entry).where(Entry.owner_id == owner_id, Entry.entry_id == entry_id))
    await db.commit()


def month_bounds(year: int, month: int) -> tuple[dt.date, dt.date]:
    """First and last day (inclusive) of a zero-based month."""
    if not 0 <= month <= 11:
        raise ValidationError("month must be between 0 and 11.")
    if not dt.MINYEAR <= year <= dt.MAXYEAR:
        raise ValidationError("year is out of range.")
    _, days = calendar.monthrange(year, month + 1)
    return dt.date(year, month + 1, 1), dt.date(year, month + 1, days)


async def list_entries_by_month(
    db: AsyncSession,
    ctx: SessionContext,
    year: int,
    month: int,
) -> list[DailyEntrySchema]:
    """Entries whose date falls in the given month (0 = January), in storage order."""
    owner_id = require_user(ctx).id
    first, last = month_bounds(year, month)
    result = await db.execute(
        select(Entry)
        .where(Entry.owner_id == owner_id, Entry.date >= first, Entry.date <= last)
        .order_by(Entry.pk.asc())
    )
    return _rows_to_entries(result.scalars().all())


async def list_recent_entries(
    db: AsyncSession,
    ctx: SessionContext,
    limit: int = DEFAULT_RECENT_LIMIT,
) -> list[DailyEntrySchema]:
    """Most recently created first (by timestamp, not by study date)."""
    owner_id = require_user(ctx).id
    if limit < 0:
        raise ValidationError("limit must not be negative.")
    if limit == 0:
        return []
    result = await db.execute(
        select(Entry)
        .where(Entry.owner_id == owner_id)
        .order_by(Entry.timestamp.desc(), Entry.pk.asc())
        .limit(limit)
    )
    return _rows_to_entries(result.scalars().all())
