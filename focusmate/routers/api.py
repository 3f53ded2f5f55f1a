"""API routes: JSON for entries and monthly analytics."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from focusmate.db.session import get_db
from focusmate.routers.deps import get_session_context
from focusmate.schemas.entry import DailyEntrySchema, EntryFieldsSchema, EntryUpsertSchema
from focusmate.schemas.stats import MonthlySummarySchema
from focusmate.services import entries as entry_store
from focusmate.services.analytics import summarize_month
from focusmate.services.identity import SessionContext

router = APIRouter(prefix="/api", tags=["api"])

Db = Annotated[AsyncSession, Depends(get_db)]
Ctx = Annotated[SessionContext, Depends(get_session_context)]


@router.get("/entries", response_model=list[DailyEntrySchema])
async def list_entries(db: Db, ctx: Ctx):
    """All entries of the current user in storage order."""
    return await entry_store.list_entries(db, ctx)


@router.post("/entries", response_model=DailyEntrySchema, status_code=201)
async def create_entry(body: EntryFieldsSchema, db: Db, ctx: Ctx):
    """Log a new session; id and timestamp are assigned here."""
    timestamp = entry_store.now_ms()
    entry = DailyEntrySchema(
        id=entry_store.make_entry_id(body.date, timestamp),
        timestamp=timestamp,
        **body.model_dump(),
    )
    await entry_store.upsert_entry(db, ctx, entry)
    return entry


@router.get("/entries/month", response_model=list[DailyEntrySchema])
async def list_entries_by_month(year: int, month: int, db: Db, ctx: Ctx):
    """month is zero-based (0 = January)."""
    return await entry_store.list_entries_by_month(db, ctx, year, month)


@router.get("/entries/recent", response_model=list[DailyEntrySchema])
async def list_recent_entries(db: Db, ctx: Ctx, limit: int = entry_store.DEFAULT_RECENT_LIMIT):
    return await entry_store.list_recent_entries(db, ctx, limit)


@router.put("/entries/{entry_id}", response_model=DailyEntrySchema)
async def put_entry(entry_id: str, body: EntryUpsertSchema, db: Db, ctx: Ctx):
    """Insert or replace by id. Without a timestamp the existing one is kept."""
    timestamp = body.timestamp
    if timestamp is None:
        existing = await entry_store.get_entry(db, ctx, entry_id)
        timestamp = existing.timestamp if existing is not None else entry_store.now_ms()
    entry = entry_store.validate_entry(
        {"id": entry_id, "timestamp": timestamp, **body.model_dump(exclude={"timestamp"})}
    )
    await entry_store.upsert_entry(db, ctx, entry)
    return entry


@router.get("/entries/{entry_id}", response_model=DailyEntrySchema)
async def get_entry(entry_id: str, db: Db, ctx: Ctx):
    entry = await entry_store.get_entry(db, ctx, entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Entry not found")
    return entry


@router.delete("/entries/{entry_id}", status_code=204)
async def delete_entry(entry_id: str, db: Db, ctx: Ctx):
    await entry_store.delete_entry(db, ctx, entry_id)
    return Response(status_code=204)


@router.get("/analytics/monthly", response_model=MonthlySummarySchema)
async def monthly_summary(year: int, month: int, db: Db, ctx: Ctx):
    """Chart series and totals for one month (zero-based)."""
    month_entries = await entry_store.list_entries_by_month(db, ctx, year, month)
    return summarize_month(year, month, month_entries)
