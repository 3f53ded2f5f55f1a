"""Pydantic schemas for study-log entries."""
import datetime as dt

from pydantic import BaseModel, Field, field_validator


class EntryFieldsSchema(BaseModel):
    """Fields a client sends; id and timestamp are assigned on create."""

    date: dt.date
    subjects: str = Field(min_length=1)
    duration_minutes: int = Field(gt=0)
    focus_level: int = Field(ge=1, le=10)
    remarks: str = ""

    class Config:
        str_strip_whitespace = True

    @field_validator("remarks", mode="before")
    @classmethod
    def remarks_default(cls, value):
        # remarks are optional; an explicit null means "no remarks"
        return "" if value is None else value


class DailyEntrySchema(EntryFieldsSchema):
    id: str = Field(min_length=1, max_length=128)
    timestamp: int = Field(ge=0)  # creation instant, epoch ms

    class Config:
        from_attributes = True
        str_strip_whitespace = True


class EntryUpsertSchema(EntryFieldsSchema):
    """PUT body: id comes from the path, timestamp is kept from the client when given."""

    timestamp: int | None = Field(default=None, ge=0)
