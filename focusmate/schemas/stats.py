"""Pydantic schemas for monthly analytics."""
from pydantic import BaseModel


class ChartPointSchema(BaseModel):
    day: str  # day of month, "1".."31"
    duration: int
    focus: int


class MonthRefSchema(BaseModel):
    year: int
    month: int  # zero-based


class MonthlySummarySchema(BaseModel):
    year: int
    month: int
    label: str  # e.g. "March 2024"
    entry_count: int
    total_minutes: int
    average_focus: float = 0.0
    days_logged: int = 0
    chart: list[ChartPointSchema]
    previous: MonthRefSchema
    next: MonthRefSchema
