"""Monthly chart series and totals; month navigation with zero-based months."""
import calendar

from focusmate.schemas.entry import DailyEntrySchema
from focusmate.schemas.stats import ChartPointSchema, MonthlySummarySchema, MonthRefSchema


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """Move a zero-based (year, month) by offset months."""
    total = year * 12 + month + offset
    return total // 12, total % 12


def month_label(year: int, month: int) -> str:
    """English label, e.g. "March 2024"."""
    return f"{calendar.month_name[month + 1]} {year}"


def sort_by_date(entries: list[DailyEntrySchema]) -> list[DailyEntrySchema]:
    """Ascending study date; stable for entries on the same day."""
    return sorted(entries, key=lambda e: e.date)


def build_chart_data(entries: list[DailyEntrySchema]) -> list[ChartPointSchema]:
    """One point per entry, ordered by date."""
    return [
        ChartPointSchema(day=str(e.date.day), duration=e.duration_minutes, focus=e.focus_level)
        for e in sort_by_date(entries)
    ]


def average_focus(entries: list[DailyEntrySchema]) -> float:
    if not entries:
        return 0.0
    return round(sum(e.focus_level for e in entries) / len(entries), 1)


def summarize_month(year: int, month: int, entries: list[DailyEntrySchema]) -> MonthlySummarySchema:
    prev_year, prev_month = shift_month(year, month, -1)
    next_year, next_month = shift_month(year, month, 1)
    return MonthlySummarySchema(
        year=year,
        month=month,
        label=month_label(year, month),
        entry_count=len(entries),
        total_minutes=sum(e.duration_minutes for e in entries),
        average_focus=average_focus(entries),
        days_logged=len({e.date for e in entries}),
        chart=build_chart_data(entries),
        previous=MonthRefSchema(year=prev_year, month=prev_month),
        next=MonthRefSchema(year=next_year, month=next_month),
    )
