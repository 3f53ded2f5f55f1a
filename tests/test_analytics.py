"""Tests for monthly analytics helpers."""
import pytest

from focusmate.schemas.entry import DailyEntrySchema
from focusmate.services.analytics import (
    average_focus,
    build_chart_data,
    month_label,
    shift_month,
    summarize_month,
)


def _entry(entry_id: str, date: str, minutes: int, focus: int, timestamp: int = 1) -> DailyEntrySchema:
    return DailyEntrySchema(
        id=entry_id,
        date=date,
        subjects="Physics",
        duration_minutes=minutes,
        focus_level=focus,
        timestamp=timestamp,
    )


class TestShiftMonth:
    @pytest.mark.parametrize(
        "start,offset,expected",
        [
            ((2024, 2), 1, (2024, 3)),
            ((2024, 11), 1, (2025, 0)),
            ((2024, 0), -1, (2023, 11)),
            ((2024, 5), -18, (2022, 11)),
            ((2024, 5), 0, (2024, 5)),
        ],
    )
    def test_shift(self, start, offset, expected) -> None:
        assert shift_month(*start, offset) == expected


def test_month_label_is_zero_based() -> None:
    assert month_label(2024, 2) == "March 2024"


def test_chart_is_sorted_by_date() -> None:
    entries = [
        _entry("b", "2024-03-15", 60, 8),
        _entry("a", "2024-03-02", 30, 4),
    ]

    chart = build_chart_data(entries)

    assert [(p.day, p.duration, p.focus) for p in chart] == [("2", 30, 4), ("15", 60, 8)]


def test_average_focus_empty() -> None:
    assert average_focus([]) == 0.0


def test_summary_totals() -> None:
    entries = [
        _entry("a", "2024-03-02", 30, 4),
        _entry("b", "2024-03-02", 45, 7),
        _entry("c", "2024-03-20", 90, 9),
    ]

    summary = summarize_month(2024, 2, entries)

    assert summary.label == "March 2024"
    assert summary.entry_count == 3
    assert summary.total_minutes == 165
    assert summary.average_focus == 6.7
    assert summary.days_logged == 2
    assert (summary.previous.year, summary.previous.month) == (2024, 1)
    assert (summary.next.year, summary.next.month) == (2024, 3)


def test_summary_of_empty_month() -> None:
    summary = summarize_month(2025, 0, [])

    assert summary.entry_count == 0
    assert summary.total_minutes == 0
    assert summary.chart == []
    assert (summary.previous.year, summary.previous.month) == (2024, 11)
