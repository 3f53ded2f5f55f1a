from focusmate.services.analytics import build_chart_data, shift_month, summarize_month
from focusmate.services.identity import SessionContext

__all__ = ["SessionContext", "build_chart_data", "shift_month", "summarize_month"]
