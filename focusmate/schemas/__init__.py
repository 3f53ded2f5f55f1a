from focusmate.schemas.coach import (
    AIAnalysisSchema,
    AnalysisRequestSchema,
    CoachMessageInSchema,
    CoachReplySchema,
)
from focusmate.schemas.entry import DailyEntrySchema, EntryFieldsSchema, EntryUpsertSchema
from focusmate.schemas.stats import ChartPointSchema, MonthlySummarySchema, MonthRefSchema
from focusmate.schemas.user import AuthOutSchema, LoginSchema, SessionUserSchema, SignupSchema

__all__ = [
    "AIAnalysisSchema",
    "AnalysisRequestSchema",
    "AuthOutSchema",
    "ChartPointSchema",
    "CoachMessageInSchema",
    "CoachReplySchema",
    "DailyEntrySchema",
    "EntryFieldsSchema",
    "EntryUpsertSchema",
    "LoginSchema",
    "MonthRefSchema",
    "MonthlySummarySchema",
    "SessionUserSchema",
    "SignupSchema",
]
