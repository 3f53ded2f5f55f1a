"""Pydantic schemas for the AI coach."""
from pydantic import BaseModel, Field


class AIAnalysisSchema(BaseModel):
    """Structured report requested from the model (also used as its response schema)."""

    summary: str
    trends: list[str]
    mistakes: list[str]
    suggestions: list[str]


class CoachMessageInSchema(BaseModel):
    text: str = Field(min_length=1)


class CoachReplySchema(BaseModel):
    role: str = "model"
    text: str


class AnalysisRequestSchema(BaseModel):
    year: int
    month: int = Field(ge=0, le=11)  # zero-based
