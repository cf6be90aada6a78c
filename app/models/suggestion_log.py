"""
Suggestion audit log database model.

Append-only trail of "suggestion shown → action taken".
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class SuggestionLog(SQLModel, table=True):
    """A suggestion shown to a coach and what they did with it."""

    __tablename__ = "suggestion_logs"

    id: Optional[int] = Field(default=None, primary_key=True)
    coach_id: int = Field(nullable=False, index=True)
    context_type: str = Field(nullable=False, max_length=20)
    context_id: Optional[int] = Field(default=None)
    prompt_summary: str = Field(nullable=False, max_length=500)

    suggestion: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False), )

    # accepted | modified | rejected | pending
    action_taken: str = Field(default="pending", nullable=False, max_length=20)
    coach_notes: Optional[str] = Field(default=None, max_length=2000)

    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
