"""
Suggestion log repository.

Append-only: rows are created, never updated or deleted.
"""

from sqlmodel import Session

from app.models.suggestion_log import SuggestionLog


class SuggestionLogRepository:
    """Repository for SuggestionLog database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, entry: SuggestionLog) -> SuggestionLog:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry
