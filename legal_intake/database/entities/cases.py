"""
Case ORM Model
==============

``Case`` rows are the marketplace's legal matters. The intake service only
ever touches them in their initial ``draft`` state: it creates a draft the
first time an authenticated client's conversation yields an extraction and
then overwrites the analysis columns on every later extraction.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Integer, TEXT, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from legal_intake.database.config.connection_engine import JSONType, declarativeBase
from legal_intake.database.entities.conversations import utcnow


class Case(declarativeBase):
    """ORM model for the `cases` table (columns used by the intake flow)."""

    __tablename__ = 'cases'

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    case_number: Mapped[str] = mapped_column(TEXT, nullable=False, unique=True)
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(TEXT, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)
    category: Mapped[str] = mapped_column(TEXT, nullable=False)
    urgency: Mapped[str] = mapped_column(TEXT, nullable=False, default='medium')
    status: Mapped[str] = mapped_column(TEXT, nullable=False, default='draft')
    step: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=1)
    language: Mapped[str] = mapped_column(TEXT, nullable=False, default='en')
    jurisdiction: Mapped[str] = mapped_column(TEXT, nullable=False)
    extracted_entities: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)
    legal_analysis: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)
    case_complexity_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    client_responses_summary: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)
    ai_summary: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __str__(self) -> str:
        return f"Case: id:{self.id}, number: {self.case_number}, status: {self.status}, category: {self.category}"
