"""
LegalKnowledge ORM Model
========================

Static reference entries (statute excerpts, explainers) used to enrich the
system prompt. The service never writes to this table.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Boolean, TEXT, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from legal_intake.database.config.connection_engine import StringList, declarativeBase


class LegalKnowledge(declarativeBase):
    """ORM model for the `legal_knowledge` table."""

    __tablename__ = 'legal_knowledge'

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(TEXT, nullable=False)
    content: Mapped[str] = mapped_column(TEXT, nullable=False)
    category: Mapped[str] = mapped_column(TEXT, nullable=False)
    language: Mapped[str] = mapped_column(TEXT, nullable=False)
    law_reference: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)
    article_number: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)
    keywords: Mapped[Optional[list]] = mapped_column(StringList, nullable=True)
    is_active: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True, default=True)
