"""
CaseMessage ORM Model
=====================

Mirror of chat turns attached directly to a case, so lawyers and admins can
read the intake exchange from the case view.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, TEXT, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from legal_intake.database.config.connection_engine import JSONType, declarativeBase
from legal_intake.database.entities.conversations import utcnow


class CaseMessage(declarativeBase):
    """ORM model for the `case_messages` table."""

    __tablename__ = 'case_messages'

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    case_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey('cases.id'), nullable=False)
    role: Mapped[str] = mapped_column(TEXT, nullable=False)
    content: Mapped[str] = mapped_column(TEXT, nullable=False)
    message_type: Mapped[str] = mapped_column(TEXT, nullable=False, default='text')
    meta: Mapped[Optional[dict]] = mapped_column('metadata', JSONType, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
