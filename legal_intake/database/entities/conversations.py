"""
Conversation ORM Model
=======================

The ``Conversation`` ORM model represents one chat session stored in the
``conversations`` table. Conversations are created by the frontend for intake
sessions and by the service itself for anonymous / lawyer Q&A sessions.

Key features
~~~~~~~~~~~~
- UUID primary key (``id``) and an opaque client ``session_id``
- **Mode** (``mode``) used by the pipeline to steer the flow:
  ``"intake"`` (case gathering), ``"qa"`` (anonymous Q&A) or ``"qa_lawyer"``
- Optional link to a draft case (``case_id``), set the first time an
  extraction produces a case row
- Optional owner (``user_id``) and lawyer (``lawyer_id``)
- Free-form ``metadata`` blob; anonymous intake extractions are parked here
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import DateTime, TEXT, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from legal_intake.database.config.connection_engine import JSONType, declarativeBase


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Conversation(declarativeBase):
    """
    ORM model for the `conversations` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    session_id : str
        Client-side session identifier.
    mode : str
        ``intake`` | ``qa`` | ``qa_lawyer``.
    language : str
        Language code of the session (``en``, ``ar``, ``de``).
    status : str
        Lifecycle tag, ``active`` on creation.
    case_id : UUID | None
        Draft case linked to this conversation, if any.
    user_id : UUID | None
        Owning client, if authenticated.
    lawyer_id : UUID | None
        Owning lawyer for ``qa_lawyer`` sessions.
    meta : dict | None
        The ``metadata`` column (``metadata`` is reserved by SQLAlchemy).
    """

    __tablename__ = 'conversations'

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    session_id: Mapped[str] = mapped_column(TEXT, nullable=False)
    mode: Mapped[str] = mapped_column(TEXT, nullable=False, default='intake')
    language: Mapped[str] = mapped_column(TEXT, nullable=False, default='en')
    status: Mapped[str] = mapped_column(TEXT, nullable=False, default='active')
    case_id: Mapped[Optional[UUID]] = mapped_column(Uuid, nullable=True)
    user_id: Mapped[Optional[UUID]] = mapped_column(Uuid, nullable=True)
    lawyer_id: Mapped[Optional[UUID]] = mapped_column(Uuid, nullable=True)
    meta: Mapped[Optional[dict]] = mapped_column('metadata', JSONType, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __str__(self) -> str:
        return (
            f"Conversation: id:{self.id}, mode: {self.mode}, language: {self.language}, "
            f"case: {self.case_id}, user: {self.user_id}"
        )
