"""
Message ORM Model
=================

The ``Message`` ORM model represents a single chat turn within a conversation.

Key features
~~~~~~~~~~~~
- UUID primary key (``id``)
- Foreign key reference to ``conversations.id`` (``conversation_id``)
- Sender role (``role``): ``user`` or ``assistant``
- Message text (``content``) and a ``metadata`` blob (mode, extraction,
  fallback flags)
- Timezone-aware ``created_at`` timestamp; history is replayed in this order

Rows are immutable once written.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, TEXT, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from legal_intake.database.config.connection_engine import JSONType, declarativeBase
from legal_intake.database.entities.conversations import utcnow


class Message(declarativeBase):
    """
    ORM model for the `messages` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    conversation_id : UUID
        Foreign key to the owning conversation.
    role : str
        ``user`` | ``assistant``.
    content : str
        Text of the turn.
    message_type : str
        ``text`` for chat turns.
    meta : dict | None
        The ``metadata`` column.
    created_at : datetime
        Insertion timestamp (UTC).
    """

    __tablename__ = 'messages'

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    conversation_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey('conversations.id'), nullable=False)
    role: Mapped[str] = mapped_column(TEXT, nullable=False)
    content: Mapped[str] = mapped_column(TEXT, nullable=False)
    message_type: Mapped[str] = mapped_column(TEXT, nullable=False, default='text')
    meta: Mapped[Optional[dict]] = mapped_column('metadata', JSONType, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def __init__(
        self,
        conversation_id: UUID,
        role: str,
        content: str,
        meta: dict | None = None,
        created_at: datetime | str | None = None,
        message_id: UUID | None = None,
    ):
        """
        Initialize a new Message object.

        Parameters
        ----------
        conversation_id : UUID
            ID of the conversation this message belongs to.
        role : str
            ``user`` or ``assistant``.
        content : str
            The content of the message.
        meta : dict | None
            Metadata blob stored in the ``metadata`` column.
        created_at : datetime | str | None
            Creation timestamp. Accepts datetime or ISO8601 string; defaults to now.
        message_id : UUID | None
            Explicit identifier; generated when omitted.
        """
        self.id = message_id or uuid4()
        self.conversation_id = conversation_id
        self.role = role
        self.content = content
        self.message_type = 'text'
        self.meta = meta
        if isinstance(created_at, str):
            self.created_at = datetime.fromisoformat(created_at)
        else:
            self.created_at = created_at or utcnow()

    def __str__(self) -> str:
        return (
            f"Conversation: id:{self.conversation_id}, "
            f"role: {self.role}, "
            f"message: {self.content}, "
            f"time_created: {self.created_at}"
        )
