"""
Messages DAO

Purpose
-------
Data-access layer for the `Message` ORM entity. Provides:
- Message creation
- Retrieval by conversation (chronological)

Design
------
- Requires an active SQLAlchemy `Session` provided by the caller.
- Retrieval uses a subquery for "latest-first then re-order ascending"
  semantics, so a `limit` keeps the most recent turns while still returning
  them oldest → newest.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session, aliased

from legal_intake.database.entities.messages import Message

logger = logging.getLogger(__name__)


class MessagesDao:
    """
    Data Access Object (DAO) for managing conversation messages.
    """

    def createMessages(self, session: Session, messages: List[Message]) -> List[Message]:
        """
        Stage several message rows in one go.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        messages : list[Message]
            Message entities, in the order they should be replayed.
        """
        try:
            session.add_all(messages)
            return messages
        except Exception as e:
            logger.error(f"Error in MessagesDao.createMessages. Error Message: {e}")
            raise e

    def fetchMessagesByConversationId(
        self, session: Session, conversation_id: UUID, limit: Optional[int] = None
    ) -> List[Message]:
        """
        Fetch messages in a conversation, ordered by creation time (ascending).

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        conversation_id : UUID
            Unique identifier of the conversation.
        limit : int | None
            Keep only the `limit` most recent messages.

        Returns
        -------
        list[Message]
            Messages belonging to the specified conversation.
        """
        try:
            query = (
                session.query(Message)
                .filter(Message.conversation_id == conversation_id)
                .order_by(desc(Message.created_at))
            )
            if limit is not None:
                query = query.limit(limit)
            subq = query.subquery()

            recentMessages = aliased(Message, subq)

            return (
                session.query(recentMessages)
                .order_by(asc(recentMessages.created_at))
                .all()
            )
        except Exception as e:
            logger.error(f"Error in MessagesDao.fetchMessagesByConversationId. Error Message: {e}")
            raise e
