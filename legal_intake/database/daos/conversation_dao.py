"""
Conversation DAO

Purpose
-------
Provides a thin data-access layer for the `Conversation` ORM entity:
- Create conversations
- Fetch a conversation by id, or the latest one by owner and mode
- Link a conversation to a case
- Replace the conversation metadata blob

Design
------
- Requires an active SQLAlchemy `Session` supplied by the caller (no session
  creation inside the DAO). Transaction boundaries live in the service layer
  (`legal_intake.database.core.funcs`), which is wrapped by `@transactional`.
- Update operations fetch the target row and mutate attributes; the commit
  happens when the surrounding transaction ends.

Error Handling
--------------
- Methods catch generic `Exception`, log the error message, and re-raise.
- `update*` methods use `.one()`, which raises `NoResultFound` if the target
  conversation does not exist.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from legal_intake.database.entities.conversations import Conversation

logger = logging.getLogger(__name__)


class ConversationDao:
    """
    Data Access Object (DAO) for managing Conversation entities.
    """

    def createConversation(self, session: Session, conversation: Conversation) -> Conversation:
        """
        Stage a new conversation record.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        conversation : Conversation
            Conversation entity instance to be added.
        """
        try:
            session.add(conversation)
            session.flush()
            return conversation
        except Exception as e:
            logger.error(f"Error in ConversationDao.createConversation. Error: {e}")
            raise e

    def fetchConversationById(self, session: Session, conversation_id: UUID) -> Optional[Conversation]:
        """
        Fetch a conversation by primary key.

        Returns
        -------
        Conversation | None
            The conversation, or None when it does not exist.
        """
        try:
            return (
                session.query(Conversation)
                .filter(Conversation.id == conversation_id)
                .one_or_none()
            )
        except Exception as e:
            logger.error(f"Error in ConversationDao.fetchConversationById. Error: {e}")
            raise e

    def fetchConversationByCaseId(self, session: Session, case_id: UUID) -> Optional[Conversation]:
        """Fetch the conversation linked to a case (first match)."""
        try:
            return (
                session.query(Conversation)
                .filter(Conversation.case_id == case_id)
                .order_by(Conversation.created_at)
                .first()
            )
        except Exception as e:
            logger.error(f"Error in ConversationDao.fetchConversationByCaseId. Error: {e}")
            raise e

    def fetchLatestConversationByUserAndMode(
        self, session: Session, user_id: UUID, mode: str
    ) -> Optional[Conversation]:
        """
        Fetch the most recently created conversation of a user in a given mode.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        user_id : UUID
            Owner of the conversation.
        mode : str
            Conversation mode (``intake``, ``qa``, ``qa_lawyer``).
        """
        try:
            return (
                session.query(Conversation)
                .filter(Conversation.user_id == user_id)
                .filter(Conversation.mode == mode)
                .order_by(desc(Conversation.created_at))
                .first()
            )
        except Exception as e:
            logger.error(f"Error in ConversationDao.fetchLatestConversationByUserAndMode. Error: {e}")
            raise e

    def updateConversationCase(self, session: Session, conversation_id: UUID, case_id: UUID):
        """
        Link a conversation to a case.

        Raises
        ------
        Exception
            If the update fails or the conversation is not found.
        """
        try:
            conversation = (
                session.query(Conversation).filter(Conversation.id == conversation_id).one()
            )
            conversation.case_id = case_id
        except Exception as e:
            logger.error(f"Error in ConversationDao.updateConversationCase. Error: {e}")
            raise e

    def updateConversationMetadata(self, session: Session, conversation_id: UUID, metadata: dict):
        """
        Replace the metadata blob of a conversation.

        The blob is reassigned (not mutated in place) so the JSON column is
        flagged dirty.
        """
        try:
            conversation = (
                session.query(Conversation).filter(Conversation.id == conversation_id).one()
            )
            conversation.meta = metadata
        except Exception as e:
            logger.error(f"Error in ConversationDao.updateConversationMetadata. Error: {e}")
            raise e
