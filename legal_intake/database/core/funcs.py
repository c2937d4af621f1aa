"""
Service-layer operations for conversations, messages, draft cases and the
read-only reference tables.

All functions are wrapped with the `@transactional` decorator, which manages
SQLAlchemy sessions and transactions automatically. Each function accepts (and
uses) an injected `session: Session` provided by the decorator, and returns
plain dicts / lists so nothing detached leaks out of the session.

The intake pipeline calls these one at a time, so every step of a request
commits (or rolls back) on its own.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from legal_intake.database.config.config import settings
from legal_intake.database.daos.case_category_dao import CaseCategoryDao
from legal_intake.database.daos.case_dao import CaseDao
from legal_intake.database.daos.case_message_dao import CaseMessagesDao
from legal_intake.database.daos.conversation_dao import ConversationDao
from legal_intake.database.daos.legal_knowledge_dao import LegalKnowledgeDao
from legal_intake.database.daos.message_dao import MessagesDao
from legal_intake.database.entities.case_messages import CaseMessage
from legal_intake.database.entities.cases import Case
from legal_intake.database.entities.conversations import Conversation
from legal_intake.database.entities.messages import Message
from legal_intake.database.helpers.transactionManagement import transactional

logger = logging.getLogger(__name__)


class ConversationNotFound(Exception):
    """Raised when a referenced conversation does not exist."""


class CaseNotFound(Exception):
    """Raised when a referenced case does not exist."""


def _as_uuid(value) -> Optional[UUID]:
    if value is None or isinstance(value, UUID):
        return value
    return UUID(str(value))


def _conversation_to_dict(conversation: Conversation) -> dict:
    return {
        "id": conversation.id,
        "mode": conversation.mode,
        "language": conversation.language,
        "case_id": conversation.case_id,
        "user_id": conversation.user_id,
        "lawyer_id": conversation.lawyer_id,
        "metadata": dict(conversation.meta or {}),
    }


def generate_case_number() -> str:
    """Human-facing case reference, e.g. ``LC-20250114-4F2A9C``."""
    return f"LC-{datetime.now(timezone.utc):%Y%m%d}-{uuid.uuid4().hex[:6].upper()}"


@transactional
def get_conversation(session: Session, conversation_id) -> Optional[dict]:
    """
    Fetch a conversation.

    Returns
    -------
    dict | None
        {'id', 'mode', 'language', 'case_id', 'user_id', 'lawyer_id', 'metadata'}
        or None when the conversation does not exist.
    """
    conversation = ConversationDao().fetchConversationById(session, _as_uuid(conversation_id))
    return _conversation_to_dict(conversation) if conversation else None


@transactional
def create_conversation(
    session: Session,
    mode: str,
    language: str,
    user_id=None,
    lawyer_id=None,
) -> dict:
    """
    Create a new conversation (used for Q&A sessions started without an id).

    Returns
    -------
    dict
        Same shape as `get_conversation`.
    """
    conversation = Conversation(
        id=uuid.uuid4(),
        session_id=uuid.uuid4().hex,
        mode=mode,
        language=language,
        status='active',
        user_id=_as_uuid(user_id),
        lawyer_id=_as_uuid(lawyer_id),
        meta={},
    )
    ConversationDao().createConversation(session, conversation)
    logger.info("Created %s conversation %s", mode, conversation.id)
    return _conversation_to_dict(conversation)


@transactional
def get_conversation_history(session: Session, conversation_id, limit: Optional[int] = None) -> List[dict]:
    """
    Replay the turns of a conversation in insertion order.

    Returns
    -------
    list[dict]
        Each item: {'role', 'content'}; empty when there is no history.
    """
    messages = MessagesDao().fetchMessagesByConversationId(
        session, conversation_id=_as_uuid(conversation_id), limit=limit
    )
    return [{"role": mes.role, "content": mes.content} for mes in messages]


@transactional
def search_legal_knowledge(session: Session, keywords: List[str], language: str, limit: int = 5) -> List[dict]:
    """
    Keyword search over the reference table.

    Returns
    -------
    list[dict]
        Each item: {'title', 'content', 'category', 'law_reference', 'article_number'}
    """
    entries = LegalKnowledgeDao().searchByKeywords(session, keywords=keywords, language=language, limit=limit)
    return [
        {
            "title": entry.title,
            "content": entry.content,
            "category": entry.category,
            "law_reference": entry.law_reference,
            "article_number": entry.article_number,
        }
        for entry in entries
    ]


@transactional
def get_active_case_categories(session: Session, language: str = 'en') -> List[dict]:
    """
    List the active case categories.

    Returns
    -------
    list[dict]
        Each item: {'name', 'display_name', 'description'}
    """
    categories = CaseCategoryDao().fetchActiveCategories(session)
    return [
        {
            "name": category.name,
            "display_name": category.display_name(language),
            "description": category.description,
        }
        for category in categories
    ]


@transactional
def get_case_context(session: Session, case_id) -> Optional[dict]:
    """Return the fields of a case a lawyer-facing prompt needs, or None."""
    case = CaseDao().fetchCaseById(session, _as_uuid(case_id))
    if case is None:
        return None
    return {
        "id": case.id,
        "case_number": case.case_number,
        "category": case.category,
        "urgency": case.urgency,
        "description": case.description,
        "ai_summary": case.ai_summary,
    }


@transactional
def store_conversation_extraction(session: Session, conversation_id, extracted_data: dict) -> None:
    """
    Park an extraction in the conversation's metadata blob.

    Used for anonymous intake: there is no owner to attach a case to yet.
    """
    conversation_dao = ConversationDao()
    conversation = conversation_dao.fetchConversationById(session, _as_uuid(conversation_id))
    if conversation is None:
        raise ConversationNotFound(f"Conversation {conversation_id} not found")
    metadata = dict(conversation.meta or {})
    metadata["extractedData"] = extracted_data
    metadata["extractedAt"] = datetime.now(timezone.utc).isoformat()
    conversation_dao.updateConversationMetadata(session, conversation.id, metadata)


@transactional
def create_draft_case(session: Session, conversation_id, user_id, fields: dict) -> UUID:
    """
    Insert a draft case for an authenticated client and link the conversation.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    conversation_id : UUID | str
        Conversation the extraction came from.
    user_id : UUID | str
        Owner of the new case.
    fields : dict
        Column values (title, description, category, urgency, language,
        extracted_entities, legal_analysis, case_complexity_score,
        client_responses_summary).

    Returns
    -------
    UUID
        Id of the new case.
    """
    case = Case(
        id=uuid.uuid4(),
        case_number=generate_case_number(),
        user_id=_as_uuid(user_id),
        status='draft',
        step=1,
        jurisdiction=settings.SERVED_JURISDICTION,
        **fields,
    )
    CaseDao().createCase(session, case)
    ConversationDao().updateConversationCase(session, _as_uuid(conversation_id), case.id)
    logger.info("Created draft case %s for conversation %s", case.id, conversation_id)
    return case.id


@transactional
def update_draft_case(session: Session, case_id, fields: dict) -> None:
    """Overwrite the analysis columns of an existing case (last write wins)."""
    CaseDao().updateCaseAnalysis(session, _as_uuid(case_id), fields)
    logger.info("Updated draft case %s", case_id)


@transactional
def save_exchange(
    session: Session,
    conversation_id,
    user_message: str,
    assistant_message: str,
    user_metadata: dict,
    assistant_metadata: dict,
    user_created_at: datetime,
    assistant_created_at: datetime,
) -> Optional[UUID]:
    """
    Append the user turn and the assistant reply to a conversation.

    Returns
    -------
    UUID | None
        The case linked to the conversation (if any) so the caller can mirror
        the exchange onto it.

    Raises
    ------
    ConversationNotFound
        If the conversation does not exist.
    """
    conversation = ConversationDao().fetchConversationById(session, _as_uuid(conversation_id))
    if conversation is None:
        raise ConversationNotFound('Conversation not found or not accessible')
    MessagesDao().createMessages(
        session,
        [
            Message(
                conversation_id=conversation.id,
                role='user',
                content=user_message,
                meta=user_metadata,
                created_at=user_created_at,
            ),
            Message(
                conversation_id=conversation.id,
                role='assistant',
                content=assistant_message,
                meta=assistant_metadata,
                created_at=assistant_created_at,
            ),
        ],
    )
    return conversation.case_id


@transactional
def mirror_case_messages(
    session: Session,
    case_id,
    user_message: str,
    assistant_message: str,
    user_metadata: dict,
    assistant_metadata: dict,
) -> None:
    """Copy an exchange onto the linked case's message thread."""
    case_id = _as_uuid(case_id)
    CaseMessagesDao().createCaseMessages(
        session,
        [
            CaseMessage(case_id=case_id, role='user', content=user_message, message_type='text', meta=user_metadata),
            CaseMessage(case_id=case_id, role='assistant', content=assistant_message, message_type='text', meta=assistant_metadata),
        ],
    )


@transactional
def get_case_transcript(session: Session, case_id) -> List[dict]:
    """
    Return the intake conversation of a case, oldest turn first.

    The conversation linked to the case is used when there is one; otherwise
    the owner's most recent intake conversation is used and linked to the case
    for next time.

    Raises
    ------
    CaseNotFound
        If the case does not exist.
    ConversationNotFound
        If no conversation (or an empty one) can be found for the case.
    """
    case_id = _as_uuid(case_id)
    conversation_dao = ConversationDao()
    conversation = conversation_dao.fetchConversationByCaseId(session, case_id)
    if conversation is None:
        case = CaseDao().fetchCaseById(session, case_id)
        if case is None:
            raise CaseNotFound('No case found')
        conversation = conversation_dao.fetchLatestConversationByUserAndMode(session, case.user_id, 'intake')
        if conversation is None:
            raise ConversationNotFound('No conversation found for case')
        conversation_dao.updateConversationCase(session, conversation.id, case_id)

    messages = MessagesDao().fetchMessagesByConversationId(session, conversation.id)
    if not messages:
        raise ConversationNotFound('No conversation found for this case')
    return [{"role": mes.role, "content": mes.content} for mes in messages]


@transactional
def store_case_summary(session: Session, case_id, summary: str) -> None:
    CaseDao().updateCaseSummary(session, _as_uuid(case_id), summary)
