"""
Entities Package — SQLAlchemy 2.0 ORM Models
============================================

The `entities` package maps the managed database tables touched by the intake
service to Python classes using SQLAlchemy 2.0-typed mappings. They are
consumed by DAOs (`daos` package).

Tech Stack & Conventions
------------------------
- PostgreSQL in production (JSONB / text[] columns), SQLite in tests
- Portable `Uuid` primary keys
- Timezone-aware timestamps (UTC)
- The JSON ``metadata`` column is mapped to the ``meta`` attribute
  (``metadata`` is reserved on declarative classes)

Contents
--------
- Conversation    : chat session with mode, language, optional case / owner links
- Message         : one immutable chat turn, ordered by ``created_at``
- Case            : legal matter; the service creates and updates drafts only
- CaseMessage     : chat turns mirrored onto a linked case
- LegalKnowledge  : read-only reference entries for prompt enrichment
- CaseCategory    : read-only category catalogue for the intake prompt
"""

from legal_intake.database.entities.conversations import Conversation
from legal_intake.database.entities.messages import Message
from legal_intake.database.entities.cases import Case
from legal_intake.database.entities.case_messages import CaseMessage
from legal_intake.database.entities.legal_knowledge import LegalKnowledge
from legal_intake.database.entities.case_categories import CaseCategory

__all__ = ["Conversation", "Message", "Case", "CaseMessage", "LegalKnowledge", "CaseCategory"]
