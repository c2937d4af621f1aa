"""
Legal Knowledge DAO

Purpose
-------
Read-only access to the `legal_knowledge` reference table.

Search semantics
----------------
`searchByKeywords` ORs together, for every keyword, a case-insensitive
substring match on ``title``, on ``content`` and on the text rendering of the
``keywords`` list (which makes it an array-containment test on PostgreSQL
``text[]`` as well as on JSON arrays). Rows are restricted to the requested
language and to active entries, and returned in storage order; there is no
ranking.
"""

import logging
from typing import List

from sqlalchemy import TEXT, cast, or_
from sqlalchemy.orm import Session

from legal_intake.database.entities.legal_knowledge import LegalKnowledge

logger = logging.getLogger(__name__)


class LegalKnowledgeDao:
    """
    Data Access Object (DAO) for the LegalKnowledge reference table.
    """

    def searchByKeywords(
        self, session: Session, keywords: List[str], language: str, limit: int = 5
    ) -> List[LegalKnowledge]:
        """
        Fetch up to `limit` active entries in `language` matching any keyword.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        keywords : list[str]
            Keywords to match; an empty list yields no rows.
        language : str
            Language code the entries must be written in.
        limit : int
            Maximum number of rows.
        """
        if not keywords:
            return []
        try:
            conditions = []
            for word in keywords:
                pattern = f"%{word}%"
                conditions.append(LegalKnowledge.title.ilike(pattern))
                conditions.append(LegalKnowledge.content.ilike(pattern))
                conditions.append(cast(LegalKnowledge.keywords, TEXT).ilike(pattern))
            return (
                session.query(LegalKnowledge)
                .filter(LegalKnowledge.language == language)
                .filter(LegalKnowledge.is_active.is_not(False))
                .filter(or_(*conditions))
                .limit(limit)
                .all()
            )
        except Exception as e:
            logger.error(f"Error in LegalKnowledgeDao.searchByKeywords. Error: {e}")
            raise e
