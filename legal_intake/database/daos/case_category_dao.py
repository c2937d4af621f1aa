"""
Case Category DAO

Read-only access to the `case_categories` catalogue.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from legal_intake.database.entities.case_categories import CaseCategory

logger = logging.getLogger(__name__)


class CaseCategoryDao:

    def fetchActiveCategories(self, session: Session) -> List[CaseCategory]:
        """Return active categories ordered by name."""
        try:
            return (
                session.query(CaseCategory)
                .filter(CaseCategory.is_active.is_not(False))
                .order_by(CaseCategory.name)
                .all()
            )
        except Exception as e:
            logger.error(f"Error in CaseCategoryDao.fetchActiveCategories. Error: {e}")
            raise e
