"""
Case Messages DAO

Stages chat turns mirrored onto a case (`case_messages` table).
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from legal_intake.database.entities.case_messages import CaseMessage

logger = logging.getLogger(__name__)


class CaseMessagesDao:

    def createCaseMessages(self, session: Session, messages: List[CaseMessage]) -> List[CaseMessage]:
        try:
            session.add_all(messages)
            return messages
        except Exception as e:
            logger.error(f"Error in CaseMessagesDao.createCaseMessages. Error: {e}")
            raise e
