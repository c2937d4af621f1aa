"""
Case DAO

Purpose
-------
Data-access layer for draft `Case` rows:
- Create a draft case
- Fetch a case by id
- Overwrite the analysis columns of an existing case
- Store the generated conversation summary
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from legal_intake.database.entities.cases import Case

logger = logging.getLogger(__name__)


class CaseDao:
    """
    Data Access Object (DAO) for managing Case entities.
    """

    def createCase(self, session: Session, case: Case) -> Case:
        """Stage a new case and flush it so its id is available."""
        try:
            session.add(case)
            session.flush()
            return case
        except Exception as e:
            logger.error(f"Error in CaseDao.createCase. Error: {e}")
            raise e

    def fetchCaseById(self, session: Session, case_id: UUID) -> Optional[Case]:
        try:
            return session.query(Case).filter(Case.id == case_id).one_or_none()
        except Exception as e:
            logger.error(f"Error in CaseDao.fetchCaseById. Error: {e}")
            raise e

    def updateCaseAnalysis(self, session: Session, case_id: UUID, fields: dict) -> Case:
        """
        Overwrite the given columns of a case.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        case_id : UUID
            Case to update.
        fields : dict
            Column name → new value. Every key is written, including empty values.

        Raises
        ------
        Exception
            If the case does not exist or the update fails.
        """
        try:
            case = session.query(Case).filter(Case.id == case_id).one()
            for column, value in fields.items():
                setattr(case, column, value)
            return case
        except Exception as e:
            logger.error(f"Error in CaseDao.updateCaseAnalysis. Error: {e}")
            raise e

    def updateCaseSummary(self, session: Session, case_id: UUID, summary: str):
        try:
            case = session.query(Case).filter(Case.id == case_id).one()
            case.ai_summary = summary
        except Exception as e:
            logger.error(f"Error in CaseDao.updateCaseSummary. Error: {e}")
            raise e
