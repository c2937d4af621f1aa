"""
CaseCategory ORM Model
======================

Catalogue of case categories offered to the intake prompt, with Arabic and
German display names.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Boolean, TEXT, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from legal_intake.database.config.connection_engine import declarativeBase


class CaseCategory(declarativeBase):
    """ORM model for the `case_categories` table."""

    __tablename__ = 'case_categories'

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(TEXT, nullable=False)
    name_ar: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)
    name_de: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)
    is_active: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True, default=True)

    def display_name(self, language: str) -> str:
        """Localized name, falling back to the English `name`."""
        localized = {'ar': self.name_ar, 'de': self.name_de}.get(language)
        return localized or self.name
