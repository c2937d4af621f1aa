"""
DAOs Package — Data Access Layer (SQLAlchemy 2.0)
=================================================

The `daos` package encapsulates all interactions with SQLAlchemy ORM
entities, providing small CRUD APIs for the service layer while hiding direct
query details.

Conventions
-----------
- Session lifecycle (open/commit/rollback) is handled by callers
- DAOs log and surface exceptions so upper layers decide error policy

Contents
--------
- ConversationDao     : create, fetch by id / case / owner+mode, link case, replace metadata
- MessagesDao         : batch insert, chronological fetch by conversation
- CaseDao             : create draft, fetch, overwrite analysis columns, store summary
- CaseMessagesDao     : batch insert of turns mirrored onto a case
- LegalKnowledgeDao   : keyword search over reference entries
- CaseCategoryDao     : active category catalogue
"""
