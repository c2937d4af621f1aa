"""
The `database` package is responsible for all interactions with the managed
database used by the intake service.

Contents:
    - config:
        Settings and the SQLAlchemy engine / declarative base.

    - entities:
        SQLAlchemy entity models for conversations, messages, cases,
        case messages, legal knowledge and case categories.

    - daos:
        Data Access Objects (DAOs) providing CRUD operations for the entities.

    - core:
        Transactional service functions that connect the intake pipeline
        with the database.

    - helpers:
        Session / transaction management.
"""
