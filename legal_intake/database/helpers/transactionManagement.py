"""
Database Transaction Management
===============================

This module provides utilities for managing SQLAlchemy database sessions
using Python context variables and a decorator-based transaction wrapper.

It allows a database session to be propagated across function calls without
threading it through arguments. Functions decorated with ``@transactional``
run inside a managed transactional context.

Key features
~~~~~~~~~~~~
- Context variable to store the active session
- Implicit reuse of an existing session
- Automatic commit and rollback handling
- Clean session closure after execution

Each top-level service call opens its own short session, so one failing step
of the intake pipeline (e.g. the draft-case write) rolls back alone without
touching the others.
"""

from functools import wraps
import contextvars

from sqlalchemy.orm import sessionmaker

from legal_intake.database.config.connection_engine import connection_engine

SessionFactory = sessionmaker(bind=connection_engine, expire_on_commit=False)
"""Session factory bound to the application engine."""

db_session_context = contextvars.ContextVar("db_session_context", default=None)
"""Context variable storing the active SQLAlchemy session."""


def transactional(func):
    """
    Decorator to wrap functions in a managed SQLAlchemy transaction.

    Ensures that:
    - If a session already exists in context, it is reused.
    - Otherwise, a new session is created, committed, and closed.
    - On errors, the session is rolled back and closed.

    Parameters
    ----------
    func : callable
        The function to wrap. It must accept a `session` keyword argument.

    Returns
    -------
    callable
        The wrapped function, executed within a database transaction.

    Example
    -------
    >>> @transactional
    ... def link_case(session, conversation_id, case_id):
    ...     ConversationDao().updateConversationCase(session, conversation_id, case_id)
    """
    @wraps(func)
    def wrap_func(*args, **kwargs):
        session = db_session_context.get()
        if session:
            return func(*args, session=session, **kwargs)

        session = SessionFactory()
        token = db_session_context.set(session)

        try:
            result = func(*args, session=session, **kwargs)
            session.flush()
            session.commit()
        except Exception as e:
            session.rollback()
            raise e
        finally:
            session.close()
            db_session_context.reset(token)

        return result

    return wrap_func
