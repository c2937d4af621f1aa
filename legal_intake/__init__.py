"""
Legal intake service: AI-assisted case intake and legal Q&A over FastAPI.

Packages:
    - api: HTTP router, contracts and the intake pipeline
    - database: settings, ORM entities, DAOs and transactional services
"""
