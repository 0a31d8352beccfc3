"""
MapIt Backend: Application Package Initializer
================================================

What: Marks the `mapit` directory as a Python package.
Who:  Imported by uvicorn (`uvicorn mapit.main:app`), Alembic, and pytest.

Architecture Note:
    The backend is a thin layered JSON API over PostgreSQL:

    ┌─────────────────────────────────────┐
    │      Routes (HTTP envelope)         │  ← method dispatch, status codes
    ├─────────────────────────────────────┤
    │      Services (query handlers)      │  ← validation, SQL composition
    ├─────────────────────────────────────┤
    │  Models & Schemas (domain types)    │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database (connection provider)    │  ← pooled async engine
    └─────────────────────────────────────┘

    Routes never build SQL; services never touch HTTP objects.
"""

__version__ = "1.0.0"
