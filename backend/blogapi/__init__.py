"""
Blog API — Application Package
===============================

Layered architecture:

    ┌─────────────────────────────────────┐
    │   Routes + Pipeline (API Layer)     │  ← parse body, authorize, validate
    ├─────────────────────────────────────┤
    │      Services (Business Logic)      │  ← ownership, uniqueness, login
    ├─────────────────────────────────────┤
    │   Models & Schemas (Data)           │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │  Repository / Database (Persistence)│  ← async SQLAlchemy sessions
    └─────────────────────────────────────┘

Expected outcomes travel upward as Result values (blogapi/results.py);
only genuine faults are raised (blogapi/exceptions.py).
"""

__version__ = "1.0.0"
