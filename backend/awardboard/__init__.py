"""
AwardBoard Backend - Application Package Initializer
======================================================

A comment board that turns HTTP status codes into collectible awards:
oversized URLs earn 414, hammering /home earns 429, PUT anything earns 501.

Layered architecture:

    ┌─────────────────────────────────────┐
    │   Middleware (award pipeline)       │  ← one award code per request
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← auth, sessions, comments, limits
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
