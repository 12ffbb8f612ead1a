"""Data stores for persistence.

Stores handle:
- PostgreSQL: engine lifecycle, DB sessions, declarative base

No query-construction logic in stores - that belongs in services.
"""
