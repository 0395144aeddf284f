"""Database bootstrap utilities for the form service.

Exposes engine construction, a transactional connection helper and the SQL
migrations runner. ORM models are not used; repositories issue SQL text.
"""

from formservice.db.base import get_engine, transaction
from formservice.db.migrations_runner import apply_migrations

__all__ = [
    "get_engine",
    "transaction",
    "apply_migrations",
]
