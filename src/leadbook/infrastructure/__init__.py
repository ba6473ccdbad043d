"""Infrastructure layer: concrete implementations of application ports."""

from leadbook.infrastructure.memory_store import InMemoryContactStore
from leadbook.infrastructure.persistence import (
    Neo4jContactStore,
    SqlAlchemyContactStore,
    create_session_factory,
    create_store_engine,
    create_tables,
    ensure_contact_constraints,
)

__all__ = [
    "InMemoryContactStore",
    "Neo4jContactStore",
    "SqlAlchemyContactStore",
    "create_session_factory",
    "create_store_engine",
    "create_tables",
    "ensure_contact_constraints",
]
