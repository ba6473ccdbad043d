"""Persistent ContactStore adapters: relational (SQLAlchemy) and graph (Neo4j)."""

from leadbook.infrastructure.persistence.database import (
    create_session_factory,
    create_store_engine,
    create_tables,
)
from leadbook.infrastructure.persistence.neo4j_store import (
    Neo4jContactStore,
    ensure_contact_constraints,
)
from leadbook.infrastructure.persistence.sqlalchemy_store import SqlAlchemyContactStore

__all__ = [
    "Neo4jContactStore",
    "SqlAlchemyContactStore",
    "create_session_factory",
    "create_store_engine",
    "create_tables",
    "ensure_contact_constraints",
]
