"""Store wiring for the app lifespan and per-request service accessors."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import Request
from neo4j import GraphDatabase

from api.settings import Settings
from leadbook.application import ContactImageService, ContactService, ContactStore
from leadbook.infrastructure import (
    InMemoryContactStore,
    Neo4jContactStore,
    SqlAlchemyContactStore,
    create_session_factory,
    create_store_engine,
    create_tables,
    ensure_contact_constraints,
)

logger = logging.getLogger(__name__)


def _get_driver(settings: Settings):
    return GraphDatabase.driver(
        settings.neo4j_uri, auth=(settings.neo4j_user, settings.neo4j_password)
    )


@contextmanager
def open_store(settings: Settings) -> Iterator[ContactStore]:
    """Open the configured backend for the app lifetime and release it on exit."""
    if settings.storage_backend == "memory":
        logger.info("Using in-memory contact store")
        yield InMemoryContactStore()
        return

    if settings.storage_backend == "neo4j":
        logger.info("Using Neo4j contact store at %s", settings.neo4j_uri)
        driver = _get_driver(settings)
        try:
            ensure_contact_constraints(driver)
            yield Neo4jContactStore(driver)
        finally:
            driver.close()
        return

    logger.info("Using SQLAlchemy contact store")
    engine = create_store_engine(settings.database_url, echo=settings.database_echo)
    try:
        create_tables(engine)
        yield SqlAlchemyContactStore(create_session_factory(engine))
    finally:
        engine.dispose()


def get_contact_service(request: Request) -> ContactService:
    return ContactService(
        request.app.state.store, logger=logging.getLogger("leadbook.contacts")
    )


def get_image_service(request: Request) -> ContactImageService:
    return ContactImageService(
        request.app.state.store, logger=logging.getLogger("leadbook.images")
    )
