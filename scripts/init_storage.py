#!/usr/bin/env python3
"""Prepare the configured storage backend without starting the API.

sqlalchemy: create the contacts and contact_images tables.
neo4j: create the id uniqueness constraints.
Run from repo root with .env (LEADBOOK_STORAGE, DATABASE_URL or NEO4J_*). Idempotent.
"""
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT / "src"))

from neo4j import GraphDatabase  # noqa: E402

from api.settings import Settings  # noqa: E402
from leadbook.infrastructure import (  # noqa: E402
    create_store_engine,
    create_tables,
    ensure_contact_constraints,
)


def main() -> int:
    settings = Settings.from_env()
    if settings.storage_backend == "memory":
        print("Memory backend has nothing to initialise.")
        return 0

    if settings.storage_backend == "neo4j":
        driver = GraphDatabase.driver(
            settings.neo4j_uri, auth=(settings.neo4j_user, settings.neo4j_password)
        )
        try:
            ensure_contact_constraints(driver)
        finally:
            driver.close()
        print(f"Constraints ensured on {settings.neo4j_uri}.")
        return 0

    engine = create_store_engine(settings.database_url, echo=settings.database_echo)
    try:
        create_tables(engine)
    finally:
        engine.dispose()
    print(f"Tables ensured on {engine.url.render_as_string(hide_password=True)}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
