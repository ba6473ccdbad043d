"""
Run the API server: python -m api (from repo root, with .env or env vars set).
"""

import logging

import uvicorn

from api.main import create_app
from api.settings import Settings


def main() -> None:
    settings = Settings.from_env()
    try:
        uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
    finally:
        logging.shutdown()


if __name__ == "__main__":
    main()
