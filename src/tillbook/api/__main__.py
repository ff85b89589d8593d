"""
API server entry point

Usage:
    python -m tillbook.api
"""

import uvicorn

from tillbook.api.app import create_app
from tillbook.config import Settings
from tillbook.logging_config import setup_logging


def main() -> None:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
