"""Runtime settings for tillbook."""

import os
from dataclasses import dataclass
from typing import Optional

from tillbook.database.base import Database
from tillbook.database.factories import create_database, create_sqlite_database

TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Settings shared by the CLI and the HTTP server.

    Attributes:
        database_url: Full SQLAlchemy URL; wins over database_path when set.
        database_path: SQLite file path (None falls back to the factory default).
        log_level: Root log level name.
        block_overdraft: Reject transfers larger than the source balance.
        api_host: Bind address for ``tillbook serve``.
        api_port: Bind port for ``tillbook serve``.
    """

    database_url: Optional[str] = None
    database_path: Optional[str] = None
    log_level: str = "INFO"
    block_overdraft: bool = False
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from TILLBOOK_* environment variables."""
        raw_port = os.getenv("TILLBOOK_API_PORT", "8000").strip()
        try:
            api_port = int(raw_port)
        except ValueError:
            raise ValueError(f"TILLBOOK_API_PORT must be an integer (got '{raw_port}')") from None
        return cls(
            database_url=os.getenv("TILLBOOK_DATABASE_URL") or None,
            database_path=os.getenv("TILLBOOK_DB_PATH") or None,
            log_level=os.getenv("TILLBOOK_LOG_LEVEL", "INFO").strip().upper(),
            block_overdraft=os.getenv("TILLBOOK_BLOCK_OVERDRAFT", "").strip().lower() in TRUTHY,
            api_host=os.getenv("TILLBOOK_API_HOST", "127.0.0.1").strip(),
            api_port=api_port,
        )

    def create_database(self) -> Database:
        """Build the database handle these settings point at."""
        if self.database_url:
            return create_database(self.database_url)
        return create_sqlite_database(database_path=self.database_path)
