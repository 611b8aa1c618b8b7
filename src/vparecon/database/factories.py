"""Store factory functions for creating registry store instances."""

import os
from pathlib import Path
from typing import Optional

from vparecon.database.sqlalchemy_db import SQLAlchemyRegistryStore


def create_sqlite_store(
    database_path: Optional[str] = None,
    max_batch_size: int = 1000,
    max_page_size: int = 1000,
) -> SQLAlchemyRegistryStore:
    """Create a SQLite-backed registry store.

    Args:
        database_path: Path to SQLite database file. If None, checks VPARECON_DB_PATH
            environment variable, then defaults to ~/.vparecon/vparecon.db
        max_batch_size: Per-call record cap for bulk operations
        max_page_size: Per-call row cap for fetches

    Returns:
        SQLAlchemyRegistryStore instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("VPARECON_DB_PATH")

    if database_path is None:
        # Default to ~/.vparecon/vparecon.db
        home = Path.home()
        db_dir = home / ".vparecon"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "vparecon.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyRegistryStore(
        database_url, max_batch_size=max_batch_size, max_page_size=max_page_size
    )
