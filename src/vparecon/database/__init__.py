"""Registry store layer for vparecon."""

from vparecon.database.base import RegistryStore
from vparecon.database.factories import create_sqlite_store

__all__ = ["RegistryStore", "create_sqlite_store"]
