"""Abstract registry store interface."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from vparecon.domain.entities import Registrant, RegistrantRecord


class RegistryStore(ABC):
    """Abstract registry store for vparecon.

    Bulk calls (insert, upsert, delete by id set) accept at most
    ``max_batch_size`` records per call, and ``fetch_registrants`` returns at
    most ``max_page_size`` rows per call; callers are responsible for
    batching and paging. Uniqueness violations raise ConflictError, other
    failures raise StoreError.
    """

    max_batch_size: int
    max_page_size: int

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize store schema (create tables)."""
        pass

    # Single-record operations
    @abstractmethod
    def create_registrant(
        self,
        vpa: str,
        phone: Optional[str] = None,
        cc_no: Optional[str] = None,
        route_no: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Registrant:
        """Create a registrant. Returns the stored registrant."""
        pass

    @abstractmethod
    def get_registrant(self, registrant_id: int) -> Optional[Registrant]:
        """Get registrant by ID."""
        pass

    @abstractmethod
    def update_registrant(self, registrant_id: int, fields: dict[str, Optional[str]]) -> Registrant:
        """Update the given fields of a registrant. Returns the stored registrant."""
        pass

    @abstractmethod
    def delete_registrant(self, registrant_id: int) -> None:
        """Delete a registrant by ID."""
        pass

    # Bulk operations
    @abstractmethod
    def insert_registrants(self, records: list[RegistrantRecord]) -> int:
        """Insert records without conflict handling. Returns written count."""
        pass

    @abstractmethod
    def upsert_registrants(self, records: list[RegistrantRecord], conflict_key: tuple[str, ...]) -> int:
        """Insert records, updating rows that collide on conflict_key. Returns written count."""
        pass

    @abstractmethod
    def fetch_registrants(
        self, limit: int, offset: int = 0, vpa: Optional[str] = None
    ) -> tuple[list[Registrant], int]:
        """Fetch one page of registrants, newest first.

        Args:
            limit: Page size (at most max_page_size)
            offset: Number of rows to skip
            vpa: Optional VPA filter, compared after trim and lowercase

        Returns:
            (registrants, total count matching the filter)
        """
        pass

    @abstractmethod
    def existing_registrant_ids(self, ids: Iterable[int]) -> set[int]:
        """Return the subset of ids present in the store."""
        pass

    @abstractmethod
    def delete_registrants(self, ids: list[int]) -> int:
        """Delete registrants by id set. Returns number of rows removed."""
        pass
