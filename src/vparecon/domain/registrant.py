"""Registrant domain service."""

import logging
from typing import Optional

from vparecon.config import ReconConfig
from vparecon.database.base import RegistryStore
from vparecon.domain.entities import Registrant
from vparecon.domain.errors import (
    ConflictError,
    NotFoundError,
    duplicate_registrant,
    registrant_not_found,
)
from vparecon.domain.validation import normalize_vpa, validate_registrant_fields

logger = logging.getLogger(__name__)

_UNSET = object()


class RegistrantService:
    """Service for managing individual registrants."""

    def __init__(self, store: RegistryStore, config: Optional[ReconConfig] = None):
        """Initialize registrant service.

        Args:
            store: Registry store instance
            config: Configuration (page size for list_all)
        """
        self.store = store
        self.config = config or ReconConfig()

    def add_registrant(
        self,
        vpa: str,
        phone: Optional[str] = None,
        cc_no: Optional[str] = None,
        route_no: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Registrant:
        """Create a registrant.

        Returns:
            The stored registrant

        Raises:
            ValidationError: If a field breaks a registrant rule
            ConflictError: If a registrant with the same phone and VPA exists
        """
        record = validate_registrant_fields(vpa, phone=phone, cc_no=cc_no, route_no=route_no, name=name)
        self._check_duplicate(record.phone, record.vpa)
        registrant = self.store.create_registrant(**record.to_fields())
        logger.info("Created registrant %d (%s)", registrant.id, registrant.vpa)
        return registrant

    def get_registrant(self, registrant_id: int) -> Registrant:
        """Get registrant by ID.

        Raises:
            NotFoundError: If the registrant doesn't exist
        """
        registrant = self.store.get_registrant(registrant_id)
        if registrant is None:
            raise NotFoundError(registrant_not_found(registrant_id))
        return registrant

    def update_registrant(
        self,
        registrant_id: int,
        vpa=_UNSET,
        phone=_UNSET,
        cc_no=_UNSET,
        route_no=_UNSET,
        name=_UNSET,
    ) -> Registrant:
        """Update some fields of a registrant.

        Fields left unset keep their stored value; passing None clears an
        optional field. The merged registrant is re-validated.

        Raises:
            NotFoundError: If the registrant doesn't exist
            ValidationError: If the merged fields break a registrant rule
            ConflictError: If the change collides with another registrant
        """
        current = self.get_registrant(registrant_id)
        changes = {
            key: value
            for key, value in (
                ("vpa", vpa),
                ("phone", phone),
                ("cc_no", cc_no),
                ("route_no", route_no),
                ("name", name),
            )
            if value is not _UNSET
        }
        merged = {
            "vpa": current.vpa,
            "phone": current.phone,
            "cc_no": current.cc_no,
            "route_no": current.route_no,
            "name": current.name,
        }
        merged.update(changes)
        record = validate_registrant_fields(**merged)

        if "vpa" in changes or "phone" in changes:
            self._check_duplicate(record.phone, record.vpa, exclude_id=registrant_id)

        fields = {key: getattr(record, key) for key in changes}
        return self.store.update_registrant(registrant_id, fields)

    def delete_registrant(self, registrant_id: int) -> None:
        """Delete a registrant.

        Raises:
            NotFoundError: If the registrant doesn't exist
        """
        self.get_registrant(registrant_id)
        self.store.delete_registrant(registrant_id)
        logger.info("Deleted registrant %d", registrant_id)

    def list_page(self, limit: int, offset: int = 0) -> tuple[list[Registrant], int]:
        """List one page of registrants, newest first.

        Returns:
            (registrants, total count)
        """
        return self.store.fetch_registrants(limit=limit, offset=offset)

    def list_all(self) -> list[Registrant]:
        """Fetch every registrant, paging past the store's page ceiling."""
        page_size = min(self.config.store_page_size, self.store.max_page_size)
        registrants: list[Registrant] = []
        offset = 0
        while True:
            page, total = self.store.fetch_registrants(limit=page_size, offset=offset)
            registrants.extend(page)
            offset += len(page)
            if not page or offset >= total:
                break
        logger.debug("Fetched %d registrants in pages of %d", len(registrants), page_size)
        return registrants

    def find_by_vpa(self, vpa: str) -> list[Registrant]:
        """Find registrants whose VPA matches after normalization."""
        page_size = min(self.config.store_page_size, self.store.max_page_size)
        registrants, _ = self.store.fetch_registrants(limit=page_size, vpa=vpa)
        return registrants

    def _check_duplicate(self, phone: Optional[str], vpa: str, exclude_id: Optional[int] = None) -> None:
        if phone is None:
            return
        for existing in self.find_by_vpa(vpa):
            if existing.id == exclude_id:
                continue
            if existing.phone == phone and normalize_vpa(existing.vpa) == normalize_vpa(vpa):
                raise ConflictError(duplicate_registrant(phone, vpa))
