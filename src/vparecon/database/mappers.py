"""Mapper functions to convert between domain models and SQLAlchemy models."""

from datetime import datetime, UTC
from typing import Any

from vparecon.domain import entities as domain
from vparecon.database.models import Registrant as ORMRegistrant


def registrant_to_domain(orm_registrant: ORMRegistrant) -> domain.Registrant:
    """Convert SQLAlchemy Registrant model to domain Registrant entity."""
    return domain.Registrant(
        id=orm_registrant.id,
        vpa=orm_registrant.vpa,
        phone=orm_registrant.phone,
        cc_no=orm_registrant.cc_no,
        route_no=orm_registrant.route_no,
        name=orm_registrant.name,
        inserted_at=orm_registrant.inserted_at,
        updated_at=orm_registrant.updated_at,
    )


def record_to_row(record: domain.RegistrantRecord, include_id: bool = False) -> dict[str, Any]:
    """Convert a validated RegistrantRecord to a row for bulk statements."""
    now = datetime.now(UTC)
    row: dict[str, Any] = dict(record.to_fields())
    row["inserted_at"] = now
    row["updated_at"] = now
    if include_id:
        row["id"] = record.id
    return row
