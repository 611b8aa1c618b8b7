"""SQLAlchemy models for the vparecon registry."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Index,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class Registrant(Base):
    """Registered payee model."""

    __tablename__ = "registrants"

    id = Column(Integer, primary_key=True)
    vpa = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    cc_no = Column(String, nullable=True)
    route_no = Column(String, nullable=True)
    name = Column(String, nullable=True)
    inserted_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    # Upsert key for imports; rows without a phone never collide
    __table_args__ = (
        UniqueConstraint("phone", "vpa", name="uq_registrant_phone_vpa"),
        Index("ix_registrants_vpa", "vpa"),
    )


def create_session_factory(database_url: str) -> tuple[Engine, sessionmaker[Session]]:
    """Create a SQLAlchemy engine and session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return engine, sessionmaker(bind=engine)
