"""Domain model entities for vparecon.

These are pure data classes representing business concepts, independent of
database schema. Reconciliation results are produced as new instances rather
than by mutating the inputs, so a transaction set can be read safely while a
matching run is in progress.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from vparecon.domain.errors import PartialBatchFailure, RowValidationError


@dataclass(frozen=True)
class Registrant:
    """Registered payee domain entity."""

    id: int
    vpa: str
    phone: Optional[str]
    cc_no: Optional[str]
    route_no: Optional[str]
    name: Optional[str]
    inserted_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class RegistrantRecord:
    """A validated registrant row that has not been written yet."""

    vpa: str
    phone: Optional[str] = None
    cc_no: Optional[str] = None
    route_no: Optional[str] = None
    name: Optional[str] = None
    id: Optional[int] = None
    row_number: Optional[int] = None

    def to_fields(self) -> dict[str, Optional[str]]:
        """Return the writable columns of this record."""
        return {
            "vpa": self.vpa,
            "phone": self.phone,
            "cc_no": self.cc_no,
            "route_no": self.route_no,
            "name": self.name,
        }


@dataclass(frozen=True)
class Transaction:
    """Statement transaction domain entity."""

    sno: str
    transaction_date: str
    amount: Decimal
    reference_number: str
    customer_vpa: str
    is_matched: bool = False
    matched_registrant_id: Optional[int] = None
    route_no: Optional[str] = None
    cc_no: Optional[str] = None


@dataclass(frozen=True)
class RowRejection:
    """A source row that failed validation."""

    row_number: int
    reason: str

    def to_error(self) -> RowValidationError:
        return RowValidationError(self.row_number, self.reason)


class BatchStatus(str, Enum):
    """Outcome of a single import batch."""

    WRITTEN = "written"
    DUPLICATE_ENTRY = "duplicate_entry"
    FAILED = "failed"


@dataclass(frozen=True)
class BatchOutcome:
    """Result of writing one import batch to the store."""

    batch_index: int
    size: int
    written_count: int
    status: BatchStatus
    error: Optional[str] = None


@dataclass(frozen=True)
class ImportResult:
    """Aggregate result of an import call."""

    accepted: tuple[RegistrantRecord, ...]
    rejected: tuple[RowRejection, ...]
    written_count: int = 0
    conflict_count: int = 0
    batches: tuple[BatchOutcome, ...] = ()
    cancelled: bool = False

    @property
    def failed_batches(self) -> tuple[BatchOutcome, ...]:
        return tuple(b for b in self.batches if b.status is not BatchStatus.WRITTEN)


class DeleteStatus(str, Enum):
    """Derived status of a bulk delete."""

    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"
    FAILURE = "failure"


@dataclass(frozen=True)
class DeleteBatchFailure:
    """A bulk-delete batch whose store call failed."""

    batch_index: int
    ids: tuple[int, ...]
    error: str


@dataclass(frozen=True)
class DeleteReport:
    """Result of a bulk delete invocation."""

    requested_ids: tuple[int, ...]
    deleted_count: int
    failed_batches: tuple[DeleteBatchFailure, ...] = ()
    cancelled: bool = False

    @property
    def total_requested(self) -> int:
        return len(self.requested_ids)

    @property
    def failed_count(self) -> int:
        return sum(len(f.ids) for f in self.failed_batches)

    @property
    def status(self) -> DeleteStatus:
        if not self.failed_batches:
            return DeleteStatus.SUCCESS
        if self.deleted_count > 0:
            return DeleteStatus.PARTIAL_SUCCESS
        return DeleteStatus.FAILURE

    def raise_for_status(self) -> None:
        """Raise PartialBatchFailure if any batch failed."""
        if self.failed_batches:
            raise PartialBatchFailure(
                f"Deleted {self.deleted_count} of {self.total_requested} records; "
                f"{len(self.failed_batches)} batch(es) failed",
                self,
            )


class MatchStatus(str, Enum):
    """Outcome of a matching run."""

    COMPLETED = "completed"
    NO_REGISTRY_DATA = "no_registry_data"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class MatchReport:
    """Result of a matching run."""

    transactions: tuple[Transaction, ...]
    status: MatchStatus
    processed_count: int
    total_count: int
    matched_count: int = 0

    @property
    def unmatched_count(self) -> int:
        return self.processed_count - self.matched_count


@dataclass(frozen=True)
class StatementParseResult:
    """Transactions parsed from a statement file."""

    transactions: tuple[Transaction, ...]
    rejected: tuple[RowRejection, ...] = field(default_factory=tuple)
