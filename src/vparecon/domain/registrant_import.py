"""Registrant bulk-import domain service."""

from typing import Optional

from vparecon.config import ConflictPolicy, ReconConfig
from vparecon.database.base import RegistryStore
from vparecon.domain.cancellation import CancellationToken
from vparecon.domain.delimited import read_delimited_file, read_delimited_text
from vparecon.domain.entities import ImportResult, RegistrantRecord, RowRejection
from vparecon.domain.errors import StructuralError
from vparecon.domain.headers import REGISTRANT_HEADERS, normalize_headers
from vparecon.domain.importer import BatchImporter
from vparecon.domain.validation import validate_registrant_row
from vparecon.events import EventSink, NullEventSink, RowRejected


class RegistrantImportService:
    """Service for importing registrant files."""

    def __init__(self, store: RegistryStore, config: ReconConfig, events: Optional[EventSink] = None):
        """Initialize registrant import service.

        Args:
            store: Registry store instance
            config: Batch sizes, ceilings and default conflict policy
            events: Optional sink for RowRejected and BatchCompleted events
        """
        self.store = store
        self.config = config
        self.events = events or NullEventSink()
        self.importer = BatchImporter(store, config, self.events)

    def parse_rows(
        self, raw_headers: list[str], rows: list[tuple[int, list[str]]]
    ) -> tuple[list[RegistrantRecord], list[RowRejection]]:
        """Normalize headers and validate every row.

        Args:
            raw_headers: Header tokens as they appear in the file
            rows: (row_number, values) pairs

        Returns:
            (accepted records, row rejections), both in source order

        Raises:
            StructuralError: If required columns are missing or there are no rows
        """
        headers = normalize_headers(raw_headers, REGISTRANT_HEADERS)
        if not rows:
            raise StructuralError("File must contain at least a header row and one data row")

        accepted: list[RegistrantRecord] = []
        rejected: list[RowRejection] = []
        for row_number, values in rows:
            result = validate_registrant_row(values, headers, row_number)
            if isinstance(result, RowRejection):
                rejected.append(result)
                self.events.emit(RowRejected(result.row_number, result.reason))
            else:
                accepted.append(result)
        return accepted, rejected

    async def import_rows(
        self,
        raw_headers: list[str],
        rows: list[tuple[int, list[str]]],
        policy: Optional[ConflictPolicy] = None,
        cancel_token: Optional[CancellationToken] = None,
        strict: bool = False,
    ) -> ImportResult:
        """Validate rows and write the accepted ones to the store.

        Raises:
            RowValidationError: If strict is set and any row was rejected
                (nothing is written)
        """
        accepted, rejected = self.parse_rows(raw_headers, rows)
        if strict and rejected:
            raise rejected[0].to_error()
        return await self.importer.import_records(
            accepted, rejected, policy=policy, cancel_token=cancel_token
        )

    async def import_text(
        self,
        text: str,
        policy: Optional[ConflictPolicy] = None,
        cancel_token: Optional[CancellationToken] = None,
        strict: bool = False,
    ) -> ImportResult:
        """Import registrants from delimited text."""
        raw_headers, rows = read_delimited_text(text)
        return await self.import_rows(
            raw_headers, rows, policy=policy, cancel_token=cancel_token, strict=strict
        )

    async def import_file(
        self,
        path: str,
        policy: Optional[ConflictPolicy] = None,
        cancel_token: Optional[CancellationToken] = None,
        strict: bool = False,
    ) -> ImportResult:
        """Import registrants from a delimited file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            StructuralError: If the file is empty, lacks required columns or
                has more accepted rows than the import ceiling
        """
        raw_headers, rows = read_delimited_file(path)
        return await self.import_rows(
            raw_headers, rows, policy=policy, cancel_token=cancel_token, strict=strict
        )
