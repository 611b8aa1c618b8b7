"""Batch importer: writes validated registrant records to the store in bounded batches."""

import asyncio
import logging
from typing import Optional, Sequence

from vparecon.config import ConflictPolicy, ReconConfig
from vparecon.database.base import RegistryStore
from vparecon.domain.batching import split_batches
from vparecon.domain.cancellation import CancellationToken
from vparecon.domain.entities import (
    BatchOutcome,
    BatchStatus,
    ImportResult,
    RegistrantRecord,
    RowRejection,
)
from vparecon.domain.errors import (
    ConflictError,
    ImportTooLargeError,
    StoreError,
    StructuralError,
    import_too_large,
)
from vparecon.events import BatchCompleted, EventSink, NullEventSink

logger = logging.getLogger(__name__)


class BatchImporter:
    """Writes accepted records to the registry store.

    Batches are issued one at a time in order. A uniqueness conflict or store
    failure in one batch is recorded on that batch and the remaining batches
    still run.
    """

    def __init__(self, store: RegistryStore, config: ReconConfig, events: Optional[EventSink] = None):
        """Initialize batch importer.

        Args:
            store: Registry store instance
            config: Batch sizes, ceilings and default conflict policy
            events: Optional sink for BatchCompleted events
        """
        self.store = store
        self.config = config
        self.events = events or NullEventSink()

    @property
    def batch_size(self) -> int:
        return min(self.config.max_import_batch_size, self.store.max_batch_size)

    async def import_records(
        self,
        records: Sequence[RegistrantRecord],
        rejected: Sequence[RowRejection] = (),
        policy: Optional[ConflictPolicy] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ImportResult:
        """Write records to the store.

        Args:
            records: Validated records, in source order
            rejected: Row rejections to carry into the result
            policy: Conflict policy (defaults to the configured one)
            cancel_token: Optional token checked before each batch

        Returns:
            ImportResult with per-batch outcomes

        Raises:
            ImportTooLargeError: If records exceed max_import_records (nothing is written)
            StructuralError: If the policy needs a column the records lack
        """
        policy = policy or self.config.conflict_policy
        if len(records) > self.config.max_import_records:
            raise ImportTooLargeError(import_too_large(len(records), self.config.max_import_records))
        if policy.is_upsert and "id" in policy.conflict_key:
            if any(record.id is None for record in records):
                raise StructuralError("Conflict key 'id' requires an id value on every row")

        batches = split_batches(records, self.batch_size)
        outcomes: list[BatchOutcome] = []
        written = 0
        conflicts = 0
        cancelled = False

        for index, batch in enumerate(batches):
            if cancel_token is not None and cancel_token.cancelled:
                logger.info("Import cancelled before batch %d of %d", index + 1, len(batches))
                cancelled = True
                break

            outcome = self._write_batch(index, batch, policy)
            outcomes.append(outcome)
            written += outcome.written_count
            if outcome.status is BatchStatus.DUPLICATE_ENTRY:
                conflicts += 1

            self.events.emit(
                BatchCompleted(
                    batch_index=index,
                    batch_count=len(batches),
                    size=outcome.size,
                    written_count=outcome.written_count,
                    status=outcome.status.value,
                    error=outcome.error,
                )
            )
            await asyncio.sleep(0)

        logger.info(
            "Import finished: %d written, %d conflicting batch(es), %d rejected row(s)",
            written,
            conflicts,
            len(rejected),
        )
        return ImportResult(
            accepted=tuple(records),
            rejected=tuple(rejected),
            written_count=written,
            conflict_count=conflicts,
            batches=tuple(outcomes),
            cancelled=cancelled,
        )

    def _write_batch(self, index: int, batch: list[RegistrantRecord], policy: ConflictPolicy) -> BatchOutcome:
        try:
            if policy.is_upsert:
                count = self.store.upsert_registrants(batch, policy.conflict_key)
            else:
                count = self.store.insert_registrants(batch)
        except ConflictError as e:
            logger.warning("Batch %d: duplicate entry: %s", index, e)
            return BatchOutcome(index, len(batch), 0, BatchStatus.DUPLICATE_ENTRY, str(e))
        except StoreError as e:
            logger.error("Batch %d: store failure: %s", index, e)
            return BatchOutcome(index, len(batch), 0, BatchStatus.FAILED, str(e))
        return BatchOutcome(index, len(batch), count, BatchStatus.WRITTEN)
