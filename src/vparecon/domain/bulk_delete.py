"""Chunked bulk delete with partial-failure accounting."""

import asyncio
import logging
from typing import Iterable, Optional

from vparecon.config import ReconConfig
from vparecon.database.base import RegistryStore
from vparecon.domain.batching import split_batches
from vparecon.domain.cancellation import CancellationToken
from vparecon.domain.entities import DeleteBatchFailure, DeleteReport
from vparecon.domain.errors import (
    ConfigurationError,
    NotFoundError,
    StructuralError,
    registrants_not_found,
)
from vparecon.events import DeleteProgress, EventSink, NullEventSink

logger = logging.getLogger(__name__)


class BulkDeleteOrchestrator:
    """Deletes a set of registrants in store-sized batches.

    Batches run sequentially in index order. A failed batch is recorded in
    the report and the remaining batches still run.
    """

    def __init__(self, store: RegistryStore, config: ReconConfig, events: Optional[EventSink] = None):
        """Initialize bulk delete orchestrator.

        Raises:
            ConfigurationError: If the store was not configured as privileged
        """
        if not config.privileged_store:
            raise ConfigurationError("Bulk delete requires a privileged store (VPARECON_PRIVILEGED_STORE)")
        self.store = store
        self.config = config
        self.events = events or NullEventSink()

    @property
    def batch_size(self) -> int:
        return min(self.config.max_delete_batch_size, self.store.max_batch_size)

    async def delete(
        self,
        ids: Iterable[int],
        verify_existence: bool = False,
        cancel_token: Optional[CancellationToken] = None,
    ) -> DeleteReport:
        """Delete registrants by id.

        Args:
            ids: Registrant ids; duplicates are dropped, order is kept
            verify_existence: If True, refuse to delete anything when an id is absent
            cancel_token: Optional token checked before each batch

        Returns:
            DeleteReport with deleted_count, failed batches and derived status

        Raises:
            StructuralError: If no ids are given
            NotFoundError: If verify_existence is set and some ids are absent
        """
        requested = tuple(dict.fromkeys(ids))
        if not requested:
            raise StructuralError("IDs are required for bulk deletion")

        if verify_existence:
            existing = self.store.existing_registrant_ids(requested)
            missing = [i for i in requested if i not in existing]
            if missing:
                raise NotFoundError(registrants_not_found(missing))

        batches = split_batches(requested, self.batch_size)
        total = len(requested)
        deleted = 0
        failures: list[DeleteBatchFailure] = []
        cancelled = False

        for index, batch in enumerate(batches):
            if cancel_token is not None and cancel_token.cancelled:
                logger.info("Bulk delete cancelled before batch %d of %d", index + 1, len(batches))
                cancelled = True
                break

            error = None
            try:
                removed = self.store.delete_registrants(batch)
            except Exception as e:
                logger.exception("Delete batch %d of %d failed", index + 1, len(batches))
                error = str(e)
                failures.append(DeleteBatchFailure(batch_index=index, ids=tuple(batch), error=error))
            else:
                if removed != len(batch):
                    logger.warning(
                        "Delete batch %d removed %d of %d ids (some were already absent)",
                        index + 1,
                        removed,
                        len(batch),
                    )
                deleted += len(batch)

            self.events.emit(
                DeleteProgress(
                    batch_index=index,
                    batch_count=len(batches),
                    deleted_count=deleted,
                    total_requested=total,
                    succeeded=error is None,
                    error=error,
                )
            )
            await asyncio.sleep(0)

        report = DeleteReport(
            requested_ids=requested,
            deleted_count=deleted,
            failed_batches=tuple(failures),
            cancelled=cancelled,
        )
        logger.info(
            "Bulk delete %s: %d of %d deleted, %d batch(es) failed",
            report.status.value,
            deleted,
            total,
            len(failures),
        )
        return report
