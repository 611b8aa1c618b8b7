"""Reconciliation domain service: registry fetch, index build and matching."""

from typing import Optional, Sequence

from vparecon.config import ReconConfig
from vparecon.database.base import RegistryStore
from vparecon.domain.cancellation import CancellationToken
from vparecon.domain.entities import MatchReport, Transaction
from vparecon.domain.matching import MatchingEngine, ProgressCallback, build_registry_index
from vparecon.domain.registrant import RegistrantService
from vparecon.events import EventSink


class ReconciliationService:
    """Service for reconciling a transaction set against the registry."""

    def __init__(self, store: RegistryStore, config: ReconConfig, events: Optional[EventSink] = None):
        """Initialize reconciliation service.

        Args:
            store: Registry store instance
            config: Page and chunk sizes
            events: Optional sink for MatchProgress events
        """
        self.registrant_service = RegistrantService(store, config)
        self.engine = MatchingEngine(config, events)

    async def reconcile(
        self,
        transactions: Sequence[Transaction],
        progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> MatchReport:
        """Fetch the registry, build the index once and match transactions."""
        index = build_registry_index(self.registrant_service.list_all())
        return await self.engine.match(transactions, index, progress=progress, cancel_token=cancel_token)
