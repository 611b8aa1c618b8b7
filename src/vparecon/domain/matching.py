"""Registry index and VPA matching engine."""

import asyncio
import dataclasses
import logging
from typing import Callable, Iterable, Optional, Sequence

from vparecon.config import ReconConfig
from vparecon.domain.batching import split_batches
from vparecon.domain.cancellation import CancellationToken
from vparecon.domain.entities import MatchReport, MatchStatus, Registrant, Transaction
from vparecon.domain.validation import normalize_vpa
from vparecon.events import EventSink, MatchProgress, NullEventSink

logger = logging.getLogger(__name__)

RegistryIndex = dict[str, Registrant]
ProgressCallback = Callable[[int, int], None]


def build_registry_index(registrants: Iterable[Registrant]) -> RegistryIndex:
    """Build a lookup from normalized VPA to registrant.

    When several registrants share a VPA, the most recently updated one wins,
    then the one with the highest id, regardless of input order.
    """
    index: RegistryIndex = {}
    duplicates = 0
    for registrant in registrants:
        key = normalize_vpa(registrant.vpa)
        if not key:
            continue
        current = index.get(key)
        if current is None:
            index[key] = registrant
            continue
        duplicates += 1
        if (registrant.updated_at, registrant.id) > (current.updated_at, current.id):
            index[key] = registrant
    if duplicates:
        logger.warning("%d registrant(s) share a VPA with another registrant", duplicates)
    return index


def match_transaction(transaction: Transaction, index: RegistryIndex) -> Transaction:
    """Return a copy of transaction with its match fields recomputed."""
    registrant = index.get(normalize_vpa(transaction.customer_vpa))
    if registrant is None:
        return dataclasses.replace(
            transaction,
            is_matched=False,
            matched_registrant_id=None,
            route_no=None,
            cc_no=None,
        )
    return dataclasses.replace(
        transaction,
        is_matched=True,
        matched_registrant_id=registrant.id,
        route_no=registrant.route_no,
        cc_no=registrant.cc_no,
    )


class MatchingEngine:
    """Matches transactions to registrants in chunks.

    Each run recomputes match fields from scratch and returns new Transaction
    instances; the input sequence is never modified. Control is yielded to the
    event loop after every chunk.
    """

    def __init__(self, config: Optional[ReconConfig] = None, events: Optional[EventSink] = None):
        self.config = config or ReconConfig()
        self.events = events or NullEventSink()

    async def match(
        self,
        transactions: Sequence[Transaction],
        index: RegistryIndex,
        progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> MatchReport:
        """Match transactions against the registry index.

        Args:
            transactions: Working set, processed in the order given
            index: Lookup built by build_registry_index
            progress: Optional callback receiving (processed, total) after each chunk
            cancel_token: Optional token checked before each chunk

        Returns:
            MatchReport; status is NO_REGISTRY_DATA (and nothing is matched)
            when the index is empty
        """
        total = len(transactions)
        if not index:
            logger.warning("No registry data: skipping matching of %d transaction(s)", total)
            return MatchReport(
                transactions=tuple(transactions),
                status=MatchStatus.NO_REGISTRY_DATA,
                processed_count=0,
                total_count=total,
            )

        results: list[Transaction] = []
        matched = 0
        status = MatchStatus.COMPLETED
        for chunk in split_batches(transactions, self.config.matching_chunk_size):
            if cancel_token is not None and cancel_token.cancelled:
                status = MatchStatus.CANCELLED
                break
            for transaction in chunk:
                result = match_transaction(transaction, index)
                if result.is_matched:
                    matched += 1
                results.append(result)

            self.events.emit(MatchProgress(len(results), total, matched))
            if progress is not None:
                progress(len(results), total)
            await asyncio.sleep(0)

        processed = len(results)
        if status is MatchStatus.CANCELLED:
            logger.info("Matching cancelled after %d of %d transaction(s)", processed, total)
            results.extend(transactions[processed:])
        else:
            logger.info("Matched %d of %d transaction(s)", matched, total)

        return MatchReport(
            transactions=tuple(results),
            status=status,
            processed_count=processed,
            total_count=total,
            matched_count=matched,
        )
