"""Application service owning the live store, persistence and generation."""

from __future__ import annotations

import json
import logging
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path

from . import gateway
from .gateway import CardDraft, GenerationRequest, MutationResult
from .models import Group, Store
from .reconcile import reconcile
from .seed_loader import SeedData, load_seed
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = "flashcard_groups_v6_data"
GENERATION_LATENCY_SECONDS = 0.7

STATUS_IDLE = "idle"
STATUS_GENERATING = "generating"
STATUS_SUCCESS = "success"
STATUS_ERROR = "error"

ClockFn = Callable[[], float]
SleepFn = Callable[[float], None]


@dataclass(frozen=True)
class GenerationSummary:
    """What the latest successful generation produced."""

    group_name: str
    card_count: int
    topic: str
    detail: str


@dataclass(frozen=True)
class GenerationState:
    """Observable status of bulk generation."""

    status: str = STATUS_IDLE
    last_result: GenerationSummary | None = None
    error: str = ""


@dataclass(frozen=True)
class StoreSummary:
    """Totals shown on the home screen."""

    group_count: int
    card_count: int
    category_count: int


@dataclass(frozen=True)
class GenerationTicket:
    """A pending generation with its reserved id range."""

    request: GenerationRequest
    card_start_id: int
    group_id: int | None
    due_at: float


class FlashcardService:
    """Coordinates the store, its persistence and deferred generation."""

    def __init__(
        self,
        db_path: Path | str,
        seed: SeedData | None = None,
        storage_key: str = STORAGE_KEY,
        generation_latency: float = GENERATION_LATENCY_SECONDS,
        clock: ClockFn = time.monotonic,
    ) -> None:
        """Load seed and saved data, reconcile them and persist the result."""
        self.seed = seed if seed is not None else load_seed()
        self.storage = KeyValueStorage(db_path)
        self.storage_key = storage_key
        self.generation = GenerationState()
        self._generation_latency = generation_latency
        self._clock = clock
        self._pending: deque[GenerationTicket] = deque()
        self._store = reconcile(
            self.seed.groups,
            self.seed.next_group_id,
            self.seed.next_card_id,
            self.storage.get_item(storage_key),
        )
        self._persist()

    @property
    def store(self) -> Store:
        """Return the current store value."""
        return self._store

    def groups(self) -> list[Group]:
        """Return groups ordered by id."""
        return self._store.ordered_groups()

    def get_group(self, group_id: int) -> Group | None:
        """Get one group by id."""
        return self._store.get_group(group_id)

    def recent_group(self) -> Group | None:
        """Return the group offered as the quick study shortcut."""
        groups = self._store.ordered_groups()
        return groups[0] if groups else None

    def summary(self) -> StoreSummary:
        """Count groups, cards and distinct non-empty categories."""
        groups = self._store.ordered_groups()
        categories = {card.category for group in groups for card in group.cards if card.category}
        return StoreSummary(
            group_count=len(groups),
            card_count=sum(len(group.cards) for group in groups),
            category_count=len(categories),
        )

    def create_group(self, name: str) -> MutationResult:
        """Create an empty group under the next group id."""
        return self._apply(gateway.create_group(self._store, name))

    def delete_group(self, group_id: int) -> MutationResult:
        """Delete one group and its cards."""
        return self._apply(gateway.delete_group(self._store, group_id))

    def add_card(self, group_id: int, draft: CardDraft) -> MutationResult:
        """Append one card to a group."""
        return self._apply(gateway.add_card(self._store, group_id, draft))

    def mark_recalled(self, group_id: int, card_id: int) -> MutationResult:
        """Record that a card was recalled successfully."""
        return self._apply(gateway.mark_recalled(self._store, group_id, card_id))

    @property
    def is_generating(self) -> bool:
        """Return whether any generation is still pending."""
        return bool(self._pending)

    def pending_generations(self) -> int:
        """Return the number of queued generations."""
        return len(self._pending)

    def request_generation(self, request: GenerationRequest) -> GenerationTicket | None:
        """Validate a generation request and queue it with a reserved id range.

        Card ids (and the group id for a new group) are taken from the counters
        now, so overlapping requests never share ids.
        """
        error = gateway.validate_generation_request(self._store, request)
        if error is not None:
            self.generation = GenerationState(status=STATUS_ERROR, error=error)
            return None

        card_start_id = self._store.next_card_id
        group_id: int | None = None
        next_group_id = self._store.next_group_id
        if request.mode == gateway.MODE_NEW:
            group_id = next_group_id
            next_group_id += 1
        # Counters are not persisted, so a reservation only touches the live store.
        self._store = replace(
            self._store,
            next_group_id=next_group_id,
            next_card_id=card_start_id + request.count,
        )

        ticket = GenerationTicket(
            request=request,
            card_start_id=card_start_id,
            group_id=group_id,
            due_at=self._clock() + self._generation_latency,
        )
        self._pending.append(ticket)
        self.generation = replace(self.generation, status=STATUS_GENERATING, error="")
        logger.debug("Queued generation for %r with card ids from %d", request.topic, card_start_id)
        return ticket

    def poll(self) -> int:
        """Resolve every pending generation that is due, oldest first."""
        resolved = 0
        now = self._clock()
        while self._pending and self._pending[0].due_at <= now:
            self._resolve(self._pending.popleft())
            resolved += 1
        return resolved

    def wait_for_generation(self, sleep: SleepFn = time.sleep) -> GenerationState:
        """Block until every pending generation has resolved."""
        while self._pending:
            delay = self._pending[0].due_at - self._clock()
            if delay > 0:
                sleep(delay)
            self.poll()
        return self.generation

    def _resolve(self, ticket: GenerationTicket) -> None:
        request = ticket.request
        result = gateway.generate_cards(
            self._store,
            request,
            card_start_id=ticket.card_start_id,
            group_id=ticket.group_id,
        )
        if not result.ok or result.group is None:
            logger.warning("Generation for %r failed: %s", request.topic, result.error)
            self.generation = GenerationState(status=STATUS_ERROR, error=result.error or gateway.TARGET_NOT_FOUND)
            return

        self._apply(result)
        self.generation = GenerationState(
            status=STATUS_SUCCESS,
            last_result=GenerationSummary(
                group_name=result.group.name,
                card_count=len(result.cards),
                topic=request.topic,
                detail=request.detail,
            ),
        )
        logger.info("Generated %d cards into group %d", len(result.cards), result.group.id)

    def _apply(self, result: MutationResult) -> MutationResult:
        """Replace the store with a mutation result and persist it."""
        if result.ok and result.store is not self._store:
            self._store = result.store
            self._persist()
        return result

    def _persist(self) -> None:
        """Write the group mapping under the storage key."""
        self.storage.set_item(self.storage_key, json.dumps(self._store.groups_to_dict(), ensure_ascii=False))

    def close(self) -> None:
        """Close resources."""
        self.storage.close()

    def __del__(self) -> None:  # pragma: no cover
        """Best-effort cleanup for test/process teardown."""
        try:
            self.close()
        except Exception:
            pass
