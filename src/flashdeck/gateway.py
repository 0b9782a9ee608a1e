"""Pure store mutations: each operation returns a new store value."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from .generator import generate
from .models import Card, Group, Store

logger = logging.getLogger(__name__)

MODE_NEW = "new"
MODE_EXISTING = "existing"
GENERATION_MODES = (MODE_NEW, MODE_EXISTING)
DEFAULT_GENERATION_COUNT = 5
GENERATED_GROUP_SUFFIX = " (AI generated)"

GROUP_NAME_REQUIRED = "Group name is required."
CARD_FIELDS_REQUIRED = "Question, answer and category are required. All of them are needed to add a card."
GROUP_NOT_FOUND = "The group could not be found."
TOPIC_REQUIRED = "Please enter a topic."
TARGET_REQUIRED = "Please choose a target group."
TARGET_NOT_FOUND = "The selected group could not be found."
COUNT_NEGATIVE = "Card count must not be negative."
GROUP_ID_TAKEN = "A group with that id already exists."


@dataclass(frozen=True)
class MutationResult:
    """Outcome of one store mutation."""

    store: Store
    error: str | None = None
    group: Group | None = None
    cards: tuple[Card, ...] = ()

    @property
    def ok(self) -> bool:
        """Return whether the mutation passed validation."""
        return self.error is None


@dataclass(frozen=True)
class CardDraft:
    """User input for one new card."""

    question: str
    answer: str
    category: str = ""
    new_category: str = ""

    def resolved_category(self) -> str:
        """Return the category to use; typed new category wins over a selection."""
        return self.new_category.strip() or self.category.strip()


@dataclass(frozen=True)
class GenerationRequest:
    """User input for bulk template generation."""

    topic: str
    detail: str = ""
    count: int = DEFAULT_GENERATION_COUNT
    mode: str = MODE_NEW
    target_group_id: int | None = None
    new_group_name: str = ""

    def resolved_group_name(self) -> str:
        """Return the name for a newly created target group."""
        return self.new_group_name.strip() or f"{self.topic.strip()}{GENERATED_GROUP_SUFFIX}"


def validate_card_draft(draft: CardDraft) -> str | None:
    """Return an error message when the draft is incomplete."""
    if not draft.question.strip() or not draft.answer.strip() or not draft.resolved_category():
        return CARD_FIELDS_REQUIRED
    return None


def validate_generation_request(store: Store, request: GenerationRequest) -> str | None:
    """Return an error message when a generation request cannot run."""
    if not request.topic.strip():
        return TOPIC_REQUIRED
    if request.mode not in GENERATION_MODES:
        return f"Unknown generation mode: {request.mode}"
    if request.count < 0:
        return COUNT_NEGATIVE
    if request.mode == MODE_EXISTING:
        if request.target_group_id is None:
            return TARGET_REQUIRED
        if store.get_group(request.target_group_id) is None:
            return TARGET_NOT_FOUND
    return None


def create_group(store: Store, name: str, assigned_id: int | None = None) -> MutationResult:
    """Insert an empty group and advance the group counter past its id."""
    trimmed = name.strip()
    if not trimmed:
        return MutationResult(store=store, error=GROUP_NAME_REQUIRED)
    group_id = store.next_group_id if assigned_id is None else assigned_id
    if group_id in store.groups:
        return MutationResult(store=store, error=GROUP_ID_TAKEN)
    group = Group(id=group_id, name=trimmed)
    updated = replace(store.with_group(group), next_group_id=max(store.next_group_id, group_id + 1))
    logger.debug("Created group %d (%s)", group_id, trimmed)
    return MutationResult(store=updated, group=group)


def delete_group(store: Store, group_id: int) -> MutationResult:
    """Remove a group and its cards; absent ids are a no-op."""
    if group_id not in store.groups:
        return MutationResult(store=store)
    logger.debug("Deleted group %d", group_id)
    return MutationResult(store=store.without_group(group_id))


def add_card(store: Store, group_id: int, draft: CardDraft) -> MutationResult:
    """Append one card built from the draft to a group."""
    error = validate_card_draft(draft)
    if error is not None:
        return MutationResult(store=store, error=error)
    group = store.get_group(group_id)
    if group is None:
        return MutationResult(store=store, error=GROUP_NOT_FOUND)

    card = Card(
        id=store.next_card_id,
        category=draft.resolved_category(),
        question=draft.question.strip(),
        answer=draft.answer.strip(),
    )
    updated_group = group.with_cards(group.cards + (card,))
    updated = replace(store.with_group(updated_group), next_card_id=store.next_card_id + 1)
    logger.debug("Added card %d to group %d", card.id, group_id)
    return MutationResult(store=updated, group=updated_group, cards=(card,))


def mark_recalled(store: Store, group_id: int, card_id: int) -> MutationResult:
    """Increment one card's recall counter; unknown ids are a no-op."""
    group = store.get_group(group_id)
    if group is None or group.find_card(card_id) is None:
        return MutationResult(store=store)
    cards = tuple(card.recalled() if card.id == card_id else card for card in group.cards)
    updated_group = group.with_cards(cards)
    return MutationResult(store=store.with_group(updated_group), group=updated_group)


def generate_cards(
    store: Store,
    request: GenerationRequest,
    card_start_id: int | None = None,
    group_id: int | None = None,
) -> MutationResult:
    """Generate template cards into an existing or a new group.

    `card_start_id` and `group_id` use ids reserved earlier; by default the
    store's current counters are used.
    """
    error = validate_generation_request(store, request)
    if error is not None:
        return MutationResult(store=store, error=error)

    start_id = store.next_card_id if card_start_id is None else card_start_id
    cards = generate(request.topic, request.detail, request.count, start_id)
    next_card_id = max(store.next_card_id, start_id + len(cards))

    if request.mode == MODE_EXISTING:
        target = None if request.target_group_id is None else store.get_group(request.target_group_id)
        if target is None:
            return MutationResult(store=store, error=TARGET_NOT_FOUND)
        updated_group = target.with_cards(target.cards + cards)
        updated = replace(store.with_group(updated_group), next_card_id=next_card_id)
        return MutationResult(store=updated, group=updated_group, cards=cards)

    new_group_id = store.next_group_id if group_id is None else group_id
    new_group = Group(id=new_group_id, name=request.resolved_group_name(), cards=cards)
    updated = replace(
        store.with_group(new_group),
        next_group_id=max(store.next_group_id, new_group_id + 1),
        next_card_id=next_card_id,
    )
    return MutationResult(store=updated, group=new_group, cards=cards)
