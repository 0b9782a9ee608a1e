"""Core domain models for grouped flashcard study."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class Card:
    """One question/answer card."""

    id: int
    category: str
    question: str
    answer: str
    easy_count: int = 0

    def recalled(self) -> Card:
        """Return a copy with the recall counter bumped by one."""
        return replace(self, easy_count=self.easy_count + 1)

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted JSON shape of the card."""
        return {
            "id": self.id,
            "category": self.category,
            "question": self.question,
            "answer": self.answer,
            "easyCount": self.easy_count,
        }


@dataclass(frozen=True)
class Group:
    """Named, ordered collection of cards."""

    id: int
    name: str
    cards: tuple[Card, ...] = ()

    def find_card(self, card_id: int) -> Card | None:
        """Return one card by id if present."""
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def with_cards(self, cards: tuple[Card, ...]) -> Group:
        """Return a copy holding a different card sequence."""
        return replace(self, cards=cards)

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted JSON shape of the group."""
        return {"id": self.id, "name": self.name, "cards": [card.to_dict() for card in self.cards]}


@dataclass(frozen=True)
class Store:
    """Authoritative session state: groups plus the two id counters."""

    groups: Mapping[int, Group] = field(default_factory=dict)
    next_group_id: int = 1
    next_card_id: int = 1

    def get_group(self, group_id: int) -> Group | None:
        """Return one group by id if present."""
        return self.groups.get(group_id)

    def ordered_groups(self) -> list[Group]:
        """Return groups ordered by id."""
        return [self.groups[key] for key in sorted(self.groups)]

    def with_group(self, group: Group) -> Store:
        """Return a store with one group inserted or replaced."""
        groups = dict(self.groups)
        groups[group.id] = group
        return replace(self, groups=groups)

    def without_group(self, group_id: int) -> Store:
        """Return a store with one group removed."""
        groups = dict(self.groups)
        groups.pop(group_id, None)
        return replace(self, groups=groups)

    def groups_to_dict(self) -> dict[str, dict[str, Any]]:
        """Return the persisted group mapping keyed by stringified group id."""
        return {str(group.id): group.to_dict() for group in self.ordered_groups()}
