"""Study session state: category filtering, flipping and card cycling."""

from __future__ import annotations

from .models import Card, Group

ALL_CATEGORIES = "All"


class StudySession:
    """Flip through one group's cards, optionally filtered by category."""

    def __init__(self, group: Group) -> None:
        """Start at the first card of every category."""
        self.group = group
        self.selected_category = ALL_CATEGORIES
        self.index = 0
        self.flipped = False

    def categories(self) -> list[str]:
        """Return the category choices with the catch-all sentinel first."""
        names = sorted({card.category for card in self.group.cards if card.category})
        return [ALL_CATEGORIES, *names]

    def filtered_cards(self) -> list[Card]:
        """Return cards visible under the selected category."""
        if self.selected_category == ALL_CATEGORIES:
            return list(self.group.cards)
        return [card for card in self.group.cards if card.category == self.selected_category]

    def select_category(self, category: str) -> None:
        """Switch category and restart from the first card."""
        self.selected_category = category
        self._reset()

    def refresh(self, group: Group) -> None:
        """Swap in an updated copy of the group, restarting when the card count changed."""
        count_changed = len(group.cards) != len(self.group.cards)
        self.group = group
        if count_changed:
            self._reset()

    @property
    def current_card(self) -> Card | None:
        """Return the card on display, if any."""
        cards = self.filtered_cards()
        if not cards:
            return None
        return cards[self.index % len(cards)]

    @property
    def position_label(self) -> str:
        cards = self.filtered_cards()
        if not cards:
            return "0 / 0"
        return f"{self.index + 1} / {len(cards)}"

    def flip(self) -> None:
        """Toggle between question and answer."""
        self.flipped = not self.flipped

    def next_card(self) -> None:
        """Advance to the next card, wrapping around, question side up."""
        self.flipped = False
        cards = self.filtered_cards()
        if cards:
            self.index = (self.index + 1) % len(cards)

    @property
    def mastered_count(self) -> int:
        """Return how many cards were recalled at least once."""
        return len([card for card in self.group.cards if card.easy_count > 0])

    @property
    def total_easy_count(self) -> int:
        return sum(card.easy_count for card in self.group.cards)

    def _reset(self) -> None:
        self.index = 0
        self.flipped = False
