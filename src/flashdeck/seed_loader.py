"""Load the bundled seed dataset and parse raw group JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from .models import Card, Group

CONTENT_PACKAGE = "flashdeck.content"
SEED_FILE = "seed.json"


@dataclass(frozen=True)
class SeedData:
    """Seed groups shipped with the package plus their declared counters."""

    groups: tuple[Group, ...]
    next_group_id: int | None
    next_card_id: int | None


def card_from_dict(raw: object) -> Card:
    """Build a card from raw JSON content."""
    if not isinstance(raw, dict):
        raise ValueError(f"Card entry must be an object, got {type(raw).__name__}.")
    easy_count = _require_int(raw.get("easyCount", 0), "easyCount")
    if easy_count < 0:
        raise ValueError(f"Card '{raw.get('id')}' has negative easyCount.")
    return Card(
        id=_require_int(raw.get("id"), "card id"),
        category=str(raw.get("category") or ""),
        question=_require_str(raw.get("question"), "question"),
        answer=_require_str(raw.get("answer"), "answer"),
        easy_count=easy_count,
    )


def group_from_dict(raw: object) -> Group:
    """Build a group from raw JSON content."""
    if not isinstance(raw, dict):
        raise ValueError(f"Group entry must be an object, got {type(raw).__name__}.")
    raw_cards = raw.get("cards", [])
    if not isinstance(raw_cards, list):
        raise ValueError(f"Group '{raw.get('id')}' cards must be a list.")
    return Group(
        id=_require_int(raw.get("id"), "group id"),
        name=_require_str(raw.get("name"), "group name"),
        cards=tuple(card_from_dict(item) for item in raw_cards),
    )


def parse_group_mapping(raw: object) -> dict[int, Group]:
    """Parse a persisted `{groupId: group}` mapping into fresh group values.

    An empty JSON array is accepted as an empty mapping.
    """
    if isinstance(raw, list) and not raw:
        return {}
    if not isinstance(raw, dict):
        raise ValueError("Saved groups must be a JSON object keyed by group id.")
    groups: dict[int, Group] = {}
    for value in raw.values():
        group = group_from_dict(value)
        groups[group.id] = group
    return groups


def load_seed() -> SeedData:
    """Load the bundled seed dataset."""
    entry = resources.files(CONTENT_PACKAGE).joinpath(SEED_FILE)
    raw = json.loads(entry.read_text(encoding="utf-8-sig"))
    return _seed_from_dict(raw)


def load_seed_from_path(path: Path) -> SeedData:
    """Load a seed dataset from a file for tests/tools."""
    raw = json.loads(path.read_text(encoding="utf-8-sig"))
    return _seed_from_dict(raw)


def _seed_from_dict(raw: Any) -> SeedData:
    """Build seed data from a raw JSON document."""
    if not isinstance(raw, dict):
        raise ValueError("Seed document root must be a JSON object.")
    raw_groups = raw.get("groups", [])
    if not isinstance(raw_groups, list):
        raise ValueError("Seed 'groups' must be a list.")
    groups = tuple(group_from_dict(item) for item in raw_groups)
    _validate_unique_ids(groups)
    next_group_id = raw.get("nextGroupId")
    next_card_id = raw.get("nextCardId")
    return SeedData(
        groups=groups,
        next_group_id=None if next_group_id is None else _require_int(next_group_id, "nextGroupId"),
        next_card_id=None if next_card_id is None else _require_int(next_card_id, "nextCardId"),
    )


def _validate_unique_ids(groups: tuple[Group, ...]) -> None:
    """Validate that group ids and card ids are unique across the seed."""
    seen_groups: set[int] = set()
    seen_cards: dict[int, int] = {}
    for group in groups:
        if group.id in seen_groups:
            raise ValueError(f"Duplicate group id: {group.id}")
        seen_groups.add(group.id)
        for card in group.cards:
            previous = seen_cards.get(card.id)
            if previous is not None:
                raise ValueError(f"Duplicate card id: {card.id} (in groups {previous} and {group.id})")
            seen_cards[card.id] = group.id


def _require_int(value: object, label: str) -> int:
    """Return value as int, rejecting bools, floats with fractions and junk."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid {label}: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    raise ValueError(f"Invalid {label}: {value!r}")


def _require_str(value: object, label: str) -> str:
    """Return value as str, rejecting missing values."""
    if value is None or isinstance(value, dict | list):
        raise ValueError(f"Missing or invalid {label}.")
    return str(value)
