"""Merge bundled seed data with saved groups into the session store."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping

from .models import Card, Group, Store
from .seed_loader import parse_group_mapping

logger = logging.getLogger(__name__)


def copy_groups(groups: Iterable[Group]) -> dict[int, Group]:
    """Return a fresh id-keyed mapping of value copies of each group and card."""
    return {
        group.id: Group(
            id=group.id,
            name=group.name,
            cards=tuple(
                Card(
                    id=card.id,
                    category=card.category,
                    question=card.question,
                    answer=card.answer,
                    easy_count=card.easy_count,
                )
                for card in group.cards
            ),
        )
        for group in groups
    }


def derive_next_ids(
    groups: Mapping[int, Group],
    base_next_group_id: int | None = None,
    base_next_card_id: int | None = None,
) -> tuple[int, int]:
    """Return (next_group_id, next_card_id) strictly above every id present.

    A provided base counter is never undercut, so ids handed out by an older
    seed (or reserved earlier) are not reused.
    """
    max_group_id = (1 if base_next_group_id is None else base_next_group_id) - 1
    max_card_id = (1 if base_next_card_id is None else base_next_card_id) - 1
    for group in groups.values():
        max_group_id = max(max_group_id, group.id)
        for card in group.cards:
            max_card_id = max(max_card_id, card.id)

    next_group_id = max_group_id + 1
    next_card_id = max_card_id + 1
    if base_next_group_id is not None:
        next_group_id = max(next_group_id, base_next_group_id)
    if base_next_card_id is not None:
        next_card_id = max(next_card_id, base_next_card_id)
    return next_group_id, next_card_id


def reconcile(
    seed_groups: Iterable[Group],
    seed_next_group_id: int | None = None,
    seed_next_card_id: int | None = None,
    saved_blob: str | None = None,
) -> Store:
    """Build the authoritative store from seed groups and an optional saved blob.

    Malformed saved data is logged and discarded in favour of the seed. An
    empty saved mapping is valid and wins over the seed.
    """
    seed = copy_groups(seed_groups)
    base_group_id, base_card_id = derive_next_ids(seed, seed_next_group_id, seed_next_card_id)

    groups: dict[int, Group] | None = None
    if saved_blob:
        try:
            groups = copy_groups(parse_group_mapping(json.loads(saved_blob)).values())
        except ValueError:
            # json.JSONDecodeError is a ValueError subclass.
            logger.exception("Failed to parse saved groups; falling back to seed data")
            groups = None
    if groups is None:
        groups = seed

    next_group_id, next_card_id = derive_next_ids(groups, base_group_id, base_card_id)
    logger.debug(
        "Reconciled %d groups (next_group_id=%d, next_card_id=%d)", len(groups), next_group_id, next_card_id
    )
    return Store(groups=groups, next_group_id=next_group_id, next_card_id=next_card_id)
