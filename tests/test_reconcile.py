import json
import logging

from flashdeck.models import Card, Group
from flashdeck.reconcile import copy_groups, derive_next_ids, reconcile
from flashdeck.seed_loader import SeedData


def _reconcile(seed: SeedData, blob: str | None):
    return reconcile(seed.groups, seed.next_group_id, seed.next_card_id, blob)


def test_no_saved_blob_uses_seed_copies(seed: SeedData) -> None:
    store = _reconcile(seed, None)
    assert sorted(store.groups) == [1, 2]
    assert store.next_group_id == 3
    assert store.next_card_id == 203
    assert store.groups[1] == seed.groups[0]
    assert store.groups[1] is not seed.groups[0]
    assert store.groups[1].cards[0] is not seed.groups[0].cards[0]


def test_saved_card_id_above_seed_counter_wins(seed: SeedData) -> None:
    saved = {"7": {"id": 7, "name": "Mine", "cards": [{"id": 250, "category": "c", "question": "q", "answer": "a"}]}}
    store = _reconcile(seed, json.dumps(saved))
    assert list(store.groups) == [7]
    assert store.next_card_id == 251
    assert store.next_group_id == 8


def test_seed_counters_are_never_undercut(seed: SeedData) -> None:
    saved = {"1": {"id": 1, "name": "Mine", "cards": [{"id": 5, "category": "c", "question": "q", "answer": "a"}]}}
    store = _reconcile(seed, json.dumps(saved))
    assert store.next_group_id == 3
    assert store.next_card_id == 203


def test_empty_saved_mapping_wins_over_seed(seed: SeedData) -> None:
    store = _reconcile(seed, "{}")
    assert store.groups == {}
    assert store.next_group_id == 3
    assert store.next_card_id == 203


def test_malformed_blob_falls_back_to_seed_and_logs(seed: SeedData, caplog) -> None:
    with caplog.at_level(logging.ERROR, logger="flashdeck.reconcile"):
        store = _reconcile(seed, "{not json")
    assert sorted(store.groups) == [1, 2]
    assert any("falling back to seed" in record.getMessage() for record in caplog.records)


def test_wrong_shape_blob_falls_back_to_seed(seed: SeedData) -> None:
    for blob in ('{"1": {"id": 1}}', '{"1": {"id": 1, "name": "x", "cards": [{"id": "bad"}]}}', "null"):
        store = _reconcile(seed, blob)
        assert sorted(store.groups) == [1, 2], blob


def test_empty_list_blob_is_an_empty_store(seed: SeedData) -> None:
    store = _reconcile(seed, "[]")
    assert store.groups == {}
    assert store.next_group_id == 3
    assert store.next_card_id == 203


def test_empty_string_blob_is_treated_as_absent(seed: SeedData) -> None:
    store = _reconcile(seed, "")
    assert sorted(store.groups) == [1, 2]


def test_round_trip_preserves_groups_and_counters(seed: SeedData) -> None:
    original = _reconcile(seed, None)
    restored = _reconcile(seed, json.dumps(original.groups_to_dict()))
    assert dict(restored.groups) == dict(original.groups)
    assert restored.next_group_id >= original.next_group_id
    assert restored.next_card_id >= original.next_card_id


def test_seed_ids_above_declared_counter_are_respected() -> None:
    groups = [Group(id=9, name="g", cards=(Card(id=300, category="c", question="q", answer="a"),))]
    store = reconcile(groups, 3, 203, None)
    assert store.next_group_id == 10
    assert store.next_card_id == 301


def test_derive_next_ids_without_base_counters() -> None:
    assert derive_next_ids({}) == (1, 1)
    groups = copy_groups([Group(id=4, name="g", cards=(Card(id=12, category="", question="q", answer="a"),))])
    assert derive_next_ids(groups) == (5, 13)
