import json
from pathlib import Path

from flashdeck.seed_loader import card_from_dict, load_seed, load_seed_from_path, parse_group_mapping


def test_bundled_seed_loads_with_counters() -> None:
    seed = load_seed()
    assert [group.id for group in seed.groups] == [1, 2]
    card_ids = [card.id for group in seed.groups for card in group.cards]
    assert card_ids == [101, 102, 201, 202]
    assert seed.next_group_id == 3
    assert seed.next_card_id == 203


def test_seed_without_counters(tmp_path: Path) -> None:
    path = tmp_path / "seed.json"
    path.write_text(json.dumps({"groups": [{"id": 4, "name": "G", "cards": []}]}), encoding="utf-8")
    seed = load_seed_from_path(path)
    assert seed.next_group_id is None
    assert seed.next_card_id is None
    assert seed.groups[0].name == "G"


def test_duplicate_group_id_in_seed_raises(tmp_path: Path) -> None:
    path = tmp_path / "seed.json"
    payload = {"groups": [{"id": 1, "name": "A", "cards": []}, {"id": 1, "name": "B", "cards": []}]}
    path.write_text(json.dumps(payload), encoding="utf-8")
    try:
        load_seed_from_path(path)
        raise AssertionError("Expected ValueError for duplicate group ids.")
    except ValueError as exc:
        assert "Duplicate group id" in str(exc)


def test_duplicate_card_id_across_groups_raises(tmp_path: Path) -> None:
    path = tmp_path / "seed.json"
    card = {"id": 9, "category": "c", "question": "q", "answer": "a"}
    payload = {
        "groups": [
            {"id": 1, "name": "A", "cards": [card]},
            {"id": 2, "name": "B", "cards": [card]},
        ]
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    try:
        load_seed_from_path(path)
        raise AssertionError("Expected ValueError for duplicate card ids.")
    except ValueError as exc:
        assert "Duplicate card id" in str(exc)


def test_card_defaults_for_missing_category_and_easy_count() -> None:
    card = card_from_dict({"id": 3, "question": "q", "answer": "a"})
    assert card.category == ""
    assert card.easy_count == 0


def test_card_rejects_bad_id_and_negative_count() -> None:
    for raw in (
        {"id": "x", "question": "q", "answer": "a"},
        {"id": True, "question": "q", "answer": "a"},
        {"id": 1, "question": "q", "answer": "a", "easyCount": -1},
        {"id": 1, "answer": "a"},
    ):
        try:
            card_from_dict(raw)
            raise AssertionError(f"Expected ValueError for {raw!r}.")
        except ValueError:
            pass


def test_parse_group_mapping_uses_group_id_field() -> None:
    groups = parse_group_mapping({"whatever": {"id": 8, "name": "G", "cards": []}})
    assert list(groups) == [8]


def test_parse_group_mapping_accepts_empty_list() -> None:
    assert parse_group_mapping([]) == {}


def test_parse_group_mapping_rejects_non_empty_list_root() -> None:
    try:
        parse_group_mapping([{"id": 1, "name": "G", "cards": []}])
        raise AssertionError("Expected ValueError.")
    except ValueError as exc:
        assert "keyed by group id" in str(exc)
