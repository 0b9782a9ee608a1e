from flashdeck.models import Card, Group, Store


def test_card_recalled_returns_new_value() -> None:
    card = Card(id=1, category="c", question="q", answer="a")
    bumped = card.recalled()
    assert bumped.easy_count == 1
    assert card.easy_count == 0


def test_card_to_dict_uses_persisted_field_names() -> None:
    card = Card(id=7, category="c", question="q", answer="a", easy_count=2)
    assert card.to_dict() == {"id": 7, "category": "c", "question": "q", "answer": "a", "easyCount": 2}


def test_store_with_and_without_group_do_not_mutate_original() -> None:
    store = Store(groups={}, next_group_id=1, next_card_id=1)
    added = store.with_group(Group(id=1, name="g"))
    assert 1 in added.groups
    assert store.groups == {}
    removed = added.without_group(1)
    assert removed.groups == {}
    assert 1 in added.groups


def test_groups_to_dict_keys_are_stringified_ids_in_order() -> None:
    store = Store(groups={5: Group(id=5, name="b"), 2: Group(id=2, name="a")}, next_group_id=6, next_card_id=1)
    payload = store.groups_to_dict()
    assert list(payload) == ["2", "5"]
    assert payload["5"] == {"id": 5, "name": "b", "cards": []}


def test_group_find_card() -> None:
    group = Group(id=1, name="g", cards=(Card(id=3, category="", question="q", answer="a"),))
    assert group.find_card(3) is not None
    assert group.find_card(4) is None
