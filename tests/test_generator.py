from flashdeck.generator import CARD_TEMPLATES, card_category, generate


def test_generate_assigns_sequential_ids_and_plain_topic_category() -> None:
    cards = generate("Topic", "", 3, start_id=50)
    assert [card.id for card in cards] == [50, 51, 52]
    assert {card.category for card in cards} == {"Topic"}
    for offset, card in enumerate(cards):
        template = CARD_TEMPLATES[offset]
        assert card.question == template.question("Topic", "", offset + 1)
        assert card.answer == template.answer("Topic", "", offset + 1)
        assert card.easy_count == 0


def test_generate_cycles_templates() -> None:
    count = len(CARD_TEMPLATES) + 2
    cards = generate("Topic", "Detail", count, start_id=1)
    assert cards[len(CARD_TEMPLATES)].question == CARD_TEMPLATES[0].question("Topic", "Detail", len(CARD_TEMPLATES) + 1)
    assert cards[-1].question == CARD_TEMPLATES[1].question("Topic", "Detail", count)


def test_generate_is_deterministic() -> None:
    assert generate("React", "hooks", 7, 10) == generate("React", "hooks", 7, 10)


def test_generate_trims_and_qualifies_category() -> None:
    cards = generate("  React ", "  hooks ", 1, 1)
    assert cards[0].category == "React / hooks"
    assert "React (hooks)" in cards[0].question


def test_whitespace_detail_counts_as_empty() -> None:
    assert card_category("Topic", "   ") == "Topic"


def test_generate_zero_and_negative_counts() -> None:
    assert generate("Topic", "", 0, 5) == ()
    try:
        generate("Topic", "", -1, 5)
        raise AssertionError("Expected ValueError for negative count.")
    except ValueError as exc:
        assert "non-negative" in str(exc)
