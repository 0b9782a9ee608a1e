"""Deterministic template-based card generation."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .models import Card

TemplateFn = Callable[[str, str, int], str]


@dataclass(frozen=True)
class CardTemplate:
    """Question/answer text builders taking (topic, detail, 1-based index)."""

    question: TemplateFn
    answer: TemplateFn


def _qualified(topic: str, detail: str) -> str:
    return f"{topic} ({detail})" if detail else topic


CARD_TEMPLATES: tuple[CardTemplate, ...] = (
    CardTemplate(
        question=lambda topic, detail, index: f"What is the most important definition of {_qualified(topic, detail)}?",
        answer=lambda topic, detail, index: (
            "Organizing the definition:\n"
            f"- Summary: explain the core meaning of {topic} in one sentence\n"
            "- Background: understand why it matters\n"
            f"- Example: touch on {detail or 'the main situations'}"
        ),
    ),
    CardTemplate(
        question=lambda topic, detail, index: f"Keyword {index} to know when studying {topic}?",
        answer=lambda topic, detail, index: (
            "Hints for keywords to remember:\n"
            f"1. Basic terms of {topic}\n"
            f"2. Representative terms from {detail or 'related fields'}\n"
            "3. Concrete phrases you can explain with"
        ),
    ),
    CardTemplate(
        question=lambda topic, detail, index: f"What are typical cases or use cases of {_qualified(topic, detail)}?",
        answer=lambda topic, detail, index: (
            "Structure for describing a case:\n"
            f"- Situation: where {topic} is used\n"
            f"- Problem: the challenges in {detail or 'practice'}\n"
            "- Outcome: what improves"
        ),
    ),
    CardTemplate(
        question=lambda topic, detail, index: f"What are common misconceptions or pitfalls about {topic}?",
        answer=lambda topic, detail, index: (
            "Viewpoints to avoid misunderstandings:\n"
            f"- Essence: reconfirm the goal of {topic}\n"
            "- Comparison: sort out differences from similar concepts\n"
            f"- Practice: make the caveats in {detail or 'practice'} concrete"
        ),
    ),
    CardTemplate(
        question=lambda topic, detail, index: f"Self-check on {_qualified(topic, detail)}: what is checkpoint {index}?",
        answer=lambda topic, detail, index: (
            "Prepare to answer instantly:\n"
            f"- Prompt: how would you explain {topic}?\n"
            f"- Perspective: add the angle of {detail or 'related fields'}\n"
            "- Wrap-up: build an answer you can give in 30 seconds"
        ),
    ),
)


def card_category(topic: str, detail: str) -> str:
    """Return the category label used for generated cards."""
    topic = topic.strip()
    detail = detail.strip()
    return f"{topic} / {detail}" if detail else topic


def generate(topic: str, detail: str, count: int, start_id: int) -> tuple[Card, ...]:
    """Build `count` cards cycling through the fixed templates.

    Card ids run from `start_id` upward in order. Identical inputs always
    produce identical cards.
    """
    if count < 0:
        raise ValueError(f"Card count must be non-negative, got {count}.")
    trimmed_topic = topic.strip()
    trimmed_detail = detail.strip()
    category = card_category(trimmed_topic, trimmed_detail)
    cards: list[Card] = []
    for offset in range(count):
        template = CARD_TEMPLATES[offset % len(CARD_TEMPLATES)]
        index = offset + 1
        cards.append(
            Card(
                id=start_id + offset,
                category=category,
                question=template.question(trimmed_topic, trimmed_detail, index),
                answer=template.answer(trimmed_topic, trimmed_detail, index),
            )
        )
    return tuple(cards)
