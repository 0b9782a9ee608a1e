"""CLI entrypoint for the flashcard study shell."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable
from pathlib import Path

from .gateway import (
    DEFAULT_GENERATION_COUNT,
    GENERATED_GROUP_SUFFIX,
    MODE_EXISTING,
    MODE_NEW,
    CardDraft,
    GenerationRequest,
)
from .models import Card
from .service import STATUS_SUCCESS, FlashcardService
from .session import ALL_CATEGORIES, StudySession

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
DEFAULT_DB_PATH = Path(".flashdeck") / "storage.db"
MENU_QUIT_COMMANDS = {"q"}
FLOW_EXIT_COMMANDS = {":quit", ":exit", ":q"}
MENU_BACK_COMMANDS = {"b"}
DEMO_REQUEST = GenerationRequest(
    topic="Starter template",
    detail="UI check",
    count=3,
    mode=MODE_NEW,
    new_group_name="Starter stack (AI)",
)


class QuitApp(Exception):
    """Signal immediate app exit from nested menu flows."""


def _service(db_path: Path | str = DEFAULT_DB_PATH) -> FlashcardService:
    """Create app service with local database path."""
    return FlashcardService(db_path=db_path)


def run(argv: list[str] | None = None) -> int:
    """Run the CLI application."""
    parser = argparse.ArgumentParser(prog="flashdeck", description="Grouped flashcard study")
    parser.add_argument("command", nargs="?", default="play", choices=["play"])
    parser.add_argument("--db", type=Path, default=DEFAULT_DB_PATH, help="storage database path")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return play_shell(db_path=args.db)


def play_shell(input_fn: InputFn = input, print_fn: PrintFn = print, db_path: Path | str = DEFAULT_DB_PATH) -> int:
    """Run persistent menu-driven shell."""
    service = _service(db_path)
    try:
        while True:
            groups = service.groups()
            totals = service.summary()
            print_fn("\n=== Flashcard Groups ===")
            print_fn(f"Groups: {totals.group_count} | Cards: {totals.card_count} | Categories: {totals.category_count}")
            if groups:
                for idx, group in enumerate(groups, start=1):
                    print_fn(f"{idx}) {group.name} ({len(group.cards)} cards)")
            else:
                print_fn("No groups yet.")
            print_fn("n) New group")
            print_fn("g) Generate cards")
            print_fn("t) Generate demo cards")
            if groups:
                print_fn(f"r) Recent group ({groups[0].name})")
            print_fn("d) Delete group")
            print_fn("q) Quit")
            choice = input_fn("Choose: ").strip().lower()

            try:
                if choice == "n":
                    _create_group_flow(service, input_fn, print_fn)
                elif choice == "g":
                    _generate_flow(service, input_fn, print_fn)
                elif choice == "t":
                    _run_generation(service, DEMO_REQUEST, print_fn)
                elif choice == "r":
                    recent = service.recent_group()
                    if recent is None:
                        print_fn("No groups yet.")
                    else:
                        _study_flow(service, recent.id, input_fn, print_fn)
                elif choice == "d":
                    _delete_group_flow(service, input_fn, print_fn)
                elif choice in MENU_QUIT_COMMANDS or choice in FLOW_EXIT_COMMANDS:
                    return 0
                elif choice.isdigit() and 0 <= int(choice) - 1 < len(groups):
                    _study_flow(service, groups[int(choice) - 1].id, input_fn, print_fn)
                else:
                    print_fn("Invalid choice.")
            except QuitApp:
                return 0
    finally:
        service.close()


def _create_group_flow(service: FlashcardService, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Create a new empty group."""
    name = input_fn("New group name: ")
    result = service.create_group(name)
    if not result.ok:
        print_fn(result.error or "Could not create group.")
        return
    if result.group is not None:
        print_fn(f"Created group '{result.group.name}'.")


def _delete_group_flow(service: FlashcardService, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Delete a group with explicit confirmation safeguard."""
    groups = service.groups()
    if not groups:
        print_fn("No groups available to delete.")
        return

    print_fn("\nDelete group")
    for idx, group in enumerate(groups, start=1):
        print_fn(f"{idx}) {group.name}")
    print_fn("b) Back")
    choice = input_fn("Choose group to delete: ").strip().lower()
    if choice in MENU_BACK_COMMANDS:
        return
    if not choice.isdigit() or not (0 <= int(choice) - 1 < len(groups)):
        print_fn("Invalid choice.")
        return

    target = groups[int(choice) - 1]
    print_fn(f"WARNING: This permanently deletes group '{target.name}' and its {len(target.cards)} cards.")
    confirm = input_fn("Type YES to confirm deletion: ").strip()
    if confirm != "YES":
        print_fn("Deletion cancelled.")
        return
    service.delete_group(target.id)
    print_fn(f"Deleted group '{target.name}'.")


def _generate_flow(service: FlashcardService, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Collect generation input, queue it and wait for the result."""
    print_fn("\n=== Generate Cards ===")
    topic = input_fn("Topic: ")
    if topic.strip().lower() in FLOW_EXIT_COMMANDS:
        raise QuitApp()
    detail = input_fn("Detail (optional): ")
    count_text = input_fn(f"Number of cards [{DEFAULT_GENERATION_COUNT}]: ").strip()
    if not count_text:
        count = DEFAULT_GENERATION_COUNT
    elif count_text.isdigit():
        count = int(count_text)
    else:
        print_fn("Card count must be a number.")
        return

    mode_choice = input_fn("Add to n) new group or e) existing group [n]: ").strip().lower()
    mode = MODE_EXISTING if mode_choice == "e" else MODE_NEW
    target_group_id: int | None = None
    new_group_name = ""
    if mode == MODE_NEW:
        suggestion = f"{topic.strip()}{GENERATED_GROUP_SUFFIX}" if topic.strip() else "New group"
        new_group_name = input_fn(f"Group name [{suggestion}]: ")
    else:
        groups = service.groups()
        for idx, group in enumerate(groups, start=1):
            print_fn(f"{idx}) {group.name}")
        choice = input_fn("Target group: ").strip()
        if choice.isdigit() and 0 <= int(choice) - 1 < len(groups):
            target_group_id = groups[int(choice) - 1].id

    request = GenerationRequest(
        topic=topic,
        detail=detail,
        count=count,
        mode=mode,
        target_group_id=target_group_id,
        new_group_name=new_group_name,
    )
    _run_generation(service, request, print_fn)


def _run_generation(service: FlashcardService, request: GenerationRequest, print_fn: PrintFn) -> None:
    """Queue one generation, wait for it and report the outcome."""
    if service.request_generation(request) is None:
        print_fn(service.generation.error)
        return

    print_fn("Generating...")
    state = service.wait_for_generation()
    if state.status != STATUS_SUCCESS or state.last_result is None:
        print_fn(state.error)
        return
    summary = state.last_result
    line = f"Added {summary.card_count} cards to '{summary.group_name}'. Topic: {summary.topic.strip()}"
    if summary.detail.strip():
        line += f" | Detail: {summary.detail.strip()}"
    print_fn(line)


def _study_flow(service: FlashcardService, group_id: int, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Flip through one group's cards."""
    group = service.get_group(group_id)
    if group is None:
        print_fn("Group not found.")
        return
    session = StudySession(group)

    while True:
        print_fn(f"\n=== {session.group.name} ===")
        print_fn(f"Category: {session.selected_category} | Card {session.position_label}")
        card = session.current_card
        if card is None:
            print_fn("No cards in this category yet.")
        else:
            _print_card_face(card, session.flipped, print_fn)

        if card is not None and session.flipped:
            print_fn("a) Again   k) Got it")
        elif card is not None:
            print_fn("f) Flip")
        print_fn("n) Next card  c) Category  +) Add card  s) Stats  b) Back")
        choice = input_fn("Choose: ").strip().lower()

        if choice in FLOW_EXIT_COMMANDS:
            raise QuitApp()
        if choice in MENU_BACK_COMMANDS:
            return
        if choice == "f" and card is not None:
            session.flip()
        elif choice in {"a", "k"} and card is not None and session.flipped:
            if choice == "k":
                service.mark_recalled(group_id, card.id)
            updated = service.get_group(group_id)
            if updated is None:
                print_fn("Group not found.")
                return
            session.refresh(updated)
            session.next_card()
        elif choice == "n":
            session.next_card()
        elif choice == "c":
            _select_category_flow(session, input_fn, print_fn)
        elif choice == "+":
            _add_card_flow(service, session, input_fn, print_fn)
        elif choice == "s":
            _stats_flow(session, print_fn)
        else:
            print_fn("Invalid choice.")


def _print_card_face(card: Card, flipped: bool, print_fn: PrintFn) -> None:
    """Print the visible side of a card."""
    category = card.category or "Uncategorized"
    if flipped:
        print_fn(f"[Answer] ({category})")
        print_fn(card.answer)
        print_fn(f"Recalled: {card.easy_count}")
    else:
        print_fn(f"[Question] ({category})")
        print_fn(card.question)


def _select_category_flow(session: StudySession, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Switch the category filter."""
    categories = session.categories()
    for idx, name in enumerate(categories, start=1):
        marker = "*" if name == session.selected_category else " "
        print_fn(f"{idx}){marker}{name}")
    choice = input_fn("Category: ").strip()
    if choice.isdigit() and 0 <= int(choice) - 1 < len(categories):
        session.select_category(categories[int(choice) - 1])
        return
    print_fn("Invalid choice.")


def _add_card_flow(service: FlashcardService, session: StudySession, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Add one card to the group under study."""
    existing = [name for name in session.categories() if name != ALL_CATEGORIES]
    print_fn("\nAdd card")
    selected = existing[0] if existing else ""
    if existing:
        for idx, name in enumerate(existing, start=1):
            print_fn(f"{idx}) {name}")
        choice = input_fn(f"Category number [{selected}]: ").strip()
        if choice.isdigit() and 0 <= int(choice) - 1 < len(existing):
            selected = existing[int(choice) - 1]
    new_category = input_fn("New category (overrides selection): ")
    question = input_fn("Question: ")
    answer = input_fn("Answer: ")

    draft = CardDraft(question=question, answer=answer, category=selected, new_category=new_category)
    result = service.add_card(session.group.id, draft)
    if not result.ok or result.group is None:
        print_fn(result.error or "Could not add card.")
        return
    session.refresh(result.group)
    session.select_category(result.cards[0].category)
    print_fn(f"Added card to '{result.cards[0].category}'.")


def _stats_flow(session: StudySession, print_fn: PrintFn) -> None:
    """Print mastery statistics for the group."""
    print_fn(f"Cards: {len(session.group.cards)}")
    print_fn(f"Recalled at least once: {session.mastered_count}")
    print_fn(f"Total recalls: {session.total_easy_count}")


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
