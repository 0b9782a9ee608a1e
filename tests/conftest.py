from __future__ import annotations

import shutil
import sys
from collections.abc import Iterator
from pathlib import Path
from uuid import uuid4

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from flashdeck.models import Card, Group  # noqa: E402
from flashdeck.seed_loader import SeedData  # noqa: E402


def _tmp_path_fixture() -> Iterator[Path]:
    """Provide a per-test scratch directory under ``.tmp_pytest/`` in the project root."""
    base = ROOT / ".tmp_pytest"
    base.mkdir(parents=True, exist_ok=True)
    path = base / str(uuid4())
    path.mkdir(parents=True, exist_ok=False)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        try:
            next(base.iterdir())
        except StopIteration:
            base.rmdir()
        except FileNotFoundError:
            pass


tmp_path = pytest.fixture(name="tmp_path")(_tmp_path_fixture)


@pytest.fixture
def seed() -> SeedData:
    """Small seed mirroring the bundled one: max card id 202, counters 3/203."""
    return SeedData(
        groups=(
            Group(
                id=1,
                name="Basics",
                cards=(
                    Card(id=101, category="History", question="Q1", answer="A1"),
                    Card(id=102, category="Programming", question="Q2", answer="A2"),
                ),
            ),
            Group(
                id=2,
                name="Science",
                cards=(
                    Card(id=201, category="Geography", question="Q3", answer="A3"),
                    Card(id=202, category="Science", question="Q4", answer="A4"),
                ),
            ),
        ),
        next_group_id=3,
        next_card_id=203,
    )
