"""Tests for catalog.MaterialCatalog."""
import pytest

from catalog import STUDY_MATERIALS, MaterialCatalog
from models import CARS, PRACTICE_QUESTIONS, PRACTICE_TEST, REVIEW, MaterialItem


def test_seed_counts_per_category() -> None:
    catalog = MaterialCatalog()
    assert catalog.remaining(PRACTICE_TEST) == 5
    assert catalog.remaining(PRACTICE_QUESTIONS) == 7
    assert catalog.remaining(CARS) == 2
    assert catalog.remaining(REVIEW) == 1
    assert len(catalog) == len(STUDY_MATERIALS) == 15


def test_practice_tests_are_full_day() -> None:
    tests = [m for m in STUDY_MATERIALS if m.category == PRACTICE_TEST]
    assert all(m.is_full_day and m.estimated_hours == 7.5 for m in tests)


def test_take_next_follows_priority_then_exhausts() -> None:
    catalog = MaterialCatalog()
    names = []
    while True:
        item = catalog.take_next(PRACTICE_QUESTIONS)
        if item is None:
            break
        names.append(item.name)
    assert names[0] == "AAMC Question Bank Questions - 100 Questions"
    assert names[-1] == "AAMC Section Bank C/P - 40 Questions"
    assert len(names) == 7
    assert catalog.take_next(PRACTICE_QUESTIONS) is None
    assert catalog.remaining(CARS) == 2


def test_priority_order_independent_of_seed_order() -> None:
    seed = (
        MaterialItem("late", CARS, 30, 1),
        MaterialItem("early", CARS, 5, 1),
    )
    catalog = MaterialCatalog(seed)
    assert catalog.take_next(CARS).name == "early"
    assert catalog.take_next(CARS).name == "late"


def test_copies_are_independent() -> None:
    first = MaterialCatalog()
    first.take_next(PRACTICE_TEST)
    second = MaterialCatalog()
    assert second.take_next(PRACTICE_TEST).name == "AAMC Sample Test"
    assert first.remaining(PRACTICE_TEST) == 4


def test_unknown_category_rejected() -> None:
    with pytest.raises(ValueError):
        MaterialCatalog((MaterialItem("x", "flashcards", 1, 1),))
