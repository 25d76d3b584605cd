from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, Optional, Tuple

from models import CARS, CATEGORIES, PRACTICE_QUESTIONS, PRACTICE_TEST, REVIEW, MaterialItem

logger = logging.getLogger(__name__)

STUDY_MATERIALS: Tuple[MaterialItem, ...] = (
    # Full-length practice tests
    MaterialItem("AAMC Sample Test", PRACTICE_TEST, 1, 7.5, is_full_day=True),
    MaterialItem("AAMC FL1", PRACTICE_TEST, 2, 7.5, is_full_day=True),
    MaterialItem("AAMC FL2", PRACTICE_TEST, 3, 7.5, is_full_day=True),
    MaterialItem("AAMC FL3", PRACTICE_TEST, 4, 7.5, is_full_day=True),
    MaterialItem("AAMC FL4", PRACTICE_TEST, 5, 7.5, is_full_day=True),
    # Question and section banks
    MaterialItem("AAMC Question Bank Questions - 100 Questions", PRACTICE_QUESTIONS, 10, 3),
    MaterialItem("AAMC Section Bank B/B - 60 Questions", PRACTICE_QUESTIONS, 15, 2),
    MaterialItem("AAMC Section Bank P/S - 60 Questions", PRACTICE_QUESTIONS, 16, 2),
    MaterialItem("AAMC Section Bank C/P - 60 Questions", PRACTICE_QUESTIONS, 17, 2),
    MaterialItem("AAMC Section Bank B/B - 40 Questions", PRACTICE_QUESTIONS, 18, 1.5),
    MaterialItem("AAMC Section Bank P/S - 40 Questions", PRACTICE_QUESTIONS, 19, 1.5),
    MaterialItem("AAMC Section Bank C/P - 40 Questions", PRACTICE_QUESTIONS, 20, 1.5),
    # CARS
    MaterialItem("AAMC CARS Pack 1/2 - 3 passages", CARS, 25, 1),
    MaterialItem("AAMC CARS Pack 1/2 - 1 passages", CARS, 26, 0.5),
    # General review
    MaterialItem("Anki Review Cards", REVIEW, 100, 1),
)


class MaterialCatalog:
    """Per-generation copy of the seed materials, consumed in priority order."""

    def __init__(self, materials: Tuple[MaterialItem, ...] = STUDY_MATERIALS) -> None:
        self._queues: Dict[str, Deque[MaterialItem]] = {category: deque() for category in CATEGORIES}
        for item in sorted(materials, key=lambda m: m.priority):
            if item.category not in self._queues:
                raise ValueError(f"Unknown material category: {item.category}")
            self._queues[item.category].append(item)

    def take_next(self, category: str) -> Optional[MaterialItem]:
        queue = self._queues[category]
        if not queue:
            logger.debug("No %s material left in catalog", category)
            return None
        return queue.popleft()

    def remaining(self, category: str) -> int:
        return len(self._queues[category])

    def __len__(self) -> int:
        return sum(len(q) for q in self._queues.values())
