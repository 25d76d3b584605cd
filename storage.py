from __future__ import annotations

import logging
import os
import time
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from dotenv import load_dotenv

from models import ScheduleDay
from models_pydantic import StudyPlanRequest

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_FILE_TTL_SECONDS = float(os.environ.get("STUDY_PLANNER_FILE_TTL_SECONDS", 60 * 60))


@dataclass
class StoredPlan:
    id: str
    request: StudyPlanRequest
    schedule: Optional[List[ScheduleDay]] = None
    created_at: datetime = field(default_factory=datetime.now)


class MemStorage:
    """Process-local plan store keyed by UUID."""

    def __init__(self) -> None:
        self._plans: Dict[str, StoredPlan] = {}

    def create_study_plan(self, request: StudyPlanRequest) -> StoredPlan:
        plan = StoredPlan(id=str(uuid.uuid4()), request=request)
        self._plans[plan.id] = plan
        return plan

    def get_study_plan(self, plan_id: str) -> Optional[StoredPlan]:
        return self._plans.get(plan_id)

    def update_study_plan(self, plan_id: str, **updates) -> Optional[StoredPlan]:
        existing = self._plans.get(plan_id)
        if existing is None:
            return None
        updated = replace(existing, **updates)
        self._plans[plan_id] = updated
        return updated

    def __len__(self) -> int:
        return len(self._plans)


class FileStore:
    """Generated files held in memory until their TTL runs out."""

    def __init__(self, ttl_seconds: float = DEFAULT_FILE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._files: Dict[str, Tuple[bytes, float]] = {}

    def put(self, data: bytes) -> str:
        self.purge_expired()
        file_id = str(uuid.uuid4())
        self._files[file_id] = (data, self._clock() + self.ttl_seconds)
        return file_id

    def get(self, file_id: str) -> Optional[bytes]:
        entry = self._files.get(file_id)
        if entry is None:
            return None
        data, expires_at = entry
        if self._clock() >= expires_at:
            del self._files[file_id]
            return None
        return data

    def purge_expired(self) -> int:
        now = self._clock()
        expired = [file_id for file_id, (_, expires_at) in self._files.items() if now >= expires_at]
        for file_id in expired:
            del self._files[file_id]
        if expired:
            logger.info("Expired %d generated file(s)", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._files)
