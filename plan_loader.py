from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from models_pydantic import StudyPlanRequest

logger = logging.getLogger(__name__)

FIELD_NAMES = {
    (field.alias or name): name for name, field in StudyPlanRequest.model_fields.items()
}


def unwrap_plan(data: dict) -> dict:
    # Plan files may nest the parameters under a "plan" key.
    if "plan" in data and isinstance(data["plan"], dict):
        return data["plan"]
    return data


def parse_plan_request(data: dict) -> StudyPlanRequest:
    return StudyPlanRequest.model_validate(unwrap_plan(data))


def read_plan_config(path: Path) -> Dict[str, Any]:
    """Read a possibly partial plan file as a dict keyed by field name.

    camelCase keys are mapped to their snake_case field names; nothing is
    validated, so the caller can merge further overrides before parsing.
    """
    with path.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    return {FIELD_NAMES.get(key, key): value for key, value in unwrap_plan(payload).items()}


def load_plan_request_from_json(path: Path) -> StudyPlanRequest:
    with path.open("r", encoding="utf-8") as f:
        payload = json.load(f)

    request = parse_plan_request(payload)
    logger.info("Loaded plan for test date %s from %s", request.test_date, path)
    return request


def load_plan_requests_from_directory(directory: Path) -> Dict[str, StudyPlanRequest]:
    """Load every *.json plan in a directory, keyed by file stem."""
    requests: Dict[str, StudyPlanRequest] = {}
    for json_path in sorted(directory.glob("*.json")):
        try:
            requests[json_path.stem] = load_plan_request_from_json(json_path)
        except Exception as exc:
            logger.exception("Failed to load %s: %s", json_path, exc)
    return requests
