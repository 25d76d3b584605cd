from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pydantic
from dotenv import load_dotenv

from excel_export import render_workbook, workbook_filename
from models import ValidationError
from models_pydantic import StudyPlanRequest
from plan_loader import load_plan_requests_from_directory, parse_plan_request, read_plan_config
from planner_core import ScheduleBuilder
from storage import FileStore, MemStorage

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = os.environ.get("STUDY_PLANNER_OUTPUT_DIR", "Plans_Output")
DEFAULT_PLAN = {
    "weekday_hours": 4,
    "weekend_hours": 8,
    "practice_test_days": [],
    "blackout_dates": [],
    "taper_days": 3,
    "output_format": "excel",
}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="MCAT study calendar generator")
    parser.add_argument("--config", type=str, help="Path to plan JSON")
    parser.add_argument("--input-dir", dest="input_dir", type=str, help="Generate one plan per JSON file in this directory")
    parser.add_argument("--test-date", dest="test_date", type=str, help="Test date YYYY-MM-DD")
    parser.add_argument("--weekday-hours", dest="weekday_hours", type=float, help="Study hours Monday-Friday")
    parser.add_argument("--weekend-hours", dest="weekend_hours", type=float, help="Study hours Saturday-Sunday")
    parser.add_argument("--practice-test-days", dest="practice_test_days", type=str, help="Comma-separated weekdays for full-length tests")
    parser.add_argument("--blackout-date", dest="blackout_dates", action="append", help="Blackout day as DATE or DATE:reason (repeatable)")
    parser.add_argument("--taper-days", dest="taper_days", type=int, help="Light review days before the test (2-4)")
    parser.add_argument("--output-format", dest="output_format", choices=["excel", "google-sheets"], help="Spreadsheet flavour")
    parser.add_argument("--today", dest="today", type=str, help="Generate as if today were YYYY-MM-DD")
    parser.add_argument("--output-dir", dest="output_dir", type=str, default=DEFAULT_OUTPUT_DIR, help="Directory to write the plan")
    return parser.parse_args(argv)


def parse_blackout_arg(value: str) -> Dict[str, str]:
    day, _, reason = value.partition(":")
    entry = {"date": day.strip()}
    if reason.strip():
        entry["reason"] = reason.strip()
    return entry


def load_config(args: argparse.Namespace) -> StudyPlanRequest:
    config: Dict[str, Any] = dict(DEFAULT_PLAN)

    if args.config:
        config.update(read_plan_config(Path(args.config)))

    if args.test_date:
        config["test_date"] = args.test_date
    if args.weekday_hours is not None:
        config["weekday_hours"] = args.weekday_hours
    if args.weekend_hours is not None:
        config["weekend_hours"] = args.weekend_hours
    if args.practice_test_days:
        config["practice_test_days"] = [d.strip() for d in args.practice_test_days.split(",") if d.strip()]
    if args.blackout_dates:
        config["blackout_dates"] = list(config["blackout_dates"]) + [parse_blackout_arg(v) for v in args.blackout_dates]
    if args.taper_days is not None:
        config["taper_days"] = args.taper_days
    if args.output_format:
        config["output_format"] = args.output_format

    return parse_plan_request(config)


def parse_date(date_str: str) -> date:
    return datetime.strptime(date_str, "%Y-%m-%d").date()


def check_request(request: StudyPlanRequest, today: date) -> None:
    if request.parsed_test_date() <= today:
        raise ValidationError("Test date must be in the future")


def generate_study_plan(
    payload: Any,
    storage: MemStorage,
    files: FileStore,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    today = today or date.today()
    request = payload if isinstance(payload, StudyPlanRequest) else parse_plan_request(payload)
    check_request(request, today)

    params = request.to_parameters()
    builder = ScheduleBuilder(params, today=today)
    schedule = builder.generate_schedule()
    preview = builder.get_preview_stats()

    plan = storage.create_study_plan(request)
    storage.update_study_plan(plan.id, schedule=schedule)

    workbook = render_workbook(schedule, params)
    file_id = files.put(workbook)
    logger.info("Stored plan %s with workbook %s", plan.id, file_id)

    return {
        "success": True,
        "studyPlanId": plan.id,
        "preview": preview.to_dict(),
        "fileId": file_id,
        "filename": workbook_filename(today),
    }


def write_plan(path: Path, payload: Dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    logger.info("Wrote plan to %s", path)


def write_workbook(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.info("Wrote workbook to %s", path)


def plan_and_write(request: StudyPlanRequest, today: date, output_dir: Path) -> int:
    storage = MemStorage()
    files = FileStore()
    try:
        result = generate_study_plan(request, storage, files, today=today)
    except ValidationError as exc:
        logger.error("Invalid study plan: %s", exc)
        return 1

    write_workbook(output_dir / result["filename"], files.get(result["fileId"]) or b"")
    write_plan(
        output_dir / "study_plan_preview.json",
        {
            "generated_at": datetime.now().isoformat(),
            "today": today.isoformat(),
            "plan": request.model_dump(by_alias=True),
            "preview": result["preview"],
        },
    )

    preview = result["preview"]
    logger.info(
        "Plan %s: %d days, %d practice tests, %.1f study hours",
        result["studyPlanId"],
        preview["totalDays"],
        preview["practiceTestCount"],
        preview["totalStudyHours"],
    )
    return 0


def run(args: argparse.Namespace) -> int:
    today = parse_date(args.today) if args.today else date.today()
    output_dir = Path(args.output_dir)

    if args.input_dir:
        requests = load_plan_requests_from_directory(Path(args.input_dir))
        if not requests:
            logger.error("No valid plan files in %s", args.input_dir)
            return 1
        # Each plan gets its own subdirectory named after its file.
        failures = sum(plan_and_write(request, today, output_dir / stem) for stem, request in requests.items())
        logger.info("Generated %d of %d plans", len(requests) - failures, len(requests))
        return 1 if failures else 0

    try:
        request = load_config(args)
    except pydantic.ValidationError as exc:
        logger.error("Invalid study plan: %s", exc)
        return 1
    return plan_and_write(request, today, output_dir)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    sys.exit(run(parse_args()))


if __name__ == "__main__":
    main()
