"""
ETL pipeline: loads the raw catalog export, validates every record against
the Course schema, and writes data/courses.json (the file served as
GET /api/courses.json).

Cleaning rules:
  - Records that fail validation are skipped with a warning
  - Surrounding whitespace is stripped from string fields
  - The first record with a given id wins; later duplicates are skipped,
    so id stays unique across the served catalog
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from catalog.models import Course

DATA_DIR    = Path(__file__).parent.parent / "data"
SOURCE_FILE = DATA_DIR / "catalog_source.json"
OUTPUT_FILE = DATA_DIR / "courses.json"

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def load(path: Path) -> list[Any]:
    """Load a JSON array from disk; return [] if the file doesn't exist or isn't an array."""
    if not path.exists():
        return []
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        log.warning("Ignoring %s: expected a JSON array, got %s", path.name, type(data).__name__)
        return []
    return data


def _strip(record: dict[str, Any]) -> dict[str, Any]:
    return {k: v.strip() if isinstance(v, str) else v for k, v in record.items()}


def load_courses(path: Path = OUTPUT_FILE) -> list[Course]:
    """Read an already-built courses.json into Course models."""
    if not path.exists():
        raise FileNotFoundError(f"courses.json not found at {path}. Run the ETL pipeline first.")
    return [Course.model_validate(c) for c in load(path)]


# ---------------------------------------------------------------------------
# Core clean-up
# ---------------------------------------------------------------------------

def normalize_courses(raw: list[Any]) -> list[Course]:
    """Validate raw records and drop invalid ones and repeated ids, keeping order."""
    seen: set[int | str] = set()
    courses: list[Course] = []

    for i, record in enumerate(raw):
        if not isinstance(record, dict):
            log.warning("Skipping record %d: not a JSON object", i)
            continue

        try:
            course = Course.model_validate(_strip(record))
        except ValidationError as exc:
            log.warning("Skipping record %d: %d validation error(s)", i, exc.error_count())
            continue

        if course.id in seen:
            log.warning("Skipping record %d: duplicate id %r", i, course.id)
            continue

        seen.add(course.id)
        courses.append(course)

    return courses


# ---------------------------------------------------------------------------
# Entry point (importable, not a CLI)
# ---------------------------------------------------------------------------

def run(source: Path = SOURCE_FILE, output: Path = OUTPUT_FILE) -> list[Course]:
    """Load the raw export, clean it, save courses.json, return the result."""
    raw = load(source)
    courses = normalize_courses(raw)
    log.info("Kept %d of %d source records.", len(courses), len(raw))

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(
        json.dumps([c.model_dump(by_alias=True) for c in courses], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    return courses
