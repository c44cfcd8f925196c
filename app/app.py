"""
FastAPI application: serves the course catalog consumed by the frontend.

Run as a script to build missing data then serve:
    python app/app.py

Or run as a module if data is already built:
    uvicorn app.app:app --reload

Startup (skipped if output already exists):
    ETL: data/catalog_source.json → data/courses.json

Endpoints:
    GET /api/courses.json
        returns: [{"id", "trimester", "courseNumber", "courseName",
                   "semesterCredits", "totalClockHours"}, ...]
    GET /api/catalog?search=...&sort=...&direction=...&page=...
        returns: one page of the filter → sort → paginate pipeline

Logs each request and wall-clock response time to stdout and logs/app.log
(rotating, 5 MB max, 3 backups).
"""

import asyncio
import logging
import logging.handlers
import os
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

# Ensure project root is on sys.path when running as a script (python app/app.py)
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalog.models import Course, column_key
from catalog.view import (
    SortConfig,
    SortDirection,
    filter_courses,
    page_slice,
    sort_courses,
    total_pages,
)

load_dotenv()

HOST = os.getenv("CATALOG_HOST", "0.0.0.0")
PORT = int(os.getenv("CATALOG_PORT", "8000"))

LOG_DIR  = Path(__file__).parent.parent / "logs"
LOG_FILE = LOG_DIR / "app.log"

def _setup_logging() -> None:
    LOG_DIR.mkdir(exist_ok=True)
    fmt = logging.Formatter("%(asctime)s  %(levelname)s  %(message)s")

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(fmt)

    # Rotate at 5 MB, keep 3 backups
    rotating = logging.handlers.RotatingFileHandler(
        LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    rotating.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(stream)
    root.addHandler(rotating)

_setup_logging()
log = logging.getLogger("api")

# ---------------------------------------------------------------------------
# Data paths
# ---------------------------------------------------------------------------

DATA_DIR     = Path(__file__).parent.parent / "data"
SOURCE_FILE  = DATA_DIR / "catalog_source.json"
COURSES_FILE = DATA_DIR / "courses.json"


# ---------------------------------------------------------------------------
# Data preparation
# ---------------------------------------------------------------------------

def _ensure_data() -> None:
    """Build courses.json from the raw export if it is missing."""
    if not COURSES_FILE.exists():
        log.info("courses.json missing — running ETL on %s…", SOURCE_FILE.name)
        from etl.pipeline import run as run_pipeline
        courses = run_pipeline(SOURCE_FILE, COURSES_FILE)
        log.info("  Saved %d courses → %s", len(courses), COURSES_FILE.name)
    else:
        log.info("courses.json exists — skipping ETL.")


# ---------------------------------------------------------------------------
# App + lifespan
# ---------------------------------------------------------------------------

_courses: list[Course] = []


@asynccontextmanager
async def lifespan(_: FastAPI):
    global _courses

    _ensure_data()

    from etl.pipeline import load_courses
    _courses = load_courses(COURSES_FILE)
    log.info("  %d courses loaded.", len(_courses))

    yield  # server runs here


app = FastAPI(title="School Catalog", lifespan=lifespan)


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

class CatalogPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    courses: list[Course]
    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")
    filtered_count: int = Field(alias="filteredCount")
    has_previous: bool = Field(alias="hasPrevious")
    has_next: bool = Field(alias="hasNext")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/api/courses.json", response_model=list[Course])
def courses() -> list[Course]:
    log.info("courses.json  n=%d", len(_courses))
    return _courses


@app.get("/api/catalog", response_model=CatalogPage)
def catalog(
    search: str = "",
    sort: str | None = None,
    direction: SortDirection = SortDirection.ASCENDING,
    page: int = Query(1, ge=1),
) -> CatalogPage:
    t0 = time.perf_counter()

    try:
        config = SortConfig(column_key(sort), direction) if sort else SortConfig()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    matched = sort_courses(filter_courses(_courses, search), config)
    pages = total_pages(len(matched))

    result = CatalogPage(
        courses=page_slice(matched, page),
        current_page=page,
        total_pages=pages,
        filtered_count=len(matched),
        has_previous=page > 1,
        has_next=page < pages,
    )

    elapsed = time.perf_counter() - t0
    log.info(
        "catalog  search=%r  sort=%s/%s  page=%d/%d  hits=%d  %.3fs",
        search, config.key, config.direction.value, page, pages, len(matched), elapsed,
    )
    return result


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _launch_server() -> None:
    config = uvicorn.Config(app, host=HOST, port=PORT, reload=False)
    server = uvicorn.Server(config)

    try:
        asyncio.get_running_loop()
    except RuntimeError:
        uvicorn.run(app, host=HOST, port=PORT, reload=False)
        return

    log.warning(
        "Detected an existing asyncio event loop; serving with create_task() instead of asyncio.run()."
    )
    asyncio.create_task(server.serve())


if __name__ == "__main__":
    log.info("=== School Catalog — starting up ===")
    _ensure_data()
    log.info("=== Data ready — launching server on http://%s:%d ===", HOST, PORT)
    _launch_server()
