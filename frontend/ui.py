"""
Streamlit frontend for the School Catalog.

Fetches GET /api/courses.json once per browser session and renders two
views over the same session state:

    Catalog   – search, sortable column headers, 5 rows per page, Enroll
    Schedule  – the enrolled courses, Drop

Run with:
    streamlit run frontend/ui.py
"""

import logging
import os
import sys
from pathlib import Path

import streamlit as st
from dotenv import load_dotenv

# Streamlit puts frontend/ on sys.path, not the project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalog.enrollment import EnrollmentRegistry
from catalog.models import COLUMNS, Course
from catalog.store import CourseStore, LoadState
from catalog.view import CatalogView, SortDirection

load_dotenv()

logging.basicConfig(level=logging.INFO, format="%(levelname)s  %(message)s")
log = logging.getLogger("frontend")

API_URL = os.getenv("COURSES_API_URL", "http://localhost:8000/api/courses.json")
FETCH_TIMEOUT = float(os.getenv("COURSES_FETCH_TIMEOUT", "15"))

# Relative column widths: five data columns + the action button
WIDTHS = [2, 2, 3, 2, 2, 1]


# ---------------------------------------------------------------------------
# Session state (created once per browser session = "mount")
# ---------------------------------------------------------------------------

def _init_state() -> None:
    if "store" in st.session_state:
        return
    store = CourseStore(API_URL, timeout=FETCH_TIMEOUT)
    st.session_state.store    = store
    st.session_state.view     = CatalogView(store)
    st.session_state.registry = EnrollmentRegistry()
    log.info("New session, courses from %s", API_URL)


def _sort_label(view: CatalogView, key: str, title: str) -> str:
    config = view.sort_config
    if config.key != key:
        return title
    arrow = "▲" if config.direction is SortDirection.ASCENDING else "▼"
    return f"{title} {arrow}"


def _course_cells(course: Course) -> list:
    cells = st.columns(WIDTHS)
    for cell, key in zip(cells, COLUMNS):
        cell.write(getattr(course, key))
    return cells


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

st.set_page_config(page_title="School Catalog", layout="wide")

_init_state()
store: CourseStore = st.session_state.store
view: CatalogView = st.session_state.view
registry: EnrollmentRegistry = st.session_state.registry

if store.state is LoadState.IDLE:
    with st.spinner("Loading..."):
        store.load()

st.title("School Catalog")
st.caption(f"Enrolled courses: {len(registry)}")

catalog_tab, schedule_tab = st.tabs(["Catalog", "Class Schedule"])


with catalog_tab:
    view.search(st.text_input("Search", placeholder="Search", label_visibility="collapsed"))

    header = st.columns(WIDTHS)
    for col, (key, title) in zip(header, COLUMNS.items()):
        col.button(
            _sort_label(view, key, title),
            key=f"sort-{key}",
            on_click=view.sort_by,
            args=(key,),
        )
    header[-1].markdown("**Enroll**")

    page = view.page()

    if store.loading:
        st.write("Loading...")
    else:
        for course in page.rows:
            cells = _course_cells(course)
            cells[-1].button(
                "Enroll",
                key=f"enroll-{course.id}",
                on_click=registry.enroll,
                args=(course,),
            )

    if store.state is LoadState.FAILED:
        st.button("Retry", on_click=store.retry)

    prev_col, label_col, next_col = st.columns([1, 2, 1])
    prev_col.button("Previous", disabled=not page.has_previous, on_click=view.previous_page)
    label_col.write(f"Page {page.current_page} of {page.total_pages}")
    next_col.button("Next", disabled=not page.has_next, on_click=view.next_page)


with schedule_tab:
    enrolled = registry.enrolled()

    if not enrolled:
        st.info("No courses enrolled.")
    else:
        header = st.columns(WIDTHS)
        for col, title in zip(header, COLUMNS.values()):
            col.markdown(f"**{title}**")
        header[-1].markdown("**Drop**")

        # The same course may be enrolled twice, so keys include the row index
        for i, course in enumerate(enrolled):
            cells = _course_cells(course)
            cells[-1].button(
                "Drop",
                key=f"drop-{i}-{course.id}",
                on_click=registry.drop,
                args=(course.id,),
            )

        st.caption(
            f"Total: {registry.total_credits()} semester credits, "
            f"{registry.total_clock_hours()} clock hours"
        )
