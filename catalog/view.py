"""
Catalog pipeline: filter → sort → paginate.

Every render derives the visible rows from (courses, search term, sort
config, current page); nothing here mutates the store. Sorting is applied to
the derived list only, and the sort config persists across searches and page
changes, so the displayed order stays put while the user keeps typing.

Public API:
    filter_courses(courses, term)        → list[Course]
    sort_courses(courses, config)        → list[Course]
    total_pages(count, rows_per_page)    → int
    page_slice(courses, page, rows)      → list[Course]
    CatalogView(store)                   – holds the view state
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from catalog.models import Course, column_key
from catalog.store import CourseStore

ROWS_PER_PAGE = 5


class SortDirection(str, Enum):
    ASCENDING  = "ascending"
    DESCENDING = "descending"


@dataclass(frozen=True)
class SortConfig:
    key: str | None = None
    direction: SortDirection = SortDirection.ASCENDING

    def toggled(self, key: str) -> "SortConfig":
        """
        Config after a click on the `key` column header.

        Same key while ascending flips to descending; anything else
        (another key, or the same key while descending) sorts ascending.
        """
        key = column_key(key)
        if key == self.key and self.direction is SortDirection.ASCENDING:
            return SortConfig(key, SortDirection.DESCENDING)
        return SortConfig(key, SortDirection.ASCENDING)


@dataclass(frozen=True)
class Page:
    rows: list[Course]
    current_page: int
    total_pages: int
    filtered_count: int

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

def filter_courses(courses: Sequence[Course], term: str) -> list[Course]:
    """Courses whose number or name contains `term`, ignoring case."""
    needle = term.lower()
    return [
        c for c in courses
        if needle in c.course_number.lower() or needle in c.course_name.lower()
    ]


def sort_courses(courses: Sequence[Course], config: SortConfig) -> list[Course]:
    """
    Stable sort on the configured field; descending is the exact reverse of
    ascending. With no key the input order is kept.
    """
    if config.key is None:
        return list(courses)
    ordered = sorted(courses, key=lambda c: getattr(c, config.key))
    if config.direction is SortDirection.DESCENDING:
        ordered.reverse()
    return ordered


def total_pages(count: int, rows_per_page: int = ROWS_PER_PAGE) -> int:
    return max(1, math.ceil(count / rows_per_page))


def page_slice(
    courses: Sequence[Course], page: int, rows_per_page: int = ROWS_PER_PAGE
) -> list[Course]:
    start = (page - 1) * rows_per_page
    return list(courses[start:start + rows_per_page])


# ---------------------------------------------------------------------------
# View state
# ---------------------------------------------------------------------------

@dataclass
class CatalogView:
    """
    Search/sort/page state for one catalog view over a CourseStore.

    current_page is never reset when the search term or sort changes; the
    page controls are disabled at the boundaries instead of clamping it.
    """

    store: CourseStore
    search_term: str = ""
    sort_config: SortConfig = field(default_factory=SortConfig)
    current_page: int = 1
    rows_per_page: int = ROWS_PER_PAGE

    def search(self, term: str) -> None:
        self.search_term = term

    def sort_by(self, key: str) -> SortConfig:
        self.sort_config = self.sort_config.toggled(key)
        return self.sort_config

    def previous_page(self) -> None:
        if self.current_page > 1:
            self.current_page -= 1

    def next_page(self) -> None:
        if self.current_page < self.total_pages():
            self.current_page += 1

    def filtered(self) -> list[Course]:
        return sort_courses(
            filter_courses(self.store.courses, self.search_term), self.sort_config
        )

    def total_pages(self) -> int:
        return total_pages(
            len(filter_courses(self.store.courses, self.search_term)), self.rows_per_page
        )

    def page(self) -> Page:
        courses = self.filtered()
        return Page(
            rows=page_slice(courses, self.current_page, self.rows_per_page),
            current_page=self.current_page,
            total_pages=total_pages(len(courses), self.rows_per_page),
            filtered_count=len(courses),
        )
