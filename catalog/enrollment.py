"""
Enrollment registry shared by the catalog and schedule views.

Both views hold the same registry object, so an enroll in one is visible in
the other on the next render. Enrolling the same course twice is allowed;
drop() removes every entry with the given id.
"""

from collections.abc import Iterator

from catalog.models import Course


class EnrollmentRegistry:
    def __init__(self, courses: list[Course] | None = None):
        self._courses: list[Course] = list(courses or [])

    def enroll(self, course: Course) -> None:
        self._courses.append(course)

    def drop(self, course_id: int | str) -> int:
        """Remove all entries for `course_id`; return how many were removed."""
        kept = [c for c in self._courses if c.id != course_id]
        removed = len(self._courses) - len(kept)
        self._courses = kept
        return removed

    def enrolled(self) -> list[Course]:
        return list(self._courses)

    def is_enrolled(self, course_id: int | str) -> bool:
        return any(c.id == course_id for c in self._courses)

    def total_credits(self) -> int | float:
        return sum(c.semester_credits for c in self._courses)

    def total_clock_hours(self) -> int | float:
        return sum(c.total_clock_hours for c in self._courses)

    def __len__(self) -> int:
        return len(self._courses)

    def __iter__(self) -> Iterator[Course]:
        return iter(list(self._courses))
