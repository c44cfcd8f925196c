import pytest
from catalog.models import Course, column_key, field_name
from catalog.store import CourseStore, LoadState
from catalog.view import (
    CatalogView,
    SortConfig,
    SortDirection,
    filter_courses,
    page_slice,
    sort_courses,
    total_pages,
)


def _course(id, trimester, number, name, credits, hours):
    return Course(
        id=id,
        trimester=trimester,
        courseNumber=number,
        courseName=name,
        semesterCredits=credits,
        totalClockHours=hours,
    )


@pytest.fixture
def sample_courses():
    """Two-course catalog from the reference scenario."""
    return [
        _course(1, "Fall", "CS101", "Intro", 3, 45),
        _course(2, "Spring", "CS102", "Data", 4, 60),
    ]


@pytest.fixture
def many_courses():
    """Twelve courses: three pages at five rows per page."""
    return [
        _course(i, "Fall" if i % 2 else "Spring", f"CS{100 + i}", f"Course {i:02d}", i % 4 + 1, 15 * i)
        for i in range(1, 13)
    ]


def _view(courses):
    store = CourseStore("http://example.invalid/api/courses.json")
    store.courses = list(courses)
    store.state = LoadState.LOADED
    return CatalogView(store)


class TestFieldName:
    """Test resolving header keys to model attributes."""

    def test_camel_case_alias(self):
        """Test that the camelCase wire name resolves to the attribute."""
        assert field_name("courseName") == "course_name"

    def test_snake_case_name(self):
        """Test that the attribute name resolves to itself."""
        assert field_name("total_clock_hours") == "total_clock_hours"

    def test_unknown_key_raises(self):
        """Test that a field the record does not have is rejected."""
        with pytest.raises(ValueError):
            field_name("instructor")


class TestColumnKey:
    """Test which keys are accepted for sorting."""

    def test_displayed_column_accepted(self):
        """Test that a displayed column is sortable by either spelling."""
        assert column_key("semesterCredits") == "semester_credits"
        assert column_key("trimester") == "trimester"

    def test_id_is_not_sortable(self):
        """Test that id is a record field but not a sortable column."""
        assert field_name("id") == "id"
        with pytest.raises(ValueError):
            column_key("id")

    def test_toggle_rejects_id(self):
        """Test that a header click on id is refused."""
        with pytest.raises(ValueError):
            SortConfig().toggled("id")

    def test_mixed_id_types_never_reach_sort(self):
        """Test that a catalog mixing int and str ids still sorts by every column."""
        courses = [
            _course(1, "Fall", "CS101", "Intro", 3, 45),
            _course("x-2", "Spring", "CS102", "Data", 4, 60),
        ]
        view = _view(courses)
        view.sort_by("courseName")
        assert [c.id for c in view.page().rows] == ["x-2", 1]


class TestFilter:
    """Test case-insensitive search over course number and name."""

    def test_empty_term_matches_all(self, many_courses):
        """Test that an empty search term keeps every course."""
        assert filter_courses(many_courses, "") == many_courses

    def test_matches_course_number_ignoring_case(self, sample_courses):
        """Test that the course number matches regardless of case."""
        assert filter_courses(sample_courses, "cs10") == sample_courses

    def test_matches_course_name(self, sample_courses):
        """Test that the course name matches regardless of case."""
        results = filter_courses(sample_courses, "DAT")
        assert [c.id for c in results] == [2]

    def test_does_not_match_other_fields(self, sample_courses):
        """Test that trimester is not searched."""
        assert filter_courses(sample_courses, "fall") == []

    def test_filter_is_exact_subset(self, many_courses):
        """Test that the result is exactly the matching courses."""
        term = "1"
        results = filter_courses(many_courses, term)
        expected = [
            c for c in many_courses
            if term in c.course_number.lower() or term in c.course_name.lower()
        ]
        assert results == expected

    def test_filter_keeps_store_order(self, many_courses):
        """Test that filtering does not reorder courses."""
        results = filter_courses(many_courses, "course")
        assert [c.id for c in results] == list(range(1, 13))


class TestSortConfig:
    """Test the header-click toggle rule."""

    def test_first_click_sorts_ascending(self):
        """Test that the first click on a header sorts ascending."""
        config = SortConfig().toggled("courseName")
        assert config == SortConfig("course_name", SortDirection.ASCENDING)

    def test_same_key_flips_to_descending(self):
        """Test that a second click on the same header sorts descending."""
        config = SortConfig().toggled("courseName").toggled("courseName")
        assert config.direction is SortDirection.DESCENDING

    def test_same_key_descending_goes_back_to_ascending(self):
        """Test that a third click on the same header sorts ascending again."""
        config = SortConfig("course_name", SortDirection.DESCENDING).toggled("course_name")
        assert config.direction is SortDirection.ASCENDING

    def test_different_key_resets_to_ascending(self):
        """Test that switching columns resets the direction."""
        config = SortConfig("course_name", SortDirection.ASCENDING).toggled("semesterCredits")
        assert config == SortConfig("semester_credits", SortDirection.ASCENDING)


class TestSort:
    """Test the sort stage."""

    def test_no_key_keeps_order(self, many_courses):
        """Test that no sort key leaves the order alone."""
        assert sort_courses(many_courses, SortConfig()) == many_courses

    def test_string_sort_is_lexicographic(self, sample_courses):
        """Test that string columns sort lexicographically."""
        results = sort_courses(sample_courses, SortConfig("course_name"))
        assert [c.course_name for c in results] == ["Data", "Intro"]

    def test_numeric_sort(self):
        """Test that numeric columns sort by value, not by text."""
        courses = [
            _course(1, "Fall", "A1", "A", 10, 150),
            _course(2, "Fall", "A2", "B", 9, 45),
            _course(3, "Fall", "A3", "C", 2, 60),
        ]
        results = sort_courses(courses, SortConfig("total_clock_hours"))
        assert [c.total_clock_hours for c in results] == [45, 60, 150]

    def test_ties_keep_original_order(self, many_courses):
        """Test that equal keys keep their relative order."""
        results = sort_courses(many_courses, SortConfig("trimester"))
        fall = [c.id for c in results if c.trimester == "Fall"]
        assert fall == [1, 3, 5, 7, 9, 11]
        assert results[0].trimester == "Fall"

    def test_descending_is_exact_reverse(self, many_courses):
        """Test that descending is the reverse of ascending."""
        asc = sort_courses(many_courses, SortConfig("semester_credits"))
        desc = sort_courses(many_courses, SortConfig("semester_credits", SortDirection.DESCENDING))
        assert desc == list(reversed(asc))

    def test_sort_does_not_mutate_input(self, many_courses):
        """Test that sorting returns a new list."""
        before = list(many_courses)
        sort_courses(many_courses, SortConfig("course_name", SortDirection.DESCENDING))
        assert many_courses == before


class TestPagination:
    """Test page counting and slicing."""

    @pytest.mark.parametrize("count, pages", [(0, 1), (1, 1), (5, 1), (6, 2), (10, 2), (11, 3)])
    def test_total_pages(self, count, pages):
        """Test that there are ceil(count / 5) pages, at least one."""
        assert total_pages(count) == pages

    def test_slice_first_page(self, many_courses):
        """Test that page 1 holds the first five rows."""
        assert [c.id for c in page_slice(many_courses, 1)] == [1, 2, 3, 4, 5]

    def test_slice_last_partial_page(self, many_courses):
        """Test that the last page holds the remainder."""
        assert [c.id for c in page_slice(many_courses, 3)] == [11, 12]

    def test_slice_beyond_last_page_is_empty(self, many_courses):
        """Test that a page past the end is empty."""
        assert page_slice(many_courses, 4) == []


class TestCatalogView:
    """Test the view state across search, sort and paging actions."""

    def test_page_never_exceeds_five_rows(self, many_courses):
        """Test that no page shows more than five rows."""
        view = _view(many_courses)
        for _ in range(5):
            assert len(view.page().rows) <= 5
            view.next_page()

    def test_next_stops_at_last_page(self, many_courses):
        """Test that Next is a no-op on the last page."""
        view = _view(many_courses)
        for _ in range(10):
            view.next_page()
        page = view.page()
        assert page.current_page == 3
        assert page.has_previous is True
        assert page.has_next is False

    def test_previous_is_noop_on_first_page(self, many_courses):
        """Test that Previous is a no-op on the first page."""
        view = _view(many_courses)
        view.previous_page()
        page = view.page()
        assert page.current_page == 1
        assert page.has_previous is False
        assert page.has_next is True

    def test_next_then_previous(self, many_courses):
        """Test that Next and Previous move by one page."""
        view = _view(many_courses)
        view.next_page()
        assert [c.id for c in view.page().rows] == [6, 7, 8, 9, 10]
        view.previous_page()
        assert view.current_page == 1

    def test_empty_result_has_one_page_and_no_controls(self, sample_courses):
        """Test that no matches gives one empty page with both controls off."""
        view = _view(sample_courses)
        view.search("zzz")
        page = view.page()
        assert page.rows == []
        assert page.filtered_count == 0
        assert page.total_pages == 1
        assert page.current_page == 1
        assert page.has_previous is False
        assert page.has_next is False

    def test_empty_store_before_load(self):
        """Test that an unloaded store renders as one empty page."""
        store = CourseStore("http://example.invalid/api/courses.json")
        page = CatalogView(store).page()
        assert page.rows == []
        assert page.total_pages == 1

    def test_search_does_not_reset_page(self, many_courses):
        """Test that narrowing the search keeps the current page."""
        view = _view(many_courses)
        view.next_page()
        view.next_page()
        view.search("CS101")
        page = view.page()
        assert page.current_page == 3
        assert page.total_pages == 1
        assert page.rows == []
        assert page.has_previous is True
        assert page.has_next is False

    def test_sort_persists_across_search(self, many_courses):
        """Test that the sort order survives a new search term."""
        view = _view(many_courses)
        view.sort_by("courseName")
        view.sort_by("courseName")
        view.search("course 1")
        names = [c.course_name for c in view.page().rows]
        assert names == ["Course 12", "Course 11", "Course 10"]

    def test_sort_leaves_store_order(self, many_courses):
        """Test that sorting the view does not reorder the store."""
        view = _view(many_courses)
        view.sort_by("total_clock_hours")
        view.sort_by("total_clock_hours")
        assert [c.id for c in view.store.courses] == list(range(1, 13))
        assert view.page().rows[0].id == 12

    def test_sort_twice_reverses(self, many_courses):
        """Test that clicking the same header twice reverses the order."""
        view = _view(many_courses)
        view.sort_by("semesterCredits")
        asc = view.filtered()
        view.sort_by("semesterCredits")
        assert view.filtered() == list(reversed(asc))

    def test_scenario_search_then_sort(self, sample_courses):
        """Test searching "cs10" then sorting by name."""
        view = _view(sample_courses)
        view.search("cs10")
        assert len(view.page().rows) == 2

        config = view.sort_by("courseName")
        assert config.direction is SortDirection.ASCENDING
        assert [c.course_name for c in view.page().rows] == ["Data", "Intro"]
