"""
Course record schema.

The JSON resource uses camelCase keys (courseNumber, semesterCredits, ...);
Python code reads the snake_case attributes. Either spelling is accepted when
validating, and model_dump(by_alias=True) gives back the wire format.
"""

from pydantic import BaseModel, ConfigDict, Field


class Course(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int | str
    trimester: str
    course_number: str = Field(alias="courseNumber")
    course_name: str = Field(alias="courseName")
    semester_credits: int | float = Field(alias="semesterCredits")
    total_clock_hours: int | float = Field(alias="totalClockHours")


# Column order as shown in the catalog table header.
COLUMNS: dict[str, str] = {
    "trimester":         "Trimester",
    "course_number":     "Course Number",
    "course_name":       "Courses Name",
    "semester_credits":  "Semester Credits",
    "total_clock_hours": "Total Clock Hours",
}


def field_name(key: str) -> str:
    """Resolve a camelCase alias or snake_case name to the model attribute."""
    if key in Course.model_fields:
        return key
    for name, info in Course.model_fields.items():
        if info.alias == key:
            return name
    raise ValueError(f"Unknown course field: {key!r}")


def column_key(key: str) -> str:
    """Resolve a sort key; only the displayed columns are sortable."""
    name = field_name(key)
    if name not in COLUMNS:
        raise ValueError(f"Not a sortable column: {key!r}")
    return name
