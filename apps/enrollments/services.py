from __future__ import annotations

from typing import NamedTuple

from apps.courses.services import is_full, seats_left


UNKNOWN = "Unknown"


class EnrollmentRow(NamedTuple):
    enrollment: dict
    student_name: str
    course_name: str
    status: str
    status_class: str
    grade_label: str


class CourseOption(NamedTuple):
    value: str
    label: str
    full: bool


def _same_id(left, right) -> bool:
    # Ids arrive as ints from JSON but as strings from form posts.
    if left is None or right is None:
        return False
    return str(left) == str(right)


def student_display_name(students: list[dict], student_id) -> str:
    for student in students:
        if _same_id(student.get("id"), student_id):
            return f"{student.get('firstName', '')} {student.get('lastName', '')}"
    return UNKNOWN


def course_display_name(courses: list[dict], course_id) -> str:
    for course in courses:
        if _same_id(course.get("id"), course_id):
            return f"{course.get('courseCode', '')} - {course.get('courseName', '')}"
    return UNKNOWN


def build_enrollment_rows(enrollments: list[dict], students: list[dict], courses: list[dict]) -> list[EnrollmentRow]:
    rows = []
    for enrollment in enrollments:
        status = enrollment.get("status") or ""
        rows.append(
            EnrollmentRow(
                enrollment=enrollment,
                student_name=student_display_name(students, enrollment.get("studentId")),
                course_name=course_display_name(courses, enrollment.get("courseId")),
                status=status,
                status_class=status.lower(),
                grade_label=enrollment.get("grade") or "-",
            )
        )
    return rows


def student_choices(students: list[dict]) -> list[tuple[str, str]]:
    return [
        (str(s.get("id")), f"{s.get('firstName', '')} {s.get('lastName', '')} ({s.get('email', '')})")
        for s in students
    ]


def course_options(courses: list[dict]) -> list[CourseOption]:
    options = []
    for course in courses:
        full = is_full(course)
        label = (
            f"{course.get('courseCode', '')} - {course.get('courseName', '')} "
            f"({seats_left(course)} seats available)"
        )
        if full:
            label = f"{label} - Full"
        options.append(CourseOption(value=str(course.get("id")), label=label, full=full))
    return options
