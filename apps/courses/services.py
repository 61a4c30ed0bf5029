from __future__ import annotations


def _as_int(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def seats_left(course: dict) -> int:
    return max(_as_int(course.get("capacity")) - _as_int(course.get("enrolled")), 0)


def is_full(course: dict) -> bool:
    return _as_int(course.get("enrolled")) >= _as_int(course.get("capacity"))


def enrollment_label(course: dict) -> str:
    return f"{_as_int(course.get('enrolled'))}/{_as_int(course.get('capacity'))}"


def build_course_rows(courses: list[dict]) -> list[dict]:
    rows = []
    for course in courses:
        full = is_full(course)
        rows.append(
            {
                "course": course,
                "enrollment_label": enrollment_label(course),
                "is_full": full,
                "seat_class": "full" if full else "available",
            }
        )
    return rows
