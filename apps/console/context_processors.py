from typing import NamedTuple


class Tab(NamedTuple):
    name: str
    label: str
    url: str


TABS = [
    Tab("students", "Students", "/students/"),
    Tab("courses", "Courses", "/courses/"),
    Tab("enrollments", "Enrollments", "/enrollments/"),
]


def navigation(request):
    active = getattr(request, "console_tab", "")
    return {
        "console_tabs": [{"tab": tab, "active": tab.name == active} for tab in TABS],
        "active_tab": active,
    }
