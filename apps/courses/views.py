# apps/courses/views.py
import logging

from django.contrib import messages
from django.shortcuts import redirect
from django.views.decorators.http import require_POST

from apps.api import ApiError, get_api
from apps.api.cache import AVAILABLE_COURSES, COURSES, ENROLLMENTS, invalidate
from apps.console.decorators import console_tab
from apps.console.utils import (
    confirm_delete,
    form_visible,
    load_filtered,
    load_list,
    render_list,
    search_filters,
    search_or_list,
    server_message,
)
from .forms import CourseCreateForm
from .services import build_course_rows, is_full


logger = logging.getLogger(__name__)

LIST_URL = "/courses/"
LOAD_FAILED = "Failed to load courses"


def _load_courses(request, api, *, term: str, department: str, available_only: bool) -> list[dict]:
    if term.strip():
        courses = search_or_list(
            request,
            COURSES,
            term=term,
            loader=api.courses.get_all,
            search=api.courses.search,
            error_message=LOAD_FAILED,
        )
        # Search results still honour the filters the page was showing.
        if department:
            courses = [c for c in courses if str(c.get("department") or "").lower() == department.lower()]
        if available_only:
            courses = [c for c in courses if not is_full(c)]
        return courses
    if department:
        return load_filtered(
            request,
            COURSES,
            lambda: api.courses.get_by_department(department),
            error_message=LOAD_FAILED,
        )
    if available_only:
        return load_list(request, AVAILABLE_COURSES, api.courses.get_available, error_message=LOAD_FAILED)
    return load_list(request, COURSES, api.courses.get_all, error_message=LOAD_FAILED)


def _list_context(request, *, form=None, show_form=False):
    api = get_api()
    term = request.GET.get("q", "")
    department = (request.GET.get("department") or "").strip()
    available_only = request.GET.get("available") == "1"

    courses = _load_courses(request, api, term=term, department=department, available_only=available_only)
    return {
        "rows": build_course_rows(courses),
        "search_term": term,
        "department": department,
        "available_only": available_only,
        "search_filters": search_filters(department=department, available="1" if available_only else ""),
        "show_form": show_form,
        "form": form or CourseCreateForm(),
    }


@console_tab("courses")
def course_list(request):
    context = _list_context(request, show_form=form_visible(request, "add"))
    return render_list(request, "courses/course_list.html", "courses/_results.html", context)


@require_POST
@console_tab("courses")
def course_create(request):
    form = CourseCreateForm(request.POST)
    if not form.is_valid():
        context = _list_context(request, form=form, show_form=True)
        return render_list(request, "courses/course_list.html", "courses/_results.html", context)

    try:
        get_api().courses.create(form.to_payload())
    except ApiError as exc:
        logger.exception("Failed to add course")
        messages.error(request, server_message(exc, "Failed to add course"))
        context = _list_context(request, form=form, show_form=True)
        return render_list(request, "courses/course_list.html", "courses/_results.html", context)

    invalidate(COURSES, AVAILABLE_COURSES, ENROLLMENTS)
    messages.success(request, "Course added.")
    return redirect(LIST_URL)


@console_tab("courses")
def course_delete(request, course_id: int):
    return confirm_delete(
        request,
        prompt="Are you sure you want to delete this course?",
        list_url=LIST_URL,
        perform=lambda: get_api().courses.delete(course_id),
        invalidates=(COURSES, AVAILABLE_COURSES, ENROLLMENTS),
        success_message="Course deleted.",
        error_message="Failed to delete course",
    )
