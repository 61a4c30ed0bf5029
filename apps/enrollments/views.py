# apps/enrollments/views.py
import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from apps.api import ApiError, get_api, record
from apps.api.cache import AVAILABLE_COURSES, COURSES, ENROLLMENTS, STUDENTS, invalidate, last_known, read_through
from apps.console.decorators import console_tab
from apps.console.utils import confirm_delete, form_visible, load_filtered, load_list, render_list, server_message
from .forms import EnrollForm, EnrollmentUpdateForm
from .services import build_enrollment_rows, course_display_name, student_display_name


logger = logging.getLogger(__name__)

LIST_URL = "/enrollments/"
LOAD_FAILED = "Failed to load enrollments"

# Every enrollment change moves seat counts, so course lists go stale with it.
ENROLLMENT_CHANGE = (ENROLLMENTS, COURSES, AVAILABLE_COURSES)


def _lookup_list(resource: str, loader) -> list[dict]:
    """Lists used only for names and selectors: failures are logged, never shown."""
    try:
        return read_through(resource, loader)
    except ApiError:
        logger.exception("Failed to load %s", resource)
        return last_known(resource)


def _load_enrollments(request, api) -> list[dict]:
    student_id = request.GET.get("student") or ""
    course_id = request.GET.get("course") or ""
    if student_id.isdigit():
        return load_filtered(
            request, ENROLLMENTS, lambda: api.enrollments.get_by_student(int(student_id)), error_message=LOAD_FAILED
        )
    if course_id.isdigit():
        return load_filtered(
            request, ENROLLMENTS, lambda: api.enrollments.get_by_course(int(course_id)), error_message=LOAD_FAILED
        )
    return load_list(request, ENROLLMENTS, api.enrollments.get_all, error_message=LOAD_FAILED)


def _list_context(request, *, form=None, show_form=False):
    api = get_api()
    enrollments = _load_enrollments(request, api)
    students = _lookup_list(STUDENTS, api.students.get_all)
    courses = _lookup_list(COURSES, api.courses.get_all)
    available = _lookup_list(AVAILABLE_COURSES, api.courses.get_available)

    return {
        "rows": build_enrollment_rows(enrollments, students, courses),
        "students": students,
        "courses": courses,
        "student_filter": request.GET.get("student") or "",
        "course_filter": request.GET.get("course") or "",
        "show_form": show_form,
        "form": form or EnrollForm(students=students, courses=available),
    }


@console_tab("enrollments")
def enrollment_list(request):
    context = _list_context(request, show_form=form_visible(request, "enroll"))
    return render_list(request, "enrollments/enrollment_list.html", "enrollments/_results.html", context)


@require_POST
@console_tab("enrollments")
def enrollment_create(request):
    api = get_api()
    students = _lookup_list(STUDENTS, api.students.get_all)
    available = _lookup_list(AVAILABLE_COURSES, api.courses.get_available)
    form = EnrollForm(request.POST, students=students, courses=available)

    if not form.is_valid():
        context = _list_context(request, form=form, show_form=True)
        return render_list(request, "enrollments/enrollment_list.html", "enrollments/_results.html", context)

    student_id = form.cleaned_data["student"]
    course_id = form.cleaned_data["course"]
    try:
        api.enrollments.enroll(student_id, course_id)
    except ApiError as exc:
        logger.exception("Failed to enroll student %s in course %s", student_id, course_id)
        messages.error(request, server_message(exc, "Failed to enroll student"))
        context = _list_context(request, form=form, show_form=True)
        return render_list(request, "enrollments/enrollment_list.html", "enrollments/_results.html", context)

    invalidate(*ENROLLMENT_CHANGE)
    messages.success(request, "Student enrolled.")
    return redirect(LIST_URL)


@console_tab("enrollments")
def enrollment_edit(request, enrollment_id: int):
    api = get_api()
    try:
        enrollment = record(api.enrollments.get_by_id(enrollment_id), "enrollment")
    except ApiError:
        logger.exception("Failed to load enrollment %s", enrollment_id)
        messages.error(request, "Failed to load enrollment")
        return redirect(LIST_URL)

    if request.method == "POST":
        form = EnrollmentUpdateForm(request.POST)
        if form.is_valid():
            try:
                api.enrollments.update(enrollment_id, form.apply_to(enrollment))
            except ApiError as exc:
                logger.exception("Failed to update enrollment %s", enrollment_id)
                messages.error(request, server_message(exc, "Failed to update enrollment"))
            else:
                invalidate(*ENROLLMENT_CHANGE)
                messages.success(request, "Enrollment updated.")
                return redirect(LIST_URL)
    else:
        form = EnrollmentUpdateForm(
            initial={"status": enrollment.get("status") or "ENROLLED", "grade": enrollment.get("grade") or ""}
        )

    students = _lookup_list(STUDENTS, api.students.get_all)
    courses = _lookup_list(COURSES, api.courses.get_all)
    return render(
        request,
        "enrollments/enrollment_edit.html",
        {
            "enrollment": enrollment,
            "student_name": student_display_name(students, enrollment.get("studentId")),
            "course_name": course_display_name(courses, enrollment.get("courseId")),
            "form": form,
        },
    )


@console_tab("enrollments")
def enrollment_drop(request, enrollment_id: int):
    return confirm_delete(
        request,
        prompt="Are you sure you want to drop this enrollment?",
        list_url=LIST_URL,
        perform=lambda: get_api().enrollments.drop(enrollment_id),
        invalidates=ENROLLMENT_CHANGE,
        success_message="Enrollment dropped.",
        error_message="Failed to drop enrollment",
    )
