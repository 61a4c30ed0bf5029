# apps/students/views.py
import logging

from django.contrib import messages
from django.shortcuts import redirect
from django.views.decorators.http import require_POST

from apps.api import ApiError, get_api
from apps.api.cache import ENROLLMENTS, STUDENTS, invalidate
from apps.console.decorators import console_tab
from apps.console.utils import (
    confirm_delete,
    form_visible,
    load_filtered,
    render_list,
    search_filters,
    search_or_list,
    server_message,
)
from .forms import STATUS_CHOICES, StudentCreateForm


logger = logging.getLogger(__name__)

LIST_URL = "/students/"


def _student_rows(students: list[dict]) -> list[dict]:
    rows = []
    for student in students:
        status = student.get("status") or ""
        rows.append(
            {
                "student": student,
                "full_name": f"{student.get('firstName', '')} {student.get('lastName', '')}".strip(),
                "status": status,
                "status_class": status.lower(),
            }
        )
    return rows


def _list_context(request, *, form=None, show_form=False):
    api = get_api()
    term = request.GET.get("q", "")
    status = request.GET.get("status") or ""

    if status and not term.strip():
        students = load_filtered(
            request,
            STUDENTS,
            lambda: api.students.get_by_status(status),
            error_message="Failed to load students",
        )
    else:
        students = search_or_list(
            request,
            STUDENTS,
            term=term,
            loader=api.students.get_all,
            search=api.students.search,
            error_message="Failed to load students",
        )
        if status:
            students = [s for s in students if (s.get("status") or "") == status]

    return {
        "rows": _student_rows(students),
        "search_term": term,
        "status": status,
        "status_options": STATUS_CHOICES,
        "search_filters": search_filters(status=status),
        "show_form": show_form,
        "form": form or StudentCreateForm(),
    }


@console_tab("students")
def student_list(request):
    context = _list_context(request, show_form=form_visible(request, "add"))
    return render_list(request, "students/student_list.html", "students/_results.html", context)


@require_POST
@console_tab("students")
def student_create(request):
    form = StudentCreateForm(request.POST)
    if not form.is_valid():
        context = _list_context(request, form=form, show_form=True)
        return render_list(request, "students/student_list.html", "students/_results.html", context)

    try:
        get_api().students.create(form.to_payload())
    except ApiError as exc:
        logger.exception("Failed to add student")
        messages.error(request, server_message(exc, "Failed to add student"))
        context = _list_context(request, form=form, show_form=True)
        return render_list(request, "students/student_list.html", "students/_results.html", context)

    invalidate(STUDENTS, ENROLLMENTS)
    messages.success(request, "Student added.")
    return redirect(LIST_URL)


@console_tab("students")
def student_delete(request, student_id: int):
    return confirm_delete(
        request,
        prompt="Are you sure you want to delete this student?",
        list_url=LIST_URL,
        perform=lambda: get_api().students.delete(student_id),
        invalidates=(STUDENTS, ENROLLMENTS),
        success_message="Student deleted.",
        error_message="Failed to delete student",
    )
