# config/urls.py
from django.urls import path, include
from django.shortcuts import redirect


def root_redirect(_request):
    return redirect("/students/")


urlpatterns = [
    path("", root_redirect),
    path("", include("apps.students.urls")),
    path("", include("apps.courses.urls")),
    path("", include("apps.enrollments.urls")),
]
