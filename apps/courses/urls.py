# apps/courses/urls.py
from django.urls import path
from .views import course_create, course_delete, course_list

urlpatterns = [
    path("courses/", course_list, name="course_list"),
    path("courses/add/", course_create, name="course_create"),
    path("courses/<int:course_id>/delete/", course_delete, name="course_delete"),
]
