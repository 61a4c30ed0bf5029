# apps/enrollments/urls.py
from django.urls import path
from .views import enrollment_create, enrollment_drop, enrollment_edit, enrollment_list

urlpatterns = [
    path("enrollments/", enrollment_list, name="enrollment_list"),
    path("enrollments/enroll/", enrollment_create, name="enrollment_create"),
    path("enrollments/<int:enrollment_id>/edit/", enrollment_edit, name="enrollment_edit"),
    path("enrollments/<int:enrollment_id>/drop/", enrollment_drop, name="enrollment_drop"),
]
