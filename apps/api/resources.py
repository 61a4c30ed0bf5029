from __future__ import annotations

import requests
from django.conf import settings

from .client import ApiClient, segment


class StudentAPI:
    def __init__(self, client: ApiClient):
        self.client = client

    def get_all(self) -> list[dict]:
        return self.client.get("/students")

    def get_by_id(self, student_id) -> dict:
        return self.client.get(f"/students/{segment(student_id)}")

    def create(self, student: dict) -> dict:
        return self.client.post("/students", json=student)

    def update(self, student_id, student: dict) -> dict:
        return self.client.put(f"/students/{segment(student_id)}", json=student)

    def delete(self, student_id) -> None:
        return self.client.delete(f"/students/{segment(student_id)}")

    def search(self, query: str) -> list[dict]:
        return self.client.get("/students/search", params={"q": query})

    def get_by_email(self, email: str) -> dict:
        return self.client.get(f"/students/email/{segment(email)}")

    def get_by_status(self, status: str) -> list[dict]:
        return self.client.get(f"/students/status/{segment(status)}")

    def get_count(self) -> int:
        return self.client.get("/students/count")


class CourseAPI:
    def __init__(self, client: ApiClient):
        self.client = client

    def get_all(self) -> list[dict]:
        return self.client.get("/courses")

    def get_by_id(self, course_id) -> dict:
        return self.client.get(f"/courses/{segment(course_id)}")

    def create(self, course: dict) -> dict:
        return self.client.post("/courses", json=course)

    def update(self, course_id, course: dict) -> dict:
        return self.client.put(f"/courses/{segment(course_id)}", json=course)

    def delete(self, course_id) -> None:
        return self.client.delete(f"/courses/{segment(course_id)}")

    def search(self, query: str) -> list[dict]:
        return self.client.get("/courses/search", params={"q": query})

    def get_by_course_code(self, code: str) -> dict:
        return self.client.get(f"/courses/code/{segment(code)}")

    def get_by_department(self, department: str) -> list[dict]:
        return self.client.get(f"/courses/department/{segment(department)}")

    def get_available(self) -> list[dict]:
        return self.client.get("/courses/available")

    def get_count(self) -> int:
        return self.client.get("/courses/count")


class EnrollmentAPI:
    def __init__(self, client: ApiClient):
        self.client = client

    def get_all(self) -> list[dict]:
        return self.client.get("/enrollments")

    def get_by_id(self, enrollment_id) -> dict:
        return self.client.get(f"/enrollments/{segment(enrollment_id)}")

    def enroll(self, student_id, course_id) -> dict:
        # The backend takes both ids as query parameters, not as a JSON body.
        return self.client.post("/enrollments", params={"studentId": student_id, "courseId": course_id})

    def update(self, enrollment_id, enrollment: dict) -> dict:
        return self.client.put(f"/enrollments/{segment(enrollment_id)}", json=enrollment)

    def drop(self, enrollment_id) -> None:
        return self.client.delete(f"/enrollments/{segment(enrollment_id)}")

    def get_by_student(self, student_id) -> list[dict]:
        return self.client.get(f"/enrollments/student/{segment(student_id)}")

    def get_by_course(self, course_id) -> list[dict]:
        return self.client.get(f"/enrollments/course/{segment(course_id)}")

    def get_count(self) -> int:
        return self.client.get("/enrollments/count")


class EduManagerAPI:
    def __init__(self, client: ApiClient):
        self.client = client
        self.students = StudentAPI(client)
        self.courses = CourseAPI(client)
        self.enrollments = EnrollmentAPI(client)


_session: requests.Session | None = None


def _shared_session() -> requests.Session:
    # One pooled session for the process; requests are built per call.
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


def get_api() -> EduManagerAPI:
    client = ApiClient(
        settings.EDUMANAGER_API_URL,
        timeout=settings.EDUMANAGER_API_TIMEOUT,
        session=_shared_session(),
    )
    return EduManagerAPI(client)
