import json
from unittest import mock

import requests
from django.core.cache import cache
from django.test import SimpleTestCase, override_settings

from apps.api import ApiClient, ApiError, EduManagerAPI, get_api, record, records
from apps.api.cache import COURSES, STUDENTS, invalidate, last_known, read_through


BASE_URL = "http://backend.test/api"


def make_response(status: int = 200, body=None, text: str | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
    elif text is not None:
        response._content = text.encode("utf-8")
    else:
        response._content = b""
    response.encoding = "utf-8"
    return response


class ApiTestCase(SimpleTestCase):
    def setUp(self):
        self.session = mock.MagicMock()
        self.session.request.return_value = make_response(body=[])
        self.api = EduManagerAPI(ApiClient(BASE_URL, session=self.session))

    def assertRequested(self, method, path, **kwargs):
        self.session.request.assert_called_once_with(
            method,
            f"{BASE_URL}{path}",
            params=kwargs.get("params"),
            json=kwargs.get("json"),
            timeout=None,
        )


class StudentAPITests(ApiTestCase):
    def test_get_all(self):
        self.session.request.return_value = make_response(body=[{"id": 1, "firstName": "Ada"}])
        self.assertEqual(self.api.students.get_all(), [{"id": 1, "firstName": "Ada"}])
        self.assertRequested("GET", "/students")

    def test_search_sends_term_verbatim_as_query_parameter(self):
        self.api.students.search("ada l")
        self.assertRequested("GET", "/students/search", params={"q": "ada l"})

    def test_create_posts_payload(self):
        self.session.request.return_value = make_response(201, body={"id": 7})
        created = self.api.students.create({"firstName": "Ada"})
        self.assertEqual(created, {"id": 7})
        self.assertRequested("POST", "/students", json={"firstName": "Ada"})

    def test_update_puts_payload(self):
        self.api.students.update(3, {"status": "INACTIVE"})
        self.assertRequested("PUT", "/students/3", json={"status": "INACTIVE"})

    def test_delete_returns_none_on_no_content(self):
        self.session.request.return_value = make_response(204)
        self.assertIsNone(self.api.students.delete(3))
        self.assertRequested("DELETE", "/students/3")

    def test_email_is_escaped_in_path(self):
        self.api.students.get_by_email("ada+1@example.com")
        self.assertRequested("GET", "/students/email/ada%2B1%40example.com")

    def test_by_status_and_count(self):
        self.api.students.get_by_status("ACTIVE")
        self.assertRequested("GET", "/students/status/ACTIVE")

        self.session.request.reset_mock()
        self.session.request.return_value = make_response(body=12)
        self.assertEqual(self.api.students.get_count(), 12)
        self.assertRequested("GET", "/students/count")


class CourseAPITests(ApiTestCase):
    def test_paths(self):
        cases = [
            (lambda: self.api.courses.get_all(), "GET", "/courses"),
            (lambda: self.api.courses.get_by_id(5), "GET", "/courses/5"),
            (lambda: self.api.courses.get_by_course_code("CS101"), "GET", "/courses/code/CS101"),
            (lambda: self.api.courses.get_by_department("Computer Science"), "GET", "/courses/department/Computer%20Science"),
            (lambda: self.api.courses.get_available(), "GET", "/courses/available"),
            (lambda: self.api.courses.get_count(), "GET", "/courses/count"),
            (lambda: self.api.courses.delete(5), "DELETE", "/courses/5"),
        ]
        for call, method, path in cases:
            with self.subTest(path=path):
                self.session.request.reset_mock()
                call()
                self.assertRequested(method, path)

    def test_search(self):
        self.api.courses.search("CS")
        self.assertRequested("GET", "/courses/search", params={"q": "CS"})


class EnrollmentAPITests(ApiTestCase):
    def test_enroll_uses_query_parameters(self):
        self.session.request.return_value = make_response(201, body={"id": 9, "status": "ENROLLED"})
        self.api.enrollments.enroll(1, 2)
        self.assertRequested("POST", "/enrollments", params={"studentId": 1, "courseId": 2})

    def test_filters_and_drop(self):
        cases = [
            (lambda: self.api.enrollments.get_by_student(1), "GET", "/enrollments/student/1"),
            (lambda: self.api.enrollments.get_by_course(2), "GET", "/enrollments/course/2"),
            (lambda: self.api.enrollments.get_by_id(3), "GET", "/enrollments/3"),
            (lambda: self.api.enrollments.get_count(), "GET", "/enrollments/count"),
            (lambda: self.api.enrollments.drop(3), "DELETE", "/enrollments/3"),
        ]
        for call, method, path in cases:
            with self.subTest(path=path):
                self.session.request.reset_mock()
                call()
                self.assertRequested(method, path)


class ApiErrorTests(ApiTestCase):
    def test_plain_text_error_body_becomes_detail(self):
        self.session.request.return_value = make_response(400, text="Course is full")
        with self.assertRaises(ApiError) as ctx:
            self.api.enrollments.enroll(1, 2)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.detail, "Course is full")

    def test_json_error_message_becomes_detail(self):
        self.session.request.return_value = make_response(409, body={"status": 409, "message": "Email already exists"})
        with self.assertRaises(ApiError) as ctx:
            self.api.students.create({"email": "ada@example.com"})
        self.assertEqual(ctx.exception.detail, "Email already exists")

    def test_error_without_body_has_empty_detail(self):
        self.session.request.return_value = make_response(500)
        with self.assertRaises(ApiError) as ctx:
            self.api.students.get_all()
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.detail, "")

    def test_transport_failure(self):
        self.session.request.side_effect = requests.exceptions.ConnectionError("refused")
        with self.assertRaises(ApiError) as ctx:
            self.api.courses.get_all()
        self.assertIsNone(ctx.exception.status_code)

    def test_malformed_body(self):
        self.session.request.return_value = make_response(200, text="<html>oops</html>")
        with self.assertRaises(ApiError):
            self.api.courses.get_all()


class GetApiTests(SimpleTestCase):
    @override_settings(EDUMANAGER_API_URL="http://remote.test/api/", EDUMANAGER_API_TIMEOUT=2.5)
    def test_builds_client_from_settings(self):
        api = get_api()
        self.assertEqual(api.client.base_url, "http://remote.test/api")
        self.assertEqual(api.client.timeout, 2.5)
        self.assertIs(api.students.client, api.client)

    def test_calls_share_one_session(self):
        self.assertIs(get_api().client.session, get_api().client.session)


class ResponseShapeTests(SimpleTestCase):
    def test_records_accepts_list_of_objects_and_empty_body(self):
        self.assertEqual(records([{"id": 1}], STUDENTS), [{"id": 1}])
        self.assertEqual(records(None, STUDENTS), [])

    def test_records_rejects_other_shapes(self):
        for payload in ({"message": "maintenance"}, [1, 2], "students", 3):
            with self.subTest(payload=payload):
                with self.assertRaisesMessage(ApiError, "students returned a malformed body"):
                    records(payload, STUDENTS)

    def test_record_requires_object(self):
        self.assertEqual(record({"id": 1}, "enrollment"), {"id": 1})
        with self.assertRaises(ApiError):
            record([{"id": 1}], "enrollment")


class ResourceCacheTests(SimpleTestCase):
    def setUp(self):
        cache.clear()

    def test_read_through_loads_once(self):
        loader = mock.Mock(return_value=[{"id": 1}])
        self.assertEqual(read_through(STUDENTS, loader), [{"id": 1}])
        self.assertEqual(read_through(STUDENTS, loader), [{"id": 1}])
        loader.assert_called_once_with()

    def test_invalidate_forces_reload_but_keeps_last_known(self):
        read_through(COURSES, lambda: [{"id": 1}])
        invalidate(COURSES)

        failing = mock.Mock(side_effect=ApiError("down"))
        with self.assertRaises(ApiError):
            read_through(COURSES, failing)
        failing.assert_called_once_with()
        self.assertEqual(last_known(COURSES), [{"id": 1}])

    def test_malformed_list_is_not_cached(self):
        read_through(STUDENTS, lambda: [{"id": 1}])
        invalidate(STUDENTS)

        with self.assertRaises(ApiError):
            read_through(STUDENTS, lambda: {"id": 2})
        self.assertEqual(last_known(STUDENTS), [{"id": 1}])

    def test_last_known_is_empty_before_first_load(self):
        self.assertEqual(last_known(STUDENTS), [])

    def test_invalidate_only_touches_named_resources(self):
        read_through(STUDENTS, lambda: [{"id": 1}])
        read_through(COURSES, lambda: [{"id": 2}])
        invalidate(COURSES)

        loader = mock.Mock(return_value=[])
        read_through(STUDENTS, loader)
        loader.assert_not_called()
