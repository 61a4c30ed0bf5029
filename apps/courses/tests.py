from unittest import mock

from django.core.cache import cache
from django.test import SimpleTestCase

from apps.api import ApiError
from .services import build_course_rows, enrollment_label, is_full, seats_left


CS101 = {
    "id": 1,
    "courseCode": "CS101",
    "courseName": "Intro to Programming",
    "department": "Computer Science",
    "instructorName": "Dr. Smith",
    "credits": 3,
    "capacity": 30,
    "enrolled": 30,
}
MA201 = {
    "id": 2,
    "courseCode": "MA201",
    "courseName": "Linear Algebra",
    "department": "Mathematics",
    "instructorName": "Dr. Noether",
    "credits": 4,
    "capacity": 25,
    "enrolled": 10,
}

VALID_POST = {
    "course_code": "CS201",
    "course_name": "Data Structures",
    "department": "Computer Science",
    "instructor_name": "Dr. Knuth",
    "credits": "3",
    "capacity": "30",
    "description": "Lists, trees and graphs",
}


class CourseServiceTests(SimpleTestCase):
    def test_seat_math(self):
        self.assertTrue(is_full(CS101))
        self.assertEqual(seats_left(CS101), 0)
        self.assertFalse(is_full(MA201))
        self.assertEqual(seats_left(MA201), 15)
        self.assertEqual(enrollment_label(CS101), "30/30")

    def test_over_capacity_shows_no_negative_seats(self):
        course = {**MA201, "enrolled": 27}
        self.assertTrue(is_full(course))
        self.assertEqual(seats_left(course), 0)

    def test_rows_mark_full_courses(self):
        rows = build_course_rows([CS101, MA201])
        self.assertEqual([row["seat_class"] for row in rows], ["full", "available"])


class CourseViewTests(SimpleTestCase):
    def setUp(self):
        cache.clear()
        patcher = mock.patch("apps.courses.views.get_api")
        self.api = patcher.start().return_value
        self.addCleanup(patcher.stop)
        self.api.courses.get_all.return_value = [CS101, MA201]

    def test_full_course_is_listed_as_full(self):
        response = self.client.get("/courses/")

        self.assertContains(response, '<span class="full">30/30</span>', html=True)
        self.assertContains(response, '<span class="available">10/25</span>', html=True)

    def test_search_and_blank_search(self):
        self.api.courses.search.return_value = [MA201]

        response = self.client.get("/courses/", {"q": "MA"})
        self.api.courses.search.assert_called_once_with("MA")
        self.assertNotContains(response, "CS101")

        self.client.get("/courses/", {"q": ""})
        self.api.courses.get_all.assert_called_once_with()

    def test_search_failure(self):
        self.api.courses.search.side_effect = ApiError("down")

        response = self.client.get("/courses/", {"q": "MA"})

        self.assertContains(response, "Search failed")

    def test_department_and_available_filters(self):
        self.api.courses.get_by_department.return_value = [MA201]
        self.api.courses.get_available.return_value = [MA201]

        self.client.get("/courses/", {"department": "Mathematics"})
        self.api.courses.get_by_department.assert_called_once_with("Mathematics")

        self.client.get("/courses/", {"available": "1"})
        self.api.courses.get_available.assert_called_once_with()

    def test_search_stays_inside_department_and_seat_filters(self):
        self.api.courses.search.return_value = [CS101, MA201]

        response = self.client.get("/courses/", {"q": "r", "department": "computer science"})
        self.assertContains(response, "CS101")
        self.assertNotContains(response, "MA201")

        response = self.client.get("/courses/", {"q": "r", "available": "1"})
        self.assertContains(response, "MA201")
        self.assertNotContains(response, "CS101")
        self.api.courses.get_by_department.assert_not_called()
        self.api.courses.get_available.assert_not_called()

    def test_failed_department_filter_shows_no_other_courses(self):
        self.client.get("/courses/")
        self.api.courses.get_by_department.side_effect = ApiError("down")

        response = self.client.get("/courses/", {"department": "Mathematics"})

        self.assertContains(response, "Failed to load courses")
        self.assertNotContains(response, "CS101")

    def test_malformed_list_bodies_show_banner(self):
        for body in ({"message": "maintenance"}, ["CS101"]):
            with self.subTest(body=body):
                cache.clear()
                self.api.courses.get_all.return_value = body

                response = self.client.get("/courses/")

                self.assertEqual(response.status_code, 200)
                self.assertContains(response, "Failed to load courses")

    def test_create_submits_integers_and_zero_enrolled(self):
        response = self.client.post("/courses/add/", VALID_POST)

        self.assertRedirects(response, "/courses/", fetch_redirect_response=False)
        payload = self.api.courses.create.call_args.args[0]
        self.assertEqual(payload["credits"], 3)
        self.assertEqual(payload["capacity"], 30)
        self.assertEqual(payload["enrolled"], 0)
        self.assertEqual(payload["courseCode"], "CS201")
        self.assertEqual(payload["instructorName"], "Dr. Knuth")

    def test_create_refetches_list(self):
        self.client.get("/courses/")
        self.client.post("/courses/add/", VALID_POST, follow=True)

        self.assertEqual(self.api.courses.get_all.call_count, 2)

    def test_non_numeric_credits_are_rejected(self):
        response = self.client.post("/courses/add/", {**VALID_POST, "credits": "three"})

        self.assertEqual(response.status_code, 200)
        self.api.courses.create.assert_not_called()
        self.assertContains(response, "Enter a whole number.")

    def test_failed_create(self):
        self.client.get("/courses/")
        self.api.courses.create.side_effect = ApiError("bad", status_code=400)

        response = self.client.post("/courses/add/", VALID_POST)

        self.assertContains(response, "Failed to add course")
        self.assertContains(response, "Intro to Programming")
        self.assertEqual(self.api.courses.get_all.call_count, 1)

    def test_delete_flow(self):
        self.assertContains(self.client.get("/courses/2/delete/"), "Are you sure you want to delete this course?")
        self.client.post("/courses/2/delete/", {})
        self.api.courses.delete.assert_not_called()

        self.client.post("/courses/2/delete/", {"confirm": "yes"})
        self.api.courses.delete.assert_called_once_with(2)

    def test_failed_delete(self):
        self.api.courses.delete.side_effect = ApiError("down")

        response = self.client.post("/courses/2/delete/", {"confirm": "yes"}, follow=True)

        self.assertContains(response, "Failed to delete course")
