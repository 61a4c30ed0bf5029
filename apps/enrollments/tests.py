from unittest import mock

from django.core.cache import cache
from django.test import SimpleTestCase

from apps.api import ApiError
from .forms import EnrollForm, EnrollmentUpdateForm
from .services import UNKNOWN, build_enrollment_rows, course_display_name, course_options, student_display_name


STUDENTS = [
    {"id": 1, "firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com"},
    {"id": 2, "firstName": "Alan", "lastName": "Turing", "email": "alan@example.com"},
]
FULL_COURSE = {"id": 1, "courseCode": "CS101", "courseName": "Intro to Programming", "capacity": 30, "enrolled": 30}
OPEN_COURSE = {"id": 2, "courseCode": "MA201", "courseName": "Linear Algebra", "capacity": 25, "enrolled": 10}
COURSES = [FULL_COURSE, OPEN_COURSE]
ENROLLMENTS = [
    {"id": 10, "studentId": 1, "courseId": 2, "enrollmentDate": "2024-09-01", "status": "ENROLLED", "grade": None},
    {"id": 11, "studentId": 99, "courseId": 98, "enrollmentDate": "2024-09-02", "status": "DROPPED", "grade": "B+"},
]


class DisplayNameTests(SimpleTestCase):
    def test_known_ids_resolve(self):
        self.assertEqual(student_display_name(STUDENTS, 1), "Ada Lovelace")
        self.assertEqual(course_display_name(COURSES, 2), "MA201 - Linear Algebra")

    def test_ids_from_forms_resolve_too(self):
        self.assertEqual(student_display_name(STUDENTS, "2"), "Alan Turing")

    def test_unknown_ids_resolve_to_unknown(self):
        self.assertEqual(student_display_name(STUDENTS, 99), UNKNOWN)
        self.assertEqual(course_display_name([], 1), UNKNOWN)
        self.assertEqual(student_display_name(STUDENTS, None), UNKNOWN)

    def test_rows(self):
        rows = build_enrollment_rows(ENROLLMENTS, STUDENTS, COURSES)
        self.assertEqual(rows[0].student_name, "Ada Lovelace")
        self.assertEqual(rows[0].course_name, "MA201 - Linear Algebra")
        self.assertEqual(rows[0].grade_label, "-")
        self.assertEqual(rows[1].student_name, UNKNOWN)
        self.assertEqual(rows[1].course_name, UNKNOWN)
        self.assertEqual(rows[1].status_class, "dropped")
        self.assertEqual(rows[1].grade_label, "B+")

    def test_course_options_mark_full_courses(self):
        options = course_options(COURSES)
        self.assertTrue(options[0].full)
        self.assertIn("(0 seats available)", options[0].label)
        self.assertFalse(options[1].full)
        self.assertIn("(15 seats available)", options[1].label)


class EnrollFormTests(SimpleTestCase):
    def test_full_course_option_is_disabled(self):
        form = EnrollForm(students=STUDENTS, courses=[FULL_COURSE, OPEN_COURSE])
        html = str(form["course"])
        self.assertInHTML(
            '<option value="1" disabled>CS101 - Intro to Programming (0 seats available) - Full</option>', html
        )
        self.assertInHTML('<option value="2">MA201 - Linear Algebra (15 seats available)</option>', html)

    def test_student_labels(self):
        form = EnrollForm(students=STUDENTS, courses=[])
        self.assertInHTML('<option value="1">Ada Lovelace (ada@example.com)</option>', str(form["student"]))

    def test_ids_are_coerced(self):
        form = EnrollForm({"student": "2", "course": "2"}, students=STUDENTS, courses=COURSES)
        self.assertTrue(form.is_valid())
        self.assertEqual(form.cleaned_data, {"student": 2, "course": 2})

    def test_both_selections_required(self):
        form = EnrollForm({"student": "", "course": "2"}, students=STUDENTS, courses=COURSES)
        self.assertFalse(form.is_valid())
        self.assertIn("student", form.errors)

    def test_update_form_keeps_record_fields(self):
        form = EnrollmentUpdateForm({"status": "COMPLETED", "grade": " A "})
        self.assertTrue(form.is_valid())
        updated = form.apply_to(ENROLLMENTS[0])
        self.assertEqual(updated["status"], "COMPLETED")
        self.assertEqual(updated["grade"], "A")
        self.assertEqual(updated["enrollmentDate"], "2024-09-01")


class EnrollmentViewTests(SimpleTestCase):
    def setUp(self):
        cache.clear()
        patcher = mock.patch("apps.enrollments.views.get_api")
        self.api = patcher.start().return_value
        self.addCleanup(patcher.stop)
        self.api.enrollments.get_all.return_value = ENROLLMENTS
        self.api.students.get_all.return_value = STUDENTS
        self.api.courses.get_all.return_value = COURSES
        self.api.courses.get_available.return_value = [FULL_COURSE, OPEN_COURSE]

    def test_list_resolves_names(self):
        response = self.client.get("/enrollments/")

        self.assertContains(response, "<td>Ada Lovelace</td>", html=True)
        self.assertContains(response, "<td>MA201 - Linear Algebra</td>", html=True)
        self.assertContains(response, "<td>Unknown</td>", count=2, html=True)

    def test_names_resolve_for_full_courses(self):
        enrollments = [{**ENROLLMENTS[0], "courseId": 1}]
        self.api.enrollments.get_all.return_value = enrollments

        response = self.client.get("/enrollments/")

        self.assertContains(response, "<td>CS101 - Intro to Programming</td>", html=True)

    def test_lookup_failures_are_not_shown(self):
        self.api.students.get_all.side_effect = ApiError("down")

        response = self.client.get("/enrollments/")

        self.assertEqual(response.status_code, 200)
        self.assertNotContains(response, 'class="error"')
        self.assertContains(response, "<td>Unknown</td>", count=3, html=True)

    def test_enrollment_load_failure(self):
        self.api.enrollments.get_all.side_effect = ApiError("down")

        response = self.client.get("/enrollments/")

        self.assertContains(response, "Failed to load enrollments")
        self.assertContains(response, "No enrollments found")

    def test_malformed_list_bodies_show_banner(self):
        for body in ({"message": "maintenance"}, [10, 11]):
            with self.subTest(body=body):
                cache.clear()
                self.api.enrollments.get_all.return_value = body

                response = self.client.get("/enrollments/")

                self.assertEqual(response.status_code, 200)
                self.assertContains(response, "Failed to load enrollments")
                self.assertContains(response, "No enrollments found")

    def test_malformed_lookup_body_falls_back_to_unknown(self):
        self.api.students.get_all.return_value = {"message": "maintenance"}

        response = self.client.get("/enrollments/")

        self.assertEqual(response.status_code, 200)
        self.assertNotContains(response, 'class="error"')
        self.assertContains(response, "<td>Unknown</td>", count=3, html=True)

    def test_failed_student_filter_shows_no_other_enrollments(self):
        self.client.get("/enrollments/")
        self.api.enrollments.get_by_student.side_effect = ApiError("down")

        response = self.client.get("/enrollments/", {"student": "1"})

        self.assertContains(response, "Failed to load enrollments")
        self.assertContains(response, "No enrollments found")

    def test_filters(self):
        self.api.enrollments.get_by_student.return_value = [ENROLLMENTS[0]]
        self.api.enrollments.get_by_course.return_value = []

        self.client.get("/enrollments/", {"student": "1"})
        self.api.enrollments.get_by_student.assert_called_once_with(1)

        self.client.get("/enrollments/", {"course": "2"})
        self.api.enrollments.get_by_course.assert_called_once_with(2)

    def test_selector_marks_full_course(self):
        response = self.client.get("/enrollments/", {"enroll": "1"})

        self.assertContains(
            response,
            '<option value="1" disabled>CS101 - Intro to Programming (0 seats available) - Full</option>',
            html=True,
        )

    def test_enroll_refreshes_lists(self):
        self.client.get("/enrollments/")
        response = self.client.post("/enrollments/enroll/", {"student": "1", "course": "2"}, follow=True)

        self.api.enrollments.enroll.assert_called_once_with(1, 2)
        self.assertRedirects(response, "/enrollments/")
        self.assertContains(response, "Student enrolled.")
        self.assertEqual(self.api.enrollments.get_all.call_count, 2)
        self.assertEqual(self.api.courses.get_all.call_count, 2)
        self.assertEqual(self.api.courses.get_available.call_count, 2)

    def test_enroll_failure_shows_server_message(self):
        self.client.get("/enrollments/")
        self.api.enrollments.enroll.side_effect = ApiError("bad", status_code=400, detail="Course is full")

        response = self.client.post("/enrollments/enroll/", {"student": "1", "course": "1"})

        self.assertContains(response, "Course is full")
        self.assertContains(response, "<td>Ada Lovelace</td>", html=True)
        self.assertEqual(self.api.enrollments.get_all.call_count, 1)

    def test_enroll_failure_without_detail(self):
        self.api.enrollments.enroll.side_effect = ApiError("down")

        response = self.client.post("/enrollments/enroll/", {"student": "1", "course": "2"})

        self.assertContains(response, "Failed to enroll student")

    def test_drop_needs_confirmation(self):
        self.assertContains(
            self.client.get("/enrollments/10/drop/"), "Are you sure you want to drop this enrollment?"
        )
        self.client.post("/enrollments/10/drop/", {"confirm": "no"})
        self.api.enrollments.drop.assert_not_called()

        self.client.post("/enrollments/10/drop/", {"confirm": "yes"})
        self.api.enrollments.drop.assert_called_once_with(10)

    def test_failed_drop(self):
        self.api.enrollments.drop.side_effect = ApiError("down")

        response = self.client.post("/enrollments/10/drop/", {"confirm": "yes"}, follow=True)

        self.assertContains(response, "Failed to drop enrollment")
        self.assertContains(response, "<td>Ada Lovelace</td>", html=True)

    def test_edit_puts_full_record(self):
        self.api.enrollments.get_by_id.return_value = ENROLLMENTS[0]

        response = self.client.post("/enrollments/10/edit/", {"status": "COMPLETED", "grade": "A"})

        self.assertRedirects(response, "/enrollments/", fetch_redirect_response=False)
        self.api.enrollments.update.assert_called_once_with(
            10,
            {
                "id": 10,
                "studentId": 1,
                "courseId": 2,
                "enrollmentDate": "2024-09-01",
                "status": "COMPLETED",
                "grade": "A",
            },
        )

    def test_edit_page_prefills_current_values(self):
        self.api.enrollments.get_by_id.return_value = {**ENROLLMENTS[1], "studentId": 1}

        response = self.client.get("/enrollments/11/edit/")

        self.assertContains(response, "Ada Lovelace")
        self.assertContains(response, 'value="B+"')
        self.assertContains(response, '<option value="DROPPED" selected>Dropped</option>', html=True)

    def test_edit_of_missing_enrollment(self):
        self.api.enrollments.get_by_id.side_effect = ApiError("missing", status_code=404)

        response = self.client.get("/enrollments/404/edit/", follow=True)

        self.assertRedirects(response, "/enrollments/")
        self.assertContains(response, "Failed to load enrollment")

    def test_edit_of_malformed_enrollment(self):
        self.api.enrollments.get_by_id.return_value = [ENROLLMENTS[0]]

        response = self.client.get("/enrollments/10/edit/", follow=True)

        self.assertRedirects(response, "/enrollments/")
        self.assertContains(response, "Failed to load enrollment")
        self.api.enrollments.update.assert_not_called()

    def test_failed_update(self):
        self.api.enrollments.get_by_id.return_value = ENROLLMENTS[0]
        self.api.enrollments.update.side_effect = ApiError("down")

        response = self.client.post("/enrollments/10/edit/", {"status": "COMPLETED", "grade": ""})

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Failed to update enrollment")
