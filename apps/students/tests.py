from unittest import mock

from django.core.cache import cache
from django.test import SimpleTestCase

from apps.api import ApiError


ADA = {"id": 1, "firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com", "phoneNumber": "555-0100", "status": "ACTIVE"}
ALAN = {"id": 2, "firstName": "Alan", "lastName": "Turing", "email": "alan@example.com", "phoneNumber": "555-0101", "status": "INACTIVE"}

VALID_POST = {
    "first_name": "Grace",
    "last_name": "Hopper",
    "email": "grace@example.com",
    "phone_number": "555-0102",
    "status": "ACTIVE",
    "date_of_birth": "1906-12-09",
    "address": "",
}


class StudentViewTests(SimpleTestCase):
    def setUp(self):
        cache.clear()
        patcher = mock.patch("apps.students.views.get_api")
        self.api = patcher.start().return_value
        self.addCleanup(patcher.stop)
        self.api.students.get_all.return_value = [ADA, ALAN]

    def test_list_renders_rows(self):
        response = self.client.get("/students/")

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Ada Lovelace")
        self.assertContains(response, '<span class="status inactive">INACTIVE</span>', html=True)
        self.api.students.get_all.assert_called_once_with()

    def test_initial_load_failure_shows_banner_and_empty_list(self):
        self.api.students.get_all.side_effect = ApiError("down")

        response = self.client.get("/students/")

        self.assertContains(response, "Failed to load students")
        self.assertContains(response, "No students found")

    def test_search_uses_exact_term(self):
        self.api.students.search.return_value = [ADA]

        response = self.client.get("/students/", {"q": "Ada "})

        self.api.students.search.assert_called_once_with("Ada ")
        self.assertContains(response, "Ada Lovelace")
        self.assertNotContains(response, "Alan Turing")

    def test_whitespace_search_reloads_full_list(self):
        self.client.get("/students/", {"q": "   "})

        self.api.students.search.assert_not_called()
        self.api.students.get_all.assert_called_once_with()

    def test_partial_search_echoes_sequence(self):
        self.api.students.search.return_value = [ALAN]

        response = self.client.get("/students/", {"q": "al", "partial": "1", "seq": "4"})

        self.assertEqual(response["X-Search-Seq"], "4")
        self.assertContains(response, "Alan Turing")
        self.assertNotContains(response, "<html")

    def test_status_filter(self):
        self.api.students.get_by_status.return_value = [ALAN]

        response = self.client.get("/students/", {"status": "INACTIVE"})

        self.api.students.get_by_status.assert_called_once_with("INACTIVE")
        self.assertContains(response, "Alan Turing")

    def test_failed_status_filter_shows_no_other_statuses(self):
        self.api.students.get_by_status.side_effect = ApiError("down")
        self.client.get("/students/")

        response = self.client.get("/students/", {"status": "INACTIVE"})

        self.assertContains(response, "Failed to load students")
        self.assertNotContains(response, "Ada Lovelace")
        self.assertContains(response, "No students found")

    def test_failed_partial_search_is_flagged(self):
        self.api.students.search.side_effect = ApiError("down")

        response = self.client.get("/students/", {"q": "al", "partial": "1", "seq": "2"})

        self.assertEqual(response["X-Search-Seq"], "2")
        self.assertEqual(response["X-Search-Failed"], "1")
        self.assertContains(response, "Search failed")

    def test_successful_partial_search_is_not_flagged(self):
        self.api.students.search.return_value = [ALAN]

        response = self.client.get("/students/", {"q": "al", "partial": "1", "seq": "3"})

        self.assertFalse(response.has_header("X-Search-Failed"))

    def test_search_stays_inside_status_filter(self):
        self.api.students.search.return_value = [ADA, ALAN]

        response = self.client.get("/students/", {"q": "a", "status": "INACTIVE"})

        self.api.students.search.assert_called_once_with("a")
        self.api.students.get_by_status.assert_not_called()
        self.assertContains(response, "Alan Turing")
        self.assertNotContains(response, "Ada Lovelace")

    def test_search_box_carries_status_filter(self):
        self.api.students.get_by_status.return_value = [ALAN]

        response = self.client.get("/students/", {"status": "INACTIVE"})

        self.assertContains(response, '<input type="hidden" name="status" value="INACTIVE">', html=True)

    def test_malformed_list_bodies_show_banner(self):
        for body in ({"message": "maintenance"}, [1, 2]):
            with self.subTest(body=body):
                cache.clear()
                self.api.students.get_all.return_value = body

                response = self.client.get("/students/")

                self.assertEqual(response.status_code, 200)
                self.assertContains(response, "Failed to load students")
                self.assertContains(response, "No students found")

    def test_add_form_toggle(self):
        self.assertNotContains(self.client.get("/students/"), 'action="/students/add/"')
        self.assertContains(self.client.get("/students/", {"add": "1"}), 'action="/students/add/"')

    def test_create_posts_payload_and_refetches(self):
        response = self.client.post("/students/add/", VALID_POST, follow=True)

        self.api.students.create.assert_called_once_with(
            {
                "firstName": "Grace",
                "lastName": "Hopper",
                "email": "grace@example.com",
                "phoneNumber": "555-0102",
                "status": "ACTIVE",
                "dateOfBirth": "1906-12-09",
                "address": "",
            }
        )
        self.assertRedirects(response, "/students/")
        self.assertContains(response, "Student added.")
        # Cache was invalidated, so the list was loaded again after the create.
        self.assertEqual(self.api.students.get_all.call_count, 1)
        self.assertNotContains(response, 'value="Grace"')

    def test_invalid_form_sends_nothing(self):
        response = self.client.post("/students/add/", {**VALID_POST, "email": "not-an-email"})

        self.assertEqual(response.status_code, 200)
        self.api.students.create.assert_not_called()
        self.assertContains(response, "Enter a valid email address.")

    def test_failed_create_keeps_list_and_input(self):
        self.client.get("/students/")
        self.api.students.create.side_effect = ApiError("conflict", status_code=409)

        response = self.client.post("/students/add/", VALID_POST)

        self.assertContains(response, "Failed to add student")
        self.assertContains(response, "Ada Lovelace")
        self.assertContains(response, 'value="Grace"')
        self.assertEqual(self.api.students.get_all.call_count, 1)

    def test_delete_asks_for_confirmation_first(self):
        response = self.client.get("/students/1/delete/")

        self.assertContains(response, "Are you sure you want to delete this student?")
        self.api.students.delete.assert_not_called()

    def test_declined_confirmation_sends_no_request(self):
        response = self.client.post("/students/1/delete/", {"confirm": "no"})

        self.assertRedirects(response, "/students/", fetch_redirect_response=False)
        self.api.students.delete.assert_not_called()

    def test_confirmed_delete(self):
        response = self.client.post("/students/1/delete/", {"confirm": "yes"}, follow=True)

        self.api.students.delete.assert_called_once_with(1)
        self.assertContains(response, "Student deleted.")

    def test_failed_delete_keeps_list(self):
        self.client.get("/students/")
        self.api.students.delete.side_effect = ApiError("down")

        response = self.client.post("/students/1/delete/", {"confirm": "yes"}, follow=True)

        self.assertContains(response, "Failed to delete student")
        self.assertContains(response, "Ada Lovelace")
        self.assertEqual(self.api.students.get_all.call_count, 1)
