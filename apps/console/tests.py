from unittest import mock

from django.contrib.messages import get_messages
from django.contrib.messages.storage.cookie import CookieStorage
from django.core.cache import cache
from django.test import RequestFactory, SimpleTestCase

from apps.api import ApiError
from apps.api.cache import STUDENTS, read_through
from .context_processors import navigation
from .decorators import console_tab
from .utils import load_filtered, load_list, search_filters, search_or_list, server_message


class ConsoleHelperTests(SimpleTestCase):
    def setUp(self):
        cache.clear()
        self.factory = RequestFactory()

    def _request(self, path="/students/"):
        request = self.factory.get(path)
        request._messages = CookieStorage(request)
        return request

    def test_blank_term_loads_full_list(self):
        request = self._request()
        loader = mock.Mock(return_value=[{"id": 1}])
        search = mock.Mock()

        for term in ("", "   "):
            cache.clear()
            items = search_or_list(request, STUDENTS, term=term, loader=loader, search=search, error_message="x")
            self.assertEqual(items, [{"id": 1}])
        search.assert_not_called()

    def test_term_is_searched_exactly_as_typed(self):
        request = self._request()
        search = mock.Mock(return_value=[{"id": 2}])

        items = search_or_list(request, STUDENTS, term=" ada ", loader=mock.Mock(), search=search, error_message="x")

        self.assertEqual(items, [{"id": 2}])
        search.assert_called_once_with(" ada ")

    def test_failed_search_shows_nothing_and_reports(self):
        read_through(STUDENTS, lambda: [{"id": 1}])
        request = self._request()
        search = mock.Mock(side_effect=ApiError("down"))

        items = search_or_list(request, STUDENTS, term="ada", loader=mock.Mock(), search=search, error_message="x")

        self.assertEqual(items, [])
        self.assertTrue(request.console_load_failed)
        self.assertEqual([str(m) for m in get_messages(request)], ["Search failed"])

    def test_first_load_failure_leaves_list_empty(self):
        request = self._request()
        items = load_list(
            request, STUDENTS, mock.Mock(side_effect=ApiError("down")), error_message="Failed to load students"
        )
        self.assertEqual(items, [])
        self.assertEqual([str(m) for m in get_messages(request)], ["Failed to load students"])

    def test_malformed_filter_result_is_reported(self):
        request = self._request()

        items = load_filtered(request, STUDENTS, lambda: {"id": 1}, error_message="Failed to load students")

        self.assertEqual(items, [])
        self.assertEqual([str(m) for m in get_messages(request)], ["Failed to load students"])

    def test_search_filters_drop_blank_values(self):
        self.assertEqual(search_filters(status="ACTIVE", department=""), [("status", "ACTIVE")])

    def test_server_message_prefers_detail(self):
        self.assertEqual(server_message(ApiError("x", detail="Course is full"), "Failed"), "Course is full")
        self.assertEqual(server_message(ApiError("x"), "Failed"), "Failed")


class NavigationTests(SimpleTestCase):
    def test_decorator_marks_active_tab(self):
        @console_tab("courses")
        def view(request):
            return navigation(request)

        context = view(RequestFactory().get("/courses/"))
        active = [item["tab"].name for item in context["console_tabs"] if item["active"]]
        self.assertEqual(active, ["courses"])
        self.assertEqual(context["active_tab"], "courses")

    def test_root_redirects_to_students(self):
        response = self.client.get("/")
        self.assertRedirects(response, "/students/", fetch_redirect_response=False)

    @mock.patch("apps.courses.views.get_api")
    def test_only_current_tab_is_active_in_page(self, get_api):
        cache.clear()
        get_api.return_value.courses.get_all.return_value = []
        response = self.client.get("/courses/")
        self.assertContains(response, 'class="tab active">Courses</a>', html=False)
        self.assertNotContains(response, 'class="tab active">Students</a>', html=False)
