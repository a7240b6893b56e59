"""
Unit tests for the resource API groups.

Verifies each call hits the right endpoint with the right method, payload
and auth flag, and that the college list query only carries present filters.
"""

import pytest

from collegehub.api.client import APIError
from collegehub.api.resources import build_college_query, unwrap_list
from tests.helpers import BASE_URL, mock_response


def _last_call(http_session):
    call = http_session.request.call_args
    method, url = call.args
    return method, url, call.kwargs


@pytest.fixture
def authed_api(api):
    api.client.set_token_provider(lambda: "tok-xyz")
    return api


class TestBuildCollegeQuery:
    def test_only_sort_by(self):
        params = build_college_query(sort_by="rating")

        assert params == {"sortBy": "rating"}
        assert "search" not in params
        assert "type" not in params
        assert "minRating" not in params

    def test_all_parameters(self):
        params = build_college_query(
            search="tech", college_type="University", min_rating=4.5, sort_by="name"
        )

        assert params == {
            "search": "tech",
            "type": "University",
            "minRating": "4.5",
            "sortBy": "name",
        }

    def test_empty_strings_omitted(self):
        assert build_college_query(search="", college_type="") == {}

    def test_no_parameters(self):
        assert build_college_query() == {}

    def test_integer_rating_kept_exact(self):
        assert build_college_query(min_rating=4) == {"minRating": "4"}

    def test_zero_rating_omitted(self):
        assert build_college_query(min_rating=0, sort_by="rating") == {"sortBy": "rating"}
        assert build_college_query(min_rating=0.0) == {}

    def test_whole_float_rating_has_no_decimal(self):
        assert build_college_query(min_rating=4.0) == {"minRating": "4"}


class TestAuthAPI:
    def test_register_drops_missing_optionals(self, api, http_session):
        http_session.request.return_value = mock_response(201, {"token": "t", "user": {}})

        api.auth.register(name="Jane", email="jane@example.com", password="secret1")

        method, url, kwargs = _last_call(http_session)
        assert method == "POST"
        assert url == f"{BASE_URL}/api/auth/register"
        assert kwargs["json"] == {"name": "Jane", "email": "jane@example.com", "password": "secret1"}
        assert "Authorization" not in kwargs["headers"]

    def test_register_includes_phone_and_address(self, api, http_session):
        http_session.request.return_value = mock_response(201, {"token": "t", "user": {}})

        api.auth.register(
            name="Jane", email="jane@example.com", password="secret1", phone="5551234567", address="1 Main St"
        )

        assert _last_call(http_session)[2]["json"]["phone"] == "5551234567"
        assert _last_call(http_session)[2]["json"]["address"] == "1 Main St"

    def test_login(self, authed_api, http_session):
        http_session.request.return_value = mock_response(200, {"token": "t", "user": {}})

        authed_api.auth.login(email="jane@example.com", password="secret1")

        method, url, kwargs = _last_call(http_session)
        assert (method, url) == ("POST", f"{BASE_URL}/api/auth/login")
        assert kwargs["json"] == {"email": "jane@example.com", "password": "secret1"}
        assert "Authorization" not in kwargs["headers"]

    def test_google_login(self, api, http_session):
        http_session.request.return_value = mock_response(200, {"token": "t", "user": {}})

        api.auth.google_login(email="jane@example.com", auth_provider="google")

        method, url, kwargs = _last_call(http_session)
        assert (method, url) == ("POST", f"{BASE_URL}/api/auth/google-login")
        assert kwargs["json"] == {"email": "jane@example.com", "authProvider": "google"}

    def test_get_profile_is_authenticated(self, authed_api, http_session):
        http_session.request.return_value = mock_response(200, {"user": {}})

        authed_api.auth.get_profile()

        method, url, kwargs = _last_call(http_session)
        assert (method, url) == ("GET", f"{BASE_URL}/api/auth/me")
        assert kwargs["headers"]["Authorization"] == "Bearer tok-xyz"

    def test_update_profile_sends_camel_case_passwords(self, authed_api, http_session):
        http_session.request.return_value = mock_response(200, {"user": {}})

        authed_api.auth.update_profile(name="Janet", current_password="old123", new_password="new123")

        method, url, kwargs = _last_call(http_session)
        assert (method, url) == ("PUT", f"{BASE_URL}/api/auth/profile")
        assert kwargs["json"] == {
            "name": "Janet",
            "currentPassword": "old123",
            "newPassword": "new123",
        }
        assert kwargs["headers"]["Authorization"] == "Bearer tok-xyz"

    def test_forgot_password_is_public(self, authed_api, http_session):
        http_session.request.return_value = mock_response(200, {"message": "sent", "token": "reset-1"})

        result = authed_api.auth.forgot_password("jane@example.com")

        method, url, kwargs = _last_call(http_session)
        assert (method, url) == ("POST", f"{BASE_URL}/api/auth/forgot-password")
        assert kwargs["json"] == {"email": "jane@example.com"}
        assert "Authorization" not in kwargs["headers"]
        assert result["token"] == "reset-1"

    def test_reset_password_is_public(self, authed_api, http_session):
        http_session.request.return_value = mock_response(200, {"message": "Password reset"})

        authed_api.auth.reset_password("reset-1", "newpass1")

        method, url, kwargs = _last_call(http_session)
        assert (method, url) == ("POST", f"{BASE_URL}/api/auth/reset-password")
        assert kwargs["json"] == {"token": "reset-1", "password": "newpass1"}
        assert "Authorization" not in kwargs["headers"]

    def test_login_failure_propagates_api_error(self, api, http_session):
        http_session.request.return_value = mock_response(401, {"error": "Invalid credentials"})

        with pytest.raises(APIError, match="Invalid credentials"):
            api.auth.login(email="jane@example.com", password="nope")


class TestCollegeAPI:
    def test_get_all_is_public_and_filtered(self, authed_api, http_session):
        http_session.request.return_value = mock_response(200, [])

        authed_api.colleges.get_all(sort_by="rating")

        method, url, kwargs = _last_call(http_session)
        assert (method, url) == ("GET", f"{BASE_URL}/api/colleges")
        assert kwargs["params"] == {"sortBy": "rating"}
        assert "Authorization" not in kwargs["headers"]

    def test_get_by_id(self, api, http_session):
        http_session.request.return_value = mock_response(200, {"_id": "c1", "name": "MIT"})

        result = api.colleges.get_by_id("c1")

        assert result == {"id": "c1", "name": "MIT"}
        assert _last_call(http_session)[1] == f"{BASE_URL}/api/colleges/c1"

    def test_path_ids_are_quoted(self, api, http_session):
        http_session.request.return_value = mock_response(200, {})

        api.colleges.get_by_id("../admin")

        assert _last_call(http_session)[1] == f"{BASE_URL}/api/colleges/..%2Fadmin"

    def test_writes_are_authenticated(self, authed_api, http_session):
        http_session.request.return_value = mock_response(200, {})

        authed_api.colleges.create({"name": "New U"})
        assert _last_call(http_session)[:2] == ("POST", f"{BASE_URL}/api/colleges")
        assert _last_call(http_session)[2]["headers"]["Authorization"] == "Bearer tok-xyz"

        authed_api.colleges.update("c1", {"rating": 4.2})
        assert _last_call(http_session)[:2] == ("PUT", f"{BASE_URL}/api/colleges/c1")

        authed_api.colleges.delete("c1")
        assert _last_call(http_session)[:2] == ("DELETE", f"{BASE_URL}/api/colleges/c1")
        assert _last_call(http_session)[2]["headers"]["Authorization"] == "Bearer tok-xyz"


class TestBookingAPI:
    def test_all_calls_authenticated(self, authed_api, http_session):
        http_session.request.return_value = mock_response(200, {})

        calls = [
            (lambda: authed_api.bookings.get_all(), "GET", "/api/bookings"),
            (lambda: authed_api.bookings.get_by_id("b1"), "GET", "/api/bookings/b1"),
            (lambda: authed_api.bookings.create({"collegeId": "c1"}), "POST", "/api/bookings"),
            (lambda: authed_api.bookings.update("b1", {"status": "approved"}), "PUT", "/api/bookings/b1"),
            (lambda: authed_api.bookings.delete("b1"), "DELETE", "/api/bookings/b1"),
        ]

        for invoke, method, path in calls:
            invoke()
            sent_method, url, kwargs = _last_call(http_session)
            assert (sent_method, url) == (method, f"{BASE_URL}{path}")
            assert kwargs["headers"]["Authorization"] == "Bearer tok-xyz"

    def test_create_passes_payload_verbatim(self, authed_api, http_session):
        http_session.request.return_value = mock_response(201, {"_id": "b1"})
        payload = {
            "collegeId": "c1",
            "studentName": "Jane Smith",
            "email": "jane@example.com",
            "phone": "5551234567",
            "course": "Physics",
            "previousEducation": "High School",
            "grade": "A",
            "address": "1 Main St",
        }

        result = authed_api.bookings.create(payload)

        assert _last_call(http_session)[2]["json"] == payload
        assert result == {"id": "b1"}


class TestReviewAPI:
    def test_get_by_college_is_public(self, authed_api, http_session):
        http_session.request.return_value = mock_response(200, [])

        authed_api.reviews.get_by_college("c1")

        method, url, kwargs = _last_call(http_session)
        assert (method, url) == ("GET", f"{BASE_URL}/api/reviews/college/c1")
        assert "Authorization" not in kwargs["headers"]

    def test_get_by_user(self, authed_api, http_session):
        http_session.request.return_value = mock_response(200, [])

        authed_api.reviews.get_by_user()

        method, url, kwargs = _last_call(http_session)
        assert (method, url) == ("GET", f"{BASE_URL}/api/reviews/user")
        assert kwargs["headers"]["Authorization"] == "Bearer tok-xyz"

    def test_create(self, authed_api, http_session):
        http_session.request.return_value = mock_response(201, {})

        authed_api.reviews.create("c1", 5, "Great campus")

        method, url, kwargs = _last_call(http_session)
        assert (method, url) == ("POST", f"{BASE_URL}/api/reviews")
        assert kwargs["json"] == {"collegeId": "c1", "rating": 5, "comment": "Great campus"}

    def test_update_sends_only_given_fields(self, authed_api, http_session):
        http_session.request.return_value = mock_response(200, {})

        authed_api.reviews.update("r1", comment="Updated")

        method, url, kwargs = _last_call(http_session)
        assert (method, url) == ("PUT", f"{BASE_URL}/api/reviews/r1")
        assert kwargs["json"] == {"comment": "Updated"}

    def test_delete(self, authed_api, http_session):
        http_session.request.return_value = mock_response(200, {"message": "deleted"})

        authed_api.reviews.delete("r1")

        assert _last_call(http_session)[:2] == ("DELETE", f"{BASE_URL}/api/reviews/r1")


class TestUnwrapList:
    def test_bare_list(self):
        assert unwrap_list([{"id": "a"}], "colleges") == [{"id": "a"}]

    def test_wrapped_list(self):
        assert unwrap_list({"colleges": [{"id": "a"}]}, "colleges") == [{"id": "a"}]

    def test_unexpected_shape(self):
        assert unwrap_list({"message": "none"}, "colleges") == []
        assert unwrap_list(None, "colleges") == []
