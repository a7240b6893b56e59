"""
Resource-level API groups: auth, colleges, bookings and reviews.

Each group maps typed Python calls onto one endpoint family. Record payloads
are passed through as plain dicts; the only reshaping is identifier
normalization done by the client.
"""

from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

from collegehub.utils.logger import log_operation
from .client import APIError, CollegeHubAPIClient


def _segment(value: str) -> str:
    """Quote a path parameter so ids can never escape their URL segment."""
    return quote(str(value), safe="")


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def _format_number(value: Union[int, float]) -> str:
    """Render whole floats without a trailing ".0" (4.0 -> "4")."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_college_query(
    search: Optional[str] = None,
    college_type: Optional[str] = None,
    min_rating: Optional[Union[int, float]] = None,
    sort_by: Optional[str] = None,
) -> Dict[str, str]:
    """
    Build the query parameters for the college list endpoint.

    Only parameters that are present are serialized; None and empty strings
    are left out entirely rather than being sent empty. A minimum rating of 0
    filters nothing and is left out too.

    Args:
        search: Free-text search
        college_type: College type filter (University, College, ...)
        min_rating: Minimum average rating
        sort_by: Sort key, e.g. "rating"

    Returns:
        Dict of wire parameter name to string value
    """
    candidates = (
        ("search", search),
        ("type", college_type),
        ("minRating", min_rating),
        ("sortBy", sort_by),
    )
    params: Dict[str, str] = {}
    for name, value in candidates:
        if value is None or value == "":
            continue
        if name == "minRating":
            if not value:
                continue
            value = _format_number(value)
        params[name] = str(value)
    return params


class AuthAPI:
    """Account endpoints under /api/auth."""

    def __init__(self, client: CollegeHubAPIClient):
        self.client = client

    @log_operation("register", expected=(APIError,))
    def register(
        self,
        name: str,
        email: str,
        password: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create an account.

        Returns:
            {"message": ..., "user": {...}, "token": "..."}
        """
        payload = _drop_none(
            {"name": name, "email": email, "password": password, "phone": phone, "address": address}
        )
        return self.client.post("/api/auth/register", payload)

    @log_operation("login", expected=(APIError,))
    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Exchange credentials for a token.

        Returns:
            {"message": ..., "user": {...}, "token": "..."}
        """
        return self.client.post("/api/auth/login", {"email": email, "password": password})

    @log_operation("google_login", expected=(APIError,))
    def google_login(self, email: str, auth_provider: str) -> Dict[str, Any]:
        """Sign in with an account already verified by an external identity provider."""
        return self.client.post(
            "/api/auth/google-login", {"email": email, "authProvider": auth_provider}
        )

    def get_profile(self) -> Dict[str, Any]:
        """Fetch the user the current token belongs to."""
        return self.client.get("/api/auth/me", auth=True)

    @log_operation("update_profile", expected=(APIError,))
    def update_profile(
        self,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        current_password: Optional[str] = None,
        new_password: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Update profile fields and optionally change the password.

        Only the fields that are given are sent.
        """
        payload = _drop_none(
            {
                "name": name,
                "phone": phone,
                "address": address,
                "currentPassword": current_password,
                "newPassword": new_password,
            }
        )
        return self.client.put("/api/auth/profile", payload, auth=True)

    @log_operation("forgot_password", expected=(APIError,))
    def forgot_password(self, email: str) -> Dict[str, Any]:
        """
        Request a password reset for an account.

        Returns:
            {"message": ..., "token": "<reset token>"}
        """
        return self.client.post("/api/auth/forgot-password", {"email": email})

    def reset_password(self, token: str, password: str) -> Dict[str, Any]:
        """Set a new password using a reset token from forgot_password()."""
        return self.client.post("/api/auth/reset-password", {"token": token, "password": password})


class CollegeAPI:
    """College catalog endpoints. Reads are public; writes need a token."""

    def __init__(self, client: CollegeHubAPIClient):
        self.client = client

    def get_all(
        self,
        search: Optional[str] = None,
        college_type: Optional[str] = None,
        min_rating: Optional[Union[int, float]] = None,
        sort_by: Optional[str] = None,
    ) -> Any:
        params = build_college_query(search, college_type, min_rating, sort_by)
        return self.client.get("/api/colleges", params=params)

    def get_by_id(self, college_id: str) -> Dict[str, Any]:
        return self.client.get(f"/api/colleges/{_segment(college_id)}")

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.post("/api/colleges", data, auth=True)

    def update(self, college_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.put(f"/api/colleges/{_segment(college_id)}", data, auth=True)

    def delete(self, college_id: str) -> Any:
        return self.client.delete(f"/api/colleges/{_segment(college_id)}", auth=True)


class BookingAPI:
    """Admission booking endpoints; every call is authenticated."""

    def __init__(self, client: CollegeHubAPIClient):
        self.client = client

    def get_all(self) -> Any:
        return self.client.get("/api/bookings", auth=True)

    def get_by_id(self, booking_id: str) -> Dict[str, Any]:
        return self.client.get(f"/api/bookings/{_segment(booking_id)}", auth=True)

    @log_operation("create_booking", expected=(APIError,))
    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Submit an admission application.

        Expected keys: collegeId, studentName, email, phone, course,
        previousEducation, grade, address, optionally guardianName and
        guardianPhone.
        """
        return self.client.post("/api/bookings", data, auth=True)

    def update(self, booking_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.put(f"/api/bookings/{_segment(booking_id)}", data, auth=True)

    def delete(self, booking_id: str) -> Any:
        return self.client.delete(f"/api/bookings/{_segment(booking_id)}", auth=True)


class ReviewAPI:
    """Review endpoints. Listing a college's reviews is public."""

    def __init__(self, client: CollegeHubAPIClient):
        self.client = client

    def get_by_college(self, college_id: str) -> Any:
        return self.client.get(f"/api/reviews/college/{_segment(college_id)}")

    def get_by_user(self) -> Any:
        return self.client.get("/api/reviews/user", auth=True)

    def create(self, college_id: str, rating: Union[int, float], comment: str) -> Dict[str, Any]:
        return self.client.post(
            "/api/reviews",
            {"collegeId": college_id, "rating": rating, "comment": comment},
            auth=True,
        )

    def update(
        self,
        review_id: str,
        rating: Optional[Union[int, float]] = None,
        comment: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload = _drop_none({"rating": rating, "comment": comment})
        return self.client.put(f"/api/reviews/{_segment(review_id)}", payload, auth=True)

    def delete(self, review_id: str) -> Any:
        return self.client.delete(f"/api/reviews/{_segment(review_id)}", auth=True)


class CollegeHubAPI:
    """All resource groups over one shared client."""

    def __init__(self, client: CollegeHubAPIClient):
        self.client = client
        self.auth = AuthAPI(client)
        self.colleges = CollegeAPI(client)
        self.bookings = BookingAPI(client)
        self.reviews = ReviewAPI(client)


def unwrap_list(payload: Any, key: str) -> List[Dict[str, Any]]:
    """
    Return the record list from a list response.

    The backend answers list endpoints either with a bare JSON array or with
    an object wrapping the array under the resource name.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get(key), list):
        return payload[key]
    return []
