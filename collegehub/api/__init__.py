"""API module - CollegeHub REST request layer."""

from .client import APIError, CollegeHubAPIClient, normalize_ids
from .resources import (
    AuthAPI,
    BookingAPI,
    CollegeAPI,
    CollegeHubAPI,
    ReviewAPI,
    build_college_query,
    unwrap_list,
)

__all__ = [
    "APIError",
    "CollegeHubAPIClient",
    "normalize_ids",
    "AuthAPI",
    "BookingAPI",
    "CollegeAPI",
    "CollegeHubAPI",
    "ReviewAPI",
    "build_college_query",
    "unwrap_list",
]
