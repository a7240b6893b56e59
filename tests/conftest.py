"""
Shared test fixtures.

Provides a mocked requests.Session wired into a CollegeHubAPI bundle, an
in-memory session store, and a SessionContext built on top of both.
"""

from unittest.mock import Mock

import pytest
import requests

from collegehub.api import CollegeHubAPI, CollegeHubAPIClient
from collegehub.auth import SessionContext, SessionManager
from collegehub.database import MemorySessionStore
from tests.helpers import BASE_URL


@pytest.fixture
def http_session():
    return Mock(spec=requests.Session)


@pytest.fixture
def api(http_session):
    return CollegeHubAPI(CollegeHubAPIClient(base_url=BASE_URL, session=http_session))


@pytest.fixture
def store():
    return MemorySessionStore()


@pytest.fixture
def context(api, store):
    return SessionContext(api, SessionManager(store))
