"""Response builders and sample payloads shared across test modules."""

import json
from typing import Any, Optional
from unittest.mock import Mock

import requests

BASE_URL = "https://api.collegehub.test"

USER_PAYLOAD = {
    "_id": "u-100",
    "name": "Jane Smith",
    "email": "jane@example.com",
    "phone": "555-123-4567",
}


def mock_response(status: int = 200, payload: Any = None, text: Optional[str] = None) -> Mock:
    """
    Build a Mock shaped like requests.Response.

    Args:
        status: HTTP status code
        payload: JSON body (ignored when text is given)
        text: Raw body; when set and not valid JSON, json() raises ValueError
    """
    response = Mock(spec=requests.Response)
    response.status_code = status
    response.ok = 200 <= status < 400

    if text is not None:
        response.content = text.encode()
        try:
            response.json.return_value = json.loads(text)
        except ValueError:
            response.json.side_effect = ValueError("Expecting value")
    elif payload is None:
        response.content = b""
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.content = json.dumps(payload).encode()
        response.json.return_value = payload

    return response


def auth_payload(token: str = "token-abc-123456", user: Optional[dict] = None) -> dict:
    return {"message": "ok", "user": dict(user or USER_PAYLOAD), "token": token}
