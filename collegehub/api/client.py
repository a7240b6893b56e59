"""
CollegeHub REST API client

Builds HTTP requests against the fixed CollegeHub base URL, attaches the
bearer token for authenticated calls, and turns every failure into a single
APIError carrying a human-readable message.

Backend error convention: failure responses carry {"error": "<message>"}.
"""

import time
from typing import Any, Callable, Dict, Optional

import requests

from collegehub.constants import DEFAULT_API_URL
from collegehub.utils.logger import get_logger

logger = get_logger(__name__)

TokenProvider = Callable[[], Optional[str]]

# Fallback messages when the backend gives us nothing usable
UNPARSEABLE_ERROR_MESSAGE = "An error occurred"
MISSING_ERROR_MESSAGE = "Request failed"
NETWORK_ERROR_MESSAGE = "Network error"
INVALID_RESPONSE_MESSAGE = "Invalid response from server"


class APIError(RuntimeError):
    """
    Raised for any failed API call.

    Callers branch on the message text; status_code is informational and is
    None for transport failures.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        method: Optional[str] = None,
        path: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.method = method
        self.path = path


def normalize_ids(payload: Any) -> Any:
    """
    Rewrite backend `_id` keys to the canonical `id` key.

    Walks nested dicts and lists so embedded records (for example a booking
    whose `collegeId` is a populated college) are normalized too. When a
    record carries both keys the existing `id` is kept.

    Args:
        payload: Parsed JSON value

    Returns:
        A normalized copy of the payload
    """
    if isinstance(payload, list):
        return [normalize_ids(item) for item in payload]

    if isinstance(payload, dict):
        normalized = {key: normalize_ids(value) for key, value in payload.items() if key != "_id"}
        if "_id" in payload and "id" not in payload:
            normalized["id"] = payload["_id"]
        return normalized

    return payload


def extract_error_message(response: requests.Response) -> str:
    """
    Pull the `error` field out of a failure response.

    Returns:
        The server message, UNPARSEABLE_ERROR_MESSAGE when the body is not
        JSON, or MISSING_ERROR_MESSAGE when the JSON carries no message
    """
    try:
        body = response.json()
    except ValueError:
        return UNPARSEABLE_ERROR_MESSAGE

    if isinstance(body, dict):
        message = body.get("error")
        if isinstance(message, str) and message:
            return message

    return MISSING_ERROR_MESSAGE


class CollegeHubAPIClient:
    """
    Low-level request layer shared by the resource APIs.

    One requests.Session per client. Tokens are never cached here: the token
    provider is asked on every authenticated call, so login and logout take
    effect immediately.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        session: Optional[requests.Session] = None,
        token_provider: Optional[TokenProvider] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Origin of the CollegeHub backend
            session: requests.Session to reuse (default: creates new)
            token_provider: Callable returning the current bearer token or None
            timeout: Per-request timeout in seconds (None waits indefinitely)
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.token_provider = token_provider
        self.timeout = timeout

    def set_token_provider(self, token_provider: Optional[TokenProvider]) -> None:
        self.token_provider = token_provider

    def build_headers(self, include_auth: bool = False) -> Dict[str, str]:
        """
        Build request headers.

        Content-Type is always JSON. The Authorization header is added only
        for authenticated calls and only when a token is available; a missing
        token is left for the server to reject.
        """
        headers = {"Content-Type": "application/json"}

        if include_auth and self.token_provider is not None:
            token = self.token_provider()
            if token:
                headers["Authorization"] = f"Bearer {token}"

        return headers

    def handle_response(self, response: requests.Response, method: str, path: str) -> Any:
        """
        Parse a response into JSON or raise APIError.

        Returns:
            Normalized JSON body, or None for an empty success body

        Raises:
            APIError: On any non-2xx status or an unparseable success body
        """
        if not response.ok:
            message = extract_error_message(response)
            context = {"method": method, "path": path, "status": response.status_code}
            if response.status_code >= 500:
                logger.warning(
                    "API request failed on the server",
                    operation="api_request",
                    context=context,
                    error=message,
                )
            else:
                # Client rejections (bad credentials, validation) stay below the console level
                logger.info(
                    "API request rejected",
                    operation="api_request",
                    context={**context, "error": message},
                )
            raise APIError(message, status_code=response.status_code, method=method, path=path)

        if not response.content:
            return None

        try:
            body = response.json()
        except ValueError as e:
            logger.error(
                "API returned a non-JSON success body",
                operation="api_request",
                context={"method": method, "path": path, "status": response.status_code},
                error=str(e),
            )
            raise APIError(
                INVALID_RESPONSE_MESSAGE,
                status_code=response.status_code,
                method=method,
                path=path,
            ) from e

        return normalize_ids(body)

    def request(
        self,
        method: str,
        path: str,
        auth: bool = False,
        json_body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Perform one API call.

        Args:
            method: HTTP method
            path: Path below the base URL, e.g. "/api/colleges"
            auth: Whether to attach the bearer token
            json_body: Payload sent as JSON
            params: Query string parameters

        Returns:
            Parsed, normalized JSON body

        Raises:
            APIError: On transport failure or non-2xx response
        """
        url = f"{self.base_url}{path}"
        headers = self.build_headers(include_auth=auth)
        context = {"method": method, "path": path, "auth": "Authorization" in headers}

        logger.debug("Sending API request", operation="api_request", context=context)

        start_time = time.time()
        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                json=json_body,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(
                "API request failed before a response was received",
                operation="api_request",
                context=context,
                error=str(e),
            )
            raise APIError(NETWORK_ERROR_MESSAGE, method=method, path=path) from e

        duration_ms = (time.time() - start_time) * 1000
        result = self.handle_response(response, method, path)

        logger.info(
            "API request completed",
            operation="api_request",
            context={**context, "status": response.status_code},
            duration_ms=duration_ms,
        )
        return result

    def get(self, path: str, auth: bool = False, params: Optional[Dict[str, str]] = None) -> Any:
        return self.request("GET", path, auth=auth, params=params)

    def post(self, path: str, json_body: Dict[str, Any], auth: bool = False) -> Any:
        return self.request("POST", path, auth=auth, json_body=json_body)

    def put(self, path: str, json_body: Dict[str, Any], auth: bool = False) -> Any:
        return self.request("PUT", path, auth=auth, json_body=json_body)

    def delete(self, path: str, auth: bool = False) -> Any:
        return self.request("DELETE", path, auth=auth)
