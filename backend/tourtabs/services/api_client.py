"""
Client for the tour website REST backend.

Every request carries the operator's bearer token. Failures are raised as
ApiError subclasses. A 401 raises Unauthorized instead, which is not an
ApiError: it propagates to the application, which ends the session in one place.
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from tourtabs.core.config import API_BASE_URL, API_TIMEOUT

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Base exception for backend errors."""

    def __init__(self, message: str, status_code: int = 0, errors: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}

    def first_errors(self) -> Dict[str, str]:
        return {field: messages[0] for field, messages in self.errors.items() if messages}

    def flat_message(self) -> str:
        messages = [m for field_messages in self.errors.values() for m in field_messages]
        return ", ".join(messages) if messages else self.message


class ApiError(BackendError):
    """A failed request the page can report and recover from."""


class ValidationFailed(ApiError):
    pass


class NotFound(ApiError):
    pass


class Unauthorized(BackendError):
    """The backend rejected the session. Not an ApiError, so page handlers never catch it."""


class NetworkError(ApiError):
    pass


ERRORS_BY_STATUS = {
    401: Unauthorized,
    404: NotFound,
    422: ValidationFailed,
}


def _as_error_map(errors: Any) -> Dict[str, List[str]]:
    if not isinstance(errors, dict):
        return {}
    return {
        str(field): [str(m) for m in (messages if isinstance(messages, list) else [messages])]
        for field, messages in errors.items()
    }


def unwrap(payload: Any) -> Any:
    """Strip the ``{"data": ...}`` envelope the backend puts around most responses."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


class ApiClient:
    def __init__(self, token: Optional[str] = None, base_url: str = API_BASE_URL,
                 timeout: float = API_TIMEOUT, session: Optional[requests.Session] = None):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method: str, endpoint: str, *, json: Any = None,
                params: Optional[Dict[str, Any]] = None, files: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{endpoint}"

        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(),
                json=json,
                params=params,
                files=files,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Backend request %s %s failed: %s", method, endpoint, e)
            raise NetworkError("Network error") from e

        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = None

        if not response.ok:
            body = data if isinstance(data, dict) else {}
            error_class = ERRORS_BY_STATUS.get(response.status_code, ApiError)
            logger.error("Backend error %s on %s %s: %s", response.status_code, method, endpoint, response.text[:500])
            raise error_class(
                body.get("message") or f"HTTP Error: {response.status_code}",
                response.status_code,
                _as_error_map(body.get("errors")),
            )

        if data is None:
            raise NetworkError("Invalid response from server", response.status_code)

        if isinstance(data, dict) and data.get("success") is False:
            raise ApiError(data.get("message") or "Request failed", response.status_code, _as_error_map(data.get("errors")))

        return data

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, body: Any = None) -> Any:
        return self.request("POST", endpoint, json=body)

    def put(self, endpoint: str, body: Any = None) -> Any:
        return self.request("PUT", endpoint, json=body)

    def patch(self, endpoint: str, body: Any = None) -> Any:
        return self.request("PATCH", endpoint, json=body)

    def delete(self, endpoint: str) -> Any:
        return self.request("DELETE", endpoint)

    def upload(self, endpoint: str, field: str, filename: str, content: bytes, content_type: str) -> Any:
        return self.request("POST", endpoint, files={field: (filename, content, content_type)})
