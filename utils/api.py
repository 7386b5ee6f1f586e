# utils/api.py - Backend REST client
import logging
from typing import Any, Dict, List, Optional

import requests
import streamlit as st

from utils.config import config

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when the inventory backend cannot be reached or rejects a request"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self):
        if self.status_code:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class ApiClient:
    """Thin JSON client over a requests session"""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self.timeout = timeout or config.API_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def get(self, path: str) -> Any:
        return self._request("GET", path)

    def post(self, path: str, payload: Dict[str, Any]) -> Any:
        return self._request("POST", path, payload)

    def put(self, path: str, payload: Dict[str, Any]) -> Any:
        return self._request("PUT", path, payload)

    def delete(self, path: str) -> None:
        self._request("DELETE", path)

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.Timeout as e:
            logger.error(f"Timeout calling {method} {url}")
            raise ApiError(f"Backend did not respond within {self.timeout}s") from e
        except requests.RequestException as e:
            logger.error(f"Error calling {method} {url}: {e}")
            raise ApiError("Could not connect to the inventory backend") from e

        if not response.ok:
            message = _extract_error_message(response)
            logger.error(f"{method} {url} failed with {response.status_code}: {message}")
            raise ApiError(message, status_code=response.status_code)

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {method} {url}")
            raise ApiError("Backend returned an invalid response",
                           status_code=response.status_code) from e


def _extract_error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            if body.get(key):
                return str(body[key])

    return f"Request failed: {response.reason or 'unknown error'}"


def as_list(data: Any) -> List[Dict[str, Any]]:
    """Normalize a list response, tolerating null bodies"""
    if data is None:
        return []
    if not isinstance(data, list):
        raise ApiError("Expected a list from the backend")
    return data


@st.cache_resource
def get_api_client() -> ApiClient:
    """Shared client for the running app"""
    logger.info(f"Connecting to inventory backend at {config.API_BASE_URL}")
    return ApiClient()
