import logging

import requests

from spots_client.constants import DEFAULT_TIMEOUT
from spots_client.exceptions import (
    DataException,
    NetworkException,
    RequestTimeoutException,
    exception_for_status,
)

logger = logging.getLogger(__name__)


class ApiClient:
    """JSON-over-HTTP transport shared by the client services."""

    def __init__(self, base_url, session=None, timeout=DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_config(cls, config, session=None):
        return cls(config.base_url, session=session, timeout=config.timeout)

    def get(self, path, params=None):
        return self._request("GET", path, params=params)

    def post(self, path, body=None):
        return self._request("POST", path, json=body if body is not None else {})

    def delete(self, path, params=None):
        return self._request("DELETE", path, params=params)

    def upload(self, path, files):
        """POST a multipart body; files is a list of (field, (name, fileobj, content_type))."""
        return self._request("POST", path, files=files)

    def _request(self, method, path, params=None, json=None, files=None):
        url = self.base_url + path
        headers = {"Accept": "application/json"}
        if files is None:
            headers["Content-Type"] = "application/json"

        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                files=files,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise RequestTimeoutException(f"Request to {path} timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise NetworkException(f"Could not reach the API: {e}") from e

        return self._handle_response(response)

    @staticmethod
    def _handle_response(response):
        try:
            body = response.json()
        except ValueError:
            body = None

        if 200 <= response.status_code < 300:
            if not isinstance(body, dict):
                raise DataException("Response body is not a JSON object", response.status_code)
            return body

        message = None
        if isinstance(body, dict):
            message = body.get("error") or body.get("message")
        logger.info("API error %s: %s", response.status_code, message)
        raise exception_for_status(response.status_code, message)
