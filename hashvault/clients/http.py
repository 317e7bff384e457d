"""Shared plumbing for calls to collaborating services."""
import logging
from typing import Any, Optional

import requests

from hashvault.errors import InternalServerError

logger = logging.getLogger(__name__)


class ServiceClient:
    """
    Base class for HTTP clients of the other services.

    Every call carries a bounded timeout; timeouts, connection failures and a
    missing base URL all surface as InternalServerError.
    """

    #: Config key naming the base URL, used in error messages
    url_setting = 'SERVICE_URL'

    def __init__(self, base_url: Optional[str], timeout: float = 5.0, session: Optional[requests.Session] = None):
        """
        Args:
            base_url: Base URL of the service (e.g. "http://localhost:5002")
            timeout: Seconds to wait for each call
            session: Session to send requests with (a new one if omitted)
        """
        self.base_url = base_url.rstrip('/') if base_url else None
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, token: Optional[str] = None, **kwargs) -> requests.Response:
        if not self.base_url:
            raise InternalServerError(f"{self.url_setting} is not configured.")

        headers = kwargs.pop('headers', {})
        if token:
            headers['Authorization'] = f'Bearer {token}'

        url = f'{self.base_url}{path}'
        try:
            return self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            logger.error(f"{method} {url} timed out after {self.timeout}s")
            raise InternalServerError(f"Request to {self.url_setting} timed out.") from e
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise InternalServerError(f"Could not reach {self.url_setting}.") from e

    @staticmethod
    def _json(response: requests.Response) -> Any:
        """Response body as JSON, or None if there is no JSON body."""
        try:
            return response.json()
        except ValueError:
            return None

    @classmethod
    def _message(cls, response: requests.Response, default: str) -> str:
        """The envelope message of an error response, if it has one."""
        body = cls._json(response)
        if isinstance(body, dict) and body.get('message'):
            return body['message']
        return default

    @classmethod
    def _data(cls, response: requests.Response) -> Any:
        body = cls._json(response)
        if not isinstance(body, dict) or 'data' not in body:
            raise InternalServerError(f"Unexpected response from {cls.url_setting}.")
        return body['data']
