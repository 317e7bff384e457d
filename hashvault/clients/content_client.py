"""Commit lookups against the content service, remote or in-process."""
from abc import ABC, abstractmethod
from typing import Optional

from hashvault.errors import BadRequestError, InternalServerError, UnauthorizedError
from hashvault.models import ContentKind
from .http import ServiceClient


class ContentLookup(ABC):
    """Answers whether a commit has been stored."""

    @abstractmethod
    def commit_exists(self, commit_hash: str, token: Optional[str] = None) -> bool:
        pass


class ContentServiceClient(ServiceClient, ContentLookup):
    """Talks to the content service's HTTP API."""

    url_setting = 'CONTENT_SERVICE_URL'

    def commit_exists(self, commit_hash: str, token: Optional[str] = None) -> bool:
        """Probe with HEAD, which never transfers the commit itself."""
        response = self._request('HEAD', f'/api/content/commits/{commit_hash}', token=token)

        if response.status_code == 200:
            return True
        if response.status_code == 404:
            return False
        if response.status_code == 400:
            raise BadRequestError('Invalid commit hash format sent to Content Service.')
        if response.status_code == 401:
            raise UnauthorizedError('Content Service rejected the token.')
        raise InternalServerError(
            f'Failed to check commit existence in Content Service: {response.status_code}')


class LocalContentClient(ContentLookup):
    """Commit lookups against an object store in the same process."""

    def __init__(self, object_store):
        self.object_store = object_store

    def commit_exists(self, commit_hash: str, token: Optional[str] = None) -> bool:
        return self.object_store.object_exists(commit_hash, ContentKind.COMMIT)
