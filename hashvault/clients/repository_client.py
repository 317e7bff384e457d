"""Access to repository metadata owned by the repository service."""
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import ValidationError

from hashvault.errors import ForbiddenError, InternalServerError, NotFoundError, UnauthorizedError
from hashvault.models.api_schemas import RepositoryInfo
from .http import ServiceClient


class RepositoryDirectory(ABC):
    """Looks up repository owner and visibility."""

    @abstractmethod
    def get_repository(self, repository_id: str, token: Optional[str] = None) -> RepositoryInfo:
        """
        Fetch repository metadata.

        Args:
            repository_id: Repository to look up
            token: Caller's bearer token, forwarded to the service

        Raises:
            NotFoundError: If there is no such repository
        """
        pass


class RepositoryServiceClient(ServiceClient, RepositoryDirectory):
    """Repository directory backed by the repository service's HTTP API."""

    url_setting = 'REPOSITORY_SERVICE_URL'

    def get_repository(self, repository_id: str, token: Optional[str] = None) -> RepositoryInfo:
        response = self._request('GET', f'/api/repos/{repository_id}', token=token)

        if response.status_code == 404:
            raise NotFoundError(self._message(
                response, f"Repository with ID '{repository_id}' not found in Repository Service."))
        if response.status_code == 403:
            raise ForbiddenError(self._message(
                response, 'Access denied to repository details in Repository Service.'))
        if response.status_code == 401:
            raise UnauthorizedError(self._message(response, 'Repository Service rejected the token.'))
        if not response.ok:
            raise InternalServerError(self._message(
                response, f'Failed to fetch repository details from Repository Service: {response.status_code}'))

        try:
            return RepositoryInfo.model_validate(self._data(response))
        except ValidationError as e:
            raise InternalServerError('Repository Service returned malformed repository details.') from e
