"""Resolution of bearer tokens to callers."""
from abc import ABC, abstractmethod

from pydantic import ValidationError

from hashvault.errors import InternalServerError, UnauthorizedError
from hashvault.models.api_schemas import Identity
from .http import ServiceClient


class IdentityProvider(ABC):
    """Verifies identity tokens."""

    @abstractmethod
    def verify_token(self, token: str) -> Identity:
        """
        Resolve a token to the caller it was issued to.

        Raises:
            UnauthorizedError: If the token is invalid or expired
        """
        pass


class HttpIdentityProvider(ServiceClient, IdentityProvider):
    """Asks the authentication service to verify tokens."""

    url_setting = 'AUTH_SERVICE_URL'

    def verify_token(self, token: str) -> Identity:
        response = self._request('POST', '/api/auth/verify', json={'token': token})

        if response.status_code in (400, 401, 403):
            raise UnauthorizedError(self._message(response, 'Invalid or expired token.'))
        if not response.ok:
            raise InternalServerError(
                self._message(response, f'Failed to verify token with Authentication Service: {response.status_code}')
            )

        try:
            return Identity.model_validate(self._data(response))
        except ValidationError as e:
            raise InternalServerError('Authentication Service returned a malformed identity.') from e
