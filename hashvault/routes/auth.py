from functools import wraps

from flask import g, request

from hashvault.errors import UnauthorizedError
from hashvault.services import get_services


def bearer_token() -> str:
    """Extract the bearer token from the Authorization header."""
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        raise UnauthorizedError('Authorization token is required.')
    return token.strip()


def require_identity(view):
    """
    Resolve the caller before running the view.

    Sets ``g.identity`` to the verified Identity and ``g.token`` to the raw
    token, which is forwarded to collaborating services.
    """
    @wraps(view)
    def wrapped(*args, **kwargs):
        token = bearer_token()
        g.identity = get_services().identity_provider.verify_token(token)
        g.token = token
        return view(*args, **kwargs)
    return wrapped
