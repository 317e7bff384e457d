from .http import ServiceClient
from .identity import IdentityProvider, HttpIdentityProvider
from .repository_client import RepositoryDirectory, RepositoryServiceClient
from .content_client import ContentLookup, ContentServiceClient, LocalContentClient

__all__ = ['ServiceClient', 'IdentityProvider', 'HttpIdentityProvider', 'RepositoryDirectory',
           'RepositoryServiceClient', 'ContentLookup', 'ContentServiceClient', 'LocalContentClient']
