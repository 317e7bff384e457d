"""
In-memory stand-ins for the collaborating services, plus shared test data.
"""
from hashvault.clients import ContentLookup, IdentityProvider, RepositoryDirectory
from hashvault.errors import UnauthorizedError
from hashvault.models.api_schemas import Identity, RepositoryInfo

OWNER_ID = '5f8d0d55b54764421b7156c1'
OTHER_USER_ID = '5f8d0d55b54764421b7156c2'

PUBLIC_REPO_ID = '6a1b2c3d4e5f60718293a4b1'
PRIVATE_REPO_ID = '6a1b2c3d4e5f60718293a4b2'
MISSING_REPO_ID = '6a1b2c3d4e5f60718293a4ff'

OWNER_TOKEN = 'owner-token'
OTHER_TOKEN = 'other-token'

TIMESTAMP = '2024-01-15T10:30:00Z'


class FakeRepositoryDirectory(RepositoryDirectory):
    """Repository registry backed by a dict; records every lookup."""

    def __init__(self):
        self.repositories = {}
        self.calls = []

    def add(self, repository_id, owner, visibility='private'):
        self.repositories[repository_id] = RepositoryInfo(
            id=repository_id, name=f'repo-{repository_id[-2:]}', owner=owner, visibility=visibility
        )

    def get_repository(self, repository_id, token=None):
        self.calls.append((repository_id, token))
        return self.repositories.get(repository_id)


class FakeIdentityProvider(IdentityProvider):
    """Accepts a fixed set of tokens."""

    def __init__(self, tokens):
        self.tokens = dict(tokens)

    def verify_token(self, token):
        if token not in self.tokens:
            raise UnauthorizedError('Invalid or expired token.')
        return Identity(user_id=self.tokens[token], email=f'{self.tokens[token]}@example.com')


class FakeContentLookup(ContentLookup):
    """Knows a fixed set of commit hashes; records every probe."""

    def __init__(self, commits=()):
        self.commits = set(commits)
        self.calls = []

    def commit_exists(self, commit_hash, token=None):
        self.calls.append((commit_hash, token))
        return commit_hash in self.commits


def make_commit(tree_hash, parents=(), message='Initial commit', email='test@example.com'):
    """Build a raw commit body."""
    return {
        'tree': tree_hash,
        'parents': list(parents),
        'author': {'email': email, 'timestamp': TIMESTAMP},
        'committer': {'email': email, 'timestamp': TIMESTAMP},
        'message': message,
    }


def auth_headers(token=OWNER_TOKEN):
    return {'Authorization': f'Bearer {token}'}
