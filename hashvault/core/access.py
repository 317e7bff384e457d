import enum
import logging
from typing import Optional, Union

from hashvault.clients.repository_client import RepositoryDirectory
from hashvault.errors import ForbiddenError, NotFoundError
from hashvault.models.api_schemas import RepositoryInfo

logger = logging.getLogger(__name__)


class AccessLevel(enum.Enum):
    """Permission needed for an operation"""
    READ = "read"
    WRITE = "write"


class AccessGate:
    """
    Decides whether a user may read or write a repository.

    Ownership and visibility come from the repository directory on every call;
    nothing is cached.
    """

    def __init__(self, directory: RepositoryDirectory):
        self.directory = directory

    def check_access(
        self,
        repository_id: str,
        user_id: str,
        required_level: Union[AccessLevel, str],
        token: Optional[str] = None
    ) -> RepositoryInfo:
        """
        Check a user's access to a repository.

        Write access requires ownership. Read access requires ownership or a
        public repository.

        Args:
            repository_id: Repository being accessed
            user_id: Caller
            required_level: AccessLevel (or its value)
            token: Caller's bearer token, forwarded to the directory

        Returns:
            The repository's metadata

        Raises:
            NotFoundError: If the repository does not exist
            ForbiddenError: If the level is not satisfied
        """
        level = AccessLevel(required_level)
        repo = self.directory.get_repository(repository_id, token)
        if repo is None:
            raise NotFoundError(f"Repository with ID '{repository_id}' not found.")

        is_owner = str(repo.owner) == str(user_id)

        if level == AccessLevel.WRITE and not is_owner:
            logger.warning(f"User {user_id} denied write access to repository {repository_id}")
            raise ForbiddenError("You do not have write permission for this repository.")

        if level == AccessLevel.READ and repo.visibility != 'public' and not is_owner:
            logger.warning(f"User {user_id} denied read access to private repository {repository_id}")
            raise ForbiddenError("Access denied to private repository.")

        return repo
