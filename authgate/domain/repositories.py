"""
CRC — domain/repositories.py

Name
- Credential Store contract (Protocol)

Responsibilities
- Define the persistence port for User records.
- Keep use cases independent from PostgreSQL / in-memory implementations.

Collaborators
- identity.users.User
- infrastructure.repositories: postgres.user, in_memory.user

Constraints
- Pure interface: no SQL, no infrastructure imports.
- "Not found" is None / False, never an exception.
- Any backend failure surfaces as StoreError (opaque to the core).
"""

from typing import Any, Mapping, Optional, Protocol
from uuid import UUID

from ..identity.users import User


class UserRepository(Protocol):
    """
    R: Interface for user persistence.

    `fields` are the columns produced by identity.mutations
    (password_hash already derived, never plaintext).
    """

    def find_by_email(self, email: str) -> Optional[User]:
        """R: Lookup by normalised email."""
        ...

    def find_by_id(self, user_id: UUID) -> Optional[User]:
        ...

    def create(self, fields: Mapping[str, Any]) -> User:
        """
        R: Persist a new user.

        Raises:
            EmailAlreadyRegisteredError: email already stored.
        """
        ...

    def update(self, user_id: UUID, fields: Mapping[str, Any]) -> Optional[User]:
        """R: Apply column changes; returns None when the user does not exist."""
        ...

    def delete(self, user_id: UUID) -> bool:
        ...

    def list_users(self, *, limit: int = 200, offset: int = 0) -> list[User]:
        """R: Stable ordering: created_at DESC, id DESC."""
        ...
