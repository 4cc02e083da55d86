"""Storage collaborator contract.

policycore does not persist anything. A service plugs in a repository that
implements the five abstract reads/writes the access orchestrator needs;
the administration methods are optional and raise NotImplementedError
unless the adapter supports them.

Repositories raise :class:`~policycore.exceptions.NotFoundError` for a
missing user, role or policy. Those errors reach the caller of
:class:`~policycore.access.AccessControl` unchanged.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from .models import Policy, Role, User


class BaseRepository(ABC):
    """Async persistence adapter for users, roles and policies."""

    @abstractmethod
    async def get_user(self, user_id: str) -> User:
        raise NotImplementedError

    @abstractmethod
    async def get_role(self, role_id: str) -> Role:
        raise NotImplementedError

    @abstractmethod
    async def get_user_policies(self, user_id: str) -> Sequence[Policy]:
        """Policies attached directly to the user."""
        raise NotImplementedError

    @abstractmethod
    async def get_role_policies(self, role_id: str) -> Sequence[Policy]:
        """Policies attached to the role."""
        raise NotImplementedError

    @abstractmethod
    async def create_policy(self, policy: Policy) -> Policy:
        raise NotImplementedError

    # ── Optional administration ─────────────────────────

    async def setup_tables(self) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not provision storage")

    async def create_user(self, user: User) -> User:
        raise NotImplementedError(f"{type(self).__name__} does not support create_user")

    async def create_role(self, role: Role) -> Role:
        raise NotImplementedError(f"{type(self).__name__} does not support create_role")

    async def assign_role_to_user(self, user_id: str, role_id: str) -> User:
        raise NotImplementedError(f"{type(self).__name__} does not support assign_role_to_user")

    async def remove_role_from_user(self, user_id: str, role_id: str) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not support remove_role_from_user")

    async def attach_policy_to_role(self, policy_id: str, role_id: str) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not support attach_policy_to_role")

    async def attach_policy_to_user(self, policy_id: str, user_id: str) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not support attach_policy_to_user")

    async def detach_policy_from_role(self, policy_id: str, role_id: str) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not support detach_policy_from_role")

    async def detach_policy_from_user(self, policy_id: str, user_id: str) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not support detach_policy_from_user")

    async def update_role(self, role: Role) -> Role:
        raise NotImplementedError(f"{type(self).__name__} does not support update_role")

    async def update_policy(self, policy: Policy) -> Policy:
        raise NotImplementedError(f"{type(self).__name__} does not support update_policy")

    async def delete_role(self, role_id: str) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not support delete_role")

    async def delete_policy(self, policy_id: str) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not support delete_policy")


__all__ = ["BaseRepository"]
