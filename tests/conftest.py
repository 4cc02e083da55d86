"""Shared fixtures: an in-memory repository and policy factories."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

import pytest

from policycore import BaseRepository, NotFoundError, Policy, Role, User

FIXED_NOW = datetime(2025, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_policy(policy_id: str, *statements: dict) -> Policy:
    """Build a Policy from wire-shape statement dicts."""
    return Policy.model_validate(
        {
            "id": policy_id,
            "document": {"Version": "2023-10-17", "Statement": list(statements)},
        }
    )


class FakeRepository(BaseRepository):
    """Dict-backed repository used to exercise AccessControl end to end."""

    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.roles: dict[str, Role] = {}
        self.policies: dict[str, Policy] = {}
        self.calls: list[tuple[str, str]] = []

    async def get_user(self, user_id: str) -> User:
        self.calls.append(("get_user", user_id))
        try:
            return self.users[user_id]
        except KeyError:
            raise NotFoundError("User", user_id)

    async def get_role(self, role_id: str) -> Role:
        try:
            return self.roles[role_id]
        except KeyError:
            raise NotFoundError("Role", role_id)

    async def get_user_policies(self, user_id: str) -> Sequence[Policy]:
        self.calls.append(("get_user_policies", user_id))
        user = await self.get_user(user_id)
        return [self.policies[pid] for pid in user.policies]

    async def get_role_policies(self, role_id: str) -> Sequence[Policy]:
        self.calls.append(("get_role_policies", role_id))
        role = await self.get_role(role_id)
        return [self.policies[pid] for pid in role.policies]

    async def create_policy(self, policy: Policy) -> Policy:
        self.policies[policy.id] = policy
        return policy

    async def create_user(self, user: User) -> User:
        self.users[user.id] = user
        return user

    async def create_role(self, role: Role) -> Role:
        self.roles[role.id] = role
        return role

    async def assign_role_to_user(self, user_id: str, role_id: str) -> User:
        user = await self.get_user(user_id)
        await self.get_role(role_id)
        if role_id not in user.roles:
            user.roles.append(role_id)
        return user

    async def attach_policy_to_role(self, policy_id: str, role_id: str) -> None:
        role = await self.get_role(role_id)
        role.policies.append(policy_id)

    async def attach_policy_to_user(self, policy_id: str, user_id: str) -> None:
        user = await self.get_user(user_id)
        user.policies.append(policy_id)


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW
