"""Access orchestration over a storage repository.

:class:`AccessControl` resolves a user's policies (direct grants plus the
policies of every role the user holds) and hands them to the evaluation
engine. It also forwards the administration calls of the repository so a
service can manage users, roles and policies through one object.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Sequence, Union

from .builders import PolicyBuilder
from .config import SharedConfig
from .exceptions import AccessDeniedError
from .interfaces import BaseRepository
from .logging import get_access_logger, safe_log_value
from .models import Policy, Role, User
from .policy import Decision, explain

PolicyLike = Union[Policy, PolicyBuilder]


def _built(policy: PolicyLike) -> Policy:
    # Builders are finalized before anything reaches storage
    if isinstance(policy, PolicyBuilder):
        return policy.build()
    return policy


class AccessControl:
    """Policy-based access checks for users and their roles.

    Args:
        repository: Storage adapter implementing :class:`BaseRepository`.
        config: Shared settings (decision log level, default policy version).

    Example::

        access = AccessControl(repository)
        await access.create_policy(
            PolicyBuilder("docs-read").allow(["read"]).on(["document/*"])
        )
        await access.attach_policy_to_role("docs-read", "editor")

        if await access.has_access("u-42", "read", "document/report"):
            ...
    """

    def __init__(self, repository: BaseRepository, config: SharedConfig | None = None) -> None:
        self._repository = repository
        self._config = config or SharedConfig()

    @property
    def repository(self) -> BaseRepository:
        return self._repository

    @property
    def config(self) -> SharedConfig:
        return self._config

    # ── Access checks ───────────────────────────────────

    async def collect_policies(self, user_id: str) -> list[Policy]:
        """Fetch every policy that applies to ``user_id``.

        The direct-policy fetch and one fetch per role run concurrently and
        are all awaited before returning. The first failure cancels the
        fetches still running and propagates unchanged.

        Returns:
            Direct policies first, then role policies in the order of
            ``user.roles``.
        """
        user = await self._repository.get_user(user_id)

        tasks = [asyncio.ensure_future(self._repository.get_user_policies(user_id))]
        tasks.extend(asyncio.ensure_future(self._repository.get_role_policies(role_id)) for role_id in user.roles)

        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return [policy for batch in results for policy in batch]

    async def check(
        self,
        user_id: str,
        action: str,
        resource: str,
        context: Mapping[str, Any] | None = None,
    ) -> Decision:
        """Evaluate a request and return the full :class:`Decision`."""
        policies = await self.collect_policies(user_id)
        decision = explain(policies, action, resource, context)

        level = logging.INFO if self._config.log_access_decisions else logging.DEBUG
        logger = get_access_logger(__name__, user_id=user_id, policy_id=decision.policy_id)
        if not logger.isEnabledFor(level):
            return decision

        logger.log(
            level,
            "%s %s on %s (%s, %d policies, context=%s)",
            "Allowed" if decision.allowed else "Denied",
            action,
            resource,
            decision.reason,
            len(policies),
            safe_log_value(dict(context or {})),
        )
        return decision

    async def has_access(
        self,
        user_id: str,
        action: str,
        resource: str,
        context: Mapping[str, Any] | None = None,
    ) -> bool:
        """Check whether the user may perform ``action`` on ``resource``.

        Args:
            user_id: Principal to evaluate.
            action: Requested action (e.g. ``"read"``).
            resource: Requested resource (e.g. ``"document/report"``).
            context: Request attributes matched against statement conditions.

        Returns:
            True if some policy allows the request and none denies it.

        Raises:
            NotFoundError: the user (or a role's policy set) does not exist.
        """
        decision = await self.check(user_id, action, resource, context)
        return decision.allowed

    async def require_access(
        self,
        user_id: str,
        action: str,
        resource: str,
        context: Mapping[str, Any] | None = None,
    ) -> Decision:
        """Like :meth:`has_access`, but raise AccessDeniedError on denial."""
        decision = await self.check(user_id, action, resource, context)
        if decision.denied:
            raise AccessDeniedError(
                f"User '{user_id}' may not {action} {resource}: {decision.reason}",
                user_id=user_id,
                action=action,
                resource=resource,
                policy_id=decision.policy_id,
            )
        return decision

    # ── Policies ────────────────────────────────────────

    def new_policy(self, policy_id: str) -> PolicyBuilder:
        """Start a PolicyBuilder using the configured default version."""
        return PolicyBuilder(policy_id, version=self._config.default_policy_version)

    async def create_policy(self, policy: PolicyLike) -> Policy:
        """Store a policy. A PolicyBuilder is built (and validated) first."""
        return await self._repository.create_policy(_built(policy))

    async def update_policy(self, policy: PolicyLike) -> Policy:
        return await self._repository.update_policy(_built(policy))

    async def delete_policy(self, policy_id: str) -> None:
        await self._repository.delete_policy(policy_id)

    async def attach_policy_to_role(self, policy_id: str, role_id: str) -> None:
        await self._repository.attach_policy_to_role(policy_id, role_id)

    async def attach_policy_to_user(self, policy_id: str, user_id: str) -> None:
        await self._repository.attach_policy_to_user(policy_id, user_id)

    async def detach_policy_from_role(self, policy_id: str, role_id: str) -> None:
        await self._repository.detach_policy_from_role(policy_id, role_id)

    async def detach_policy_from_user(self, policy_id: str, user_id: str) -> None:
        await self._repository.detach_policy_from_user(policy_id, user_id)

    async def get_user_policies(self, user_id: str) -> Sequence[Policy]:
        return await self._repository.get_user_policies(user_id)

    async def get_role_policies(self, role_id: str) -> Sequence[Policy]:
        return await self._repository.get_role_policies(role_id)

    # ── Users and roles ─────────────────────────────────

    async def init(self) -> None:
        """Provision repository storage (tables, indexes)."""
        await self._repository.setup_tables()

    async def create_user(self, user: User) -> User:
        return await self._repository.create_user(user)

    async def get_user(self, user_id: str) -> User:
        return await self._repository.get_user(user_id)

    async def create_role(self, role: Role) -> Role:
        return await self._repository.create_role(role)

    async def get_role(self, role_id: str) -> Role:
        return await self._repository.get_role(role_id)

    async def update_role(self, role: Role) -> Role:
        return await self._repository.update_role(role)

    async def delete_role(self, role_id: str) -> None:
        await self._repository.delete_role(role_id)

    async def assign_role_to_user(self, user_id: str, role_id: str) -> User:
        return await self._repository.assign_role_to_user(user_id, role_id)

    async def remove_role_from_user(self, user_id: str, role_id: str) -> None:
        await self._repository.remove_role_from_user(user_id, role_id)


__all__ = ["AccessControl", "PolicyLike"]
