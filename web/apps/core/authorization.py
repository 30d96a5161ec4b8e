"""Authorization contracts implementing ``AuthorizationPort``."""

from typing import Iterable, Mapping, Optional

from .envelope import User
from .logging import ServiceLogger
from .ports import AuthorizationPort


logger = ServiceLogger("core.authorization")


class AuthenticatedUserAuthorization(AuthorizationPort):
    """Allows any caller that carries an identifier."""

    def is_authorized(self, user: User, operation: str) -> bool:
        allowed = user is not None and bool(user.id)
        logger.debug(
            "Authorizing caller",
            {"userId": getattr(user, "id", None), "operation": operation, "allowed": allowed},
        )
        return allowed


class RoleAuthorization(AuthorizationPort):
    """Restricts operations to roles.

    Operations listed in ``permissions`` are only open to the listed roles;
    operations not listed fall back to ``AuthenticatedUserAuthorization``.

    Args:
        permissions: Mapping of operation name to allowed role names, e.g.
            ``{"Orders.CreateOrder": ["USER", "ADMIN"]}``.
    """

    def __init__(self, permissions: Optional[Mapping[str, Iterable[str]]] = None):
        self.permissions = {op: frozenset(roles) for op, roles in (permissions or {}).items()}
        self._fallback = AuthenticatedUserAuthorization()

    def is_authorized(self, user: User, operation: str) -> bool:
        if not self._fallback.is_authorized(user, operation):
            return False
        roles = self.permissions.get(operation)
        if roles is None:
            return True
        return user.role in roles
