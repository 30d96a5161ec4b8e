"""Key → helper registry used by services to pick a strategy.

Several versions of a helper can be registered side by side (for example
``CreateOrderHelperV0`` and ``CreateOrderHelperV1``); the service resolves
the active key without its call sites changing. The registry is filled at
startup and frozen, after which it is read-only and safe to share between
concurrent requests.
"""

from typing import Generic, Iterator, Mapping, Optional, TypeVar

from .errors import HelperNotFoundError


H = TypeVar("H")


class HelperRegistry(Generic[H]):
    """Write-once mapping from a helper key to a helper implementation."""

    def __init__(self, helpers: Optional[Mapping[str, H]] = None):
        self._helpers: dict[str, H] = {}
        self._frozen = False
        for key, helper in (helpers or {}).items():
            self.register(key, helper)

    def register(self, key: str, helper: H) -> "HelperRegistry[H]":
        """Register ``helper`` under ``key``.

        Raises:
            RuntimeError: If the registry is already frozen.
            ValueError: If the key is empty or already taken.
        """
        if self._frozen:
            raise RuntimeError("Helper registry is frozen")
        if not key:
            raise ValueError("Helper key must be a non-empty string")
        if key in self._helpers:
            raise ValueError(f"Helper already registered: {key}")
        self._helpers[key] = helper
        return self

    def freeze(self) -> "HelperRegistry[H]":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve(self, key: str) -> Optional[H]:
        """Return the helper registered under ``key``, or None."""
        return self._helpers.get(key)

    def require(self, key: str) -> H:
        """Return the helper registered under ``key``.

        Raises:
            HelperNotFoundError: If nothing is registered under ``key``.
        """
        helper = self._helpers.get(key)
        if helper is None:
            raise HelperNotFoundError(key)
        return helper

    def __contains__(self, key: object) -> bool:
        return key in self._helpers

    def __iter__(self) -> Iterator[str]:
        return iter(self._helpers)

    def __len__(self) -> int:
        return len(self._helpers)
