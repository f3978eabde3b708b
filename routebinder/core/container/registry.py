"""Name-based dependency container.

Controllers and services are registered under string names and resolved
with constitute(name). Two lifetimes are supported:

- SINGLETON: created on first resolution, the same instance afterwards
  (app-scoped, like the lru_cache factories in infrastructure.py)
- TRANSIENT: a new instance on every resolution

Factories receive the container so they can resolve their own
dependencies.

Usage:
    container = Container()
    container.register("UserRepository", lambda c: InMemoryUserRepository())
    container.register(
        "UsersController",
        lambda c: UsersController(c.constitute("UserRepository")),
        lifetime=Lifetime.TRANSIENT,
    )
    controller = container.constitute("UsersController")
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from routebinder.core.errors import ContainerError

Factory = Callable[["Container"], Any]


class Lifetime(str, Enum):
    """How often a registration produces a new instance."""

    SINGLETON = "singleton"
    TRANSIENT = "transient"


@dataclass(frozen=True, slots=True)
class _Registration:
    factory: Factory
    lifetime: Lifetime


class Container:
    """Resolve named dependencies with singleton or transient lifetime."""

    def __init__(self) -> None:
        self._registrations: dict[str, _Registration] = {}
        self._singletons: dict[str, Any] = {}

    def register(
        self,
        name: str,
        factory: Factory,
        *,
        lifetime: Lifetime = Lifetime.SINGLETON,
    ) -> None:
        """Register a factory under a name.

        Re-registering a name replaces the factory and drops any cached
        singleton (used by tests to swap implementations).

        Args:
            name: Identifier passed to constitute().
            factory: Callable receiving the container, returning the instance.
            lifetime: SINGLETON (default) or TRANSIENT.
        """
        self._registrations[name] = _Registration(factory=factory, lifetime=lifetime)
        self._singletons.pop(name, None)

    def register_instance(self, name: str, instance: Any) -> None:
        """Register an already-built singleton."""
        self.register(name, lambda _: instance)
        self._singletons[name] = instance

    def is_registered(self, name: str) -> bool:
        return name in self._registrations

    def lifetime_of(self, name: str) -> Lifetime:
        """Return the lifetime a name was registered with.

        Raises:
            ContainerError: If the name is not registered.
        """
        return self._registration(name).lifetime

    def constitute(self, name: str) -> Any:
        """Resolve an instance by name.

        Args:
            name: Registered identifier.

        Returns:
            The cached singleton or a freshly built transient instance.

        Raises:
            ContainerError: If the name is not registered.
        """
        registration = self._registration(name)

        if registration.lifetime is Lifetime.TRANSIENT:
            return registration.factory(self)

        if name not in self._singletons:
            self._singletons[name] = registration.factory(self)
        return self._singletons[name]

    def _registration(self, name: str) -> _Registration:
        try:
            return self._registrations[name]
        except KeyError:
            raise ContainerError(f"Nothing registered under '{name}'") from None
