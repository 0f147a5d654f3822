"""Domain models used throughout the container."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from simple_container.container import Container

__all__ = ["Factory", "Lifetime", "Dependency", "RegistrationEntry"]


Factory = Callable[["Container"], Any]
"""A producer function mapping the resolving container to an instance."""


class Lifetime(Enum):
    """How long a constructed service lives once it has been built."""

    SINGLETON = "singleton"
    PER_REQUEST = "per_request"


@dataclass(frozen=True)
class Dependency:
    """Represents a constructor parameter to be satisfied by the container.

    Attributes:
        parameter_name: The parameter name in the constructor's signature.
        declared_type: The annotated type, used as the service identity.
        key: Optional registration key taken from an ``Annotated`` qualifier.
        positional_only: Whether the argument must be passed by position.
    """

    parameter_name: str
    declared_type: Any
    key: Optional[str] = None
    positional_only: bool = False


@dataclass(eq=False)
class RegistrationEntry:
    """
    Every factory registered for a single (service, key) pair.

    Entries compare by identity. A child container shares the entries it
    was created with.

    Attributes:
        service: The service identity this entry satisfies.
        key: The registration key, None being a valid key of its own.
        factories: Producer functions, in the order they were registered.
    """

    service: Any
    key: Optional[str]
    factories: list[Factory] = field(default_factory=list)

    def add(self, factory: Factory) -> None:
        self.factories.append(factory)

    def matches(self, service: Any, key: Optional[str]) -> bool:
        return self.service == service and self.key == key
