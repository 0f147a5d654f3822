"""Factories implementing each registration strategy.

Every registration stores one of these callables in its entry. A factory is
invoked with the container performing the resolution, which may be a child
of the container it was registered on.
"""

from typing import Any, Callable, TYPE_CHECKING

from simple_container.constructors import ConstructorPlan
from simple_container.domain import Factory

if TYPE_CHECKING:
    from simple_container.container import Container

__all__ = [
    "instance_factory",
    "per_request_factory",
    "handler_factory",
    "SingletonFactory",
]


def instance_factory(instance: Any) -> Factory:
    """Always produce ``instance``, ignoring the container."""

    def produce(_container: "Container") -> Any:
        return instance

    return produce


def per_request_factory(plan: ConstructorPlan) -> Factory:
    """Build a new instance through constructor injection on every call."""

    def produce(container: "Container") -> Any:
        return container.build_from_plan(plan)

    return produce


def handler_factory(handler: Callable[["Container"], Any]) -> Factory:
    """Delegate to a caller-supplied handler on every call."""

    def produce(container: "Container") -> Any:
        return handler(container)

    return produce


class _Uninitialised:
    def __init__(self, build: Factory):
        self.build = build


class _Initialised:
    def __init__(self, value: Any):
        self.value = value


class SingletonFactory:
    """Produce one instance, built on the first call and cached thereafter.

    The state moves from uninitialised (holding the builder) to initialised
    (holding the value) when the first build completes. There is no lock:

    * a build that resolves this same singleton re-enters while the state is
      still uninitialised and builds again;
    * concurrent first calls from several threads may each build an
      instance. The last build to finish wins the cache; the others are
      returned to their callers and then dropped.

    Child containers share this object with their parent, and so share the
    cached instance.
    """

    def __init__(self, build: Factory):
        self._state = _Uninitialised(build)

    @classmethod
    def of_plan(cls, plan: ConstructorPlan) -> "SingletonFactory":
        return cls(per_request_factory(plan))

    @property
    def is_initialised(self) -> bool:
        return isinstance(self._state, _Initialised)

    def __call__(self, container: "Container") -> Any:
        state = self._state
        if isinstance(state, _Initialised):
            return state.value
        value = state.build(container)
        self._state = _Initialised(value)
        return value
