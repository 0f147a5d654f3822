"""The dependency resolution container.

A :class:`Container` maps (service, key) pairs to factories. Services are
usually classes, but any hashable value may identify a service. Requests
are served from the first matching registration; when none matches, the
container can still satisfy a request for a producer of a service or for a
collection of every registered instance of a service (see
:mod:`simple_container.requests`). Classes are built by constructor
injection (see :mod:`simple_container.constructors`).

Child containers start from a snapshot of their parent's registrations, so
they can override or add registrations for a narrower scope without
affecting the parent.
"""

import inspect
import logging
from typing import Any, Callable, Optional, get_type_hints

from simple_container.constructors import ConstructorPlan
from simple_container.domain import Factory, Lifetime
from simple_container.entry_set import EntrySet
from simple_container.errors import CircularDependencyError, DependencyError, ResolutionError
from simple_container.factories import (
    SingletonFactory,
    handler_factory,
    instance_factory,
    per_request_factory,
)
from simple_container.requests import Collection, Producer, request_shape

__all__ = ["Container"]

logger = logging.getLogger(__name__)

Handler = Callable[["Container"], Any]


class Container:
    """
    A service locator with constructor injection and child scopes.

    The container does no locking. Registration and resolution must not be
    called concurrently from several threads without external
    synchronisation, and concurrent first resolution of a singleton may
    build it more than once. When ``max_depth`` is set, the depth counter is
    shared by all threads resolving through this container, so concurrent
    resolutions count towards the same limit and unsynchronised updates may
    leave it wrong.

    Args:
        max_depth: If given, a resolution nested more deeply than this raises
            :class:`CircularDependencyError`. By default nesting is unbounded
            and a circular dependency graph ends in ``RecursionError``.

    Example:
        >>> container = Container()
        >>> container.register_singleton(EventAggregator)
        >>> container.register_singleton(WindowManager, DesktopWindowManager)
        >>> container.register_per_request(ShellViewModel)
        >>> shell = container.resolve(ShellViewModel)
    """

    def __init__(self, max_depth: Optional[int] = None, entries: Optional[EntrySet] = None):
        self._entries = entries if entries is not None else EntrySet()
        self._max_depth = max_depth
        self._depth = 0

    @property
    def max_depth(self) -> Optional[int]:
        return self._max_depth

    def create_child_container(self) -> "Container":
        """Create a container seeded with a snapshot of this one's registrations.

        The registration entries are shared. A factory added afterwards for a
        (service, key) pair that already existed is seen by both containers, and
        so is a singleton cached by either. Pairs registered or unregistered
        afterwards are only seen by the container they were changed on.
        """
        logger.debug("Creating child container with %d entries", len(self._entries))
        return type(self)(max_depth=self._max_depth, entries=self._entries.snapshot())

    def is_registered(self, service: Any, key: Optional[str] = None) -> bool:
        """Report whether a registration would serve (service, key), without resolving it."""
        return self._entries.find(service, key) is not None

    def register_singleton(
        self, service: Any, implementation: Optional[type] = None, key: Optional[str] = None
    ) -> None:
        """Build ``implementation`` once, on first request, and return that instance thereafter.

        Args:
            service: The service identity to register.
            implementation: The class to build; defaults to ``service``.
            key: Optional registration key.
        """
        plan = ConstructorPlan(implementation or service)
        self._add(service, key, SingletonFactory.of_plan(plan), "singleton")

    def register_per_request(
        self, service: Any, implementation: Optional[type] = None, key: Optional[str] = None
    ) -> None:
        """Build a new ``implementation`` on every request.

        Args:
            service: The service identity to register.
            implementation: The class to build; defaults to ``service``.
            key: Optional registration key.
        """
        plan = ConstructorPlan(implementation or service)
        self._add(service, key, per_request_factory(plan), "per-request")

    def register_instance(self, service: Any, instance: Any, key: Optional[str] = None) -> None:
        """Return ``instance`` on every request."""
        self._add(service, key, instance_factory(instance), "instance")

    def register_handler(self, service: Any, handler: Handler, key: Optional[str] = None) -> None:
        """Call ``handler(container)`` on every request."""
        self._add(service, key, handler_factory(handler), "handler")

    def register_singleton_handler(
        self, service: Any, handler: Handler, key: Optional[str] = None
    ) -> None:
        """Call ``handler(container)`` on first request and return its product thereafter."""
        self._add(service, key, SingletonFactory(handler_factory(handler)), "singleton handler")

    def provides(
        self,
        service: Any = None,
        key: Optional[str] = None,
        lifetime: Lifetime = Lifetime.PER_REQUEST,
    ) -> Callable:
        """Decorator to register a class or handler function.

        A class is built by constructor injection and is registered as
        ``service``, or as itself if no service is given. A function is
        registered as a handler and receives the container; its service
        defaults to its annotated return type.

        Args:
            service: Optional service identity.
            key: Optional registration key.
            lifetime: Whether to build once or on every request.

        Returns:
            A decorator that registers its target and returns it unchanged.

        Example:
            @container.provides(WindowManager, lifetime=Lifetime.SINGLETON)
            class DesktopWindowManager(WindowManager):
                ...

            @container.provides()
            def make_settings(container: Container) -> Settings:
                return Settings.load()
        """

        def decorator(obj):
            singleton = lifetime is Lifetime.SINGLETON
            if inspect.isclass(obj):
                provided = service if service is not None else obj
                if singleton:
                    self.register_singleton(provided, obj, key)
                else:
                    self.register_per_request(provided, obj, key)
            elif inspect.isfunction(obj):
                provided = service if service is not None else _return_type(obj)
                if singleton:
                    self.register_singleton_handler(provided, obj, key)
                else:
                    self.register_handler(provided, obj, key)
            else:
                raise DependencyError(f"{obj} is not a class or function")
            return obj

        return decorator

    def unregister(self, service: Any, key: Optional[str] = None) -> None:
        """Remove every factory registered for exactly (service, key), if any."""
        if self._entries.remove(service, key):
            logger.debug("Unregistered %s (key=%r)", service, key)

    def resolve(self, service: Any, key: Optional[str] = None) -> Any:
        """Resolve an instance of ``service``.

        Args:
            service: The requested service, or None to resolve by key alone.
            key: Optional registration key.

        Returns:
            The product of the first factory of the matching registration,
            a producer function for a producer request, or a collection of
            instances for a collection request.

        Raises:
            ResolutionError: If nothing can satisfy the request.
            CircularDependencyError: If ``max_depth`` is set and exceeded.
        """
        if self._max_depth is None:
            return self._resolve(service, key)

        if self._depth >= self._max_depth:
            raise CircularDependencyError(service, self._max_depth)

        self._depth += 1
        try:
            return self._resolve(service, key)
        finally:
            self._depth -= 1

    def resolve_all(self, service: Any) -> tuple:
        """Resolve every registered instance of ``service``, whatever its key.

        Instances are produced in registration order. An empty tuple is
        returned when nothing is registered.
        """
        return tuple(
            factory(self)
            for entry in self._entries.entries_for(service)
            for factory in entry.factories
        )

    def build_instance(self, implementation: type) -> Any:
        """Build ``implementation`` by constructor injection, ignoring any registration for it."""
        return self.build_from_plan(ConstructorPlan(implementation))

    def build_from_plan(self, plan: ConstructorPlan) -> Any:
        args = []
        kwargs = {}
        for dependency in plan.dependencies:
            value = self.resolve(dependency.declared_type, dependency.key)
            if dependency.positional_only:
                args.append(value)
            else:
                kwargs[dependency.parameter_name] = value
        return self.activate_instance(plan.constructor.target, args, kwargs)

    def activate_instance(self, target: Callable, args: list[Any], kwargs: dict[str, Any]) -> Any:
        """Call a constructor with its resolved arguments.

        Override to customise how instances are created, for instance to
        attach them to an outer framework after construction.
        """
        return target(*args, **kwargs)

    def __getitem__(self, item: Any) -> Any:
        if isinstance(item, str):
            return self.resolve(None, item)
        return self.resolve(item)

    def __contains__(self, item: Any) -> bool:
        if isinstance(item, str):
            return self.is_registered(None, item)
        return self.is_registered(item)

    def _resolve(self, service: Any, key: Optional[str]) -> Any:
        entry = self._entries.find(service, key)
        if entry is not None:
            return entry.factories[0](self)

        if service is None:
            raise ResolutionError(None, key)

        shape = request_shape(service)
        if isinstance(shape, Producer):
            logger.debug("Creating producer for %s", shape.service)
            return self._producer(shape.service)
        if isinstance(shape, Collection):
            logger.debug("Collecting all instances of %s", shape.service)
            return shape.container_type(self.resolve_all(shape.service))

        raise ResolutionError(service, key)

    def _producer(self, service: Any) -> Callable[[], Any]:
        def produce() -> Any:
            return self.resolve(service)

        return produce

    def _add(self, service: Any, key: Optional[str], factory: Factory, strategy: str) -> None:
        self._entries.get_or_create(service, key).add(factory)
        logger.debug("Registered %s for %s (key=%r)", strategy, service, key)


def _return_type(func: Callable) -> Any:
    """Extract the service a handler provides from its return type annotation.

    Raises:
        DependencyError: If the function has no return type annotation.
    """
    return_type = get_type_hints(func).get("return", None)
    if return_type is not None:
        return return_type
    raise DependencyError(
        f"Function {func.__name__} is registered without a service "
        "but does not have an annotated return type"
    )
