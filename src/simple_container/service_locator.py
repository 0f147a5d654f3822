"""Global access point to the application's service locator.

Application bootstrapping code initialises :class:`IoC` once with its
container; framework collaborators which cannot receive the container
through their constructor (view-model locators, navigation helpers) then
resolve services through it.

Example:
    >>> container = Container()
    >>> container.register_singleton(WindowManager)
    >>> IoC.initialize(container)
    >>> IoC.get(WindowManager)
"""

from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from simple_container.errors import DependencyError

__all__ = ["ServiceLocator", "IoC"]


@runtime_checkable
class ServiceLocator(Protocol):
    """Anything that can resolve services, such as a :class:`~simple_container.container.Container`."""

    def resolve(self, service: Any, key: Optional[str] = None) -> Any:
        ...

    def resolve_all(self, service: Any) -> Sequence[Any]:
        ...


class IoC:
    """Static facade over the locator the application was initialised with."""

    _locator: Optional[ServiceLocator] = None

    @classmethod
    def initialize(cls, locator: ServiceLocator) -> None:
        cls._locator = locator

    @classmethod
    def reset(cls) -> None:
        cls._locator = None

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._locator is not None

    @classmethod
    def get(cls, service: Any, key: Optional[str] = None) -> Any:
        return cls._require_locator().resolve(service, key)

    @classmethod
    def get_all(cls, service: Any) -> Sequence[Any]:
        return cls._require_locator().resolve_all(service)

    @classmethod
    def _require_locator(cls) -> ServiceLocator:
        if cls._locator is None:
            raise DependencyError("IoC is not initialized; call IoC.initialize() first.")
        return cls._locator
