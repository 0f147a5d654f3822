"""Constructor discovery for constructor injection.

A class is built through one of its declared constructors: its ``__init__``,
or a classmethod declared on the class itself and marked with
:func:`constructor`. The public constructor taking the most parameters is
chosen; ties go to the one declared first, ``__init__`` counting as first.
Each parameter is then satisfied from the container using its type hint.

Example:
    >>> class Shell:
    ...     def __init__(self):
    ...         ...
    ...
    ...     @classmethod
    ...     @constructor
    ...     def with_services(cls, events: EventAggregator, windows: WindowManager) -> "Shell":
    ...         ...
    >>>
    >>> ConstructorPlan(Shell).constructor.name   # "with_services"
"""

import inspect
import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Annotated, Any, Callable, Optional, get_args, get_origin, get_type_hints

from simple_container.domain import Dependency
from simple_container.errors import DependencyError

__all__ = ["constructor", "Constructor", "ConstructorPlan", "declared_constructors"]

logger = logging.getLogger(__name__)

_CONSTRUCTOR_MARKER = "__container_constructor__"
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def constructor(target: Any) -> Any:
    """Mark a classmethod as an alternate constructor available for injection.

    May be applied either above or below ``@classmethod``.
    """
    func = target.__func__ if isinstance(target, classmethod) else target
    setattr(func, _CONSTRUCTOR_MARKER, True)
    return target


@dataclass(frozen=True)
class Constructor:
    """A way of building instances of a class.

    Attributes:
        name: ``__init__`` or the name of the marked classmethod.
        target: The callable invoked with the resolved arguments.
        signature_source: The function whose signature and hints describe the parameters.
    """

    name: str
    target: Callable
    signature_source: Optional[Callable]

    @property
    def is_public(self) -> bool:
        return self.name == "__init__" or not self.name.startswith("_")

    @cached_property
    def parameters(self) -> list[inspect.Parameter]:
        if self.signature_source is None:
            return []
        # drop self / cls
        parameters = list(inspect.signature(self.signature_source).parameters.values())[1:]
        return [p for p in parameters if p.kind not in _VARIADIC]

    def dependencies(self) -> list[Dependency]:
        """Describe each parameter as a service request.

        Raises:
            DependencyError: If a parameter has no type annotation.
        """
        if not self.parameters:
            return []
        hints = get_type_hints(self.signature_source, include_extras=True)
        return [_make_dependency(self, hints.get(p.name), p) for p in self.parameters]


def declared_constructors(cls: type) -> list[Constructor]:
    """List the constructors of ``cls`` in declaration order, ``__init__`` first.

    Marked classmethods are only taken from the class's own namespace; those
    inherited from base classes are not constructors of the subclass.
    """
    init = cls.__init__
    constructors = [
        Constructor("__init__", cls, init if inspect.isfunction(init) else None)
    ]
    for name, member in vars(cls).items():
        if isinstance(member, classmethod) and getattr(member.__func__, _CONSTRUCTOR_MARKER, False):
            constructors.append(Constructor(name, getattr(cls, name), member.__func__))
    return constructors


class ConstructorPlan:
    """The constructor and dependencies used to build one implementation type.

    A plan is bound to a registration when it is made; the class is only
    introspected on first use so that forward references can be resolved.
    """

    def __init__(self, implementation: type):
        if not inspect.isclass(implementation):
            raise DependencyError(f"{implementation} is not a class")
        self.implementation = implementation

    @cached_property
    def constructor(self) -> Constructor:
        eligible = [c for c in declared_constructors(self.implementation) if c.is_public]
        # max() keeps the first of equally long candidates
        selected = max(eligible, key=lambda c: len(c.parameters))
        logger.debug(
            "Selected constructor %s of %s with %d parameter(s)",
            selected.name,
            self.implementation.__qualname__,
            len(selected.parameters),
        )
        return selected

    @cached_property
    def dependencies(self) -> list[Dependency]:
        return self.constructor.dependencies()

    def __repr__(self) -> str:
        return f"ConstructorPlan({self.implementation.__qualname__})"


def _make_dependency(owner: Constructor, annotation: Any, parameter: inspect.Parameter) -> Dependency:
    name = parameter.name
    positional_only = parameter.kind is inspect.Parameter.POSITIONAL_ONLY
    if annotation is None:
        raise DependencyError(
            f"Dependency {name} of {_qualname(owner.target)} is not annotated"
        )

    if get_origin(annotation) is Annotated:
        base_type, *metadata = get_args(annotation)
        key = next((m for m in metadata if isinstance(m, str)), None)
        return Dependency(name, base_type, key, positional_only)
    else:
        return Dependency(name, annotation, None, positional_only)


def _qualname(target: Callable) -> str:
    return getattr(target, "__qualname__", None) or repr(target)
