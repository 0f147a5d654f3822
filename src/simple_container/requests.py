"""Structural request shapes the container can satisfy without a registration.

A caller may ask for a *producer* of ``T`` (a zero-argument function which
resolves ``T`` when called) or for an ordered *collection* of every ``T``.
Either shape can be requested explicitly with :class:`Producer` and
:class:`Collection`, or through the equivalent type hints, which lets
constructor parameters declare them naturally::

    def __init__(self, make_session: Callable[[], Session], plugins: Sequence[Plugin]):
        ...
"""

import collections.abc
from dataclasses import dataclass
from typing import Any, Optional, Union, get_args, get_origin

__all__ = ["Producer", "Collection", "RequestShape", "request_shape"]


@dataclass(frozen=True)
class Producer:
    """Request for a zero-argument callable that resolves ``service`` on each call."""

    service: Any


@dataclass(frozen=True)
class Collection:
    """Request for every registered instance of ``service``, in registration order.

    Attributes:
        service: The element service identity.
        container_type: The sequence type the instances are returned in.
    """

    service: Any
    container_type: type = tuple


RequestShape = Union[Producer, Collection]


_COLLECTION_ORIGINS: dict[Any, type] = {
    list: list,
    collections.abc.Sequence: tuple,
    collections.abc.Collection: tuple,
    collections.abc.Iterable: tuple,
}


def request_shape(service: Any) -> Optional[RequestShape]:
    """Recognise a producer or collection request from a service identity.

    Args:
        service: The requested service identity.

    Returns:
        The request shape, or None when the service is a plain single-value request.

    Example:
        >>> request_shape(Callable[[], Database])   # Producer(Database)
        >>> request_shape(Sequence[Plugin])         # Collection(Plugin, tuple)
        >>> request_shape(list[Plugin])             # Collection(Plugin, list)
        >>> request_shape(Database)                 # None
    """
    if isinstance(service, (Producer, Collection)):
        return service

    origin = get_origin(service)
    if origin is None:
        return None
    args = get_args(service)

    if origin is collections.abc.Callable:
        if len(args) == 2 and args[0] == []:
            return Producer(args[1])
        return None

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return Collection(args[0], tuple)
        return None

    if origin in _COLLECTION_ORIGINS and len(args) == 1:
        return Collection(args[0], _COLLECTION_ORIGINS[origin])

    return None
