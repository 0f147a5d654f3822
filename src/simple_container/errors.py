from typing import Any, Optional

__all__ = ["DependencyError", "ResolutionError", "CircularDependencyError"]


class DependencyError(Exception):
    """Raised when a service cannot be registered or built, or is misannotated."""

    pass


class ResolutionError(DependencyError):
    """Raised when no registration or request shape can satisfy a request.

    Attributes:
        service: The requested service identity, or None for a key-only request.
        key: The requested registration key.
    """

    def __init__(self, service: Any, key: Optional[str]):
        if service is None:
            message = f"Could not locate an instance for key '{key}'."
        else:
            message = (
                f"Could not locate an instance for type '{_describe(service)}' and key {key!r}."
            )
        super().__init__(message)
        self.service = service
        self.key = key


class CircularDependencyError(DependencyError):
    """Raised when nested resolution exceeds the container's configured max_depth."""

    def __init__(self, service: Any, depth: int):
        super().__init__(
            f"Resolution of '{_describe(service)}' exceeded maximum depth {depth}; "
            "the dependency graph is probably circular."
        )
        self.service = service
        self.depth = depth


def _describe(service: Any) -> str:
    if isinstance(service, type):
        return service.__qualname__
    return str(service)

