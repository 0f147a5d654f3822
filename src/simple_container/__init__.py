"""Simple dependency resolution container.

A small service locator for presentation-layer applications: services are
registered against a type (optionally qualified by a string key) with a
lifetime, and resolved on demand with their constructor dependencies
injected from their type hints.

Key Features:
    - Singleton, per-request, instance and custom handler registrations
    - Constructor injection using standard type hints, with ``Annotated`` keys
    - Producers (``Callable[[], T]``) and collections (``Sequence[T]``) of
      services resolved without registering them
    - Child containers seeded from a snapshot of their parent
    - A global ``IoC`` facade for framework collaborators

Basic Usage:
    >>> from simple_container.container import Container
    >>>
    >>> container = Container()
    >>> container.register_singleton(EventAggregator)
    >>> container.register_per_request(ShellViewModel)
    >>>
    >>> shell = container.resolve(ShellViewModel)

The package consists of several modules:
    - container: Registration, resolution and child scoping
    - constructors: Constructor discovery for constructor injection
    - requests: Producer and collection request shapes
    - factories: The factory behind each registration strategy
    - entry_set: Ordered registration storage and lookup
    - domain: Core domain models (RegistrationEntry, Dependency, Lifetime)
    - service_locator: The ServiceLocator protocol and IoC facade
    - errors: Container-specific exceptions
"""
