import typing
from collections.abc import Callable, Iterable, Sequence

import pytest

from simple_container.container import Container
from simple_container.errors import ResolutionError
from simple_container.requests import Collection, Producer, request_shape


class Session:
    pass


class Plugin:
    pass


class SpellChecker(Plugin):
    pass


class Autosave(Plugin):
    pass


class Telemetry(Plugin):
    pass


class Editor:
    def __init__(self, new_session: Callable[[], Session], plugins: Sequence[Plugin]):
        self.new_session = new_session
        self.plugins = plugins


@pytest.fixture
def container() -> Container:
    return Container()


@pytest.fixture
def plugins(container) -> Container:
    container.register_per_request(Plugin, SpellChecker)
    container.register_per_request(Plugin, Autosave)
    container.register_per_request(Plugin, Telemetry)
    return container


@pytest.mark.parametrize(
    "service, expected",
    [
        (Callable[[], Session], Producer(Session)),
        (typing.Callable[[], Session], Producer(Session)),
        (Sequence[Plugin], Collection(Plugin, tuple)),
        (typing.Sequence[Plugin], Collection(Plugin, tuple)),
        (Iterable[Plugin], Collection(Plugin, tuple)),
        (tuple[Plugin, ...], Collection(Plugin, tuple)),
        (list[Plugin], Collection(Plugin, list)),
        (Producer(Session), Producer(Session)),
        (Collection(Plugin), Collection(Plugin, tuple)),
    ],
)
def test_request_shapes_are_recognised(service, expected):
    assert request_shape(service) == expected


@pytest.mark.parametrize(
    "service",
    [
        Session,
        Callable[[str], Session],
        tuple[Plugin, Session],
        dict[str, Plugin],
        "session",
        None,
    ],
)
def test_single_value_requests_have_no_shape(service):
    assert request_shape(service) is None


def test_producer_resolves_when_called(container):
    new_session = container.resolve(Callable[[], Session])
    container.register_per_request(Session)

    first = new_session()
    second = new_session()

    assert isinstance(first, Session)
    assert first is not second


def test_producer_fails_when_called_if_nothing_is_registered(container):
    new_session = container.resolve(Producer(Session))

    with pytest.raises(ResolutionError):
        new_session()


def test_producer_is_bound_to_the_container_that_created_it(container):
    container.register_instance(Session, Session())
    child = container.create_child_container()
    child.unregister(Session)
    child_session = Session()
    child.register_instance(Session, child_session)

    assert child.resolve(Callable[[], Session])() is child_session
    assert container.resolve(Callable[[], Session])() is not child_session


def test_collection_contains_every_registration_in_order(plugins):
    resolved = plugins.resolve(Sequence[Plugin])

    assert isinstance(resolved, tuple)
    assert [type(p) for p in resolved] == [SpellChecker, Autosave, Telemetry]


def test_list_collection_is_a_list(plugins):
    resolved = plugins.resolve(list[Plugin])

    assert isinstance(resolved, list)
    assert len(resolved) == 3


def test_explicit_collection_request(plugins):
    assert len(plugins.resolve(Collection(Plugin))) == 3


def test_collection_is_empty_when_nothing_is_registered(container):
    assert container.resolve(Sequence[Plugin]) == ()


def test_registration_takes_precedence_over_shape(plugins):
    chosen = [SpellChecker()]
    plugins.register_instance(Sequence[Plugin], chosen)

    assert plugins.resolve(Sequence[Plugin]) is chosen


def test_shapes_are_injected_into_constructors(plugins):
    plugins.register_per_request(Session)
    plugins.register_per_request(Editor)

    editor = plugins.resolve(Editor)

    assert isinstance(editor.new_session(), Session)
    assert [type(p) for p in editor.plugins] == [SpellChecker, Autosave, Telemetry]


def test_other_generic_requests_are_unresolvable(container):
    with pytest.raises(ResolutionError):
        container.resolve(dict[str, Plugin])
