"""
Unit tests for compile warnings and their handlers.

Tests verify that ambiguous return types fall back to the default scalar, that
edges without a parent are dropped, and that every built-in warning handler
behaves as documented.
"""

import asyncio
import logging
from typing import Any
from typing import Awaitable
from typing import Optional

import pytest

from gql_namespaces import AmbiguousReturnTypeWarning
from gql_namespaces import DEFAULT_SCALAR
from gql_namespaces import FieldRegistration
from gql_namespaces import GraphCompiler
from gql_namespaces import MissingParentWarning
from gql_namespaces import NamespaceRegistry
from gql_namespaces import handlers
from gql_namespaces.graph import NamespaceEdge
from gql_namespaces.graph import NamespaceGraph
from gql_namespaces.kinds import OperationKind
from gql_namespaces.type_cache import TypeCache


Mutation = OperationKind.MUTATION
Query = OperationKind.QUERY


class Profile(object):
    pass


def _collecting_compiler() -> GraphCompiler:
    handlers.warnings_caught.clear()
    return GraphCompiler(warning_handler=handlers.collect_warning)


def _compile_resolver(compiler: GraphCompiler, resolver: Any) -> Any:
    registry = NamespaceRegistry()
    registry.register_field(
        FieldRegistration(Query, ("user",), "field", resolver=resolver)
    )
    (descriptor,) = compiler.compile(registry.snapshot()).field_resolvers
    return descriptor


# -----Return Type Inference---------------------------------------------------


def test_annotated_return_type_is_inferred() -> None:
    """Test that a concrete return annotation becomes the provider."""
    compiler = _collecting_compiler()

    def resolver() -> Profile:
        return Profile()

    descriptor = _compile_resolver(compiler, resolver)

    assert descriptor.return_type_provider() is Profile
    assert descriptor.return_type_inferred is True
    assert handlers.warnings_caught == []


def test_async_resolver_uses_its_annotation() -> None:
    """Test that async resolvers infer the awaited type they declare."""
    compiler = _collecting_compiler()

    async def resolver() -> Profile:
        return Profile()

    descriptor = _compile_resolver(compiler, resolver)

    assert descriptor.return_type_provider() is Profile
    assert handlers.warnings_caught == []


def test_explicit_provider_skips_inference() -> None:
    """Test that an explicit provider is used even without annotations."""
    compiler = _collecting_compiler()
    registry = NamespaceRegistry()
    registry.register_field(
        FieldRegistration(Query, ("user",), "field", return_type_provider=lambda: int)
    )

    (descriptor,) = compiler.compile(registry.snapshot()).field_resolvers

    assert descriptor.return_type_provider() is int
    assert descriptor.return_type_inferred is False
    assert handlers.warnings_caught == []


def _no_annotation():
    return None


def _any_annotation() -> Any:
    return None


def _none_annotation() -> None:
    return None


def _awaitable_annotation() -> Awaitable[Profile]:
    return asyncio.sleep(0, Profile())


def _future_annotation() -> "asyncio.Future[Profile]":
    return asyncio.Future()


def _unresolvable_annotation() -> "UndefinedProfile":  # noqa: F821
    return None


@pytest.mark.parametrize(
    "resolver",
    [
        _no_annotation,
        _any_annotation,
        _none_annotation,
        _awaitable_annotation,
        _future_annotation,
        _unresolvable_annotation,
        None,
    ],
)
def test_ambiguous_return_type_falls_back(resolver: Optional[Any]) -> None:
    """Test that unusable annotations fall back to the scalar with a warning."""
    compiler = _collecting_compiler()

    descriptor = _compile_resolver(compiler, resolver)

    assert descriptor.return_type_provider() is DEFAULT_SCALAR
    assert descriptor.return_type_inferred is True
    assert len(handlers.warnings_caught) == 1
    caught = handlers.warnings_caught[0]
    assert caught["category"] == "AmbiguousReturnTypeWarning"
    assert isinstance(caught["warning"], AmbiguousReturnTypeWarning)
    assert caught["warning"].field_name == "field"
    assert "please specify the return type explicitly" in caught["message"]


# -----Missing Parents---------------------------------------------------------


def test_edge_without_parent_root_is_dropped() -> None:
    """Test that an edge whose root is missing is skipped with a warning."""
    compiler = _collecting_compiler()
    graph = NamespaceGraph(TypeCache())
    graph.ensure_edge(Query, ["user", "profile"])
    graph.edges.append(NamespaceEdge(Query, ("orphan", "child"), "ChildQueries"))

    links = compiler.emit_link_resolvers(graph)

    assert [link.field_name for link in links] == ["profile"]
    assert len(handlers.warnings_caught) == 1
    warning = handlers.warnings_caught[0]["warning"]
    assert isinstance(warning, MissingParentWarning)
    assert warning.segments == ("orphan", "child")
    assert "Skipping edge for 'orphan.child'" in str(warning)


def test_edge_without_parent_edge_is_dropped() -> None:
    """Test that a deep edge appended without its middle level is skipped."""
    compiler = _collecting_compiler()
    graph = NamespaceGraph(TypeCache())
    graph.ensure_root(Query, "admin")
    graph.edges.append(
        NamespaceEdge(Query, ("admin", "user", "profile"), "ProfileQueries")
    )

    links = compiler.emit_link_resolvers(graph)

    assert links == ()
    assert len(handlers.warnings_caught) == 1
    message = handlers.warnings_caught[0]["message"]
    assert "Skipping edge for 'admin.user.profile'" in message


def test_deep_edge_from_graph_links_every_level() -> None:
    """Test that a deep edge ensured on its own is linked without warnings."""
    compiler = _collecting_compiler()
    graph = NamespaceGraph(TypeCache())
    graph.ensure_edge(Query, ["admin", "user", "profile"])

    links = compiler.emit_link_resolvers(graph)

    assert [(link.parent_type_name, link.field_name) for link in links] == [
        ("AdminQueries", "user"),
        ("UserQueries", "profile"),
    ]
    assert handlers.warnings_caught == []


def test_missing_parent_raises_without_handler() -> None:
    """Test that clearing the handler turns warnings into errors."""
    compiler = GraphCompiler()
    compiler.set_warning_handler(None)
    graph = NamespaceGraph(TypeCache())
    graph.edges.append(NamespaceEdge(Mutation, ("orphan", "child"), "ChildMutations"))

    with pytest.raises(MissingParentWarning, match="orphan"):
        compiler.emit_link_resolvers(graph)


def test_ambiguous_return_type_raises_without_handler() -> None:
    """Test that strict builds fail on ambiguous return types."""
    compiler = GraphCompiler(warning_handler=None)
    registry = NamespaceRegistry()
    registry.register_field(FieldRegistration(Query, ("user",), "field"))

    with pytest.raises(AmbiguousReturnTypeWarning):
        compiler.compile(registry.snapshot())


# -----Handlers----------------------------------------------------------------


def test_default_handler_logs_in_development(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test that the default handler logs a warning outside production."""
    monkeypatch.delenv(handlers.ENVIRONMENT_VARIABLE, raising=False)
    registry = NamespaceRegistry()
    registry.register_field(FieldRegistration(Query, ("user",), "field"))

    with caplog.at_level(logging.WARNING, logger="gql_namespaces.handlers"):
        GraphCompiler().compile(registry.snapshot())

    assert "AmbiguousReturnTypeWarning" in caplog.text
    assert "'field'" in caplog.text


def test_default_handler_is_quiet_in_production(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test that GQL_NAMESPACES_ENV=production silences development warnings."""
    monkeypatch.setenv(handlers.ENVIRONMENT_VARIABLE, "production")
    registry = NamespaceRegistry()
    registry.register_field(FieldRegistration(Query, ("user",), "field"))

    with caplog.at_level(logging.WARNING, logger="gql_namespaces.handlers"):
        schema = GraphCompiler().compile(registry.snapshot())

    assert caplog.text == ""
    assert schema.field_resolvers[0].return_type_provider() is DEFAULT_SCALAR


def test_log_warning_always_ignores_environment(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test that log_warning_always logs even in production."""
    monkeypatch.setenv(handlers.ENVIRONMENT_VARIABLE, "production")

    with caplog.at_level(logging.WARNING, logger="gql_namespaces.handlers"):
        handlers.log_warning_always(MissingParentWarning("lost edge"))

    assert "MissingParentWarning: lost edge" in caplog.text


def test_silent_handler_discards(caplog: pytest.LogCaptureFixture) -> None:
    """Test that the silent handler neither logs nor raises."""
    compiler = GraphCompiler()
    compiler.set_warning_handler(handlers.silent_warning)
    registry = NamespaceRegistry()
    registry.register_field(FieldRegistration(Query, ("user",), "field"))

    with caplog.at_level(logging.WARNING, logger="gql_namespaces.handlers"):
        compiler.compile(registry.snapshot())

    assert caplog.text == ""


def test_is_development() -> None:
    """Test the environment switch itself."""
    with pytest.MonkeyPatch.context() as patch:
        patch.setenv(handlers.ENVIRONMENT_VARIABLE, "Production")
        assert handlers.is_development() is False

        patch.setenv(handlers.ENVIRONMENT_VARIABLE, "staging")
        assert handlers.is_development() is True
