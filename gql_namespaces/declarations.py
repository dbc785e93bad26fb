"""
Declaration decorators for nested mutations and queries.

Method decorators (nested_mutation, nested_query) only tag the function with
its declaration. The class decorator, created per registry by
_make_namespace_resolver_decorator(), reads the tags, records the class's
segment mapping for every operation kind it declares and registers one field
per tagged method. Argument bindings are read from the method signature once,
here, and travel with the registration as plain data.

Example:
    >>> registry = NamespaceRegistry()
    ...
    >>> @registry.namespace_resolver(field_name="user")
    ... class UserResolver:
    ...     @nested_mutation(lambda: bool)
    ...     def create_user(self, name: Annotated[str, Args("name")]) -> bool:
    ...         ...
    ...
    ...     @nested_query(name="profile")
    ...     async def get_profile(self, ctx=Context()) -> Profile:
    ...         ...
"""

import inspect
import typing
from dataclasses import dataclass
from dataclasses import replace
from typing import TYPE_CHECKING
from typing import Any
from typing import Callable
from typing import Optional
from typing import Sequence

from gql_namespaces import naming
from gql_namespaces.errors import EmptyNamespaceError
from gql_namespaces.kinds import ArgumentSource
from gql_namespaces.kinds import OperationKind
from gql_namespaces.registration import ArgumentBinding
from gql_namespaces.registration import FieldOptions
from gql_namespaces.registration import FieldRegistration
from gql_namespaces.registration import NULLABLE
from gql_namespaces.registration import RESOLVER
from gql_namespaces.registration import RETURN_TYPE_PROVIDER

if TYPE_CHECKING:
    from gql_namespaces.registry import NamespaceRegistry


DECLARATIONS_ATTRIBUTE = "__nested_operations__"
"""Attribute the method decorators store their declarations under."""

_SKIPPED_PARAMETERS = ("self", "cls")


# -----Argument Binding Markers------------------------------------------------


def Root() -> ArgumentBinding:
    """Bind the parent value the field is resolved against."""
    return ArgumentBinding(ArgumentSource.ROOT)


def Context() -> ArgumentBinding:
    """Bind the request context."""
    return ArgumentBinding(ArgumentSource.CONTEXT)


def Info() -> ArgumentBinding:
    """Bind the resolve info."""
    return ArgumentBinding(ArgumentSource.INFO)


def Args(key: Optional[str] = None) -> ArgumentBinding:
    """Bind one named field argument, or the whole argument mapping."""
    return ArgumentBinding(ArgumentSource.ARGS, key)


def _binding_from_annotation(annotation: Any) -> Optional[ArgumentBinding]:
    if typing.get_origin(annotation) is not typing.Annotated:
        return None

    for metadata in annotation.__metadata__:
        if isinstance(metadata, ArgumentBinding):
            return metadata

    return None


def capture_argument_bindings(func: Callable[..., Any]) -> tuple[ArgumentBinding, ...]:
    """
    Read the argument bindings of every parameter of a resolver.

    Bindings come from typing.Annotated metadata or from the parameter
    default. Unmarked parameters bind to the field argument of the same name,
    **kwargs binds to the whole argument mapping, *args and self/cls are
    skipped.

    Args:
        func (Callable): The resolver function.
    Returns:
        tuple[ArgumentBinding, ...]: One binding per bound parameter, in
            declaration order.
    """
    try:
        hints = typing.get_type_hints(func, include_extras=True)
    except NameError:
        # Forward references to classes not defined yet, fall back to the raw
        # annotations, which still carry Annotated metadata when not strings.
        hints = {}

    bindings = []
    for index, (name, param) in enumerate(inspect.signature(func).parameters.items()):
        if index == 0 and name in _SKIPPED_PARAMETERS:
            continue
        if param.kind == inspect.Parameter.VAR_POSITIONAL:
            continue
        if param.kind == inspect.Parameter.VAR_KEYWORD:
            bindings.append(ArgumentBinding(ArgumentSource.ARGS, None, name))
            continue

        annotation = hints.get(name, param.annotation)
        binding = _binding_from_annotation(annotation)
        if binding is None and isinstance(param.default, ArgumentBinding):
            binding = param.default
        if binding is None:
            binding = ArgumentBinding(ArgumentSource.ARGS, name)

        bindings.append(replace(binding, parameter=name))

    return tuple(bindings)


# -----Method Decorators-------------------------------------------------------


@dataclass(frozen=True)
class MethodDeclaration(object):
    """What a nested_mutation / nested_query decorator recorded on a method."""

    operation_kind: OperationKind
    field_name: Optional[str]
    """Explicit field name, None to use the method name."""

    return_type_provider: Optional[RETURN_TYPE_PROVIDER]
    field_options: FieldOptions


def _make_method_decorator(operation_kind: OperationKind) -> Callable:
    """
    Create a method decorator for one operation kind.

    nested_mutation and nested_query only differ in the kind they record, this
    builds both from the same closure.
    """

    def nested_operation(
        return_type: Optional[RETURN_TYPE_PROVIDER] = None,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        deprecation_reason: Optional[str] = None,
        complexity: Optional[int] = None,
        middleware: Optional[Sequence[Callable[..., Any]]] = None,
        nullable: Optional[NULLABLE] = None,
    ) -> Callable[[RESOLVER], RESOLVER]:
        declaration = MethodDeclaration(
            operation_kind=operation_kind,
            field_name=name,
            return_type_provider=return_type,
            field_options=FieldOptions(
                description=description,
                deprecation_reason=deprecation_reason,
                complexity=complexity,
                nullable=nullable,
                middleware=tuple(middleware or ()),
            ),
        )

        def decorator(func: RESOLVER) -> RESOLVER:
            target = getattr(func, "__func__", func)
            existing = list(getattr(target, DECLARATIONS_ATTRIBUTE, ()))
            existing.append(declaration)
            setattr(target, DECLARATIONS_ATTRIBUTE, tuple(existing))
            return func

        return decorator

    nested_operation.__name__ = f"nested_{operation_kind.value.lower()}"
    return nested_operation


nested_mutation = _make_method_decorator(OperationKind.MUTATION)
"""
Declare a method as a mutation inside its class's namespace.

Args:
    return_type (Optional[Callable[[], Any]]): Provider of the return type,
        e.g. `lambda: User`. Inferred from the annotation when omitted.
    name (Optional[str]): Field name, defaults to the method name.
    description, deprecation_reason, complexity, middleware, nullable:
        Standard GraphQL field options, passed through untouched.
"""

nested_query = _make_method_decorator(OperationKind.QUERY)
"""Declare a method as a query inside its class's namespace. See nested_mutation."""


def get_method_declarations(cls: type) -> list[tuple[str, Callable[..., Any], MethodDeclaration]]:
    """
    Get the tagged methods declared directly on a class.

    Returns:
        list[tuple[str, Callable, MethodDeclaration]]: (attribute name,
            resolver, declaration) in class body order.
    """
    found = []
    for attribute, value in vars(cls).items():
        func = getattr(value, "__func__", value)
        for declaration in getattr(func, DECLARATIONS_ATTRIBUTE, ()):
            found.append((attribute, getattr(cls, attribute), declaration))

    return found


# -----Class Decorator---------------------------------------------------------


def _make_namespace_resolver_decorator(registry: "NamespaceRegistry") -> Callable:
    """
    Create a namespace_resolver decorator with access to a registry.

    This exists as a function accepting the registry as an argument so every
    registry gets its own decorator and declarations never land in shared
    module state.
    """

    def namespace_resolver(
        field_name: str,
        type_name: Optional[str] = None,
        parent_field_name: Optional[str] = None,
        operation_kind: Optional[OperationKind] = None,
    ) -> Callable[[type], type]:
        def decorator(cls: type) -> type:
            namespace = (
                f"{parent_field_name}.{field_name}" if parent_field_name else field_name
            )
            segments = naming.parse_namespace_segments(namespace or "")
            if not segments:
                raise EmptyNamespaceError(
                    f"namespace_resolver on '{cls.__name__}' requires a non-empty namespace"
                )

            methods = get_method_declarations(cls)

            def kind_of(declaration: MethodDeclaration) -> OperationKind:
                return operation_kind or declaration.operation_kind

            declared_kinds = {kind_of(declaration) for _, _, declaration in methods}
            for kind in OperationKind:
                if kind not in declared_kinds:
                    continue

                final_type_name = type_name or naming.create_default_type_name(
                    field_name, kind
                )
                if field_name:
                    registry.set_segment_mapping(
                        kind, field_name, final_type_name, parent_field_name
                    )
                registry.set_default_leaf_type_for_class(cls, kind, final_type_name)

            for attribute, resolver, declaration in methods:
                registry.register_field(
                    FieldRegistration(
                        operation_kind=kind_of(declaration),
                        segments=tuple(segments),
                        field_name=declaration.field_name or attribute,
                        return_type_provider=declaration.return_type_provider,
                        argument_bindings=capture_argument_bindings(resolver),
                        field_options=declaration.field_options,
                        resolver=resolver,
                        owner=cls,
                    )
                )

            return cls

        return decorator

    return namespace_resolver
