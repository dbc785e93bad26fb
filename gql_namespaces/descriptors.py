"""
Output descriptors produced by the compiler.

These are plain records for an external schema-building layer to consume: the
generated output types, the root and link resolvers that expose the namespace
tree, and one field resolver per registered leaf. CompiledSchema bundles them
with statistics and offers introspection and JSON export.
"""

import json
import os
from dataclasses import dataclass
from typing import Any
from typing import Callable
from typing import Optional
from typing import TypedDict
from typing import Union

from gql_namespaces.kinds import OperationKind
from gql_namespaces.registration import ArgumentBinding
from gql_namespaces.registration import FieldOptions
from gql_namespaces.registration import FieldRegistration
from gql_namespaces.registration import RESOLVER
from gql_namespaces.registration import RETURN_TYPE_PROVIDER
from gql_namespaces.type_cache import OutputType


def resolve_bridge(*_: Any, **__: Any) -> dict[str, Any]:
    """
    Placeholder implementation of root and link resolvers.

    Returns a fresh empty object so that the fields nested below always have a
    non-null parent to resolve against.
    """
    return {}


def describe_callable(callback: Optional[Callable]) -> str:
    """Returns metadata on a callable as a string."""
    if callback is None:
        info = "<none>"

    elif hasattr(callback, "__self__"):
        obj = callback.__self__
        class_name = obj.__name__ if isinstance(obj, type) else obj.__class__.__name__
        info = f"{class_name}.{callback.__name__}"

    elif hasattr(callback, "__qualname__"):
        module = getattr(callback, "__module__", "<unknown>")
        info = f"{module}.{callback.__qualname__}"

    else:
        info = str(callback)

    return info


def describe_type(provider: RETURN_TYPE_PROVIDER) -> str:
    """The name of the type a return type provider yields."""
    output_type = provider()
    if isinstance(output_type, list):
        return f"[{', '.join(getattr(t, '__name__', str(t)) for t in output_type)}]"
    return getattr(output_type, "__name__", str(output_type))


class RegistryStats(TypedDict):
    """Diagnostic counts of a compiled registry."""

    created_types: int
    roots: int
    edges: int
    fields: int
    mappings: int


class NamespaceGroup(TypedDict):
    """Registrations sharing one effective namespace path."""

    mutations: list[FieldRegistration]
    queries: list[FieldRegistration]


@dataclass(frozen=True)
class RootResolverDescriptor(object):
    """Exposes a namespace root directly on the Mutation or Query type."""

    operation_kind: OperationKind
    field_name: str
    """The root field, e.g. 'user'."""

    type_name: str
    """The output type the field returns, e.g. 'UserMutations'."""

    class_name: str
    """Generated resolver name, e.g. 'UserMutationsRootResolver'."""

    resolver: RESOLVER = resolve_bridge


@dataclass(frozen=True)
class LinkResolverDescriptor(object):
    """Exposes a nested namespace as a field on its parent type."""

    operation_kind: OperationKind
    parent_type_name: str
    field_name: str
    child_type_name: str
    segments: tuple[str, ...]
    """The full path of the edge this link was emitted for."""

    class_name: str
    """Generated resolver name, e.g. 'UserMutations_profile_LinkResolver'."""

    resolver: RESOLVER = resolve_bridge


@dataclass(frozen=True)
class FieldResolverDescriptor(object):
    """Attaches one declared leaf field to its namespace type."""

    operation_kind: OperationKind
    owner_type_name: str
    field_name: str
    segments: tuple[str, ...]
    """The effective namespace path after re-parenting."""

    resolver: Optional[RESOLVER]
    return_type_provider: RETURN_TYPE_PROVIDER
    argument_bindings: tuple[ArgumentBinding, ...]
    field_options: FieldOptions

    return_type_inferred: bool = False
    """True when the return type was not given explicitly."""


@dataclass(frozen=True)
class CompiledSchema(object):
    """Everything a compile call produced."""

    types: dict[str, OutputType]
    root_resolvers: tuple[RootResolverDescriptor, ...]
    link_resolvers: tuple[LinkResolverDescriptor, ...]
    field_resolvers: tuple[FieldResolverDescriptor, ...]
    stats: RegistryStats
    namespace_groups: dict[str, NamespaceGroup]

    # -----Introspection-------------------------------------------------------

    def get_type_names(self) -> list[str]:
        return sorted(self.types.keys())

    def get_root_resolver(
        self, operation_kind: OperationKind, field_name: str
    ) -> Optional[RootResolverDescriptor]:
        for root in self.root_resolvers:
            if root.operation_kind == operation_kind and root.field_name == field_name:
                return root
        return None

    def get_link_resolvers_for_type(
        self, parent_type_name: str
    ) -> list[LinkResolverDescriptor]:
        return [
            link
            for link in self.link_resolvers
            if link.parent_type_name == parent_type_name
        ]

    def get_fields_for_type(self, type_name: str) -> list[FieldResolverDescriptor]:
        """
        Get every leaf field resolver attached to a type.

        Args:
            type_name (str): The owner type name.
        Returns:
            list[FieldResolverDescriptor]: In registration order.
        """
        return [
            descriptor
            for descriptor in self.field_resolvers
            if descriptor.owner_type_name == type_name
        ]

    # -----Export--------------------------------------------------------------

    def to_dict(self) -> dict:
        """Convert the compiled schema to a JSON friendly dictionary."""
        roots: dict[str, dict[str, str]] = {}
        for root in self.root_resolvers:
            roots.setdefault(root.operation_kind.value, {})[root.field_name] = (
                root.type_name
            )

        links = [
            {
                "parent": link.parent_type_name,
                "field": link.field_name,
                "child": link.child_type_name,
                "namespace": ".".join(link.segments),
            }
            for link in self.link_resolvers
        ]

        fields: dict[str, dict[str, dict[str, Any]]] = {}
        for descriptor in self.field_resolvers:
            entry: dict[str, Any] = {
                "kind": descriptor.operation_kind.value,
                "resolver": describe_callable(descriptor.resolver),
                "returnType": describe_type(descriptor.return_type_provider),
                "arguments": [b.to_dict() for b in descriptor.argument_bindings],
            }
            options = descriptor.field_options.to_dict()
            if options:
                entry["options"] = options
            fields.setdefault(descriptor.owner_type_name, {})[
                descriptor.field_name
            ] = entry

        return {
            "types": {
                name: list(self.types[name].fields) for name in self.get_type_names()
            },
            "roots": roots,
            "links": links,
            "fields": fields,
            "stats": dict(self.stats),
        }

    def to_string(self) -> str:
        """Returns a string representation of the compiled schema."""
        return json.dumps(self.to_dict(), indent=4)

    def export(self, filepath: Union[str, os.PathLike]) -> None:
        """Export the compiled schema structure to filepath."""
        with open(filepath, "w") as outfile:
            json.dump(self.to_dict(), outfile, indent=4)
