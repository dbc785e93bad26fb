"""
# GraphQL Namespaces

Nested namespace support for GraphQL mutations and queries.

Resolver classes declare the namespace they live in and the operations they
expose. A NamespaceRegistry collects those declarations from however many
modules define them, in any order, and a GraphCompiler turns them into a
normalized tree of output types plus the root, link and field resolver
descriptors a schema builder needs to expose `mutation { user { createUser } }`
style operations.

    >>> from gql_namespaces import GraphCompiler, NamespaceRegistry, nested_mutation
    >>> registry = NamespaceRegistry()
    >>> @registry.namespace_resolver(field_name="user")
    ... class UserResolver:
    ...     @nested_mutation(lambda: bool)
    ...     def create_user(self, name: str) -> bool: ...
    >>> schema = GraphCompiler().compile(registry.snapshot())
    >>> schema.to_dict()["roots"]
    {'Mutation': {'user': 'UserMutations'}}

For a complete breakdown of the package, read the project readme.
"""

from gql_namespaces import handlers
from gql_namespaces.compiler import DEFAULT_SCALAR
from gql_namespaces.compiler import GraphCompiler
from gql_namespaces.declarations import Args
from gql_namespaces.declarations import Context
from gql_namespaces.declarations import Info
from gql_namespaces.declarations import Root
from gql_namespaces.declarations import nested_mutation
from gql_namespaces.declarations import nested_query
from gql_namespaces.descriptors import CompiledSchema
from gql_namespaces.descriptors import FieldResolverDescriptor
from gql_namespaces.descriptors import LinkResolverDescriptor
from gql_namespaces.descriptors import RegistryStats
from gql_namespaces.descriptors import RootResolverDescriptor
from gql_namespaces.errors import AmbiguousReturnTypeWarning
from gql_namespaces.errors import ConflictError
from gql_namespaces.errors import EmptyNamespaceError
from gql_namespaces.errors import GqlNamespaceError
from gql_namespaces.errors import MissingParentWarning
from gql_namespaces.errors import SnapshotConsumedError
from gql_namespaces.graph import NamespaceEdge
from gql_namespaces.graph import NamespaceGraph
from gql_namespaces.graph import NamespaceRoot
from gql_namespaces.kinds import ArgumentSource
from gql_namespaces.kinds import OperationKind
from gql_namespaces.mappings import SegmentMappingTable
from gql_namespaces.registration import ArgumentBinding
from gql_namespaces.registration import FieldOptions
from gql_namespaces.registration import FieldRegistration
from gql_namespaces.registry import FieldRegistry
from gql_namespaces.registry import NamespaceRegistry
from gql_namespaces.registry import RegistrySnapshot
from gql_namespaces.type_cache import OutputType
from gql_namespaces.type_cache import TypeCache


version_major = 1
version_minor = 0
version_patch = 0
__version__ = f"{version_major}.{version_minor}.{version_patch}"

Mutation = OperationKind.MUTATION
Query = OperationKind.QUERY


__all__ = [
    "AmbiguousReturnTypeWarning",
    "ArgumentBinding",
    "ArgumentSource",
    "Args",
    "CompiledSchema",
    "ConflictError",
    "Context",
    "DEFAULT_SCALAR",
    "EmptyNamespaceError",
    "FieldOptions",
    "FieldRegistration",
    "FieldRegistry",
    "FieldResolverDescriptor",
    "GqlNamespaceError",
    "GraphCompiler",
    "Info",
    "LinkResolverDescriptor",
    "MissingParentWarning",
    "Mutation",
    "NamespaceEdge",
    "NamespaceGraph",
    "NamespaceRegistry",
    "NamespaceRoot",
    "OperationKind",
    "OutputType",
    "Query",
    "RegistrySnapshot",
    "RegistryStats",
    "Root",
    "RootResolverDescriptor",
    "SegmentMappingTable",
    "SnapshotConsumedError",
    "TypeCache",
    "handlers",
    "nested_mutation",
    "nested_query",
]
