"""
# Namespace Registry

The collection side of the package. A NamespaceRegistry gathers field
registrations and explicit segment mappings from any number of independently
loaded declaration sites, in any order, and hands them over to the compiler as
a single RegistrySnapshot.

Registries are plain objects. Create one per schema build and pass it to the
modules declaring resolvers, or create a fresh one per test.

    >>> registry = NamespaceRegistry()
    >>> @registry.namespace_resolver(field_name="user")
    ... class UserResolver: ...
    >>> schema = GraphCompiler().compile(registry.snapshot())
"""

import weakref
from dataclasses import dataclass
from typing import Iterator
from typing import Optional

from gql_namespaces import declarations
from gql_namespaces import naming
from gql_namespaces.errors import SnapshotConsumedError
from gql_namespaces.kinds import OperationKind
from gql_namespaces.mappings import SegmentMappingTable
from gql_namespaces.registration import FieldRegistration
from gql_namespaces.type_cache import OutputType
from gql_namespaces.type_cache import TypeCache


class FieldRegistry(object):
    """Ordered buffer of raw field registrations."""

    def __init__(self) -> None:
        self._fields: list[FieldRegistration] = []

    def register_field(self, registration: FieldRegistration) -> None:
        """Append a registration. Nothing is validated until compile time."""
        self._fields.append(registration)

    def has_fields_for_namespace(
        self, operation_kind: OperationKind, namespace: str
    ) -> bool:
        """
        Check if any registration of a kind sits exactly at a namespace.

        Args:
            operation_kind (OperationKind): Mutation or Query.
            namespace (str): Dotted namespace, e.g. 'user.profile'.
        Returns:
            bool: True if at least one registration matches.
        """
        path = naming.join_segments(tuple(naming.parse_namespace_segments(namespace)))
        return any(
            registration.operation_kind == operation_kind
            and naming.join_segments(registration.segments) == path
            for registration in self._fields
        )

    def drain(self) -> tuple[FieldRegistration, ...]:
        """Hand over every buffered registration and start a new buffer."""
        fields = tuple(self._fields)
        self._fields = []
        return fields

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[FieldRegistration]:
        return iter(self._fields)


@dataclass
class RegistrySnapshot(object):
    """Everything the compiler needs, handed over once."""

    fields: tuple[FieldRegistration, ...]
    """The drained field registrations, in registration order."""

    mappings: SegmentMappingTable
    """The registry's mapping table, shared by reference."""

    types: TypeCache
    """
    A copy of the registry's type cache taken with the snapshot. The compiler
    attaches fields here, never to the registry's own types.
    """

    consumed: bool = False
    """Set by the compiler. A consumed snapshot cannot be compiled again."""

    def consume(self) -> tuple[FieldRegistration, ...]:
        """
        Mark the snapshot consumed and return its registrations.

        Raises:
            SnapshotConsumedError: If the snapshot was already compiled.
        """
        if self.consumed:
            raise SnapshotConsumedError(
                "Registry snapshot was already compiled. "
                "Take a new snapshot from the registry to compile again."
            )
        self.consumed = True
        return self.fields


class NamespaceRegistry(object):
    """
    Collects nested operation declarations before compilation.

    Use the namespace_resolver decorator on resolver classes, or
    register_field() and set_segment_mapping() directly, then pass
    snapshot() to GraphCompiler.compile().
    """

    def __init__(self) -> None:
        self.types = TypeCache()
        self.mappings = SegmentMappingTable(self.types)
        self.fields = FieldRegistry()
        self._class_default_leaf_type: weakref.WeakKeyDictionary[
            type, dict[OperationKind, str]
        ] = weakref.WeakKeyDictionary()

        self._install_decorators()

    def _install_decorators(self) -> None:
        """Create decorator bindings."""

        self.namespace_resolver = declarations._make_namespace_resolver_decorator(self)
        """
        Class decorator that registers the nested mutations and queries of a
        resolver class under a namespace.

        Args:
            field_name (str): The namespace field, e.g. 'user'.
            type_name (Optional[str]): Explicit output type name, defaults to
                'UserMutations' / 'UserQueries'.
            parent_field_name (Optional[str]): Parent namespace field, nests
                the namespace one level down.
            operation_kind (Optional[OperationKind]): Force every method of
                the class to one operation kind.
        Raises:
            EmptyNamespaceError: If the namespace has no segments.
            ConflictError: If field_name is already mapped under a different
                parent.
        """

    # -----Field Registry------------------------------------------------------

    def register_field(self, registration: FieldRegistration) -> None:
        """Buffer a field registration until the next snapshot."""
        self.fields.register_field(registration)

    def has_fields_for_namespace(
        self, operation_kind: OperationKind, namespace: str
    ) -> bool:
        return self.fields.has_fields_for_namespace(operation_kind, namespace)

    # -----Segment Mappings----------------------------------------------------

    def set_segment_mapping(
        self,
        operation_kind: OperationKind,
        segment: str,
        type_name: str,
        parent_segment: Optional[str] = None,
    ) -> None:
        """
        Map a segment to an output type under a parent segment.

        Raises:
            ConflictError: If the segment is already mapped under a different
                parent.
        """
        self.mappings.set_segment_mapping(
            operation_kind, segment, type_name, parent_segment
        )

    def get_segment_mapping(
        self,
        operation_kind: OperationKind,
        segment: str,
        parent_segment: Optional[str] = None,
    ) -> Optional[str]:
        return self.mappings.get_segment_mapping(operation_kind, segment, parent_segment)

    # -----Types---------------------------------------------------------------

    def get_or_create_object_type(self, name: str) -> OutputType:
        return self.types.get_or_create_object_type(name)

    def set_default_leaf_type_for_class(
        self, cls: type, operation_kind: OperationKind, type_name: str
    ) -> None:
        """Record the namespace type a resolver class's fields resolve into."""
        self._class_default_leaf_type.setdefault(cls, {})[operation_kind] = type_name
        self.types.get_or_create_object_type(type_name)

    def get_default_leaf_type_for_class(
        self, cls: type, operation_kind: OperationKind
    ) -> Optional[str]:
        return self._class_default_leaf_type.get(cls, {}).get(operation_kind)

    # -----Hand Over-----------------------------------------------------------

    def snapshot(self) -> RegistrySnapshot:
        """
        Transfer the buffered registrations to a snapshot for compilation.

        The mapping table is shared with the snapshot. The types created while
        collecting are copied, so every compiled schema owns its types and a
        later compile never changes an earlier one. The registry starts an
        empty field buffer.

        Returns:
            RegistrySnapshot: A one-shot snapshot for GraphCompiler.compile().
        """
        return RegistrySnapshot(
            fields=self.fields.drain(),
            mappings=self.mappings,
            types=self.types.copy(),
        )
