"""
# Graph Compiler

Turns a RegistrySnapshot into a CompiledSchema in a single pass:

1. Normalize each registration's path. A single segment with a recorded
   parent becomes [parent, segment].
2. Group registrations by effective path, for statistics.
3. Ensure the root of the path, honoring an explicit root type mapping.
4. For nested paths, ensure an edge for every prefix down to the leaf's
   container. An explicit segment mapping always wins over the default type
   name.
5. Emit one root resolver per root, one link resolver per edge and one field
   resolver per registration.

Problems that do not invalidate the rest of the schema are reported through
the compiler's warning handler instead of raised, see gql_namespaces.handlers.
"""

import asyncio
import collections.abc
import logging
import typing
from typing import Any
from typing import Optional
from typing import Sequence

from gql_namespaces import handlers
from gql_namespaces import naming
from gql_namespaces.descriptors import CompiledSchema
from gql_namespaces.descriptors import FieldResolverDescriptor
from gql_namespaces.descriptors import LinkResolverDescriptor
from gql_namespaces.descriptors import NamespaceGroup
from gql_namespaces.descriptors import RegistryStats
from gql_namespaces.descriptors import RootResolverDescriptor
from gql_namespaces.errors import AmbiguousReturnTypeWarning
from gql_namespaces.errors import MissingParentWarning
from gql_namespaces.graph import NamespaceGraph
from gql_namespaces.kinds import OperationKind
from gql_namespaces.mappings import SegmentMappingTable
from gql_namespaces.registration import FieldRegistration
from gql_namespaces.registration import RETURN_TYPE_PROVIDER
from gql_namespaces.registry import RegistrySnapshot


logger = logging.getLogger(__name__)


DEFAULT_SCALAR = str
"""The return type used when none is given and none can be inferred."""

_AWAITABLE_MARKERS = (
    collections.abc.Awaitable,
    collections.abc.Coroutine,
    asyncio.Future,
)

_MISSING = object()


class PlannedField(typing.NamedTuple):
    """A registration together with where the compiler placed it."""

    registration: FieldRegistration
    segments: tuple[str, ...]
    owner_type_name: str


class GraphCompiler(object):
    """
    Compiles registry snapshots into root, link and field resolver descriptors.

    A compiler keeps the graph of its last compile call in `graph` for
    inspection. Each snapshot can be compiled once.
    """

    def __init__(
        self, warning_handler: Optional[handlers.WARNING_HANDLER] = handlers.log_warning
    ) -> None:
        self._warning_handler = warning_handler
        self.graph: Optional[NamespaceGraph] = None

    def set_warning_handler(
        self, handler: Optional[handlers.WARNING_HANDLER]
    ) -> None:
        """
        Set the handler for non-fatal compile warnings.

        Args:
            Optional[handlers.WARNING_HANDLER]:
                Callable with signature (Warning) -> None.
                Pass None to raise warnings as errors instead.
        """
        self._warning_handler = handler

    def _warn(self, warning: Warning) -> None:
        if self._warning_handler is None:
            raise warning

        self._warning_handler(warning)

    # -----Compile-------------------------------------------------------------

    def compile(self, snapshot: RegistrySnapshot) -> CompiledSchema:
        """
        Build the namespace graph and every resolver descriptor.

        Args:
            snapshot (RegistrySnapshot): Taken with NamespaceRegistry.snapshot().
        Returns:
            CompiledSchema: Types, root/link/field resolvers and statistics.
        Raises:
            SnapshotConsumedError: If the snapshot was already compiled.
        """
        fields = snapshot.consume()
        graph = NamespaceGraph(snapshot.types)
        self.graph = graph

        planned, groups = self.build_graph(graph, snapshot.mappings, fields)

        root_resolvers = self.emit_root_resolvers(graph)
        link_resolvers = self.emit_link_resolvers(graph)
        field_resolvers = self.emit_field_resolvers(graph, planned)

        stats = RegistryStats(
            created_types=len(snapshot.types),
            roots=len(graph.roots),
            edges=len(graph.edges),
            fields=len(fields),
            mappings=len(snapshot.mappings),
        )
        logger.debug(f"Compiled namespace graph: {stats}")

        return CompiledSchema(
            types={output_type.name: output_type for output_type in snapshot.types},
            root_resolvers=root_resolvers,
            link_resolvers=link_resolvers,
            field_resolvers=field_resolvers,
            stats=stats,
            namespace_groups=groups,
        )

    # -----Graph Building------------------------------------------------------

    @staticmethod
    def normalize_segments(
        mappings: SegmentMappingTable, registration: FieldRegistration
    ) -> tuple[str, ...]:
        """Re-parent a single segment path through the mapping table."""
        segments = tuple(registration.segments)
        if len(segments) != 1:
            return segments

        leaf = segments[0]
        parent = mappings.get_parent_for_leaf(registration.operation_kind, leaf)
        if parent:
            return parent, leaf

        return segments

    @staticmethod
    def _target_type_name(
        mappings: SegmentMappingTable,
        operation_kind: OperationKind,
        segments: Sequence[str],
    ) -> str:
        mapped = mappings.get_segment_mapping(operation_kind, segments[-1], segments[-2])
        return mapped or naming.create_default_type_name(segments[-1], operation_kind)

    def build_graph(
        self,
        graph: NamespaceGraph,
        mappings: SegmentMappingTable,
        fields: Sequence[FieldRegistration],
    ) -> tuple[list[PlannedField], dict[str, NamespaceGroup]]:
        """
        Grow the graph from registrations and decide each field's owner type.

        Args:
            graph (NamespaceGraph): The graph to grow.
            mappings (SegmentMappingTable): Explicit segment mappings.
            fields (Sequence[FieldRegistration]): Registrations, in order.
        Returns:
            tuple: The placed fields and the registrations grouped by
                effective namespace path.
        """
        planned: list[PlannedField] = []
        groups: dict[str, NamespaceGroup] = {}

        for registration in fields:
            kind = registration.operation_kind
            segments = self.normalize_segments(mappings, registration)

            group = groups.setdefault(
                naming.join_segments(segments), NamespaceGroup(mutations=[], queries=[])
            )
            group[kind.group_name].append(registration)

            root = graph.ensure_root(
                kind, segments[0], mappings.get_segment_mapping(kind, segments[0])
            )
            owner_type_name = root.type_name

            for depth in range(2, len(segments) + 1):
                prefix = segments[:depth]
                owner_type_name = self._target_type_name(mappings, kind, prefix)
                graph.ensure_edge(kind, prefix, owner_type_name)

            planned.append(PlannedField(registration, segments, owner_type_name))

        return planned, groups

    # -----Emission------------------------------------------------------------

    @staticmethod
    def emit_root_resolvers(
        graph: NamespaceGraph,
    ) -> tuple[RootResolverDescriptor, ...]:
        return tuple(
            RootResolverDescriptor(
                operation_kind=root.operation_kind,
                field_name=root.root_name,
                type_name=root.type_name,
                class_name=naming.create_resolver_class_name(
                    root.type_name, "RootResolver"
                ),
            )
            for root in graph.roots.values()
        )

    @staticmethod
    def _find_parent_type_name(
        graph: NamespaceGraph,
        operation_kind: OperationKind,
        parent_segments: tuple[str, ...],
    ) -> Optional[str]:
        if len(parent_segments) == 1:
            root = graph.get_root(operation_kind, parent_segments[0])
            return root.type_name if root is not None else None

        parent_edge = graph.find_edge(operation_kind, parent_segments)
        return parent_edge.target_type_name if parent_edge is not None else None

    def emit_link_resolvers(
        self, graph: NamespaceGraph
    ) -> tuple[LinkResolverDescriptor, ...]:
        """
        Emit a link resolver per edge.

        Edges whose parent cannot be found are dropped with a
        MissingParentWarning rather than failing the build.
        """
        links = []
        for edge in graph.edges:
            parent_segments = edge.parent_segments
            if not parent_segments:
                continue

            parent_type_name = self._find_parent_type_name(
                graph, edge.operation_kind, parent_segments
            )
            if parent_type_name is None:
                path = naming.join_segments(edge.segments)
                self._warn(
                    MissingParentWarning(
                        f"Parent of {edge.operation_kind.value} namespace "
                        f"'{naming.join_segments(parent_segments)}' not found. "
                        f"Skipping edge for '{path}'",
                        segments=edge.segments,
                    )
                )
                continue

            links.append(
                LinkResolverDescriptor(
                    operation_kind=edge.operation_kind,
                    parent_type_name=parent_type_name,
                    field_name=edge.field_name,
                    child_type_name=edge.target_type_name,
                    segments=edge.segments,
                    class_name=naming.create_link_resolver_class_name(
                        parent_type_name, edge.field_name
                    ),
                )
            )
            graph.types.get_or_create_object_type(parent_type_name).add_field(
                edge.field_name
            )

        return tuple(links)

    def emit_field_resolvers(
        self, graph: NamespaceGraph, planned: Sequence[PlannedField]
    ) -> tuple[FieldResolverDescriptor, ...]:
        descriptors = []
        for placed in planned:
            registration = placed.registration
            provider, inferred = self.resolve_return_type(registration)

            descriptors.append(
                FieldResolverDescriptor(
                    operation_kind=registration.operation_kind,
                    owner_type_name=placed.owner_type_name,
                    field_name=registration.field_name,
                    segments=placed.segments,
                    resolver=registration.resolver,
                    return_type_provider=provider,
                    argument_bindings=registration.argument_bindings,
                    field_options=registration.field_options,
                    return_type_inferred=inferred,
                )
            )
            graph.types.get_or_create_object_type(placed.owner_type_name).add_field(
                registration.field_name
            )

        return tuple(descriptors)

    # -----Return Types--------------------------------------------------------

    def resolve_return_type(
        self, registration: FieldRegistration
    ) -> tuple[RETURN_TYPE_PROVIDER, bool]:
        """
        Get the return type provider of a registration.

        The explicit provider wins. Otherwise the resolver's return annotation
        is used, unless it is missing, Any, None or an awaitable marker, in
        which case the field falls back to DEFAULT_SCALAR with a warning.

        Returns:
            tuple[Callable[[], Any], bool]: The provider, and whether it was
                inferred rather than given.
        """
        if registration.return_type_provider is not None:
            return registration.return_type_provider, False

        annotation = _MISSING
        reason = "it has no return annotation"
        if registration.resolver is not None:
            try:
                hints = typing.get_type_hints(registration.resolver)
            except (NameError, TypeError) as e:
                reason = f"its return annotation cannot be resolved ({e})"
            else:
                annotation = hints.get("return", _MISSING)

        if annotation is not _MISSING:
            if self._is_ambiguous(annotation):
                reason = f"its return annotation '{annotation}' is not a concrete type"
            else:
                return (lambda: annotation), True

        self._warn(
            AmbiguousReturnTypeWarning(
                f"Cannot infer the return type of {registration.operation_kind.value} "
                f"field '{registration.field_name}' because {reason}. "
                f"Falling back to '{DEFAULT_SCALAR.__name__}', "
                f"please specify the return type explicitly.",
                field_name=registration.field_name,
            )
        )
        return (lambda: DEFAULT_SCALAR), True

    @staticmethod
    def _is_ambiguous(annotation: Any) -> bool:
        if annotation is Any or annotation is type(None):
            return True

        origin = typing.get_origin(annotation) or annotation
        return isinstance(origin, type) and issubclass(origin, _AWAITABLE_MARKERS)
