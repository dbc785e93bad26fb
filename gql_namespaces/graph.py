"""
The namespace graph: roots and the edges hanging off them.

A root is the first segment of a path and becomes a field directly on the
Mutation or Query type. An edge links the type of a path's parent to the type
named by the path's last segment. Both are created lazily and deduplicated, so
the same declarations may be fed in any order and any number of times.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from typing import Sequence

from gql_namespaces import naming
from gql_namespaces.kinds import OperationKind
from gql_namespaces.type_cache import TypeCache


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NamespaceRoot(object):
    """A top level namespace field for one operation kind."""

    operation_kind: OperationKind
    root_name: str
    """The normalized root field name, e.g. 'user'."""

    type_name: str
    """The output type the root field resolves to, e.g. 'UserMutations'."""


@dataclass(frozen=True)
class NamespaceEdge(object):
    """A parent type to child type link for a path of two or more segments."""

    operation_kind: OperationKind
    segments: tuple[str, ...]
    """Full path from the root down to the child segment."""

    target_type_name: str
    """The output type the last segment resolves to."""

    @property
    def field_name(self) -> str:
        return self.segments[-1]

    @property
    def parent_segments(self) -> tuple[str, ...]:
        return self.segments[:-1]

    def same_as(self, other: "NamespaceEdge") -> bool:
        """Kind, joined path and target type all match."""
        return (
            self.operation_kind == other.operation_kind
            and naming.join_segments(self.segments)
            == naming.join_segments(other.segments)
            and self.target_type_name == other.target_type_name
        )


class NamespaceGraph(object):
    """Roots keyed by (kind, normalized name) plus an ordered edge list."""

    def __init__(self, types: TypeCache) -> None:
        self.types = types
        self.roots: dict[tuple[OperationKind, str], NamespaceRoot] = {}
        self.edges: list[NamespaceEdge] = []

    def ensure_root(
        self,
        operation_kind: OperationKind,
        root_name: str,
        type_name: Optional[str] = None,
    ) -> NamespaceRoot:
        """
        Get or create the root for a name.

        The first type name a root is created with is kept for good, later
        calls with a different type name return the existing root unchanged.

        Args:
            operation_kind (OperationKind): Mutation or Query.
            root_name (str): The root segment, normalized to camelCase.
            type_name (Optional[str]): Explicit type name, defaults to
                PascalCase(root_name) + 'Mutations' / 'Queries'.
        Returns:
            NamespaceRoot: The root for (operation_kind, root_name).
        """
        normalized = naming.normalize_namespace_name(root_name)
        key = naming.create_root_key(operation_kind, normalized)

        existing = self.roots.get(key)
        if existing is not None:
            return existing

        resolved_type_name = type_name or naming.create_default_type_name(
            normalized, operation_kind
        )
        self.types.get_or_create_object_type(resolved_type_name)

        root = NamespaceRoot(
            operation_kind=operation_kind,
            root_name=normalized,
            type_name=resolved_type_name,
        )
        self.roots[key] = root
        logger.debug(
            f"Created {operation_kind.value} root '{normalized}' -> '{resolved_type_name}'"
        )
        return root

    def get_root(
        self, operation_kind: OperationKind, root_name: str
    ) -> Optional[NamespaceRoot]:
        return self.roots.get(naming.create_root_key(operation_kind, root_name))

    def ensure_edge(
        self,
        operation_kind: OperationKind,
        segments: Sequence[str],
        target_type_name: Optional[str] = None,
    ) -> Optional[NamespaceEdge]:
        """
        Ensure the root of a path exists and, for nested paths, its edge.

        A single segment path is a field on the root type itself and records
        no edge. For paths deeper than two segments every missing prefix edge
        is created first with its default type name, so each level of the path
        links to the one above it. Prefixes that already have an edge are left
        as they are.

        Args:
            operation_kind (OperationKind): Mutation or Query.
            segments (Sequence[str]): Full path from the root.
            target_type_name (Optional[str]): Type of the last segment,
                defaults to the last segment's default type name.
        Returns:
            Optional[NamespaceEdge]: The stored edge, or None when no edge
                applies to the path.
        """
        if len(segments) < 1:
            return None

        self.ensure_root(operation_kind, segments[0])

        if len(segments) == 1:
            return None

        for depth in range(2, len(segments)):
            prefix = tuple(segments[:depth])
            if self.find_edge(operation_kind, prefix) is None:
                self.ensure_edge(operation_kind, prefix)

        final_type_name = target_type_name or naming.create_default_type_name(
            segments[-1], operation_kind
        )
        self.types.get_or_create_object_type(final_type_name)

        new_edge = NamespaceEdge(
            operation_kind=operation_kind,
            segments=tuple(segments),
            target_type_name=final_type_name,
        )
        for edge in self.edges:
            if edge.same_as(new_edge):
                return edge

        self.edges.append(new_edge)
        logger.debug(
            f"Created {operation_kind.value} edge "
            f"'{naming.join_segments(new_edge.segments)}' -> '{final_type_name}'"
        )
        return new_edge

    def find_edge(
        self, operation_kind: OperationKind, segments: Sequence[str]
    ) -> Optional[NamespaceEdge]:
        """
        The first edge recorded for an exact path, regardless of target.

        A path ensured with several targets keeps all of its edges, but deeper
        edges always hang off the first one recorded, so the parent of a nested
        link follows registration order.
        """
        path = naming.join_segments(tuple(segments))
        for edge in self.edges:
            if (
                edge.operation_kind == operation_kind
                and naming.join_segments(edge.segments) == path
            ):
                return edge
        return None
