"""
Explicit segment to type mappings.

A namespace class declaration records which output type its segment maps to,
and under which parent segment it lives. The table keeps two indexes:

    (kind, parent, segment) -> type name
    (kind, segment)         -> parent ('' for the root level)

The second index lets the compiler re-parent single segment registrations, and
is also what detects a segment being claimed by two different parents.
"""

from typing import Optional

from gql_namespaces import naming
from gql_namespaces.errors import ConflictError
from gql_namespaces.kinds import OperationKind
from gql_namespaces.type_cache import TypeCache


class SegmentMappingTable(object):
    """Per-kind segment overrides with parent conflict detection."""

    def __init__(self, types: TypeCache) -> None:
        self._types = types
        self._segment_to_type_name: dict[tuple[OperationKind, str, str], str] = {}
        self._leaf_to_parent: dict[tuple[OperationKind, str], str] = {}

    def set_segment_mapping(
        self,
        operation_kind: OperationKind,
        segment: str,
        type_name: str,
        parent_segment: Optional[str] = None,
    ) -> None:
        """
        Map a segment to an output type under a parent segment.

        Calling again with identical arguments is a no-op. Calling again with a
        different type name under the same parent overwrites the type name.
        The named type is created in the type cache immediately.

        Args:
            operation_kind (OperationKind): Mutation or Query.
            segment (str): The segment being mapped.
            type_name (str): The output type the segment resolves to.
            parent_segment (Optional[str]): The parent segment, None for root.
        Raises:
            ConflictError: If the segment is already mapped under a different
                parent for the same operation kind.
        """
        parent = parent_segment or ""
        key = naming.create_segment_mapping_key(operation_kind, segment, parent)
        leaf_parent_key = naming.create_leaf_parent_key(operation_kind, segment)

        existing_parent = self._leaf_to_parent.get(leaf_parent_key)
        if existing_parent is not None and existing_parent != parent:
            raise ConflictError(
                operation_kind.value, segment, existing_parent, parent
            )

        self._segment_to_type_name[key] = type_name
        self._leaf_to_parent[leaf_parent_key] = parent
        self._types.get_or_create_object_type(type_name)

    def get_segment_mapping(
        self,
        operation_kind: OperationKind,
        segment: str,
        parent_segment: Optional[str] = None,
    ) -> Optional[str]:
        """Return the mapped type name, or None if nothing was mapped."""
        key = naming.create_segment_mapping_key(
            operation_kind, segment, parent_segment or ""
        )
        return self._segment_to_type_name.get(key)

    def get_parent_for_leaf(
        self, operation_kind: OperationKind, leaf: str
    ) -> Optional[str]:
        """
        Return the recorded parent of a segment.

        Returns:
            Optional[str]: The parent segment, '' when mapped at the root
                level, or None when the segment was never mapped.
        """
        key = naming.create_leaf_parent_key(operation_kind, leaf)
        return self._leaf_to_parent.get(key)

    def items(self) -> list[tuple[OperationKind, str, str, str]]:
        """All mappings as (kind, parent, segment, type name) tuples."""
        return [
            (kind, parent, segment, type_name)
            for (kind, parent, segment), type_name in self._segment_to_type_name.items()
        ]

    def __len__(self) -> int:
        return len(self._segment_to_type_name)
