"""
Exceptions and warnings raised while collecting and compiling namespaces.

Exceptions are fatal and propagate out of the declaration or compile call that
triggered them. Warnings are non-fatal: the compiler hands them to its warning
handler (see gql_namespaces.handlers) and carries on.
"""

from typing import Optional


# -----Exceptions--------------------------------------------------------------


class GqlNamespaceError(Exception):
    """Base class for fatal namespace errors."""


class ConflictError(GqlNamespaceError):
    """Raised when a segment is re-mapped under a different parent segment."""

    def __init__(
        self,
        operation_kind: str,
        segment: str,
        existing_parent: str,
        new_parent: str,
    ) -> None:
        self.operation_kind = operation_kind
        self.segment = segment
        self.existing_parent = existing_parent
        self.new_parent = new_parent
        super().__init__(
            f"{operation_kind} segment '{segment}' is already mapped under "
            f"'{existing_parent or '<root>'}', "
            f"cannot map it under '{new_parent or '<root>'}'"
        )


class EmptyNamespaceError(GqlNamespaceError, ValueError):
    """Raised when a namespace declaration normalizes to zero segments."""


class SnapshotConsumedError(GqlNamespaceError):
    """Raised when a registry snapshot is compiled more than once."""


# -----Warnings----------------------------------------------------------------


class MissingParentWarning(UserWarning):
    """An edge was dropped because its parent type could not be found."""

    def __init__(self, message: str, segments: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.segments = segments


class AmbiguousReturnTypeWarning(UserWarning):
    """A field's return type could not be inferred and fell back to a scalar."""

    def __init__(self, message: str, field_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.field_name = field_name
