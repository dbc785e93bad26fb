"""
Operation kinds and argument sources shared by every other module.
"""

from enum import Enum


class OperationKind(str, Enum):
    """The two categories of entry point the namespace graph distinguishes."""

    MUTATION = "Mutation"
    QUERY = "Query"

    @property
    def type_suffix(self) -> str:
        """Suffix appended to default type names, 'Mutations' or 'Queries'."""
        return "Mutations" if self is OperationKind.MUTATION else "Queries"

    @property
    def group_name(self) -> str:
        """Key of the kind in a NamespaceGroup, 'mutations' or 'queries'."""
        return "mutations" if self is OperationKind.MUTATION else "queries"


class ArgumentSource(str, Enum):
    """Where a resolver parameter gets its value from at request time."""

    ROOT = "root"
    CONTEXT = "context"
    INFO = "info"
    ARGS = "args"
