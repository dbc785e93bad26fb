"""
Field registration data structures and type definitions.

Defines the FieldRegistration dataclass which records one declared nested
operation: its kind, the namespace path it lives under, the field name, an
optional return type provider, the argument bindings of its parameters and the
pass-through GraphQL field options. Registrations are immutable once created
and carry everything the compiler and the external schema layer need, so
nothing has to be re-derived from the resolver later.
"""

from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Callable
from typing import Literal
from typing import Optional
from typing import Union

from gql_namespaces.errors import EmptyNamespaceError
from gql_namespaces.kinds import ArgumentSource
from gql_namespaces.kinds import OperationKind


RETURN_TYPE_PROVIDER = Callable[[], Any]
"""
A zero argument callable returning the GraphQL output type of a field, e.g.
`lambda: User`. Deferred so types can reference each other before they are
defined.
"""

RESOLVER = Callable[..., Any]
"""The user implementation of a leaf field. Can be sync or async."""

NULLABLE = Union[bool, Literal["items", "itemsAndList"]]
"""Nullability of a field, a list's items, or both items and list."""

_NULLABLE_STRINGS = ("items", "itemsAndList")


@dataclass(frozen=True)
class ArgumentBinding(object):
    """Where a single resolver parameter takes its value from."""

    source: ArgumentSource
    """Root value, request context, resolve info, or a named argument."""

    key: Optional[str] = None
    """Argument name for ARGS bindings. None binds the whole args mapping."""

    parameter: Optional[str] = None
    """The resolver parameter this binding feeds."""

    def to_dict(self) -> dict[str, Optional[str]]:
        return {
            "source": self.source.value,
            "key": self.key,
            "parameter": self.parameter,
        }


@dataclass(frozen=True)
class FieldOptions(object):
    """Standard GraphQL field options passed through to the schema layer."""

    description: Optional[str] = None
    deprecation_reason: Optional[str] = None
    complexity: Optional[int] = None
    nullable: Optional[NULLABLE] = None
    middleware: tuple[Callable[..., Any], ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.nullable, str) and self.nullable not in _NULLABLE_STRINGS:
            raise ValueError(
                f"nullable must be a bool, 'items' or 'itemsAndList', "
                f"got '{self.nullable}'"
            )
        if self.complexity is not None and self.complexity < 0:
            raise ValueError(f"complexity cannot be negative, got {self.complexity}")

    def to_dict(self) -> dict[str, Any]:
        """Only the options that were actually set."""
        data: dict[str, Any] = {}
        if self.description is not None:
            data["description"] = self.description
        if self.deprecation_reason is not None:
            data["deprecationReason"] = self.deprecation_reason
        if self.complexity is not None:
            data["complexity"] = self.complexity
        if self.nullable is not None:
            data["nullable"] = self.nullable
        if self.middleware:
            data["middleware"] = [
                getattr(m, "__qualname__", repr(m)) for m in self.middleware
            ]
        return data


@dataclass(frozen=True)
class FieldRegistration(object):
    """One declared nested operation, as collected before compilation."""

    operation_kind: OperationKind
    """Mutation or Query."""

    segments: tuple[str, ...]
    """
    The namespace path the field is declared under, e.g. ('user',) or
    ('user', 'profile'). Single segments may be re-parented by the compiler
    through the segment mapping table.
    """

    field_name: str
    """The leaf field name exposed in the schema."""

    return_type_provider: Optional[RETURN_TYPE_PROVIDER] = None
    """Explicit return type. None means infer from the resolver annotation."""

    argument_bindings: tuple[ArgumentBinding, ...] = ()
    """Bindings for each resolver parameter, in declaration order."""

    field_options: FieldOptions = field(default_factory=FieldOptions)
    """Pass-through GraphQL field options."""

    resolver: Optional[RESOLVER] = None
    """The implementation that resolves the leaf field."""

    owner: Optional[type] = None
    """The class the resolver was declared on, if any."""

    def __post_init__(self) -> None:
        # Accept lists from callers but store an immutable path.
        object.__setattr__(self, "segments", tuple(self.segments))
        if not self.segments:
            raise EmptyNamespaceError(
                f"Field '{self.field_name}' must be registered under at least one segment"
            )
        object.__setattr__(self, "argument_bindings", tuple(self.argument_bindings))

    @property
    def namespace(self) -> str:
        """The dotted form of the declared path."""
        return ".".join(self.segments)
