"""
Naming rules for namespaces and generated types.

Every generated name in the compiled schema comes from here, so the same
declarations always produce the same type and resolver names regardless of the
order in which they were collected.
"""

import re

from gql_namespaces.kinds import OperationKind


_KEBAB_SEGMENT = re.compile(r"-([a-z])")


def normalize_namespace_name(name: str) -> str:
    """
    Convert PascalCase or kebab-case to camelCase.

    Examples:
        >>> normalize_namespace_name("UserAdmin")
        'userAdmin'
        >>> normalize_namespace_name("user-admin")
        'userAdmin'
    """
    if not name:
        return name
    head = name[0].lower() + name[1:]
    return _KEBAB_SEGMENT.sub(lambda match: match.group(1).upper(), head)


def pascal_case(value: str) -> str:
    """Upper-case the first character, leaving the rest untouched."""
    return value[:1].upper() + value[1:]


def create_default_type_name(segment: str, operation_kind: OperationKind) -> str:
    """
    Create the default type name for a segment.

    Args:
        segment (str): The namespace segment, e.g. 'user' or 'user-admin'.
        operation_kind (OperationKind): Mutation or Query.
    Returns:
        str: e.g. 'UserMutations' or 'UserAdminQueries'.
    """
    return f"{pascal_case(normalize_namespace_name(segment))}{operation_kind.type_suffix}"


def create_resolver_class_name(type_name: str, suffix: str = "Resolver") -> str:
    return f"{type_name}{suffix}"


def create_link_resolver_class_name(parent_type_name: str, field_name: str) -> str:
    return f"{parent_type_name}_{field_name}_LinkResolver"


def parse_namespace_segments(namespace: str) -> list[str]:
    """Split a dotted namespace, dropping empty segments."""
    return [segment for segment in namespace.split(".") if segment]


def join_segments(segments: tuple[str, ...]) -> str:
    return ".".join(segments)


# -----Registry Keys-----------------------------------------------------------


def create_segment_mapping_key(
    operation_kind: OperationKind, segment: str, parent_segment: str = ""
) -> tuple[OperationKind, str, str]:
    return operation_kind, parent_segment or "", segment


def create_leaf_parent_key(
    operation_kind: OperationKind, leaf: str
) -> tuple[OperationKind, str]:
    return operation_kind, leaf


def create_root_key(
    operation_kind: OperationKind, root_name: str
) -> tuple[OperationKind, str]:
    return operation_kind, normalize_namespace_name(root_name)
