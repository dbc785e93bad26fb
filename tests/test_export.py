"""
Unit tests for compiled schema introspection and export.

Tests verify that the compiled schema converts to a JSON friendly dictionary
and that export writes the same structure to disk.
"""

import json
from pathlib import Path
from typing import Annotated

from gql_namespaces import Args
from gql_namespaces import Context
from gql_namespaces import GraphCompiler
from gql_namespaces import NamespaceRegistry
from gql_namespaces import handlers
from gql_namespaces import nested_mutation
from gql_namespaces import nested_query
from gql_namespaces.kinds import OperationKind


def _audit(next_: object, root: object, info: object, **kwargs: object) -> object:
    return next_(root, info, **kwargs)


def _build_schema():
    registry = NamespaceRegistry()

    @registry.namespace_resolver(field_name="user")
    class UserResolver:
        @nested_mutation(
            lambda: bool,
            description="Create a user",
            deprecation_reason="Use register",
            middleware=[_audit],
        )
        def createUser(self, name: Annotated[str, Args("name")], ctx=Context()) -> bool:
            return True

        @nested_query(nullable="items")
        def friends(self) -> list:
            return []

    @registry.namespace_resolver(field_name="settings", parent_field_name="user")
    class SettingsResolver:
        @nested_mutation()
        def reset(self) -> bool:
            return True

    compiler = GraphCompiler(warning_handler=handlers.silent_warning)
    return compiler.compile(registry.snapshot())


def test_to_dict_structure() -> None:
    """Test the dictionary form of a compiled schema."""
    data = _build_schema().to_dict()

    assert data["roots"] == {
        "Mutation": {"user": "UserMutations"},
        "Query": {"user": "UserQueries"},
    }
    assert data["links"] == [
        {
            "parent": "UserMutations",
            "field": "settings",
            "child": "SettingsMutations",
            "namespace": "user.settings",
        }
    ]
    assert data["types"] == {
        "SettingsMutations": ["reset"],
        "UserMutations": ["settings", "createUser"],
        "UserQueries": ["friends"],
    }
    assert data["stats"] == {
        "created_types": 3,
        "roots": 2,
        "edges": 1,
        "fields": 3,
        "mappings": 3,
    }


def test_to_dict_field_entries() -> None:
    """Test that field entries carry resolver, type, arguments and options."""
    fields = _build_schema().to_dict()["fields"]

    create_user = fields["UserMutations"]["createUser"]
    assert create_user["kind"] == "Mutation"
    assert create_user["resolver"].endswith("UserResolver.createUser")
    assert create_user["returnType"] == "bool"
    assert create_user["arguments"] == [
        {"source": "args", "key": "name", "parameter": "name"},
        {"source": "context", "key": None, "parameter": "ctx"},
    ]
    assert create_user["options"] == {
        "description": "Create a user",
        "deprecationReason": "Use register",
        "middleware": ["_audit"],
    }

    friends = fields["UserQueries"]["friends"]
    assert friends["returnType"] == "list"
    assert friends["options"] == {"nullable": "items"}

    assert "options" not in fields["SettingsMutations"]["reset"]


def test_to_string_is_json() -> None:
    """Test that to_string returns indented JSON of to_dict."""
    schema = _build_schema()

    assert json.loads(schema.to_string()) == schema.to_dict()
    assert schema.to_string().startswith("{\n    ")


def test_export_creates_valid_json_file(tmp_path: Path) -> None:
    """Test that export writes the dictionary form to disk."""
    schema = _build_schema()
    output_file = tmp_path / "schema.json"

    schema.export(output_file)

    assert output_file.exists()
    with open(output_file) as f:
        data = json.load(f)
    assert data == schema.to_dict()


def test_export_with_string_path(tmp_path: Path) -> None:
    """Test that export accepts string paths."""
    output_file = str(tmp_path / "schema.json")

    _build_schema().export(output_file)

    assert Path(output_file).exists()


def test_introspection_helpers() -> None:
    """Test the lookup helpers of a compiled schema."""
    schema = _build_schema()

    assert schema.get_type_names() == [
        "SettingsMutations",
        "UserMutations",
        "UserQueries",
    ]
    assert schema.get_root_resolver(OperationKind.QUERY, "user").type_name == "UserQueries"
    assert schema.get_root_resolver(OperationKind.QUERY, "settings") is None
    assert [d.field_name for d in schema.get_fields_for_type("UserMutations")] == [
        "createUser"
    ]
    assert schema.get_link_resolvers_for_type("UserQueries") == []
