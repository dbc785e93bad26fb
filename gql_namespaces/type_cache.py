"""
Identity preserving cache of generated output types.

Every caller asking for a type name receives the same OutputType instance, so
fields attached by different declaration sites accumulate on a single type.
"""

import logging
from dataclasses import dataclass
from dataclasses import field
from typing import Iterator
from typing import Optional


logger = logging.getLogger(__name__)


@dataclass(eq=False)
class OutputType(object):
    """A generated GraphQL object type."""

    name: str
    """The type name as it appears in the schema."""

    fields: list[str] = field(default_factory=list)
    """Field names attached to the type, in attachment order."""

    def add_field(self, field_name: str) -> None:
        """Attach a field name once, keeping the first attachment's position."""
        if field_name not in self.fields:
            self.fields.append(field_name)


class TypeCache(object):
    """Maps type names to their single OutputType instance."""

    def __init__(self) -> None:
        self._types: dict[str, OutputType] = {}

    def get_or_create_object_type(self, name: str) -> OutputType:
        """
        Get the cached type for a name, creating an empty one if missing.

        Args:
            name (str): The type name.
        Returns:
            OutputType: The one instance cached under the name.
        """
        existing = self._types.get(name)
        if existing is not None:
            return existing

        output_type = OutputType(name=name)
        self._types[name] = output_type
        logger.debug(f"Created output type '{name}'")
        return output_type

    def copy(self) -> "TypeCache":
        """
        Create an independent cache holding new instances of every type.

        Each copied type starts with the fields of its original. Attaching
        fields to one cache never shows up in the other.

        Returns:
            TypeCache: A cache with the same names, in the same order.
        """
        copied = TypeCache()
        for output_type in self._types.values():
            copied._types[output_type.name] = OutputType(
                name=output_type.name, fields=list(output_type.fields)
            )
        return copied

    def get(self, name: str) -> Optional[OutputType]:
        return self._types.get(name)

    def names(self) -> list[str]:
        """All cached type names, in creation order."""
        return list(self._types.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[OutputType]:
        return iter(self._types.values())
