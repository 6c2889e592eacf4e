"""Runtime types shared by generated modules and authorization engines.

Generated code never holds an engine of its own: every helper takes the
``Engine`` to call as an argument, and the caller owns its lifecycle.

Example:
    from zed.document_gen import Document
    from zed.user_gen import TYPE_USER

    doc = Document(id=ID("readme"))
    doc.create_owner(engine, TYPE_USER, [ID("alice")])
    assert doc.check_view(engine, TYPE_USER, [ID("alice")])
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import NewType, Protocol

Type = NewType("Type", str)
ID = NewType("ID", str)
Relation = NewType("Relation", str)
Permission = NewType("Permission", str)


@dataclass(frozen=True)
class Resource:
    """A single object, e.g. document 'readme'."""

    type: Type
    id: ID

    def __str__(self) -> str:
        return f"{self.type}:{self.id}"


@dataclass(frozen=True)
class Subject:
    """A set of objects of one type."""

    type: Type
    ids: tuple[ID, ...] = field(default_factory=tuple)


class Engine(Protocol):
    """Operations an authorization backend provides to generated code."""

    def create_relations(
        self, to: Resource, relation: Relation, subject: Type, ids: Sequence[ID]
    ) -> None: ...

    def check_permission(
        self, resource: Resource, permission: Permission, subject: Type, ids: Sequence[ID]
    ) -> bool: ...

    def lookup_resources(
        self, resource_type: Type, permission: Permission, subject: Type, ids: Sequence[ID]
    ) -> list[ID]: ...

    def lookup_subjects(
        self, resource: Resource, permission: Permission, subject: Type
    ) -> list[ID]: ...

    def read_relations(
        self, resource: Resource, relation: Relation, subject: Type
    ) -> list[ID]: ...

    def delete_relations(
        self, resource: Resource, relation: Relation, subject: Type, ids: Sequence[ID]
    ) -> None: ...


def ids(values: Iterable[str]) -> list[ID]:
    """Wrap plain strings (or str subtypes) as IDs."""
    return [ID(str(v)) for v in values]


def from_ids(values: Iterable[ID], factory=str) -> list:
    """Convert IDs back into a caller's own id type."""
    return [factory(v) for v in values]
