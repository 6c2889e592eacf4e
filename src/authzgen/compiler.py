"""Compiler: normalizes parsed definitions into the model the generators use.

Relation expressions are flattened into the ordered list of subject types
they allow. Permission expressions are kept as trees; generators walk them.
"""

import logging
from collections.abc import Iterator

from pydantic import BaseModel

from . import ast
from .errors import AuthzgenError

logger = logging.getLogger(__name__)


class CompileError(AuthzgenError):
    pass


class NormalizedDefinition(BaseModel):
    """A definition keyed for code generation."""

    name: str
    prefixes: list[str] = []
    relations: dict[str, list[str]] = {}  # relation name -> subject types
    permissions: list[ast.PermissionDecl] = []

    @property
    def object_type(self) -> ast.ObjectType:
        return ast.ObjectType(name=self.name, prefix=list(self.prefixes))

    @property
    def path(self) -> str:
        """Canonical '/'-joined object type, e.g. 'platform/user'."""
        return str(self.object_type)


def flatten_relation(expr: ast.RelationExpr) -> list[str]:
    """Subject types of a relation expression, left to right."""
    # Unions nest one level per "|", so walk with an explicit stack
    subjects: list[str] = []
    stack: list[ast.RelationExpr] = [expr]
    while stack:
        node = stack.pop()
        match node:
            case ast.Single():
                subjects.append(ast.render_relation(node))
            case ast.Union(left=left, right=right):
                stack.append(right)
                stack.append(left)
            case _:
                raise TypeError(f"not a relation expression: {node!r}")
    return subjects


def walk_identifiers(expr: ast.PermissionExpr) -> Iterator[str]:
    """Yield every identifier referenced by a permission expression."""
    match expr:
        case ast.Identifier(value=value):
            yield value
        case ast.BinaryOp(left=left, right=right):
            yield from walk_identifiers(left)
            yield from walk_identifiers(right)


class Compiler:
    """Compiles parsed definitions into normalized definitions."""

    def __init__(self, definitions: list[ast.Definition]):
        self.definitions = definitions

    def compile(self) -> dict[str, NormalizedDefinition]:
        result: dict[str, NormalizedDefinition] = {}

        for definition in self.definitions:
            normalized = self._normalize(definition)
            if normalized.name in result:
                existing = result[normalized.name]
                raise CompileError(
                    f"definitions {existing.path!r} and {normalized.path!r} "
                    f"both normalize to {normalized.name!r}"
                )
            result[normalized.name] = normalized

        logger.debug("normalized %d definitions", len(result))
        return result

    def _normalize(self, definition: ast.Definition) -> NormalizedDefinition:
        path = str(definition.object_type)
        relations: dict[str, list[str]] = {}
        for rel in definition.relations:
            if rel.name in relations:
                raise CompileError(f"duplicate relation {rel.name!r} in {path!r}")
            relations[rel.name] = flatten_relation(rel.expr)

        seen: set[str] = set()
        for perm in definition.permissions:
            if perm.name in seen:
                raise CompileError(f"duplicate permission {perm.name!r} in {path!r}")
            seen.add(perm.name)

        return NormalizedDefinition(
            name=definition.object_type.name,
            prefixes=list(definition.object_type.prefix),
            relations=relations,
            permissions=list(definition.permissions),
        )
