"""AST nodes for authorization schemas."""

from typing import Annotated
from typing import Literal as TypingLiteral

from pydantic import BaseModel, Field


class ObjectType(BaseModel):
    """A possibly namespaced object type (e.g. 'platform/user')."""

    name: str
    prefix: list[str] = []

    def __str__(self) -> str:
        return "/".join([*self.prefix, self.name])

    @classmethod
    def from_path(cls, path: str) -> "ObjectType":
        *prefix, name = path.split("/")
        return cls(name=name, prefix=prefix)


# Relation expressions - the allowed subject types of a relation
class Single(BaseModel):
    """One subject type, e.g. 'platform/user' or 'user:*' when wildcarded."""

    type: TypingLiteral["single"] = "single"
    value: str
    wildcard: bool = False

    def __str__(self) -> str:
        return render_relation(self)


class Union(BaseModel):
    type: TypingLiteral["union"] = "union"
    left: "RelationExpr"
    right: "RelationExpr"

    def __str__(self) -> str:
        return render_relation(self)


RelationExpr = Annotated[Single | Union, Field(discriminator="type")]


# Permission expressions
class Identifier(BaseModel):
    """Reference to a relation or permission of the same definition."""

    type: TypingLiteral["identifier"] = "identifier"
    value: str

    def __str__(self) -> str:
        return render_permission(self)


class BinaryOp(BaseModel):
    type: TypingLiteral["binop"] = "binop"
    op: str  # +, -, &, ->
    left: "PermissionExpr"
    right: "PermissionExpr"

    def __str__(self) -> str:
        return render_permission(self)


PermissionExpr = Annotated[Identifier | BinaryOp, Field(discriminator="type")]

SET_OPERATORS = ("+", "-", "&")
ARROW = "->"


# Declarations
class RelationDecl(BaseModel):
    name: str
    expr: RelationExpr

    def __str__(self) -> str:
        return f"relation {self.name}: {self.expr}"


class PermissionDecl(BaseModel):
    name: str
    expr: PermissionExpr

    def __str__(self) -> str:
        return f"permission {self.name} = {self.expr}"


class Definition(BaseModel):
    """A parsed ``definition`` block, in source order."""

    object_type: ObjectType
    relations: list[RelationDecl] = []
    permissions: list[PermissionDecl] = []

    def __str__(self) -> str:
        lines = [f"definition {self.object_type} {{"]
        lines.extend(f"    {rel}" for rel in self.relations)
        lines.extend(f"    {perm}" for perm in self.permissions)
        lines.append("}")
        return "\n".join(lines)


def render_relation(expr: Single | Union) -> str:
    """Render a relation expression back to schema syntax."""
    match expr:
        case Single(value=value, wildcard=wildcard):
            return f"{value}:*" if wildcard else value
        case Union(left=left, right=right):
            rhs = render_relation(right)
            if isinstance(right, Union):
                rhs = f"({rhs})"
            return f"{render_relation(left)} | {rhs}"
    raise TypeError(f"not a relation expression: {expr!r}")


def render_permission(expr: Identifier | BinaryOp) -> str:
    """Render a permission expression back to schema syntax.

    Parentheses are only added where dropping them would change the tree.
    """
    match expr:
        case Identifier(value=value):
            return value
        case BinaryOp(op="->", left=left, right=right):
            lhs = render_permission(left)
            if isinstance(left, BinaryOp) and left.op in SET_OPERATORS:
                lhs = f"({lhs})"
            return f"{lhs}->{render_permission(right)}"
        case BinaryOp(op=op, left=left, right=right):
            rhs = render_permission(right)
            if isinstance(right, BinaryOp) and right.op in SET_OPERATORS:
                rhs = f"({rhs})"
            return f"{render_permission(left)} {op} {rhs}"
    raise TypeError(f"not a permission expression: {expr!r}")


# Rebuild models for forward references
Union.model_rebuild()
BinaryOp.model_rebuild()
RelationDecl.model_rebuild()
PermissionDecl.model_rebuild()
Definition.model_rebuild()
