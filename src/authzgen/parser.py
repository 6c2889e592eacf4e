"""Recursive descent parser for authorization schemas.

Grammar:
    program        = definition* EOF
    definition     = "definition" IDENT "{" (relation | permission)* "}"
    relation       = "relation" IDENT ":" relation_expr
    relation_expr  = relation_atom ("|" relation_atom)*
    relation_atom  = IDENT [":*"]
    permission     = "permission" IDENT "=" perm_expr
    perm_expr      = arrow_chain (("+" | "-" | "&") arrow_chain)*
    arrow_chain    = primary ("->" IDENT)*
    primary        = IDENT | "(" perm_expr ")"

Identifiers may contain "/", so "platform/user" arrives as one IDENT token.
"""

import logging
from pathlib import Path

from . import ast
from .errors import AuthzgenError
from .lexer import Lexer, Token, TokenType, filter_comments

logger = logging.getLogger(__name__)


class ParseError(AuthzgenError):
    def __init__(self, msg: str, line: int, column: int):
        super().__init__(f"line {line}, col {column}: {msg}")
        self.line = line
        self.column = column


def _describe(tok: Token) -> str:
    if tok.type is TokenType.EOF:
        return "end of input"
    if tok.type is TokenType.ILLEGAL:
        return f"illegal character {tok.value!r}"
    return f"{tok.type.name} {tok.value!r}"


class Parser:
    """Recursive descent parser with a single token of lookahead."""

    SET_OPERATORS = {
        TokenType.PLUS: "+",
        TokenType.MINUS: "-",
        TokenType.AMPERSAND: "&",
    }

    def __init__(self, tokens: list[Token]):
        if not tokens or tokens[-1].type is not TokenType.EOF:
            raise ValueError("token stream must end with an EOF token")
        self.tokens = tokens
        self.pos = 0

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def at(self, *types: TokenType) -> bool:
        return self.peek().type in types

    def consume(self, ttype: TokenType) -> Token:
        tok = self.peek()
        if tok.type is not ttype:
            raise self._unexpected(ttype.name)
        if tok.type is not TokenType.EOF:
            self.pos += 1
        return tok

    def match(self, *types: TokenType) -> Token | None:
        if self.at(*types):
            return self.consume(self.peek().type)
        return None

    def _unexpected(self, expected: str) -> ParseError:
        tok = self.peek()
        if tok.type is TokenType.CAVEAT:
            return ParseError("caveats are not supported", tok.line, tok.column)
        return ParseError(f"expected {expected}, got {_describe(tok)}", tok.line, tok.column)

    def parse_definitions(self) -> list[ast.Definition]:
        """Parse every definition up to EOF."""
        definitions = []
        while not self.at(TokenType.EOF):
            definitions.append(self.parse_definition())
        self.consume(TokenType.EOF)
        return definitions

    def parse_definition(self) -> ast.Definition:
        self.consume(TokenType.DEFINITION)
        path_tok = self.consume(TokenType.IDENTIFIER)
        object_type = self._object_type(path_tok)
        self.consume(TokenType.LBRACE)

        definition = ast.Definition(object_type=object_type)

        # Relations and permissions interleave freely
        while not self.at(TokenType.RBRACE):
            if self.at(TokenType.RELATION):
                definition.relations.append(self.parse_relation())
            elif self.at(TokenType.PERMISSION):
                definition.permissions.append(self.parse_permission())
            else:
                raise self._unexpected("RELATION, PERMISSION or RBRACE")

        self.consume(TokenType.RBRACE)
        return definition

    def _object_type(self, tok: Token) -> ast.ObjectType:
        if any(not segment for segment in tok.value.split("/")):
            raise ParseError(f"malformed object type {tok.value!r}", tok.line, tok.column)
        return ast.ObjectType.from_path(tok.value)

    def parse_relation(self) -> ast.RelationDecl:
        self.consume(TokenType.RELATION)
        name = self.consume(TokenType.IDENTIFIER).value
        self.consume(TokenType.COLON)
        return ast.RelationDecl(name=name, expr=self.parse_relation_expr())

    def parse_relation_expr(self) -> ast.RelationExpr:
        left: ast.RelationExpr = self.parse_relation_atom()
        while self.match(TokenType.PIPE):
            right = self.parse_relation_atom()
            left = ast.Union(left=left, right=right)
        return left

    def parse_relation_atom(self) -> ast.Single:
        value = self.consume(TokenType.IDENTIFIER).value
        wildcard = self.match(TokenType.WILDCARD) is not None
        return ast.Single(value=value, wildcard=wildcard)

    def parse_permission(self) -> ast.PermissionDecl:
        self.consume(TokenType.PERMISSION)
        name = self.consume(TokenType.IDENTIFIER).value
        self.consume(TokenType.EQUALS)
        return ast.PermissionDecl(name=name, expr=self.parse_permission_expr())

    def parse_permission_expr(self) -> ast.PermissionExpr:
        left = self.parse_arrow_chain()
        while tok := self.match(*self.SET_OPERATORS):
            right = self.parse_arrow_chain()
            left = ast.BinaryOp(op=self.SET_OPERATORS[tok.type], left=left, right=right)
        return left

    def parse_arrow_chain(self) -> ast.PermissionExpr:
        left = self.parse_primary()
        while self.match(TokenType.ARROW):
            target = self.consume(TokenType.IDENTIFIER).value
            left = ast.BinaryOp(op="->", left=left, right=ast.Identifier(value=target))
        return left

    def parse_primary(self) -> ast.PermissionExpr:
        if tok := self.match(TokenType.IDENTIFIER):
            return ast.Identifier(value=tok.value)
        if self.match(TokenType.LPAREN):
            expr = self.parse_permission_expr()
            self.consume(TokenType.RPAREN)
            return expr
        raise self._unexpected("IDENTIFIER or LPAREN")


def parse(source: str) -> list[ast.Definition]:
    """Parse schema source into definitions."""
    tokens = filter_comments(Lexer(source).tokenize())
    parser = Parser(tokens)
    try:
        definitions = parser.parse_definitions()
    except RecursionError as e:
        tok = parser.peek()
        raise ParseError("expression nested too deeply", tok.line, tok.column) from e
    logger.debug("parsed %d definitions", len(definitions))
    return definitions


def parse_file(filepath: str | Path) -> list[ast.Definition]:
    """Parse a schema file."""
    filepath = Path(filepath)
    try:
        source = filepath.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise AuthzgenError(f"cannot read schema {filepath}: {e}") from e
    return parse(source)
