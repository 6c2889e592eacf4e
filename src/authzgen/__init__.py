"""authzgen: compile authorization schemas into typed Python modules.

Pipeline: scan schema -> parse definitions -> normalize -> render modules.

Example:
    from authzgen import generate, write_sources

    sources = generate(open("schema.zed").read())
    write_sources(sources, "app/authz/zed")
"""

__version__ = "0.1.0"

from .ast import (
    BinaryOp,
    Definition,
    Identifier,
    ObjectType,
    PermissionDecl,
    PermissionExpr,
    RelationDecl,
    RelationExpr,
    Single,
    Union,
)
from .codegen import Generator, TemplateError, generate_python, write_sources
from .compiler import CompileError, Compiler, NormalizedDefinition, flatten_relation
from .config import CodegenConfig, ConfigError, load_config
from .errors import AuthzgenError
from .lexer import Lexer, Token, TokenType, filter_comments, tokenize
from .parser import ParseError, Parser, parse, parse_file


def compile(definitions: list[Definition]) -> dict[str, NormalizedDefinition]:  # noqa: A001
    """Normalize parsed definitions, keyed by definition name."""
    return Compiler(definitions).compile()


def generate(
    source: str,
    config: CodegenConfig | None = None,
    template_source: str | None = None,
) -> dict[str, str]:
    """Run the whole pipeline on schema source. Returns {filename: module source}."""
    model = compile(parse(source))
    return Generator(model, config, template_source=template_source).generate()


__all__ = [
    # Scan
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    "filter_comments",
    # Parse
    "parse",
    "parse_file",
    "Parser",
    "ParseError",
    # AST
    "ObjectType",
    "Definition",
    "RelationDecl",
    "PermissionDecl",
    "RelationExpr",
    "PermissionExpr",
    "Single",
    "Union",
    "Identifier",
    "BinaryOp",
    # Compile
    "compile",
    "Compiler",
    "CompileError",
    "NormalizedDefinition",
    "flatten_relation",
    # Codegen
    "generate",
    "generate_python",
    "Generator",
    "TemplateError",
    "write_sources",
    # Config
    "CodegenConfig",
    "ConfigError",
    "load_config",
    # Errors
    "AuthzgenError",
]
