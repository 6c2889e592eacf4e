"""Command-line entry point.

Usage:
    authzgen schema.zed
    authzgen --output app/authz/zed schema.zed
    authzgen --config authzgen.yaml --template custom.py.j2 -v schema.zed
"""

import argparse
import logging
import sys
from pathlib import Path

from . import compile, parse
from .codegen import Generator, write_sources
from .config import CodegenConfig, load_config
from .errors import AuthzgenError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="authzgen",
        description="Generate typed Python modules from an authorization schema",
    )
    parser.add_argument("schema", type=Path, help="Schema file to compile")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Directory for generated files (default: zed)",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML settings file")
    parser.add_argument("--template", type=Path, default=None, help="Custom Jinja2 template")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def run(args: argparse.Namespace) -> list[Path]:
    config = load_config(args.config) if args.config else CodegenConfig()
    overrides = {}
    if args.output is not None:
        overrides["output_dir"] = args.output
    if args.template is not None:
        overrides["template"] = args.template
    if overrides:
        config = config.model_copy(update=overrides)

    try:
        source = args.schema.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise AuthzgenError(f"cannot read schema {args.schema}: {e}") from e

    definitions = parse(source)
    sources = Generator(compile(definitions), config).generate()
    return write_sources(sources, config.output_dir)


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        written = run(args)
    except AuthzgenError as e:
        print(f"Error: {args.schema}: {e}", file=sys.stderr)
        sys.exit(1)

    for path in written:
        print(f"  wrote {path}")
    print(f"Generated {len(written)} files")
    sys.exit(0)


if __name__ == "__main__":
    main()
