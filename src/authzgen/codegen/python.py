"""Python code generator.

Renders one module per normalized definition from a Jinja2 template. The
template only sees plain view objects; every name it emits is computed
here so that output is valid Python and collision free for any schema.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, PackageLoader, StrictUndefined, Template
from jinja2 import TemplateError as JinjaTemplateError

from .. import naming
from ..compiler import CompileError, NormalizedDefinition
from ..config import CodegenConfig
from ..errors import AuthzgenError

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "object.py.j2"
FILENAME_SUFFIX = "_gen"


class TemplateError(AuthzgenError):
    """The template failed to load or render for a definition."""

    def __init__(self, msg: str, path: str):
        super().__init__(f"{path}: {msg}")
        self.path = path


@dataclass
class RelationView:
    name: str
    const: str
    method: str
    subject_types: list[str]


@dataclass
class PermissionView:
    name: str
    const: str
    method: str
    expression: str


@dataclass
class ObjectView:
    path: str
    name: str
    class_name: str
    type_const: str
    relations: list[RelationView]
    permissions: list[PermissionView]
    header: str | None = None


def module_filename(definition: NormalizedDefinition, suffix: str = ".py") -> str:
    """File name for a definition, e.g. 'user_gen.py' for platform/user."""
    return naming.package_name(definition.name) + FILENAME_SUFFIX + suffix


def build_view(definition: NormalizedDefinition, header: str | None = None) -> ObjectView:
    """Compute every identifier the template needs for one definition."""
    prefix = naming.constant_name(definition.name)
    type_const = naming.constant_name("type", definition.name)

    rel_names = list(definition.relations)
    perm_names = [perm.name for perm in definition.permissions]

    # Role qualification keeps relation and permission constants apart;
    # unique_names settles anything sanitizing still merges.
    consts = naming.unique_names(
        [naming.constant_name(prefix, "relation", n) for n in rel_names]
        + [naming.constant_name(prefix, "permission", n) for n in perm_names],
        taken={type_const},
    )
    rel_methods = naming.unique_names([naming.python_identifier(n.lower()) for n in rel_names])
    perm_methods = naming.unique_names([naming.python_identifier(n.lower()) for n in perm_names])

    relations = [
        RelationView(
            name=name,
            const=consts[i],
            method=rel_methods[i],
            subject_types=definition.relations[name],
        )
        for i, name in enumerate(rel_names)
    ]
    permissions = [
        PermissionView(
            name=perm.name,
            const=consts[len(rel_names) + i],
            method=perm_methods[i],
            expression=str(perm.expr),
        )
        for i, perm in enumerate(definition.permissions)
    ]

    return ObjectView(
        path=definition.path,
        name=definition.name,
        class_name=naming.python_identifier(naming.type_name(definition.path)),
        type_const=type_const,
        relations=relations,
        permissions=permissions,
        header=header,
    )


def create_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("authzgen.codegen", "templates"),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["quote"] = naming.quote
    return env


class Generator:
    """Renders normalized definitions into Python modules."""

    def __init__(
        self,
        definitions: dict[str, NormalizedDefinition],
        config: CodegenConfig | None = None,
        template_source: str | None = None,
    ):
        self.definitions = definitions
        self.config = config or CodegenConfig()
        self.template_source = template_source
        self.env = create_environment()
        self._template: Template | None = None

    def _load_template(self) -> Template:
        if self._template is None:
            if self.template_source is not None:
                self._template = self.env.from_string(self.template_source)
            elif self.config.template is not None:
                source = Path(self.config.template).read_text(encoding="utf-8")
                self._template = self.env.from_string(source)
            else:
                self._template = self.env.get_template(DEFAULT_TEMPLATE)
        return self._template

    def render(self, definition: NormalizedDefinition) -> str:
        try:
            view = build_view(definition, header=self.config.header)
        except RecursionError as e:
            raise CompileError(f"expression in {definition.path!r} is nested too deeply") from e
        try:
            return self._load_template().render(obj=view)
        except (JinjaTemplateError, OSError, UnicodeDecodeError) as e:
            raise TemplateError(f"template failed: {e}", definition.path) from e

    def generate(self) -> dict[str, str]:
        """Render every definition. Returns {filename: source}."""
        sources: dict[str, str] = {}
        owners: dict[str, str] = {}

        for definition in self.definitions.values():
            filename = module_filename(definition, self.config.suffix)
            if filename in owners:
                raise CompileError(
                    f"definitions {owners[filename]!r} and {definition.path!r} "
                    f"would both be written to {filename}"
                )
            owners[filename] = definition.path
            sources[filename] = self.render(definition)
            logger.debug("rendered %s -> %s", definition.path, filename)

        return sources


def generate_python(
    definitions: dict[str, NormalizedDefinition],
    config: CodegenConfig | None = None,
) -> dict[str, str]:
    """Generate Python modules for normalized definitions."""
    return Generator(definitions, config).generate()
