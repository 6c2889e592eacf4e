"""Code generation settings.

Settings come from defaults, an optional YAML file, then CLI flags:

    # authzgen.yaml
    output_dir: app/authz/zed
    suffix: .py
    template: templates/object.py.j2
    header: "Generated from schema.zed"
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import AuthzgenError


class ConfigError(AuthzgenError):
    pass


class CodegenConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    output_dir: Path = Path("zed")
    suffix: str = ".py"
    template: Path | None = None  # custom Jinja2 template, bundled one if None
    header: str | None = None  # extra comment line at the top of every unit

    @field_validator("header")
    @classmethod
    def validate_header(cls, v: str | None) -> str | None:
        """The header is emitted as one comment line."""
        if v is not None and ("\n" in v or "\r" in v):
            raise ValueError("header must be a single line")
        return v


def load_config(path: str | Path) -> CodegenConfig:
    """Load settings from a YAML file."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"config {path} must be a mapping")

    try:
        return CodegenConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"invalid config {path}: {e}") from e
