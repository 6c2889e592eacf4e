"""Code generators for different targets."""

from .python import Generator, TemplateError, build_view, generate_python, module_filename
from .writer import write_sources

__all__ = [
    "Generator",
    "TemplateError",
    "build_view",
    "generate_python",
    "module_filename",
    "write_sources",
]
