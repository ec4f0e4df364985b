"""Template loader for the Jinja2 prompt templates.

Prompt templates ship as package data under ``sketchforge/prompts/templates``.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

if TYPE_CHECKING:
    from jinja2 import Template

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


class TemplateLoader:
    """Loads and caches Jinja2 prompt templates.

    Prompts are plain text, so autoescaping is off. Undefined variables raise
    instead of rendering as empty strings.

    Attributes:
        template_dirs: Directories searched, in order
        env: Jinja2 Environment with configured loaders and caching
    """

    def __init__(self, template_dir: Path | None = None) -> None:
        """Initialize the template loader.

        Args:
            template_dir: Directory containing ``*.j2`` templates.
                Defaults to the templates shipped with the package.
        """
        self.template_dirs = [template_dir or DEFAULT_TEMPLATE_DIR]

        loader = FileSystemLoader([str(d) for d in self.template_dirs])
        self.env = Environment(
            loader=loader,
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
            cache_size=50,
            auto_reload=False,
        )

    def load_template(self, template_name: str) -> Template:
        """Load a template by name.

        Raises:
            jinja2.TemplateNotFound: If template doesn't exist in any directory
        """
        return self.env.get_template(template_name)

    def list_templates(self) -> list[str]:
        """List all available template names."""
        return sorted(self.env.list_templates())

    def template_exists(self, template_name: str) -> bool:
        try:
            self.env.get_template(template_name)
        except TemplateNotFound:
            return False
        return True
