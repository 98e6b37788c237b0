"""
Jinja2 rendering for generated source.

Each generator renders named templates from its own template directory.
"""

from pathlib import Path
from typing import Any, Mapping, Optional

import jinja2


class TemplateError(Exception):
    """A template could not be found or rendered."""

    pass


def comment_lines(value: Any, marker: str = "//") -> str:
    """Prefix every non-blank line of ``value`` with a line comment marker."""
    return "\n".join(
        f"{marker} {line}" if line.strip() else line for line in str(value).split("\n")
    )


class TemplateEngine:
    """Source-oriented Jinja2 environment: no autoescaping, strict variables."""

    def __init__(self, template_dir: Optional[Path] = None):
        self.template_dir = template_dir
        if template_dir is not None and template_dir.is_dir():
            loader = jinja2.FileSystemLoader(str(template_dir))
        else:
            loader = jinja2.DictLoader({})

        self._env = jinja2.Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=jinja2.StrictUndefined,
        )
        self._env.filters["comment"] = comment_lines

    def render_template(self, template_name: str, context: Mapping[str, Any]) -> str:
        """
        Render a named template.

        Raises:
            TemplateError: If the template is missing, references an
                undefined variable or fails to render
        """
        try:
            return self._env.get_template(template_name).render(context)
        except jinja2.TemplateError as e:
            raise TemplateError(f"Cannot render {template_name}: {e}") from e


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    return TemplateEngine(template_dir)
