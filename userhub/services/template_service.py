"""HTML email rendering with Jinja2."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

TEMPLATES_PATH = Path(__file__).resolve().parent.parent / "templates"


class TemplateRenderError(Exception):
    """Template is missing or failed to render."""


class TemplateRenderer:
    """Renders named templates from the package templates directory."""

    def __init__(self, templates_path: Path = TEMPLATES_PATH) -> None:
        self._env = Environment(
            loader=FileSystemLoader(templates_path),
            autoescape=select_autoescape(["html"]),
        )

    def render(self, template_name: str, context: dict) -> str:
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except TemplateError as e:
            raise TemplateRenderError(f"failed to render {template_name}: {e}") from e
