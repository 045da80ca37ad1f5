"""Rendering of the bundled Jinja2 file templates."""
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from infrakit.core.errors import TemplateRenderError
from infrakit.core.logger import get_logger

logger = get_logger(__name__)


class TemplateRenderer:
    """Loads templates from infrakit/templates/ and renders them to text."""

    def __init__(self, templates_dir: Optional[Path] = None):
        """Initialize renderer.

        Args:
            templates_dir: Path to templates directory. Defaults to infrakit/templates/
        """
        if templates_dir is None:
            # Renderer is in infrakit/core/, templates are in infrakit/templates/
            templates_dir = Path(__file__).parent.parent / "templates"
        self.templates_dir = Path(templates_dir)

        # Terraform and Jenkins both use ${...}, which Jinja leaves alone
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with the given context.

        Args:
            template_name: Path relative to the templates dir (e.g. 'cicd/Dockerfile.j2')
            context: Template variables

        Raises:
            TemplateRenderError: Template missing or a variable is undefined
        """
        try:
            template = self.jinja_env.get_template(template_name)
            return template.render(**context)
        except TemplateError as e:
            raise TemplateRenderError(f"Failed to render template '{template_name}': {e}") from e

    def list_templates(self, prefix: str = "") -> List[str]:
        """List template names, optionally restricted to a subdirectory."""
        names = self.jinja_env.list_templates(extensions=["j2"])
        return sorted(n for n in names if n.startswith(prefix))
