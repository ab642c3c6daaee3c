"""Template rendering for Pagelink.

A theme supplies exactly one Jinja2 template, ``themes/<theme>/index.html``.
It is rendered with a single variable, ``Config``, bound to the loaded
SiteConfig, and written to ``index.html`` at the project root.

Autoescaping is always on for the template, so configuration strings are
HTML-escaped in text and attribute contexts. Use the ``urlencode`` and
``tojson`` filters for URL and script contexts. Undefined fields raise
instead of rendering as empty strings, and the template cannot include
or extend other files.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import (
    Environment,
    FunctionLoader,
    StrictUndefined,
    TemplateSyntaxError,
    UndefinedError,
    select_autoescape,
)
from jinja2 import TemplateNotFound as JinjaTemplateNotFound

from .config import SiteConfig
from .errors import (
    OutputCreateError,
    TemplateExecError,
    TemplateNotFound,
    TemplateParseError,
)

TEMPLATE_NAME = "index.html"
OUTPUT_NAME = "index.html"


def theme_dir(project_root: Path, theme: str) -> Path:
    """Return the directory of a theme."""
    return project_root / "themes" / theme


class TemplateEngine:
    """Renders a theme's page template.

    Attributes:
        theme_dir: Directory of the selected theme.
        template_path: Path of the theme's ``index.html``.
        env: Jinja2 environment that can load ``index.html`` and nothing else.
    """

    def __init__(self, theme_dir: Path):
        self.theme_dir = theme_dir
        self.template_path = theme_dir / TEMPLATE_NAME
        self.env = Environment(
            loader=FunctionLoader(self._load_source),
            autoescape=select_autoescape(["html", "htm", "xml"]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def _load_source(self, name: str):
        if name != TEMPLATE_NAME or not self.template_path.is_file():
            return None
        source = self.template_path.read_text(encoding="utf-8")
        return source, str(self.template_path), lambda: True

    def render(self, config: SiteConfig) -> str:
        """Render the template with ``Config`` bound to ``config``.

        Raises:
            TemplateNotFound: If the theme has no ``index.html``.
            TemplateParseError: If the template is not valid Jinja2.
            TemplateExecError: If rendering fails, e.g. on a missing field.
        """
        try:
            template = self.env.get_template(TEMPLATE_NAME)
        except JinjaTemplateNotFound as exc:
            raise TemplateNotFound(self.template_path) from exc
        except TemplateSyntaxError as exc:
            raise TemplateParseError(self.template_path, exc.lineno, exc.message) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateParseError(self.template_path, None, str(exc)) from exc

        try:
            return template.render(Config=config)
        except Exception as exc:
            raise TemplateExecError(self.template_path, _describe_render_error(exc)) from exc


def render_page(config: SiteConfig, project_root: Path) -> Path:
    """Render the selected theme into ``<project_root>/index.html``.

    Args:
        config: Loaded site configuration.
        project_root: Directory holding ``themes/`` and receiving the output.

    Returns:
        Path of the written page.
    """
    engine = TemplateEngine(theme_dir(project_root, config.theme))
    rendered = engine.render(config)

    output_path = project_root / OUTPUT_NAME
    try:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(rendered)
    except OSError as exc:
        raise OutputCreateError(output_path, exc.strerror or str(exc)) from exc
    return output_path


def _describe_render_error(exc: Exception) -> str:
    # Missing Config fields surface as UndefinedError; ConfigNode's
    # AttributeError only escapes from explicit attribute calls.
    if isinstance(exc, UndefinedError):
        return f"undefined field: {exc.message}"
    if isinstance(exc, JinjaTemplateNotFound):
        return f"themes may only use {TEMPLATE_NAME}, cannot load {exc.name!r}"
    if isinstance(exc, AttributeError):
        return f"missing field: {exc}"
    return f"{type(exc).__name__}: {exc}"
