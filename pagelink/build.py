"""Site building for Pagelink.

This module runs the three stages of a build in order: load
``config.yml``, render the theme template into ``index.html``, then publish
the theme's assets. There is no state shared between stages other than
the loaded configuration, and no stage recovers from an error.

Key objects:
- build_site: Run a full build rooted at a project directory.
- BuildError: Stage failure with context for the CLI.
- BuildResult: What a successful build produced.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .assets import AssetFile, publish_assets
from .config import CONFIG_FILENAME, SiteConfig, load_config
from .errors import LoadError, MinifyError, PublishError, RenderError
from .templates import render_page

STAGE_CONFIG = "config"
STAGE_RENDER = "render"
STAGE_ASSETS = "assets"

_STAGE_MESSAGES = {
    STAGE_CONFIG: "Error loading config",
    STAGE_RENDER: "Error generating HTML",
    STAGE_ASSETS: "Error copying and minifying assets",
}


class BuildError(Exception):
    """A build stage failed.

    Attributes:
        stage: Name of the failed stage.
        message: Human-readable description of the failure.
        original_error: The stage's exception.
    """

    def __init__(self, stage: str, message: str, original_error: Exception | None = None):
        self.stage = stage
        self.message = message
        self.original_error = original_error
        super().__init__(f"{_STAGE_MESSAGES[stage]}: {message}")


@dataclass
class BuildResult:
    """Result of a site build.

    Attributes:
        config: The loaded site configuration.
        page: Path of the rendered ``index.html``.
        assets: Published asset files in processing order.
    """

    config: SiteConfig
    page: Path
    assets: list[AssetFile]


def build_site(project_root: Path) -> BuildResult:
    """Build the landing page and its assets.

    Args:
        project_root: Directory holding ``config.yml`` and ``themes/``; the
            output is written here too.

    Returns:
        BuildResult describing the outputs.

    Raises:
        BuildError: On the first failing stage.
    """
    try:
        config = load_config(project_root / CONFIG_FILENAME)
    except LoadError as exc:
        raise BuildError(STAGE_CONFIG, str(exc), exc) from exc

    try:
        page = render_page(config, project_root)
    except RenderError as exc:
        raise BuildError(STAGE_RENDER, str(exc), exc) from exc

    try:
        assets = publish_assets(project_root, config.theme)
    except (PublishError, MinifyError) as exc:
        raise BuildError(STAGE_ASSETS, str(exc), exc) from exc

    return BuildResult(config=config, page=page, assets=assets)
