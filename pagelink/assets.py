"""Theme asset publishing for Pagelink.

This module copies a theme's static files into the project's ``assets/``
directory. Files are grouped into a closed set of asset classes; each class
has a fixed source directory inside the theme, a fixed destination under
``assets/`` and an optional minifier.

| Class      | Source                               | Destination   | Transform |
|------------|--------------------------------------|---------------|-----------|
| STYLESHEET | ``themes/<theme>/assets/css/*.css``  | assets/css    | text/css  |
| SCRIPT     | ``themes/<theme>/assets/js/*.js``    | assets/js     | text/javascript |
| ICON       | ``themes/<theme>/assets/icons/*``    | assets/icons  | none      |

Classes are processed in that order, files within a class in sorted path
order. The first failure aborts publishing; files already written stay.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .asset_processors import CSS_MEDIA_TYPE, JS_MEDIA_TYPE, minify
from .errors import (
    DestinationConflict,
    DestinationWriteError,
    DirectoryCreateError,
    GlobError,
    MinifyError,
    SourceReadError,
)
from .templates import theme_dir

ASSETS_DIRNAME = "assets"


class AssetClass(Enum):
    """Kinds of theme asset.

    Each value is ``(label, source subdir, glob pattern, media type)``. The
    source subdir doubles as the destination subdir under ``assets/``.
    """

    STYLESHEET = ("css", "css", "*.css", CSS_MEDIA_TYPE)
    SCRIPT = ("js", "js", "*.js", JS_MEDIA_TYPE)
    ICON = ("icon", "icons", "*", None)

    def __init__(self, label: str, subdir: str, pattern: str, media_type: str | None):
        self.label = label
        self.subdir = subdir
        self.pattern = pattern
        self.media_type = media_type

    def source_dir(self, theme_root: Path) -> Path:
        return theme_root / ASSETS_DIRNAME / self.subdir

    def dest_dir(self, project_root: Path) -> Path:
        return project_root / ASSETS_DIRNAME / self.subdir


@dataclass(frozen=True)
class AssetFile:
    """A single file scheduled for publishing.

    Attributes:
        source: Path of the file inside the theme.
        dest: Path the file is written to.
        asset_class: Class that selected the file.
    """

    source: Path
    dest: Path
    asset_class: AssetClass


class AssetPublisher:
    """Publishes a theme's assets into ``<project_root>/assets``.

    Attributes:
        project_root: Directory holding ``themes/`` and receiving ``assets/``.
    """

    def __init__(self, project_root: Path):
        self.project_root = project_root

    def publish(self, theme: str) -> list[AssetFile]:
        """Publish every asset of ``theme``.

        Args:
            theme: Theme directory name.

        Returns:
            The published files, in processing order.

        Raises:
            PublishError: On the first directory, read or write failure.
            MinifyError: If a stylesheet or script cannot be minified.
        """
        self.prepare_destinations()
        published: list[AssetFile] = []
        for asset_class in AssetClass:
            for asset in self.iter_files(theme, asset_class):
                self.transfer(asset)
                published.append(asset)
        return published

    def prepare_destinations(self) -> None:
        """Create ``assets/css``, ``assets/js`` and ``assets/icons``."""
        for asset_class in AssetClass:
            target = asset_class.dest_dir(self.project_root)
            try:
                target.mkdir(parents=True, exist_ok=True)
            except (FileExistsError, NotADirectoryError) as exc:
                raise DestinationConflict(
                    f"failed to create {target} directory: a file is in the way"
                ) from exc
            except OSError as exc:
                raise DirectoryCreateError(
                    f"failed to create {target} directory: {exc}"
                ) from exc

    def iter_files(self, theme: str, asset_class: AssetClass) -> Iterator[AssetFile]:
        """Yield the files of one asset class in sorted path order."""
        source_dir = asset_class.source_dir(theme_dir(self.project_root, theme))
        dest_dir = asset_class.dest_dir(self.project_root)
        try:
            matches = sorted(
                (path for path in source_dir.glob(asset_class.pattern) if path.is_file()),
                key=str,
            )
        except (OSError, ValueError) as exc:
            raise GlobError(f"failed to list {asset_class.label} files: {exc}") from exc
        for source in matches:
            yield AssetFile(source=source, dest=dest_dir / source.name, asset_class=asset_class)

    def transfer(self, asset: AssetFile) -> None:
        """Read, optionally minify, and write one asset."""
        label = asset.asset_class.label
        try:
            data = asset.source.read_bytes()
        except OSError as exc:
            raise SourceReadError(
                f"failed to copy {label} files: failed to read {asset.source}: {exc}"
            ) from exc

        media_type = asset.asset_class.media_type
        if media_type is not None:
            try:
                data = minify(media_type, data)
            except MinifyError as exc:
                raise MinifyError(
                    f"failed to copy {label} files: failed to minify file {asset.source}: {exc}"
                ) from exc

        try:
            asset.dest.write_bytes(data)
        except OSError as exc:
            raise DestinationWriteError(
                f"failed to copy {label} files: failed to write {asset.dest}: {exc}"
            ) from exc


def publish_assets(project_root: Path, theme: str) -> list[AssetFile]:
    """Publish a theme's assets. See AssetPublisher.publish."""
    return AssetPublisher(project_root).publish(theme)
