"""Exception hierarchy for Pagelink.

Every stage of a build raises a subclass of PagelinkError. Low-level
exceptions (OSError, yaml.YAMLError, Jinja2 errors) are chained onto these
with ``raise ... from exc`` so the driver can report one contextual line
while keeping the original traceback available.

Hierarchy:
    PagelinkError
        LoadError
        RenderError
            TemplateNotFound
            TemplateParseError
            TemplateExecError
            OutputCreateError
        PublishError
            DirectoryCreateError
            DestinationConflict
            GlobError
            SourceReadError
            DestinationWriteError
        MinifyError
            UnsupportedMediaType
"""

from __future__ import annotations

from pathlib import Path


class PagelinkError(Exception):
    """Base class for all Pagelink errors."""


class LoadError(PagelinkError):
    """The configuration file is missing, unreadable or invalid.

    Attributes:
        path: Path of the configuration file.
    """

    def __init__(self, path: Path, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class RenderError(PagelinkError):
    """Base class for template rendering failures."""


class TemplateNotFound(RenderError):
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"template not found: {path}")


class TemplateParseError(RenderError):
    def __init__(self, path: Path, lineno: int | None, message: str):
        self.path = path
        self.lineno = lineno
        location = f"{path}:{lineno}" if lineno else str(path)
        super().__init__(f"template syntax error at {location}: {message}")


class TemplateExecError(RenderError):
    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"failed to execute {path}: {message}")


class OutputCreateError(RenderError):
    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"failed to create {path}: {message}")


class PublishError(PagelinkError):
    """Base class for asset publishing failures."""


class DirectoryCreateError(PublishError):
    pass


class DestinationConflict(PublishError):
    pass


class GlobError(PublishError):
    pass


class SourceReadError(PublishError):
    pass


class DestinationWriteError(PublishError):
    pass


class MinifyError(PagelinkError):
    """A stylesheet or script could not be minified."""


class UnsupportedMediaType(MinifyError):
    def __init__(self, media_type: str):
        self.media_type = media_type
        super().__init__(f"unsupported media type: {media_type}")
