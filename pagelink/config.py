"""Configuration loading for Pagelink.

The site is described by a single YAML document, ``config.yml``, at the
project root. Only two keys have meaning to Pagelink itself:

- ``theme`` names the directory under ``themes/`` to render with.
- ``links`` is the ordered list of link entries shown on the page.

Every other key is passed through untouched to the theme template, which
sees the whole document as ``Config``.

Key objects:
- SiteConfig: Immutable, attribute-addressable view of the document.
- load_config: Parse and validate ``config.yml``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import yaml

from .errors import LoadError

CONFIG_FILENAME = "config.yml"


class ConfigNode:
    """Read-only record exposing configuration keys as attributes.

    Templates address configuration by dotted path (``Config.profile.name``),
    so nested mappings are wrapped in ConfigNode and nested lists become
    tuples. The node has no named methods, so every key, ``items`` and
    ``keys`` included, resolves to its data. Subscript, ``in``, ``len``
    and iteration over keys work as on a dict.
    """

    def __init__(self, data: Mapping[str, Any]):
        object.__setattr__(self, "_data", {key: _freeze(value) for key, value in data.items()})

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConfigNode):
            return self._data == other._data
        return NotImplemented

    __hash__ = None

    def __getattr__(self, name: str) -> Any:
        data = self.__dict__.get("_data", {})
        try:
            return data[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__} has no field {name!r}"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"


class SiteConfig(ConfigNode):
    """The loaded site configuration.

    Attributes:
        theme: Name of the theme directory under ``themes/``.
    """

    @property
    def theme(self) -> str:
        return _first_key(self._data, "theme", "Theme")

    @property
    def links(self) -> tuple[Any, ...]:
        return _first_key(self._data, "links", "Links", default=())


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return ConfigNode(value)
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _first_key(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


def load_config(path: Path) -> SiteConfig:
    """Load and validate the site configuration.

    Args:
        path: Path to ``config.yml``.

    Returns:
        The immutable SiteConfig.

    Raises:
        LoadError: If the file is missing, unreadable, malformed, or
            violates the schema.
    """
    try:
        with open(path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except FileNotFoundError:
        raise LoadError(path, "file not found") from None
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(path, f"cannot read file: {exc}") from exc
    except yaml.YAMLError as exc:
        raise LoadError(path, f"invalid YAML: {exc}") from exc

    if not isinstance(loaded, dict):
        raise LoadError(path, "expected a mapping at the top level")

    _validate(path, loaded)
    return SiteConfig(loaded)


def _validate(path: Path, data: dict[str, Any]) -> None:
    theme = _first_key(data, "theme", "Theme")
    if theme is None:
        raise LoadError(path, "missing required field 'theme'")
    if not isinstance(theme, str) or not theme.strip():
        raise LoadError(path, "'theme' must be a non-empty string")
    if theme in (".", "..") or "/" in theme or "\\" in theme:
        raise LoadError(path, f"'theme' must be a directory name, got {theme!r}")

    links = _first_key(data, "links", "Links")
    if links is None:
        return
    if not isinstance(links, list):
        raise LoadError(path, "'links' must be a list")
    for index, link in enumerate(links):
        if not isinstance(link, dict):
            raise LoadError(path, f"links[{index}] must be a mapping")
        url = _first_key(link, "url", "URL")
        if not isinstance(url, str) or not url:
            raise LoadError(path, f"links[{index}] is missing 'url'")
