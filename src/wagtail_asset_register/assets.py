"""Typed descriptions of registered assets and unification groups."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, NamedTuple
from urllib.parse import urlparse

from django.db import models

from .exceptions import ConfigurationError


class AssetType(models.TextChoices):
    STYLE = "style", "Style"
    SCRIPT = "script", "Script"

    @property
    def extension(self) -> str:
        return "css" if self is AssetType.STYLE else "js"


class Placement(models.TextChoices):
    FRONT = "front", "Front-end"
    ADMIN = "admin", "Wagtail admin"


class StyleOptions(NamedTuple):
    media: str = "all"


class ScriptOptions(NamedTuple):
    footer: bool = False
    params: Mapping[str, Any] = {}


_COMMON_KEYS = frozenset({"name", "url", "path", "place", "deps", "version"})
_TYPE_KEYS = {
    AssetType.STYLE: frozenset({"media"}),
    AssetType.SCRIPT: frozenset({"footer", "params"}),
}


class AssetReference(NamedTuple):
    """A registered style or script.

    ``path`` pins the source file on disk; when empty the host resolves it
    from ``url`` through the staticfiles finders.
    """

    name: str
    url: str
    asset_type: AssetType
    deps: tuple[str, ...] = ()
    version: str | None = None
    placement: Placement = Placement.FRONT
    options: StyleOptions | ScriptOptions = StyleOptions()
    path: str | None = None

    @property
    def filename(self) -> str:
        return os.path.basename(urlparse(self.url).path)

    @classmethod
    def from_options(
        cls,
        asset_type: str,
        options: Mapping[str, Any],
        default_placement: str = Placement.FRONT,
    ) -> AssetReference:
        """Build a reference from an option mapping such as ``{"name": ..., "url": ...}``.

        Raises:
            ConfigurationError: on unknown keys, a missing name/url, or an
                invalid asset type or placement.
        """
        kind = parse_asset_type(asset_type)

        unknown = set(options) - _COMMON_KEYS - _TYPE_KEYS[kind]
        if unknown:
            raise ConfigurationError(
                f"Unknown {kind.value} option(s): {', '.join(sorted(unknown))}"
            )

        name = options.get("name")
        url = options.get("url")
        if not name or not url:
            raise ConfigurationError(f"A {kind.value} needs both 'name' and 'url'")

        deps = options.get("deps") or ()
        if isinstance(deps, str):
            deps = (deps,)

        version = options.get("version")

        type_options: StyleOptions | ScriptOptions
        if kind is AssetType.STYLE:
            type_options = StyleOptions(media=options.get("media") or "all")
        else:
            type_options = ScriptOptions(
                footer=bool(options.get("footer", False)),
                params=dict(options.get("params") or {}),
            )

        path = options.get("path")

        return cls(
            name=str(name),
            url=str(url),
            asset_type=kind,
            deps=tuple(str(d) for d in deps),
            version=str(version) if version is not None else None,
            placement=parse_placement(options.get("place") or default_placement),
            options=type_options,
            path=str(path) if path else None,
        )


class SourceFile(NamedTuple):
    """A registered source as handed to the unifier."""

    name: str
    filename: str
    absolute_path: Path | None


class UnifiedArtifact(NamedTuple):
    source_type: AssetType
    fingerprint: str
    output_path: str
    url: str


class UnificationGroup(NamedTuple):
    """Output directories and minify flag for one ``unify`` call."""

    group_id: str
    styles_dir: str | None
    scripts_dir: str | None
    minify: bool = False

    def output_dir(self, asset_type: AssetType) -> str | None:
        return self.styles_dir if asset_type is AssetType.STYLE else self.scripts_dir

    @classmethod
    def from_output_spec(
        cls, group_id: str, output_spec: Any, minify: bool = False
    ) -> UnificationGroup | None:
        """Parse an output spec.

        Accepts one directory shared by both types, or a mapping with
        ``styles`` and/or ``scripts`` keys. Returns None for a falsy spec,
        which means "stop unifying this group".
        """
        if not group_id:
            raise ConfigurationError("A unification group needs an id")

        if not output_spec:
            return None

        if isinstance(output_spec, (str, os.PathLike)):
            directory = os.fspath(output_spec)
            return cls(group_id, directory, directory, bool(minify))

        if isinstance(output_spec, Mapping):
            unknown = set(output_spec) - {"styles", "scripts"}
            if unknown:
                raise ConfigurationError(
                    f"Unknown output key(s): {', '.join(sorted(map(str, unknown)))}"
                )
            styles = output_spec.get("styles")
            scripts = output_spec.get("scripts")
            for value in (styles, scripts):
                if value and not isinstance(value, (str, os.PathLike)):
                    raise ConfigurationError(f"Invalid output directory: {value!r}")
            if not styles and not scripts:
                raise ConfigurationError(
                    f"Output spec {dict(output_spec)!r} names no directory"
                )
            return cls(
                group_id,
                os.fspath(styles) if styles else None,
                os.fspath(scripts) if scripts else None,
                bool(minify),
            )

        raise ConfigurationError(f"Invalid output spec: {output_spec!r}")


def parse_asset_type(value: str) -> AssetType:
    try:
        return AssetType(value)
    except ValueError:
        raise ConfigurationError(f"Unknown asset type: {value!r}") from None


def parse_placement(value: str) -> Placement:
    try:
        return Placement(value)
    except ValueError:
        raise ConfigurationError(f"Unknown placement: {value!r}") from None
