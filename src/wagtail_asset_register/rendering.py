"""Render registered assets as HTML tags."""

from __future__ import annotations

import json
import re
from typing import Any
from urllib.parse import urlencode

from django.core.serializers.json import DjangoJSONEncoder
from django.utils.html import format_html
from django.utils.safestring import SafeString, mark_safe

from .assets import AssetReference, AssetType, Placement

_JSON_ESCAPES = {
    ord(">"): "\\u003E",
    ord("<"): "\\u003C",
    ord("&"): "\\u0026",
}
_NON_IDENTIFIER = re.compile(r"\W")


def render_styles(host: Any, placement: Placement) -> SafeString:
    """Render <link> tags for every style visible in ``placement``."""
    tags = [
        format_html(
            '<link rel="stylesheet" id="{}-css" href="{}" media="{}">',
            ref.name,
            versioned_url(ref),
            ref.options.media,  # type: ignore[union-attr]
        )
        for ref in host.visible(AssetType.STYLE, placement)
    ]
    return mark_safe("\n".join(tags))  # noqa: S308


def render_scripts(
    host: Any, placement: Placement, footer: bool | None = None
) -> SafeString:
    """Render <script> tags for scripts visible in ``placement``.

    ``footer`` selects only footer (True) or header (False) scripts; None
    renders both. Parameters of a unified script's sources are rendered
    ahead of the unified file.
    """
    tags: list[str] = []
    for ref in host.visible(AssetType.SCRIPT, placement):
        if footer is not None and ref.options.footer != footer:  # type: ignore[union-attr]
            continue
        sources = host.absorbed(AssetType.SCRIPT, ref.name) or [ref]
        for source in sources:
            params = source.options.params  # type: ignore[union-attr]
            if params:
                tags.append(render_params(source.name, params))
        tags.append(
            format_html('<script id="{}-js" src="{}"></script>', ref.name, versioned_url(ref))
        )
    return mark_safe("\n".join(tags))  # noqa: S308


def render_params(name: str, params: Any) -> SafeString:
    """Expose ``params`` to scripts as a global ``var``."""
    variable = _NON_IDENTIFIER.sub("_", name)
    if variable[:1].isdigit():
        variable = f"_{variable}"
    payload = json.dumps(params, cls=DjangoJSONEncoder).translate(_JSON_ESCAPES)
    return mark_safe(f"<script>var {variable} = {payload};</script>")  # noqa: S308


def versioned_url(ref: AssetReference) -> str:
    """Append ``ver=<version>`` to the asset URL when a version is set."""
    if not ref.version:
        return ref.url
    separator = "&" if "?" in ref.url else "?"
    return f"{ref.url}{separator}{urlencode({'ver': ref.version})}"
