"""CSS/JS minification for unified assets."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

import rcssmin  # type: ignore[import-untyped]
import rjsmin  # type: ignore[import-untyped]

from .assets import AssetType
from .conf import get_setting

logger = logging.getLogger(__name__)

TERSER_TIMEOUT_SECONDS = 30


def minify(content: str, asset_type: AssetType) -> str:
    """Minify unified content of the given type."""
    if asset_type is AssetType.STYLE:
        return minify_css(content)
    return minify_js(content)


def minify_css(content: str) -> str:
    """Strip comments and redundant whitespace using rcssmin."""
    return rcssmin.cssmin(content)  # type: ignore[no-any-return]


def minify_js(content: str) -> str:
    """Minify JS using rjsmin, or terser when JS_MINIFIER is "terser".

    A terser failure falls back to rjsmin.
    """
    if get_setting("JS_MINIFIER") == "terser":
        terser_path = _find_terser()
        if terser_path is None:
            logger.warning("terser not found. Falling back to rjsmin.")
        else:
            try:
                result = subprocess.run(  # noqa: S603
                    [terser_path, *get_setting("TERSER_OPTIONS")],
                    input=content,
                    capture_output=True,
                    text=True,
                    timeout=TERSER_TIMEOUT_SECONDS,
                    check=True,
                )
                return result.stdout
            except (
                subprocess.CalledProcessError,
                subprocess.TimeoutExpired,
                OSError,
            ) as e:
                logger.warning("terser failed: %s. Falling back to rjsmin.", e)

    return rjsmin.jsmin(content)  # type: ignore[no-any-return]


def _find_terser() -> str | None:
    """Find the terser CLI binary.

    Search order: TERSER_PATH setting -> node_modules/.bin/terser -> PATH.
    """
    explicit: str | None = get_setting("TERSER_PATH")
    if explicit:
        return explicit
    from django.conf import settings as django_settings

    base_dir = getattr(django_settings, "BASE_DIR", None)
    if base_dir is not None:
        local = Path(base_dir) / "node_modules" / ".bin" / "terser"
        if local.exists():
            return str(local)
    return shutil.which("terser")
