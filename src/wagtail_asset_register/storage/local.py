from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path

from django.conf import settings

from ..conf import get_setting
from ..exceptions import ConfigurationError
from ..utils import strip_url_prefix
from .base import BaseAssetStorage


class LocalFileStorage(BaseAssetStorage):
    """Local filesystem storage for unified assets.

    Saves files under OUTPUT_ROOT (default STATIC_ROOT) and returns
    OUTPUT_URL (default STATIC_URL) based URLs. Files are written to a
    temporary sibling first and renamed into place, so readers never see
    a partially written file.
    """

    def _get_root(self) -> Path:
        root: str | None = get_setting("OUTPUT_ROOT") or getattr(
            settings, "STATIC_ROOT", None
        )
        if not root:
            raise ConfigurationError(
                "OUTPUT_ROOT or STATIC_ROOT must be configured for LocalFileStorage"
            )
        return Path(root)

    def _get_base_url(self) -> str:
        return get_setting("OUTPUT_URL") or getattr(settings, "STATIC_URL", "/static/")

    def _get_full_path(self, path: str) -> Path:
        root = self._get_root()
        full_path = (root / path).resolve()
        root_resolved = root.resolve()
        if not full_path.is_relative_to(root_resolved):
            raise ConfigurationError(
                f"Path traversal detected: {path!r} resolves outside the output root"
            )
        return full_path

    def _get_url(self, path: str) -> str:
        return f"{self._get_base_url().rstrip('/')}/{path}"

    def resolve_dir(self, location: str) -> str:
        relative = strip_url_prefix(location, self._get_base_url())
        if relative is None and "://" not in location:
            candidate = Path(location)
            if candidate.is_absolute():
                root_resolved = self._get_root().resolve()
                resolved = candidate.resolve()
                if not resolved.is_relative_to(root_resolved):
                    raise ConfigurationError(
                        f"Output directory {location!r} is outside the output root"
                    )
                relative = resolved.relative_to(root_resolved).as_posix()
            else:
                relative = location
        if relative is None:
            raise ConfigurationError(
                f"Output URL {location!r} is not under {self._get_base_url()!r}"
            )
        # Validates traversal.
        self._get_full_path(relative)
        return relative.strip("/")

    def save(self, path: str, content: bytes) -> str:
        full_path = self._get_full_path(path)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=full_path.parent, prefix=f".{full_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(content)
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, full_path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise
        return self._get_url(path)

    def full_path(self, path: str) -> str:
        return str(self._get_full_path(path))
