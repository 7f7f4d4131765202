"""Backend loading and static path helpers for wagtail-asset-register."""

from __future__ import annotations

import logging
import threading
from importlib import import_module
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from django.conf import settings
from django.core.exceptions import SuspiciousFileOperation

from .conf import get_setting

if TYPE_CHECKING:
    from .assets import AssetReference

logger = logging.getLogger(__name__)

_host: Any = None
_host_lock = threading.Lock()


def get_host() -> Any:
    """Return the process-wide registration host, creating it on first use."""
    global _host
    with _host_lock:
        if _host is None:
            _host = import_class(get_setting("HOST_BACKEND"))()
        return _host


def reset_host() -> None:
    """Forget the current host so the next get_host() builds a fresh one."""
    global _host
    with _host_lock:
        _host = None


def get_storage() -> Any:
    """Import and instantiate the configured storage backend."""
    storage_path = get_setting("STORAGE_BACKEND")
    cls = import_class(storage_path)
    return cls()


def import_class(dotted_path: str) -> type:
    """Import a class from a dotted path string."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = import_module(module_path)
    return getattr(module, class_name)  # type: ignore[no-any-return]


def strip_url_prefix(url: str, prefix: str | None) -> str | None:
    """Return the part of ``url``'s path below ``prefix``, or None if outside it."""
    if not prefix:
        return None
    path = urlparse(url).path
    prefix_path = urlparse(prefix).path.rstrip("/") + "/"
    if path.startswith(prefix_path):
        return path[len(prefix_path) :]
    return None


def resolve_source_path(reference: AssetReference) -> Path | None:
    """Locate the file behind a registered asset.

    Search order: explicit ``path`` -> staticfiles finders -> STATIC_ROOT.
    """
    if reference.path:
        return Path(reference.path)

    relative = strip_url_prefix(reference.url, getattr(settings, "STATIC_URL", None))
    if relative is None:
        return None

    from django.contrib.staticfiles import finders

    try:
        found = finders.find(relative)
    except SuspiciousFileOperation as e:
        logger.warning("Refusing source %r of %r: %s", reference.url, reference.name, e)
        return None
    if found:
        return Path(found)

    static_root: str | None = getattr(settings, "STATIC_ROOT", None)
    if static_root:
        root = Path(static_root).resolve()
        candidate = (root / relative).resolve()
        if candidate.is_relative_to(root) and candidate.exists():
            return candidate
    return None
