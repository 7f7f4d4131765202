"""Configuration and settings for wagtail-asset-register."""

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    # Backends
    "HOST_BACKEND": "wagtail_asset_register.hosts.memory.InMemoryRegistrationHost",
    "STORAGE_BACKEND": "wagtail_asset_register.storage.local.LocalFileStorage",
    # Unified output location (falls back to STATIC_ROOT / STATIC_URL)
    "OUTPUT_ROOT": None,
    "OUTPUT_URL": None,
    # Placement defaults
    "DEFAULT_PLACEMENT": "front",
    "UNIFY_PLACEMENT": "admin",
    # Minification
    "JS_MINIFIER": "rjsmin",
    "TERSER_PATH": None,
    "TERSER_OPTIONS": ["-c", "-m"],
    # Front-end injection skips requests under this prefix
    "ADMIN_PATH_PREFIX": "/admin/",
    # Declarative registration, applied on app startup
    "ASSETS": [],
    "UNIFY": {},
}


_UNSET = object()


def get_setting(key: str, default: Any = _UNSET) -> Any:
    """Get a setting from WAGTAIL_ASSET_REGISTER dict or return default."""
    user_settings: dict[str, Any] = getattr(settings, "WAGTAIL_ASSET_REGISTER", {})
    fallback = DEFAULTS.get(key) if default is _UNSET else default
    return user_settings.get(key, fallback)
