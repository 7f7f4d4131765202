"""Public entry points: register, remove, and unify assets.

All functions operate on the process-wide host returned by
:func:`wagtail_asset_register.utils.get_host`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .assets import AssetReference, parse_asset_type
from .conf import get_setting
from .exceptions import ConfigurationError
from .unifier import AssetUnifier
from .utils import get_host, get_storage

logger = logging.getLogger(__name__)


def add(asset_type: str, options: Mapping[str, Any]) -> bool:
    """Register a style or script.

    Returns False if an asset with the same name is already registered.

    Raises:
        ConfigurationError: if ``options`` is malformed.
    """
    reference = AssetReference.from_options(
        asset_type, options, default_placement=get_setting("DEFAULT_PLACEMENT")
    )
    added: bool = get_host().add(reference)
    if not added:
        logger.warning(
            "%s %r is already registered", reference.asset_type.label, reference.name
        )
    return added


def remove(asset_type: str, name: str) -> bool:
    """Remove a registered asset or unified group."""
    removed: bool = get_host().remove(parse_asset_type(asset_type), name)
    return removed


def is_added(asset_type: str, name: str) -> bool:
    registered: bool = get_host().is_registered(parse_asset_type(asset_type), name)
    return registered


def unify(
    group_id: str,
    output_spec: Any,
    minify: bool = False,
    placement: str | None = None,
) -> bool:
    """Unify the registered sources of a placement into one file per type.

    ``output_spec`` is one directory for both types or a mapping with
    ``styles``/``scripts`` directories; a falsy value reverts the group.
    """
    unifier = AssetUnifier(get_host(), get_storage())
    return unifier.unify(
        group_id,
        output_spec,
        minify=minify,
        placement=placement or get_setting("UNIFY_PLACEMENT"),
    )


def load_assets_from_settings() -> int:
    """Register every asset declared in the ASSETS setting.

    Each entry is an option mapping with an additional ``type`` key.
    Returns the number of assets newly registered.
    """
    count = 0
    for entry in get_setting("ASSETS") or []:
        options = dict(entry)
        asset_type = options.pop("type", None)
        if asset_type is None:
            raise ConfigurationError(f"Asset entry without 'type': {entry!r}")
        if add(asset_type, options):
            count += 1
    return count


def unify_configured_groups(group_ids: Iterable[str] | None = None) -> dict[str, bool]:
    """Run unify for groups declared in the UNIFY setting.

    Each value is ``{"output": spec, "minify": bool, "place": placement}``.
    Unknown ids in ``group_ids`` are reported as failures.
    """
    configured: dict[str, Any] = get_setting("UNIFY") or {}
    selected = list(group_ids) if group_ids is not None else list(configured)

    results: dict[str, bool] = {}
    for group_id in selected:
        config = configured.get(group_id)
        if config is None:
            logger.error("Unify group %r is not configured", group_id)
            results[group_id] = False
            continue
        results[group_id] = unify(
            group_id,
            config.get("output"),
            minify=bool(config.get("minify", False)),
            placement=config.get("place"),
        )
    return results
