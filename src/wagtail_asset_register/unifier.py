"""Unify registered styles and scripts into one file per asset type.

Pipeline per type: List sources -> Concatenate -> Minify -> Write -> Swap registration
"""

from __future__ import annotations

import hashlib
import logging
import posixpath
import threading
from collections.abc import Iterable
from typing import Any

from .assets import (
    AssetType,
    Placement,
    SourceFile,
    UnificationGroup,
    UnifiedArtifact,
    parse_placement,
)
from .exceptions import AssetIOError, AssetRegisterError
from .minify import minify as minify_content

logger = logging.getLogger(__name__)

# One lock per group id, kept for the life of the process. Group ids come
# from code or the UNIFY setting, so the table stays small.
_group_locks: dict[str, threading.Lock] = {}
_group_locks_guard = threading.Lock()


def compute_fingerprint(filenames: Iterable[str]) -> str:
    """SHA-1 of the concatenated filenames.

    File contents are deliberately not hashed: the unified filename only
    changes when the set or order of source filenames changes.
    """
    joined = "".join(filenames)
    return hashlib.sha1(joined.encode("utf-8")).hexdigest()  # noqa: S324


def _lock_for(group_id: str) -> threading.Lock:
    with _group_locks_guard:
        return _group_locks.setdefault(group_id, threading.Lock())


class AssetUnifier:
    """Merge the registered sources of a group into unified files.

    Args:
        host: Registration host providing sources and receiving the
            unified registration.
        storage: Storage backend the unified files are written to.
    """

    def __init__(self, host: Any, storage: Any) -> None:
        self.host = host
        self.storage = storage

    def unify(
        self,
        group_id: str,
        output_spec: Any,
        minify: bool = False,
        placement: str = Placement.ADMIN,
    ) -> bool:
        """Unify the group's styles and scripts.

        A falsy ``output_spec`` reverts the group to its individual files.
        Returns False if the spec is invalid or any asset type failed; a
        type that succeeded keeps its output and registration.
        """
        try:
            group = UnificationGroup.from_output_spec(group_id, output_spec, minify)
            scope = parse_placement(placement)
        except AssetRegisterError as e:
            logger.error("Cannot unify group %r: %s", group_id, e)
            return False

        with _lock_for(group_id):
            if group is None:
                for asset_type in AssetType:
                    if self.host.deregister(group_id, asset_type):
                        logger.info(
                            "Reverted unified %s group %r", asset_type.value, group_id
                        )
                return True

            success = True
            for asset_type in AssetType:
                directory = group.output_dir(asset_type)
                if directory is None:
                    continue
                try:
                    artifact = self._unify_type(group, asset_type, directory, scope)
                except (AssetRegisterError, OSError) as e:
                    logger.error(
                        "Failed to unify %s for group %r: %s",
                        asset_type.value,
                        group_id,
                        e,
                    )
                    success = False
                    continue
                if artifact is not None:
                    logger.info(
                        "Unified %s group %r as %s: %s",
                        artifact.source_type.value,
                        group_id,
                        artifact.fingerprint,
                        artifact.url,
                    )
            return success

    def _unify_type(
        self,
        group: UnificationGroup,
        asset_type: AssetType,
        directory: str,
        placement: Placement,
    ) -> UnifiedArtifact | None:
        sources = self.host.list_registered_sources(
            group.group_id, asset_type, placement
        )
        if not sources:
            logger.debug(
                "No %s sources registered for group %r", asset_type.value, group.group_id
            )
            return None

        self.host.check_group_id(group.group_id, asset_type)
        content = _read_sources(sources)
        if group.minify:
            try:
                text = content.decode("utf-8")
            except UnicodeDecodeError as e:
                raise AssetIOError(f"Cannot minify non UTF-8 sources: {e}") from e
            content = minify_content(text, asset_type).encode("utf-8")

        fingerprint = compute_fingerprint(s.filename for s in sources)
        path = posixpath.join(
            self.storage.resolve_dir(directory), f"{fingerprint}.{asset_type.extension}"
        )
        url = self.storage.save(path, content)
        full_path = self.storage.full_path(path)

        self.host.register_unified(group.group_id, asset_type, url, full_path, sources)
        logger.debug(
            "Group %r absorbed %d %s file(s)", group.group_id, len(sources), asset_type.value
        )
        return UnifiedArtifact(asset_type, fingerprint, full_path, url)


def _read_sources(sources: list[SourceFile]) -> bytes:
    """Concatenate the raw bytes of every source, in order.

    Raises:
        AssetIOError: if any source is missing or unreadable.
    """
    chunks: list[bytes] = []
    for source in sources:
        if source.absolute_path is None:
            raise AssetIOError(f"Cannot locate source file for {source.name!r}")
        try:
            chunks.append(source.absolute_path.read_bytes())
        except OSError as e:
            raise AssetIOError(
                f"Cannot read {source.absolute_path} for {source.name!r}: {e}"
            ) from e
    return b"".join(chunks)
