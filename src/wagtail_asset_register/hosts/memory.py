from __future__ import annotations

import logging
import threading

from ..assets import (
    AssetReference,
    AssetType,
    Placement,
    ScriptOptions,
    SourceFile,
    StyleOptions,
)
from ..exceptions import ConfigurationError
from ..utils import resolve_source_path
from .base import BaseRegistrationHost

logger = logging.getLogger(__name__)


class InMemoryRegistrationHost(BaseRegistrationHost):
    """Process-wide registration table kept in memory.

    Originals stay in the table while a group has absorbed them, so a
    revert (``deregister``) only has to drop the unified entry.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._assets: dict[AssetType, dict[str, AssetReference]] = {
            t: {} for t in AssetType
        }
        self._unified: dict[AssetType, dict[str, AssetReference]] = {
            t: {} for t in AssetType
        }
        self._absorbed: dict[AssetType, dict[str, tuple[str, ...]]] = {
            t: {} for t in AssetType
        }
        # Group ids reverted by deregister() and not yet removed.
        self._reverted: dict[AssetType, set[str]] = {t: set() for t in AssetType}

    def add(self, reference: AssetReference) -> bool:
        kind = reference.asset_type
        with self._lock:
            if reference.name in self._assets[kind] or reference.name in self._unified[kind]:
                return False
            self._assets[kind][reference.name] = reference
            self._reverted[kind].discard(reference.name)
            return True

    def remove(self, asset_type: AssetType, name: str) -> bool:
        with self._lock:
            if name in self._unified[asset_type]:
                del self._unified[asset_type][name]
                for original in self._absorbed[asset_type].pop(name, ()):
                    self._assets[asset_type].pop(original, None)
                return True

            if name not in self._assets[asset_type]:
                if name in self._reverted[asset_type]:
                    self._reverted[asset_type].discard(name)
                    return True
                return False

            del self._assets[asset_type][name]
            absorbed = self._absorbed[asset_type]
            for group_id, names in list(absorbed.items()):
                if name not in names:
                    continue
                remaining = tuple(n for n in names if n != name)
                if remaining:
                    absorbed[group_id] = remaining
                else:
                    # A group with no originals left has nothing to emit.
                    del absorbed[group_id]
                    del self._unified[asset_type][group_id]
                    logger.debug(
                        "Dropped unified %s %r after its last source was removed",
                        asset_type.value,
                        group_id,
                    )
            return True

    def get(self, asset_type: AssetType, name: str) -> AssetReference | None:
        with self._lock:
            return self._unified[asset_type].get(name) or self._assets[asset_type].get(
                name
            )

    def is_registered(self, asset_type: AssetType, name: str) -> bool:
        with self._lock:
            if name in self._unified[asset_type]:
                return True
            return name in self._assets[asset_type] and self._owner(asset_type, name) is None

    def list_registered_sources(
        self, group_id: str, asset_type: AssetType, placement: Placement
    ) -> list[SourceFile]:
        with self._lock:
            references = [
                ref
                for ref in self._assets[asset_type].values()
                if ref.placement == placement
                and self._owner(asset_type, ref.name) in (None, group_id)
            ]
        return [
            SourceFile(ref.name, ref.filename, resolve_source_path(ref))
            for ref in references
        ]

    def check_group_id(self, group_id: str, asset_type: AssetType) -> None:
        with self._lock:
            if group_id in self._assets[asset_type]:
                raise ConfigurationError(
                    f"Group id {group_id!r} collides with a registered {asset_type.value}"
                )

    def register_unified(
        self,
        group_id: str,
        asset_type: AssetType,
        url: str,
        path: str,
        sources: list[SourceFile],
    ) -> None:
        with self._lock:
            self.check_group_id(group_id, asset_type)
            names = tuple(s.name for s in sources if s.name in self._assets[asset_type])
            originals = [self._assets[asset_type][n] for n in names]

            self._unified[asset_type][group_id] = AssetReference(
                name=group_id,
                url=url,
                asset_type=asset_type,
                deps=_merge_deps(originals, exclude=set(names)),
                placement=originals[0].placement if originals else Placement.FRONT,
                options=_merge_options(asset_type, originals),
                path=path,
            )
            self._absorbed[asset_type][group_id] = names
            self._reverted[asset_type].discard(group_id)
        logger.debug("Registered unified %s %r replacing %s", asset_type.value, group_id, names)

    def deregister(self, group_id: str, asset_type: AssetType) -> bool:
        with self._lock:
            self._absorbed[asset_type].pop(group_id, None)
            if self._unified[asset_type].pop(group_id, None) is None:
                return False
            self._reverted[asset_type].add(group_id)
            return True

    def visible(self, asset_type: AssetType, placement: Placement) -> list[AssetReference]:
        with self._lock:
            owners = {
                name: group_id
                for group_id, names in self._absorbed[asset_type].items()
                for name in names
            }
            references: list[AssetReference] = []
            emitted_groups: set[str] = set()
            for ref in self._assets[asset_type].values():
                group_id = owners.get(ref.name)
                if group_id is None:
                    references.append(ref)
                elif group_id not in emitted_groups:
                    emitted_groups.add(group_id)
                    references.append(self._unified[asset_type][group_id])

        references = [ref for ref in references if ref.placement == placement]
        return _sorted_by_deps(references, owners)

    def absorbed(self, asset_type: AssetType, group_id: str) -> list[AssetReference]:
        with self._lock:
            table = self._assets[asset_type]
            return [
                table[name]
                for name in self._absorbed[asset_type].get(group_id, ())
                if name in table
            ]

    def clear(self) -> None:
        with self._lock:
            for table in (self._assets, self._unified, self._absorbed, self._reverted):
                for entries in table.values():
                    entries.clear()

    def _owner(self, asset_type: AssetType, name: str) -> str | None:
        for group_id, names in self._absorbed[asset_type].items():
            if name in names:
                return group_id
        return None


def _merge_deps(originals: list[AssetReference], exclude: set[str]) -> tuple[str, ...]:
    """Union of the originals' dependencies, first occurrence wins."""
    deps: list[str] = []
    for ref in originals:
        for dep in ref.deps:
            if dep not in exclude and dep not in deps:
                deps.append(dep)
    return tuple(deps)


def _merge_options(
    asset_type: AssetType, originals: list[AssetReference]
) -> StyleOptions | ScriptOptions:
    if asset_type is AssetType.STYLE:
        media = {ref.options.media for ref in originals}  # type: ignore[union-attr]
        return StyleOptions(media=media.pop() if len(media) == 1 else "all")
    # Parameters stay on the originals; rendering reads them via absorbed().
    footer = [ref.options.footer for ref in originals]  # type: ignore[union-attr]
    return ScriptOptions(footer=bool(footer) and all(footer))


def _sorted_by_deps(
    references: list[AssetReference], aliases: dict[str, str]
) -> list[AssetReference]:
    """Order references so registered dependencies come first.

    ``aliases`` maps absorbed names to the group that replaced them. Unknown
    dependencies are ignored; a cycle is broken where it is detected.
    """
    by_name = {ref.name: ref for ref in references}
    ordered: list[AssetReference] = []
    done: set[str] = set()
    visiting: set[str] = set()

    def visit(ref: AssetReference) -> None:
        if ref.name in done:
            return
        if ref.name in visiting:
            logger.warning("Dependency cycle involving %r", ref.name)
            return
        visiting.add(ref.name)
        for dep in ref.deps:
            target = by_name.get(aliases.get(dep, dep))
            if target is not None and target.name != ref.name:
                visit(target)
        visiting.discard(ref.name)
        done.add(ref.name)
        ordered.append(ref)

    for ref in references:
        visit(ref)
    return ordered
