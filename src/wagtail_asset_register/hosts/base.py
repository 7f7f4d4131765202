from __future__ import annotations

from abc import ABC, abstractmethod

from ..assets import AssetReference, AssetType, Placement, SourceFile


class BaseRegistrationHost(ABC):
    """Abstract base class for asset registration hosts.

    A host owns the table of registered styles and scripts. The unifier
    reads sources from it and swaps the originals of a group for a single
    unified registration named after the group.
    """

    @abstractmethod
    def add(self, reference: AssetReference) -> bool:
        """Register an asset.

        Returns:
            False if an asset with the same name and type is already registered
        """
        ...

    @abstractmethod
    def remove(self, asset_type: AssetType, name: str) -> bool:
        """Remove an asset or a unified group.

        Removing a group that was reverted with ``deregister`` forgets the
        group and leaves the restored originals registered.

        Returns:
            True if a registration or a reverted group was removed
        """
        ...

    @abstractmethod
    def get(self, asset_type: AssetType, name: str) -> AssetReference | None:
        """Return the registration for ``name``, unified or not."""
        ...

    @abstractmethod
    def is_registered(self, asset_type: AssetType, name: str) -> bool:
        """Check whether ``name`` is currently emitted as an asset of this type."""
        ...

    @abstractmethod
    def list_registered_sources(
        self, group_id: str, asset_type: AssetType, placement: Placement
    ) -> list[SourceFile]:
        """List the sources a group would unify, in registration order.

        Sources already absorbed by a different group are excluded.
        """
        ...

    @abstractmethod
    def check_group_id(self, group_id: str, asset_type: AssetType) -> None:
        """Ensure ``group_id`` can name a unified registration.

        Raises:
            ConfigurationError: if an asset of this type already uses the name
        """
        ...

    @abstractmethod
    def register_unified(
        self,
        group_id: str,
        asset_type: AssetType,
        url: str,
        path: str,
        sources: list[SourceFile],
    ) -> None:
        """Hide ``sources`` and register one asset named ``group_id`` in their place."""
        ...

    @abstractmethod
    def deregister(self, group_id: str, asset_type: AssetType) -> bool:
        """Drop a unified registration and restore the originals it replaced.

        Returns:
            True if the group had a unified registration
        """
        ...

    @abstractmethod
    def visible(self, asset_type: AssetType, placement: Placement) -> list[AssetReference]:
        """Assets to emit for a placement, dependencies first."""
        ...

    @abstractmethod
    def absorbed(self, asset_type: AssetType, group_id: str) -> list[AssetReference]:
        """Original assets replaced by a unified group."""
        ...
