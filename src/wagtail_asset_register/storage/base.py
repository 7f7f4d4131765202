from __future__ import annotations

from abc import ABC, abstractmethod


class BaseAssetStorage(ABC):
    """Abstract base class for unified asset storage backends.

    Storage backends persist unified CSS/JS files under an output root and
    return URLs for accessing them.
    """

    @abstractmethod
    def resolve_dir(self, location: str) -> str:
        """Normalize a caller-supplied output directory to a storage path.

        Args:
            location: A path relative to the output root, an absolute path
                inside it, or a URL under the output URL

        Returns:
            The directory as a storage path (e.g., "min/css")
        """
        ...

    @abstractmethod
    def save(self, path: str, content: bytes) -> str:
        """Save asset content to storage, replacing any existing file.

        Args:
            path: The storage path (e.g., "min/css/0a1b...e9.css")
            content: The asset content to save

        Returns:
            The full URL to access the saved asset
        """
        ...

    @abstractmethod
    def full_path(self, path: str) -> str:
        """Return the absolute filesystem path of a storage path."""
        ...
