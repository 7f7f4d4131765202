"""Exceptions raised by wagtail-asset-register."""

from __future__ import annotations


class AssetRegisterError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(AssetRegisterError):
    """Invalid asset options, output spec, or settings."""


class AssetIOError(AssetRegisterError):
    """A source file could not be read or an output file could not be written."""
