"""Django app configuration for wagtail-asset-register."""

from django.apps import AppConfig


class WagtailAssetRegisterConfig(AppConfig):
    name = "wagtail_asset_register"
    verbose_name = "Wagtail Asset Register"

    def ready(self) -> None:
        from .api import load_assets_from_settings, unify_configured_groups

        load_assets_from_settings()
        unify_configured_groups()
