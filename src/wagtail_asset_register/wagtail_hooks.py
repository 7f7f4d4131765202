"""Wagtail hooks emitting admin placement assets."""

from __future__ import annotations

from django.utils.safestring import SafeString
from wagtail import hooks

from .assets import Placement
from .rendering import render_scripts, render_styles
from .utils import get_host


@hooks.register("insert_global_admin_css")
def global_admin_css() -> SafeString:
    """Emit styles registered for the admin placement on every admin page."""
    return render_styles(get_host(), Placement.ADMIN)


@hooks.register("insert_global_admin_js")
def global_admin_js() -> SafeString:
    """Emit scripts registered for the admin placement on every admin page.

    Wagtail renders this hook at the end of the page, so header and footer
    scripts are emitted together.
    """
    return render_scripts(get_host(), Placement.ADMIN)
