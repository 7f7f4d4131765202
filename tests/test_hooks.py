"""Tests for wagtail_hooks module."""

from wagtail import hooks

from wagtail_asset_register import api
from wagtail_asset_register.wagtail_hooks import global_admin_css, global_admin_js


class TestGlobalAdminCss:
    def test_renders_admin_styles(self):
        """Hook emits admin placement styles only."""
        api.add("style", {"name": "admin", "url": "/static/admin.css", "place": "admin"})
        api.add("style", {"name": "front", "url": "/static/front.css"})

        html = global_admin_css()

        assert 'id="admin-css"' in html
        assert "front-css" not in html

    def test_empty_without_assets(self):
        assert global_admin_css() == ""

    def test_registered_with_wagtail(self):
        assert global_admin_css in hooks.get_hooks("insert_global_admin_css")


class TestGlobalAdminJs:
    def test_renders_header_and_footer_scripts(self):
        api.add("script", {"name": "a", "url": "/static/a.js", "place": "admin"})
        api.add(
            "script",
            {"name": "b", "url": "/static/b.js", "place": "admin", "footer": True},
        )

        html = global_admin_js()

        assert 'id="a-js"' in html
        assert 'id="b-js"' in html

    def test_registered_with_wagtail(self):
        assert global_admin_js in hooks.get_hooks("insert_global_admin_js")
