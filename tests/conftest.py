"""Pytest fixtures for wagtail-asset-register tests."""

from __future__ import annotations

from unittest import mock

import pytest

from wagtail_asset_register.utils import get_host, reset_host

EDITOR_STYLE_CSS = "/* editor */\nbody.mceContentBody { font-size: 14px; }\n"
STYLE_CSS = "/* theme */\nbody {\n    color: #444;\n    margin: 0;\n}\n"
HTML5_JS = "/* html5 shiv */\n(function (w) {\n    w.html5 = true;\n})(window);\n"
NAVIGATION_JS = (
    "// navigation\n"
    "(function () {\n"
    "    var nav = document.getElementById('site-navigation');\n"
    "    if (!nav) { return; }\n"
    "})();\n"
)


@pytest.fixture(autouse=True)
def fresh_host():
    """Give every test an empty process-wide registration host."""
    reset_host()
    yield
    reset_host()


@pytest.fixture
def host():
    return get_host()


@pytest.fixture
def static_root(tmp_path, settings):
    """Temporary STATIC_ROOT used for both sources and unified output."""
    root = tmp_path / "static"
    root.mkdir()
    settings.STATIC_ROOT = str(root)
    settings.STATIC_URL = "/static/"
    return root


@pytest.fixture
def theme_dir(static_root):
    """A theme directory with two stylesheets and two scripts."""
    theme = static_root / "twentytwelve"
    (theme / "js").mkdir(parents=True)
    (theme / "editor-style.css").write_text(EDITOR_STYLE_CSS, encoding="utf-8")
    (theme / "style.css").write_text(STYLE_CSS, encoding="utf-8")
    (theme / "js" / "html5.js").write_text(HTML5_JS, encoding="utf-8")
    (theme / "js" / "navigation.js").write_text(NAVIGATION_JS, encoding="utf-8")
    return theme


@pytest.fixture
def theme_url():
    return "/static/twentytwelve/"


@pytest.fixture
def mock_storage():
    """Mock storage backend."""
    storage = mock.Mock()
    storage.resolve_dir.side_effect = lambda location: location.strip("/")
    storage.save.side_effect = lambda path, content: f"/static/{path}"
    storage.full_path.side_effect = lambda path: f"/srv/static/{path}"
    return storage
