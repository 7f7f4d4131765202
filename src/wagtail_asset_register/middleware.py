"""Middleware for injecting front-end asset tags into HTML responses."""

from __future__ import annotations

import logging
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from .assets import Placement
from .conf import get_setting
from .rendering import render_scripts, render_styles
from .utils import get_host

logger = logging.getLogger(__name__)


class AssetRegisterMiddleware:
    """Inject registered front-end styles and scripts into HTML pages.

    Styles and header scripts go before ``</head>``, footer scripts before
    ``</body>``. Admin requests, streaming responses and non-HTML responses
    pass through untouched; the admin gets its assets from Wagtail hooks.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        response = self.get_response(request)

        if getattr(response, "streaming", False):
            return response

        content_type = response.get("Content-Type", "")
        if "text/html" not in content_type:
            return response

        if _is_admin_request(request):
            return response

        charset = response.charset or "utf-8"
        content = response.content.decode(charset)
        processed = _process_html(content)
        if processed == content:
            return response

        response.content = processed.encode(charset)
        response["Content-Length"] = len(response.content)
        return response


def _is_admin_request(request: HttpRequest) -> bool:
    prefix: str = get_setting("ADMIN_PATH_PREFIX")
    return bool(prefix) and request.path.startswith(prefix)


def _process_html(html: str) -> str:
    """Insert head and footer tags for the front-end placement."""
    host = get_host()

    head = "\n".join(
        part
        for part in (
            render_styles(host, Placement.FRONT),
            render_scripts(host, Placement.FRONT, footer=False),
        )
        if part
    )
    if head and "</head>" in html:
        html = html.replace("</head>", f"{head}\n</head>", 1)

    footer = render_scripts(host, Placement.FRONT, footer=True)
    if footer:
        if "</body>" in html:
            html = html.replace("</body>", f"{footer}\n</body>", 1)
        else:
            logger.debug("No </body> in response; footer scripts not injected")

    return html
