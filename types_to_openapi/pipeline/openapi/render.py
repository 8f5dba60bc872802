"""
ReDoc page renderer.

Embeds an OpenAPI document into a standalone HTML page so the result can be
browsed without serving the JSON separately.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2

REDOC_URL = "https://cdn.redoc.ly/redoc/latest/bundles/redoc.standalone.js"

_TEMPLATE_DIR = Path(__file__).parent.parent.parent / "templates" / "redoc"


def _environment() -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=jinja2.select_autoescape(["html", "html.jinja2"]),
        lstrip_blocks=True,
        trim_blocks=True,
    )


def render_redoc_html(document: dict[str, Any], title: str | None = None, expand_responses: str = "200,201") -> str:
    """
    Render an OpenAPI document as a ReDoc HTML page.

    Args:
        document: The OpenAPI document
        title: Page title, defaults to ``info.title`` of the document
        expand_responses: Comma separated status codes expanded by default

    Returns:
        The HTML page
    """
    if title is None:
        title = (document.get("info") or {}).get("title") or "OpenAPI specification"
    template = _environment().get_template("page.html.jinja2")
    return template.render(
        title=title,
        document=document,
        redoc_url=REDOC_URL,
        expand_responses=expand_responses,
    )
