"""
OpenAPI module.

Assembles OpenAPI documents from API shape types and renders them as
browsable pages.
"""

from __future__ import annotations

from .assembler import DEFAULT_INFO, OpenApiGenerator
from .http import HTTP_METHODS, is_http_method, is_status_code
from .render import render_redoc_html

__all__ = [
    "DEFAULT_INFO",
    "HTTP_METHODS",
    "OpenApiGenerator",
    "is_http_method",
    "is_status_code",
    "render_redoc_html",
]
