"""
HTTP vocabulary of API shapes.
"""

from __future__ import annotations

from http import HTTPMethod, HTTPStatus

# Methods allowed as OpenAPI path item operations
HTTP_METHODS = tuple(m.value for m in HTTPMethod if m is not HTTPMethod.CONNECT)

_STATUS_CODES = frozenset(str(status.value) for status in HTTPStatus)


def is_http_method(value: str) -> bool:
    return value.upper() in HTTP_METHODS


def is_status_code(token: str) -> bool:
    """Whether a response key is a known HTTP status code or "default"."""
    return token == "default" or token in _STATUS_CODES
