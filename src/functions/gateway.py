"""Helpers for serverless function handlers.

Handlers receive an API gateway style event::

    {"httpMethod": "POST", "headers": {...}, "body": "...",
     "isBase64Encoded": False, "queryStringParameters": {...}}

and return ``{"statusCode": int, "headers": dict, "body": str}``.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any

from voice.errors import ValidationError

Event = dict[str, Any]
Result = dict[str, Any]


def header(event: Event, name: str) -> str | None:
    headers = event.get("headers") or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def method(event: Event) -> str:
    return str(event.get("httpMethod") or "").upper()


def query_param(event: Event, name: str) -> str | None:
    params = event.get("queryStringParameters") or {}
    return params.get(name)


def raw_body(event: Event) -> str:
    body = event.get("body")
    if not body:
        return ""
    if not event.get("isBase64Encoded"):
        return body
    try:
        return base64.b64decode(body, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ValidationError("Invalid request body") from exc


def result(status_code: int, headers: dict[str, str], body: str | None = None) -> Result:
    response: Result = {"statusCode": status_code, "headers": headers}
    if body is not None:
        response["body"] = body
    return response
