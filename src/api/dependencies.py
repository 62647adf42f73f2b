"""Shared FastAPI dependencies.

Separated so tests can override them without touching route modules.
"""

from __future__ import annotations

from voice.cors import OriginPolicy


def get_origin_policy() -> OriginPolicy:
    return OriginPolicy.from_settings()
