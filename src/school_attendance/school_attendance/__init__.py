"""School attendance package.

Organized by feature modules (students, attendance, notifications, reports) with a thin
Flask controller layer over service/repository layers. The `absence` package holds the
in-memory timers that auto-mark students absent.
"""
from __future__ import annotations

from .main import create_app

__all__ = ["create_app"]
