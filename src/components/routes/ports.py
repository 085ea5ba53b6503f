"""
Routes component - Port interfaces.
"""

from __future__ import annotations

from src.ports.repo import RouteRepoPort

__all__ = ["RouteRepoPort"]
