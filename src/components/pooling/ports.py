"""
Pooling component - Port interfaces.
"""

from __future__ import annotations

from src.ports.repo import PoolRepoPort, RouteRepoPort

__all__ = ["PoolRepoPort", "RouteRepoPort"]
