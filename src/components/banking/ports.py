"""
Banking component - Port interfaces.
"""

from __future__ import annotations

from src.ports.repo import LedgerRepoPort, RouteRepoPort

__all__ = ["LedgerRepoPort", "RouteRepoPort"]
