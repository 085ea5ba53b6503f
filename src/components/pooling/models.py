"""
Pooling component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.domain.entities import Pool, PoolMember

# --- Input Models ---


@dataclass(frozen=True)
class CreatePoolInput:
    """Input for creating a pool."""

    route_ids: tuple[str, ...]
    pool_name: str
    year: int


@dataclass(frozen=True)
class ListPoolsInput:
    """Input for listing pools of a year."""

    year: int


# --- Output Models ---


@dataclass
class AllocationPlan:
    """Result of the greedy transfer, before anything is persisted."""

    members: list[PoolMember]
    total_surplus: float
    total_deficit: float
    final_sum_cb: float

    @property
    def initial_sum_cb(self) -> float:
        return self.total_surplus + self.total_deficit


@dataclass(frozen=True)
class PoolAllocationResult:
    """Output from a successful pool creation."""

    pool_id: str
    pool_name: str
    year: int
    is_compliant: bool
    initial_sum_cb: float
    final_sum_cb: float
    members: tuple[PoolMember, ...]
    message: str = "Pool creation and allocation successful."


@dataclass(frozen=True)
class PoolListOutput:
    """Output from list operation."""

    pools: tuple[Pool, ...]
    total: int
