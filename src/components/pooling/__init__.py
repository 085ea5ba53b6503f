"""
Pooling component - Greedy compliance balance pooling.
"""

from ._impl import DEFAULT_MIN_MEMBERS, PoolingService, allocate
from .component import run_create, run_list
from .models import (
    AllocationPlan,
    CreatePoolInput,
    ListPoolsInput,
    PoolAllocationResult,
    PoolListOutput,
)
from .ports import PoolRepoPort, RouteRepoPort

__all__ = [
    # Entry points
    "run_create",
    "run_list",
    # Input models
    "CreatePoolInput",
    "ListPoolsInput",
    # Output models
    "AllocationPlan",
    "PoolAllocationResult",
    "PoolListOutput",
    # Ports
    "PoolRepoPort",
    "RouteRepoPort",
    # Core
    "allocate",
    "PoolingService",
    "DEFAULT_MIN_MEMBERS",
]
