"""
Pooling component - Compliance pooling.

Shell Layer - maps component inputs onto PoolingService calls.
"""

from __future__ import annotations

from ._impl import PoolingService
from .models import CreatePoolInput, ListPoolsInput, PoolAllocationResult, PoolListOutput


def run_create(input_data: CreatePoolInput, service: PoolingService) -> PoolAllocationResult:
    """Create a pool and allocate compliance balance across its members."""
    return service.create_pool(
        route_ids=list(input_data.route_ids),
        pool_name=input_data.pool_name,
        year=input_data.year,
    )


def run_list(input_data: ListPoolsInput, service: PoolingService) -> PoolListOutput:
    """List pools created for a year."""
    pools = service.list_pools(input_data.year)
    return PoolListOutput(pools=tuple(pools), total=len(pools))
