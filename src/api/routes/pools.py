"""Pooling endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.api.deps import get_pooling_service
from src.api.errors import to_http_exception
from src.api.schemas import PoolAllocationResponse, PoolMemberResponse, PoolResponse
from src.components.pooling import (
    CreatePoolInput,
    ListPoolsInput,
    PoolingService,
    run_create,
    run_list,
)
from src.domain.errors import ComplianceError

router = APIRouter()


class PoolCreateRequest(BaseModel):
    route_ids: list[str] = Field(min_length=2)
    pool_name: str = Field(min_length=1)
    year: int


@router.post("", response_model=PoolAllocationResponse)
def create_pool(
    data: PoolCreateRequest,
    service: PoolingService = Depends(get_pooling_service),
) -> PoolAllocationResponse:
    """Create a pool and redistribute compliance balance across its members."""
    input_data = CreatePoolInput(
        route_ids=tuple(data.route_ids),
        pool_name=data.pool_name,
        year=data.year,
    )
    try:
        result = run_create(input_data, service)
    except ComplianceError as e:
        raise to_http_exception(e) from e

    return PoolAllocationResponse(
        message=result.message,
        pool_id=result.pool_id,
        pool_name=result.pool_name,
        year=result.year,
        is_compliant=result.is_compliant,
        initial_sum_cb=result.initial_sum_cb,
        total_adjusted_cb=result.final_sum_cb,
        members=[PoolMemberResponse.model_validate(m) for m in result.members],
    )


@router.get("", response_model=list[PoolResponse])
def list_pools(
    year: int,
    service: PoolingService = Depends(get_pooling_service),
) -> list[PoolResponse]:
    """Pools created for a compliance year."""
    result = run_list(ListPoolsInput(year=year), service)
    return [PoolResponse.model_validate(pool) for pool in result.pools]
