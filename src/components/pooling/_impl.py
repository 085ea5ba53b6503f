"""
PoolingService - Compliance pooling across routes.

Redistributes compliance balance inside a pool so deficit members are covered
by surplus members while the pool total stays non-negative.

Functional Core - ``allocate`` is pure; the service adds lookups and persistence.

Allocation:
1. Surplus members sorted by CB descending, deficit members ascending
   (most negative first). Zero-CB members take no part.
2. Reject the pool if total surplus + total deficit < 0.
3. For each deficit member, take min(need, donor remaining) from the head
   donor until the need is covered. A donor stays at the head until it is
   spent, then the next one in step-1 order takes over.
4. Verify no donor ended below zero.

Invariants:
- adjusted_cb == initial_cb + allocation_used for every member
- sum(adjusted_cb) == sum(initial_cb)
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence

from src.domain.compliance import BalanceCalculator
from src.domain.entities import Pool, PoolMember
from src.domain.errors import (
    DonorOverdrawnError,
    InvalidInputError,
    InvalidMembersError,
    PoolInfeasibleError,
)

from .models import AllocationPlan, PoolAllocationResult
from .ports import PoolRepoPort, RouteRepoPort

logger = logging.getLogger(__name__)

DEFAULT_MIN_MEMBERS = 2


def allocate(members: Sequence[PoolMember]) -> AllocationPlan:
    """
    Run the greedy transfer over fresh members.

    Members are mutated in place and returned in result order: deficit
    members as processed, then surplus members, then zero-CB members.

    Raises:
        PoolInfeasibleError: total deficit exceeds total surplus
        DonorOverdrawnError: a surplus member finished below zero
    """
    surplus = sorted((m for m in members if m.initial_cb > 0), key=lambda m: -m.initial_cb)
    deficit = sorted((m for m in members if m.initial_cb < 0), key=lambda m: m.initial_cb)
    passengers = [m for m in members if m.initial_cb == 0]

    total_surplus = sum(m.initial_cb for m in surplus)
    total_deficit = sum(m.initial_cb for m in deficit)

    if total_surplus + total_deficit < 0:
        raise PoolInfeasibleError(total_surplus, total_deficit, members)

    head = 0
    for recipient in deficit:
        need = -recipient.adjusted_cb
        while need > 0 and head < len(surplus):
            donor = surplus[head]
            transfer = min(need, donor.adjusted_cb)

            donor.adjusted_cb -= transfer
            donor.allocation_used -= transfer
            recipient.adjusted_cb += transfer
            recipient.allocation_used += transfer
            need -= transfer

            if donor.adjusted_cb <= 0:
                head += 1

    allocated = [*deficit, *surplus, *passengers]

    for member in allocated:
        if member.initial_cb > 0 and member.adjusted_cb < 0:
            raise DonorOverdrawnError(member.route_id, member.adjusted_cb)

    return AllocationPlan(
        members=allocated,
        total_surplus=total_surplus,
        total_deficit=total_deficit,
        final_sum_cb=sum(m.adjusted_cb for m in allocated),
    )


class PoolingService:
    """
    Pooling service.

    Builds members from stored routes, allocates, and persists the pool.
    """

    def __init__(
        self,
        route_repo: RouteRepoPort,
        pool_repo: PoolRepoPort,
        calculator: BalanceCalculator | None = None,
        min_members: int = DEFAULT_MIN_MEMBERS,
    ) -> None:
        self._routes = route_repo
        self._pools = pool_repo
        self._calc = calculator or BalanceCalculator()
        self._min_members = min_members

    def _validate(self, route_ids: Sequence[str], pool_name: str, year: int) -> None:
        if len(route_ids) < self._min_members:
            raise InvalidInputError(
                f"A pool requires at least {self._min_members} route IDs",
                field="route_ids",
            )
        if not pool_name or not pool_name.strip():
            raise InvalidInputError("Pool name is required", field="pool_name")
        if isinstance(year, bool) or not isinstance(year, int):
            raise InvalidInputError("Year must be an integer", field="year")

        duplicates = [rid for rid, count in Counter(route_ids).items() if count > 1]
        if duplicates:
            raise InvalidMembersError(duplicates, reason="duplicate")

    def build_members(self, route_ids: Sequence[str]) -> list[PoolMember]:
        """Snapshot the current CB of every route. Raises InvalidMembersError."""
        routes = {rid: self._routes.get_by_id(rid) for rid in route_ids}
        missing = [rid for rid, route in routes.items() if route is None]
        if missing:
            raise InvalidMembersError(missing)

        members = []
        for rid in route_ids:
            route = routes[rid]
            assert route is not None
            cb = self._calc.balance(route)
            members.append(PoolMember(route_id=rid, initial_cb=cb, adjusted_cb=cb))
        return members

    def create_pool(
        self,
        route_ids: Sequence[str],
        pool_name: str,
        year: int,
    ) -> PoolAllocationResult:
        """
        Allocate compliance balance across routes and persist the pool.

        Raises:
            InvalidInputError: too few ids, blank name or non-integer year
            InvalidMembersError: unknown or duplicate route ids
            PoolInfeasibleError: pool total is negative (nothing persisted)
            DonorOverdrawnError: allocation defect (nothing persisted)
        """
        self._validate(route_ids, pool_name, year)
        members = self.build_members(route_ids)

        try:
            plan = allocate(members)
        except PoolInfeasibleError as e:
            logger.warning(
                "Pool '%s' (%d) infeasible: sum CB %.2f", pool_name, year, e.total_sum_cb
            )
            raise
        except DonorOverdrawnError as e:
            logger.error(
                "Allocation defect in pool '%s': donor %s overdrawn to %.2f",
                pool_name,
                e.route_id,
                e.adjusted_cb,
            )
            raise

        pool = Pool(name=pool_name.strip(), year=year, members=plan.members)
        self._pools.save_pool(pool)

        logger.info(
            "Pool %s '%s' (%d) created with %d members, final sum CB %.2f",
            pool.id,
            pool.name,
            year,
            len(plan.members),
            plan.final_sum_cb,
        )
        return PoolAllocationResult(
            pool_id=pool.id,
            pool_name=pool.name,
            year=year,
            is_compliant=True,
            initial_sum_cb=plan.initial_sum_cb,
            final_sum_cb=plan.final_sum_cb,
            members=tuple(plan.members),
        )

    def list_pools(self, year: int) -> list[Pool]:
        return self._pools.list_by_year(year)
