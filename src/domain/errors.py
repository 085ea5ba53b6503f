"""
Compliance engine error taxonomy.

Every error carries a stable ``code`` used by the HTTP and CLI shells.
Business-rule errors are raised before any write; the two defect errors
(DonorOverdrawnError, AllocationShortfallError) signal a broken invariant.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class ComplianceError(Exception):
    """Base compliance engine error."""

    code = "compliance_error"
    is_defect = False

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class InvalidInputError(ComplianceError):
    """Input rejected at the component boundary."""

    code = "invalid_input"

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "field": self.field}


class NotFoundError(ComplianceError):
    """Referenced route does not exist."""

    code = "route_not_found"

    def __init__(self, route_id: str) -> None:
        self.route_id = route_id
        super().__init__(f"Route ID {route_id} not found.")


# --- Banking ---


class BankingError(ComplianceError):
    """Base banking rule violation."""

    code = "banking_error"


class DeficitError(BankingError):
    """Route has no surplus to bank."""

    code = "cb_not_positive"

    def __init__(self, route_id: str, balance: float) -> None:
        self.route_id = route_id
        self.balance = balance
        super().__init__(
            f"Cannot bank surplus for {route_id}: current CB ({balance:.2f}) is not a surplus."
        )


class ExceedsSurplusError(BankingError):
    """Bank request larger than the route's current CB."""

    code = "exceeds_surplus"

    def __init__(self, amount: float, balance: float) -> None:
        self.amount = amount
        self.balance = balance
        super().__init__(
            f"Bank amount ({amount}) exceeds actual surplus ({balance:.2f})."
        )


class ExceedsAvailableError(BankingError):
    """Apply request larger than the unapplied banked total."""

    code = "exceeds_available"

    def __init__(self, amount: float, available: float) -> None:
        self.amount = amount
        self.available = available
        super().__init__(
            f"Application amount ({amount}) exceeds available banked surplus ({available:.2f})."
        )


class AllocationShortfallError(BankingError):
    """Unapplied entries could not cover an amount that passed the ceiling check."""

    code = "allocation_shortfall"
    is_defect = True

    def __init__(self, owner_id: str, remaining: float) -> None:
        self.owner_id = owner_id
        self.remaining = remaining
        super().__init__(
            f"Could not cover {remaining:.2f} for {owner_id} with available banked entries."
        )


# --- Pooling ---


class PoolingError(ComplianceError):
    """Base pool rule violation."""

    code = "pooling_error"


class InvalidMembersError(PoolingError):
    """Pool member list references unknown or duplicate routes."""

    code = "invalid_members"

    def __init__(self, route_ids: Sequence[str], reason: str = "not found") -> None:
        self.route_ids = list(route_ids)
        self.reason = reason
        super().__init__(f"Invalid pool members ({reason}): {', '.join(self.route_ids)}")


class PoolInfeasibleError(PoolingError):
    """Total deficit is larger than total surplus."""

    code = "pool_infeasible"

    def __init__(
        self,
        total_surplus: float,
        total_deficit: float,
        members: Sequence[Any],
    ) -> None:
        self.total_surplus = total_surplus
        self.total_deficit = total_deficit
        self.total_sum_cb = total_surplus + total_deficit
        self.members = list(members)
        super().__init__(
            f"Pool is non-compliant: total deficit ({total_deficit:.2f}) is greater than "
            f"total surplus ({total_surplus:.2f}). Sum CB is {self.total_sum_cb:.2f}."
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "total_sum_cb": self.total_sum_cb,
            "members": [
                m.model_dump() if hasattr(m, "model_dump") else m for m in self.members
            ],
        }


class DonorOverdrawnError(PoolingError):
    """A surplus member finished the allocation below zero."""

    code = "donor_overdrawn"
    is_defect = True

    def __init__(self, route_id: str, adjusted_cb: float) -> None:
        self.route_id = route_id
        self.adjusted_cb = adjusted_cb
        super().__init__(
            f"Pool rule violation: surplus ship {route_id} exited with a negative CB "
            f"({adjusted_cb:.2f})."
        )
