from datetime import UTC, datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---
BalanceStatus = Literal["Surplus", "Deficit"]


def new_bank_entry_id() -> str:
    return f"BANK-{uuid4().hex}"


def new_pool_id() -> str:
    return f"POOL-{uuid4().hex}"


# --- Routes ---

class Route(BaseModel):
    id: str
    vessel_type: str
    fuel_type: str
    year: int
    ghg_intensity: float  # gCO2e/MJ
    fuel_consumption: float  # tonnes
    distance: float  # km
    is_baseline: bool = False


# --- Banking ---

class BankEntry(BaseModel):
    """
    A banked surplus. Consumption is a one-way transition of applied_year,
    the record itself is never removed.
    """

    id: str = Field(default_factory=new_bank_entry_id)
    route_id: str
    year: int  # vintage: year the surplus was generated
    amount: float = Field(gt=0)
    applied_year: int | None = None

    @property
    def is_available(self) -> bool:
        return self.applied_year is None

    def mark_applied(self, apply_year: int) -> "BankEntry":
        """Return the consumed version of this entry."""
        if self.applied_year is not None:
            raise ValueError(
                f"Bank entry {self.id} already applied to {self.applied_year}"
            )
        return self.model_copy(update={"applied_year": apply_year})


# --- Pooling ---

class PoolMember(BaseModel):
    route_id: str
    initial_cb: float
    adjusted_cb: float
    allocation_used: float = 0.0


class Pool(BaseModel):
    id: str = Field(default_factory=new_pool_id)
    name: str
    year: int
    members: list[PoolMember] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
