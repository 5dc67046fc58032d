from pydantic import BaseModel, Field, ConfigDict
from typing import Dict, List
from decimal import Decimal


class Settlement(BaseModel):
    """A single transfer from a debtor to a creditor."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_participant: str = Field(..., alias="from")
    to_participant: str = Field(..., alias="to")
    amount: Decimal = Field(..., gt=0)


class SettlementRequest(BaseModel):
    balances: Dict[str, Decimal]


class SplitSummary(BaseModel):
    total: Decimal
    fair_share: Decimal
    balances: Dict[str, Decimal]
    settlements: List[Settlement] = []
