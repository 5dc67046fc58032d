from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Dict, List
from decimal import Decimal


class Expense(BaseModel):
    model_config = ConfigDict(frozen=True)

    payer: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0, allow_inf_nan=False)
    description: str = Field("", max_length=200)

    @field_validator("payer")
    @classmethod
    def payer_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("payer must not be blank")
        return value

    @field_validator("amount", mode="before")
    @classmethod
    def amount_not_bool(cls, value):
        # bool is an int subclass and would otherwise coerce to 0/1
        if isinstance(value, bool):
            raise ValueError("amount must be a number")
        return value


class BalanceRequest(BaseModel):
    participants: List[str]
    expenses: List[Expense] = []


class BalanceResponse(BaseModel):
    balances: Dict[str, Decimal]
