from fastapi import APIRouter, Depends, HTTPException
from typing import Dict, List
from decimal import Decimal
from splitter.core.config import Settings, get_settings
from splitter.core.exceptions import SplitError
from splitter.services.split_service import compute_balances, optimize_settlements, summarize_split
from splitter.schemas.expense_schema import BalanceRequest, BalanceResponse
from splitter.schemas.settlement_schema import Settlement, SettlementRequest, SplitSummary
from splitter.utils.balances import round_decimal

router = APIRouter(prefix="/splits", tags=["splits"])


def _round_balances(balances: Dict[str, Decimal], precision: Decimal) -> Dict[str, Decimal]:
    return {name: round_decimal(balance, precision) for name, balance in balances.items()}


def _round_settlements(settlements: List[Settlement], precision: Decimal) -> List[Settlement]:
    # Transfers too small to show at this precision are dropped
    rounded = [
        settlement.model_copy(update={"amount": round_decimal(settlement.amount, precision)})
        for settlement in settlements
    ]
    return [settlement for settlement in rounded if settlement.amount > 0]


@router.post("/balances", response_model=BalanceResponse)
def get_balances(request: BalanceRequest, settings: Settings = Depends(get_settings)):
    """Net balance for each participant"""
    try:
        balances = compute_balances(request.participants, request.expenses, settings)
    except SplitError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return BalanceResponse(balances=_round_balances(balances, settings.display_precision))


@router.post("/settlements", response_model=List[Settlement])
def get_settlements(request: SettlementRequest, settings: Settings = Depends(get_settings)):
    """Minimal list of transfers that settles the given balances"""
    try:
        settlements = optimize_settlements(request.balances, settings)
    except SplitError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _round_settlements(settlements, settings.display_precision)


@router.post("/summary", response_model=SplitSummary)
def get_summary(request: BalanceRequest, settings: Settings = Depends(get_settings)):
    """Total, fair share, balances and settlement plan in one response"""
    try:
        summary = summarize_split(request.participants, request.expenses, settings)
    except SplitError as e:
        raise HTTPException(status_code=400, detail=str(e))

    precision = settings.display_precision
    return SplitSummary(
        total=round_decimal(summary.total, precision),
        fair_share=round_decimal(summary.fair_share, precision),
        balances=_round_balances(summary.balances, precision),
        settlements=_round_settlements(summary.settlements, precision)
    )
