import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence

from splitter.core.config import Settings, get_settings
from splitter.schemas.settlement_schema import Settlement, SplitSummary
from splitter.utils import balances as balance_utils
from splitter.utils import settlements as settlement_utils

logger = logging.getLogger(__name__)


def compute_balances(
    participants: Sequence[str],
    expenses: Sequence[Any],
    settings: Optional[Settings] = None,
) -> Dict[str, Decimal]:
    """Net balance per participant, using the configured unlisted payer policy"""
    settings = settings or get_settings()
    return balance_utils.compute_balances(
        participants,
        expenses,
        allow_unlisted_payers=settings.allow_unlisted_payers,
    )


def optimize_settlements(
    balances: Mapping[str, Any],
    settings: Optional[Settings] = None,
) -> List[Settlement]:
    """Minimal transfers for a balance mapping, using the configured tolerance"""
    settings = settings or get_settings()
    return settlement_utils.optimize_settlements(balances, tolerance=settings.settlement_tolerance)


def summarize_split(
    participants: Sequence[str],
    expenses: Sequence[Any],
    settings: Optional[Settings] = None,
) -> SplitSummary:
    """
    Compute everything needed to present a split in one pass.

    Validates the inputs once, then derives the total, the fair share,
    each participant's balance and the settlement plan.

    Returns:
        SplitSummary with total, fair_share, balances and settlements
    """
    settings = settings or get_settings()

    total, fair_share, balances = balance_utils.compute_split(
        participants,
        expenses,
        allow_unlisted_payers=settings.allow_unlisted_payers,
    )
    settlements = optimize_settlements(balances, settings)

    logger.info(
        f"Split {total} across {len(participants)} participants "
        f"(fair share {fair_share}) settled with {len(settlements)} transfers"
    )

    return SplitSummary(
        total=total,
        fair_share=fair_share,
        balances=balances,
        settlements=settlements
    )
