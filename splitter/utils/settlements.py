"""
Settlement Optimization Module

Turns a balance mapping into a short list of transfers that brings every
balance back to zero.

The algorithm works by:
1. Separating participants into debtors (negative balance) and creditors
   (positive balance); settled participants are left out
2. Sorting debtors most-negative first and creditors most-positive first,
   breaking ties by participant name so the output is reproducible
3. Walking both lists with two cursors, each step paying the smaller of
   the current debt and credit and advancing whichever side is cleared

Each step clears at least one participant, so the result has at most
debtors + creditors - 1 transfers.

Time Complexity: O(n log n) for sorting + O(n) for matching
"""

import logging
from decimal import Decimal, localcontext
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from splitter.core.exceptions import InvalidInput
from splitter.schemas.settlement_schema import Settlement
from splitter.utils.balances import DEFAULT_TOLERANCE, EXACT_CONTEXT, to_decimal, validate_balance_sum

logger = logging.getLogger(__name__)


def normalize_balances(balances: Mapping[str, Any]) -> Dict[str, Decimal]:
    """Validate a caller supplied balance mapping and convert its values to Decimal."""
    if not isinstance(balances, Mapping):
        raise InvalidInput(f"Balances must be a mapping of name -> amount, got {type(balances).__name__}")

    normalized: Dict[str, Decimal] = {}
    for name, balance in balances.items():
        if not isinstance(name, str) or not name.strip():
            raise InvalidInput(f"Participant names must be non-blank strings, got {name!r}")
        try:
            normalized[name] = to_decimal(balance)
        except InvalidInput as e:
            raise InvalidInput(f"Balance for '{name}': {e}") from None
    return normalized


def optimize_settlements(
    balances: Mapping[str, Any],
    tolerance: Decimal = DEFAULT_TOLERANCE,
) -> List[Settlement]:
    """
    Compute the transfers that settle every balance.

    Args:
        balances: Dictionary mapping participant name -> balance
            (positive = is owed, negative = owes); must sum to zero
        tolerance: Balances and leftovers whose absolute value is at or
            below this are treated as settled

    Returns:
        Settlements in the order they were produced by the matching walk

    Raises:
        InvalidInput: If a name or balance is malformed
        UnbalancedBalances: If the balances don't sum to zero within tolerance

    Example:
        >>> optimize_settlements({"Alice": 60, "Bob": -30, "Carol": -30})
        [Settlement(from_participant='Bob', to_participant='Alice', amount=Decimal('30')),
         Settlement(from_participant='Carol', to_participant='Alice', amount=Decimal('30'))]
    """
    amounts = normalize_balances(balances)
    validate_balance_sum(amounts, tolerance)

    settlements: List[Settlement] = []

    with localcontext(EXACT_CONTEXT):
        debtors: List[Tuple[str, Decimal]] = sorted(
            ((name, balance) for name, balance in amounts.items() if balance < -tolerance),
            key=lambda entry: (entry[1], entry[0]),
        )
        creditors: List[Tuple[str, Decimal]] = sorted(
            ((name, balance) for name, balance in amounts.items() if balance > tolerance),
            key=lambda entry: (-entry[1], entry[0]),
        )

        i, j = 0, 0
        while i < len(debtors) and j < len(creditors):
            debtor, debt_amount = debtors[i]
            creditor, credit_amount = creditors[j]

            settlement_amount = min(-debt_amount, credit_amount)
            if settlement_amount > 0:
                settlements.append(Settlement(
                    from_participant=debtor,
                    to_participant=creditor,
                    amount=settlement_amount
                ))
                logger.debug(f"{debtor} pays {creditor} {settlement_amount}")

            remaining = credit_amount + debt_amount
            if abs(remaining) <= tolerance:
                # Both sides cleared
                i += 1
                j += 1
            elif remaining > 0:
                creditors[j] = (creditor, remaining)
                i += 1
            else:
                debtors[i] = (debtor, remaining)
                j += 1

    logger.debug(
        f"Settled {len(debtors)} debtors and {len(creditors)} creditors "
        f"with {len(settlements)} transfers"
    )
    return settlements


def apply_settlements(
    balances: Mapping[str, Any],
    settlements: Sequence[Settlement],
) -> Dict[str, Decimal]:
    """
    Apply settlements to balances and return what is left.

    The payer's (negative) balance goes up by the amount and the receiver's
    (positive) balance goes down by it. For a complete settlement plan every
    returned value is zero within tolerance.
    """
    remaining = normalize_balances(balances)
    with localcontext(EXACT_CONTEXT):
        for settlement in settlements:
            remaining[settlement.from_participant] = (
                remaining.get(settlement.from_participant, Decimal('0')) + settlement.amount
            )
            remaining[settlement.to_participant] = (
                remaining.get(settlement.to_participant, Decimal('0')) - settlement.amount
            )
    return remaining
