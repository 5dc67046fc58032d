"""
Balance Calculation Module

Reduces a list of participants and the expenses they paid into a net
balance per participant, measured against an equal split of the total.

    balance = total_paid - fair_share
    fair_share = sum(expense amounts) / number of participants

- Positive balance: participant is owed money (creditor)
- Negative balance: participant owes money (debtor)

All arithmetic is done on Decimal values and nothing is rounded here;
rounding to cents is left to whoever renders the numbers (see round_decimal).

Example Usage:
    from splitter.utils.balances import compute_balances

    balances = compute_balances(
        ["Alice", "Bob", "Carol"],
        [{"payer": "Alice", "amount": 90, "description": "Dinner"}],
    )
    # {'Alice': Decimal('60'), 'Bob': Decimal('-30'), 'Carol': Decimal('-30')}
"""

import logging
from decimal import (
    Context, Decimal, InvalidOperation, MAX_EMAX, MAX_PREC, MIN_EMIN, ROUND_HALF_EVEN, localcontext,
)
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple, Union

from pydantic import ValidationError

from splitter.core.exceptions import InvalidExpense, InvalidInput, UnbalancedBalances, UnknownParticipant
from splitter.schemas.expense_schema import Expense

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = Decimal("1e-9")

# Addition, subtraction, negation and quantize are exact under this context.
# Never divide in it: an inexact quotient would need unbounded digits.
EXACT_CONTEXT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN, rounding=ROUND_HALF_EVEN)

ExpenseLike = Union[Expense, Mapping[str, Any]]


def round_decimal(value: Decimal, precision: Decimal = Decimal('0.01')) -> Decimal:
    """
    Round a Decimal value to the specified precision.

    Only meant for presentation; balances and settlements are computed
    unrounded. Works for values of any magnitude.

    Example:
        >>> round_decimal(Decimal("43.333333"))
        Decimal('43.33')
    """
    with localcontext(EXACT_CONTEXT):
        return value.quantize(precision)


def to_decimal(value: Any) -> Decimal:
    """Convert an int, float, str or Decimal into a finite Decimal."""
    if isinstance(value, bool):
        raise InvalidInput(f"Expected a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidInput(f"Expected a number, got {value!r}") from None
    if not result.is_finite():
        raise InvalidInput(f"Expected a finite number, got {value!r}")
    return result


def coerce_expense(expense: ExpenseLike) -> Expense:
    """
    Validate a single expense record.

    Accepts an Expense or any mapping with payer/amount/description keys.

    Raises:
        InvalidExpense: If the record is not a mapping, or the payer is
            missing/blank, or the amount is negative, non-finite or not a number
    """
    if isinstance(expense, Expense):
        return expense
    if not isinstance(expense, Mapping):
        raise InvalidExpense(f"Expense must be a mapping, got {type(expense).__name__}")
    try:
        return Expense.model_validate(dict(expense))
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in error['loc']) or 'expense'}: {error['msg']}"
            for error in e.errors()
        )
        raise InvalidExpense(f"Invalid expense {dict(expense)!r}: {problems}") from e


def validate_participants(participants: Sequence[str]) -> List[str]:
    """
    Check the participant list is usable as a set of join keys.

    Raises:
        InvalidInput: If the list is empty, or a name is blank, not a
            string, or appears more than once
    """
    if isinstance(participants, str):
        raise InvalidInput("Participants must be a list of names, not a single string")
    names = list(participants)
    if not names:
        raise InvalidInput("Add at least one participant before computing balances")

    seen = set()
    for name in names:
        if not isinstance(name, str) or not name.strip():
            raise InvalidInput(f"Participant names must be non-blank strings, got {name!r}")
        if name in seen:
            raise InvalidInput(f"Participant '{name}' is listed more than once")
        seen.add(name)
    return names


def validate_balance_sum(balances: Mapping[str, Decimal], tolerance: Decimal = DEFAULT_TOLERANCE) -> None:
    """
    Validate that the sum of all balances is approximately zero.

    Balances are deviations from an equal split of one total, so they
    always add up to zero; anything else cannot be fully settled.
    The sum is taken exactly, whatever the magnitude of the balances.

    Raises:
        UnbalancedBalances: If the sum of balances exceeds the tolerance
    """
    with localcontext(EXACT_CONTEXT):
        total = sum(balances.values(), Decimal('0'))
    if abs(total) > tolerance:
        raise UnbalancedBalances(total, tolerance)


def total_amount(expenses: Iterable[Expense]) -> Decimal:
    with localcontext(EXACT_CONTEXT):
        return sum((expense.amount for expense in expenses), Decimal('0'))


def compute_split(
    participants: Sequence[str],
    expenses: Sequence[ExpenseLike],
    allow_unlisted_payers: bool = False,
) -> Tuple[Decimal, Decimal, Dict[str, Decimal]]:
    """
    Validate the inputs and split the expenses equally.

    The fair share is a 28 digit quotient, so ``fair_share * participants``
    can differ from the total in the last digits. The first participant
    takes that remainder as part of their share, which keeps the balances
    summing to exactly zero.

    Returns:
        Tuple of (total, fair_share, balances)

    Raises:
        Same as compute_balances()
    """
    names = validate_participants(participants)
    records = [coerce_expense(expense) for expense in expenses]

    balances: Dict[str, Decimal] = {name: Decimal('0') for name in names}

    for expense in records:
        if expense.payer not in balances:
            if not allow_unlisted_payers:
                raise UnknownParticipant(expense.payer)
            logger.warning(f"Expense payer '{expense.payer}' is not a participant; adding a separate balance")
            balances[expense.payer] = Decimal('0')

    total = total_amount(records)
    fair_share = total / len(names)

    with localcontext(EXACT_CONTEXT):
        for expense in records:
            balances[expense.payer] += expense.amount

        for name in names:
            balances[name] -= fair_share

        remainder = total - fair_share * len(names)
        balances[names[0]] -= remainder

    logger.debug(
        f"Computed balances for {len(names)} participants: total={total}, "
        f"fair_share={fair_share}, remainder={remainder}"
    )
    return total, fair_share, balances


def compute_balances(
    participants: Sequence[str],
    expenses: Sequence[ExpenseLike],
    allow_unlisted_payers: bool = False,
) -> Dict[str, Decimal]:
    """
    Calculate the net balance of each participant.

    Every participant ends up in the result, including those who paid
    nothing. The result preserves the order of ``participants`` and its
    values sum to exactly zero.

    Args:
        participants: Unique participant names; must not be empty
        expenses: Expense records (Expense objects or mappings with
            payer, amount and an optional description)
        allow_unlisted_payers: When True, an expense paid by someone outside
            ``participants`` still counts towards the total and gives that
            payer their own entry (appended after the participants).
            When False such an expense raises UnknownParticipant.

    Returns:
        Dictionary mapping participant name -> balance (Decimal)

    Raises:
        InvalidInput: If participants is empty or contains blank/duplicate names
        InvalidExpense: If an expense fails validation
        UnknownParticipant: If a payer is not a participant and
            allow_unlisted_payers is False

    Example:
        >>> compute_balances(["A", "B"], [{"payer": "A", "amount": 50}, {"payer": "B", "amount": 50}])
        {'A': Decimal('0'), 'B': Decimal('0')}
    """
    _, _, balances = compute_split(participants, expenses, allow_unlisted_payers)
    return balances
