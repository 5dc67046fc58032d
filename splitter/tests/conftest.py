"""
Pytest configuration and fixtures for splitter tests.
"""
import pytest
from decimal import Decimal
from typing import Dict, List

from splitter.core.config import Settings
from splitter.schemas.settlement_schema import Settlement
from splitter.utils.settlements import apply_settlements


@pytest.fixture
def trip_participants():
    return ["Alice", "Bob", "Carol"]


@pytest.fixture
def trip_expenses():
    """Uneven expenses for a three person trip (total 100, fair share 33.33...)."""
    return [
        {"payer": "Alice", "amount": Decimal("45.50"), "description": "Groceries"},
        {"payer": "Bob", "amount": Decimal("30"), "description": "Fuel"},
        {"payer": "Alice", "amount": Decimal("24.50"), "description": "Parking"},
    ]


@pytest.fixture
def sample_balances():
    return {
        "A": Decimal("100"),
        "B": Decimal("50"),
        "C": Decimal("-60"),
        "D": Decimal("-90"),
    }


@pytest.fixture
def settings():
    return Settings(
        settlement_tolerance=Decimal("1e-9"),
        display_precision=Decimal("0.01"),
        allow_unlisted_payers=False,
    )


@pytest.fixture
def assert_fully_settled():
    """
    Returns a checker that applies settlements to balances and asserts
    every participant ends at zero within tolerance.
    """
    def check(balances: Dict[str, Decimal], settlements: List[Settlement], tolerance: Decimal = Decimal("1e-9")):
        remaining = apply_settlements(balances, settlements)
        for name, balance in remaining.items():
            assert abs(balance) <= tolerance, \
                f"{name} not settled: initial={balances.get(name)}, final={balance}"

    return check
