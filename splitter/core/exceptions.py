from decimal import Decimal


class SplitError(ValueError):
    """Base class for every validation failure raised by the splitter core."""


class InvalidInput(SplitError):
    pass


class InvalidExpense(InvalidInput):
    pass


class UnknownParticipant(InvalidInput):
    def __init__(self, payer: str):
        self.payer = payer
        super().__init__(
            f"Expense payer '{payer}' is not one of the participants. "
            f"Add them as a participant first."
        )


class UnbalancedBalances(InvalidInput):
    def __init__(self, total: Decimal, tolerance: Decimal):
        self.total = total
        self.tolerance = tolerance
        super().__init__(
            f"Balances not zero-sum: total={total}, tolerance={tolerance}. "
            f"This indicates balances that were not computed from one shared pool of expenses."
        )
