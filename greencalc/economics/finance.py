from __future__ import annotations

from ..units import Currency, Percent

MONTHS_PER_YEAR = 12


def monthly_loan_payment(principal: Currency, interest_rate_pct: Percent, financing_years: int) -> Currency:
    """Fixed monthly annuity payment on ``principal``.

    A zero rate spreads the principal evenly; zero financing years means a cash
    purchase and no payment at all.
    """
    payments = financing_years * MONTHS_PER_YEAR
    if payments <= 0:
        return Currency(0.0)
    rate = interest_rate_pct / 100.0 / MONTHS_PER_YEAR
    if rate == 0:
        return Currency(principal / payments)
    growth = (1 + rate) ** payments
    return Currency(principal * rate * growth / (growth - 1))


def yearly_loan_payment(principal: Currency, interest_rate_pct: Percent, financing_years: int) -> Currency:
    return Currency(monthly_loan_payment(principal, interest_rate_pct, financing_years) * MONTHS_PER_YEAR)
