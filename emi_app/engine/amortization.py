# emi_app/engine/amortization.py
from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from emi_app.errors import InvalidInput
from emi_app.schemas import CalculationRequest, CalculationResult, CostBreakdown

Number = Union[int, float, Decimal]


def _dec(x: Number) -> Decimal:
    # str() keeps the shortest repr of a float: 888.485 stays 888.485, not 888.48499999...
    return x if isinstance(x, Decimal) else Decimal(str(x))


def round_half_up(value: Number, places: int = 2) -> float:
    """Rounds like a cashier does (0.005 -> 0.01), not banker's rounding."""
    q = Decimal(1).scaleb(-places)
    return float(_dec(value).quantize(q, rounding=ROUND_HALF_UP))


def _check(request: CalculationRequest) -> None:
    if request.amount <= 0:
        raise InvalidInput(f"amount must be > 0 (got {request.amount})")
    if request.tenure <= 0 or not float(request.tenure).is_integer():
        raise InvalidInput(f"tenure must be a positive whole number of months (got {request.tenure})")
    if request.interest_rate < 0:
        raise InvalidInput(f"interest rate must be >= 0 (got {request.interest_rate})")
    if request.processing_fee < 0:
        raise InvalidInput(f"processing fee must be >= 0 (got {request.processing_fee})")


# ------------------------------------------------------------
# EMI (reducing balance, French amortization)
# ------------------------------------------------------------
def compute_installment(request: CalculationRequest) -> CalculationResult:
    """
    Monthly installment for a fully amortizing loan.

        EMI = P * r * (1 + r)^n / ((1 + r)^n - 1)

    - P: amount financed
    - r: monthly rate = annual rate (%) / 12 / 100
    - n: tenure in months

    With r == 0 (no-cost EMI) the installment is P / n.

    The installment is rounded to 2 decimals (half-up) and every total is
    derived from that rounded figure, so installment * tenure + fee always
    equals total_amount to the paisa.
    """
    _check(request)

    amount = float(request.amount)
    n = int(request.tenure)
    r = float(request.interest_rate) / 12.0 / 100.0

    if r == 0:
        emi = amount / n
    else:
        growth = (1 + r) ** n
        emi = amount * r * growth / (growth - 1)

    monthly = _dec(round_half_up(emi))
    fee = _dec(request.processing_fee)
    total_emi = monthly * n
    total_interest = total_emi - _dec(amount)
    total_amount = total_emi + fee

    return CalculationResult(
        monthly_installment=float(monthly),
        total_amount=float(total_amount),
        total_interest=float(total_interest),
        processing_fee=float(fee),
        breakdown=CostBreakdown(
            principal=amount,
            interest=float(total_interest),
            processing_fee=float(fee),
        ),
    )

