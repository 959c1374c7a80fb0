# emi_app/formatting.py
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence

from emi_app.schemas import CostComparison, Plan
from emi_app.texts import COST_COMPARISON, NO_PLANS_MSG


def format_emi_amount(x) -> str:
    """₹ with Indian digit grouping, no paise: 1234.56 -> ₹1,235, 100000 -> ₹1,00,000."""
    n = int(Decimal(str(x)).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    sign = "-" if n < 0 else ""
    digits = str(abs(n))
    head, tail = digits[:-3], digits[-3:]
    if head:
        head = re.sub(r"(\d)(?=(\d{2})+$)", r"\1,", head)
        return f"{sign}₹{head},{tail}"
    return f"{sign}₹{tail}"


def format_interest_rate(rate) -> str:
    return f"{float(rate):.2f}%"


def _fmt_tenure(n: int) -> str:
    return f"{int(n)} month{'s' if int(n) != 1 else ''}"


# ---------- plan card ----------
def format_plan(plan: Plan, idx: Optional[int] = None) -> str:
    prefix = f"{idx}) " if idx is not None else ""
    line1 = f"{prefix}{plan.provider_name} • {_fmt_tenure(plan.tenure)} — {format_emi_amount(plan.monthly_installment)}/month"
    line2 = f"   Total: {format_emi_amount(plan.total_amount)} • Interest: {format_interest_rate(plan.interest_rate)}"
    if plan.processing_fee > 0:
        line2 += f" • Fee: {format_emi_amount(plan.processing_fee)}"
    line3 = f"   Plan ID {plan.plan_id}"
    return "\n".join([line1, line2, line3])


def format_comparison(comparison: CostComparison) -> str:
    return COST_COMPARISON.format(
        full=format_emi_amount(comparison.full_payment_cost),
        emi=format_emi_amount(comparison.emi_total_cost),
        extra=format_emi_amount(comparison.extra_cost),
        pct=comparison.savings_percentage,
    )


def format_plans(amount: float, plans: Sequence[Plan], comparison: Optional[CostComparison] = None) -> str:
    """
    Numbered list of plans for an amount, cheapest monthly first (as given),
    optionally followed by the cost comparison of the chosen plan.
    """
    if not plans:
        return NO_PLANS_MSG.format(amount=format_emi_amount(amount))

    header = f"EMI plans for {format_emi_amount(amount)} | {len(plans)} option{'s' if len(plans) != 1 else ''}"
    lines: List[str] = [header, ""]
    for i, plan in enumerate(plans, start=1):
        lines.append(format_plan(plan, idx=i))
        lines.append("")

    if comparison is not None:
        lines.append(format_comparison(comparison))
    else:
        lines.pop()  # trailing blank

    return "\n".join(lines)
