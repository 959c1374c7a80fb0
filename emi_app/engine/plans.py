# emi_app/engine/plans.py
from __future__ import annotations
import logging
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from emi_app import settings
from emi_app.engine.amortization import compute_installment
from emi_app.errors import InvalidInput, ProviderNotFound
from emi_app.formatting import format_emi_amount
from emi_app.schemas import (
    CalculationRequest,
    CostComparison,
    EligibilityVerdict,
    IneligibilityReason,
    Plan,
    PlanSelection,
    Provider,
    SelectionCheck,
)
from emi_app.texts import (
    ERR_INVALID_EMI_AMOUNT,
    ERR_INVALID_PROVIDER,
    ERR_INVALID_TENURE,
    ERR_INVALID_TOTAL_AMOUNT,
    REASON_AMOUNT_TOO_HIGH,
    REASON_AMOUNT_TOO_LOW,
    REASON_CREDIT_SCORE_TOO_LOW,
    REASON_INCOME_RATIO_TOO_HIGH,
)

logger = logging.getLogger(__name__)

Catalog = Union[Mapping[str, Provider], Iterable[Provider]]


def _providers(catalog: Catalog) -> List[Provider]:
    if isinstance(catalog, Mapping):
        return list(catalog.values())
    return list(catalog)


def plan_sort_key(plan: Plan) -> Tuple[float, int, str]:
    """Cheapest per month first; shorter tenure, then provider id, break ties."""
    return (plan.monthly_installment, plan.tenure, plan.provider_id)


# ------------------------------------------------------------
# Plan generation
# ------------------------------------------------------------
def generate_plans(amount: float, provider: Provider) -> List[Plan]:
    """
    One plan per supported tenure of `provider` that has a rate.
    Amount outside [min_amount, max_amount] -> [] (the caller tries other providers).
    """
    if amount < provider.min_amount or amount > provider.max_amount:
        logger.debug("Amount %s outside %s bounds [%s, %s]",
                     amount, provider.id, provider.min_amount, provider.max_amount)
        return []

    plans: List[Plan] = []
    for tenure in provider.supported_tenures:
        rate = provider.interest_rates.get(tenure)
        # 0 is a valid (no-cost EMI) rate; only a missing entry is skipped
        if rate is None:
            logger.debug("Provider %s has no rate for %s months, skipping", provider.id, tenure)
            continue

        calc = compute_installment(CalculationRequest(
            amount=amount,
            tenure=tenure,
            interest_rate=rate,
            processing_fee=provider.processing_fee,
        ))
        plans.append(Plan(
            provider_id=provider.id,
            provider_name=provider.name,
            tenure=tenure,
            interest_rate=rate,
            monthly_installment=calc.monthly_installment,
            total_amount=calc.total_amount,
            total_interest=calc.total_interest,
            processing_fee=calc.processing_fee,
        ))

    return sorted(plans, key=plan_sort_key)


def generate_plans_across_providers(amount: float, catalog: Catalog) -> List[Plan]:
    """
    Cross-lender view: plans of every enabled provider, re-ranked together.
    """
    plans: List[Plan] = []
    for provider in _providers(catalog):
        if not provider.enabled:
            continue
        plans.extend(generate_plans(amount, provider))
    return sorted(plans, key=plan_sort_key)


def select_best_plan(plans: Sequence[Plan]) -> Optional[Plan]:
    """
    Lowest monthly installment; on a tie the first one seen wins. None for no plans.
    """
    best: Optional[Plan] = None
    for plan in plans:
        if best is None or plan.monthly_installment < best.monthly_installment:
            best = plan
    return best


# ------------------------------------------------------------
# Eligibility
# ------------------------------------------------------------
def check_eligibility(
    amount: float,
    credit_score: Optional[int] = None,
    monthly_income: Optional[float] = None,
) -> EligibilityVerdict:
    """
    Rules run in a fixed order and the first failure is reported:
      1. amount below the retail minimum
      2. amount above the retail maximum
      3. credit score below the floor (only if a score is given)
      4. estimated EMI (amount / 12) above the income share (only if income is given)
    """
    if amount < settings.EMI_MIN_AMOUNT:
        return EligibilityVerdict(
            eligible=False,
            code=IneligibilityReason.AMOUNT_TOO_LOW,
            reason=REASON_AMOUNT_TOO_LOW.format(min_amount=format_emi_amount(settings.EMI_MIN_AMOUNT)),
        )

    if amount > settings.EMI_MAX_AMOUNT:
        return EligibilityVerdict(
            eligible=False,
            code=IneligibilityReason.AMOUNT_TOO_HIGH,
            reason=REASON_AMOUNT_TOO_HIGH.format(max_amount=format_emi_amount(settings.EMI_MAX_AMOUNT)),
        )

    if credit_score is not None and credit_score < settings.EMI_MIN_CREDIT_SCORE:
        return EligibilityVerdict(
            eligible=False,
            code=IneligibilityReason.CREDIT_SCORE_TOO_LOW,
            reason=REASON_CREDIT_SCORE_TOO_LOW.format(min_score=settings.EMI_MIN_CREDIT_SCORE),
        )

    if monthly_income is not None:
        # coarse proxy, independent of any provider's tenure or rate
        estimated_emi = amount / settings.EMI_ESTIMATE_MONTHS
        if estimated_emi > settings.EMI_MAX_INCOME_RATIO * monthly_income:
            return EligibilityVerdict(
                eligible=False,
                code=IneligibilityReason.INCOME_RATIO_TOO_HIGH,
                reason=REASON_INCOME_RATIO_TOO_HIGH.format(ratio=settings.EMI_MAX_INCOME_RATIO),
            )

    return EligibilityVerdict(eligible=True)


# ------------------------------------------------------------
# Cost comparison
# ------------------------------------------------------------
def compare_cost(amount: float, plan: Plan) -> CostComparison:
    """
    EMI total vs paying `amount` up front.
    savings_percentage is the premium paid for financing, as % of amount.
    """
    if amount <= 0:
        raise InvalidInput(f"amount must be > 0 (got {amount})")

    full_payment_cost = float(amount)
    emi_total_cost = plan.total_amount
    extra_cost = emi_total_cost - full_payment_cost
    return CostComparison(
        full_payment_cost=full_payment_cost,
        emi_total_cost=emi_total_cost,
        extra_cost=extra_cost,
        savings_percentage=extra_cost / full_payment_cost * 100,
    )


# ------------------------------------------------------------
# Service views
# ------------------------------------------------------------
def plans_for_amount(
    amount: float,
    catalog: Mapping[str, Provider],
    provider_id: Optional[str] = None,
) -> Tuple[EligibilityVerdict, List[Plan]]:
    """
    One provider's plans, bounded only by that provider's own limits, or the
    cross-lender list behind the retail eligibility gate.
    Ineligible -> (verdict, []). Unknown provider_id -> ProviderNotFound.
    """
    if provider_id is not None:
        provider = catalog.get(provider_id)
        if provider is None:
            raise ProviderNotFound(provider_id)
        return EligibilityVerdict(eligible=True), generate_plans(amount, provider)

    verdict = check_eligibility(amount)
    if not verdict.eligible:
        return verdict, []
    return verdict, generate_plans_across_providers(amount, catalog)


def find_plan(amount: float, provider: Provider, tenure: int) -> Optional[Plan]:
    for plan in generate_plans(amount, provider):
        if plan.tenure == tenure:
            return plan
    return None


def validate_selection(selection: PlanSelection, catalog: Mapping[str, Provider]) -> SelectionCheck:
    """
    Sanity checks on a plan the customer picked. Every problem is reported.
    """
    errors: List[str] = []

    provider = catalog.get(selection.provider_id)
    if provider is None:
        errors.append(ERR_INVALID_PROVIDER)
    elif selection.tenure not in provider.supported_tenures:
        errors.append(ERR_INVALID_TENURE)

    if selection.emi_amount <= 0:
        errors.append(ERR_INVALID_EMI_AMOUNT)
    if selection.total_amount <= 0:
        errors.append(ERR_INVALID_TOTAL_AMOUNT)

    if errors:
        logger.info("Rejected EMI selection %s: %s", selection.plan_id or selection.provider_id, errors)
        return SelectionCheck(valid=False, errors=errors)
    return SelectionCheck(valid=True)
