# emi_app/main.py
import logging
from functools import lru_cache
from typing import List, Mapping

from fastapi import Depends, FastAPI, HTTPException

from emi_app import settings
from emi_app.catalog.providers import enabled_providers, get_provider, load_catalog, resolve_provider_id
from emi_app.config import LOG_LEVEL, PROVIDER_CATALOG_PATH
from emi_app.engine.amortization import compute_installment
from emi_app.engine.plans import compare_cost, check_eligibility, find_plan, plans_for_amount, validate_selection
from emi_app.errors import InvalidInput
from emi_app.formatting import format_plans
from emi_app.schemas import (
    CalculationRequest,
    CalculationResult,
    CompareRequest,
    CompareResponse,
    EligibilityRequest,
    EligibilityVerdict,
    Plan,
    PlanSelection,
    PlansRequest,
    Provider,
    SelectionCheck,
)
from emi_app.texts import PROVIDER_NOT_FOUND, WELCOME_MSG

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="EMI Plan Engine API")


@lru_cache(maxsize=1)
def _default_catalog() -> Mapping[str, Provider]:
    return load_catalog(PROVIDER_CATALOG_PATH)


def get_catalog() -> Mapping[str, Provider]:
    """Read-only provider snapshot for one request (override in tests via dependency_overrides)."""
    return _default_catalog()


def _resolve(catalog: Mapping[str, Provider], provider_id: str) -> str:
    resolved = resolve_provider_id(catalog, provider_id)
    if resolved is None:
        raise HTTPException(status_code=404, detail=PROVIDER_NOT_FOUND)
    return resolved


@app.get("/")
def root():
    return {"message": WELCOME_MSG}


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/emi/providers", response_model=List[Provider])
def list_providers(catalog: Mapping[str, Provider] = Depends(get_catalog)):
    return enabled_providers(catalog)


@app.get("/emi/providers/{provider_id}", response_model=Provider)
def provider_detail(provider_id: str, catalog: Mapping[str, Provider] = Depends(get_catalog)):
    provider = get_provider(catalog, provider_id)
    if provider is None:
        raise HTTPException(status_code=404, detail=PROVIDER_NOT_FOUND)
    return provider


@app.get("/emi/tenures")
def standard_tenures():
    return {"tenures": list(settings.STANDARD_TENURES)}


@app.post("/emi/plans", response_model=List[Plan])
def emi_plans(req: PlansRequest, catalog: Mapping[str, Provider] = Depends(get_catalog)):
    provider_id = _resolve(catalog, req.provider_id) if req.provider_id else None
    verdict, plans = plans_for_amount(req.amount, catalog, provider_id=provider_id)
    if not verdict.eligible:
        logger.info("EMI plans refused for amount %s: %s", req.amount, verdict.code.value)
        raise HTTPException(status_code=422, detail=verdict.reason)
    return plans


@app.post("/emi/calculate", response_model=CalculationResult)
def emi_calculate(req: CalculationRequest):
    try:
        return compute_installment(req)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/emi/eligibility", response_model=EligibilityVerdict)
def emi_eligibility(req: EligibilityRequest):
    return check_eligibility(req.amount, credit_score=req.credit_score, monthly_income=req.monthly_income)


@app.post("/emi/compare", response_model=CompareResponse)
def emi_compare(req: CompareRequest, catalog: Mapping[str, Provider] = Depends(get_catalog)):
    provider = catalog[_resolve(catalog, req.provider_id)]
    try:
        plan = find_plan(req.amount, provider, req.tenure)
        comparison = compare_cost(req.amount, plan) if plan is not None else None
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    if plan is None:
        raise HTTPException(
            status_code=404,
            detail=f"No {req.tenure}-month plan from {provider.name} for this amount",
        )
    return CompareResponse(plan=plan, comparison=comparison, summary=format_plans(req.amount, [plan], comparison))


@app.post("/emi/validate", response_model=SelectionCheck, response_model_exclude_none=True)
def emi_validate(selection: PlanSelection, catalog: Mapping[str, Provider] = Depends(get_catalog)):
    return validate_selection(selection, catalog)
