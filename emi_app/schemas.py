from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from emi_app.normalize import parse_amount


def _coerce_amount(v):
    """Accepts numbers or strings like "10k" / "₹1,00,000"."""
    if v is None or isinstance(v, (int, float)):
        return v
    parsed = parse_amount(v)
    if parsed is None:
        raise ValueError(f"Not an amount: {v!r}")
    return parsed


class _Model(BaseModel):
    # camelCase on the wire, snake_case in Python; value objects never mutate
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


# ---------- Catalog ----------
class Provider(_Model):
    id: str = Field(..., min_length=1)
    name: str
    logo: str = ""
    min_amount: float = Field(..., ge=0)
    max_amount: float = Field(..., ge=0)
    supported_tenures: List[int]
    interest_rates: Dict[int, float] = Field(default_factory=dict, description="tenure -> annual rate (%)")
    processing_fee: float = Field(0.0, ge=0)
    enabled: bool = True

    @field_validator("supported_tenures")
    @classmethod
    def tenures_positive_unique(cls, v: List[int]) -> List[int]:
        if any(t <= 0 for t in v):
            raise ValueError("supported tenures must be positive")
        if len(set(v)) != len(v):
            raise ValueError("supported tenures must be unique")
        return v

    @field_validator("interest_rates")
    @classmethod
    def rates_non_negative(cls, v: Dict[int, float]) -> Dict[int, float]:
        bad = [t for t, r in v.items() if r < 0]
        if bad:
            raise ValueError(f"negative interest rate for tenures {bad}")
        return v

    @model_validator(mode="after")
    def bounds_ordered(self):
        if self.min_amount > self.max_amount:
            raise ValueError("min_amount must not exceed max_amount")
        return self


# ---------- Calculator ----------
class CalculationRequest(_Model):
    amount: float
    tenure: Union[int, float]  # whole months; fractions are rejected by the calculator
    interest_rate: float
    processing_fee: float = 0.0

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount_text(cls, v):
        return _coerce_amount(v)


class CostBreakdown(_Model):
    principal: float
    interest: float
    processing_fee: float


class CalculationResult(_Model):
    monthly_installment: float
    total_amount: float
    total_interest: float
    processing_fee: float
    breakdown: CostBreakdown


# ---------- Plans ----------
class Plan(_Model):
    provider_id: str
    provider_name: str
    tenure: int
    interest_rate: float
    monthly_installment: float
    total_amount: float
    total_interest: float
    processing_fee: float

    @computed_field(alias="planId")
    @property
    def plan_id(self) -> str:
        return f"{self.provider_id}_{self.tenure}"


class IneligibilityReason(str, Enum):
    AMOUNT_TOO_LOW = "amount_too_low"
    AMOUNT_TOO_HIGH = "amount_too_high"
    CREDIT_SCORE_TOO_LOW = "credit_score_too_low"
    INCOME_RATIO_TOO_HIGH = "income_ratio_too_high"


class EligibilityVerdict(_Model):
    eligible: bool
    reason: Optional[str] = None
    code: Optional[IneligibilityReason] = None


class CostComparison(_Model):
    full_payment_cost: float
    emi_total_cost: float
    extra_cost: float
    # cost premium of financing over paying up front (not a saving)
    savings_percentage: float


class PlanSelection(_Model):
    provider_id: str
    plan_id: Optional[str] = None
    tenure: int
    emi_amount: float
    total_amount: float
    interest_rate: float
    processing_fee: float = 0.0


class SelectionCheck(_Model):
    valid: bool
    errors: Optional[List[str]] = None


# ---------- API bodies ----------
class PlansRequest(_Model):
    amount: float
    provider_id: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount_text(cls, v):
        return _coerce_amount(v)


class EligibilityRequest(_Model):
    amount: float
    credit_score: Optional[int] = None
    monthly_income: Optional[float] = None

    @field_validator("amount", "monthly_income", mode="before")
    @classmethod
    def parse_amount_text(cls, v):
        return _coerce_amount(v)


class CompareRequest(_Model):
    amount: float
    provider_id: str
    tenure: int

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount_text(cls, v):
        return _coerce_amount(v)


class CompareResponse(_Model):
    plan: Plan
    comparison: CostComparison
    summary: str
