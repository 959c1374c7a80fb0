# emi_app/texts.py
WELCOME_MSG = "EMI plan engine up. See /docs for swagger, POST /emi/plans or /emi/calculate to get started."

# Eligibility (order matches the evaluation order in engine.plans.check_eligibility)
REASON_AMOUNT_TOO_LOW = "Not eligible: amount below minimum (EMI starts at {min_amount})."
REASON_AMOUNT_TOO_HIGH = "Not eligible: amount above maximum for retail customers (EMI is capped at {max_amount})."
REASON_CREDIT_SCORE_TOO_LOW = "Not eligible: credit score too low for EMI (minimum {min_score} required)."
REASON_INCOME_RATIO_TOO_HIGH = "Not eligible: EMI exceeds affordable income ratio (max {ratio:.0%} of monthly income)."

# Plan selection checks
ERR_INVALID_PROVIDER = "Invalid EMI provider"
ERR_INVALID_TENURE = "Invalid tenure for selected provider"
ERR_INVALID_EMI_AMOUNT = "Invalid EMI amount"
ERR_INVALID_TOTAL_AMOUNT = "Invalid total amount"

PROVIDER_NOT_FOUND = "EMI provider not found"

NO_PLANS_MSG = (
    "No EMI plans available for {amount}.\n"
    "Try a different amount or another provider."
)

COST_COMPARISON = (
    "*Cost comparison*\n"
    "Pay in full: {full}\n"
    "Pay with EMI: {emi}\n"
    "Extra cost: +{extra} ({pct:.1f}% of original amount)"
)
