# emi_app/errors.py


class InvalidInput(ValueError):
    """Caller passed values the calculator cannot work with (non-positive amount/tenure, negative rate/fee)."""


class ProviderNotFound(LookupError):
    def __init__(self, provider_id: str):
        super().__init__(f"EMI provider not found: {provider_id}")
        self.provider_id = provider_id
