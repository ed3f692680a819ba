"""Eligibility use cases"""
from .evaluate_payment_eligibility import EvaluatePaymentEligibility
from .evaluate_registration_eligibility import EvaluateRegistrationEligibility
from .dtos import (
    PaymentEligibilityQueryDTO,
    PaymentEligibilityResponseDTO,
    RegistrationEligibilityQueryDTO,
    RegistrationEligibilityResponseDTO,
)

__all__ = [
    "EvaluatePaymentEligibility",
    "EvaluateRegistrationEligibility",
    "PaymentEligibilityQueryDTO",
    "PaymentEligibilityResponseDTO",
    "RegistrationEligibilityQueryDTO",
    "RegistrationEligibilityResponseDTO",
]
