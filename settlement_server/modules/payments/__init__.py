"""Paid lives: address issuance and on-chain settlement."""

from .address import derive_payment_address
from .exceptions import (
    AddressExpiredError,
    DailyPaidCapReachedError,
    InsufficientAmountError,
    PaymentError,
    PaymentPendingError,
    PaymentVerificationError,
    UnknownOrExpiredAddressError,
)
from .models import PaymentQuote, PricingSnapshot, SettlementResult, TempPaymentAddress
from .service import PaymentReconciler
from .store import RedisTempAddressStore

__all__ = [
    "AddressExpiredError",
    "DailyPaidCapReachedError",
    "InsufficientAmountError",
    "PaymentError",
    "PaymentPendingError",
    "PaymentQuote",
    "PaymentReconciler",
    "PaymentVerificationError",
    "PricingSnapshot",
    "RedisTempAddressStore",
    "SettlementResult",
    "TempPaymentAddress",
    "UnknownOrExpiredAddressError",
    "derive_payment_address",
]
