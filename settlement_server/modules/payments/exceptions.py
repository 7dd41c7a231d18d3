"""Payment reconciliation errors."""

from typing import Optional


class PaymentError(Exception):
    """Base class for payment errors."""


class UnknownOrExpiredAddressError(PaymentError):
    def __init__(self, address: str) -> None:
        super().__init__("Unknown payment address")
        self.address = address


class AddressExpiredError(PaymentError):
    def __init__(self, address: str) -> None:
        super().__init__("Address expired")
        self.address = address


class DailyPaidCapReachedError(PaymentError):
    def __init__(self, cap: int) -> None:
        super().__init__(f"Daily paid life limit of {cap} reached")
        self.cap = cap


class InsufficientAmountError(PaymentError):
    """The transferred amount does not reach the cheapest tier."""

    def __init__(self, amount: object) -> None:
        super().__init__("Invalid payment amount")
        self.amount = amount


class PaymentVerificationError(PaymentError):
    """The on-chain transaction does not back the reported payment."""


class PaymentPendingError(PaymentError):
    """The transaction is not visible on chain yet; the delivery should be retried."""

    def __init__(self, signature: str, reason: Optional[str] = None) -> None:
        super().__init__(reason or f"Transaction {signature} not confirmed yet")
        self.signature = signature
