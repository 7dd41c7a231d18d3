"""Lives ledger errors."""


class LivesError(Exception):
    """Base class for lives ledger errors."""


class NoLivesAvailableError(LivesError):
    """Raised when a wallet has no life left in any bucket."""

    def __init__(self, wallet: str) -> None:
        super().__init__(f"No lives remaining for {wallet}")
        self.wallet = wallet


class RateLimitExceededError(LivesError):
    """Raised when a device/IP/wallet triple claims too often."""


class LivesAccountMissingError(LivesError):
    """Raised when an account cannot be loaded right after it was written."""

    def __init__(self, wallet: str) -> None:
        super().__init__(f"Lives account for {wallet} could not be loaded")
        self.wallet = wallet
