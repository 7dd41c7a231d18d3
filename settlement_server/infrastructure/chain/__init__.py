"""Read-only access to the Solana chain and the token price feed."""

from .models import ChainError, ConfirmedTransfer
from .pricing import TokenPriceFeed
from .rpc import SolanaRpcClient

__all__ = ["ChainError", "ConfirmedTransfer", "SolanaRpcClient", "TokenPriceFeed"]
