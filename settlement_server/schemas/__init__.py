"""Pydantic schemas used across the HTTP layer (camelCase on the wire)."""
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MoveSchema(BaseModel):
    type: str = Field(..., min_length=1)
    timestamp: float
    direction: Optional[str] = None
    data: Any = None


class RoundEndRequest(CamelModel):
    wallet: str = Field(..., min_length=1, max_length=64)
    moves: list[MoveSchema]
    seed: str = Field(..., min_length=1)
    game_id: Optional[str] = None


class RoundEndResponse(CamelModel):
    status: str = "success"
    score: int
    play_id: str
    seed_hash: str
    game_data: dict[str, Any]
    remaining_lives: int
    game_id: str


class ClaimDailyRequest(CamelModel):
    wallet: str = Field(..., min_length=1, max_length=64)
    device_id: str = Field(..., min_length=1, max_length=128)
    ip: str = Field(..., min_length=1, max_length=64)
    game_id: Optional[str] = None


class LivesResponse(BaseModel):
    free: int
    bonus: int
    paid_bank: int
    total: int


class BuyLifeRequest(CamelModel):
    wallet: str = Field(..., min_length=1, max_length=64)
    game_id: Optional[str] = None


class BuyLifeResponse(CamelModel):
    pay_addr: str
    game_id: str
    price_in_token: dict[str, int]
    price_usd: dict[str, Decimal] = Field(..., alias="priceUSD")
    lives_per_tier: dict[str, int]
    token_price_usd: Decimal
    expires_at: int
    remaining_paid_lives: int
    payment_enabled: bool = True


class TempAddressResponse(CamelModel):
    address: str
    wallet: str
    nonce: int
    game_id: str
    pricing: dict[str, Any]
    timestamp: int
    expires_at: int


class PaymentWebhookRequest(BaseModel):
    signature: str = Field(..., min_length=1, max_length=128)
    recipient: str = Field(..., min_length=1, max_length=64)
    amount: Decimal = Field(..., gt=0)
    token: str = Field(..., min_length=1)
    timestamp: Optional[int] = None


class SettlementResponse(CamelModel):
    status: str
    signature: str
    lives_bought: int = 0
    tier: Optional[str] = None
    payment_id: Optional[str] = None


class ConfirmAddressResponse(BaseModel):
    settled: list[SettlementResponse]


class LeaderboardEntrySchema(CamelModel):
    rank: int
    wallet: str
    score: int
    games_played: int


class LeaderboardResponse(CamelModel):
    game_id: str
    period: str
    entries: list[LeaderboardEntrySchema]


class PlayerStatsSchema(CamelModel):
    game_id: str
    games_played: int
    high_score: int
    total_score: int
    last_played_at: Optional[datetime] = None


class PlayerStatsResponse(BaseModel):
    wallet: str
    stats: list[PlayerStatsSchema]


class MaintenanceResponse(CamelModel):
    accounts_reset: int
    markers_purged: int


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
