"""SQLAlchemy ORM models."""
import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from settlement_server.infrastructure.database.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class GameConfig(Base):
    __tablename__ = "game_configs"

    game_id = Column(String(50), primary_key=True)
    name = Column(String(100), nullable=False)
    description = Column(String(255))
    active = Column(Boolean, nullable=False, default=True)
    lives_config = Column(JSON, nullable=False, default=dict)
    scoring_rules = Column(JSON, nullable=False, default=dict)
    payment_config = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class LivesAccount(Base):
    __tablename__ = "lives_accounts"
    __table_args__ = (
        CheckConstraint("free_today >= 0", name="ck_lives_free_non_negative"),
        CheckConstraint("bonus_today >= 0", name="ck_lives_bonus_non_negative"),
        CheckConstraint("paid_bank >= 0", name="ck_lives_paid_non_negative"),
    )

    wallet = Column(String(64), primary_key=True)
    free_today = Column(Integer, nullable=False, default=0)
    bonus_today = Column(Integer, nullable=False, default=0)
    paid_bank = Column(Integer, nullable=False, default=0)
    last_reset_at = Column(Date, nullable=False)
    last_claim_at = Column(Date)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class RoundRecord(Base):
    __tablename__ = "round_records"
    __table_args__ = (
        UniqueConstraint("wallet", "game_id", "seed_hash", "moves_hash", name="uq_round_replay"),
        Index("ix_round_records_game_created", "game_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    game_id = Column(String(50), nullable=False)
    wallet = Column(String(64), nullable=False, index=True)
    score = Column(Integer, nullable=False)
    game_data = Column(JSON, nullable=False, default=dict)
    moves_hash = Column(String(64), nullable=False)
    seed_hash = Column(String(64), nullable=False)
    validated = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class UserGameStats(Base):
    __tablename__ = "user_game_stats"

    wallet = Column(String(64), primary_key=True)
    game_id = Column(String(50), primary_key=True)
    games_played = Column(Integer, nullable=False, default=0)
    high_score = Column(Integer, nullable=False, default=0)
    total_score = Column(Integer, nullable=False, default=0)
    last_played_at = Column(DateTime(timezone=True))


class PaymentRecord(Base):
    __tablename__ = "payment_records"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    wallet = Column(String(64), nullable=False, index=True)
    signature = Column(String(128), nullable=False, unique=True)
    amount = Column(Numeric(30, 9), nullable=False)
    token = Column(String(20), nullable=False)
    lives_bought = Column(Integer, nullable=False)
    tier = Column(String(20), nullable=False)
    game_id = Column(String(50), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ProcessedPaymentMarker(Base):
    __tablename__ = "processed_payment_markers"

    signature = Column(String(128), primary_key=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
