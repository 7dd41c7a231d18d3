from decimal import Decimal

import pytest

from settlement_server.infrastructure.chain import ChainError
from settlement_server.modules.games import GameConfigService, GameNotFoundError
from settlement_server.modules.lives import DailyClaimService, LivesLedger, RateLimitExceededError


@pytest.fixture()
def claim_service_for(container):
    def build(session) -> DailyClaimService:
        return DailyClaimService(
            session=session,
            games=GameConfigService.with_session(session, container.settings),
            ledger=LivesLedger.with_session(session, container.clock),
            limiter=container.limiter,
            bonus=container.bonus_calculator(),
            events=container.events,
        )

    return build


async def _claim(session_factory, claim_service_for, wallet="claimer", game_id="tetris", ip="10.0.0.1"):
    async with session_factory() as session:
        return await claim_service_for(session).claim(
            wallet=wallet, game_id=game_id, ip=ip, user_agent="pytest", device_id="device-1"
        )


async def test_claim_grants_free_life_and_token_bonus(session_factory, claim_service_for, chain, events, games):
    chain.balances["claimer"] = Decimal("120000")

    outcome = await _claim(session_factory, claim_service_for)

    assert outcome.balance.free_today == 1
    assert outcome.bonus_lives == 2
    assert outcome.balance.total == 3
    assert events.names() == ["rewards.daily_claimed"]
    assert events.payloads("rewards.daily_claimed")[0]["bonus"] == 2


async def test_failed_balance_lookup_degrades_to_no_bonus(session_factory, claim_service_for, chain, games):
    chain.balance_error = ChainError("rpc down")

    outcome = await _claim(session_factory, claim_service_for)

    assert outcome.bonus_lives == 0
    assert outcome.balance.free_today == 1


async def test_slow_balance_lookup_times_out(session_factory, claim_service_for, chain, games):
    chain.balances["claimer"] = Decimal("500000")
    chain.balance_delay = 1.0

    outcome = await _claim(session_factory, claim_service_for)

    assert outcome.bonus_lives == 0
    assert outcome.token_balance == Decimal(0)


async def test_claim_attempts_are_rate_limited(session_factory, claim_service_for, games):
    for _ in range(3):
        await _claim(session_factory, claim_service_for)
    with pytest.raises(RateLimitExceededError):
        await _claim(session_factory, claim_service_for)

    # another device/ip pair has its own window
    outcome = await _claim(session_factory, claim_service_for, ip="10.0.0.2")
    assert outcome.balance.free_today == 1


async def test_claim_for_unknown_game(session_factory, claim_service_for, games):
    with pytest.raises(GameNotFoundError):
        await _claim(session_factory, claim_service_for, game_id="missing")
